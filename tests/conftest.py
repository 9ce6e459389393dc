"""Pytest configuration for tests.

Sets up Python path and shared fixtures for all tests.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to Python path so imports work correctly
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from codedocgen.services.service_factory import get_service_factory  # noqa: E402

SPRING_BOOT_ANALYSIS = {
    "status": "success",
    "project_type": "Spring Boot",
    "build_system": "Maven",
    "is_spring_boot": True,
    "is_bootable": True,
    "has_maven": True,
    "has_gradle": False,
    "message": "Spring Boot project detected",
}

ORDER_ENDPOINTS = {
    "status": "success",
    "message": "Found 2 endpoints",
    "endpoints": [
        {
            "controller": "OrderController",
            "method": "listOrders",
            "http_method": "GET",
            "path": "/orders",
        },
        {
            "controller": "OrderController",
            "method": "createOrder",
            "http_method": "POST",
            "path": "/orders",
        },
    ],
}


def build_gateway_mock() -> MagicMock:
    """Gateway double whose stages succeed for the acme/shop example."""
    gateway = MagicMock()
    gateway.submit_repo = AsyncMock(return_value={"message": "Repository details received"})
    gateway.clone_repo = AsyncMock(return_value={"status": "success", "repo_name": "shop-7f3a"})
    gateway.analyze_repo = AsyncMock(return_value=dict(SPRING_BOOT_ANALYSIS))
    gateway.get_endpoints = AsyncMock(return_value=dict(ORDER_ENDPOINTS))
    gateway.get_flows = AsyncMock(return_value={"status": "success", "flows": []})
    gateway.get_entities = AsyncMock(return_value={"entities": {}})
    gateway.get_schema_overview = AsyncMock(
        return_value={"status": "success", "tables": {}, "entities": {}}
    )
    gateway.get_swagger = AsyncMock(return_value={"openapi": "3.0.1"})
    gateway.get_features = AsyncMock(return_value={"status": "success", "feature_files": []})
    gateway.get_entity_diagram = AsyncMock(
        return_value={"status": "success", "diagram_url": "/d/class.png", "puml_source": "@startuml"}
    )
    gateway.get_use_case_diagram = AsyncMock(
        return_value={"status": "success", "diagram_url": "/d/uc.png", "puml_source": "@startuml"}
    )
    gateway.get_interaction_diagram = AsyncMock(
        return_value={"status": "success", "diagram_url": "/d/seq.png", "puml_source": "@startuml"}
    )
    gateway.get_markdown_export = AsyncMock(return_value="# Shop API\n")
    gateway.publish_to_confluence = AsyncMock(
        return_value={"status": "success", "message": "Published"}
    )
    gateway.close = AsyncMock()
    return gateway


@pytest.fixture
def gateway():
    return build_gateway_mock()


@pytest.fixture
def service_factory(gateway):
    """Global service factory wired to the gateway double."""
    factory = get_service_factory()
    factory.clear_cache()
    factory._gateway = gateway
    yield factory
    factory.clear_cache()
