"""
Artifact view routes.

Read-only access to the data each view loaded for the session's repository,
plus the markdown export and Confluence publishing pass-throughs.
"""

import logging
from typing import Optional

from quart import Blueprint, Response, request

from codedocgen.models.request_models import PublishConfluenceRequest, SelectDiagramRequest
from codedocgen.routes.common.response import APIResponse
from codedocgen.routes.common.validation import validate_json
from codedocgen.services.service_factory import get_service_factory

logger = logging.getLogger(__name__)

views_bp = Blueprint("views", __name__)


def _current_repo_name() -> Optional[str]:
    return get_service_factory().session_controller.state.snapshot.repo_name


def _no_repository():
    return APIResponse.conflict("Please submit a repository first")


@views_bp.route("/views/entities", methods=["GET"])
async def get_entities():
    return APIResponse.success(get_service_factory().entities_view.to_api_response())


@views_bp.route("/views/features", methods=["GET"])
async def get_features():
    return APIResponse.success(get_service_factory().features_view.to_api_response())


@views_bp.route("/views/swagger", methods=["GET"])
async def get_swagger():
    return APIResponse.success(get_service_factory().swagger_view.to_api_response())


@views_bp.route("/views/schema", methods=["GET"])
async def get_schema():
    return APIResponse.success(get_service_factory().schema_view.to_api_response())


@views_bp.route("/views/schema/tables/<table_name>", methods=["GET"])
async def get_schema_table(table_name: str):
    """Select a table and return its details."""
    view = get_service_factory().schema_view
    try:
        view.select_table(table_name)
    except KeyError:
        return APIResponse.not_found(f"Table {table_name}")
    return APIResponse.success(view.table_details())


@views_bp.route("/views/schema/graph", methods=["GET"])
async def get_schema_graph():
    view = get_service_factory().schema_view
    return APIResponse.success({"format": "mermaid", "diagram": view.relationship_graph()})


@views_bp.route("/views/diagrams", methods=["GET"])
async def get_diagram():
    """Current diagram; ``?diagram_type=`` switches type first."""
    view = get_service_factory().diagram_view
    diagram_type = request.args.get("diagram_type")
    if diagram_type:
        await view.select(diagram_type)
    return APIResponse.success(view.to_api_response())


@views_bp.route("/views/diagrams", methods=["POST"])
@validate_json(SelectDiagramRequest)
async def select_diagram(data: SelectDiagramRequest):
    view = get_service_factory().diagram_view
    await view.select(data.diagram_type)
    return APIResponse.success(view.to_api_response())


@views_bp.route("/export/markdown", methods=["GET"])
async def export_markdown():
    """Markdown API documentation for the session's repository."""
    repo_name = _current_repo_name()
    if not repo_name:
        return _no_repository()
    markdown = await get_service_factory().gateway.get_markdown_export(repo_name)
    return Response(
        markdown,
        mimetype="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{repo_name}-api.md"'},
    )


@views_bp.route("/publish/confluence", methods=["POST"])
@validate_json(PublishConfluenceRequest)
async def publish_confluence(data: PublishConfluenceRequest):
    """Forward a publish request for the session's repository to the Gateway."""
    repo_name = _current_repo_name()
    if not repo_name:
        return _no_repository()
    publish_data = {**data.model_dump(), "repo_name": repo_name}
    result = await get_service_factory().gateway.publish_to_confluence(publish_data)
    logger.info(f"Published documentation for {repo_name} to Confluence")
    return APIResponse.success(result)
