"""Tests for the session routes."""

import json

import pytest

from codedocgen.app import create_app
from codedocgen.common.config.config import SUBMIT_RATE_LIMIT_PER_MINUTE
from codedocgen.common.exception.exceptions import ApplicationError
from codedocgen.routes.session import _format_event
from codedocgen.services.session import SessionState, WorkflowStage

SHOP_URL = "https://github.com/acme/shop.git"


@pytest.fixture
def app(service_factory):
    """Create test application."""
    return create_app()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


async def wait_for_workflow(factory):
    controller = factory.session_controller
    if controller.current_task is not None:
        await controller.current_task
    await controller.dependents.wait_idle()


class TestSubmit:
    """POST /api/v1/session/submit"""

    @pytest.mark.asyncio
    async def test_submit_accepts_and_runs_workflow(self, client, service_factory):
        response = await client.post("/api/v1/session/submit", json={"repo_url": SHOP_URL})

        assert response.status_code == 202
        body = await response.get_json()
        assert body == {"generation": 1, "stage": "idle"}

        await wait_for_workflow(service_factory)
        response = await client.get("/api/v1/session")
        state = await response.get_json()

        assert response.status_code == 200
        assert state["stage"] == "idle"
        assert state["busy"] is False
        assert state["error"] is None
        assert state["snapshot"]["repo_name"] == "shop-7f3a"
        assert state["snapshot"]["endpoints_count"] == 2
        assert state["snapshot"]["controllers_count"] == 1
        assert state["snapshot"]["project_info"]["features_count"] is None

    @pytest.mark.asyncio
    async def test_submit_refreshes_dependent_views(self, client, service_factory, gateway):
        await client.post("/api/v1/session/submit", json={"repo_url": SHOP_URL})
        await wait_for_workflow(service_factory)

        gateway.get_entities.assert_awaited_once_with("shop-7f3a")
        gateway.get_schema_overview.assert_awaited_once_with("shop-7f3a")
        gateway.get_features.assert_awaited_once_with("shop-7f3a")
        gateway.get_swagger.assert_awaited_once_with("shop-7f3a")
        gateway.get_entity_diagram.assert_awaited_once_with("shop-7f3a", "class")
        gateway.get_flows.assert_awaited_once_with("shop-7f3a")

    @pytest.mark.asyncio
    async def test_invalid_url_ends_in_validation_error(self, client, service_factory, gateway):
        response = await client.post("/api/v1/session/submit", json={"repo_url": "not a url"})
        assert response.status_code == 202

        await wait_for_workflow(service_factory)
        state = await (await client.get("/api/v1/session")).get_json()

        assert state["stage"] == "error"
        assert state["error"]["kind"] == "validation"
        assert state["error"]["message"] == "Invalid Repository URL format."
        gateway.submit_repo.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_clone_failure_is_reported_as_application_error(
        self, client, service_factory, gateway
    ):
        gateway.clone_repo.side_effect = ApplicationError("Repository not found", stage="clone")

        await client.post("/api/v1/session/submit", json={"repo_url": SHOP_URL})
        await wait_for_workflow(service_factory)
        state = await (await client.get("/api/v1/session")).get_json()

        assert state["stage"] == "error"
        assert state["error"] == {
            "kind": "application",
            "stage": "clone",
            "message": "Repository not found",
        }
        assert state["snapshot"]["project_info"] is None

    @pytest.mark.asyncio
    async def test_missing_body(self, client):
        response = await client.post("/api/v1/session/submit")

        assert response.status_code == 400
        body = await response.get_json()
        assert body["error"] == "Request body required"

    @pytest.mark.asyncio
    async def test_non_object_body(self, client):
        response = await client.post("/api/v1/session/submit", json=["https://x"])

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_submit_is_rate_limited(self, client, service_factory):
        for _ in range(SUBMIT_RATE_LIMIT_PER_MINUTE):
            response = await client.post("/api/v1/session/submit", json={"repo_url": SHOP_URL})
            assert response.status_code == 202

        response = await client.post("/api/v1/session/submit", json={"repo_url": SHOP_URL})

        assert response.status_code == 429
        await wait_for_workflow(service_factory)


class TestSessionState:
    """GET /api/v1/session and /health"""

    @pytest.mark.asyncio
    async def test_initial_state(self, client):
        response = await client.get("/api/v1/session")
        state = await response.get_json()

        assert state["generation"] == 0
        assert state["stage"] == "idle"
        assert state["snapshot"]["repo_name"] is None
        assert state["snapshot"]["endpoints"] is None

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert await response.get_json() == {"status": "ok", "stage": "idle"}

    @pytest.mark.asyncio
    async def test_wrong_method_is_405(self, client):
        response = await client.delete("/health")

        assert response.status_code == 405
        assert (await response.get_json())["error"] == "Method not allowed"


class TestEventFormat:
    """Server-sent event framing."""

    def test_format_event(self):
        state = SessionState(generation=3, stage=WorkflowStage.CLONING, status="Cloning repository...")

        frame = _format_event(state, 7)

        lines = frame.split("\n")
        assert lines[0] == "id: 7"
        assert lines[1] == "event: state"
        assert lines[2].startswith("data: ")
        payload = json.loads(lines[2][len("data: "):])
        assert payload["generation"] == 3
        assert payload["stage"] == "cloning"
        assert payload["busy"] is True
        assert frame.endswith("\n\n")
