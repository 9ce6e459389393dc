"""Tests for FlowTreeModel expand/collapse state and loading."""

import pytest

from codedocgen.common.exception.exceptions import ApplicationError
from codedocgen.services.flows import FlowTreeModel

FLOWS = {
    "status": "success",
    "flows": [
        {
            "http_method": "GET",
            "endpoint": "/orders",
            "controller": "OrderController",
            "flow": [
                {
                    "class_name": "OrderController",
                    "method": "listOrders",
                    "calls": [{"class_name": "OrderService", "method": "findAll"}],
                }
            ],
        },
        {
            "http_method": "POST",
            "endpoint": "/orders",
            "controller": "OrderController",
            "flow": [{"class_name": "OrderController", "method": "createOrder"}],
        },
        {
            "http_method": "DELETE",
            "endpoint": "/orders/{id}",
            "controller": "OrderController",
            "flow": [],
        },
    ],
}


@pytest.fixture
def flows_gateway(gateway):
    gateway.get_flows.return_value = FLOWS
    return gateway


class TestLoading:
    @pytest.mark.asyncio
    async def test_refresh_loads_entries_collapsed(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)

        await model.refresh("shop-7f3a")

        assert [e.http_method for e in model.entries] == ["GET", "POST", "DELETE"]
        assert model.any_expanded is False
        assert model.error is None
        assert model.loading is False
        flows_gateway.get_flows.assert_awaited_once_with("shop-7f3a")

    @pytest.mark.asyncio
    async def test_same_repository_is_not_refetched(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)

        await model.refresh("shop-7f3a")
        await model.refresh("shop-7f3a")

        assert flows_gateway.get_flows.await_count == 1

    @pytest.mark.asyncio
    async def test_failure_is_recorded_on_the_model(self, flows_gateway):
        flows_gateway.get_flows.side_effect = ApplicationError("No flows", stage="flows")
        model = FlowTreeModel(flows_gateway)

        await model.refresh("shop-7f3a")

        assert model.entries == []
        assert model.error.kind == "application"
        assert model.to_api_response()["error"]["message"] == "No flows"

    @pytest.mark.asyncio
    async def test_malformed_payload_is_recorded_and_retried(self, flows_gateway):
        flows_gateway.get_flows.return_value = {"status": "success", "flows": 5}
        model = FlowTreeModel(flows_gateway)

        await model.refresh("shop-7f3a")

        assert model.loading is False
        assert model.entries == []
        assert model.error.kind == "application"
        assert model.error.stage == "flows"

        flows_gateway.get_flows.return_value = FLOWS
        await model.refresh("shop-7f3a")

        assert flows_gateway.get_flows.await_count == 2
        assert len(model.entries) == 3
        assert model.error is None

    def test_flow_model_waits_for_endpoints(self, gateway):
        assert FlowTreeModel(gateway).requires_endpoints is True


class TestExpansion:
    @pytest.mark.asyncio
    async def test_toggle_flips_one_entry(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")

        assert model.toggle(1) is True
        assert model.is_expanded(1)
        assert not model.is_expanded(0)
        assert model.toggle(1) is False
        assert model.any_expanded is False

    @pytest.mark.asyncio
    async def test_toggle_out_of_range(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")

        with pytest.raises(IndexError):
            model.toggle(3)
        with pytest.raises(IndexError):
            model.toggle(-1)

    @pytest.mark.asyncio
    async def test_expand_and_collapse_all_are_idempotent(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")

        model.expand_all()
        model.expand_all()
        assert all(model.is_expanded(i) for i in range(3))

        model.collapse_all()
        model.collapse_all()
        assert model.any_expanded is False

    @pytest.mark.asyncio
    async def test_toggle_all(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")

        assert model.toggle_all() is True
        assert all(model.is_expanded(i) for i in range(3))

        model.collapse_all()
        model.toggle(2)
        assert model.toggle_all() is False
        assert model.any_expanded is False

    @pytest.mark.asyncio
    async def test_expansion_never_triggers_a_fetch(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")

        model.toggle(0)
        model.expand_all()
        model.toggle_all()
        model.to_api_response()

        assert flows_gateway.get_flows.await_count == 1

    @pytest.mark.asyncio
    async def test_forced_refetch_keeps_expansion(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")
        model.toggle(0)

        await model.refresh("shop-7f3a", force=True)

        assert model.is_expanded(0)

    @pytest.mark.asyncio
    async def test_shorter_refetch_drops_missing_indices(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")
        model.expand_all()

        flows_gateway.get_flows.return_value = {"status": "success", "flows": FLOWS["flows"][:1]}
        await model.refresh("shop-7f3a", force=True)

        assert model.is_expanded(0)
        assert not model.is_expanded(1)
        assert not model.is_expanded(2)
        assert model.to_api_response()["data"]["any_expanded"] is True
        assert model.toggle_all() is False
        assert model.any_expanded is False

    @pytest.mark.asyncio
    async def test_shorter_refetch_without_surviving_expansion(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")
        model.toggle(2)

        flows_gateway.get_flows.return_value = {"status": "success", "flows": FLOWS["flows"][:1]}
        await model.refresh("shop-7f3a", force=True)

        assert model.any_expanded is False
        assert model.toggle_all() is True
        assert model.is_expanded(0)

    @pytest.mark.asyncio
    async def test_new_repository_resets_expansion(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")
        model.expand_all()

        await model.refresh("billing-1b2c")

        assert model.any_expanded is False

    @pytest.mark.asyncio
    async def test_clear_resets_everything(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")
        model.expand_all()

        model.clear()

        assert model.entries == []
        assert model.repo_name is None
        assert model.any_expanded is False


class TestApiShape:
    @pytest.mark.asyncio
    async def test_only_expanded_entries_carry_rows(self, flows_gateway):
        model = FlowTreeModel(flows_gateway)
        await model.refresh("shop-7f3a")
        model.toggle(0)

        data = model.to_api_response()["data"]

        assert data["any_expanded"] is True
        first, second, _ = data["flows"]
        assert first["expanded"] is True
        assert [row["class_name"] for row in first["rows"]] == ["OrderController", "OrderService"]
        assert first["lines"][0] == "GET /orders"
        assert "rows" not in second
        assert second["expanded"] is False
