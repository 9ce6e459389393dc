"""
Call-flow routes.

Expose the flow tree model and its expand/collapse controls. None of the
toggles refetch data.
"""

import logging

from quart import Blueprint

from codedocgen.routes.common.response import APIResponse
from codedocgen.services.service_factory import get_service_factory

logger = logging.getLogger(__name__)

flows_bp = Blueprint("flows", __name__)


def _flow_state():
    return APIResponse.success(get_service_factory().flow_model.to_api_response())


@flows_bp.route("", methods=["GET"])
async def get_flows():
    """Flow entries with rendered trees for the expanded ones."""
    return _flow_state()


@flows_bp.route("/refresh", methods=["POST"])
async def refresh_flows():
    """Refetch the flows for the session's repository."""
    factory = get_service_factory()
    repo_name = factory.session_controller.state.snapshot.repo_name
    if not repo_name:
        return APIResponse.conflict("No repository has been analyzed yet")
    logger.info(f"Refetching call flows for {repo_name}")
    await factory.flow_model.refresh(repo_name, force=True)
    return _flow_state()


@flows_bp.route("/<int:index>/toggle", methods=["POST"])
async def toggle_flow(index: int):
    try:
        get_service_factory().flow_model.toggle(index)
    except IndexError:
        return APIResponse.not_found(f"Flow entry {index}")
    return _flow_state()


@flows_bp.route("/expand-all", methods=["POST"])
async def expand_all_flows():
    get_service_factory().flow_model.expand_all()
    return _flow_state()


@flows_bp.route("/collapse-all", methods=["POST"])
async def collapse_all_flows():
    get_service_factory().flow_model.collapse_all()
    return _flow_state()


@flows_bp.route("/toggle-all", methods=["POST"])
async def toggle_all_flows():
    get_service_factory().flow_model.toggle_all()
    return _flow_state()
