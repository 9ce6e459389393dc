"""
Session routes.

Starts analysis workflows and exposes the session state, both as a snapshot
and as a server-sent-events stream of every transition.
"""

import asyncio
import json
import logging
from datetime import timedelta

from quart import Blueprint, Response, request
from quart_rate_limiter import rate_limit

from codedocgen.common.config.config import SUBMIT_RATE_LIMIT_PER_MINUTE
from codedocgen.models.request_models import SubmitRepositoryRequest
from codedocgen.routes.common.response import APIResponse
from codedocgen.routes.common.validation import validate_json
from codedocgen.services.service_factory import get_service_factory
from codedocgen.services.session.state import SessionState

logger = logging.getLogger(__name__)

session_bp = Blueprint("session", __name__)

HEARTBEAT_SECONDS = 15


async def _rate_limit_key() -> str:
    """Generate rate limit key (IP-based)."""
    return request.remote_addr or "unknown"


@session_bp.route("/submit", methods=["POST"])
@rate_limit(SUBMIT_RATE_LIMIT_PER_MINUTE, timedelta(minutes=1), key_function=_rate_limit_key)
@validate_json(SubmitRepositoryRequest)
async def submit_repository(data: SubmitRepositoryRequest):
    """
    Start a workflow for a repository URL.

    Any workflow still in flight is superseded. The workflow runs in the
    background; poll ``GET /session`` or follow ``GET /session/events``.
    """
    controller = get_service_factory().session_controller
    controller.start(data.repo_url, data.username, data.password)
    logger.info(f"Accepted submission for {data.repo_url} as generation {controller.generation}")
    return APIResponse.success(
        {"generation": controller.generation, "stage": controller.state.stage.value},
        202,
    )


@session_bp.route("", methods=["GET"])
async def get_session():
    """Current session state: stage, snapshot, messages, error and warning."""
    controller = get_service_factory().session_controller
    return APIResponse.success(controller.state.to_api_response())


def _format_event(state: SessionState, event_id: int) -> str:
    return (
        f"id: {event_id}\n"
        f"event: state\n"
        f"data: {json.dumps(state.to_api_response())}\n\n"
    )


@session_bp.route("/events", methods=["GET"])
async def stream_session_events() -> Response:
    """Stream every session state emission as an SSE ``state`` event."""
    controller = get_service_factory().session_controller
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = controller.subscribe(queue.put_nowait)

    async def event_generator():
        event_id = 0
        try:
            event_id += 1
            yield _format_event(controller.state, event_id)
            while True:
                try:
                    state = await asyncio.wait_for(queue.get(), timeout=HEARTBEAT_SECONDS)
                except asyncio.TimeoutError:
                    yield ": heartbeat\n\n"
                    continue
                event_id += 1
                yield _format_event(state, event_id)
        finally:
            unsubscribe()
            logger.info(f"Session event stream closed after {event_id} event(s)")

    return Response(
        event_generator(),
        mimetype="text/event-stream",
        headers={
            "Cache-Control": "no-cache, no-transform",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )
