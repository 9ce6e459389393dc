"""
Centralized error handling.

Maps the dashboard error taxonomy onto HTTP responses so that the kind of
failure (validation, transport, application) stays visible to the client.
"""

import logging

from pydantic import ValidationError as SchemaValidationError
from quart import Quart
from werkzeug.exceptions import HTTPException

from codedocgen.common.exception.exceptions import (
    ApplicationError,
    TransportError,
    ValidationError,
)
from codedocgen.routes.common.response import APIResponse

logger = logging.getLogger(__name__)


def register_error_handlers(app: Quart) -> None:
    """
    Register centralized error handlers for the application.

    Handles:
    - pydantic ValidationError -> 400 Bad Request
    - ValidationError -> 400 Bad Request
    - ApplicationError -> 502 Bad Gateway
    - TransportError -> 503 Service Unavailable
    - HTTPException (Werkzeug, including 429 from the rate limiter) -> its own status
    - 404 / 405 -> standardized bodies
    - Exception (Generic) -> 500 Internal Server Error
    """

    @app.errorhandler(SchemaValidationError)
    async def handle_schema_validation_error(error: SchemaValidationError):
        errors = []
        for err in error.errors():
            field = " -> ".join(str(loc) for loc in err["loc"])
            errors.append({"field": field, "message": err["msg"], "type": err["type"]})

        logger.warning(f"Validation error: {errors}")
        return APIResponse.error("Validation failed", 400, details={"errors": errors})

    @app.errorhandler(ValidationError)
    async def handle_validation_error(error: ValidationError):
        logger.warning(f"Rejected input: {error.message}")
        return APIResponse.from_dashboard_error(error, 400)

    @app.errorhandler(ApplicationError)
    async def handle_application_error(error: ApplicationError):
        logger.warning(f"Gateway reported failure at {error.stage}: {error.message}")
        return APIResponse.from_dashboard_error(error, 502)

    @app.errorhandler(TransportError)
    async def handle_transport_error(error: TransportError):
        logger.error(f"Gateway unreachable at {error.stage}: {error.message}")
        return APIResponse.from_dashboard_error(error, 503)

    @app.errorhandler(HTTPException)
    async def handle_http_exception(error: HTTPException):
        logger.info(f"HTTP exception: {error.code} - {error.description}")
        return APIResponse.error(error.description or error.name, error.code, error_code=error.name)

    @app.errorhandler(404)
    async def handle_not_found(error):
        return APIResponse.not_found("Endpoint")

    @app.errorhandler(405)
    async def handle_method_not_allowed(error):
        return APIResponse.error("Method not allowed", 405)

    @app.errorhandler(Exception)
    async def handle_generic_exception(error: Exception):
        """
        Handle all uncaught exceptions.

        Logs full stack trace for debugging.
        """
        logger.exception(f"Unhandled exception: {error}")
        return APIResponse.internal_error("An unexpected error occurred")
