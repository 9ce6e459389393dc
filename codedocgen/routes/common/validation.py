"""
Validation utilities for route handlers.

Provides decorators for automatic request validation using Pydantic models.
"""

import logging
from functools import wraps
from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError
from quart import request

from codedocgen.routes.common.response import APIResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _format_errors(error: ValidationError) -> list:
    return [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def validate_json(model: Type[T]):
    """
    Decorator to validate JSON request body against Pydantic model.

    The validated model is passed to the handler as the ``data`` keyword
    argument.

    Example:
        >>> @validate_json(SubmitRepositoryRequest)
        >>> async def submit(data: SubmitRepositoryRequest):
        >>>     ...
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            json_data = await request.get_json(silent=True)

            if json_data is None:
                return APIResponse.error(
                    "Request body required",
                    400,
                    details={"expected": "application/json"},
                )
            if not isinstance(json_data, dict):
                return APIResponse.error("Request body must be a JSON object", 400)

            try:
                validated = model(**json_data)
            except ValidationError as e:
                errors = _format_errors(e)
                logger.warning(f"Validation error in {func.__name__}: {errors}")
                return APIResponse.error(
                    "Validation failed", 400, details={"errors": errors}
                )

            return await func(*args, data=validated, **kwargs)

        return wrapper

    return decorator
