"""Shared route infrastructure: responses, validation and error handlers."""

from codedocgen.routes.common.error_handlers import register_error_handlers
from codedocgen.routes.common.response import APIResponse
from codedocgen.routes.common.validation import validate_json

__all__ = ["APIResponse", "register_error_handlers", "validate_json"]
