"""
Response utilities for standardized API responses.

Provides consistent response formatting across all routes.
"""

from typing import Any, Tuple

from quart import Response, jsonify

from codedocgen.common.exception.exceptions import DashboardError


class APIResponse:
    """
    Standardized API response helper.

    Ensures consistent response format across all endpoints.
    """

    @staticmethod
    def success(data: Any, status: int = 200) -> Tuple[Response, int]:
        """
        Create a successful response.

        Args:
            data: Response data (dict, list, or serializable object)
            status: HTTP status code (default: 200)

        Returns:
            tuple: (Response object, status code)
        """
        return jsonify(data), status

    @staticmethod
    def error(
        message: str,
        status: int = 400,
        details: Any = None,
        error_code: str = None,
    ) -> Tuple[Response, int]:
        """
        Create an error response.

        Args:
            message: Error message
            status: HTTP status code (default: 400)
            details: Additional error details (optional)
            error_code: Error code for client-side handling (optional)

        Returns:
            tuple: (Response object, status code)

        Example:
            >>> return APIResponse.error("Invalid request", 400)
            >>> return APIResponse.error("Gateway unreachable", 503, error_code="transport")
        """
        error_data = {"error": message}
        if details is not None:
            error_data["details"] = details
        if error_code is not None:
            error_data["error_code"] = error_code
        return jsonify(error_data), status

    @staticmethod
    def from_dashboard_error(error: DashboardError, status: int) -> Tuple[Response, int]:
        """Error response that keeps the failure kind visible to the client."""
        return APIResponse.error(
            error.message, status, details=error.to_dict(), error_code=error.kind
        )

    @staticmethod
    def not_found(resource: str = "Resource") -> Tuple[Response, int]:
        """
        Create a 404 Not Found response.

        Args:
            resource: Name of the resource that was not found

        Returns:
            tuple: (Response object, 404)
        """
        return APIResponse.error(f"{resource} not found", 404)

    @staticmethod
    def conflict(message: str) -> Tuple[Response, int]:
        return APIResponse.error(message, 409)

    @staticmethod
    def internal_error(message: str = "Internal server error") -> Tuple[Response, int]:
        """
        Create a 500 Internal Server Error response.

        Args:
            message: Custom error message

        Returns:
            tuple: (Response object, 500)
        """
        return APIResponse.error(message, 500)
