"""Async client for the Remote Analysis Gateway with a shared connection pool."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from codedocgen.common.config.config import (
    GATEWAY_API_URL,
    GATEWAY_CONNECT_TIMEOUT_SECONDS,
    GATEWAY_TIMEOUT_SECONDS,
)
from codedocgen.common.exception.exceptions import ApplicationError, TransportError

logger = logging.getLogger(__name__)

NO_RESPONSE_MESSAGE = "No response from server. Is the backend running?"

ENTITY_DIAGRAM_TYPES = ("class", "er")


class AnalysisGatewayClient:
    """Client for the analysis service.

    Every operation returns the decoded JSON payload or raises:

    - ``TransportError`` when no response was received
    - ``ApplicationError`` when the Gateway answered with a non-2xx status,
      a body that is not JSON, or ``status != "success"``
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or GATEWAY_API_URL).rstrip("/")
        self._client = http_client
        self._config_lock = asyncio.Lock()

    async def _ensure_client_initialized(self) -> httpx.AsyncClient:
        if self._client is None:
            async with self._config_lock:
                if self._client is None:  # Double-check after acquiring lock
                    self._client = httpx.AsyncClient(
                        base_url=self.base_url,
                        timeout=httpx.Timeout(
                            GATEWAY_TIMEOUT_SECONDS,
                            connect=GATEWAY_CONNECT_TIMEOUT_SECONDS,
                        ),
                        headers={"Content-Type": "application/json"},
                    )
                    logger.info(f"Initialized gateway client with base URL: {self.base_url}")
        return self._client

    async def request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        require_status: bool = False,
        expect_json: bool = True,
        **kwargs: Any,
    ) -> Any:
        """Send a request and classify the outcome.

        Args:
            method: HTTP method
            path: Path relative to the Gateway base URL
            operation: Operation name, used as the error ``stage``
            require_status: Treat a payload without ``status == "success"`` as failure.
                When False the status is only checked if the payload carries one.
            expect_json: Decode the body as JSON (otherwise return text)
            **kwargs: Passed to ``httpx.AsyncClient.request``
        """
        client = await self._ensure_client_initialized()

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Gateway {operation} request to {path} failed without response: {e}")
            raise TransportError(NO_RESPONSE_MESSAGE, stage=operation) from e

        if not response.is_success:
            message = self._extract_error_detail(response)
            logger.error(
                f"Gateway {operation} request to {path} failed "
                f"(status {response.status_code}): {message}"
            )
            raise ApplicationError(message, stage=operation, status_code=response.status_code)

        if not expect_json:
            logger.info(f"Gateway {operation} request to {path} successful")
            return response.text

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Gateway {operation} returned a body that is not JSON")
            raise ApplicationError(
                f"Malformed response from {operation}", stage=operation,
                status_code=response.status_code,
            ) from e

        self._check_status(payload, operation, require_status)
        logger.info(f"Gateway {operation} request to {path} successful")
        return payload

    @staticmethod
    def _extract_error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail") or body.get("message")
            if detail:
                return str(detail)
        return f"Gateway request failed with status {response.status_code}"

    @staticmethod
    def _check_status(payload: Any, operation: str, require_status: bool) -> None:
        if not isinstance(payload, dict):
            if require_status:
                raise ApplicationError(f"Malformed response from {operation}", stage=operation)
            return
        if "status" not in payload and not require_status:
            return
        if payload.get("status") != "success":
            message = payload.get("message") or "Unknown error"
            logger.warning(f"Gateway {operation} reported failure: {message}")
            raise ApplicationError(str(message), stage=operation)

    # Workflow stages

    async def submit_repo(self, repo_request: Dict[str, Any]) -> Dict[str, Any]:
        """Pre-flight notification; the acknowledgment carries only a message."""
        return await self.request(
            "POST", "/repo/submit-repo", operation="submit", json=repo_request
        )

    async def clone_repo(self, repo_request: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "POST", "/repo/clone", operation="clone", require_status=True, json=repo_request
        )

    async def analyze_repo(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/analyze/{repo_name}", operation="analyze", require_status=True
        )

    async def get_endpoints(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/endpoints/{repo_name}", operation="endpoints", require_status=True
        )

    # Read-only artifacts keyed by repo_name

    async def get_flows(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/flows/{repo_name}", operation="flows", require_status=True
        )

    async def get_entities(self, repo_name: str) -> Dict[str, Any]:
        return await self.request("GET", f"/repo/entities/{repo_name}", operation="entities")

    async def get_schema_overview(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/schema-overview/{repo_name}",
            operation="schema-overview", require_status=True,
        )

    async def get_swagger(self, repo_name: str) -> Dict[str, Any]:
        return await self.request("GET", f"/repo/swagger/{repo_name}", operation="swagger")

    async def get_features(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/features/{repo_name}", operation="features", require_status=True
        )

    async def get_entity_diagram(self, repo_name: str, diagram_type: str = "class") -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/diagrams/entities/{repo_name}",
            operation="diagrams", require_status=True,
            params={"diagram_type": diagram_type},
        )

    async def get_use_case_diagram(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/diagrams/use-cases/{repo_name}",
            operation="diagrams", require_status=True,
        )

    async def get_interaction_diagram(self, repo_name: str) -> Dict[str, Any]:
        return await self.request(
            "GET", f"/repo/diagrams/interaction/{repo_name}",
            operation="diagrams", require_status=True,
        )

    async def get_markdown_export(self, repo_name: str) -> str:
        return await self.request(
            "GET", f"/repo/export/markdown/{repo_name}",
            operation="export", expect_json=False,
        )

    async def publish_to_confluence(self, publish_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.request(
            "POST", "/repo/publish/confluence", operation="publish", json=publish_data
        )

    async def close(self):
        """Close the HTTP client and cleanup resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Gateway client closed")

    async def __aenter__(self):
        await self._ensure_client_initialized()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
