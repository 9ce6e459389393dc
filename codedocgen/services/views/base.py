"""Shared loading logic for read-only views keyed by repository name."""

import logging
from typing import Any, Dict, Optional

from codedocgen.common.exception.exceptions import ApplicationError, DashboardError
from codedocgen.services.gateway.client import AnalysisGatewayClient

logger = logging.getLogger(__name__)


class ArtifactView:
    """Base class for data fetched independently by ``repo_name``.

    Each refresh takes a token; a response whose token is no longer the
    latest (because of a newer refresh or a ``clear``) is discarded.
    """

    name = "artifact"
    requires_endpoints = False

    def __init__(self, gateway: AnalysisGatewayClient):
        self.gateway = gateway
        self.repo_name: Optional[str] = None
        self.data: Any = None
        self.loading = False
        self.error: Optional[DashboardError] = None
        self._token = 0

    def __repr__(self) -> str:
        return f"<{type(self).__name__} repo_name={self.repo_name!r}>"

    def clear(self) -> None:
        self._token += 1
        self.repo_name = None
        self.data = None
        self.loading = False
        self.error = None
        self._on_clear()

    def _on_clear(self) -> None:
        """Hook for subclasses holding extra per-repository state."""

    def _on_loaded(self) -> None:
        """Hook run after fresh data has been accepted."""

    async def refresh(self, repo_name: str, force: bool = False) -> None:
        """Load data for ``repo_name`` unless it is already loaded."""
        if not force and repo_name == self.repo_name and (self.loading or self.data is not None):
            return

        if repo_name != self.repo_name:
            self._on_clear()
        self._token += 1
        token = self._token
        self.repo_name = repo_name
        self.loading = True
        self.error = None

        try:
            payload = await self._fetch(repo_name)
            try:
                data = self._transform(payload)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise ApplicationError(f"Malformed {self.name} response", stage=self.name) from e
        except DashboardError as e:
            if token != self._token:
                return
            logger.error(f"Failed to load {self.name} for {repo_name}: {e.message}")
            self.data = None
            self.error = e
            self.loading = False
            return

        if token != self._token:
            logger.info(f"Dropping stale {self.name} response for {repo_name}")
            return
        self.data = data
        self.loading = False
        self._on_loaded()

    async def _fetch(self, repo_name: str) -> Any:
        raise NotImplementedError

    def _transform(self, payload: Any) -> Any:
        return payload

    def to_api_response(self) -> Dict[str, Any]:
        return {
            "view": self.name,
            "repo_name": self.repo_name,
            "loading": self.loading,
            "error": self.error.to_dict() if self.error else None,
            "data": self._data_for_api(),
        }

    def _data_for_api(self) -> Any:
        return self.data
