"""
Error taxonomy for the dashboard backend.

Every failure that reaches the user is one of four kinds:

- ``validation``: bad input caught before any Gateway call
- ``transport``: no response was received from the Gateway
- ``application``: the Gateway answered with an explicit failure
- ``partial_enrichment``: an optional later stage failed after earlier
  stages had already succeeded
"""

from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base class for all user-visible dashboard failures."""

    kind = "error"

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "stage": self.stage, "message": self.message}


class ValidationError(DashboardError):
    """Input rejected locally; no network call was made."""

    kind = "validation"


class TransportError(DashboardError):
    """The Gateway could not be reached or did not respond."""

    kind = "transport"


class ApplicationError(DashboardError):
    """The Gateway responded, but reported a failure."""

    kind = "application"

    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, stage)
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.status_code is not None:
            data["status_code"] = self.status_code
        return data


class PartialEnrichmentError(DashboardError):
    """An optional stage failed; earlier results are still valid."""

    kind = "partial_enrichment"


class IllegalTransitionError(RuntimeError):
    """Raised when the workflow state machine is asked for a transition it does not allow."""
