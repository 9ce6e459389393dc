"""Dashboard error taxonomy."""

from codedocgen.common.exception.exceptions import (
    ApplicationError,
    DashboardError,
    IllegalTransitionError,
    PartialEnrichmentError,
    TransportError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "DashboardError",
    "IllegalTransitionError",
    "PartialEnrichmentError",
    "TransportError",
    "ValidationError",
]
