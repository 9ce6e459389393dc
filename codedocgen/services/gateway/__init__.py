"""Remote Analysis Gateway client."""

from codedocgen.services.gateway.client import (
    ENTITY_DIAGRAM_TYPES,
    NO_RESPONSE_MESSAGE,
    AnalysisGatewayClient,
)

__all__ = ["AnalysisGatewayClient", "ENTITY_DIAGRAM_TYPES", "NO_RESPONSE_MESSAGE"]
