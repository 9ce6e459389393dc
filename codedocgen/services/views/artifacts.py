"""
Read-only artifact views: entities, feature files, OpenAPI document and diagrams.
"""

import logging
from typing import Any, Dict, List

from codedocgen.common.exception.exceptions import ValidationError
from codedocgen.services.gateway.client import ENTITY_DIAGRAM_TYPES
from codedocgen.services.views.base import ArtifactView

logger = logging.getLogger(__name__)


class EntitiesView(ArtifactView):
    """Entity models extracted from the repository."""

    name = "entities"

    async def _fetch(self, repo_name: str) -> Any:
        return await self.gateway.get_entities(repo_name)

    def _transform(self, payload: Any) -> Dict[str, Any]:
        entities = payload.get("entities") if isinstance(payload, dict) else None
        return entities or {}

    @property
    def entity_names(self) -> List[str]:
        return list((self.data or {}).keys())

    def _data_for_api(self) -> Any:
        if self.data is None:
            return None
        return {
            "entities": [
                {
                    "name": name,
                    "display_name": entity.get("business_name") or name,
                    "business_name": entity.get("business_name"),
                    "fields": entity.get("fields") or [],
                }
                for name, entity in self.data.items()
            ]
        }


class FeatureFilesView(ArtifactView):
    """Generated Gherkin feature files, one per controller."""

    name = "features"

    async def _fetch(self, repo_name: str) -> Any:
        return await self.gateway.get_features(repo_name)

    def _transform(self, payload: Any) -> List[Dict[str, Any]]:
        return list(payload.get("feature_files") or [])


class SwaggerView(ArtifactView):
    """Raw OpenAPI document for the repository."""

    name = "swagger"

    async def _fetch(self, repo_name: str) -> Any:
        return await self.gateway.get_swagger(repo_name)


DIAGRAM_TYPES = {
    "class": "Class Diagram",
    "er": "ER Diagram",
    "use-case": "Use-Case Diagram",
    "interaction": "Interaction Diagram",
}


class DiagramView(ArtifactView):
    """One rendered diagram at a time, chosen by ``diagram_type``."""

    name = "diagrams"

    def __init__(self, gateway, diagram_type: str = "class"):
        super().__init__(gateway)
        self.diagram_type = self._validate_type(diagram_type)

    @staticmethod
    def _validate_type(diagram_type: str) -> str:
        if diagram_type not in DIAGRAM_TYPES:
            raise ValidationError(
                f"Unknown diagram type '{diagram_type}'. "
                f"Expected one of: {', '.join(DIAGRAM_TYPES)}",
                stage="diagrams",
            )
        return diagram_type

    async def select(self, diagram_type: str) -> None:
        """Switch diagram type and reload it for the current repository."""
        diagram_type = self._validate_type(diagram_type)
        changed = diagram_type != self.diagram_type
        self.diagram_type = diagram_type
        if changed:
            logger.info(f"Diagram type switched to {diagram_type}")
        if self.repo_name and changed:
            await self.refresh(self.repo_name, force=True)

    async def _fetch(self, repo_name: str) -> Any:
        if self.diagram_type in ENTITY_DIAGRAM_TYPES:
            return await self.gateway.get_entity_diagram(repo_name, self.diagram_type)
        if self.diagram_type == "use-case":
            return await self.gateway.get_use_case_diagram(repo_name)
        return await self.gateway.get_interaction_diagram(repo_name)

    def _transform(self, payload: Any) -> Dict[str, Any]:
        return {
            "diagram_type": self.diagram_type,
            "diagram_url": payload.get("diagram_url"),
            "puml_source": payload.get("puml_source"),
        }

    def to_api_response(self) -> Dict[str, Any]:
        response = super().to_api_response()
        response["diagram_type"] = self.diagram_type
        response["diagram_types"] = [
            {"id": key, "name": label} for key, label in DIAGRAM_TYPES.items()
        ]
        return response
