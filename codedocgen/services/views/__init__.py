"""Read-only views over artifacts fetched by repository name."""

from codedocgen.services.views.artifacts import (
    DIAGRAM_TYPES,
    DiagramView,
    EntitiesView,
    FeatureFilesView,
    SwaggerView,
)
from codedocgen.services.views.base import ArtifactView
from codedocgen.services.views.schema import SchemaExplorerView

__all__ = [
    "ArtifactView",
    "DIAGRAM_TYPES",
    "DiagramView",
    "EntitiesView",
    "FeatureFilesView",
    "SchemaExplorerView",
    "SwaggerView",
]
