"""
Service Factory for centralized service initialization.

Creates the Gateway client, the session workflow controller and every view
that depends on the session's repository name, and wires the views into the
controller as repo-name dependents.
"""

import logging
from typing import List, Optional

from codedocgen.services.flows.model import FlowTreeModel
from codedocgen.services.gateway.client import AnalysisGatewayClient
from codedocgen.services.session.controller import SessionWorkflowController
from codedocgen.services.views import (
    ArtifactView,
    DiagramView,
    EntitiesView,
    FeatureFilesView,
    SchemaExplorerView,
    SwaggerView,
)

logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating and managing service instances.

    Implements singleton pattern so the dashboard has exactly one session
    controller and one set of views.
    """

    _instance: Optional["ServiceFactory"] = None

    # Service instances (lazy-loaded)
    _gateway: Optional[AnalysisGatewayClient] = None
    _session_controller: Optional[SessionWorkflowController] = None
    _flow_model: Optional[FlowTreeModel] = None
    _entities_view: Optional[EntitiesView] = None
    _schema_view: Optional[SchemaExplorerView] = None
    _diagram_view: Optional[DiagramView] = None
    _features_view: Optional[FeatureFilesView] = None
    _swagger_view: Optional[SwaggerView] = None

    def __new__(cls):
        """Ensure only one instance exists (Singleton pattern)."""
        if cls._instance is None:
            cls._instance = super(ServiceFactory, cls).__new__(cls)
            logger.debug("ServiceFactory instance created")
        return cls._instance

    @property
    def gateway(self) -> AnalysisGatewayClient:
        if self._gateway is None:
            self._gateway = AnalysisGatewayClient()
            logger.debug("AnalysisGatewayClient initialized")
        return self._gateway

    @property
    def flow_model(self) -> FlowTreeModel:
        if self._flow_model is None:
            self._flow_model = FlowTreeModel(self.gateway)
        return self._flow_model

    @property
    def entities_view(self) -> EntitiesView:
        if self._entities_view is None:
            self._entities_view = EntitiesView(self.gateway)
        return self._entities_view

    @property
    def schema_view(self) -> SchemaExplorerView:
        if self._schema_view is None:
            self._schema_view = SchemaExplorerView(self.gateway)
        return self._schema_view

    @property
    def diagram_view(self) -> DiagramView:
        if self._diagram_view is None:
            self._diagram_view = DiagramView(self.gateway)
        return self._diagram_view

    @property
    def features_view(self) -> FeatureFilesView:
        if self._features_view is None:
            self._features_view = FeatureFilesView(self.gateway)
        return self._features_view

    @property
    def swagger_view(self) -> SwaggerView:
        if self._swagger_view is None:
            self._swagger_view = SwaggerView(self.gateway)
        return self._swagger_view

    @property
    def views(self) -> List[ArtifactView]:
        return [
            self.entities_view,
            self.schema_view,
            self.diagram_view,
            self.features_view,
            self.swagger_view,
            self.flow_model,
        ]

    @property
    def session_controller(self) -> SessionWorkflowController:
        """
        Get the session controller with every view registered as a dependent.

        Returns:
            SessionWorkflowController: Dashboard session controller
        """
        if self._session_controller is None:
            controller = SessionWorkflowController(self.gateway)
            for view in self.views:
                controller.register_dependent(view)
            self._session_controller = controller
            logger.debug(f"SessionWorkflowController initialized with {len(self.views)} dependents")
        return self._session_controller

    def clear_cache(self):
        """Drop every cached instance (used by tests and on shutdown)."""
        self._gateway = None
        self._session_controller = None
        self._flow_model = None
        self._entities_view = None
        self._schema_view = None
        self._diagram_view = None
        self._features_view = None
        self._swagger_view = None
        logger.info("Service cache cleared")

    async def shutdown(self):
        if self._gateway is not None:
            await self._gateway.close()
        self.clear_cache()


_factory_instance: Optional[ServiceFactory] = None


def get_service_factory() -> ServiceFactory:
    """
    Get the global ServiceFactory instance.

    Returns:
        ServiceFactory: Global factory instance
    """
    global _factory_instance
    if _factory_instance is None:
        _factory_instance = ServiceFactory()
    return _factory_instance
