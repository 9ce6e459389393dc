"""Dashboard services: Gateway client, session controller, flow model and views."""

from codedocgen.services.service_factory import ServiceFactory, get_service_factory

__all__ = ["ServiceFactory", "get_service_factory"]
