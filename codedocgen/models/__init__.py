"""Data models for the dashboard backend."""

from codedocgen.models.flows import CallFlowEntry, CallNode, ClassType, MethodParameter
from codedocgen.models.project import (
    Endpoint,
    ProjectClassification,
    ProjectSnapshot,
    RepositoryReference,
)

__all__ = [
    "CallFlowEntry",
    "CallNode",
    "ClassType",
    "Endpoint",
    "MethodParameter",
    "ProjectClassification",
    "ProjectSnapshot",
    "RepositoryReference",
]
