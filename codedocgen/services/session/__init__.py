"""Session workflow controller and its state model."""

from codedocgen.services.session.controller import (
    SessionWorkflowController,
    parse_repository_reference,
)
from codedocgen.services.session.state import SessionState, WorkflowStage
from codedocgen.services.session.subscriptions import RepoNameDependent, RepoNameDependents

__all__ = [
    "RepoNameDependent",
    "RepoNameDependents",
    "SessionState",
    "SessionWorkflowController",
    "WorkflowStage",
    "parse_repository_reference",
]
