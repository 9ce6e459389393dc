"""
Workflow stage enum, legal transitions and the session state object.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional

from codedocgen.common.exception.exceptions import DashboardError, IllegalTransitionError
from codedocgen.models.project import ProjectSnapshot


class WorkflowStage(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    CLONING = "cloning"
    ANALYZING = "analyzing"
    PARSING_ENDPOINTS = "parsing_endpoints"
    ERROR = "error"

    @property
    def is_active(self) -> bool:
        return self in _ACTIVE_STAGES


_ACTIVE_STAGES: FrozenSet[WorkflowStage] = frozenset(
    {
        WorkflowStage.SUBMITTING,
        WorkflowStage.CLONING,
        WorkflowStage.ANALYZING,
        WorkflowStage.PARSING_ENDPOINTS,
    }
)

# A new submission always restarts from IDLE, so ERROR only leads back there
# through a reset, never through a transition.
ALLOWED_TRANSITIONS: Dict[WorkflowStage, FrozenSet[WorkflowStage]] = {
    WorkflowStage.IDLE: frozenset({WorkflowStage.SUBMITTING, WorkflowStage.ERROR}),
    WorkflowStage.SUBMITTING: frozenset({WorkflowStage.CLONING, WorkflowStage.ERROR}),
    WorkflowStage.CLONING: frozenset({WorkflowStage.ANALYZING, WorkflowStage.ERROR}),
    WorkflowStage.ANALYZING: frozenset(
        {WorkflowStage.PARSING_ENDPOINTS, WorkflowStage.IDLE, WorkflowStage.ERROR}
    ),
    WorkflowStage.PARSING_ENDPOINTS: frozenset({WorkflowStage.IDLE}),
    WorkflowStage.ERROR: frozenset(),
}


def check_transition(current: WorkflowStage, target: WorkflowStage) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise IllegalTransitionError(
            f"Illegal workflow transition {current.value} -> {target.value}"
        )


@dataclass
class SessionState:
    """Everything the dashboard shows about the current submission."""

    generation: int = 0
    stage: WorkflowStage = WorkflowStage.IDLE
    snapshot: ProjectSnapshot = field(default_factory=ProjectSnapshot)
    message: str = ""
    status: str = ""
    error: Optional[DashboardError] = None
    warning: Optional[DashboardError] = None

    @property
    def is_busy(self) -> bool:
        return self.stage.is_active

    def copy(self) -> "SessionState":
        """Detached copy handed to readers."""
        return SessionState(
            generation=self.generation,
            stage=self.stage,
            snapshot=self.snapshot.model_copy(deep=True),
            message=self.message,
            status=self.status,
            error=self.error,
            warning=self.warning,
        )

    def to_api_response(self) -> Dict[str, Any]:
        return {
            "generation": self.generation,
            "stage": self.stage.value,
            "busy": self.is_busy,
            "message": self.message,
            "status": self.status,
            "error": self.error.to_dict() if self.error else None,
            "warning": self.warning.to_dict() if self.warning else None,
            "snapshot": self.snapshot.to_api_response(),
        }
