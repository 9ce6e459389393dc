"""
Session workflow controller.

Turns one submitted repository URL into a project snapshot by running the
Gateway stages in order::

    submit -> clone -> analyze -> (endpoints, Spring Boot only)

Each workflow is tagged with a generation number. A new submission bumps
the generation and resets the session, and any response that arrives for
an older generation is dropped without touching the state.
"""

import asyncio
import logging
from typing import Callable, Optional

from pydantic import ValidationError as SchemaValidationError

from codedocgen.common.exception.exceptions import (
    ApplicationError,
    DashboardError,
    PartialEnrichmentError,
    TransportError,
    ValidationError,
)
from codedocgen.models.project import Endpoint, ProjectClassification, RepositoryReference
from codedocgen.services.gateway.client import AnalysisGatewayClient
from codedocgen.services.session.state import SessionState, WorkflowStage, check_transition
from codedocgen.services.session.subscriptions import (
    RepoNameDependent,
    RepoNameDependents,
    StateListener,
    StateListeners,
)

logger = logging.getLogger(__name__)


class _Superseded(Exception):
    """A newer submission took over while this workflow was awaiting the Gateway."""


def parse_repository_reference(
    url: Optional[str],
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> RepositoryReference:
    """Validate user input, raising ``ValidationError`` with a readable message."""
    try:
        return RepositoryReference(url=url or "", username=username, password=password)
    except SchemaValidationError as e:
        first = e.errors()[0]
        cause = first.get("ctx", {}).get("error")
        message = str(cause) if cause else first["msg"]
        raise ValidationError(message, stage=WorkflowStage.SUBMITTING.value) from e


class SessionWorkflowController:
    """Owns the session state and is its only writer."""

    def __init__(self, gateway: AnalysisGatewayClient):
        self.gateway = gateway
        self._state = SessionState()
        self._generation = 0
        self._listeners = StateListeners()
        self._dependents = RepoNameDependents()
        self._task: Optional[asyncio.Task] = None

    # Readers

    @property
    def state(self) -> SessionState:
        """A detached copy of the current session state."""
        return self._state.copy()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def current_task(self) -> Optional[asyncio.Task]:
        return self._task

    @property
    def dependents(self) -> RepoNameDependents:
        return self._dependents

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._listeners.subscribe(listener)

    def register_dependent(self, dependent: RepoNameDependent) -> None:
        self._dependents.register(dependent)

    # Workflow

    def start(
        self,
        repo_url: Optional[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> asyncio.Task:
        """Reset the session now and run the workflow in the background."""
        generation = self._reset()
        self._task = asyncio.create_task(self._execute(generation, repo_url, username, password))
        return self._task

    async def submit(
        self,
        repo_url: Optional[str],
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> SessionState:
        """Run a full workflow for ``repo_url`` and return the resulting state.

        Returns the state as of this workflow's last transition. If the workflow
        was superseded by a newer submission, the newer workflow's state is
        returned instead.
        """
        return await self._execute(self._reset(), repo_url, username, password)

    async def _execute(
        self,
        generation: int,
        repo_url: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> SessionState:
        try:
            await self._run(generation, repo_url, username, password)
        except _Superseded:
            logger.info(f"Workflow generation {generation} superseded; dropping late response")
        return self.state

    async def _run(
        self,
        generation: int,
        repo_url: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> None:
        try:
            reference = parse_repository_reference(repo_url, username, password)
        except ValidationError as e:
            logger.warning(f"Rejected repository submission: {e.message}")
            self._fail(generation, e)
            return

        self._transition(generation, WorkflowStage.SUBMITTING)
        repo_request = reference.to_request()

        # Stage 1: acknowledge
        try:
            ack = await self.gateway.submit_repo(repo_request)
        except (TransportError, ApplicationError) as e:
            self._ensure_current(generation)
            self._fail(generation, e, status="Failed to process repository.")
            return
        self._ensure_current(generation)
        self._state.message = f"Success: {ack.get('message', '')}" if isinstance(ack, dict) else "Success"

        # Stage 2: clone
        self._transition(generation, WorkflowStage.CLONING, status="Cloning repository...")
        try:
            clone = await self.gateway.clone_repo(repo_request)
        except ApplicationError as e:
            self._ensure_current(generation)
            self._fail(generation, e, status="Failed to clone repository.")
            return
        except TransportError as e:
            self._ensure_current(generation)
            self._fail(generation, e, status="Failed to process repository.")
            return
        self._ensure_current(generation)

        repo_name = clone.get("repo_name")
        if not repo_name:
            self._fail(
                generation,
                ApplicationError("Clone response did not include a repository name", stage="clone"),
                status="Failed to clone repository.",
            )
            return
        self._state.snapshot.repo_name = repo_name
        logger.info(f"Repository {reference.url} cloned as {repo_name}")

        # Stage 3: analyze
        self._transition(
            generation,
            WorkflowStage.ANALYZING,
            status="Repository cloned successfully! Analyzing project type...",
        )
        self._dependents.notify(repo_name, endpoints_ready=False)
        try:
            analysis = await self.gateway.analyze_repo(repo_name)
        except (TransportError, ApplicationError) as e:
            self._ensure_current(generation)
            self._fail(generation, e, prefix="Error analyzing project")
            return
        self._ensure_current(generation)

        try:
            classification = ProjectClassification.model_validate(analysis)
        except SchemaValidationError as e:
            self._fail(
                generation,
                ApplicationError(f"Malformed analysis result: {e}", stage="analyze"),
                prefix="Error analyzing project",
            )
            return
        self._state.snapshot.classification = classification

        if not classification.is_spring_boot:
            self._transition(generation, WorkflowStage.IDLE)
            return

        # Stage 4: endpoints (optional enrichment)
        self._transition(
            generation,
            WorkflowStage.PARSING_ENDPOINTS,
            status=f"{self._state.status} Parsing endpoints...",
        )
        try:
            result = await self.gateway.get_endpoints(repo_name)
            endpoints = [Endpoint.model_validate(item) for item in result.get("endpoints") or []]
        except (TransportError, ApplicationError) as e:
            self._ensure_current(generation)
            self._warn(generation, e)
            self._transition(generation, WorkflowStage.IDLE)
            return
        except SchemaValidationError as e:
            self._ensure_current(generation)
            self._warn(generation, ApplicationError(f"Malformed endpoint list: {e}", stage="endpoints"))
            self._transition(generation, WorkflowStage.IDLE)
            return
        self._ensure_current(generation)

        self._state.snapshot.endpoints = endpoints
        self._state.snapshot.endpoints_message = result.get("message")
        self._transition(generation, WorkflowStage.IDLE)
        self._dependents.notify(repo_name, endpoints_ready=True)

    # State mutation helpers; each one is a no-op for stale generations.

    def _reset(self) -> int:
        """Start a new generation with an empty session."""
        self._generation += 1
        self._state = SessionState(generation=self._generation)
        self._dependents.clear_all()
        logger.info(f"Starting workflow generation {self._generation}")
        self._emit()
        return self._generation

    def _ensure_current(self, generation: int) -> None:
        if generation != self._generation:
            raise _Superseded()

    def _transition(
        self,
        generation: int,
        stage: WorkflowStage,
        status: Optional[str] = None,
    ) -> None:
        self._ensure_current(generation)
        check_transition(self._state.stage, stage)
        logger.info(f"Workflow {generation}: {self._state.stage.value} -> {stage.value}")
        self._state.stage = stage
        if status is not None:
            self._state.status = status
        self._emit()

    def _fail(
        self,
        generation: int,
        error: DashboardError,
        status: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> None:
        self._ensure_current(generation)
        if prefix:
            error.message = f"{prefix}: {error.message}"
        if error.stage is None:
            error.stage = self._state.stage.value
        self._state.error = error
        logger.error(f"Workflow {generation} failed ({error.kind}) at {error.stage}: {error.message}")
        self._transition(generation, WorkflowStage.ERROR, status=status)

    def _warn(self, generation: int, cause: DashboardError) -> None:
        self._ensure_current(generation)
        warning = PartialEnrichmentError(
            f"Error parsing endpoints: {cause.message}", stage=WorkflowStage.PARSING_ENDPOINTS.value
        )
        warning.__cause__ = cause
        self._state.warning = warning
        logger.warning(f"Workflow {generation}: {warning.message} ({cause.kind})")

    def _emit(self) -> None:
        self._listeners.emit(self._state)
