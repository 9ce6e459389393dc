"""
Explicit subscriptions between the workflow controller and its readers.

Readers come in two flavours:

- state listeners receive a copy of the session state on every emission
- repo-name dependents declare that they load data keyed by ``repo_name``
  and are refreshed by the controller when it becomes available
"""

import asyncio
import logging
from typing import Callable, List, Optional, Protocol, Set

from codedocgen.services.session.state import SessionState

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class RepoNameDependent(Protocol):
    """A reader whose data is fetched independently by ``repo_name``."""

    #: Only refresh once the snapshot holds an endpoint list.
    requires_endpoints: bool

    async def refresh(self, repo_name: str) -> None: ...

    def clear(self) -> None: ...


class StateListeners:
    def __init__(self):
        self._listeners: List[StateListener] = []

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, state: SessionState) -> None:
        for listener in list(self._listeners):
            try:
                listener(state.copy())
            except Exception as e:
                logger.exception(f"Session state listener {listener!r} failed: {e}")


class RepoNameDependents:
    """Registry of repo-name dependents and their in-flight refresh tasks."""

    def __init__(self):
        self._dependents: List[RepoNameDependent] = []
        self._tasks: Set[asyncio.Task] = set()

    def register(self, dependent: RepoNameDependent) -> None:
        if dependent not in self._dependents:
            self._dependents.append(dependent)

    def __len__(self) -> int:
        return len(self._dependents)

    def clear_all(self) -> None:
        for dependent in self._dependents:
            dependent.clear()

    def notify(self, repo_name: str, *, endpoints_ready: bool) -> List[asyncio.Task]:
        """Start a concurrent refresh for each dependent whose trigger is met.

        Dependents that only need ``repo_name`` are refreshed when
        ``endpoints_ready`` is False; those that need endpoints when it is True.
        """
        started = []
        for dependent in self._dependents:
            if dependent.requires_endpoints != endpoints_ready:
                continue
            task = asyncio.create_task(self._run_refresh(dependent, repo_name))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            started.append(task)
        if started:
            logger.info(
                f"Refreshing {len(started)} dependent view(s) for {repo_name} "
                f"(endpoints_ready={endpoints_ready})"
            )
        return started

    async def _run_refresh(self, dependent: RepoNameDependent, repo_name: str) -> None:
        try:
            await dependent.refresh(repo_name)
        except Exception as e:
            # Views record their own errors; anything escaping is a bug.
            logger.exception(f"Refresh of {dependent!r} for {repo_name} failed: {e}")

    async def wait_idle(self, timeout: Optional[float] = None) -> None:
        """Wait for every in-flight refresh task to finish."""
        if self._tasks:
            await asyncio.wait(set(self._tasks), timeout=timeout)
