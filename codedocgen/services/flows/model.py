"""Call-flow tree model backing the flow viewer."""

import logging
from typing import Any, Dict, List, Optional, Set

from codedocgen.models.flows import CallFlowEntry
from codedocgen.services.flows.tree import flow_to_rows, render_flow_entry
from codedocgen.services.views.base import ArtifactView

logger = logging.getLogger(__name__)


class FlowTreeModel(ArtifactView):
    """Endpoint call-flow traces for one repository plus their expand/collapse state.

    Expansion is tracked per entry index and defaults to collapsed. A refetch
    keeps it for indices that still exist; switching to another repository
    starts over.
    """

    name = "flows"
    requires_endpoints = True

    def __init__(self, gateway, max_depth: Optional[int] = None):
        super().__init__(gateway)
        self.max_depth = max_depth
        self._expanded: Set[int] = set()

    async def _fetch(self, repo_name: str) -> Any:
        return await self.gateway.get_flows(repo_name)

    def _transform(self, payload: Any) -> List[CallFlowEntry]:
        entries = [
            CallFlowEntry.from_dict(item)
            for item in (payload.get("flows") or [])
            if isinstance(item, dict)
        ]
        logger.info(f"Parsed {len(entries)} call-flow entries")
        return entries

    def _on_clear(self) -> None:
        self._expanded = set()

    def _on_loaded(self) -> None:
        # A refetch may return fewer entries
        self._expanded &= set(range(len(self.entries)))

    @property
    def entries(self) -> List[CallFlowEntry]:
        return self.data or []

    def is_expanded(self, index: int) -> bool:
        return index in self._expanded

    @property
    def any_expanded(self) -> bool:
        return bool(self._expanded)

    def toggle(self, index: int) -> bool:
        """Flip one entry; returns its new expanded state."""
        if not 0 <= index < len(self.entries):
            raise IndexError(f"No call-flow entry at index {index}")
        if index in self._expanded:
            self._expanded.discard(index)
            return False
        self._expanded.add(index)
        return True

    def expand_all(self) -> None:
        self._expanded = set(range(len(self.entries)))

    def collapse_all(self) -> None:
        self._expanded = set()

    def toggle_all(self) -> bool:
        """Collapse everything if anything is expanded, otherwise expand everything."""
        if self.any_expanded:
            self.collapse_all()
            return False
        self.expand_all()
        return True

    def render(self, index: int) -> List[str]:
        return render_flow_entry(self.entries[index], max_depth=self.max_depth)

    def _data_for_api(self) -> Any:
        entries: List[Dict[str, Any]] = []
        for index, entry in enumerate(self.entries):
            item: Dict[str, Any] = {
                "index": index,
                "http_method": entry.http_method,
                "endpoint": entry.endpoint,
                "controller": entry.controller,
                "expanded": self.is_expanded(index),
            }
            if item["expanded"]:
                item["rows"] = flow_to_rows(entry, max_depth=self.max_depth)
                item["lines"] = self.render(index)
            entries.append(item)
        return {"any_expanded": self.any_expanded, "flows": entries}
