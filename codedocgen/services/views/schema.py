"""Schema explorer: database tables, their entities and relations."""

import logging
import re
from typing import Any, Dict, List, Optional

from codedocgen.services.views.base import ArtifactView

logger = logging.getLogger(__name__)

_MERMAID_ID = re.compile(r"[^A-Za-z0-9_]")


def _mermaid_id(name: str) -> str:
    return _MERMAID_ID.sub("_", name) or "_"


class SchemaExplorerView(ArtifactView):
    """Schema overview with a selected table.

    The first table is selected when data arrives; selection survives a
    refetch of the same repository as long as the table still exists.
    """

    name = "schema"

    def __init__(self, gateway):
        super().__init__(gateway)
        self.selected_table: Optional[str] = None

    async def _fetch(self, repo_name: str) -> Any:
        return await self.gateway.get_schema_overview(repo_name)

    def _transform(self, payload: Any) -> Dict[str, Any]:
        return {
            "tables": payload.get("tables") or {},
            "entities": payload.get("entities") or {},
        }

    def _on_loaded(self) -> None:
        if self.selected_table not in self.tables:
            self.selected_table = next(iter(self.tables), None)

    def _on_clear(self) -> None:
        self.selected_table = None

    @property
    def tables(self) -> Dict[str, Any]:
        return (self.data or {}).get("tables", {})

    @property
    def entities(self) -> Dict[str, Any]:
        return (self.data or {}).get("entities", {})

    def select_table(self, table_name: str) -> None:
        if table_name not in self.tables:
            raise KeyError(f"Unknown table '{table_name}'")
        self.selected_table = table_name
        logger.debug(f"Selected table {table_name} for {self.repo_name}")

    def table_details(self, table_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Table metadata joined with its entity's fields and column mappings."""
        name = table_name or self.selected_table
        if name is None or name not in self.tables:
            return None
        table = self.tables[name]
        entity_name = table.get("entity")
        entity = self.entities.get(entity_name) or {}
        column_mappings = entity.get("column_mappings") or {}
        return {
            "table": name,
            "entity": entity_name,
            "business_name": table.get("business_name"),
            "relations": list(table.get("relations") or []),
            "used_by": list(table.get("used_by") or []),
            "fields": [
                {
                    "name": field.get("name"),
                    "type": field.get("type"),
                    "column": column_mappings.get(field.get("name")),
                }
                for field in entity.get("fields") or []
            ],
        }

    def relationship_graph(self) -> str:
        """Mermaid flowchart with one node per table and an edge per relation."""
        lines: List[str] = ["graph TD"]
        for table_name in self.tables:
            lines.append(f'  {_mermaid_id(table_name)}["{table_name}"]')
        for table_name, table in self.tables.items():
            for relation in table.get("relations") or []:
                lines.append(f"  {_mermaid_id(table_name)} --> {_mermaid_id(str(relation))}")
        return "\n".join(lines)

    def _data_for_api(self) -> Any:
        if self.data is None:
            return None
        return {
            "tables": [
                {
                    "name": name,
                    "entity": table.get("entity"),
                    "business_name": table.get("business_name"),
                }
                for name, table in self.tables.items()
            ],
            "selected_table": self.selected_table,
            "details": self.table_details(),
            "entities": self.entities,
        }
