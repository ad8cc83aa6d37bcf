"""Registry for known tables and server connections.

The registry holds what the host knows about the data it can query and
hands out read-only ``DomainSnapshot`` objects for completion.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from ..engine.domain import DomainSnapshot, ServerInfo, TableInfo


class CatalogLoadError(Exception):
    """Raised when a catalog file exists but cannot be read."""


class CatalogRegistry:
    """Registry for tables and servers, in registration order."""

    def __init__(self):
        self._tables: Dict[str, TableInfo] = {}
        self._servers: Dict[str, ServerInfo] = {}
        self.selected_server: str = ""

    def register_table(self, table: TableInfo) -> None:
        """Register a table, replacing any with the same name."""
        self._tables[table.full_name] = table

    def register_server(self, server: ServerInfo) -> None:
        """Register a server connection."""
        self._servers[server.name] = server
        if not self.selected_server:
            self.selected_server = server.name

    def select_server(self, name: str) -> bool:
        """Make ``name`` the current server. Returns False if unknown."""
        if name not in self._servers:
            return False
        self.selected_server = name
        return True

    def get_table(self, name: str) -> Optional[TableInfo]:
        return self._tables.get(name)

    def list_tables(self) -> List[TableInfo]:
        """List all registered tables."""
        return list(self._tables.values())

    def list_servers(self) -> List[ServerInfo]:
        """List all registered servers."""
        return list(self._servers.values())

    def clear(self) -> None:
        """Clear all registered tables and servers."""
        self._tables.clear()
        self._servers.clear()
        self.selected_server = ""

    def snapshot(self) -> DomainSnapshot:
        """Copy of the current state for completion sources."""
        return DomainSnapshot(
            tables=[table.model_copy(deep=True) for table in self._tables.values()],
            servers=[server.model_copy() for server in self._servers.values()],
            selected_server=self.selected_server,
        )


def load_catalog(path: Optional[Union[str, Path]], registry: Optional[CatalogRegistry] = None) -> CatalogRegistry:
    """Populate a registry from a YAML catalog.

    Expected layout::

        selected_server: prod
        servers:
          - {name: prod, driver: kdb}
        tables:
          - full_name: trades
            queries: ["select from trades"]

    A missing file leaves the registry empty.
    """
    registry = registry or CatalogRegistry()
    if path is None:
        return registry
    path = Path(path).expanduser()
    if not path.exists():
        return registry

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise CatalogLoadError(f"Invalid catalog YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogLoadError(f"Catalog {path} must be a mapping")

    try:
        for entry in data.get("servers") or []:
            registry.register_server(ServerInfo(**entry))
        for entry in data.get("tables") or []:
            if isinstance(entry, str):
                entry = {"full_name": entry}
            registry.register_table(TableInfo(**entry))
    except (TypeError, ValidationError) as exc:
        raise CatalogLoadError(f"Invalid catalog entry in {path}: {exc}") from exc

    selected = data.get("selected_server")
    if selected:
        registry.select_server(str(selected))
    return registry
