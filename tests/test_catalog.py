from pathlib import Path

import pytest

from querypad.engine.domain import ServerInfo, TableInfo
from querypad.runtime.catalog import CatalogLoadError, CatalogRegistry, load_catalog


def test_first_server_is_selected() -> None:
    registry = CatalogRegistry()

    registry.register_server(ServerInfo(name="prod", driver="kdb"))
    registry.register_server(ServerInfo(name="dev", driver="kdb"))

    assert registry.selected_server == "prod"
    assert registry.select_server("dev")
    assert not registry.select_server("missing")
    assert registry.selected_server == "dev"


def test_snapshot_is_a_copy() -> None:
    registry = CatalogRegistry()
    registry.register_table(TableInfo(full_name="trades", queries=["select from trades"]))

    snapshot = registry.snapshot()
    snapshot.tables[0].queries.append("other")
    registry.register_table(TableInfo(full_name="quotes"))

    assert registry.get_table("trades").queries == ["select from trades"]
    assert [t.full_name for t in snapshot.tables] == ["trades"]


def test_clear() -> None:
    registry = CatalogRegistry()
    registry.register_server(ServerInfo(name="prod"))
    registry.register_table(TableInfo(full_name="trades"))

    registry.clear()

    assert registry.list_tables() == []
    assert registry.list_servers() == []
    assert registry.selected_server == ""


def test_load_catalog(tmp_path: Path) -> None:
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "selected_server: dev\n"
        "servers:\n"
        "  - {name: prod, driver: kdb}\n"
        "  - {name: dev, driver: postgres}\n"
        "tables:\n"
        "  - trades\n"
        "  - full_name: quotes\n"
        "    queries: ['select from quotes']\n"
    )

    registry = load_catalog(path)

    assert registry.selected_server == "dev"
    assert [t.full_name for t in registry.list_tables()] == ["trades", "quotes"]
    assert registry.get_table("quotes").first_query == "select from quotes"
    assert registry.get_table("trades").first_query is None


def test_load_catalog_missing_file(tmp_path: Path) -> None:
    registry = load_catalog(tmp_path / "missing.yaml")

    assert registry.list_tables() == []


def test_load_catalog_errors(tmp_path: Path) -> None:
    path = tmp_path / "catalog.yaml"

    path.write_text("- just a list\n")
    with pytest.raises(CatalogLoadError):
        load_catalog(path)

    path.write_text("servers:\n  - {driver: kdb}\n")
    with pytest.raises(CatalogLoadError):
        load_catalog(path)
