from pathlib import Path
from typing import List

import pytest

from querypad.engine.commands import (
    Action,
    ActionCommandSource,
    CommandAggregator,
    CommandDescriptor,
    CommandSource,
    FileOpenCommandSource,
    RecentDocumentsCommandSource,
    StaticCommandSource,
    filter_by_title,
    to_command,
)
from querypad.engine.context import DocumentMode
from querypad.engine.icons import Icon
from querypad.runtime.messages import Messages
from querypad.runtime.persistence import MemoryPersistence
from querypad.runtime.recent import RecentDocumentPersister


def noop() -> None:
    pass


def cmd(title: str) -> CommandDescriptor:
    return CommandDescriptor(title=title, perform=noop)


class FailingSource(CommandSource):
    def get_commands(self) -> List[CommandDescriptor]:
        raise RuntimeError("boom")


class StubPlatform:
    def __init__(self):
        self.opened: List[Path] = []

    def open_path(self, path) -> None:
        self.opened.append(Path(path))


def test_collect_concatenates_in_registration_order() -> None:
    aggregator = CommandAggregator()
    aggregator.register(StaticCommandSource([cmd("b"), cmd("a")]))
    aggregator.register(StaticCommandSource([]))
    aggregator.register(StaticCommandSource([cmd("c")]))

    titles = [c.title for c in aggregator.collect()]

    assert titles == ["b", "a", "c"]
    assert [c.title for c in aggregator.collect()] == titles


def test_collect_with_explicit_sources() -> None:
    aggregator = CommandAggregator()
    sources = [StaticCommandSource([cmd("x")]), StaticCommandSource([cmd("y")])]

    assert [c.title for c in aggregator.collect(sources)] == ["x", "y"]


def test_failing_source_is_isolated() -> None:
    aggregator = CommandAggregator()
    aggregator.register(StaticCommandSource([cmd("before")]))
    aggregator.register(FailingSource())
    aggregator.register(StaticCommandSource([cmd("after")]))

    assert [c.title for c in aggregator.collect()] == ["before", "after"]


def test_mode_specific_sources_follow_global_ones() -> None:
    aggregator = CommandAggregator()
    aggregator.register(StaticCommandSource([cmd("q only")]), mode=DocumentMode.Q)
    aggregator.register(StaticCommandSource([cmd("global")]))

    assert [c.title for c in aggregator.collect()] == ["global"]
    assert [c.title for c in aggregator.collect(mode=DocumentMode.Q)] == ["global", "q only"]
    assert [c.title for c in aggregator.collect(mode="q")] == ["global", "q only"]
    assert [c.title for c in aggregator.collect(mode=DocumentMode.SQL)] == ["global"]


def test_unregister_removes_source() -> None:
    aggregator = CommandAggregator()
    source = StaticCommandSource([cmd("gone")])
    aggregator.register(source)
    aggregator.register(source, mode=DocumentMode.SQL)

    aggregator.unregister(source)

    assert aggregator.collect(mode=DocumentMode.SQL) == []


def test_filter_is_case_insensitive_contains() -> None:
    items = [cmd("Open File: trades.q"), cmd("Paste Snip: getTableCounts"), cmd("Run Snip: getHDBcounts")]

    assert [c.title for c in filter_by_title(items, "snip")] == [
        "Paste Snip: getTableCounts",
        "Run Snip: getHDBcounts",
    ]
    assert [c.title for c in filter_by_title(items, "COUNTS")] == [
        "Paste Snip: getTableCounts",
        "Run Snip: getHDBcounts",
    ]
    assert [c.title for c in filter_by_title(items, "file")] == ["Open File: trades.q"]


def test_filter_requires_every_word() -> None:
    items = [cmd("Run Snip: getHDBcounts"), cmd("Paste Snip: getTableCounts")]

    assert [c.title for c in filter_by_title(items, "run counts")] == ["Run Snip: getHDBcounts"]
    assert filter_by_title(items, "run missing") == []


def test_blank_query_keeps_everything() -> None:
    items = [cmd("a"), cmd("b")]

    assert filter_by_title(items, "") == items
    assert filter_by_title(items, "   ") == items


def test_filter_respects_limit() -> None:
    aggregator = CommandAggregator(result_limit=3)
    items = [cmd(f"command {i}") for i in range(10)]

    assert len(aggregator.filter(items, "command")) == 3
    assert len(aggregator.filter(items, "")) == 3
    assert len(aggregator.filter(items, "command", limit=5)) == 5


def test_search_polls_and_filters() -> None:
    aggregator = CommandAggregator()
    aggregator.register(StaticCommandSource([cmd("Save"), cmd("Save As"), cmd("Exit")]))

    assert [c.title for c in aggregator.search("save")] == ["Save", "Save As"]


def test_action_command_source_wraps_actions() -> None:
    calls: List[str] = []
    source = ActionCommandSource([Action("Save", lambda: calls.append("save"), "Save buffer", keystroke="c-s")])
    source.add(Action("Exit", lambda: calls.append("exit")))

    commands = source.get_commands()
    commands[0].perform()

    assert [c.title for c in commands] == ["Save", "Exit"]
    assert commands[0].detail == "Save buffer"
    assert commands[0].keystroke == "c-s"
    assert commands[1].icon is Icon.ACTION
    assert calls == ["save"]


def test_to_command_copies_metadata() -> None:
    command = to_command(Action("Help", noop, "Show help", icon=None))

    assert command.title == "Help"
    assert str(command) == "Help"
    assert command.icon is None


def test_file_open_commands(tmp_path: Path) -> None:
    (tmp_path / "report.md").write_text("# hi")
    (tmp_path / "archive").mkdir()
    opened: List[Path] = []
    platform = StubPlatform()
    source = FileOpenCommandSource(
        lambda: sorted(tmp_path.iterdir()),
        opened.append,
        Messages(),
        platform,
    )

    commands = source.get_commands()
    by_title = {c.title: c for c in commands}

    assert set(by_title) == {"Open Folder: archive", "Open File: report.md"}
    file_command = by_title["Open File: report.md"]
    assert file_command.detail == str((tmp_path / "report.md").absolute())
    assert file_command.title_additional == str(tmp_path.absolute())
    assert file_command.icon is Icon.FILE

    file_command.perform()
    by_title["Open Folder: archive"].perform()

    assert opened == [tmp_path / "report.md"]
    assert platform.opened == [tmp_path / "archive"]


def test_recent_document_commands() -> None:
    persister = RecentDocumentPersister(MemoryPersistence())
    persister.doc_added("/work/a.sql")
    persister.doc_added("/work/b.md")
    opened: List[Path] = []

    commands = RecentDocumentsCommandSource(persister, opened.append, Messages()).get_commands()
    commands[0].perform()

    assert [c.title for c in commands] == ["Open Recent: b.md", "Open Recent: a.sql"]
    assert opened == [Path("/work/b.md")]


def test_command_descriptor_is_immutable() -> None:
    command = cmd("Save")

    with pytest.raises(AttributeError):
        command.title = "Other"  # type: ignore[misc]


class HalfwayFailingSource(CommandSource):
    def get_commands(self):
        yield cmd("partial")
        raise RuntimeError("index went away")


def test_generator_source_failing_midway_contributes_nothing() -> None:
    aggregator = CommandAggregator()
    aggregator.register(StaticCommandSource([cmd("before")]))
    aggregator.register(HalfwayFailingSource())
    aggregator.register(StaticCommandSource([cmd("after")]))

    assert [c.title for c in aggregator.collect()] == ["before", "after"]


def test_register_rejects_unknown_mode() -> None:
    aggregator = CommandAggregator()

    with pytest.raises(ValueError):
        aggregator.register(StaticCommandSource([cmd("x")]), mode="markdwn")

    assert aggregator.collect(mode=DocumentMode.TEXT) == []


def test_unknown_mode_only_yields_global_sources() -> None:
    aggregator = CommandAggregator()
    aggregator.register(StaticCommandSource([cmd("global")]))
    aggregator.register(StaticCommandSource([cmd("text only")]), mode="Text")

    assert [c.title for c in aggregator.collect(mode="markdwn")] == ["global"]
    assert [c.title for c in aggregator.collect(mode="TEXT")] == ["global", "text only"]
