"""Utilities for rendering REPL output with rich."""

from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..engine.commands import CommandDescriptor
from ..engine.completions import CompletionCandidate
from ..engine.domain import ServerInfo, TableInfo
from .session import QueryRecord


class Renderer:
    """Render completions, commands, catalog listings and diagnostics."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    # General messages -----------------------------------------------------------------
    def banner(self) -> None:
        self.console.print(Panel("querypad – type :help for commands, Ctrl-P for the palette", title="querypad"))

    def info(self, message: str) -> None:
        self.console.print(f"[cyan]{message}[/cyan]")

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]{message}[/yellow]")

    def error(self, message: str) -> None:
        self.console.print(Panel(message, title="Error", border_style="red"))

    # Completion and commands ----------------------------------------------------------
    def render_candidates(self, candidates: Iterable[CompletionCandidate], title: str = "Completions") -> None:
        table = Table(title=title, show_lines=False)
        table.add_column("#", style="bold")
        table.add_column("Label", style="bold cyan")
        table.add_column("Icon", style="magenta")
        table.add_column("Inserts")
        for idx, candidate in enumerate(candidates, start=1):
            table.add_row(
                str(idx),
                candidate.display_label,
                candidate.icon.value if candidate.icon else "-",
                repr(candidate.insertion_text),
            )
        self.console.print(table)

    def render_commands(self, commands: Iterable[CommandDescriptor], platform=None, title: str = "Commands") -> None:
        table = Table(title=title, show_lines=False)
        table.add_column("#", style="bold")
        table.add_column("Command", style="bold cyan")
        table.add_column("Detail")
        table.add_column("Keys", style="green")
        for idx, command in enumerate(commands, start=1):
            keys = platform.format_keystroke(command.keystroke) if platform else (command.keystroke or "")
            table.add_row(str(idx), command.title, command.title_additional or command.detail, keys)
        self.console.print(table)

    # Catalog --------------------------------------------------------------------------
    def render_tables(self, tables: Iterable[TableInfo]) -> None:
        table = Table(title="Tables", show_lines=False)
        table.add_column("Table", style="bold cyan")
        table.add_column("Example query")
        for info in tables:
            table.add_row(info.full_name, info.first_query or "-")
        self.console.print(table)

    def render_servers(self, servers: Iterable[ServerInfo], selected: str) -> None:
        table = Table(title="Servers", show_lines=False)
        table.add_column("", style="bold green")
        table.add_column("Server", style="bold cyan")
        table.add_column("Driver")
        for server in servers:
            table.add_row("*" if server.name == selected else "", server.name, server.driver or "-")
        self.console.print(table)

    def render_recent(self, paths: Iterable[str], title: str = "Recent Documents") -> None:
        table = Table(title=title, show_lines=False)
        table.add_column("#", style="bold")
        table.add_column("Path")
        for idx, path in enumerate(paths, start=1):
            table.add_row(str(idx), path)
        self.console.print(table)

    # Queries --------------------------------------------------------------------------
    def render_query(self, record: QueryRecord, lexer: str = "sql") -> None:
        server = record.server or "(no server selected)"
        body = Syntax(record.query, lexer, word_wrap=True)
        self.console.print(Panel(body, title=f"{record.label} → {server}", border_style="green"))

    def render_query_list(self, records: Iterable[QueryRecord]) -> None:
        table = Table(title="Sent Queries", show_lines=False)
        table.add_column("#", style="bold")
        table.add_column("Label")
        table.add_column("Server")
        table.add_column("Timestamp")
        for idx, record in enumerate(records, start=1):
            table.add_row(
                str(idx),
                record.label,
                record.server or "-",
                record.created_at.isoformat(timespec="seconds"),
            )
        self.console.print(table)
