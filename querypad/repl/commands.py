"""Meta command handling for the querypad REPL."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rich.table import Table

from ..engine.commands import Action
from ..engine.context import DocumentMode
from ..engine.icons import Icon
from ..runtime.messages import MsgKey
from .renderer import Renderer
from .session import ReplSession


@dataclass
class MetaCommand:
    name: str
    args: List[str]


@dataclass
class CommandOutcome:
    exit_repl: bool = False
    new_buffer: Optional[str] = None
    open_palette: bool = False
    palette_query: str = ""


class CommandExecutor:
    """Dispatch colon-prefixed meta commands."""

    def __init__(self, repl_session: ReplSession, renderer: Renderer) -> None:
        self._repl_session = repl_session
        self._renderer = renderer

    # Public API ------------------------------------------------------------------
    def execute(self, raw_command: str, buffer_text: str) -> CommandOutcome:
        meta = parse_meta_command(raw_command)
        if not meta:
            self._renderer.error(f"Unknown command: {raw_command}")
            return CommandOutcome()

        name = meta.name
        if name == "help":
            self._cmd_help()
        elif name == "open":
            return self._cmd_open(meta.args)
        elif name == "save":
            self._cmd_save(meta.args, buffer_text)
        elif name == "mode":
            self._cmd_mode(meta.args)
        elif name == "recent":
            return self._cmd_recent(meta.args)
        elif name == "folder":
            self._cmd_folder(meta.args)
        elif name == "commands":
            return CommandOutcome(open_palette=True, palette_query=" ".join(meta.args))
        elif name == "tables":
            self._cmd_tables()
        elif name == "servers":
            self._cmd_servers()
        elif name == "use":
            self._cmd_use(meta.args)
        elif name == "queries":
            self._renderer.render_query_list(self._repl_session.sent_queries)
        elif name == "quit":
            return CommandOutcome(exit_repl=True)
        else:
            self._renderer.error(f"Unsupported command: {raw_command}")
        return CommandOutcome()

    def palette_actions(self) -> List[Action]:
        """Meta commands that make sense without arguments, as palette actions."""
        messages = self._repl_session.workspace.messages
        return [
            Action(messages.get(MsgKey.HELP), self._cmd_help, "Show REPL help"),
            Action(
                messages.get(MsgKey.SAVE),
                lambda: self._cmd_save([], self._repl_session.buffer_text),
                "Save buffer to the current file",
                keystroke="c-s",
            ),
            Action(messages.get(MsgKey.LIST_TABLES), self._cmd_tables, "List known tables", icon=Icon.TABLE),
            Action(messages.get(MsgKey.SERVERS), self._cmd_servers, "List server connections", icon=Icon.SERVER),
            Action(
                messages.get(MsgKey.RECENT_DOCUMENTS),
                lambda: self._cmd_recent([]),
                "List recently used documents",
                icon=Icon.RECENT,
            ),
            Action(messages.get(MsgKey.EXIT), self._request_exit, "Exit the REPL"),
        ]

    # Command implementations ------------------------------------------------------
    def _cmd_help(self) -> None:
        table = Table(title=":help - REPL Commands", show_lines=False)
        table.add_column("Command", style="bold cyan")
        table.add_column("Description")
        table.add_row(":help", "Show this help message")
        table.add_row(":open <file>", "Load file contents into the buffer")
        table.add_row(":save [file]", "Save buffer to file (defaults to last opened)")
        table.add_row(":mode [markdown|sql|q|text]", "Show or set the document mode")
        table.add_row(":recent [n]", "List recent documents or open the n-th")
        table.add_row(":folder <dir>", "Select the folder offered by the palette")
        table.add_row(":commands [query]", "Open the command palette")
        table.add_row(":tables", "List known tables")
        table.add_row(":servers", "List server connections")
        table.add_row(":use <server>", "Select the server queries are sent to")
        table.add_row(":queries", "List queries sent this session")
        table.add_row(":quit", "Exit the REPL")
        self._renderer.console.print(table)

        triggers = Table(title="Completion Triggers", show_lines=True)
        triggers.add_column("Type this", style="bold green")
        triggers.add_column("Mode", style="yellow")
        triggers.add_column("Completes")
        triggers.add_row("... FROM ", "any", "Table names")
        triggers.add_row("` `` ``` (at line start)", "markdown", "Fenced query block for a table")
        triggers.add_row("type='", "markdown", "Chart types")
        triggers.add_row("server='", "markdown", "Server names")
        self._renderer.console.print(triggers)

    def _cmd_open(self, args: List[str]) -> CommandOutcome:
        if not args:
            self._renderer.error(":open requires a file path")
            return CommandOutcome()
        path = Path(args[0]).expanduser()
        if not path.is_file():
            self._renderer.error(f"File not found: {path}")
            return CommandOutcome()
        self._repl_session.open_file(path)
        return CommandOutcome(new_buffer=self._repl_session.buffer_text)

    def _cmd_save(self, args: List[str], buffer_text: str) -> None:
        self._repl_session.set_buffer(buffer_text, self._repl_session.cursor_position)
        target = self._repl_session.save_file(Path(args[0]) if args else None)
        if target is None:
            self._renderer.error("No target file. Provide a path or :open first.")
            return
        self._renderer.info(f"Buffer saved to {target}")

    def _cmd_mode(self, args: List[str]) -> None:
        if args:
            mode = DocumentMode.lookup(args[0])
            if mode is None:
                self._renderer.error(f"Unknown mode: {args[0]} (expected {', '.join(m.value for m in DocumentMode)})")
                return
            self._repl_session.mode = mode
            set_mode = self._repl_session.workspace.messages.get(MsgKey.SET_MODE)
            self._repl_session.set_status(f"{set_mode}: {mode.value}")
        self._renderer.info(f"Document mode: {self._repl_session.mode.value}")

    def _cmd_recent(self, args: List[str]) -> CommandOutcome:
        workspace = self._repl_session.workspace
        paths = workspace.recent.recent_file_paths()
        if not paths:
            self._renderer.warn(workspace.messages.get(MsgKey.NO_RECENT_DOCUMENTS))
            return CommandOutcome()
        if not args:
            self._renderer.render_recent(paths, title=workspace.messages.get(MsgKey.RECENT_DOCUMENTS))
            return CommandOutcome()
        try:
            index = int(args[0]) - 1
        except ValueError:
            self._renderer.error("Index must be an integer")
            return CommandOutcome()
        if index < 0 or index >= len(paths):
            self._renderer.error("Recent document index out of range")
            return CommandOutcome()
        return self._cmd_open([paths[index]])

    def _cmd_folder(self, args: List[str]) -> None:
        workspace = self._repl_session.workspace
        if not args:
            folder = workspace.recent.get_open_folder()
            if folder is None:
                self._renderer.warn(workspace.messages.get(MsgKey.NO_FOLDER_SELECTED))
            else:
                self._renderer.info(f"Folder: {folder}")
            return
        folder = Path(args[0]).expanduser()
        if not folder.is_dir():
            self._renderer.error(f"Not a directory: {folder}")
            return
        workspace.folder_selected(folder)
        self._repl_session.set_status(f"Folder {folder}")

    def _cmd_tables(self) -> None:
        self._renderer.render_tables(self._repl_session.workspace.catalog.list_tables())

    def _cmd_servers(self) -> None:
        workspace = self._repl_session.workspace
        servers = workspace.catalog.list_servers()
        if not servers:
            self._renderer.warn(workspace.messages.get(MsgKey.NO_CONNECTIONS))
            return
        self._renderer.render_servers(servers, workspace.catalog.selected_server)

    def _cmd_use(self, args: List[str]) -> None:
        if not args:
            self._renderer.error(":use requires a server name")
            return
        if not self._repl_session.workspace.catalog.select_server(args[0]):
            self._renderer.error(f"Unknown server: {args[0]}")
            return
        use_server = self._repl_session.workspace.messages.get(MsgKey.USE_SERVER)
        self._repl_session.set_status(f"{use_server}: {args[0]}")
        self._renderer.info(f"Using server {args[0]}")

    def _request_exit(self) -> None:
        self._repl_session.exit_requested = True


# Helper functions ----------------------------------------------------------------------

def parse_meta_command(text: str) -> Optional[MetaCommand]:
    text = text.strip()
    if not text.startswith(":"):
        return None
    parts = text[1:].strip().split()
    if not parts:
        return None
    name, *args = parts
    return MetaCommand(name=name.lower(), args=args)
