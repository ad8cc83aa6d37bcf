"""The querypad REPL: an editable query buffer with completion and a command palette."""

from __future__ import annotations

from rich.console import Console

from ..engine.context import DocumentMode
from ..runtime.messages import MsgKey
from .commands import CommandExecutor
from .palette import PaletteModel, run_palette
from .renderer import Renderer
from .session import ReplSession

REPL_REQUIREMENTS = ("prompt-toolkit", "pygments")

_SYNTAX = {DocumentMode.MARKDOWN: "markdown", DocumentMode.SQL: "sql", DocumentMode.Q: "q"}

_HINTS = "Ctrl-R run • Ctrl-P commands • Ctrl-S save • Ctrl-O open"


def start_repl() -> None:
    """Run the REPL until :quit, the Exit command or Ctrl-D."""
    console = Console()

    try:
        from prompt_toolkit import PromptSession
        from prompt_toolkit.history import FileHistory
        from prompt_toolkit.lexers import PygmentsLexer
        from prompt_toolkit.patch_stdout import patch_stdout
        from prompt_toolkit.styles import Style

        from .completer import QueryPadCompleter
        from .keybinds import create_key_bindings
        from .lexer import QueryPadLexer
    except ModuleNotFoundError as exc:  # pragma: no cover - runtime guard
        console.print(f"[red]The REPL needs '{exc.name or 'prompt_toolkit'}', which is not installed.[/red]")
        console.print(f"Run `[bold]pip install {' '.join(REPL_REQUIREMENTS)}[/bold]` and try again.")
        raise SystemExit(1) from exc

    repl_session = ReplSession.create()
    workspace = repl_session.workspace
    renderer = Renderer(console)
    executor = CommandExecutor(repl_session, renderer)
    workspace.install_command_sources(_ReplDocument(repl_session, renderer), executor.palette_actions())
    renderer.banner()

    def open_palette(query: str = "") -> None:
        model = PaletteModel(
            workspace.commands,
            workspace.commands.collect(mode=repl_session.mode),
            workspace.dispatcher,
            query,
        )
        chosen = run_palette(
            model,
            title=workspace.messages.get(MsgKey.COMMANDS),
            platform=workspace.platform,
            no_matches=workspace.messages.get(MsgKey.NO_MATCHES),
        )
        if chosen is not None:
            repl_session.set_status(chosen.title)
        workspace.dispatcher.run_pending()

    prompt_session = PromptSession(
        message=lambda: [("class:prompt", f"{repl_session.mode.value}> ")],
        completer=QueryPadCompleter(repl_session),
        complete_while_typing=True,
        lexer=PygmentsLexer(QueryPadLexer),
        history=FileHistory(str(repl_session.history_file)),
        multiline=True,
        prompt_continuation=lambda width, line_number, is_soft_wrap: [("class:continuation", ".".rjust(width - 1) + " ")],
        bottom_toolbar=lambda: _toolbar(repl_session),
        key_bindings=create_key_bindings(repl_session, executor.execute),
        style=Style.from_dict({"prompt": "ansicyan bold", "continuation": "ansibrightblack"}),
    )

    while not repl_session.exit_requested:
        default, cursor = repl_session.buffer_text, repl_session.cursor_position
        try:
            with patch_stdout():
                text = prompt_session.prompt(
                    default=default,
                    pre_run=lambda: setattr(prompt_session.default_buffer, "cursor_position", cursor),
                )
        except KeyboardInterrupt:
            repl_session.set_buffer("")
            repl_session.set_status("Buffer cleared")
            continue
        except EOFError:
            break

        if repl_session.palette_requested:
            repl_session.palette_requested = False
            open_palette()
            continue

        command = (text or "").strip()
        if not command:
            repl_session.set_buffer("")
        elif command.startswith(":"):
            outcome = executor.execute(command, repl_session.buffer_text)
            if outcome.exit_repl:
                break
            if outcome.new_buffer is not None:
                repl_session.set_buffer(outcome.new_buffer)
            if outcome.open_palette:
                open_palette(outcome.palette_query)
        else:
            record = repl_session.run_query(text, "Query")
            renderer.render_query(record, lexer=syntax_for(repl_session.mode))
            repl_session.set_buffer("")

    renderer.info("Bye")


class _ReplDocument:
    """The REPL buffer as seen by command sources."""

    def __init__(self, repl_session: ReplSession, renderer: Renderer):
        self._session = repl_session
        self._renderer = renderer

    def insert_text(self, text: str) -> None:
        self._session.insert_text(text)

    def open_file(self, path) -> None:
        self._session.open_file(path)

    def run_query(self, query: str, label: str) -> None:
        record = self._session.run_query(query, label)
        self._renderer.render_query(record, lexer=syntax_for(self._session.mode))


def syntax_for(mode: DocumentMode) -> str:
    """Pygments lexer name used to echo a query."""
    return _SYNTAX.get(mode, "text")


def _toolbar(session: ReplSession):
    from prompt_toolkit.formatted_text import HTML

    server = session.workspace.catalog.selected_server or "-"
    name = session.current_file.name if session.current_file else "untitled"
    parts = [f"<b>{_escape(name)}</b>", f"server: {_escape(server)}"]
    if session.status_message:
        parts.append(_escape(session.status_message))
    parts.append(_HINTS)
    return HTML("  |  ".join(parts))


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
