"""Key bindings for the querypad REPL."""

from __future__ import annotations

from typing import Callable, Optional

from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings

from .commands import CommandOutcome
from .session import ReplSession
from .submit import ready_to_submit

MetaRunner = Callable[[str, str], Optional[CommandOutcome]]


def create_key_bindings(repl_session: ReplSession, run_meta: MetaRunner) -> KeyBindings:
    """Enter submits per document mode; Ctrl keys reach the palette and file commands."""

    bindings = KeyBindings()

    def meta_in_terminal(event, command: Callable[[], Optional[str]]) -> None:
        # runs outside the prompt so the command can print and read input
        buffer = event.current_buffer
        text = buffer.text

        def run() -> None:
            meta = command()
            if not meta:
                return
            outcome = run_meta(meta, text)
            if outcome is not None and outcome.new_buffer is not None:
                buffer.document = Document(outcome.new_buffer, len(outcome.new_buffer))

        run_in_terminal(run)

    @bindings.add("enter")
    def _(event) -> None:
        buffer = event.current_buffer
        state = buffer.complete_state
        if state is not None and state.current_completion is not None:
            buffer.apply_completion(state.current_completion)
            return
        if ready_to_submit(buffer.text, repl_session.mode, repl_session.force_execute):
            repl_session.force_execute = False
            event.app.exit(result=buffer.text)
            return
        buffer.newline(copy_margin=False)

    @bindings.add("c-r")
    def _(event) -> None:
        repl_session.force_execute = True
        event.app.exit(result=event.current_buffer.text)

    @bindings.add("c-p")
    def _(event) -> None:
        buffer = event.current_buffer
        repl_session.set_buffer(buffer.text, buffer.cursor_position)
        repl_session.palette_requested = True
        event.app.exit(result=buffer.text)

    @bindings.add("c-s")
    def _(event) -> None:
        meta_in_terminal(event, lambda: ":save")

    @bindings.add("c-o")
    def _(event) -> None:
        def ask() -> Optional[str]:
            path = input("Open file path: ").strip()
            return f":open {path}" if path else None

        meta_in_terminal(event, ask)

    return bindings
