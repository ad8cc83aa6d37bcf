"""Interactive command palette.

``PaletteModel`` holds the palette logic (filtering, highlight, accept and
cancel) and is independent of the terminal; ``run_palette`` drives it from a
prompt_toolkit prompt.
"""

from __future__ import annotations

from typing import List, Optional

from ..engine.commands import CommandAggregator, CommandDescriptor
from ..engine.dispatch import TaskDispatcher
from ..engine.selection import SelectionController

VISIBLE_ROWS = 12


class PaletteModel:
    """Filters a fixed set of commands and tracks the highlighted one."""

    def __init__(
        self,
        aggregator: CommandAggregator,
        commands: List[CommandDescriptor],
        dispatcher: TaskDispatcher,
        query: str = "",
    ):
        self._aggregator = aggregator
        self._commands = list(commands)
        self._dispatcher = dispatcher
        self.query = ""
        self.highlight_changes = 0
        self.selection: SelectionController[CommandDescriptor] = SelectionController(self._on_highlight)
        self.update_query(query)

    def _on_highlight(self, command: Optional[CommandDescriptor]) -> None:
        self.highlight_changes += 1

    @property
    def visible(self) -> List[CommandDescriptor]:
        return self.selection.items

    def update_query(self, query: str) -> None:
        self.query = query
        self.selection.set_items(self._aggregator.filter(self._commands, query))

    def move(self, delta: int) -> None:
        self.selection.move_by(delta)

    def accept(self) -> Optional[CommandDescriptor]:
        """Queue the highlighted command's action and return the command."""
        command = self.selection.commit()
        if command is not None:
            self._dispatcher.submit(command.perform, command.title)
        return command

    def cancel(self) -> None:
        self.selection.cancel()

    def lines(self, platform=None, no_matches: str = "No matches found") -> List[str]:
        """Text rows for the visible window around the highlighted command."""
        items = self.selection.items
        if not items:
            return [no_matches]
        index = self.selection.highlighted_index or 0
        start = max(0, min(index - VISIBLE_ROWS // 2, len(items) - VISIBLE_ROWS))
        rows = []
        for offset, command in enumerate(items[start:start + VISIBLE_ROWS], start=start):
            marker = ">" if offset == index else " "
            row = f"{marker} {command.title}"
            if command.title_additional:
                row += f"  ({command.title_additional})"
            if command.keystroke and platform is not None:
                row += f"  [{platform.format_keystroke(command.keystroke)}]"
            rows.append(row)
        return rows


def run_palette(model: PaletteModel, title: str = "Commands", platform=None, no_matches: str = "No matches found") -> Optional[CommandDescriptor]:
    """Show the palette until the user accepts or cancels."""
    from prompt_toolkit import PromptSession
    from prompt_toolkit.formatted_text import FormattedText
    from prompt_toolkit.key_binding import KeyBindings

    kb = KeyBindings()

    @kb.add("up")
    def _(event) -> None:
        model.move(-1)

    @kb.add("down")
    def _(event) -> None:
        model.move(1)

    @kb.add("pageup")
    def _(event) -> None:
        model.move(-VISIBLE_ROWS)

    @kb.add("pagedown")
    def _(event) -> None:
        model.move(VISIBLE_ROWS)

    @kb.add("enter", eager=True)
    def _(event) -> None:
        event.app.exit(result=model.accept())

    @kb.add("escape", eager=True)
    def _(event) -> None:
        model.cancel()
        event.app.exit(result=None)

    def toolbar():
        return "\n".join(model.lines(platform, no_matches))

    prompt_session = PromptSession(
        message=FormattedText([("class:prompt", f"{title}> ")]),
        key_bindings=kb,
        bottom_toolbar=toolbar,
    )
    prompt_session.default_buffer.on_text_changed += lambda buffer: model.update_query(buffer.text)

    try:
        return prompt_session.prompt(default=model.query)
    except (KeyboardInterrupt, EOFError):
        model.cancel()
        return None
