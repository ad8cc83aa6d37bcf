"""prompt_toolkit completer for the querypad REPL."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .session import ReplSession

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_.:-]+")


@dataclass(frozen=True)
class CompletionItem:
    value: str
    display: str
    description: str


class QueryPadCompleter(Completer):
    """Caret-context completion for tables, servers, chart types and fences."""

    META_COMMANDS: List[CompletionItem] = [
        CompletionItem(":help", ":help", "Show help"),
        CompletionItem(":open", ":open", "Open file"),
        CompletionItem(":save", ":save", "Save buffer"),
        CompletionItem(":mode", ":mode", "Set document mode"),
        CompletionItem(":recent", ":recent", "Recent documents"),
        CompletionItem(":folder", ":folder", "Select folder"),
        CompletionItem(":commands", ":commands", "Command palette"),
        CompletionItem(":tables", ":tables", "List tables"),
        CompletionItem(":servers", ":servers", "List servers"),
        CompletionItem(":use", ":use", "Select server"),
        CompletionItem(":queries", ":queries", "Sent queries"),
        CompletionItem(":quit", ":quit", "Exit REPL"),
    ]

    def __init__(self, repl_session: ReplSession):
        self._session = repl_session

    def get_completions(self, document: Document, complete_event):  # type: ignore[override]
        # Meta command completion
        stripped = document.text_before_cursor.lstrip()
        if stripped.startswith(":") and "\n" not in stripped:
            word = document.get_word_before_cursor(pattern=_IDENTIFIER_RE) or ""
            yield from self._iter_matches(word, self.META_COMMANDS)
            return

        engine = self._session.workspace.completions
        candidates = engine.complete_at(
            document.text,
            document.cursor_position,
            self._session.mode,
            self._session.snapshot(),
        )
        for candidate in candidates:
            yield Completion(
                candidate.insertion_text,
                start_position=0,
                display=candidate.display_label,
                display_meta=candidate.icon.value if candidate.icon else "",
            )

    def _iter_matches(self, word: str, items: Iterable[CompletionItem]):
        lower_word = word.lower()
        for item in items:
            if not word or item.value.lower().startswith(lower_word):
                yield Completion(
                    item.value,
                    start_position=-len(word),
                    display=item.display,
                    display_meta=item.description,
                )
