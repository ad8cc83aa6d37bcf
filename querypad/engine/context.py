"""Caret context analysis for query and markdown documents.

Works backwards from the caret over the text typed so far and decides which
kind of completion is valid there. This is a heuristic, not a parser: it
runs on every keystroke and can misfire inside string literals or fenced
blocks that happen to contain a trigger.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union


class DocumentMode(str, Enum):
    """Kind of document being edited, usually derived from its file name."""
    MARKDOWN = "markdown"
    SQL = "sql"
    Q = "q"
    TEXT = "text"

    @classmethod
    def from_path(cls, path: Optional[Union[str, Path]]) -> "DocumentMode":
        if not path:
            return cls.TEXT
        return _SUFFIX_MODES.get(Path(path).suffix.lower(), cls.TEXT)

    @classmethod
    def lookup(cls, value: Union["DocumentMode", str, None]) -> Optional["DocumentMode"]:
        """Mode by value or name, case-insensitive; None when unrecognised."""
        if isinstance(value, cls):
            return value
        token = (value or "").strip().lower()
        for mode in cls:
            if token in {mode.value, mode.name.lower()}:
                return mode
        return None

    @classmethod
    def parse(cls, value: str) -> "DocumentMode":
        """Lenient lookup by value or name, TEXT when unrecognised."""
        return cls.lookup(value) or cls.TEXT


_SUFFIX_MODES = {
    ".md": DocumentMode.MARKDOWN,
    ".markdown": DocumentMode.MARKDOWN,
    ".sql": DocumentMode.SQL,
    ".q": DocumentMode.Q,
    ".k": DocumentMode.Q,
}


class Trigger(str, Enum):
    """Completion triggers, in the order they are checked."""
    CODE_FENCE = "code_fence"
    CHART_TYPE_ATTRIBUTE = "chart_type_attribute"
    SERVER_ATTRIBUTE = "server_attribute"
    TABLE_AFTER_FROM = "table_after_from"
    NONE = "none"


@dataclass(frozen=True)
class CompletionContext:
    """What may be completed at the caret plus the trigger text already typed."""

    trigger: Trigger
    prefix: str = ""

    @property
    def is_none(self) -> bool:
        return self.trigger is Trigger.NONE


NO_CONTEXT = CompletionContext(Trigger.NONE)

FENCE_RUNS = ("`", "``", "```")
CHART_TYPE_PREFIXES = ("type='", 'type="')
SERVER_PREFIXES = ("server='", 'server="')
FROM_MARKER = " FROM "


class ContextAnalyzer:
    """Classify a caret position into a completion context."""

    def classify(self, text: str, caret_offset: int, mode: Union[DocumentMode, str]) -> CompletionContext:
        """Return the single context that governs a completion request."""
        contexts = self.classify_all(text, caret_offset, mode)
        return contexts[0] if contexts else NO_CONTEXT

    def classify_all(self, text: str, caret_offset: int, mode: Union[DocumentMode, str]) -> List[CompletionContext]:
        """Return every context firing at the caret, highest priority first.

        The markdown fence/attribute check only runs for markdown documents,
        the FROM check runs for every known mode, so both can fire at once.
        A mode that is not a DocumentMode yields no contexts.
        """
        resolved = _resolve_mode(mode)
        if resolved is None:
            return []
        pre = _text_before_caret(text, caret_offset)
        contexts: List[CompletionContext] = []

        if resolved is DocumentMode.MARKDOWN:
            markup = _classify_markup(pre)
            if markup is not None:
                contexts.append(markup)

        if pre.upper().endswith(FROM_MARKER):
            contexts.append(CompletionContext(Trigger.TABLE_AFTER_FROM, ""))
        return contexts


def _resolve_mode(mode: Union[DocumentMode, str, None]) -> Optional[DocumentMode]:
    if isinstance(mode, DocumentMode):
        return mode
    try:
        return DocumentMode(mode)
    except ValueError:
        return None


def _text_before_caret(text: Optional[str], caret_offset: int) -> str:
    text = text or ""
    caret = min(max(int(caret_offset), 0), len(text))
    return text[:caret]


def _classify_markup(pre: str) -> Optional[CompletionContext]:
    after_newline = pre[pre.rfind("\n") + 1:].strip()
    after_space = pre[pre.rfind(" ") + 1:].strip()

    if after_newline in FENCE_RUNS:
        return CompletionContext(Trigger.CODE_FENCE, after_newline)
    if after_space in CHART_TYPE_PREFIXES:
        return CompletionContext(Trigger.CHART_TYPE_ATTRIBUTE, after_space)
    if after_space in SERVER_PREFIXES:
        return CompletionContext(Trigger.SERVER_ATTRIBUTE, after_space)
    return None
