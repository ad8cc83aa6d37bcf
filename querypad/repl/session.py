"""REPL session state management."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from ..engine.context import DocumentMode
from ..engine.domain import DomainSnapshot
from ..runtime import Workspace, ensure_config_dir, load_config
from ..runtime.messages import MsgKey


@dataclass
class QueryRecord:
    """A query handed to the selected server."""

    query: str
    label: str
    server: str
    created_at: datetime


@dataclass
class ReplSession:
    """Container for interactive REPL state.

    Acts as the document the completion and command core edits: it owns the
    buffer text and caret and accepts insertions at the caret.
    """

    workspace: Workspace
    history_file: Path
    current_file: Optional[Path] = None
    mode: DocumentMode = DocumentMode.SQL
    buffer_text: str = ""
    cursor_position: int = 0
    status_message: str = ""
    sent_queries: List[QueryRecord] = field(default_factory=list)
    force_execute: bool = False
    palette_requested: bool = False
    exit_requested: bool = False

    @classmethod
    def create(cls) -> "ReplSession":
        """Factory that wires configuration and history paths."""
        ensure_config_dir()
        config = load_config()
        workspace = Workspace(config)

        history_file = config.paths.resolve("history_file")
        history_file.parent.mkdir(parents=True, exist_ok=True)

        return cls(
            workspace=workspace,
            history_file=history_file,
            mode=DocumentMode.parse(config.default_mode),
        )

    # Document collaborator ------------------------------------------------------
    def set_buffer(self, text: str, cursor_position: Optional[int] = None) -> None:
        self.buffer_text = text
        if cursor_position is None:
            cursor_position = len(text)
        self.cursor_position = min(max(cursor_position, 0), len(text))

    def insert_text(self, text: str) -> None:
        """Splice ``text`` in at the caret and move the caret past it."""
        before = self.buffer_text[: self.cursor_position]
        after = self.buffer_text[self.cursor_position:]
        self.buffer_text = before + text + after
        self.cursor_position += len(text)

    def open_file(self, path: Path) -> None:
        path = Path(path).expanduser()
        with open(path, "r", encoding="utf-8") as handle:
            content = handle.read()
        if self.current_file is not None and self.current_file != path:
            self.workspace.document_closed(self.current_file)
        self.current_file = path
        self.mode = DocumentMode.from_path(path)
        self.set_buffer(content)
        self.workspace.document_opened(path)
        self.set_status(f"Opened {path}")

    def save_file(self, path: Optional[Path] = None) -> Optional[Path]:
        target = Path(path).expanduser() if path else self.current_file
        if target is None:
            return None
        with open(target, "w", encoding="utf-8") as handle:
            handle.write(self.buffer_text)
        if target != self.current_file:
            self.current_file = target
            self.mode = DocumentMode.from_path(target)
            self.workspace.document_opened(target)
        self.set_status(f"Saved buffer to {target}")
        return target

    def run_query(self, query: str, label: str) -> QueryRecord:
        record = QueryRecord(
            query=query,
            label=label,
            server=self.workspace.catalog.selected_server,
            created_at=datetime.now(),
        )
        self.sent_queries.append(record)
        sent = self.workspace.messages.get(MsgKey.QUERY_SENT)
        self.set_status(f"{sent}: {label} -> {record.server or '(no server)'}")
        return record

    # Completion helpers ---------------------------------------------------------
    def snapshot(self) -> DomainSnapshot:
        return self.workspace.catalog.snapshot()

    def set_status(self, message: str) -> None:
        self.status_message = message
