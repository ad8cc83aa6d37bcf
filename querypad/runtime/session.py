"""Workspace wiring for querypad.

The workspace owns the long lived services:
- Configuration, persistence and the recent document list
- Catalog of tables and servers used for completion
- Command aggregator, completion engine and action dispatcher
"""

import itertools
import os
import uuid
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Protocol

import structlog

from ..engine.commands import (
    Action,
    ActionCommandSource,
    CommandAggregator,
    FileOpenCommandSource,
    RecentDocumentsCommandSource,
)
from ..engine.completions import CompletionEngine
from ..engine.dispatch import TaskDispatcher
from ..engine.snippets import CodeSnippet, SnippetCommandSource, load_snippets
from .catalog import CatalogRegistry, load_catalog
from .config import QueryPadConfig
from .messages import Messages
from .persistence import PersistenceGateway, TomlPersistence
from .platform import PlatformIntegration, detect_platform
from .recent import RecentDocumentPersister

logger = structlog.get_logger(__name__)

FOLDER_FILE_LIMIT = 500


class DocumentHost(Protocol):
    """The editor side: owns the buffer and knows how to run queries."""

    def insert_text(self, text: str) -> None:
        ...

    def open_file(self, path: Path) -> None:
        ...

    def run_query(self, query: str, label: str) -> None:
        ...


class Workspace:
    """Long lived services shared by the CLI and the REPL."""

    def __init__(
        self,
        config: Optional[QueryPadConfig] = None,
        persistence: Optional[PersistenceGateway] = None,
        catalog: Optional[CatalogRegistry] = None,
        messages: Optional[Messages] = None,
        platform: Optional[PlatformIntegration] = None,
        snippets: Optional[List[CodeSnippet]] = None,
    ):
        self.session_id = str(uuid.uuid4())
        self.config = config or QueryPadConfig()
        self.persistence = persistence or TomlPersistence(self.config.paths.resolve("state_file"))
        self.recent = RecentDocumentPersister(self.persistence, capacity=self.config.recent.capacity)
        self.catalog = catalog if catalog is not None else load_catalog(self.config.paths.resolve("catalog_file"))
        self.messages = messages or Messages(self.config.locale)
        self.platform = platform or detect_platform()
        self.snippets = snippets if snippets is not None else load_snippets(
            self.config.paths.resolve("snippets_file")
        )

        self.commands = CommandAggregator(result_limit=self.config.palette.result_limit)
        self.completions = CompletionEngine()
        self.dispatcher = TaskDispatcher()

    def install_command_sources(self, host: DocumentHost, actions: Iterable[Action] = ()) -> None:
        """Register the standard command sources, in palette order."""
        self.commands.register(ActionCommandSource(actions))
        self.commands.register(
            SnippetCommandSource(self.snippets, host.insert_text, host.run_query, self.messages)
        )
        self.commands.register(RecentDocumentsCommandSource(self.recent, host.open_file, self.messages))
        self.commands.register(
            FileOpenCommandSource(self.folder_files, host.open_file, self.messages, self.platform)
        )

    def folder_files(self) -> List[Path]:
        """Entries under the last opened folder, hidden ones skipped, at most ``FOLDER_FILE_LIMIT``."""
        folder = self.recent.get_open_folder()
        if folder is None:
            return []
        return list(itertools.islice(_visible_entries(folder), FOLDER_FILE_LIMIT))

    def document_opened(self, path: Optional[Path]) -> None:
        self.recent.doc_added(path)
        logger.debug("workspace.document.opened", path=str(path) if path else None)

    def document_closed(self, path: Optional[Path]) -> None:
        self.recent.doc_closed(path)

    def folder_selected(self, folder: Optional[Path]) -> None:
        self.recent.folder_selected(folder)


def _visible_entries(folder: Path) -> Iterator[Path]:
    """Walk ``folder`` top down lazily, never descending into hidden directories."""
    for dirpath, dirnames, filenames in os.walk(folder):
        dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
        root = Path(dirpath)
        for name in dirnames:
            yield root / name
        for name in sorted(filenames):
            if not name.startswith("."):
                yield root / name
