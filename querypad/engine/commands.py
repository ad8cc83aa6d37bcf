"""Commands, command sources and the aggregator behind the command palette."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

import structlog

from .context import DocumentMode
from .icons import Icon

logger = structlog.get_logger(__name__)

DEFAULT_RESULT_LIMIT = 100


@dataclass(frozen=True)
class CommandDescriptor:
    """A user-facing action with the metadata a palette needs to show it."""

    title: str
    perform: Callable[[], None] = field(compare=False, repr=False)
    detail: str = ""
    icon: Optional[Icon] = None
    keystroke: Optional[str] = None
    title_additional: str = ""

    def __str__(self) -> str:
        return self.title


class CommandSource(ABC):
    """Produces the commands currently available from one part of the app."""

    @abstractmethod
    def get_commands(self) -> Iterable[CommandDescriptor]:
        """Return zero or more freshly built commands."""


class StaticCommandSource(CommandSource):
    """A fixed list of commands."""

    def __init__(self, commands: Iterable[CommandDescriptor]):
        self._commands = list(commands)

    def get_commands(self) -> List[CommandDescriptor]:
        return list(self._commands)


@dataclass
class Action:
    """A named callback, e.g. a menu entry, that can be turned into a command."""
    name: str
    callback: Callable[[], None]
    description: str = ""
    icon: Optional[Icon] = Icon.ACTION
    keystroke: Optional[str] = None


def to_command(action: Action) -> CommandDescriptor:
    return CommandDescriptor(
        title=action.name,
        perform=action.callback,
        detail=action.description,
        icon=action.icon,
        keystroke=action.keystroke,
    )


class ActionCommandSource(CommandSource):
    """Exposes a list of actions as commands."""

    def __init__(self, actions: Iterable[Action]):
        self._actions = list(actions)

    def add(self, action: Action) -> None:
        self._actions.append(action)

    def get_commands(self) -> List[CommandDescriptor]:
        return [to_command(action) for action in self._actions]


def filter_by_title(
    items: Iterable[CommandDescriptor],
    query: str,
    limit: Optional[int] = None,
) -> List[CommandDescriptor]:
    """Keep commands whose title contains every whitespace separated query word.

    Matching is case-insensitive substring ("contains"); a blank query keeps
    everything. At most ``limit`` commands are returned.
    """
    words = [word.upper() for word in (query or "").split()]
    matches: List[CommandDescriptor] = []
    for command in items:
        title = command.title.upper()
        if all(word in title for word in words):
            matches.append(command)
            if limit is not None and len(matches) >= limit:
                break
    return matches


class CommandAggregator:
    """Treats many command sources as one, in registration order."""

    def __init__(self, result_limit: Optional[int] = DEFAULT_RESULT_LIMIT):
        self.result_limit = result_limit
        self._sources: List[CommandSource] = []
        self._mode_sources: Dict[DocumentMode, List[CommandSource]] = {}

    def register(self, source: CommandSource, mode: Optional[Union[DocumentMode, str]] = None) -> None:
        """Register a source for every document, or only for documents of ``mode``.

        Raises ValueError for a mode that names no ``DocumentMode``.
        """
        if mode is None:
            self._sources.append(source)
            return
        resolved = DocumentMode.lookup(mode)
        if resolved is None:
            raise ValueError(f"Unknown document mode: {mode!r}")
        self._mode_sources.setdefault(resolved, []).append(source)

    def unregister(self, source: CommandSource) -> None:
        if source in self._sources:
            self._sources.remove(source)
        for sources in self._mode_sources.values():
            if source in sources:
                sources.remove(source)

    def sources(self, mode: Optional[Union[DocumentMode, str]] = None) -> List[CommandSource]:
        """Global sources followed by those registered for ``mode``."""
        result = list(self._sources)
        if mode is None:
            return result
        resolved = DocumentMode.lookup(mode)
        if resolved is None:
            logger.warning("commands.mode.unknown", mode=str(mode))
            return result
        result.extend(self._mode_sources.get(resolved, []))
        return result

    def collect(
        self,
        sources: Optional[Sequence[CommandSource]] = None,
        mode: Optional[Union[DocumentMode, str]] = None,
    ) -> List[CommandDescriptor]:
        """Poll each source once and concatenate the results.

        A source that raises is logged and contributes nothing.
        """
        polled = self.sources(mode) if sources is None else sources
        commands: List[CommandDescriptor] = []
        for source in polled:
            try:
                batch = list(source.get_commands())
            except Exception:
                logger.exception("commands.source.failed", source=type(source).__name__)
                continue
            commands.extend(batch)
        return commands

    def filter(
        self,
        items: Iterable[CommandDescriptor],
        query: str,
        limit: Optional[int] = None,
    ) -> List[CommandDescriptor]:
        return filter_by_title(items, query, self.result_limit if limit is None else limit)

    def search(self, query: str = "", mode: Optional[Union[DocumentMode, str]] = None) -> List[CommandDescriptor]:
        return self.filter(self.collect(mode=mode), query)


# Document oriented sources --------------------------------------------------------------

OpenFileFn = Callable[[Path], None]


class FileOpenCommandSource(CommandSource):
    """Commands to open each file or folder the file tree currently knows about."""

    def __init__(
        self,
        list_files: Callable[[], Iterable[Path]],
        open_file: OpenFileFn,
        messages,
        platform,
    ):
        self._list_files = list_files
        self._open_file = open_file
        self._messages = messages
        self._platform = platform

    def get_commands(self) -> List[CommandDescriptor]:
        from ..runtime.messages import MsgKey

        commands: List[CommandDescriptor] = []
        for path in self._list_files():
            path = Path(path)
            is_dir = path.is_dir()
            label = self._messages.get(MsgKey.OPEN_FOLDER if is_dir else MsgKey.OPEN_FILE)
            commands.append(
                CommandDescriptor(
                    title=f"{label}: {path.name}",
                    perform=self._opener(path, is_dir),
                    detail=str(path.absolute()),
                    icon=Icon.FOLDER if is_dir else Icon.FILE,
                    title_additional=str(path.absolute().parent),
                )
            )
        return commands

    def _opener(self, path: Path, is_dir: bool) -> Callable[[], None]:
        if is_dir:
            return lambda: self._platform.open_path(path)
        return lambda: self._open_file(path)


class RecentDocumentsCommandSource(CommandSource):
    """Commands to reopen recently used documents, most recent first."""

    def __init__(self, persister, open_file: OpenFileFn, messages):
        self._persister = persister
        self._open_file = open_file
        self._messages = messages

    def get_commands(self) -> List[CommandDescriptor]:
        from ..runtime.messages import MsgKey

        label = self._messages.get(MsgKey.OPEN_RECENT)
        commands: List[CommandDescriptor] = []
        for raw in self._persister.recent_file_paths():
            path = Path(raw)
            commands.append(
                CommandDescriptor(
                    title=f"{label}: {path.name}",
                    perform=lambda path=path: self._open_file(path),
                    detail=raw,
                    icon=Icon.RECENT,
                    title_additional=str(path.parent),
                )
            )
        return commands
