"""Recently used documents.

``RecencyCache`` keeps the newest entry first. ``RecentDocumentPersister``
writes the list through a persistence gateway every time a document is
opened or closed, so read any previously saved list before events start
arriving.
"""

from collections import deque
from pathlib import Path
from typing import Deque, Generic, Iterable, List, Optional, TypeVar, Union

import structlog

from .persistence import PATH_SPLIT, Key, PersistenceGateway, PersistenceKey

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_CAPACITY = 9


class RecencyCache(Generic[T]):
    """Bounded, most-recent-first buffer that collapses duplicates."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._items: Deque[T] = deque()

    def add(self, item: T) -> None:
        """Move ``item`` to the front, evicting the oldest entry if full."""
        if item in self._items:
            self._items.remove(item)
        elif len(self._items) == self.capacity:
            self._items.pop()
        self._items.appendleft(item)

    def add_all(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def get_all(self) -> List[T]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._items


def parse_paths(raw: Optional[str]) -> List[str]:
    """Split a persisted path list, dropping blank segments."""
    if not raw or not isinstance(raw, str):
        return []
    return [path for path in raw.split(PATH_SPLIT) if path.strip()]


def join_paths(paths: Iterable[str]) -> str:
    return PATH_SPLIT.join(paths)


class RecentDocumentPersister:
    """Saves the recent document list and last opened folder on every change."""

    def __init__(
        self,
        persistence: PersistenceGateway,
        recent_key: Key = PersistenceKey.RECENT_DOCS,
        folder_key: Key = PersistenceKey.LAST_OPENED_FOLDER,
        capacity: int = DEFAULT_CAPACITY,
    ):
        if persistence is None:
            raise ValueError("persistence is required")
        self._persistence = persistence
        self._recent_key = recent_key
        self._folder_key = folder_key
        self._recent: RecencyCache[str] = RecencyCache(capacity)
        # stored newest first, so replay oldest first to keep the order
        self._recent.add_all(reversed(parse_paths(persistence.get(recent_key, ""))))

    def recent_file_paths(self) -> List[str]:
        return self._recent.get_all()

    def doc_added(self, path: Optional[Union[str, Path]]) -> None:
        self._record(path)

    def doc_closed(self, path: Optional[Union[str, Path]]) -> None:
        self._record(path)

    def folder_selected(self, folder: Optional[Union[str, Path]]) -> None:
        value = "" if folder is None else str(Path(folder).expanduser().absolute())
        self._persistence.put(self._folder_key, value)

    def get_open_folder(self) -> Optional[Path]:
        """Most recently opened folder, or None if unset or no longer a directory."""
        raw = self._persistence.get(self._folder_key, "")
        if not raw:
            return None
        folder = Path(raw)
        return folder if folder.is_dir() else None

    def _record(self, path: Optional[Union[str, Path]]) -> None:
        if path is not None:
            self._recent.add(str(path))
        self._persist()

    def _persist(self) -> None:
        value = join_paths(self._recent.get_all())
        self._persistence.put(self._recent_key, value)
        logger.debug("recent.persisted", count=len(self._recent))
