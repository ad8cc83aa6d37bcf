"""Keyboard selection over an ordered list of completions or commands."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

HighlightListener = Callable[[Optional[T]], None]


class SelectionState(str, Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    DISMISSED = "dismissed"


class SelectionController(Generic[T]):
    """Tracks which item of a list is highlighted.

    ``move_by``, ``commit`` and ``select`` are no-ops unless the controller is
    ACTIVE; ``commit`` then returns None. Nothing here raises.

    The listener is called once for every change of the highlighted item,
    with the new item or None.
    """

    def __init__(self, listener: Optional[HighlightListener] = None):
        self._items: List[T] = []
        self._index: Optional[int] = None
        self._state = SelectionState.EMPTY
        self._listener = listener

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def items(self) -> List[T]:
        return list(self._items)

    @property
    def highlighted_index(self) -> Optional[int]:
        return self._index

    @property
    def highlighted(self) -> Optional[T]:
        if self._index is None:
            return None
        return self._items[self._index]

    def set_listener(self, listener: Optional[HighlightListener]) -> None:
        self._listener = listener

    def set_items(self, items: Sequence[T]) -> None:
        previous = self.highlighted
        self._items = list(items)
        if self._items:
            self._state = SelectionState.ACTIVE
            self._index = 0
        else:
            self._state = SelectionState.EMPTY
            self._index = None
        if previous is not self.highlighted:
            self._notify()

    def move_by(self, delta: int) -> None:
        if self._state is not SelectionState.ACTIVE:
            return
        index = min(max(self._index + delta, 0), len(self._items) - 1)
        if index != self._index:
            self._index = index
            self._notify()

    def move_up(self) -> None:
        self.move_by(-1)

    def move_down(self) -> None:
        self.move_by(1)

    def select(self, item: T) -> None:
        """Highlight ``item`` if it is in the list."""
        if self._state is not SelectionState.ACTIVE or item not in self._items:
            return
        index = self._items.index(item)
        if index != self._index:
            self._index = index
            self._notify()

    def commit(self) -> Optional[T]:
        """Return the highlighted item, leaving the state unchanged."""
        if self._state is not SelectionState.ACTIVE:
            return None
        return self.highlighted

    def cancel(self) -> None:
        had_highlight = self._index is not None
        self._state = SelectionState.DISMISSED
        self._index = None
        if had_highlight:
            self._notify()

    @property
    def dismissed(self) -> bool:
        return self._state is SelectionState.DISMISSED

    def _notify(self) -> None:
        if self._listener is not None:
            self._listener(self.highlighted)
