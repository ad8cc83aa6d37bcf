"""Fire-and-forget queue for command actions and document edits.

Actions are queued rather than run inline so a slow one never holds up
classifying the next keystroke; the host drains the queue from its own loop.
"""

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class _Task:
    fn: Callable[[], None]
    label: str


class TaskDispatcher:
    """FIFO of pending actions, run one at a time by :meth:`run_pending`."""

    def __init__(self) -> None:
        self._queue: Deque[_Task] = deque()

    def submit(self, fn: Callable[[], None], label: str = "") -> None:
        self._queue.append(_Task(fn=fn, label=label or getattr(fn, "__name__", "task")))

    def pending(self) -> int:
        return len(self._queue)

    def run_pending(self) -> int:
        """Run every queued task; a failing task is logged and skipped."""
        ran = 0
        while self._queue:
            task = self._queue.popleft()
            ran += 1
            try:
                task.fn()
            except Exception:
                logger.exception("dispatch.task.failed", label=task.label)
        return ran


class RequestGate:
    """Generation counter for discarding stale asynchronous results."""

    def __init__(self) -> None:
        self._generation = 0

    def next(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, token: int) -> bool:
        return token == self._generation
