"""Request coalescing for concurrent identical verifications."""

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InFlightRegistry(Generic[T]):
    """Tracks one running task per fingerprint so concurrent callers share it.

    The entry is dropped as soon as the task settles, whatever the outcome.
    Callers should await the returned task through ``asyncio.shield`` so that a
    cancelled waiter never cancels the shared execution.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[T]] = {}
        self._lock = threading.Lock()
        self._started = 0
        self._joined = 0

    def get_or_start(
        self, key: str, producer: Callable[[], Awaitable[T]]
    ) -> tuple[asyncio.Task[T], bool]:
        """Return ``(task, started)``; ``started`` is False when joining."""
        with self._lock:
            task = self._tasks.get(key)
            if task is not None:
                self._joined += 1
                logger.debug("[IN-FLIGHT] Joining execution %s", key[:12])
                return task, False

            task = asyncio.ensure_future(producer())
            self._tasks[key] = task
            self._started += 1
            task.add_done_callback(lambda done, k=key: self._settle(k, done))
            logger.debug("[IN-FLIGHT] Started execution %s", key[:12])
            return task, True

    def _settle(self, key: str, task: asyncio.Task[T]) -> None:
        with self._lock:
            if self._tasks.get(key) is task:
                del self._tasks[key]

    def is_running(self, key: str) -> bool:
        with self._lock:
            return key in self._tasks

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def get_stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "in_flight": len(self._tasks),
                "started": self._started,
                "joined": self._joined,
            }
