"""
Snapshot store for the home screen.

Holds exactly one current HomeSnapshot. Updates are read-modify-write under a
lock, and every subscriber receives each new value in the order updates were
applied.
"""

import asyncio
import logging
import threading
from typing import AsyncIterator, Callable, List, Optional, Tuple

from companion.data_models.home import HomeSnapshot

logger = logging.getLogger(__name__)

_Subscription = Tuple[asyncio.AbstractEventLoop, asyncio.Queue]


class SnapshotStore:
    """Concurrency-safe holder of the current home snapshot."""

    def __init__(self, initial: Optional[HomeSnapshot] = None):
        self._current = initial if initial is not None else HomeSnapshot()
        self._lock = threading.Lock()
        self._subscriptions: List[_Subscription] = []

    def current(self) -> HomeSnapshot:
        """Latest snapshot, without blocking."""
        return self._current

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def update(self, func: Callable[[HomeSnapshot], HomeSnapshot]) -> HomeSnapshot:
        """
        Replace the current snapshot with func(current) and notify subscribers.

        Args:
            func: Pure function building the next snapshot from the latest one

        Returns:
            The snapshot that became current
        """
        with self._lock:
            new_snapshot = func(self._current)
            self._current = new_snapshot

            # Publish under the lock so emission order matches application order
            for loop, queue in self._subscriptions:
                self._deliver(loop, queue, new_snapshot)

        return new_snapshot

    async def subscribe(self) -> AsyncIterator[HomeSnapshot]:
        """
        Stream the current snapshot followed by every later update.

        Each call is an independent stream; closing it unregisters it.
        """
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        subscription = (loop, queue)

        with self._lock:
            queue.put_nowait(self._current)
            self._subscriptions.append(subscription)

        try:
            while True:
                yield await queue.get()
        finally:
            with self._lock:
                if subscription in self._subscriptions:
                    self._subscriptions.remove(subscription)

    @staticmethod
    def _deliver(loop: asyncio.AbstractEventLoop, queue: asyncio.Queue, snapshot: HomeSnapshot):
        """Hand a snapshot to one subscriber from whichever thread is updating."""
        # Always go through the loop's callback queue so same-thread and
        # cross-thread updates arrive in the order they were applied
        if loop.is_closed():
            logger.debug("Dropping snapshot for subscriber on a closed event loop")
            return
        loop.call_soon_threadsafe(queue.put_nowait, snapshot)
