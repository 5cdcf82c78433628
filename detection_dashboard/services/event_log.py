# detection_dashboard/services/event_log.py
"""
Fixed-capacity, insertion-ordered event log shared by concurrent request threads.
Oldest entries are evicted first once capacity is reached.
One lock guards every read and write, so readers never see a half-applied append.
"""

import threading
from collections import deque
from itertools import islice
from typing import Callable, Generic, Optional, TypeVar

from detection_dashboard.config import settings

T = TypeVar("T")


class BoundedEventLog(Generic[T]):
    def __init__(self, capacity: int = settings.EVENT_LOG_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._items: deque = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(self, item: T) -> None:
        """Add to the tail; the deque drops the head once capacity is exceeded."""
        with self._lock:
            self._items.append(item)

    def snapshot(self) -> list[T]:
        """Independent copy of the log, oldest first."""
        with self._lock:
            return list(self._items)

    def recent(self, limit: int) -> list[T]:
        """Newest-first view of at most `limit` entries."""
        if limit <= 0:
            return []
        with self._lock:
            return list(islice(reversed(self._items), limit))

    def remove_first(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """Remove and return the oldest entry matching `predicate`, or None."""
        with self._lock:
            for index, item in enumerate(self._items):
                if predicate(item):
                    del self._items[index]
                    return item
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
