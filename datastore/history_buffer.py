from __future__ import annotations

import logging
from collections import deque
from functools import lru_cache
from threading import Lock
from typing import Deque, Optional

from models.records import Reading
from settings import get_settings

logger = logging.getLogger(__name__)


class HistoryBuffer:
    """Fixed-capacity, insertion-ordered store of readings (oldest first)."""

    def __init__(self, capacity: int = 1000) -> None:
        if capacity <= 0:
            raise ValueError("History capacity must be a positive integer.")
        self._capacity = capacity
        self._entries: Deque[Reading] = deque()
        self._lock = Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def append(self, reading: Reading) -> Optional[Reading]:
        """Store ``reading`` and return the evicted entry, if any.

        The length check, eviction and append happen under one lock so
        concurrent writers can never push the buffer past capacity.
        """
        evicted: Optional[Reading] = None
        with self._lock:
            if len(self._entries) >= self._capacity:
                evicted = self._entries.popleft()
            self._entries.append(reading)
            size = len(self._entries)

        if evicted is not None:
            logger.debug(
                "History at capacity, evicted oldest reading",
                extra={"history_size": size, "evicted": evicted.timestamp.isoformat()},
            )
        return evicted

    def tail(self, limit: int) -> list[Reading]:
        """Return the newest ``limit`` entries in chronological order."""
        if limit <= 0:
            return []
        with self._lock:
            entries = list(self._entries)
        return entries[-limit:]

    def snapshot(self) -> list[Reading]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        with self._lock:
            removed = len(self._entries)
            self._entries = deque()
        return removed


@lru_cache
def build_default_history(capacity: Optional[int] = None) -> HistoryBuffer:
    settings = get_settings()
    return HistoryBuffer(capacity=settings.history_capacity if capacity is None else capacity)
