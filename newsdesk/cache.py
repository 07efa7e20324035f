from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional

from .models import CacheEntry, RequestKey, ResultSet

DEFAULT_TTL_SEC = 30 * 60


class RequestCache:
    """
    Process-local memo of resolved first pages, keyed by RequestKey.

    Expired entries are treated as misses but never purged. Concurrent misses for
    the same key may both compute, and the last put() wins.
    """

    def __init__(self, *, ttl_sec: float = DEFAULT_TTL_SEC, clock: Callable[[], float] = time.time) -> None:
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._entries: Dict[RequestKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: RequestKey) -> Optional[ResultSet]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_sec:
            return None
        return entry.data

    def put(self, key: RequestKey, data: ResultSet) -> None:
        entry = CacheEntry(key=key, data=data, timestamp=self._clock())
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
