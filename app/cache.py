"""In-process TTL store for upstream responses.

Freshness is checked lazily on read; stale entries stay in place until the
same key is written again. The key space is the small set of proxied
endpoints, so nothing is ever evicted. Resets when the process restarts.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    stored_at: float

    def is_fresh(self, ttl: float, now: float) -> bool:
        return now - self.stored_at < ttl


class CacheStore:
    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._lock = RLock()
        self._data: Dict[str, CacheEntry] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[CacheEntry]:
        now = self._clock()
        with self._lock:
            entry = self._data.get(key)
        if entry is None or not entry.is_fresh(self._ttl, now):
            return None
        return entry

    def put(self, key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(key=key, payload=payload, stored_at=self._clock())
        with self._lock:
            self._data[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
