"""
Schedule Cache
Process-local cache of month schedules keyed by (year, month)

Entries carry a content fingerprint used as the HTTP ETag. The cache never
sweeps in the background: entries expire lazily on read once older than the
TTL, and callers that mutate a month are responsible for invalidating it.
Storage stays the source of truth; in a multi-process deployment each worker
holds its own cache.
"""
import hashlib
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

CacheKey = Tuple[int, int]

DEFAULT_TTL_SECONDS = 60


def fingerprint(data: Any) -> str:
    """
    Deterministic short hash over a JSON-serializable value

    Returns a quoted string so it can be sent as an ETag header as-is.
    """
    payload = json.dumps(data, sort_keys=True, separators=(',', ':'), default=str)
    return '"' + hashlib.sha1(payload.encode('utf-8')).hexdigest()[:16] + '"'


@dataclass
class CacheEntry:
    data: Any
    etag: str
    fetched_at: float


class ScheduleCache:
    """
    In-memory month cache with a fixed time-to-live

    Args:
        ttl_seconds: Maximum age of an entry before it is treated as a miss
        clock: Monotonic time source (seconds), injectable for tests
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        """Fresh entry for the key, or None when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.fetched_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return entry

    def put(self, key: CacheKey, data: Any) -> CacheEntry:
        entry = CacheEntry(data=data, etag=fingerprint(data), fetched_at=self._clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def invalidate(self, key: CacheKey) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: CacheKey) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
