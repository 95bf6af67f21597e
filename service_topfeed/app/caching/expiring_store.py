"""
In-memory key/value store with per-entry expiry.
"""

import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Hashable, Optional, Tuple, Union

from feed_shared.logging import get_logger


TTL = Union[timedelta, float, int]


class ExpiringStore:
    """Process-local cache where every entry carries its own absolute expiry.

    Reads after expiry behave as a miss. Entries are never evicted for
    capacity. Expired ones are dropped when read, on :meth:`purge_expired`,
    and by a sweep that :meth:`set` runs at most once per ``scan_interval``
    seconds, so keys that are never read again do not pile up. All
    operations hold a lock, so overlapping requests (coroutines or threads)
    always observe a whole entry.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, scan_interval: TTL = 60.0):
        self._clock = clock
        self._scan_interval = _to_seconds(scan_interval)
        self._last_scan = clock()
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self._lock = threading.Lock()
        self.logger = get_logger("topfeed.store")

    def try_get(self, key: Hashable) -> Tuple[Any, bool]:
        """Return ``(value, True)`` for a live entry, else ``(None, False)``."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False

            value, expires_at = entry
            if now >= expires_at:
                del self._entries[key]
                return None, False

            return value, True

    def set(self, key: Hashable, value: Any, ttl: TTL) -> None:
        """Store ``value`` under ``key`` until now + ``ttl``, replacing any prior entry."""
        seconds = _to_seconds(ttl)
        if seconds <= 0:
            raise ValueError(f"ttl must be positive, got {seconds}")

        now = self._clock()
        swept = 0
        with self._lock:
            self._entries[key] = (value, now + seconds)
            if now - self._last_scan >= self._scan_interval:
                swept = self._remove_expired(now)

        self.logger.debug("Cached value", key=key, ttl_seconds=seconds)
        if swept:
            self.logger.info("Swept expired cache entries", count=swept)

    def expires_at(self, key: Hashable) -> Optional[float]:
        """Absolute expiry of a stored entry on this store's clock, or None."""
        with self._lock:
            entry = self._entries.get(key)
        return entry[1] if entry else None

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            removed = self._remove_expired(now)

        if removed:
            self.logger.info("Purged expired cache entries", count=removed)
        return removed

    def stats(self) -> Dict[str, int]:
        """Entry counts for diagnostics."""
        now = self._clock()
        with self._lock:
            total = len(self._entries)
            live = sum(1 for _, expires_at in self._entries.values() if now < expires_at)
        return {"entries": total, "live_entries": live}

    def _remove_expired(self, now: float) -> int:
        # Caller holds the lock.
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        self._last_scan = now
        return len(expired)


def _to_seconds(ttl: TTL) -> float:
    return ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
