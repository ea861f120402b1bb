"""In-memory TTL cache for extracted payloads, keyed by URL.

Entries are stored as ``(value, expires_at)`` pairs against a monotonic
clock.  Expired entries are dropped lazily when they are read, and a sweep
over the whole mapping runs at most once per ``check_period`` seconds,
triggered by ordinary ``get``/``set`` traffic.

One instance is created per process (see
:func:`page_retrieval.retrieval.dispatcher.open_page_retriever`) and shared by
every retrieval; tests create a fresh one each.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class PayloadCache:
    """TTL mapping from URL to extracted payload string.

    Args:
        ttl: Seconds an entry stays valid after it was set.
        check_period: Minimum seconds between full expiry sweeps.
        clock: Monotonic time source.  Injected by tests.
    """

    def __init__(
        self,
        ttl: float = 36000.0,
        check_period: float = 120.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.check_period = check_period
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def get(self, url: str) -> str | None:
        """Return the cached payload for ``url``, or ``None`` if absent or expired."""
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)
            entry = self._entries.get(url)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= now:
                del self._entries[url]
                return None
            return value

    def set(self, url: str, value: str) -> None:
        """Store ``value`` for ``url``, replacing any previous entry and its expiry."""
        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)
            self._entries[url] = (value, now + self.ttl)

    def delete(self, url: str) -> bool:
        """Remove ``url``; returns whether an entry was present."""
        with self._lock:
            return self._entries.pop(url, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def sweep(self) -> int:
        """Drop every expired entry now and return how many were removed."""
        with self._lock:
            return self._sweep(self._clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.get(url) is not None

    # -- internals (caller holds the lock) ------------------------------

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self.check_period:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        expired = [url for url, (_, expires_at) in self._entries.items() if expires_at <= now]
        for url in expired:
            del self._entries[url]
        self._last_sweep = now
        if expired:
            logger.debug("retrieval: cache sweep evicted %d entries", len(expired))
        return len(expired)
