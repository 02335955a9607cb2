"""In-memory key-value store with per-entry expiry.

Notes:
- Per-process only: running multiple workers gives each worker its own
  records, multiplying the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from adgen.adapters.rate_limit.base import AbstractKeyValueStore


@dataclass
class _StoredValue:
    value: str
    expires_at: float


class InMemoryKeyValueStore(AbstractKeyValueStore):
    """Process-local stand-in for an edge key-value namespace.

    Expired entries read as absent and are purged lazily on access.
    """

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        """Initialize the store.

        Args:
            clock: Time source function returning UNIX time in seconds.
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[str, _StoredValue] = {}

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired_locked()
            return len(self._entries)

    async def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                self._entries.pop(key, None)
                return None
            return entry.value

    async def put(self, key: str, value: str, *, expire_after_seconds: int) -> None:
        if expire_after_seconds < 1:
            raise ValueError("expire_after_seconds must be >= 1")

        with self._lock:
            self._purge_expired_locked()
            self._entries[key] = _StoredValue(
                value=value,
                expires_at=self._clock() + expire_after_seconds,
            )

    def clear(self) -> None:
        """Remove all entries."""
        with self._lock:
            self._entries.clear()

    def _purge_expired_locked(self) -> None:
        now = self._clock()
        expired = [k for k, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            self._entries.pop(key, None)
