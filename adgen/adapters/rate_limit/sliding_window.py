"""Sliding-window rate limiter over an eventually consistent key-value store.

Each client identifier maps to a JSON array of epoch-second timestamps, one
per admitted request inside the retention horizon. A check reads the array,
drops timestamps that fell out of the trailing window, and either denies
(leaving the store untouched) or appends ``now`` and writes the array back
with a TTL equal to the window length.

The read and the write are two separate store calls with no lock or
compare-and-swap between them. Concurrent checks for the same key can both
see the same history and both be admitted, so the observed admitted count may
briefly exceed ``limit``. Likewise a slower writer can overwrite a longer
history with a shorter one. Limiting is best-effort.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Callable

from adgen.adapters.rate_limit.base import (
    AbstractKeyValueStore,
    AbstractRateLimiter,
    RateLimitDecision,
)

logger = logging.getLogger(__name__)


def hash_limiter_key(key: str) -> str:
    """Hash a limiter key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def parse_timestamps(raw: str | None) -> list[int] | None:
    """Decode a stored rate record.

    Args:
        raw: Serialized record as returned by the store, or None.

    Returns:
        The timestamp list, an empty list when ``raw`` is None, or None when
        the value is not a JSON array of integers.
    """
    if raw is None:
        return []

    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        return None

    if not isinstance(decoded, list):
        return None
    # bool is an int subclass but never a valid timestamp
    if not all(isinstance(ts, int) and not isinstance(ts, bool) for ts in decoded):
        return None
    return decoded


class SlidingWindowRateLimiter(AbstractRateLimiter):
    """Per-key sliding-window limiter with externalized state.

    The limiter itself keeps no per-key state; everything lives in ``store``.
    When no store is configured every check is admitted (fail-open).
    """

    def __init__(
        self,
        store: AbstractKeyValueStore | None,
        *,
        limit: int = 10,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Backing key-value store, or None when unavailable.
            limit: Maximum admitted requests per key within the window.
            window_seconds: Rolling window length in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")

        self._store = store
        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    @property
    def store(self) -> AbstractKeyValueStore | None:
        return self._store

    async def check(self, identifier: str, now: int | None = None) -> RateLimitDecision:
        """Decide whether a request from ``identifier`` is admitted.

        Performs one store read and, only when admitted, one store write.
        Denied attempts are never recorded.

        Args:
            identifier: Client identifier used as the store key.
            now: Current time in epoch seconds; the limiter clock when omitted.

        Returns:
            RateLimitDecision with the admission result.

        Raises:
            ValueError: If identifier is empty.
            StoreAppError: If the store read or write fails.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        if self._store is None:
            return RateLimitDecision(allowed=True, limit=self._limit, remaining=self._limit)

        if now is None:
            now = int(self._clock())
        window_start = now - self._window_seconds

        raw = await self._store.get(identifier)
        timestamps = parse_timestamps(raw)
        if timestamps is None:
            logger.warning(
                "rate_limit.corrupt_record",
                extra={"key_hash": hash_limiter_key(identifier)},
            )
            timestamps = []

        recent = [ts for ts in timestamps if ts > window_start]

        if len(recent) >= self._limit:
            return RateLimitDecision(
                allowed=False,
                limit=self._limit,
                remaining=0,
                retry_after_seconds=self._window_seconds,
            )

        recent.append(now)
        await self._store.put(
            identifier,
            json.dumps(recent),
            expire_after_seconds=self._window_seconds,
        )
        return RateLimitDecision(
            allowed=True,
            limit=self._limit,
            remaining=self._limit - len(recent),
        )
