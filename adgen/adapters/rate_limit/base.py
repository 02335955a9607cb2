"""Rate limiter and backing store interfaces.

The HTTP layer depends on these abstractions (not the concrete
implementations) so the key-value backend can be swapped for any service
that offers ``get`` and ``put`` with an expiry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max admitted requests per window.
        remaining: Admissions left in the trailing window after this call.
        retry_after_seconds: Suggested wait time in seconds when denied.
    """

    allowed: bool
    limit: int
    remaining: int
    retry_after_seconds: int | None = None


class AbstractKeyValueStore(ABC):
    """Key-value collaborator holding serialized rate records.

    Read-after-write consistency is not assumed: a ``get`` issued right
    after a ``put`` (possibly from another edge location) may return an
    older value.
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the stored value for ``key`` or None when absent/expired.

        Raises:
            StoreAppError: If the backend cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    async def put(self, key: str, value: str, *, expire_after_seconds: int) -> None:
        """Store ``value`` under ``key``, expiring after the given seconds.

        Raises:
            StoreAppError: If the backend cannot be written.
        """
        raise NotImplementedError


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    async def check(self, identifier: str, now: int | None = None) -> RateLimitDecision:
        """Decide whether a request from ``identifier`` is admitted.

        Args:
            identifier: Client identifier (e.g., namespaced client IP).
            now: Current time in epoch seconds; the limiter clock when omitted.

        Returns:
            RateLimitDecision describing whether it was allowed.
        """
        raise NotImplementedError
