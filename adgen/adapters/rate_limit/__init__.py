"""Rate limiting adapters.

A small abstraction layer: the sliding-window limiter only talks to a
key-value store through ``get``/``put`` with expiry, so the in-memory store
used locally can be replaced by any edge key-value service without changing
the API layer.
"""

from adgen.adapters.rate_limit.base import (
    AbstractKeyValueStore,
    AbstractRateLimiter,
    RateLimitDecision,
)
from adgen.adapters.rate_limit.in_memory import InMemoryKeyValueStore
from adgen.adapters.rate_limit.sliding_window import SlidingWindowRateLimiter

__all__ = [
    "AbstractKeyValueStore",
    "AbstractRateLimiter",
    "InMemoryKeyValueStore",
    "RateLimitDecision",
    "SlidingWindowRateLimiter",
]
