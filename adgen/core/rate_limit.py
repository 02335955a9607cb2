"""Rate limiting dependency for FastAPI routes.

This module wires the sliding-window limiter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Swap-friendly: the key-value store lives behind an abstract interface.
- Fail-open: a missing or failing store never blocks the product; the limiter
  is a cost-control measure in front of a paid upstream call.

Rate limiting strategy:
- Sliding window per client IP, taken from a trusted forwarded-IP header.
- If the header is absent, every such request shares the "unknown" key.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from adgen.adapters.rate_limit.base import AbstractKeyValueStore, AbstractRateLimiter
from adgen.adapters.rate_limit.in_memory import InMemoryKeyValueStore
from adgen.adapters.rate_limit.sliding_window import (
    SlidingWindowRateLimiter,
    hash_limiter_key,
)
from adgen.core.config import settings
from adgen.core.errors import ConfigurationAppError, StoreAppError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"
SUPPORTED_STORES = ("memory", "none")

_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, str] | None = None


def create_store(backend: str) -> AbstractKeyValueStore | None:
    """Instantiate the configured rate record store.

    Args:
        backend: Store name from settings ("memory" or "none").

    Returns:
        A store instance, or None when no store is configured.

    Raises:
        ConfigurationAppError: If the backend name is unknown.
    """
    backend = backend.lower().strip()
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend in ("none", ""):
        return None

    raise ConfigurationAppError(
        code="rate_limit_unknown_store",
        message=f"Unknown rate limit store: '{backend}'. Supported stores: memory, none",
    )


def store_backend_name() -> str:
    """Name of the store the limiter actually runs on, for health reporting."""

    if not settings.app.rate_limit_enabled:
        return "disabled"
    backend = settings.app.rate_limit_store.lower().strip()
    return backend if backend in SUPPORTED_STORES else "none"


def get_rate_limiter() -> AbstractRateLimiter:
    """Return a process-wide rate limiter instance.

    The instance is cached in-module so the in-memory store keeps its records
    across requests. If configuration changes (primarily in tests), the
    limiter is rebuilt. An unknown store backend leaves the limiter without a
    store, so it admits every request.

    Returns:
        AbstractRateLimiter: Configured limiter instance.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
        settings.app.rate_limit_store,
    )

    if _limiter is None or _limiter_config != config:
        try:
            store = create_store(settings.app.rate_limit_store)
        except ConfigurationAppError as exc:
            logger.error(
                "rate_limit.store_unavailable",
                extra={
                    "backend": settings.app.rate_limit_store,
                    "error_code": exc.code,
                    "policy": "fail_open",
                },
            )
            store = None
        else:
            if store is None:
                logger.warning(
                    "rate_limit.store_unavailable",
                    extra={"backend": settings.app.rate_limit_store, "policy": "fail_open"},
                )
        _limiter = SlidingWindowRateLimiter(
            store,
            limit=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )
        _limiter_config = config

    return _limiter


def reset_rate_limiter() -> None:
    """Drop the cached limiter so the next request builds a fresh one."""

    global _limiter, _limiter_config
    _limiter = None
    _limiter_config = None


def get_client_identifier(request: Request) -> str:
    """Extract the client identifier from the trusted forwarded-IP header.

    Args:
        request: FastAPI request.

    Returns:
        str: First address listed in the header, or "unknown" when absent.
    """

    raw = request.headers.get(settings.app.client_ip_header, "")
    client_ip = raw.split(",")[0].strip()
    return client_ip or UNKNOWN_CLIENT


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the sliding-window limit.

    When enabled, records one admitted request for the caller. If the caller
    already used up the window, raises HTTP 429 with a Retry-After hint equal
    to the window length. Store failures are logged and the request is let
    through.

    Args:
        request: FastAPI request.

    Raises:
        HTTPException: 429 Too Many Requests when the rate limit is exceeded.
    """

    if not settings.app.rate_limit_enabled:
        return

    limiter = get_rate_limiter()
    key = f"ip:{get_client_identifier(request)}"
    key_hash = hash_limiter_key(key)
    window_s = settings.app.rate_limit_window_seconds

    try:
        decision = await limiter.check(key)
    except StoreAppError as exc:
        logger.warning(
            "rate_limit.store_error",
            extra={
                "key_hash": key_hash,
                "error_code": exc.code,
                "error_message": exc.message,
                "policy": "fail_open",
            },
        )
        return
    except Exception as exc:
        logger.error(
            "rate_limit.store_error",
            extra={
                "key_hash": key_hash,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
                "policy": "fail_open",
            },
        )
        return

    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": decision.limit,
                "remaining": decision.remaining,
                "window_s": window_s,
            },
        )
        return

    retry_after = decision.retry_after_seconds or window_s
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": decision.limit,
            "remaining": decision.remaining,
            "window_s": window_s,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {"Retry-After": str(retry_after)}
    if settings.app.rate_limit_include_headers:
        headers["X-RateLimit-Limit"] = str(decision.limit)
        headers["X-RateLimit-Remaining"] = str(decision.remaining)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Try again later.",
        headers=headers,
    )
