"""Unit tests for the in-memory key-value store."""

from unittest.mock import Mock

import pytest

from adgen.adapters.rate_limit.in_memory import InMemoryKeyValueStore


@pytest.mark.asyncio
async def test_get_missing_key_returns_none() -> None:
    store = InMemoryKeyValueStore()

    assert await store.get("missing") is None


@pytest.mark.asyncio
async def test_put_then_get_before_expiry() -> None:
    clock = Mock(return_value=100.0)
    store = InMemoryKeyValueStore(clock=clock)

    await store.put("k", "[100]", expire_after_seconds=60)
    clock.return_value = 159.0

    assert await store.get("k") == "[100]"


@pytest.mark.asyncio
async def test_entry_expires_after_ttl() -> None:
    clock = Mock(return_value=100.0)
    store = InMemoryKeyValueStore(clock=clock)

    await store.put("k", "[100]", expire_after_seconds=60)
    clock.return_value = 160.0

    assert await store.get("k") is None


@pytest.mark.asyncio
async def test_put_refreshes_expiry() -> None:
    clock = Mock(return_value=100.0)
    store = InMemoryKeyValueStore(clock=clock)

    await store.put("k", "[100]", expire_after_seconds=60)
    clock.return_value = 150.0
    await store.put("k", "[100, 150]", expire_after_seconds=60)
    clock.return_value = 200.0

    assert await store.get("k") == "[100, 150]"


@pytest.mark.asyncio
async def test_put_purges_other_expired_entries() -> None:
    clock = Mock(return_value=100.0)
    store = InMemoryKeyValueStore(clock=clock)

    await store.put("old", "[100]", expire_after_seconds=10)
    clock.return_value = 200.0
    await store.put("new", "[200]", expire_after_seconds=10)

    assert len(store) == 1


@pytest.mark.asyncio
async def test_invalid_ttl_rejected() -> None:
    store = InMemoryKeyValueStore()

    with pytest.raises(ValueError):
        await store.put("k", "[]", expire_after_seconds=0)


@pytest.mark.asyncio
async def test_clear_removes_everything() -> None:
    store = InMemoryKeyValueStore()
    await store.put("a", "[1]", expire_after_seconds=60)
    await store.put("b", "[2]", expire_after_seconds=60)

    store.clear()

    assert len(store) == 0
    assert await store.get("a") is None
