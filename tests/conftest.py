"""Pytest fixtures and test utilities for the token pool test suite."""

import fakeredis
import pytest

from token_pool.config import TokenPoolSettings
from token_pool.store import MemoryLeaseStore, RedisLeaseStore
from token_pool.tokens import TokenLifecycleManager

# Arbitrary fixed epoch (ms) so deadlines are realistic and reproducible
START_MS = 1_700_000_000_000.0
_MAX_SCORE = 1e15


class FakeClock:
    """Manually advanced clock returning epoch milliseconds."""

    def __init__(self, start_ms: float = START_MS):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += seconds * 1000.0


# ============================================================================
# CLOCK / SETTINGS FIXTURES
# ============================================================================


@pytest.fixture
def clock():
    """Fake clock starting at START_MS."""
    return FakeClock()


@pytest.fixture
def settings():
    """
    Small, fast lifecycle settings.

    Returns:
        TokenPoolSettings with capacity 10, 60s leases, 300s keep-alive and
        a 10ms sweep interval
    """
    return TokenPoolSettings(
        max_tokens=10,
        token_lifetime=60,
        keep_alive_limit=300,
        cleanup_interval=0.01,
    )


# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
async def redis_client():
    """
    Provide an in-process fake Redis with a clean database.

    Yields:
        fakeredis async client (decode_responses=True)

    Cleanup:
        Flushes the fake server and closes the client
    """
    client = fakeredis.FakeAsyncRedis(decode_responses=True)
    try:
        await client.flushall()
        yield client
    finally:
        await client.flushall()
        await client.aclose()


@pytest.fixture
def memory_store():
    return MemoryLeaseStore()


@pytest.fixture(params=["memory", "redis"])
async def store(request, redis_client):
    """Each OrderedLeaseStore implementation in turn."""
    if request.param == "memory":
        return MemoryLeaseStore()
    return RedisLeaseStore(redis_client)


# ============================================================================
# MANAGER FIXTURES
# ============================================================================


@pytest.fixture
def manager(memory_store, settings, clock):
    """Manager on the in-memory store; the sweep is not started."""
    return TokenLifecycleManager(memory_store, settings, clock)


@pytest.fixture
async def redis_manager(redis_client, settings, clock):
    """Manager on the fake Redis store; the sweep is not started."""
    return TokenLifecycleManager(RedisLeaseStore(redis_client), settings, clock)


@pytest.fixture
async def running_manager(manager):
    """Manager with its background sweep running."""
    await manager.start()
    yield manager
    await manager.close()


# ============================================================================
# HELPER UTILITIES
# ============================================================================


async def members(store, collection: str) -> set[str]:
    """Return every member of a collection, regardless of score."""
    return set(await store.range_by_score(collection, 0, _MAX_SCORE))


async def assert_mutually_exclusive(store, settings) -> None:
    """No token may be in both the pool and the lease table."""
    pool = await members(store, settings.pool_key)
    leased = await members(store, settings.active_key)
    assert not pool & leased, f"Tokens in both collections: {pool & leased}"
