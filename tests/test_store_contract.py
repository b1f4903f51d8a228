"""
Contract tests for OrderedLeaseStore implementations.

Every test runs against MemoryLeaseStore and RedisLeaseStore (fakeredis):
- add()/score(): insert and update
- add_many(): bulk insert
- update(): rewrites scores of present members only
- pop_min(): lowest score first, ties by member
- range_by_score()/remove_range_by_score(): inclusive bounds
- remove(): conditional delete counts
"""

import pytest

pytestmark = [pytest.mark.unit]


@pytest.mark.asyncio
async def test_add_then_score(store):
    await store.add("pool", 10, "a")
    assert await store.score("pool", "a") == 10.0
    assert await store.score("pool", "missing") is None


@pytest.mark.asyncio
async def test_add_updates_existing_member(store):
    await store.add("pool", 10, "a")
    await store.add("pool", 25, "a")

    assert await store.score("pool", "a") == 25.0
    assert await store.count("pool") == 1


@pytest.mark.asyncio
async def test_update_only_touches_present_members(store):
    assert await store.update("pool", 10, "a") is False
    assert await store.count("pool") == 0

    await store.add("pool", 10, "a")
    assert await store.update("pool", 10, "a") is True
    assert await store.update("pool", 40, "a") is True
    assert await store.score("pool", "a") == 40.0


@pytest.mark.asyncio
async def test_add_many_inserts_all(store):
    await store.add_many("pool", [(1, "a"), (2, "b"), (3, "c")])
    assert await store.count("pool") == 3
    assert await store.score("pool", "b") == 2.0


@pytest.mark.asyncio
async def test_add_many_empty_is_noop(store):
    await store.add_many("pool", [])
    assert await store.count("pool") == 0


@pytest.mark.asyncio
async def test_pop_min_returns_lowest_score(store):
    await store.add_many("pool", [(30, "late"), (10, "early"), (20, "middle")])

    assert await store.pop_min("pool") == ("early", 10.0)
    assert await store.pop_min("pool") == ("middle", 20.0)
    assert await store.pop_min("pool") == ("late", 30.0)
    assert await store.pop_min("pool") is None


@pytest.mark.asyncio
async def test_pop_min_breaks_ties_by_member(store):
    await store.add_many("pool", [(5, "b"), (5, "a")])
    member, _ = await store.pop_min("pool")
    assert member == "a"


@pytest.mark.asyncio
async def test_range_by_score_is_inclusive_and_ordered(store):
    await store.add_many("active", [(1, "a"), (2, "b"), (3, "c"), (4, "d")])

    assert await store.range_by_score("active", 2, 3) == ["b", "c"]
    assert await store.range_by_score("active", 0, 100) == ["a", "b", "c", "d"]
    assert await store.range_by_score("active", 5, 9) == []


@pytest.mark.asyncio
async def test_range_by_score_does_not_mutate(store):
    await store.add("active", 1, "a")
    await store.range_by_score("active", 0, 10)
    assert await store.count("active") == 1


@pytest.mark.asyncio
async def test_remove_reports_only_present_members(store):
    await store.add_many("active", [(1, "a"), (2, "b")])

    assert await store.remove("active", "a") == 1
    assert await store.remove("active", "a") == 0
    assert await store.remove("active", "b", "ghost") == 1
    assert await store.remove("active") == 0
    assert await store.count("active") == 0


@pytest.mark.asyncio
async def test_remove_range_by_score(store):
    await store.add_many("pool", [(1, "a"), (2, "b"), (3, "c")])

    assert await store.remove_range_by_score("pool", 0, 2) == 2
    assert await store.range_by_score("pool", 0, 10) == ["c"]
    assert await store.remove_range_by_score("pool", 0, 2) == 0


@pytest.mark.asyncio
async def test_collections_are_independent(store):
    await store.add("pool", 1, "a")
    assert await store.score("active", "a") is None
    assert await store.count("active") == 0
