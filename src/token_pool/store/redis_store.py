"""Redis sorted-set implementation of the ordered lease store."""

from typing import Any, Iterable, Optional, Tuple

from loguru import logger
from redis import asyncio as aioredis

from ..errors import StoreUnavailableError


class RedisLeaseStore:
    """
    OrderedLeaseStore backed by Redis sorted sets.

    Each method maps to a single Redis command, so each is atomic on the
    server. Connection failures and timeouts are raised as
    StoreUnavailableError; the client's own socket timeouts bound every call.
    """

    def __init__(self, redis: aioredis.Redis):
        """
        Initialize the store.

        Args:
            redis: Async Redis client created with decode_responses=True
        """
        self._redis = redis

    async def _call(self, command: str, *args: Any, **kwargs: Any) -> Any:
        try:
            return await getattr(self._redis, command)(*args, **kwargs)
        except (aioredis.ConnectionError, aioredis.TimeoutError) as e:
            logger.error(f"Redis connection failed in {command}: {e}")
            raise StoreUnavailableError(f"Redis unavailable during {command}: {e}") from e

    async def add(self, collection: str, score: float, member: str) -> None:
        await self._call("zadd", collection, {member: score})

    async def add_many(
        self, collection: str, entries: Iterable[Tuple[float, str]]
    ) -> None:
        mapping = {member: score for score, member in entries}
        if not mapping:
            return
        await self._call("zadd", collection, mapping)

    async def update(self, collection: str, score: float, member: str) -> bool:
        # XX never inserts; CH counts a changed score, so 0 is either absent
        # or already at this score
        if await self._call("zadd", collection, {member: score}, xx=True, ch=True):
            return True
        return await self.score(collection, member) == float(score)

    async def pop_min(self, collection: str) -> Optional[Tuple[str, float]]:
        popped = await self._call("zpopmin", collection)
        if not popped:
            return None
        member, score = popped[0]
        return member, float(score)

    async def range_by_score(
        self, collection: str, min_score: float, max_score: float
    ) -> list[str]:
        return list(await self._call("zrangebyscore", collection, min_score, max_score))

    async def remove(self, collection: str, *members: str) -> int:
        if not members:
            return 0
        return int(await self._call("zrem", collection, *members))

    async def remove_range_by_score(
        self, collection: str, min_score: float, max_score: float
    ) -> int:
        return int(
            await self._call("zremrangebyscore", collection, min_score, max_score)
        )

    async def score(self, collection: str, member: str) -> Optional[float]:
        value = await self._call("zscore", collection, member)
        return None if value is None else float(value)

    async def count(self, collection: str) -> int:
        return int(await self._call("zcard", collection))
