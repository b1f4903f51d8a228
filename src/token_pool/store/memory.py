"""In-process ordered store for single-instance runs and tests."""

from typing import Iterable, Optional, Tuple


class MemoryLeaseStore:
    """
    Dict-backed implementation of OrderedLeaseStore.

    No method awaits between reading and writing, so every call is atomic
    with respect to other coroutines on the same event loop. Ordering
    matches Redis: by score, then by member.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, float]] = {}

    def _get(self, collection: str) -> dict[str, float]:
        return self._collections.setdefault(collection, {})

    def _sorted(self, collection: str) -> list[Tuple[str, float]]:
        return sorted(self._get(collection).items(), key=lambda item: (item[1], item[0]))

    async def add(self, collection: str, score: float, member: str) -> None:
        self._get(collection)[member] = float(score)

    async def add_many(
        self, collection: str, entries: Iterable[Tuple[float, str]]
    ) -> None:
        target = self._get(collection)
        for score, member in entries:
            target[member] = float(score)

    async def update(self, collection: str, score: float, member: str) -> bool:
        target = self._get(collection)
        if member not in target:
            return False
        target[member] = float(score)
        return True

    async def pop_min(self, collection: str) -> Optional[Tuple[str, float]]:
        ordered = self._sorted(collection)
        if not ordered:
            return None
        member, score = ordered[0]
        del self._collections[collection][member]
        return member, score

    async def range_by_score(
        self, collection: str, min_score: float, max_score: float
    ) -> list[str]:
        return [
            member
            for member, score in self._sorted(collection)
            if min_score <= score <= max_score
        ]

    async def remove(self, collection: str, *members: str) -> int:
        target = self._get(collection)
        removed = 0
        for member in set(members):
            if target.pop(member, None) is not None:
                removed += 1
        return removed

    async def remove_range_by_score(
        self, collection: str, min_score: float, max_score: float
    ) -> int:
        doomed = await self.range_by_score(collection, min_score, max_score)
        return await self.remove(collection, *doomed)

    async def score(self, collection: str, member: str) -> Optional[float]:
        return self._get(collection).get(member)

    async def count(self, collection: str) -> int:
        return len(self._get(collection))
