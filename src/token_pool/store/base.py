"""Capability interface the lifecycle manager requires of its store."""

from typing import Iterable, Optional, Protocol, Tuple


class OrderedLeaseStore(Protocol):
    """
    Sorted-collection store shared by every manager instance.

    Each method must be individually atomic. Collections are addressed by
    name; members are token strings; scores are epoch milliseconds.
    """

    async def add(self, collection: str, score: float, member: str) -> None:
        """Insert member or update its score."""

    async def add_many(
        self, collection: str, entries: Iterable[Tuple[float, str]]
    ) -> None:
        """Insert or update several (score, member) pairs in one atomic call."""

    async def update(self, collection: str, score: float, member: str) -> bool:
        """Set the score of an existing member; return False if it is absent."""

    async def pop_min(self, collection: str) -> Optional[Tuple[str, float]]:
        """Remove and return the lowest-scored (member, score), or None if empty."""

    async def range_by_score(
        self, collection: str, min_score: float, max_score: float
    ) -> list[str]:
        """Return members with min_score <= score <= max_score, lowest first."""

    async def remove(self, collection: str, *members: str) -> int:
        """Remove the given members; return how many were present."""

    async def remove_range_by_score(
        self, collection: str, min_score: float, max_score: float
    ) -> int:
        """Remove members with min_score <= score <= max_score; return the count."""

    async def score(self, collection: str, member: str) -> Optional[float]:
        """Return the member's score, or None if absent."""

    async def count(self, collection: str) -> int:
        """Return the number of members in the collection."""
