"""Result types returned by the token lifecycle manager."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RenewOutcome(str, Enum):
    """Which collection a renew call found the token in."""

    RENEWED_LEASE = "renewed_lease"
    RENEWED_POOL_SLOT = "renewed_pool_slot"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class RenewResult:
    """
    Tagged result of renew().

    Truthy when the token was found (in either collection), so callers that
    only care about "still alive?" can branch on it directly.

    Attributes:
        outcome: Which branch applied
        token: The token that was renewed (or looked up)
        expires_at: New deadline in epoch milliseconds, None when not found
    """

    outcome: RenewOutcome
    token: str
    expires_at: Optional[float] = None

    def __bool__(self) -> bool:
        return self.outcome is not RenewOutcome.NOT_FOUND

    @property
    def is_lease(self) -> bool:
        return self.outcome is RenewOutcome.RENEWED_LEASE


@dataclass(frozen=True)
class ReclaimReport:
    """Counts from one sweep iteration."""

    recycled: int = 0
    purged: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.recycled or self.purged)


@dataclass(frozen=True)
class PoolStats:
    """Point-in-time sizes of the pool and the lease table."""

    pool_size: int
    leased: int
    max_tokens: int

    @property
    def total(self) -> int:
        return self.pool_size + self.leased
