"""Token lifecycle: issue, lease, renew, release, revoke and reclaim."""

from .manager import TokenLifecycleManager
from .models import PoolStats, ReclaimReport, RenewOutcome, RenewResult

__all__ = [
    "PoolStats",
    "ReclaimReport",
    "RenewOutcome",
    "RenewResult",
    "TokenLifecycleManager",
]
