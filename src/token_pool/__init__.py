"""Token pool - shared, Redis-coordinated pool of leasable opaque tokens."""

__version__ = "0.1.0"

from .errors import (
    CapacityExceededError,
    InvalidCountError,
    PoolCorruptionError,
    StoreUnavailableError,
    TokenPoolError,
)
from .tokens import RenewOutcome, RenewResult, TokenLifecycleManager

__all__ = [
    "CapacityExceededError",
    "InvalidCountError",
    "PoolCorruptionError",
    "RenewOutcome",
    "RenewResult",
    "StoreUnavailableError",
    "TokenLifecycleManager",
    "TokenPoolError",
    "__version__",
]
