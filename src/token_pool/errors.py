"""Exception classes for the token pool."""


class TokenPoolError(Exception):
    """Base exception for all token pool errors."""


class InvalidCountError(TokenPoolError, ValueError):
    """Raised when issue() is asked for a non-positive number of tokens."""


class CapacityExceededError(TokenPoolError):
    """
    Raised when issuing would push the pool past its configured capacity.

    The check is best-effort: concurrent issuers can jointly overshoot the
    limit. Callers may retry with a smaller count.
    """

    def __init__(self, requested: int, current: int, limit: int):
        self.requested = requested
        self.current = current
        self.limit = limit
        super().__init__(
            f"Cannot generate more than {limit} tokens "
            f"(pool has {current}, requested {requested})"
        )


class StoreUnavailableError(TokenPoolError):
    """Raised when the backing store cannot be reached or timed out."""


class PoolCorruptionError(TokenPoolError):
    """Raised when a token is observed in both the pool and the lease table."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Token {token} is present in both pool and lease table")
