"""Centralized configuration for the token pool service."""

import os
from dataclasses import dataclass
from typing import Optional


class Config:
    """
    Token pool configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via environment variables. Durations are in
    seconds; store scores are epoch milliseconds.
    """

    @staticmethod
    def _parse_port(port_str: str) -> int:
        """Parse and validate port number from string."""
        try:
            port = int(port_str)
            if not (1 <= port <= 65535):
                raise ValueError(f"Port must be 1-65535, got {port}")
            return port
        except ValueError as e:
            raise ValueError(f"Invalid PORT environment variable: {e}")

    # ========================================================================
    # Server Configuration
    # ========================================================================
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = _parse_port.__func__(os.getenv("PORT", "3000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

    # ========================================================================
    # Redis Configuration
    # ========================================================================
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_MAX_CONNECTIONS: int = int(os.getenv("REDIS_MAX_CONNECTIONS", "100"))
    REDIS_SOCKET_CONNECT_TIMEOUT: float = float(
        os.getenv("REDIS_SOCKET_CONNECT_TIMEOUT", "2")
    )
    REDIS_SOCKET_TIMEOUT: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2"))
    REDIS_CONNECT_RETRIES: int = int(os.getenv("REDIS_CONNECT_RETRIES", "3"))
    REDIS_CONNECT_RETRY_DELAY: float = float(
        os.getenv("REDIS_CONNECT_RETRY_DELAY", "0.5")
    )
    REDIS_CONNECT_RETRY_MAX_DELAY: float = float(
        os.getenv("REDIS_CONNECT_RETRY_MAX_DELAY", "5")
    )

    # ========================================================================
    # Token Pool Configuration
    # ========================================================================
    POOL_KEY: str = os.getenv("POOL_KEY", "token_pool")
    ACTIVE_KEY: str = os.getenv("ACTIVE_KEY", "active_tokens")
    MAX_TOKENS: int = int(os.getenv("MAX_TOKENS", "10000"))
    TOKEN_LIFETIME: float = float(os.getenv("TOKEN_LIFETIME", "60"))  # 1 minute
    KEEP_ALIVE_LIMIT: float = float(os.getenv("KEEP_ALIVE_LIMIT", "300"))  # 5 minutes
    TOKEN_CLEANUP_INTERVAL: float = float(
        os.getenv("TOKEN_CLEANUP_INTERVAL", "1")
    )  # 1 second

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Checks:
        - Pool capacity and all durations are > 0
        - Pool and lease table keys are distinct
        - Redis settings are positive

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        errors = []

        if cls.MAX_TOKENS <= 0:
            errors.append(f"MAX_TOKENS must be > 0, got {cls.MAX_TOKENS}")

        for name in ("TOKEN_LIFETIME", "KEEP_ALIVE_LIMIT", "TOKEN_CLEANUP_INTERVAL"):
            value = getattr(cls, name)
            if value <= 0:
                errors.append(f"{name} must be > 0, got {value}")

        if cls.POOL_KEY == cls.ACTIVE_KEY:
            errors.append(
                f"POOL_KEY and ACTIVE_KEY must differ, both are '{cls.POOL_KEY}'"
            )

        if cls.TOKEN_LIFETIME > cls.KEEP_ALIVE_LIMIT:
            import warnings

            warnings.warn(
                f"TOKEN_LIFETIME ({cls.TOKEN_LIFETIME}s) exceeds KEEP_ALIVE_LIMIT "
                f"({cls.KEEP_ALIVE_LIMIT}s); leases will outlive pool slots."
            )

        # Validate Redis settings
        if cls.REDIS_MAX_CONNECTIONS <= 0:
            errors.append(
                f"REDIS_MAX_CONNECTIONS must be > 0, got {cls.REDIS_MAX_CONNECTIONS}"
            )
        if cls.REDIS_SOCKET_CONNECT_TIMEOUT <= 0:
            errors.append(
                "REDIS_SOCKET_CONNECT_TIMEOUT must be > 0, "
                f"got {cls.REDIS_SOCKET_CONNECT_TIMEOUT}"
            )
        if cls.REDIS_SOCKET_TIMEOUT <= 0:
            errors.append(
                f"REDIS_SOCKET_TIMEOUT must be > 0, got {cls.REDIS_SOCKET_TIMEOUT}"
            )
        if cls.REDIS_CONNECT_RETRIES <= 0:
            errors.append(
                f"REDIS_CONNECT_RETRIES must be > 0, got {cls.REDIS_CONNECT_RETRIES}"
            )

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True


@dataclass(frozen=True)
class TokenPoolSettings:
    """Snapshot of the lifecycle settings a manager runs with."""

    max_tokens: int = 10000
    token_lifetime: float = 60.0
    keep_alive_limit: float = 300.0
    cleanup_interval: float = 1.0
    pool_key: str = "token_pool"
    active_key: str = "active_tokens"

    def __post_init__(self) -> None:
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be > 0, got {self.max_tokens}")
        for name in ("token_lifetime", "keep_alive_limit", "cleanup_interval"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be > 0, got {value}")
        if self.pool_key == self.active_key:
            raise ValueError("pool_key and active_key must differ")

    @classmethod
    def from_config(cls) -> "TokenPoolSettings":
        """Build settings from the current Config values."""
        return cls(
            max_tokens=Config.MAX_TOKENS,
            token_lifetime=Config.TOKEN_LIFETIME,
            keep_alive_limit=Config.KEEP_ALIVE_LIMIT,
            cleanup_interval=Config.TOKEN_CLEANUP_INTERVAL,
            pool_key=Config.POOL_KEY,
            active_key=Config.ACTIVE_KEY,
        )
