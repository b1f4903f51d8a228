"""Token lifecycle manager backed by an ordered lease store."""

import asyncio
import time
import uuid
from typing import Callable, Optional

from loguru import logger

from ..config import TokenPoolSettings
from ..errors import CapacityExceededError, InvalidCountError, PoolCorruptionError
from ..store.base import OrderedLeaseStore
from .models import PoolStats, ReclaimReport, RenewOutcome, RenewResult


def _epoch_ms() -> float:
    return time.time() * 1000.0


class TokenLifecycleManager:
    """
    Issues, leases, renews, releases and revokes tokens from a shared pool.

    Two sorted collections hold all durable state:
    - pool: available tokens scored by eligibility deadline
    - lease table: leased tokens scored by lease expiry

    Every operation is a composition of individually atomic store calls, so
    any number of manager instances may share one store without further
    coordination. A token is in at most one collection at a time; between
    the two calls of lease(), release() and the sweep it is briefly in
    neither. renew() only rewrites scores of members still present.

    Capacity:
    - issue() checks pool size then inserts. Concurrent issuers can jointly
      overshoot max_tokens; the limit is a soft bound.

    Sweep:
    - start() launches a background task that calls reclaim() every
      cleanup_interval seconds; close() cancels it.
    """

    def __init__(
        self,
        store: OrderedLeaseStore,
        settings: Optional[TokenPoolSettings] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the manager.

        Args:
            store: Ordered lease store shared by all instances
            settings: Lifecycle settings (defaults to Config values)
            clock: Returns the current time in epoch milliseconds
        """
        self._store = store
        self._settings = settings or TokenPoolSettings.from_config()
        self._clock = clock or _epoch_ms
        self._sweep_task: Optional[asyncio.Task] = None

    @property
    def settings(self) -> TokenPoolSettings:
        return self._settings

    @property
    def running(self) -> bool:
        """True while the background sweep task is alive."""
        return self._sweep_task is not None and not self._sweep_task.done()

    def _pool_deadline(self) -> float:
        return self._clock() + self._settings.keep_alive_limit * 1000.0

    def _lease_deadline(self) -> float:
        return self._clock() + self._settings.token_lifetime * 1000.0

    # ------------------------------------------------------------------
    # Lifecycle of the manager itself
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start the periodic sweep (no-op if already running)."""
        if self.running:
            return
        logger.debug("Initializing token service")
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def close(self) -> None:
        """Cancel the periodic sweep and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return
        task.cancel()
        # wait() leaves a cancellation of the caller free to propagate
        await asyncio.wait([task])
        logger.debug("Token sweep stopped")

    async def __aenter__(self) -> "TokenLifecycleManager":
        await self.start()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Service-facing operations
    # ------------------------------------------------------------------

    async def issue(self, count: int) -> list[str]:
        """
        Generate new tokens and add them to the pool.

        Args:
            count: Number of tokens to generate (must be > 0)

        Returns:
            The generated tokens

        Raises:
            InvalidCountError: If count <= 0
            CapacityExceededError: If the pool would exceed max_tokens
        """
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise InvalidCountError(f"count must be a positive integer, got {count!r}")

        logger.debug(f"Generating {count} new tokens")
        limit = self._settings.max_tokens
        current = await self._store.count(self._settings.pool_key)

        if current + count > limit:
            logger.warning(f"Cannot generate more than {limit} tokens.")
            raise CapacityExceededError(requested=count, current=current, limit=limit)

        tokens = [str(uuid.uuid4()) for _ in range(count)]
        deadline = self._pool_deadline()
        await self._store.add_many(
            self._settings.pool_key, [(deadline, token) for token in tokens]
        )

        logger.info(f"Generated {count} new tokens")
        return tokens

    async def lease(self) -> Optional[str]:
        """
        Lease the pool token closest to its eligibility deadline.

        Expired pool entries popped along the way are dropped.

        Returns:
            The leased token, or None if no token is available
        """
        logger.debug("Assigning a new token")

        while True:
            popped = await self._store.pop_min(self._settings.pool_key)
            if popped is None:
                logger.warning("No tokens are available in the pool")
                return None

            token, eligible_until = popped
            if eligible_until > self._clock():
                break
            logger.info(f"Dropped expired pool token {token}")

        await self._store.add(self._settings.active_key, self._lease_deadline(), token)
        logger.info(f"Assigned token {token}")
        return token

    async def renew(self, token: str) -> RenewResult:
        """
        Extend a token's deadline in whichever collection holds it.

        A leased token gets a fresh lease lifetime; a pool token gets a
        fresh keep-alive window. Each write only touches a token that is
        still present, so a release or sweep landing mid-call moves the
        renewal on to the pool branch instead of re-inserting the token.

        Args:
            token: The token to renew

        Returns:
            RenewResult tagged with the branch taken

        Raises:
            PoolCorruptionError: If the token is in both collections
        """
        logger.debug(f"Keeping token {token} alive")
        settings = self._settings

        deadline = self._lease_deadline()
        if await self._store.update(settings.active_key, deadline, token):
            # A release after our write moves the token out of the lease
            # table; only our own deadline still standing there means both.
            if (
                await self._store.score(settings.pool_key, token) is not None
                and await self._store.score(settings.active_key, token) == deadline
            ):
                logger.error(f"Token {token} found in both pool and lease table")
                raise PoolCorruptionError(token)

            logger.info(f"Kept token {token} alive")
            return RenewResult(RenewOutcome.RENEWED_LEASE, token, deadline)

        deadline = self._pool_deadline()
        if await self._store.update(settings.pool_key, deadline, token):
            logger.info(f"Kept token {token} alive in the pool")
            return RenewResult(RenewOutcome.RENEWED_POOL_SLOT, token, deadline)

        logger.warning(f"Token {token} is not available")
        return RenewResult(RenewOutcome.NOT_FOUND, token)

    async def release(self, token: str) -> bool:
        """
        Return a leased token to the pool before its lease expires.

        Args:
            token: The leased token

        Returns:
            True if the token was leased and is now back in the pool
        """
        logger.debug(f"Unblocking token {token}")

        removed = await self._store.remove(self._settings.active_key, token)
        if removed == 0:
            logger.warning(f"Token {token} is not active")
            return False

        await self._store.add(self._settings.pool_key, self._pool_deadline(), token)
        logger.info(f"Unblocked token {token}")
        return True

    async def revoke(self, token: str) -> None:
        """
        Permanently delete a token from both collections.

        Revoking an unknown or already revoked token is a no-op.

        Args:
            token: The token to delete
        """
        logger.debug(f"Deleting token {token}")

        removed = await self._store.remove(self._settings.active_key, token)
        removed += await self._store.remove(self._settings.pool_key, token)

        if removed:
            logger.info(f"Deleted token {token}")
        else:
            logger.info(f"Token {token} was already gone")

    async def stats(self) -> PoolStats:
        """Return current pool and lease table sizes."""
        pool_size = await self._store.count(self._settings.pool_key)
        leased = await self._store.count(self._settings.active_key)
        return PoolStats(
            pool_size=pool_size, leased=leased, max_tokens=self._settings.max_tokens
        )

    # ------------------------------------------------------------------
    # Sweep
    # ------------------------------------------------------------------

    async def reclaim(self) -> ReclaimReport:
        """
        Recycle expired leases into the pool and purge expired pool entries.

        Each expired lease is removed individually; only the tokens this
        call actually removed are re-inserted, so a concurrent sweep on
        another instance never re-adds a token twice.

        Returns:
            Counts of recycled and purged tokens
        """
        logger.debug("Cleaning up expired tokens")
        settings = self._settings
        now = self._clock()

        expired = await self._store.range_by_score(settings.active_key, 0, now)
        recycled: list[str] = []
        if expired:
            removed = await asyncio.gather(
                *(self._store.remove(settings.active_key, token) for token in expired)
            )
            recycled = [token for token, count in zip(expired, removed) if count]
            if recycled:
                deadline = self._pool_deadline()
                await self._store.add_many(
                    settings.pool_key, [(deadline, token) for token in recycled]
                )

        purged = await self._store.remove_range_by_score(settings.pool_key, 0, now)

        report = ReclaimReport(recycled=len(recycled), purged=purged)
        if report.changed:
            logger.info(
                f"Reclaimed {report.recycled} expired leases, "
                f"purged {report.purged} expired pool tokens"
            )
        logger.debug("Cleaned up expired tokens")
        return report

    async def _sweep_loop(self) -> None:
        """Run reclaim() every cleanup_interval seconds until cancelled."""
        interval = self._settings.cleanup_interval
        while True:
            try:
                await self.reclaim()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Token sweep failed; retrying on next tick")
            await asyncio.sleep(interval)
