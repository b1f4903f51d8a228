"""
Basic usage of the token lifecycle manager.

Runs against the in-memory store so no Redis server is needed. Swap in
RedisLeaseStore(await get_redis_client()) to share the pool between
processes.
"""

import asyncio

from token_pool.config import TokenPoolSettings
from token_pool.store import MemoryLeaseStore
from token_pool.tokens import TokenLifecycleManager


async def main() -> None:
    settings = TokenPoolSettings(max_tokens=5, token_lifetime=1, cleanup_interval=0.2)

    async with TokenLifecycleManager(MemoryLeaseStore(), settings) as manager:
        tokens = await manager.issue(3)
        print(f"Issued: {tokens}")

        token = await manager.lease()
        print(f"Leased: {token}")

        result = await manager.renew(token)
        print(f"Renewed: {result.outcome.value}, expires at {result.expires_at:.0f}")

        # Let the lease lapse; the sweep puts the token back in the pool
        await asyncio.sleep(1.5)
        print(f"Stats after sweep: {await manager.stats()}")

        await manager.revoke(token)
        print(f"Revoked {token}; renew now -> {bool(await manager.renew(token))}")


if __name__ == "__main__":
    asyncio.run(main())
