"""Redis client factory — used for rate limiting only.

NOT used for balances or locks (those go through the ledger store).
The client is created in the app lifespan and kept on ``app.state.redis``.
"""

import redis.asyncio as aioredis


def create_redis(url: str) -> aioredis.Redis:
    """Create a Redis client backed by a connection pool."""
    return aioredis.from_url(url, decode_responses=True)


async def close_redis(client: aioredis.Redis | None) -> None:
    """Close the Redis connection pool (no-op when rate limiting is disabled)."""
    if client is not None:
        await client.aclose()
