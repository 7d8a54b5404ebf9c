"""Redis client factory — balance cache, change feed and rate limiting.

Balances themselves always live in PostgreSQL; Redis only holds short-lived
snapshots that are safe to lose.
"""

import redis.asyncio as aioredis


def build_redis(url: str) -> aioredis.Redis:
    """Create a Redis client backed by its own connection pool."""
    return aioredis.from_url(url, decode_responses=True)


async def close_redis(client: aioredis.Redis) -> None:
    await client.aclose()
