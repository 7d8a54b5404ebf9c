"""Redis-backed balance snapshot cache."""

import json
import logging
from dataclasses import asdict

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.shop_account.domain.cache import balance_cache_key
from src.shop_account.domain.models import BalanceSnapshot

logger = logging.getLogger(__name__)


class RedisBalanceCache:
    def __init__(self, redis: aioredis.Redis, ttl_seconds: int) -> None:
        self._redis = redis
        self._ttl = ttl_seconds

    async def get(self, phone: str) -> BalanceSnapshot | None:
        try:
            raw = await self._redis.get(balance_cache_key(phone))
        except RedisError as e:
            logger.warning("Balance cache read failed for %s: %s", phone, e)
            return None
        if raw is None:
            return None
        try:
            return BalanceSnapshot(**json.loads(raw))
        except (TypeError, ValueError):
            logger.warning("Discarding malformed balance cache entry for %s", phone)
            return None

    async def set(self, snapshot: BalanceSnapshot) -> None:
        try:
            await self._redis.set(
                balance_cache_key(snapshot.phone),
                json.dumps(asdict(snapshot)),
                ex=self._ttl,
            )
        except RedisError as e:
            logger.warning("Balance cache write failed for %s: %s", snapshot.phone, e)

    async def invalidate(self, phone: str) -> None:
        try:
            await self._redis.delete(balance_cache_key(phone))
        except RedisError as e:
            # Stale entry expires on its own after the TTL
            logger.warning("Balance cache invalidate failed for %s: %s", phone, e)
