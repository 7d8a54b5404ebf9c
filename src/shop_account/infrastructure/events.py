"""Redis Pub/Sub implementation of the change-notification feed."""

import json
import logging

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from src.shop_account.domain.events import BalanceChanged

logger = logging.getLogger(__name__)


class RedisEventPublisher:
    def __init__(self, redis: aioredis.Redis, channel: str) -> None:
        self._redis = redis
        self._channel = channel

    async def publish(self, event: BalanceChanged) -> None:
        try:
            receivers = await self._redis.publish(
                self._channel, json.dumps(event.to_payload())
            )
        except RedisError as e:
            logger.warning("Dropped %s event for %s: %s", event.type, event.phone, e)
            return
        logger.debug("Published %s for %s to %d receivers", event.type, event.phone, receivers)
