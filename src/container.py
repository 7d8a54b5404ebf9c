"""Service container — the one place process-wide clients are constructed.

Built in the FastAPI lifespan from settings and stored on ``app.state``;
routers resolve it through the ``get_container`` dependency. Workflows get
their collaborators (store, cache, change feed, admin sink) injected here
instead of reaching for module-level handles.
"""

from dataclasses import dataclass

import httpx
import redis.asyncio as aioredis
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from config.settings import Settings
from src.shop_account.application.service import AccountApplicationService
from src.shop_account.infrastructure.cache import RedisBalanceCache
from src.shop_account.infrastructure.events import RedisEventPublisher
from src.shop_catalog.application.service import CatalogApplicationService
from src.shop_charge.application.service import ChargeApplicationService
from src.shop_common.database import build_engine, build_session_factory
from src.shop_common.redis_client import build_redis, close_redis
from src.shop_notify.sink import WebhookAdminNotifier
from src.shop_purchase.application.service import PurchaseApplicationService


@dataclass
class ServiceContainer:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    redis: aioredis.Redis
    http_client: httpx.AsyncClient
    accounts: AccountApplicationService
    catalog: CatalogApplicationService
    charges: ChargeApplicationService
    purchases: PurchaseApplicationService

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        engine = build_engine(settings)
        redis = build_redis(settings.REDIS_URL)
        http_client = httpx.AsyncClient(timeout=settings.ADMIN_WEBHOOK_TIMEOUT_SECONDS)

        accounts = AccountApplicationService(
            cache=RedisBalanceCache(redis, settings.BALANCE_CACHE_TTL_SECONDS),
            publisher=RedisEventPublisher(redis, settings.EVENTS_CHANNEL),
        )
        catalog = CatalogApplicationService()
        notifier = WebhookAdminNotifier(
            http_client, settings.ADMIN_WEBHOOK_URL, settings.ADMIN_WEBHOOK_TIMEOUT_SECONDS
        )
        return cls(
            settings=settings,
            engine=engine,
            session_factory=build_session_factory(engine),
            redis=redis,
            http_client=http_client,
            accounts=accounts,
            catalog=catalog,
            charges=ChargeApplicationService(accounts=accounts, notifier=notifier),
            purchases=PurchaseApplicationService(
                accounts=accounts,
                catalog=catalog,
                timezone_name=settings.SHOP_TIMEZONE,
                verify_prices=settings.PURCHASE_VERIFY_PRICES,
            ),
        )

    async def aclose(self) -> None:
        await self.http_client.aclose()
        await close_redis(self.redis)
        await self.engine.dispose()


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency: the container built at startup."""
    return request.app.state.container
