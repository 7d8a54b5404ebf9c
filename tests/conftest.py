"""Shared test fixtures.

``client`` drives the real FastAPI app over ASGITransport. Startup (lifespan)
does not run under ASGITransport, so the fixture installs a container whose
services are the real application services over AsyncMock repositories.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import app
from src.shop_account.application.service import AccountApplicationService
from src.shop_catalog.application.service import CatalogApplicationService
from src.shop_charge.application.service import ChargeApplicationService
from src.shop_common.database import get_db_session
from src.shop_purchase.application.service import PurchaseApplicationService


@pytest.fixture
def mocks() -> SimpleNamespace:
    """Repositories and collaborators behind the API container."""
    cache = AsyncMock()
    cache.get.return_value = None
    return SimpleNamespace(
        users=AsyncMock(),
        charges=AsyncMock(),
        products=AsyncMock(),
        purchases=AsyncMock(),
        cache=cache,
        publisher=AsyncMock(),
        notifier=AsyncMock(),
        redis=AsyncMock(),
        db=AsyncMock(),
    )


@pytest.fixture
def api_container(mocks: SimpleNamespace) -> SimpleNamespace:
    settings = Settings(RATE_LIMIT_ENABLED=False, PURCHASE_VERIFY_PRICES=True)
    accounts = AccountApplicationService(
        cache=mocks.cache, publisher=mocks.publisher, repo=mocks.users
    )
    catalog = CatalogApplicationService(repo=mocks.products)
    return SimpleNamespace(
        settings=settings,
        redis=mocks.redis,
        accounts=accounts,
        catalog=catalog,
        charges=ChargeApplicationService(
            accounts=accounts, notifier=mocks.notifier, repo=mocks.charges, users=mocks.users
        ),
        purchases=PurchaseApplicationService(
            accounts=accounts,
            catalog=catalog,
            timezone_name=settings.SHOP_TIMEZONE,
            verify_prices=settings.PURCHASE_VERIFY_PRICES,
            repo=mocks.purchases,
            users=mocks.users,
        ),
    )


@pytest.fixture
async def client(api_container: SimpleNamespace, mocks: SimpleNamespace) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""

    async def _session():
        yield mocks.db

    previous = getattr(app.state, "container", None)
    app.state.container = api_container
    app.dependency_overrides[get_db_session] = _session
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_db_session, None)
        app.state.container = previous
