"""Integration-test fixtures.

All integration tests share a single event loop so that the engine pool and
Redis pool built for the session remain valid across every test. ASGITransport
does not run the app lifespan, so the container is built here and installed
on ``app.state`` by hand. Everything is skipped when PostgreSQL, Redis or the
migrated schema is unavailable.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from config.settings import Settings
from src.container import ServiceContainer
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def container() -> ServiceContainer:
    # No rate limiting: flows post to /purchase in quick succession
    container = ServiceContainer.from_settings(Settings(RATE_LIMIT_ENABLED=False))
    try:
        async with container.engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM users LIMIT 1"))
            await conn.execute(text("SELECT 1 FROM purchases LIMIT 1"))
        await container.redis.ping()
    except Exception as e:  # noqa: BLE001
        await container.aclose()
        pytest.skip(f"PostgreSQL/Redis not available (run alembic upgrade head): {e}")
    yield container
    await container.aclose()


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client(container: ServiceContainer) -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client wired to the live container."""
    previous = getattr(app.state, "container", None)
    app.state.container = container
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.container = previous
