"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from config.settings import settings
from src.container import ServiceContainer
from src.shop_account.api.router import router as account_router
from src.shop_catalog.api.router import router as catalog_router
from src.shop_charge.api.router import router as charge_router
from src.shop_common.errors import AppError, InternalError, RateLimitError, TransientStoreError
from src.shop_common.logging_config import configure_logging
from src.shop_common.response import error_response
from src.shop_gateway.middleware.rate_limit import RateLimitMiddleware
from src.shop_gateway.middleware.request_log import RequestLogMiddleware
from src.shop_purchase.api.router import router as purchase_router

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build the container, verify DB + Redis. Shutdown: dispose."""
    configure_logging(settings.LOG_LEVEL)
    container = ServiceContainer.from_settings(settings)
    async with container.engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await container.redis.ping()
    app.state.container = container
    logger.info("%s %s started", settings.APP_NAME, VERSION)
    yield
    await container.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


# Last added runs first: request ids exist before rate limiting responds
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError, error: object | None = None) -> JSONResponse:
    body = error_response(
        exc.code,
        exc.message if error is None else error,
        getattr(request.state, "request_id", None),
    )
    headers = (
        {"Retry-After": str(exc.retry_after)} if isinstance(exc, RateLimitError) else None
    )
    return JSONResponse(status_code=exc.http_status, content=body.model_dump(), headers=headers)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies are InvalidArgument (400), with pydantic's detail."""
    detail = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    body = error_response(1001, detail, getattr(request.state, "request_id", None))
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    if isinstance(exc, (OperationalError, InterfaceError, PoolTimeoutError)):
        logger.warning("Transient store failure on %s: %s", request.url.path, exc)
        return _error_json(request, TransientStoreError())
    logger.exception("Store failure on %s", request.url.path)
    return _error_json(request, InternalError("Store operation failed"))


@app.exception_handler(TimeoutError)
@app.exception_handler(ConnectionError)
async def connection_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Store unreachable on %s: %r", request.url.path, exc)
    return _error_json(request, TransientStoreError())


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_json(request, InternalError())


app.include_router(account_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(charge_router, prefix="/api")
app.include_router(purchase_router, prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}
