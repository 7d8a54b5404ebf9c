"""Rate limiting middleware for the purchase endpoint.

Fixed one-minute window per client IP, counted in Redis:
    count = INCR "ratelimit:{ip}:purchase"
    EXPIRE key 60            (first hit only)
    count > limit  -> 429 with Retry-After

Callers retry 429s with backoff, so the purchase itself must be safe to
repeat (see the idempotency key on POST /purchase). A Redis failure lets
the request through.
"""

import logging

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.shop_common.errors import RateLimitError
from src.shop_common.response import error_response

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
PURCHASE_PATH_SUFFIX = "/purchase"


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a reverse proxy, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit_key(ip: str, group: str) -> str:
    return f"ratelimit:{ip}:{group}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        container = getattr(request.app.state, "container", None)
        if (
            container is None
            or not container.settings.RATE_LIMIT_ENABLED
            or request.method != "POST"
            or not request.url.path.endswith(PURCHASE_PATH_SUFFIX)
        ):
            return await call_next(request)

        key = rate_limit_key(client_ip(request), "purchase")
        try:
            count = await container.redis.incr(key)
            if count == 1:
                await container.redis.expire(key, WINDOW_SECONDS)
            ttl = await container.redis.ttl(key)
        except RedisError as e:
            logger.warning("Rate limiter unavailable, letting request through: %s", e)
            return await call_next(request)

        if count > container.settings.RATE_LIMIT_PURCHASE_PER_MINUTE:
            err = RateLimitError(retry_after=ttl if ttl and ttl > 0 else WINDOW_SECONDS)
            body = error_response(err.code, err.message, getattr(request.state, "request_id", None))
            return JSONResponse(
                status_code=err.http_status,
                content=body.model_dump(),
                headers={"Retry-After": str(err.retry_after)},
            )
        return await call_next(request)
