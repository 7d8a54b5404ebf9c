"""Access log and request correlation.

Every request gets a request id: the caller's ``X-Request-ID`` when it sends
a usable one, so a retrying client can correlate its attempts, otherwise a
fresh ``req_<12 hex>``. The id lands in ``request.state`` for error bodies
and is echoed in the ``X-Request-ID`` response header.

Log line, on the ``shop.request`` logger:
    INFO [PUT] /api/charge-requests 200 23ms req_a1b2c3d4e5f6
Server errors are logged at ERROR, client errors at WARNING.
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("shop.request")

REQUEST_ID_HEADER = "X-Request-ID"
_CALLER_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(incoming: str | None) -> str:
    if incoming and _CALLER_ID_PATTERN.match(incoming):
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


def log_level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.log(
            log_level_for(response.status_code),
            "[%s] %s %d %.0fms %s",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            request_id,
        )
        return response
