"""Error response body shared by all endpoints.

Successful responses use per-endpoint shapes (``{success: true, ...}``).
Failures always render as:
{
    "success": false,
    "error": "...",          // message, or validation detail list
    "code": 1001,            // AppError code
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    success: bool = False
    error: Any = None
    code: int = 9002
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def error_response(code: int, error: Any, request_id: str | None = None) -> ErrorResponse:
    resp = ErrorResponse(code=code, error=error)
    if request_id:
        resp.request_id = request_id
    return resp
