"""Domain models for shop_charge — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.shop_common.errors import InvalidArgumentError

# charge_requests.id is BIGSERIAL
MAX_REQUEST_ID = 2**63 - 1


@dataclass
class ChargeRequest:
    id: int                          # BIGSERIAL, store-assigned
    user_id: int
    amount: int                      # ks, > 0
    approved: bool
    requested_at: datetime | None
    approved_at: datetime | None = None


@dataclass
class ChargeRequestView:
    """Charge request joined with its owner's current account state."""

    request: ChargeRequest
    phone: str | None
    current_balance: int | None
    last_charge_date: datetime | None


def parse_request_id(raw: object) -> int:
    """Coerce an incoming charge request id to a positive int.

    Accepts JSON integers, integral floats (``12.0``) and digit strings.
    Booleans, fractions, blanks, non-ASCII digits and values outside the
    BIGINT range are rejected.
    """
    if raw is None:
        raise InvalidArgumentError("id is required")
    if isinstance(raw, bool):
        raise InvalidArgumentError("invalid id")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise InvalidArgumentError("invalid id")
        value = int(raw)
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise InvalidArgumentError("invalid id")
    if not 0 < value <= MAX_REQUEST_ID:
        raise InvalidArgumentError("invalid id")
    return value
