"""Pydantic request/response schemas for the charge request API."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.shop_charge.domain.models import ChargeRequestView
from src.shop_common.currency import MAX_KS
from src.shop_common.phone import normalize_phone

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateChargeRequest(BaseModel):
    phone: str = Field(..., min_length=1, max_length=32)
    amount: int = Field(..., gt=0, le=MAX_KS, description="Amount to charge in ks")

    @field_validator("phone")
    @classmethod
    def phone_digits(cls, v: str) -> str:
        """Normalize to digits; a phone with no digits at all is rejected."""
        digits = normalize_phone(v)
        if not digits:
            raise ValueError("phone must contain digits")
        return digits


class ApproveChargeRequest(BaseModel):
    # Left loose on purpose: parse_request_id owns the "invalid id" contract
    id: Any = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CreateChargeResponse(BaseModel):
    success: bool = True
    id: int


class ApproveResponse(BaseModel):
    """``{success, balance}`` on first approval, ``{success, already}`` on replay."""

    success: bool = True
    balance: int | None = None
    already: bool | None = None


class ChargeRequestItem(BaseModel):
    id: int
    user_id: int
    amount: int
    approved: bool
    requested_at: str | None
    approved_at: str | None
    phone: str | None
    current_balance: int | None = Field(None, serialization_alias="currentBalance")
    last_charge_date: str

    @classmethod
    def from_view(cls, view: ChargeRequestView) -> "ChargeRequestItem":
        req = view.request
        return cls(
            id=req.id,
            user_id=req.user_id,
            amount=req.amount,
            approved=req.approved,
            requested_at=req.requested_at.isoformat() if req.requested_at else None,
            approved_at=req.approved_at.isoformat() if req.approved_at else None,
            phone=view.phone,
            current_balance=view.current_balance,
            last_charge_date=(
                view.last_charge_date.isoformat() if view.last_charge_date else ""
            ),
        )


class ChargeRequestListResponse(BaseModel):
    items: list[ChargeRequestItem]
