"""Domain models for shop_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: int                              # BIGSERIAL
    phone_number: str                    # digits only
    balance: int                         # ks, never negative
    last_charge_date: datetime | None
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class BalanceSnapshot:
    """Read model cached in Redis and served by GET /balance."""

    phone: str
    exists: bool
    balance: int = 0
    last_charge_date: str = ""  # ISO8601 or empty when never charged

    @classmethod
    def from_user(cls, user: User) -> "BalanceSnapshot":
        return cls(
            phone=user.phone_number,
            exists=True,
            balance=user.balance,
            last_charge_date=(
                user.last_charge_date.isoformat() if user.last_charge_date else ""
            ),
        )

    @classmethod
    def missing(cls, phone: str) -> "BalanceSnapshot":
        return cls(phone=phone, exists=False)
