"""Pydantic schemas for the balance read API."""

from pydantic import BaseModel

from src.shop_account.domain.models import BalanceSnapshot
from src.shop_common.currency import ks_display


class BalanceResponse(BaseModel):
    exists: bool
    phone: str
    balance: int
    balance_display: str
    last_charge_date: str

    @classmethod
    def from_snapshot(cls, snapshot: BalanceSnapshot) -> "BalanceResponse":
        return cls(
            exists=snapshot.exists,
            phone=snapshot.phone,
            balance=snapshot.balance,
            balance_display=ks_display(snapshot.balance),
            last_charge_date=snapshot.last_charge_date,
        )
