"""Global enums — string values are part of the HTTP contract."""

from enum import Enum


class ChargeRequestStatus(str, Enum):
    """Listing filter for charge requests (``?status=``)."""
    PENDING = "pending"
    APPROVED = "approved"
    ALL = "all"


class BalanceChangeReason(str, Enum):
    CHARGE_APPROVED = "charge_approved"
    PURCHASE = "purchase"
