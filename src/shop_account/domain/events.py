"""Domain events for shop_account.

Published after a committed balance mutation so that UI layers and caches in
other processes can refresh. Delivery is best effort: a workflow's own
response never depends on it, and the core does not know who subscribes.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Protocol

from src.shop_common.datetime_utils import utc_now


class EventType(str, Enum):
    BALANCE_CHANGED = "BALANCE_CHANGED"


@dataclass
class BalanceChanged:
    phone: str
    balance: int
    reason: str                     # "charge_approved" | "purchase"
    occurred_at: str = field(default_factory=lambda: utc_now().isoformat())
    type: str = EventType.BALANCE_CHANGED.value

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


class EventPublisherProtocol(Protocol):
    async def publish(self, event: BalanceChanged) -> None: ...
