"""Domain models for shop_purchase — cart lines, purchase records, totals."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.shop_common.errors import InvalidArgumentError


@dataclass
class LineItem:
    product_id: int
    qty: int
    unit_price: int                  # ks, as submitted (or re-resolved from the catalog)
    name: str | None = None

    @property
    def total(self) -> int:
        return self.unit_price * self.qty

    def to_payload(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": self.unit_price,
            "qty": self.qty,
            "total": self.total,
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "LineItem":
        return cls(
            product_id=int(data["product_id"]),
            qty=int(data["qty"]),
            unit_price=int(data["price"]),
            name=data.get("name"),
        )


@dataclass
class PurchaseRecord:
    """Row of the append-only purchases table."""

    id: int
    user_id: int
    phone_number: str
    items: list[LineItem]
    total: int
    balance_after: int
    idempotency_key: str | None = None
    created_at: datetime | None = None


@dataclass
class CartLine:
    """One submitted cart row before validation."""

    product_id: int
    qty: int
    price: int
    total: int | None = None


@dataclass
class Cart:
    lines: list[LineItem] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(line.total for line in self.lines)


def build_cart(rows: list[CartLine]) -> Cart:
    """Validate submitted rows and turn them into line items.

    Order is preserved and rows are not merged: the receipt echoes exactly
    what was selected.
    """
    if not rows:
        raise InvalidArgumentError("no items selected")
    lines: list[LineItem] = []
    for index, row in enumerate(rows):
        if row.qty <= 0:
            raise InvalidArgumentError(f"items[{index}].qty must be at least 1")
        if row.price < 0:
            raise InvalidArgumentError(f"items[{index}].price must not be negative")
        line = LineItem(product_id=row.product_id, qty=row.qty, unit_price=row.price)
        if row.total is not None and row.total != line.total:
            raise InvalidArgumentError(
                f"items[{index}].total {row.total} does not equal price x qty ({line.total})"
            )
        lines.append(line)
    return Cart(lines=lines)
