"""Pydantic request/response schemas for the purchase API."""

from pydantic import BaseModel, Field

from src.shop_common.currency import MAX_KS, ks_display
from src.shop_purchase.domain.models import CartLine, LineItem

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PurchaseItemIn(BaseModel):
    product_id: int = Field(..., gt=0, le=MAX_KS)
    qty: int = Field(..., gt=0, le=MAX_KS)
    price: int = Field(..., ge=0, le=MAX_KS, description="Unit price in ks")
    total: int | None = Field(
        None, ge=0, le=MAX_KS, description="price x qty, echoed by the client"
    )

    def to_cart_line(self) -> CartLine:
        return CartLine(product_id=self.product_id, qty=self.qty, price=self.price, total=self.total)


class PurchaseRequest(BaseModel):
    phone: str = Field(..., max_length=32)
    # Emptiness is a domain error ("no items selected"), not a schema error
    items: list[PurchaseItemIn]
    idempotency_key: str | None = Field(None, min_length=1, max_length=64)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ReceiptLine(BaseModel):
    product_id: int
    name: str | None
    price: int
    qty: int
    total: int
    total_display: str

    @classmethod
    def from_line(cls, line: LineItem) -> "ReceiptLine":
        return cls(
            product_id=line.product_id,
            name=line.name,
            price=line.unit_price,
            qty=line.qty,
            total=line.total,
            total_display=ks_display(line.total),
        )


class Receipt(BaseModel):
    purchase_id: int
    products: list[ReceiptLine]
    total_price: int
    total_price_display: str
    timestamp: str                    # shop local time, minute precision
    remaining_balance: int
    remaining_balance_display: str
    replayed: bool = False


class PurchaseResponse(BaseModel):
    success: bool = True
    balance_after: int
    receipt: Receipt
