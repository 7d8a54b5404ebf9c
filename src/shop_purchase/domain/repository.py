"""Repository Protocol for purchase records."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_purchase.domain.models import LineItem, PurchaseRecord


class PurchaseRepositoryProtocol(Protocol):
    async def insert(
        self,
        db: AsyncSession,
        user_id: int,
        phone: str,
        items: list[LineItem],
        total: int,
        balance_after: int,
        idempotency_key: str | None,
    ) -> PurchaseRecord | None: ...

    async def get_by_idempotency_key(
        self, db: AsyncSession, idempotency_key: str
    ) -> PurchaseRecord | None: ...
