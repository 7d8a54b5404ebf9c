"""Repository Protocol for charge requests."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_charge.domain.models import ChargeRequest, ChargeRequestView


class ChargeRequestRepositoryProtocol(Protocol):
    async def insert(self, db: AsyncSession, user_id: int, amount: int) -> ChargeRequest: ...

    async def get_by_id(self, db: AsyncSession, request_id: int) -> ChargeRequest | None: ...

    async def mark_approved(self, db: AsyncSession, request_id: int) -> ChargeRequest | None: ...

    async def list_with_users(
        self, db: AsyncSession, approved: bool | None
    ) -> list[ChargeRequestView]: ...
