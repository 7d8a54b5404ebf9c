"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_account.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def get_by_phone(self, db: AsyncSession, phone: str) -> User | None: ...

    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None: ...

    async def get_or_create(self, db: AsyncSession, phone: str) -> User: ...

    async def credit(self, db: AsyncSession, user_id: int, amount: int) -> User | None: ...

    async def debit(self, db: AsyncSession, phone: str, amount: int) -> User | None: ...
