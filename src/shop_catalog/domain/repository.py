"""Repository Protocol for the read-only product catalog."""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_catalog.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def list_products(self, db: AsyncSession) -> list[Product]: ...

    async def get_by_ids(self, db: AsyncSession, product_ids: Iterable[int]) -> dict[int, Product]: ...
