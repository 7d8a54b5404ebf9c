"""CatalogApplicationService — read-only; no commit/rollback needed."""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_catalog.application.schemas import ProductItem, ProductListResponse
from src.shop_catalog.domain.models import Product, filter_products
from src.shop_catalog.domain.repository import ProductRepositoryProtocol
from src.shop_catalog.infrastructure.persistence import ProductRepository


class CatalogApplicationService:
    def __init__(self, repo: ProductRepositoryProtocol | None = None) -> None:
        self._repo: ProductRepositoryProtocol = repo or ProductRepository()

    async def list_products(self, db: AsyncSession, query: str | None = None) -> ProductListResponse:
        products = filter_products(await self._repo.list_products(db), query)
        return ProductListResponse(items=[ProductItem.from_domain(p) for p in products])

    async def get_products(self, db: AsyncSession, product_ids: Iterable[int]) -> dict[int, Product]:
        """Current catalog entries by id; unknown ids are simply absent."""
        return await self._repo.get_by_ids(db, product_ids)
