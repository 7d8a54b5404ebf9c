"""ProductRepository — ORM reads over the products table."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_catalog.domain.models import Product
from src.shop_catalog.infrastructure.db_models import ProductORM


def _to_domain(model: ProductORM) -> Product:
    return Product(id=model.id, name=model.name, price=model.price)


class ProductRepository:
    async def list_products(self, db: AsyncSession) -> list[Product]:
        result = await db.execute(select(ProductORM).order_by(ProductORM.id))
        return [_to_domain(m) for m in result.scalars().all()]

    async def get_by_ids(self, db: AsyncSession, product_ids: Iterable[int]) -> dict[int, Product]:
        ids = sorted(set(product_ids))
        if not ids:
            return {}
        result = await db.execute(select(ProductORM).where(ProductORM.id.in_(ids)))
        return {m.id: _to_domain(m) for m in result.scalars().all()}
