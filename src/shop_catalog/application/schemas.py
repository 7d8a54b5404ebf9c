"""Pydantic schemas for the catalog API."""

from pydantic import BaseModel

from src.shop_catalog.domain.models import Product


class ProductItem(BaseModel):
    id: int
    name: str
    price: int

    @classmethod
    def from_domain(cls, p: Product) -> "ProductItem":
        return cls(id=p.id, name=p.name, price=p.price)


class ProductListResponse(BaseModel):
    items: list[ProductItem]
