"""Domain models for shop_catalog — pure dataclasses plus the name search."""

from dataclasses import dataclass


@dataclass
class Product:
    id: int
    name: str
    price: int  # ks, >= 0


def filter_products(products: list[Product], query: str | None) -> list[Product]:
    """Case-insensitive substring match on name. A blank query keeps everything."""
    if query is None or not query.strip():
        return list(products)
    needle = query.strip().lower()
    return [p for p in products if needle in p.name.lower()]
