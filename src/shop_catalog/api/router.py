"""shop_catalog REST endpoints.

GET /products?q=  — full product list, optionally filtered by name substring
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import ServiceContainer, get_container
from src.shop_catalog.application.schemas import ProductListResponse
from src.shop_common.database import get_db_session

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def list_products(
    container: Annotated[ServiceContainer, Depends(get_container)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    q: str | None = Query(None, max_length=100, description="Case-insensitive name search"),
) -> ProductListResponse:
    return await container.catalog.list_products(db, q)
