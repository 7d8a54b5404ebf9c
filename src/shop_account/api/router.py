"""shop_account REST API — balance snapshot by phone number."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import ServiceContainer, get_container
from src.shop_account.application.schemas import BalanceResponse
from src.shop_common.database import get_db_session

router = APIRouter(tags=["account"])


@router.get("/balance")
async def get_balance(
    container: Annotated[ServiceContainer, Depends(get_container)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    phone: str | None = Query(None, description="Phone number; non-digits are ignored"),
) -> BalanceResponse:
    return await container.accounts.get_balance(db, phone)
