"""shop_purchase REST endpoint.

POST /purchase — debit the balance for the selected items, return a receipt.
Retrying callers should send an idempotency key (body field or
``Idempotency-Key`` header) so a lost success response never debits twice.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import ServiceContainer, get_container
from src.shop_common.database import get_db_session
from src.shop_purchase.application.schemas import PurchaseRequest, PurchaseResponse

router = APIRouter(tags=["purchase"])


@router.post("/purchase")
async def purchase(
    body: PurchaseRequest,
    container: Annotated[ServiceContainer, Depends(get_container)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    idempotency_key_header: Annotated[
        str | None, Header(alias="Idempotency-Key", max_length=64)
    ] = None,
) -> PurchaseResponse:
    key = body.idempotency_key or idempotency_key_header
    return await container.purchases.purchase(db, body.phone, body.items, key)
