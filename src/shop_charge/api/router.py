"""shop_charge REST endpoints.

GET     /charge-requests?status=pending|approved|all  — newest first
POST    /charge-requests                              — customer asks for a top-up
PUT     /charge-requests                              — admin approves {id}, idempotent
OPTIONS /charge-requests                              — preflight
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.container import ServiceContainer, get_container
from src.shop_charge.application.schemas import (
    ApproveChargeRequest,
    ApproveResponse,
    ChargeRequestListResponse,
    CreateChargeRequest,
    CreateChargeResponse,
)
from src.shop_common.database import get_db_session

router = APIRouter(prefix="/charge-requests", tags=["charge-requests"])


@router.get("")
async def list_charge_requests(
    container: Annotated[ServiceContainer, Depends(get_container)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status_filter: str = Query("all", alias="status", description="pending | approved | all"),
) -> ChargeRequestListResponse:
    return await container.charges.list_requests(db, status_filter)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_charge_request(
    body: CreateChargeRequest,
    container: Annotated[ServiceContainer, Depends(get_container)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> CreateChargeResponse:
    return await container.charges.create(db, body.phone, body.amount)


@router.put("", response_model=ApproveResponse, response_model_exclude_none=True)
async def approve_charge_request(
    container: Annotated[ServiceContainer, Depends(get_container)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    body: ApproveChargeRequest | None = None,
) -> ApproveResponse:
    raw_id = body.id if body is not None else None
    return await container.charges.approve(db, raw_id)


@router.options("")
async def charge_requests_options() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT)
