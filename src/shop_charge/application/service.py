"""ChargeApplicationService — charge request creation, listing and approval.

Approval is the only balance-creating operation in the system. Its two
writes (approved flag + balance credit) share one transaction; the caller
never observes a request that is approved but not credited.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_account.application.service import AccountApplicationService
from src.shop_account.domain.repository import UserRepositoryProtocol
from src.shop_account.infrastructure.persistence import UserRepository
from src.shop_charge.application.schemas import (
    ApproveResponse,
    ChargeRequestItem,
    ChargeRequestListResponse,
    CreateChargeResponse,
)
from src.shop_charge.domain.models import parse_request_id
from src.shop_charge.domain.repository import ChargeRequestRepositoryProtocol
from src.shop_charge.infrastructure.persistence import ChargeRequestRepository
from src.shop_common.currency import ks_display
from src.shop_common.enums import BalanceChangeReason, ChargeRequestStatus
from src.shop_common.errors import (
    ChargeRequestNotFoundError,
    InvalidArgumentError,
    UserNotFoundError,
)
from src.shop_notify.sink import AdminNotifierProtocol

logger = logging.getLogger(__name__)

ADMIN_CHARGE_REQUESTS_LINK = "/admin/charge-requests"


class ChargeApplicationService:
    def __init__(
        self,
        accounts: AccountApplicationService,
        notifier: AdminNotifierProtocol,
        repo: ChargeRequestRepositoryProtocol | None = None,
        users: UserRepositoryProtocol | None = None,
    ) -> None:
        self._accounts = accounts
        self._notifier = notifier
        self._repo: ChargeRequestRepositoryProtocol = repo or ChargeRequestRepository()
        self._users: UserRepositoryProtocol = users or UserRepository()

    async def create(self, db: AsyncSession, phone: str, amount: int) -> CreateChargeResponse:
        """Record a pending request, creating the user with balance 0 if unknown."""
        try:
            user = await self._users.get_or_create(db, phone)
            request = await self._repo.insert(db, user.id, amount)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Charge request %d created: phone=%s amount=%d", request.id, phone, amount)
        await self._notifier.notify(
            title="New charge request",
            body=f"{phone} requested a charge of {ks_display(amount)}",
            link=ADMIN_CHARGE_REQUESTS_LINK,
        )
        return CreateChargeResponse(id=request.id)

    async def list_requests(
        self, db: AsyncSession, status: str | None
    ) -> ChargeRequestListResponse:
        try:
            parsed = ChargeRequestStatus((status or ChargeRequestStatus.ALL.value).lower())
        except ValueError:
            raise InvalidArgumentError(
                f"status must be one of pending, approved, all (got {status!r})"
            ) from None

        approved: bool | None = None
        if parsed is ChargeRequestStatus.PENDING:
            approved = False
        elif parsed is ChargeRequestStatus.APPROVED:
            approved = True

        views = await self._repo.list_with_users(db, approved)
        return ChargeRequestListResponse(items=[ChargeRequestItem.from_view(v) for v in views])

    async def approve(self, db: AsyncSession, raw_id: object) -> ApproveResponse:
        """Approve a pending request and credit its owner exactly once.

        Replaying an approval reports ``already=True`` without touching the
        balance. An unknown id is NotFound on every attempt and never creates
        anything.
        """
        request_id = parse_request_id(raw_id)

        try:
            # Step 1: pending -> approved; only the winner of this UPDATE credits
            approved = await self._repo.mark_approved(db, request_id)
            if approved is None:
                existing = await self._repo.get_by_id(db, request_id)
                await db.rollback()
                if existing is None:
                    raise ChargeRequestNotFoundError(request_id)
                logger.info("Charge request %d already approved, replay ignored", request_id)
                return ApproveResponse(already=True)

            # Step 2: credit in the same transaction
            user = await self._users.credit(db, approved.user_id, approved.amount)
            if user is None:
                # Rolled back below: the request goes back to pending
                raise UserNotFoundError(f"id={approved.user_id}")
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Charge request %d approved: phone=%s +%d -> %d",
            request_id, user.phone_number, approved.amount, user.balance,
        )
        await self._accounts.propagate_balance_change(
            user.phone_number, user.balance, BalanceChangeReason.CHARGE_APPROVED.value
        )
        return ApproveResponse(balance=user.balance)
