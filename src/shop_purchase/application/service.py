"""PurchaseApplicationService — debit a balance for a cart and issue a receipt.

Flow:
  1. Validate the cart (non-empty, qty >= 1, price >= 0)
  2. Replay a stored receipt when the idempotency key was already used
  3. Re-resolve unit prices from the catalog (unless disabled)
  4. Atomic conditional debit + purchase record, one transaction
  5. After commit: drop the cached balance, publish BALANCE_CHANGED
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_account.application.service import AccountApplicationService
from src.shop_account.domain.repository import UserRepositoryProtocol
from src.shop_account.infrastructure.persistence import UserRepository
from src.shop_catalog.application.service import CatalogApplicationService
from src.shop_common.currency import MAX_KS, ks_display
from src.shop_common.datetime_utils import format_local_minute, utc_now
from src.shop_common.enums import BalanceChangeReason
from src.shop_common.errors import (
    InsufficientBalanceError,
    InternalError,
    InvalidArgumentError,
    PriceMismatchError,
    ProductNotFoundError,
    UserNotFoundError,
)
from src.shop_common.phone import normalize_phone
from src.shop_purchase.application.schemas import (
    PurchaseItemIn,
    PurchaseResponse,
    Receipt,
    ReceiptLine,
)
from src.shop_purchase.domain.models import Cart, PurchaseRecord, build_cart
from src.shop_purchase.domain.repository import PurchaseRepositoryProtocol
from src.shop_purchase.infrastructure.persistence import PurchaseRepository

logger = logging.getLogger(__name__)


class PurchaseApplicationService:
    def __init__(
        self,
        accounts: AccountApplicationService,
        catalog: CatalogApplicationService,
        timezone_name: str,
        verify_prices: bool = True,
        repo: PurchaseRepositoryProtocol | None = None,
        users: UserRepositoryProtocol | None = None,
    ) -> None:
        self._accounts = accounts
        self._catalog = catalog
        self._tz = timezone_name
        self._verify_prices = verify_prices
        self._repo: PurchaseRepositoryProtocol = repo or PurchaseRepository()
        self._users: UserRepositoryProtocol = users or UserRepository()

    async def purchase(
        self,
        db: AsyncSession,
        raw_phone: str | None,
        items: list[PurchaseItemIn],
        idempotency_key: str | None = None,
    ) -> PurchaseResponse:
        phone = normalize_phone(raw_phone)
        if not phone:
            raise InvalidArgumentError("phone is required")
        cart = build_cart([item.to_cart_line() for item in items])

        if idempotency_key:
            existing = await self._repo.get_by_idempotency_key(db, idempotency_key)
            if existing is not None:
                return self._replay(existing, phone)

        if self._verify_prices:
            await self._resolve_prices(db, cart)

        total = cart.total
        if total > MAX_KS:
            # No balance column can hold this much; the debit would overflow BIGINT
            current = await self._users.get_by_phone(db, phone)
            if current is None:
                raise UserNotFoundError(phone)
            raise InsufficientBalanceError(total, current.balance)

        try:
            user = await self._users.debit(db, phone, total)
            if user is None:
                current = await self._users.get_by_phone(db, phone)
                if current is None:
                    raise UserNotFoundError(phone)
                raise InsufficientBalanceError(total, current.balance)

            record = await self._repo.insert(
                db, user.id, phone, cart.lines, total, user.balance, idempotency_key
            )
            if record is None:
                # Same key committed by a concurrent attempt: undo our debit, echo theirs
                await db.rollback()
                return await self._replay_after_conflict(db, idempotency_key, phone)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Purchase %d: phone=%s lines=%d total=%d balance_after=%d",
            record.id, phone, len(cart.lines), total, user.balance,
        )
        await self._accounts.propagate_balance_change(
            phone, user.balance, BalanceChangeReason.PURCHASE.value
        )
        return self._to_response(record, replayed=False)

    async def _resolve_prices(self, db: AsyncSession, cart: Cart) -> None:
        """Never trust the client's price: the catalog's current price must match."""
        products = await self._catalog.get_products(db, (line.product_id for line in cart.lines))
        for line in cart.lines:
            product = products.get(line.product_id)
            if product is None:
                raise ProductNotFoundError(line.product_id)
            if product.price != line.unit_price:
                raise PriceMismatchError(line.product_id, line.unit_price, product.price)
            line.name = product.name

    async def _replay_after_conflict(
        self, db: AsyncSession, idempotency_key: str | None, phone: str
    ) -> PurchaseResponse:
        existing = (
            await self._repo.get_by_idempotency_key(db, idempotency_key)
            if idempotency_key
            else None
        )
        if existing is None:
            raise InternalError("Purchase insert conflicted but no stored purchase was found")
        return self._replay(existing, phone)

    def _replay(self, record: PurchaseRecord, phone: str) -> PurchaseResponse:
        if record.phone_number != phone:
            raise InvalidArgumentError("idempotency_key already used by another purchase")
        logger.info("Purchase %d replayed for key=%s", record.id, record.idempotency_key)
        return self._to_response(record, replayed=True)

    def _to_response(self, record: PurchaseRecord, replayed: bool) -> PurchaseResponse:
        receipt = Receipt(
            purchase_id=record.id,
            products=[ReceiptLine.from_line(line) for line in record.items],
            total_price=record.total,
            total_price_display=ks_display(record.total),
            timestamp=format_local_minute(record.created_at or utc_now(), self._tz),
            remaining_balance=record.balance_after,
            remaining_balance_display=ks_display(record.balance_after),
            replayed=replayed,
        )
        return PurchaseResponse(balance_after=record.balance_after, receipt=receipt)
