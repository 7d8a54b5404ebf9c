"""AccountApplicationService — balance reads and post-mutation propagation.

Reads are cache-aside over Redis. Writers (approval, purchase) call
``propagate_balance_change`` AFTER their transaction commits: the cache
entry is dropped and a BalanceChanged event goes out on the change feed.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_account.application.schemas import BalanceResponse
from src.shop_account.domain.cache import BalanceCacheProtocol
from src.shop_account.domain.events import BalanceChanged, EventPublisherProtocol
from src.shop_account.domain.models import BalanceSnapshot
from src.shop_account.domain.repository import UserRepositoryProtocol
from src.shop_account.infrastructure.persistence import UserRepository
from src.shop_common.errors import InvalidArgumentError
from src.shop_common.phone import normalize_phone


class AccountApplicationService:
    def __init__(
        self,
        cache: BalanceCacheProtocol,
        publisher: EventPublisherProtocol,
        repo: UserRepositoryProtocol | None = None,
    ) -> None:
        self._repo: UserRepositoryProtocol = repo or UserRepository()
        self._cache = cache
        self._publisher = publisher

    async def get_balance(self, db: AsyncSession, raw_phone: str | None) -> BalanceResponse:
        phone = normalize_phone(raw_phone)
        if not phone:
            raise InvalidArgumentError("phone is required")

        cached = await self._cache.get(phone)
        if cached is not None:
            return BalanceResponse.from_snapshot(cached)

        user = await self._repo.get_by_phone(db, phone)
        if user is None:
            # Not cached: the first charge request creates the user
            return BalanceResponse.from_snapshot(BalanceSnapshot.missing(phone))

        snapshot = BalanceSnapshot.from_user(user)
        await self._cache.set(snapshot)
        return BalanceResponse.from_snapshot(snapshot)

    async def propagate_balance_change(self, phone: str, balance: int, reason: str) -> None:
        await self._cache.invalidate(phone)
        await self._publisher.publish(BalanceChanged(phone=phone, balance=balance, reason=reason))
