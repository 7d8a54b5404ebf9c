"""Account balance cache contract.

  - Hot balance snapshots with a short TTL
  - Cache key: f"shop:balance:{phone}"
  - Write path: DB first, then cache invalidate
  - Read path: cache-aside (check cache -> DB on miss -> populate cache)

A cache is never the source of truth: implementations swallow their own
failures so that a Redis outage only costs a DB round-trip.
"""

from typing import Protocol

from src.shop_account.domain.models import BalanceSnapshot


def balance_cache_key(phone: str) -> str:
    return f"shop:balance:{phone}"


class BalanceCacheProtocol(Protocol):
    async def get(self, phone: str) -> BalanceSnapshot | None: ...

    async def set(self, snapshot: BalanceSnapshot) -> None: ...

    async def invalidate(self, phone: str) -> None: ...
