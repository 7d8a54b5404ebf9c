"""PurchaseRepository — append-only purchases table.

``insert`` returns None when the idempotency key is already taken: the
unique index makes a concurrent duplicate wait for the first transaction
and then fall through ON CONFLICT DO NOTHING.
"""

import json

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_purchase.domain.models import LineItem, PurchaseRecord

_PURCHASE_COLUMNS = (
    "id, user_id, phone_number, items, total, balance_after, idempotency_key, created_at"
)

_INSERT_SQL = text(f"""
    INSERT INTO purchases
        (user_id, phone_number, items, total, balance_after, idempotency_key)
    VALUES
        (:user_id, :phone, CAST(:items AS JSONB), :total, :balance_after, :idempotency_key)
    ON CONFLICT (idempotency_key) DO NOTHING
    RETURNING {_PURCHASE_COLUMNS}
""")

_GET_BY_KEY_SQL = text(f"""
    SELECT {_PURCHASE_COLUMNS}
    FROM purchases
    WHERE idempotency_key = :idempotency_key
""")


def _row_to_record(row: object) -> PurchaseRecord:
    raw_items = row.items  # type: ignore[attr-defined]
    # asyncpg hands JSONB back as text unless a codec is registered
    if isinstance(raw_items, str):
        raw_items = json.loads(raw_items)
    return PurchaseRecord(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        phone_number=row.phone_number,  # type: ignore[attr-defined]
        items=[LineItem.from_payload(item) for item in raw_items],
        total=row.total,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        idempotency_key=row.idempotency_key,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class PurchaseRepository:
    async def insert(
        self,
        db: AsyncSession,
        user_id: int,
        phone: str,
        items: list[LineItem],
        total: int,
        balance_after: int,
        idempotency_key: str | None,
    ) -> PurchaseRecord | None:
        result = await db.execute(
            _INSERT_SQL,
            {
                "user_id": user_id,
                "phone": phone,
                "items": json.dumps([item.to_payload() for item in items]),
                "total": total,
                "balance_after": balance_after,
                "idempotency_key": idempotency_key,
            },
        )
        row = result.fetchone()
        return _row_to_record(row) if row else None

    async def get_by_idempotency_key(
        self, db: AsyncSession, idempotency_key: str
    ) -> PurchaseRecord | None:
        result = await db.execute(_GET_BY_KEY_SQL, {"idempotency_key": idempotency_key})
        row = result.fetchone()
        return _row_to_record(row) if row else None
