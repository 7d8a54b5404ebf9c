"""ChargeRequestRepository — raw SQL over the charge_requests table.

``mark_approved`` is the pending -> approved transition. It is a single
conditional UPDATE: concurrent approvals of the same id queue on the row
lock, and only the first one gets a row back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_charge.domain.models import ChargeRequest, ChargeRequestView

_REQUEST_COLUMNS = "id, user_id, amount, approved, requested_at, approved_at"

_INSERT_SQL = text(f"""
    INSERT INTO charge_requests (user_id, amount, approved)
    VALUES (:user_id, :amount, FALSE)
    RETURNING {_REQUEST_COLUMNS}
""")

_GET_SQL = text(f"""
    SELECT {_REQUEST_COLUMNS}
    FROM charge_requests
    WHERE id = :request_id
""")

_MARK_APPROVED_SQL = text(f"""
    UPDATE charge_requests
    SET approved = TRUE,
        approved_at = NOW()
    WHERE id = :request_id AND approved = FALSE
    RETURNING {_REQUEST_COLUMNS}
""")

# asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
_LIST_SQL = text("""
    SELECT cr.id, cr.user_id, cr.amount, cr.approved, cr.requested_at, cr.approved_at,
           u.phone_number, u.balance, u.last_charge_date
    FROM charge_requests cr
    LEFT JOIN users u ON u.id = cr.user_id
    WHERE CAST(:approved AS BOOLEAN) IS NULL OR cr.approved = CAST(:approved AS BOOLEAN)
    ORDER BY cr.requested_at DESC NULLS LAST, cr.id DESC
""")


def _row_to_request(row: object) -> ChargeRequest:
    return ChargeRequest(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        approved=row.approved,  # type: ignore[attr-defined]
        requested_at=row.requested_at,  # type: ignore[attr-defined]
        approved_at=row.approved_at,  # type: ignore[attr-defined]
    )


def _row_to_view(row: object) -> ChargeRequestView:
    return ChargeRequestView(
        request=_row_to_request(row),
        phone=row.phone_number,  # type: ignore[attr-defined]
        current_balance=row.balance,  # type: ignore[attr-defined]
        last_charge_date=row.last_charge_date,  # type: ignore[attr-defined]
    )


class ChargeRequestRepository:
    async def insert(self, db: AsyncSession, user_id: int, amount: int) -> ChargeRequest:
        result = await db.execute(_INSERT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise RuntimeError("charge_requests insert returned no rows")
        return _row_to_request(row)

    async def get_by_id(self, db: AsyncSession, request_id: int) -> ChargeRequest | None:
        result = await db.execute(_GET_SQL, {"request_id": request_id})
        row = result.fetchone()
        return _row_to_request(row) if row else None

    async def mark_approved(self, db: AsyncSession, request_id: int) -> ChargeRequest | None:
        result = await db.execute(_MARK_APPROVED_SQL, {"request_id": request_id})
        row = result.fetchone()
        return _row_to_request(row) if row else None

    async def list_with_users(
        self, db: AsyncSession, approved: bool | None
    ) -> list[ChargeRequestView]:
        result = await db.execute(_LIST_SQL, {"approved": approved})
        return [_row_to_view(row) for row in result.fetchall()]
