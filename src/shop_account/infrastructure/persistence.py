"""UserRepository — concrete implementation of UserRepositoryProtocol.

All balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
The row lock taken by the UPDATE serializes concurrent mutations of the same
user; a result of 0 rows means the target row is missing or a business
constraint was violated (insufficient funds).

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_account.domain.models import User

_USER_COLUMNS = "id, phone_number, balance, last_charge_date, version, created_at, updated_at"

_GET_BY_PHONE_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE phone_number = :phone
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    WHERE id = :user_id
""")

# DO NOTHING keeps an existing user untouched; the follow-up SELECT picks it up.
_INSERT_USER_SQL = text(f"""
    INSERT INTO users (phone_number, balance, last_charge_date)
    VALUES (:phone, 0, NULL)
    ON CONFLICT (phone_number) DO NOTHING
    RETURNING {_USER_COLUMNS}
""")

_CREDIT_SQL = text(f"""
    UPDATE users
    SET balance = balance + :amount,
        last_charge_date = NOW(),
        version = version + 1,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING {_USER_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE users
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE phone_number = :phone AND balance >= :amount
    RETURNING {_USER_COLUMNS}
""")


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        phone_number=row.phone_number,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        last_charge_date=row.last_charge_date,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class UserRepository:
    """Concrete repository — all mutations atomic at the SQL level."""

    async def get_by_phone(self, db: AsyncSession, phone: str) -> User | None:
        result = await db.execute(_GET_BY_PHONE_SQL, {"phone": phone})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def get_by_id(self, db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(_GET_BY_ID_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def get_or_create(self, db: AsyncSession, phone: str) -> User:
        result = await db.execute(_INSERT_USER_SQL, {"phone": phone})
        row = result.fetchone()
        if row is not None:
            return _row_to_user(row)
        # Lost the insert race (or the user already existed)
        existing = await self.get_by_phone(db, phone)
        if existing is None:
            raise RuntimeError(f"User {phone} vanished between insert and select")
        return existing

    async def credit(self, db: AsyncSession, user_id: int, amount: int) -> User | None:
        result = await db.execute(_CREDIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        return _row_to_user(row) if row else None

    async def debit(self, db: AsyncSession, phone: str, amount: int) -> User | None:
        result = await db.execute(_DEBIT_SQL, {"phone": phone, "amount": amount})
        row = result.fetchone()
        return _row_to_user(row) if row else None
