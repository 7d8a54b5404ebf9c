"""004: create purchases table (append-only receipts)

Revision ID: 004
Revises: 003
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE purchases (
            id              BIGSERIAL   PRIMARY KEY,
            user_id         BIGINT      NOT NULL REFERENCES users (id),
            phone_number    VARCHAR(32) NOT NULL,
            items           JSONB       NOT NULL,
            total           BIGINT      NOT NULL,
            balance_after   BIGINT      NOT NULL,
            idempotency_key VARCHAR(64) NULL,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_purchases_idempotency_key UNIQUE (idempotency_key),
            CONSTRAINT ck_purchases_total_gte_0     CHECK (total >= 0),
            CONSTRAINT ck_purchases_balance_gte_0   CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_purchases_user_id ON purchases (user_id, created_at DESC);")
    # NOTE: No updated_at, purchases is append-only


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS purchases CASCADE;")
