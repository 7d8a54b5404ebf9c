"""002: create charge_requests table

Revision ID: 002
Revises: 001
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE charge_requests (
            id              BIGSERIAL   PRIMARY KEY,
            user_id         BIGINT      NOT NULL REFERENCES users (id),
            amount          BIGINT      NOT NULL,
            approved        BOOLEAN     NOT NULL DEFAULT FALSE,
            requested_at    TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            approved_at     TIMESTAMPTZ NULL,
            CONSTRAINT ck_charge_requests_amount_gt_0 CHECK (amount > 0),
            CONSTRAINT ck_charge_requests_approved_at CHECK (approved OR approved_at IS NULL)
        );
    """)
    op.execute(
        "CREATE INDEX idx_charge_requests_requested_at ON charge_requests (requested_at DESC);"
    )
    op.execute(
        "CREATE INDEX idx_charge_requests_pending ON charge_requests (id) WHERE approved = FALSE;"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS charge_requests CASCADE;")
