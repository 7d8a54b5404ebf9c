"""005: seed sample products

Revision ID: 005
Revises: 004
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_SEED_NAMES = ("Coffee", "Green Tea", "Mohinga", "Shan Noodles", "Water")


def upgrade() -> None:
    op.execute("""
        INSERT INTO products (name, price) VALUES
            ('Coffee',        2000),
            ('Green Tea',     1000),
            ('Mohinga',       3500),
            ('Shan Noodles',  4000),
            ('Water',          500);
    """)


def downgrade() -> None:
    names = ", ".join(f"'{n}'" for n in _SEED_NAMES)
    op.execute(f"DELETE FROM products WHERE name IN ({names});")
