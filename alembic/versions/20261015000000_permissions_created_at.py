"""Add created_at to system_user_permissions (stable ordering of permission rows).

Revision ID: 20261015000000
Revises: 20261001000000
Create Date: 2026-10-15

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20261015000000"
down_revision: Union[str, None] = "20261001000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "system_user_permissions",
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    # Existing rows keep their current relative order.
    op.execute("UPDATE system_user_permissions SET created_at = updated_at")


def downgrade() -> None:
    op.drop_column("system_user_permissions", "created_at")
