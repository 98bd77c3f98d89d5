"""Initial tables: units, system users with permission overrides, vehicles, movements.

Revision ID: 20261001000000
Revises:
Create Date: 2026-10-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261001000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "units",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("address", sa.String(length=1024), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_units_code"), "units", ["code"], unique=True)

    op.create_table(
        "system_users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="operator"),
        sa.Column("shift", sa.String(length=16), nullable=False, server_default="day"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("unit_id", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["unit_id"], ["units.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_system_users_username"), "system_users", ["username"], unique=True)
    op.create_index(op.f("ix_system_users_unit_id"), "system_users", ["unit_id"], unique=False)

    op.create_table(
        "system_user_permissions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("can_view_vehicles", sa.Boolean(), nullable=True),
        sa.Column("can_edit_vehicles", sa.Boolean(), nullable=True),
        sa.Column("can_view_units", sa.Boolean(), nullable=True),
        sa.Column("can_edit_units", sa.Boolean(), nullable=True),
        sa.Column("can_view_users", sa.Boolean(), nullable=True),
        sa.Column("can_edit_users", sa.Boolean(), nullable=True),
        sa.Column("can_view_movements", sa.Boolean(), nullable=True),
        sa.Column("can_edit_movements", sa.Boolean(), nullable=True),
        sa.Column("can_switch_units", sa.Boolean(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["system_users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_system_user_permissions_user_id"),
        "system_user_permissions",
        ["user_id"],
        unique=False,
    )

    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("plate", sa.String(length=16), nullable=False),
        sa.Column("make", sa.String(length=128), nullable=False),
        sa.Column("model", sa.String(length=128), nullable=False),
        sa.Column("color", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("mileage", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("photo_url", sa.String(length=2048), nullable=True),
        sa.Column("location", sa.String(length=8), nullable=False, server_default="yard"),
        sa.Column("unit_id", sa.String(length=36), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["unit_id"], ["units.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_vehicles_plate"), "vehicles", ["plate"], unique=True)
    op.create_index(op.f("ix_vehicles_location"), "vehicles", ["location"], unique=False)
    op.create_index(op.f("ix_vehicles_unit_id"), "vehicles", ["unit_id"], unique=False)

    op.create_table(
        "movements",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("vehicle_id", sa.String(length=36), nullable=False),
        sa.Column("driver", sa.String(length=255), nullable=False),
        sa.Column("destination", sa.String(length=512), nullable=True),
        sa.Column("initial_mileage", sa.Integer(), nullable=False),
        sa.Column("final_mileage", sa.Integer(), nullable=True),
        sa.Column("mileage_run", sa.Integer(), nullable=True),
        sa.Column("departure_unit_id", sa.String(length=36), nullable=False),
        sa.Column("departure_date", sa.Date(), nullable=False),
        sa.Column("departure_time", sa.Time(), nullable=False),
        sa.Column("arrival_unit_id", sa.String(length=36), nullable=True),
        sa.Column("arrival_date", sa.Date(), nullable=True),
        sa.Column("arrival_time", sa.Time(), nullable=True),
        sa.Column("duration", sa.String(length=16), nullable=True),
        sa.Column("status", sa.String(length=8), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"]),
        sa.ForeignKeyConstraint(["departure_unit_id"], ["units.id"]),
        sa.ForeignKeyConstraint(["arrival_unit_id"], ["units.id"]),
        sa.ForeignKeyConstraint(["created_by"], ["system_users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_movements_vehicle_id"), "movements", ["vehicle_id"], unique=False)
    op.create_index(op.f("ix_movements_status"), "movements", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_movements_status"), table_name="movements")
    op.drop_index(op.f("ix_movements_vehicle_id"), table_name="movements")
    op.drop_table("movements")
    op.drop_index(op.f("ix_vehicles_unit_id"), table_name="vehicles")
    op.drop_index(op.f("ix_vehicles_location"), table_name="vehicles")
    op.drop_index(op.f("ix_vehicles_plate"), table_name="vehicles")
    op.drop_table("vehicles")
    op.drop_index(op.f("ix_system_user_permissions_user_id"), table_name="system_user_permissions")
    op.drop_table("system_user_permissions")
    op.drop_index(op.f("ix_system_users_unit_id"), table_name="system_users")
    op.drop_index(op.f("ix_system_users_username"), table_name="system_users")
    op.drop_table("system_users")
    op.drop_index(op.f("ix_units_code"), table_name="units")
    op.drop_table("units")
