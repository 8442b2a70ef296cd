"""create_vehicle_table

Revision ID: a7c1d2e3f4b5
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "a7c1d2e3f4b5"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create vehicle table, indexed by owning provider."""
    op.create_table(
        "vehicle",
        sa.Column("device_id", sa.String(length=36), nullable=False),
        sa.Column("provider_id", sa.String(length=36), nullable=False),
        sa.Column("data_provider_id", sa.String(length=36), nullable=True),
        sa.Column("external_id", sa.String(length=255), nullable=True),
        sa.Column("vehicle_type", sa.String(length=32), nullable=False),
        sa.Column("propulsion_types", sa.JSON(), nullable=False),
        sa.Column("attributes", sa.JSON(), nullable=False),
        sa.Column("accessibility_attributes", sa.JSON(), nullable=False),
        sa.Column("battery_capacity", sa.Integer(), nullable=True),
        sa.Column("fuel_capacity", sa.Integer(), nullable=True),
        sa.Column("maximum_speed", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("device_id", name="pk_vehicle"),
    )
    op.create_index("ix_vehicle_provider_id", "vehicle", ["provider_id"])


def downgrade() -> None:
    """Drop vehicle table."""
    op.drop_index("ix_vehicle_provider_id", table_name="vehicle")
    op.drop_table("vehicle", if_exists=True)
