"""create devices table

Revision ID: 20261018_01
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "devices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("brand", sa.String(length=100), nullable=False),
        sa.Column("state", sa.String(length=20), nullable=False),
        sa.Column("creation_time", sa.Date(), nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_devices_name_brand", "devices", ["name", "brand"])
    op.create_index("ix_devices_brand", "devices", ["brand"])
    op.create_index("ix_devices_state", "devices", ["state"])


def downgrade() -> None:
    op.drop_index("ix_devices_state", table_name="devices")
    op.drop_index("ix_devices_brand", table_name="devices")
    op.drop_index("ix_devices_name_brand", table_name="devices")
    op.drop_table("devices")
