"""Initial schema — engagements table.

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "engagements",
        sa.Column("engagement_id", UUID(as_uuid=True), primary_key=True),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("engagement_type", sa.String(20), nullable=False),
        sa.Column("size_tier", sa.String(50), nullable=False),
        sa.Column("consultant", sa.String(255), nullable=True),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("duration_days", sa.Integer, nullable=False, server_default="0"),
        sa.Column("paused_at", sa.Date, nullable=True),
        sa.Column("paused_days", sa.Integer, nullable=False, server_default="0"),
        sa.Column("closure_signed", sa.Boolean, nullable=True),
        sa.Column("consulting_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("bonus_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("commission_percent", sa.Integer, nullable=True),
        sa.Column("commission_value", sa.Numeric(16, 4), nullable=True),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("deadline_met", sa.Boolean, nullable=True),
        sa.Column("completed_on", sa.Date, nullable=True),
        sa.Column("bonused", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="ck_engagements_rating"),
        sa.CheckConstraint(
            "commission_percent IS NULL OR commission_percent IN (0, 8, 12)",
            name="ck_engagements_commission_percent",
        ),
        sa.CheckConstraint("consulting_value >= 0", name="ck_engagements_consulting_value"),
    )
    op.create_index("ix_engagements_consultant", "engagements", ["consultant"])
    op.create_index("ix_engagements_status", "engagements", ["status"])
    op.create_index("ix_engagements_start_date", "engagements", ["start_date"])


def downgrade() -> None:
    op.drop_index("ix_engagements_start_date", table_name="engagements")
    op.drop_index("ix_engagements_status", table_name="engagements")
    op.drop_index("ix_engagements_consultant", table_name="engagements")
    op.drop_table("engagements")
