"""SQLAlchemy ORM table models for Consultrack.

Money columns use Numeric so amounts round-trip as Decimal. Consulting
and bonus values carry cents; commission values carry four places,
enough for any cents amount multiplied by a whole percentage.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from consultrack.db.session import Base


class EngagementRow(Base):
    """One consulting or upsell engagement. Mutable until completed or cancelled."""

    __tablename__ = "engagements"
    __table_args__ = (
        Index("ix_engagements_consultant", "consultant"),
        Index("ix_engagements_status", "status"),
        Index("ix_engagements_start_date", "start_date"),
        CheckConstraint("rating IS NULL OR rating BETWEEN 1 AND 5", name="ck_engagements_rating"),
        CheckConstraint(
            "commission_percent IS NULL OR commission_percent IN (0, 8, 12)",
            name="ck_engagements_commission_percent",
        ),
        CheckConstraint("consulting_value >= 0", name="ck_engagements_consulting_value"),
    )

    engagement_id: Mapped[UUID] = mapped_column(primary_key=True)
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    engagement_type: Mapped[str] = mapped_column(String(20), nullable=False)
    size_tier: Mapped[str] = mapped_column(String(50), nullable=False)
    consultant: Mapped[str | None] = mapped_column(String(255), nullable=True)

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paused_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    paused_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    closure_signed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    consulting_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    bonus_value: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    commission_percent: Mapped[int | None] = mapped_column(Integer, nullable=True)
    commission_value: Mapped[Decimal | None] = mapped_column(Numeric(16, 4), nullable=True)

    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deadline_met: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    completed_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    bonused: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
