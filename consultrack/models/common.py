"""Shared types, enums, and base models used across Consultrack domain models."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import StrEnum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field
from uuid_extensions import uuid7


def utc_now() -> datetime:
    """Return the current UTC timestamp (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def new_uuid7() -> UUID:
    """Generate a new time-sortable UUID v7."""
    return uuid7()


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce a monetary amount to Decimal without binary-float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# --- Reusable annotated types ---

UUIDv7 = Annotated[UUID, Field(description="Time-sortable UUID v7.")]
UTCTimestamp = Annotated[
    datetime, Field(description="UTC timezone-aware timestamp.")
]
Money = Annotated[
    Decimal, Field(ge=0, decimal_places=2, description="Non-negative currency amount.")
]
Rating = Annotated[int, Field(ge=1, le=5, description="Completion rating (1-5 stars).")]


# --- Shared enums ---


class EngagementType(StrEnum):
    """Kind of client engagement."""

    CONSULTING = "consulting"
    UPSELL = "upsell"


class EngagementStatus(StrEnum):
    """Lifecycle status of an engagement."""

    IN_PROGRESS = "in_progress"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SizeTier(StrEnum):
    """Known size tiers. Engagements may carry any other tier string."""

    BASIC = "Basic"
    STARTER = "Starter"
    PRO = "Pro"
    ENTERPRISE = "Enterprise"


# Commission percentages a completed engagement can carry.
COMMISSION_PERCENTAGES: frozenset[int] = frozenset({0, 8, 12})

TERMINAL_STATUSES: frozenset[EngagementStatus] = frozenset(
    {EngagementStatus.COMPLETED, EngagementStatus.CANCELLED}
)

# Bucket label for engagements with no consultant assigned.
UNASSIGNED = "unassigned"


# --- Base model ---


class ConsultrackBase(BaseModel):
    """Base model with common configuration for all Consultrack Pydantic models."""

    model_config = {
        "populate_by_name": True,
        "ser_json_timedelta": "iso8601",
        "protected_namespaces": (),
    }
