"""Engagement model — a consulting or upsell project and its outcome.

Outcome fields (rating, deadline flag, commission, completion date) exist
only on completed engagements. Commission value is never stored
independently of the consulting value: the validator rejects any drift.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator

from consultrack.errors import EngagementValidationError
from consultrack.models.common import (
    COMMISSION_PERCENTAGES,
    ConsultrackBase,
    EngagementStatus,
    EngagementType,
    Money,
    Rating,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)

# Filter values meaning "no constraint" ("todos" comes from the legacy UI).
FILTER_SENTINELS: frozenset[str] = frozenset({"all", "todos"})


def _normalize_engagement_type(value: Any) -> Any:
    # Legacy rows carry "Consultoria" / "Upsell".
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "consultoria":
            return EngagementType.CONSULTING
        return lowered
    return value


def derive_duration(start: date, end: date | None, paused_days: int = 0) -> int:
    """Working days between start and end, excluding paused days. Floors at 0."""
    if end is None:
        return 0
    return max((end - start).days - paused_days, 0)


def expected_commission_value(consulting_value: Decimal, percent: int) -> Decimal:
    return consulting_value * percent / 100


# ---------------------------------------------------------------------------
# Engagement
# ---------------------------------------------------------------------------


class Engagement(ConsultrackBase):
    """A tracked client engagement.

    Created in ``in_progress``; may pause and resume; ends either
    ``completed`` (with rating, deadline flag and commission) or
    ``cancelled`` (no commission).
    """

    engagement_id: UUIDv7 = Field(default_factory=new_uuid7)
    client_name: str = Field(..., min_length=1, max_length=255)
    engagement_type: EngagementType
    size_tier: str = Field(..., min_length=1, max_length=50)
    consultant: str | None = Field(default=None, max_length=255)

    start_date: date
    end_date: date | None = None
    duration_days: int = Field(default=0, ge=0)
    paused_at: date | None = None
    paused_days: int = Field(default=0, ge=0)
    closure_signed: bool | None = None

    consulting_value: Money = Decimal("0")
    bonus_value: Money = Decimal("0")
    commission_percent: int | None = None
    commission_value: Decimal | None = None

    rating: Rating | None = None
    deadline_met: bool | None = None
    completed_on: date | None = None
    bonused: bool = False

    status: EngagementStatus = Field(default=EngagementStatus.IN_PROGRESS)
    created_at: UTCTimestamp = Field(default_factory=utc_now)
    updated_at: UTCTimestamp = Field(default_factory=utc_now)

    @field_validator("engagement_type", mode="before")
    @classmethod
    def _lowercase_type(cls, v: Any) -> Any:
        return _normalize_engagement_type(v)

    @field_validator("consultant", mode="before")
    @classmethod
    def _blank_consultant_is_unassigned(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def _check_dates(self) -> "Engagement":
        if self.end_date is not None and self.end_date < self.start_date:
            msg = "end_date must not precede start_date."
            raise ValueError(msg)
        if (self.paused_at is not None) != (self.status == EngagementStatus.PAUSED):
            msg = "paused_at is set if and only if the engagement is paused."
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def _check_outcome(self) -> "Engagement":
        """Outcome fields are populated if and only if status is completed."""
        if self.status != EngagementStatus.COMPLETED:
            present = [
                name
                for name in ("deadline_met", "commission_percent", "commission_value",
                             "rating", "completed_on")
                if getattr(self, name) is not None
            ]
            if present:
                msg = f"Outcome fields {present} are only allowed on completed engagements."
                raise ValueError(msg)
            return self

        if self.deadline_met is None or self.commission_percent is None \
                or self.commission_value is None:
            msg = "Completed engagements need deadline_met, commission_percent and commission_value."
            raise ValueError(msg)
        if self.commission_percent not in COMMISSION_PERCENTAGES:
            msg = f"commission_percent must be one of {sorted(COMMISSION_PERCENTAGES)}."
            raise ValueError(msg)
        expected = expected_commission_value(self.consulting_value, self.commission_percent)
        if self.commission_value != expected:
            msg = (
                f"commission_value {self.commission_value} does not match "
                f"{self.consulting_value} x {self.commission_percent}% = {expected}."
            )
            raise ValueError(msg)
        return self

    @property
    def is_completed(self) -> bool:
        return self.status == EngagementStatus.COMPLETED


# ---------------------------------------------------------------------------
# Create / patch payloads
# ---------------------------------------------------------------------------


class EngagementCreate(ConsultrackBase):
    """Fields a caller supplies to open a new engagement."""

    client_name: str = Field(..., min_length=1, max_length=255)
    engagement_type: EngagementType
    size_tier: str = Field(..., min_length=1, max_length=50)
    consultant: str | None = Field(default=None, max_length=255)
    start_date: date
    end_date: date | None = None
    duration_days: int | None = Field(default=None, ge=0)
    closure_signed: bool | None = None
    consulting_value: Money = Decimal("0")
    bonus_value: Money = Decimal("0")
    bonused: bool = False

    @field_validator("engagement_type", mode="before")
    @classmethod
    def _lowercase_type(cls, v: Any) -> Any:
        return _normalize_engagement_type(v)

    def build(self) -> Engagement:
        """Materialize an in-progress Engagement, deriving duration from dates if absent."""
        data = self.model_dump(exclude={"duration_days"})
        if self.duration_days is None:
            data["duration_days"] = derive_duration(self.start_date, self.end_date)
        else:
            data["duration_days"] = self.duration_days
        return build_engagement(data)


class EngagementPatch(ConsultrackBase):
    """Partial update. Only fields explicitly set are applied.

    Lifecycle transitions produce complete patches (status together with
    every outcome field) so they persist all-or-nothing.
    """

    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    engagement_type: EngagementType | None = None
    size_tier: str | None = Field(default=None, min_length=1, max_length=50)
    consultant: str | None = Field(default=None, max_length=255)
    start_date: date | None = None
    end_date: date | None = None
    duration_days: int | None = Field(default=None, ge=0)
    paused_at: date | None = None
    paused_days: int | None = Field(default=None, ge=0)
    closure_signed: bool | None = None
    consulting_value: Money | None = None
    bonus_value: Money | None = None
    commission_percent: int | None = None
    commission_value: Decimal | None = None
    rating: Rating | None = None
    deadline_met: bool | None = None
    completed_on: date | None = None
    bonused: bool | None = None
    status: EngagementStatus | None = None

    @field_validator("engagement_type", mode="before")
    @classmethod
    def _lowercase_type(cls, v: Any) -> Any:
        return _normalize_engagement_type(v)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


def build_engagement(data: dict[str, Any]) -> Engagement:
    """Validate raw data into an Engagement, raising EngagementValidationError."""
    try:
        return Engagement.model_validate(data)
    except ValidationError as exc:
        raise EngagementValidationError(str(exc)) from exc


def apply_patch(record: Engagement, patch: EngagementPatch) -> Engagement:
    """Return a new, re-validated Engagement with the patch applied."""
    data = record.model_dump()
    data.update(patch.changes())
    data["updated_at"] = utc_now()
    return build_engagement(data)


# ---------------------------------------------------------------------------
# FilterSpec
# ---------------------------------------------------------------------------


class FilterSpec(ConsultrackBase):
    """Optional constraints combined with logical AND.

    The sentinels "all" / "todos" are equivalent to leaving a field unset.
    The date range is a containment filter: start >= date_from and
    end <= date_to.
    """

    consultant: str | None = None
    engagement_type: EngagementType | None = None
    status: EngagementStatus | None = None
    date_from: date | None = None
    date_to: date | None = None

    @field_validator("consultant", "engagement_type", "status", mode="before")
    @classmethod
    def _sentinel_is_unset(cls, v: Any) -> Any:
        if isinstance(v, str) and (not v.strip() or v.strip().lower() in FILTER_SENTINELS):
            return None
        return v

    @field_validator("engagement_type", mode="before")
    @classmethod
    def _lowercase_type(cls, v: Any) -> Any:
        return _normalize_engagement_type(v)

    @property
    def is_unconstrained(self) -> bool:
        return all(
            value is None
            for value in (self.consultant, self.engagement_type, self.status,
                          self.date_from, self.date_to)
        )
