"""Deadline policy — maximum allowed duration per size tier.

An engagement meets its deadline when its duration (paused days already
excluded) is at most the maximum for its tier. Tiers missing from the
table fall back to ``default_max_days`` instead of raising.

Deterministic — no I/O. Policies are immutable, the tier table included.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import Field, field_serializer, field_validator

from consultrack.config.settings import DEFAULT_MAX_DEADLINE_DAYS
from consultrack.errors import EngagementValidationError
from consultrack.models.common import ConsultrackBase, SizeTier


class DeadlinePolicy(ConsultrackBase, frozen=True):
    """Maximum days allowed per size tier."""

    tier_max_days: Mapping[str, int] = Field(
        default_factory=lambda: {
            SizeTier.BASIC.value: 15,
            SizeTier.STARTER.value: 25,
            SizeTier.PRO.value: 40,
            SizeTier.ENTERPRISE.value: 60,
        },
        validate_default=True,
    )
    default_max_days: int = Field(default=DEFAULT_MAX_DEADLINE_DAYS, ge=0)

    @field_validator("tier_max_days", mode="after")
    @classmethod
    def _read_only_table(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        return MappingProxyType(dict(v))

    @field_serializer("tier_max_days")
    def _serialize_table(self, v: Mapping[str, int]) -> dict[str, int]:
        return dict(v)

    def max_days_for(self, tier: str) -> int:
        """Maximum allowed days for ``tier``, or the default for unknown tiers."""
        return self.tier_max_days.get(tier, self.default_max_days)


DEFAULT_POLICY = DeadlinePolicy()


def evaluate_deadline(
    tier: str,
    duration_days: int,
    policy: DeadlinePolicy | None = None,
) -> bool:
    """Return True when ``duration_days`` is within the tier's maximum."""
    if duration_days < 0:
        msg = f"duration_days must be non-negative, got {duration_days}."
        raise EngagementValidationError(msg)
    return duration_days <= (policy or DEFAULT_POLICY).max_days_for(tier)
