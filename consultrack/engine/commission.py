"""Commission calculator — percentage and value earned at completion.

Rules, in precedence order:
- rating absent or <= 3: 0% regardless of the deadline
- rating >= 4 and deadline missed: 8%
- rating >= 4 and deadline met: 12%

All amounts are Decimal; value = consulting value x percent / 100.
Deterministic — no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from consultrack.errors import EngagementValidationError
from consultrack.models.common import to_decimal

NO_COMMISSION = 0
MISSED_DEADLINE_COMMISSION = 8
MET_DEADLINE_COMMISSION = 12

# Lowest rating that earns any commission.
_COMMISSION_RATING_FLOOR = 4


@dataclass(frozen=True)
class CommissionResult:
    """Commission percentage and monetary value."""

    percent: int
    value: Decimal


def _validate_rating(rating: int | None) -> None:
    if rating is None:
        return
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        msg = f"rating must be an integer from 1 to 5, got {rating!r}."
        raise EngagementValidationError(msg)


def commission_percent(rating: int | None, deadline_met: bool) -> int:
    """Percentage earned for a rating / deadline outcome."""
    _validate_rating(rating)
    if rating is None or rating < _COMMISSION_RATING_FLOOR:
        return NO_COMMISSION
    if not deadline_met:
        return MISSED_DEADLINE_COMMISSION
    if deadline_met:
        return MET_DEADLINE_COMMISSION
    return NO_COMMISSION


def calculate_commission(
    rating: int | None,
    deadline_met: bool,
    consulting_value: Decimal | int | float | str,
) -> CommissionResult:
    """Compute commission percent and value for a completed engagement."""
    amount = to_decimal(consulting_value)
    if amount < 0:
        msg = f"consulting_value must be non-negative, got {amount}."
        raise EngagementValidationError(msg)
    percent = commission_percent(rating, deadline_met)
    return CommissionResult(percent=percent, value=amount * percent / 100)
