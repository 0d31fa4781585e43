"""Statistics aggregator — dashboard figures over a filtered set of engagements.

Computes counts, revenue, averages and deadline compliance. Every
division is guarded: an empty or sparse input yields zeros, never an
exception. Absent ratings are excluded from the rating average rather
than counted as zero.

``aggregate_by`` applies the same discipline per key after partitioning
(commission per consultant, revenue per tier, ...).

Pure functions, no I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from consultrack.models.common import UNASSIGNED, EngagementStatus
from consultrack.models.engagement import Engagement

ZERO = Decimal("0")


def safe_mean(values: Sequence[int | float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def safe_rate(part: int, whole: int) -> float:
    """``part / whole`` as a percentage, 0.0 when ``whole`` is zero."""
    if whole == 0:
        return 0.0
    return part / whole * 100


def safe_decimal_mean(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return total / count


# ---------------------------------------------------------------------------
# Overall statistics
# ---------------------------------------------------------------------------


@dataclass
class EngagementStats:
    """Aggregated dashboard statistics."""

    total_projects: int
    active_projects: int
    completed_projects: int
    average_rating: float
    total_revenue: Decimal
    average_project_duration: float
    deadline_compliance_rate: float

    def to_dict(self) -> dict:
        return {
            "total_projects": self.total_projects,
            "active_projects": self.active_projects,
            "completed_projects": self.completed_projects,
            "average_rating": self.average_rating,
            "total_revenue": self.total_revenue,
            "average_project_duration": self.average_project_duration,
            "deadline_compliance_rate": self.deadline_compliance_rate,
        }


def aggregate(records: Iterable[Engagement]) -> EngagementStats:
    """Compute summary statistics over ``records``.

    - revenue sums the consulting value of every record, whatever its status
    - average rating covers completed records that have a rating
    - average duration covers completed records with a positive duration
    - compliance rate is met deadlines over all completed records, x 100
    """
    records = list(records)
    completed = [r for r in records if r.status == EngagementStatus.COMPLETED]

    ratings = [r.rating for r in completed if r.rating is not None]
    durations = [r.duration_days for r in completed if r.duration_days > 0]
    deadlines_met = sum(1 for r in completed if r.deadline_met is True)

    return EngagementStats(
        total_projects=len(records),
        active_projects=sum(1 for r in records if r.status == EngagementStatus.IN_PROGRESS),
        completed_projects=len(completed),
        average_rating=safe_mean(ratings),
        total_revenue=sum((r.consulting_value for r in records), ZERO),
        average_project_duration=safe_mean(durations),
        deadline_compliance_rate=safe_rate(deadlines_met, len(completed)),
    )


# ---------------------------------------------------------------------------
# Grouped statistics
# ---------------------------------------------------------------------------


@dataclass
class GroupBucket:
    """Per-key totals.

    ``count`` is every record in the group; ``samples`` is the number of
    records that contributed a value, which is what ``average`` divides by.
    """

    total: Decimal
    count: int
    samples: int
    average: Decimal

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "count": self.count,
            "samples": self.samples,
            "average": self.average,
        }


KeyFn = Callable[[Engagement], Hashable | None]
ValueFn = Callable[[Engagement], Decimal | int | None]


def consulting_value(record: Engagement) -> Decimal:
    return record.consulting_value


def commission_value(record: Engagement) -> Decimal | None:
    return record.commission_value


def partition(records: Iterable[Engagement], key_fn: KeyFn) -> dict[Hashable, list[Engagement]]:
    """Group records by key in first-appearance order; ``None`` keys become "unassigned"."""
    groups: dict[Hashable, list[Engagement]] = {}
    for record in records:
        key = key_fn(record)
        groups.setdefault(UNASSIGNED if key is None else key, []).append(record)
    return groups


def bucket(records: Sequence[Engagement], value_fn: ValueFn = consulting_value) -> GroupBucket:
    values = [v for v in (value_fn(r) for r in records) if v is not None]
    total = sum((Decimal(v) for v in values), ZERO)
    return GroupBucket(
        total=total,
        count=len(records),
        samples=len(values),
        average=safe_decimal_mean(total, len(values)),
    )


def aggregate_by(
    records: Iterable[Engagement],
    key_fn: KeyFn,
    value_fn: ValueFn = consulting_value,
) -> dict[Hashable, GroupBucket]:
    """One bucket per distinct key, summing ``value_fn`` over its records."""
    return {
        key: bucket(group, value_fn)
        for key, group in partition(records, key_fn).items()
    }
