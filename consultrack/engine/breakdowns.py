"""Report breakdowns built on the grouped aggregator.

Per-consultant performance and commission, bonus analysis, distribution
by type / tier / status, monthly revenue and the executive summary.
Each one partitions first and then applies the guarded arithmetic from
``consultrack.engine.stats``.

Deterministic — no I/O.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import StrEnum

from consultrack.engine.stats import (
    ZERO,
    GroupBucket,
    aggregate_by,
    commission_value,
    partition,
    safe_decimal_mean,
    safe_mean,
    safe_rate,
)
from consultrack.models.common import EngagementStatus, EngagementType
from consultrack.models.engagement import Engagement


class Dimension(StrEnum):
    """Attributes engagements can be broken down by."""

    TYPE = "type"
    TIER = "tier"
    STATUS = "status"
    CONSULTANT = "consultant"


DIMENSION_KEYS: dict[Dimension, Callable[[Engagement], Hashable | None]] = {
    Dimension.TYPE: lambda e: e.engagement_type.value,
    Dimension.TIER: lambda e: e.size_tier,
    Dimension.STATUS: lambda e: e.status.value,
    Dimension.CONSULTANT: lambda e: e.consultant,
}


def _commission_total(records: Iterable[Engagement]) -> Decimal:
    return sum((r.commission_value or ZERO for r in records), ZERO)


def _revenue_total(records: Iterable[Engagement]) -> Decimal:
    return sum((r.consulting_value for r in records), ZERO)


def list_consultants(records: Iterable[Engagement]) -> list[str]:
    """Sorted distinct consultant names, ignoring unassigned engagements."""
    return sorted({r.consultant for r in records if r.consultant})


def distribution(records: Iterable[Engagement], dimension: Dimension) -> dict[Hashable, GroupBucket]:
    """Count and consulting-value totals per value of ``dimension``."""
    return aggregate_by(records, DIMENSION_KEYS[Dimension(dimension)])


# ---------------------------------------------------------------------------
# Consultant performance
# ---------------------------------------------------------------------------


@dataclass
class ConsultantPerformance:
    consultant: str
    projects: int
    revenue: Decimal
    commissions: Decimal
    net_revenue: Decimal
    average_rating: float
    deadline_rate: float
    bonus_rate: float
    average_ticket: Decimal


def consultant_performance(records: Iterable[Engagement]) -> list[ConsultantPerformance]:
    """Per-consultant scorecard, highest revenue first.

    The deadline rate only counts engagements whose deadline flag is known.
    """
    rows: list[ConsultantPerformance] = []
    for consultant, group in partition(records, lambda e: e.consultant).items():
        revenue = _revenue_total(group)
        commissions = _commission_total(group)
        with_deadline = [r for r in group if r.deadline_met is not None]
        rows.append(
            ConsultantPerformance(
                consultant=str(consultant),
                projects=len(group),
                revenue=revenue,
                commissions=commissions,
                net_revenue=revenue - commissions,
                average_rating=safe_mean([r.rating for r in group if r.rating is not None]),
                deadline_rate=safe_rate(
                    sum(1 for r in with_deadline if r.deadline_met), len(with_deadline)
                ),
                bonus_rate=safe_rate(sum(1 for r in group if r.bonused), len(group)),
                average_ticket=safe_decimal_mean(revenue, len(group)),
            )
        )
    rows.sort(key=lambda row: row.revenue, reverse=True)
    return rows


# ---------------------------------------------------------------------------
# Commission by consultant
# ---------------------------------------------------------------------------


@dataclass
class ConsultantCommission:
    consultant: str
    total_commission: Decimal
    projects: int


def commission_by_consultant(
    records: Iterable[Engagement],
    consultants: Sequence[str] | None = None,
) -> list[ConsultantCommission]:
    """Total commission per consultant over completed engagements.

    When ``consultants`` is given the result has one row per name, in
    that order, including zero rows for consultants without commission.
    """
    earning = [
        r for r in records
        if r.status == EngagementStatus.COMPLETED
        and r.commission_value is not None
        and r.consultant is not None
    ]
    buckets = aggregate_by(earning, lambda e: e.consultant, commission_value)
    names = list(consultants) if consultants is not None else sorted(buckets)
    result = []
    for name in names:
        b = buckets.get(name)
        result.append(
            ConsultantCommission(
                consultant=name,
                total_commission=b.total if b else ZERO,
                projects=b.count if b else 0,
            )
        )
    return result


# ---------------------------------------------------------------------------
# Bonus analysis
# ---------------------------------------------------------------------------


@dataclass
class BonusAnalysis:
    total_projects: int
    bonused_projects: int
    bonus_rate: float
    bonused_revenue: Decimal
    non_bonused_revenue: Decimal
    average_bonused_ticket: Decimal
    by_consultant: dict[str, float] = field(default_factory=dict)
    by_type: dict[str, float] = field(default_factory=dict)
    by_tier: dict[str, float] = field(default_factory=dict)


def _bonus_rates(records: Iterable[Engagement], dimension: Dimension) -> dict[str, float]:
    return {
        str(key): safe_rate(sum(1 for r in group if r.bonused), len(group))
        for key, group in partition(records, DIMENSION_KEYS[dimension]).items()
    }


def bonus_analysis(records: Iterable[Engagement]) -> BonusAnalysis:
    records = list(records)
    bonused = [r for r in records if r.bonused]
    bonused_revenue = _revenue_total(bonused)
    return BonusAnalysis(
        total_projects=len(records),
        bonused_projects=len(bonused),
        bonus_rate=safe_rate(len(bonused), len(records)),
        bonused_revenue=bonused_revenue,
        non_bonused_revenue=_revenue_total(r for r in records if not r.bonused),
        average_bonused_ticket=safe_decimal_mean(bonused_revenue, len(bonused)),
        by_consultant=_bonus_rates(records, Dimension.CONSULTANT),
        by_type=_bonus_rates(records, Dimension.TYPE),
        by_tier=_bonus_rates(records, Dimension.TIER),
    )


# ---------------------------------------------------------------------------
# Monthly revenue
# ---------------------------------------------------------------------------


@dataclass
class MonthlyRevenue:
    month: str  # YYYY-MM of the completion date
    revenue: Decimal
    commissions: Decimal
    net_revenue: Decimal
    projects: int
    consulting_revenue: Decimal
    upsell_revenue: Decimal


def monthly_revenue(records: Iterable[Engagement]) -> list[MonthlyRevenue]:
    """Revenue per completion month, oldest first. Engagements without a completion date are skipped."""
    finished = [r for r in records if r.completed_on is not None]
    groups = partition(finished, lambda e: e.completed_on.strftime("%Y-%m"))
    rows = []
    for month, group in sorted(groups.items()):
        revenue = _revenue_total(group)
        commissions = _commission_total(group)
        rows.append(
            MonthlyRevenue(
                month=str(month),
                revenue=revenue,
                commissions=commissions,
                net_revenue=revenue - commissions,
                projects=len(group),
                consulting_revenue=_revenue_total(
                    r for r in group if r.engagement_type == EngagementType.CONSULTING
                ),
                upsell_revenue=_revenue_total(
                    r for r in group if r.engagement_type == EngagementType.UPSELL
                ),
            )
        )
    return rows


# ---------------------------------------------------------------------------
# Executive summary
# ---------------------------------------------------------------------------


@dataclass
class ExecutiveSummary:
    total_projects: int
    total_revenue: Decimal
    total_commissions: Decimal
    average_rating: float
    on_time_rate: float
    bonus_rate: float
    average_duration: float
    average_ticket: Decimal


def executive_summary(records: Iterable[Engagement]) -> ExecutiveSummary:
    """Headline figures for the executive report.

    Unlike the dashboard statistics, rates here are over every record
    in the (usually completed-only) input.
    """
    records = list(records)
    total = len(records)
    revenue = _revenue_total(records)
    return ExecutiveSummary(
        total_projects=total,
        total_revenue=revenue,
        total_commissions=_commission_total(records),
        average_rating=safe_mean([r.rating for r in records if r.rating is not None]),
        on_time_rate=safe_rate(sum(1 for r in records if r.deadline_met is True), total),
        bonus_rate=safe_rate(sum(1 for r in records if r.bonused), total),
        average_duration=safe_mean([r.duration_days for r in records]),
        average_ticket=safe_decimal_mean(revenue, total),
    )
