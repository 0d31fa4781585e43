"""Tests for report breakdowns over the demo dataset."""

from decimal import Decimal

import pytest

from consultrack.engine.breakdowns import (
    Dimension,
    bonus_analysis,
    commission_by_consultant,
    consultant_performance,
    distribution,
    executive_summary,
    list_consultants,
    monthly_revenue,
)
from consultrack.models.common import EngagementStatus


class TestListConsultants:

    def test_sorted_distinct_names(self, demo_records) -> None:
        assert list_consultants(demo_records) == ["Ana Souza", "Bruno Lima", "Carla Mendes"]

    def test_empty(self) -> None:
        assert list_consultants([]) == []


class TestCommissionByConsultant:
    """Only completed, assigned engagements contribute."""

    def test_totals(self, demo_records) -> None:
        rows = {row.consultant: row for row in commission_by_consultant(demo_records)}
        assert list(rows) == ["Ana Souza", "Bruno Lima", "Carla Mendes"]
        assert rows["Ana Souza"].total_commission == Decimal("360")
        assert rows["Ana Souza"].projects == 2
        assert rows["Bruno Lima"].total_commission == Decimal("1160")
        assert rows["Bruno Lima"].projects == 2
        assert rows["Carla Mendes"].total_commission == Decimal("3000")
        assert rows["Carla Mendes"].projects == 1

    def test_requested_names_keep_order_and_zero_fill(self, demo_records) -> None:
        rows = commission_by_consultant(demo_records, ["Carla Mendes", "Diego Alves"])
        assert [r.consultant for r in rows] == ["Carla Mendes", "Diego Alves"]
        assert rows[1].total_commission == Decimal("0")
        assert rows[1].projects == 0

    def test_open_engagements_ignored(self, demo_records) -> None:
        open_only = [r for r in demo_records if r.status != EngagementStatus.COMPLETED]
        assert commission_by_consultant(open_only) == []


class TestConsultantPerformance:

    def test_sorted_by_revenue(self, demo_records) -> None:
        rows = consultant_performance(demo_records)
        assert [r.consultant for r in rows] == [
            "Carla Mendes", "Ana Souza", "Bruno Lima", "unassigned",
        ]

    def test_figures(self, demo_records) -> None:
        rows = {r.consultant: r for r in consultant_performance(demo_records)}
        ana = rows["Ana Souza"]
        assert ana.projects == 3
        assert ana.revenue == Decimal("17500.00")
        assert ana.commissions == Decimal("360")
        assert ana.net_revenue == Decimal("17140")
        assert ana.average_rating == 4.0
        assert ana.deadline_rate == 100.0
        assert rows["Bruno Lima"].deadline_rate == 0.0
        assert rows["Carla Mendes"].bonus_rate == 50.0


class TestDistribution:

    def test_by_type(self, demo_records) -> None:
        buckets = distribution(demo_records, Dimension.TYPE)
        assert buckets["consulting"].count == 6
        assert buckets["consulting"].total == Decimal("56000.00")
        assert buckets["upsell"].count == 3
        assert buckets["upsell"].total == Decimal("17000.00")

    def test_by_status(self, demo_records) -> None:
        buckets = distribution(demo_records, "status")
        assert {k: b.count for k, b in buckets.items()} == {
            "completed": 6, "in_progress": 1, "paused": 1, "cancelled": 1,
        }

    def test_by_tier_includes_unknown_tier(self, demo_records) -> None:
        buckets = distribution(demo_records, Dimension.TIER)
        assert buckets["Custom"].total == Decimal("8000.00")

    def test_invalid_dimension(self, demo_records) -> None:
        with pytest.raises(ValueError):
            distribution(demo_records, "region")


class TestBonusAnalysis:

    def test_demo(self, demo_records) -> None:
        result = bonus_analysis(demo_records)
        assert result.total_projects == 9
        assert result.bonused_projects == 2
        assert result.bonus_rate == pytest.approx(2 / 9 * 100)
        assert result.bonused_revenue == Decimal("37000.00")
        assert result.non_bonused_revenue == Decimal("36000.00")
        assert result.average_bonused_ticket == Decimal("18500")
        assert result.by_consultant["Carla Mendes"] == 50.0
        assert result.by_consultant["unassigned"] == 0.0
        assert result.by_tier["Pro"] == 50.0

    def test_empty(self) -> None:
        result = bonus_analysis([])
        assert result.bonus_rate == 0.0
        assert result.average_bonused_ticket == Decimal("0")


class TestMonthlyRevenue:

    def test_months_in_order(self, demo_records) -> None:
        rows = monthly_revenue(demo_records)
        assert [r.month for r in rows] == ["2024-01", "2024-02", "2024-03", "2024-04"]

    def test_month_figures(self, demo_records) -> None:
        march = {r.month: r for r in monthly_revenue(demo_records)}["2024-03"]
        assert march.projects == 2
        assert march.revenue == Decimal("14500.00")
        assert march.commissions == Decimal("1160")
        assert march.net_revenue == Decimal("13340")
        assert march.consulting_revenue == Decimal("12000.00")
        assert march.upsell_revenue == Decimal("2500.00")


class TestExecutiveSummary:

    def test_demo(self, demo_records) -> None:
        summary = executive_summary(demo_records)
        assert summary.total_projects == 9
        assert summary.total_revenue == Decimal("73000.00")
        assert summary.total_commissions == Decimal("5480")
        assert summary.average_rating == pytest.approx(26 / 6)
        assert summary.on_time_rate == pytest.approx(4 / 9 * 100)
        assert summary.average_duration == pytest.approx(184 / 9)

    def test_empty(self) -> None:
        summary = executive_summary([])
        assert summary.total_projects == 0
        assert summary.average_ticket == Decimal("0")
        assert summary.on_time_rate == 0.0
