"""Tests for EngagementService over the fixture repository."""

from datetime import date
from decimal import Decimal
from uuid import UUID

import pytest
from uuid_extensions import uuid7

from consultrack.engine.breakdowns import Dimension
from consultrack.engine.deadline import DeadlinePolicy
from consultrack.errors import EngagementNotFoundError, InvalidTransitionError
from consultrack.models.common import EngagementStatus
from consultrack.models.engagement import EngagementCreate, EngagementPatch, FilterSpec
from consultrack.reporting.service import EngagementService
from consultrack.repositories.fixture import FixtureEngagementRepository

IN_PROGRESS_ID = UUID("01900000-0000-7000-8000-000000000007")
PAUSED_ID = UUID("01900000-0000-7000-8000-000000000008")
COMPLETED_ID = UUID("01900000-0000-7000-8000-000000000001")


@pytest.fixture
def svc() -> EngagementService:
    return EngagementService(FixtureEngagementRepository(), today=lambda: date(2024, 5, 10))


class TestRecords:

    @pytest.mark.anyio
    async def test_list_with_filter(self, svc: EngagementService) -> None:
        rows = await svc.list_engagements(FilterSpec(consultant="Carla Mendes"))
        assert {r.client_name for r in rows} == {"Transportes Rapido", "Academia Forca Total"}

    @pytest.mark.anyio
    async def test_get_missing_raises(self, svc: EngagementService) -> None:
        with pytest.raises(EngagementNotFoundError):
            await svc.get(uuid7())

    @pytest.mark.anyio
    async def test_create_then_edit(self, svc: EngagementService) -> None:
        created = await svc.create(EngagementCreate(
            client_name="Farmacia Saude",
            engagement_type="consulting",
            size_tier="Basic",
            start_date=date(2024, 5, 1),
            consulting_value=Decimal("1500.00"),
        ))
        edited = await svc.update(created.engagement_id, EngagementPatch(end_date=date(2024, 5, 9)))
        assert edited.duration_days == 8

    @pytest.mark.anyio
    async def test_edit_completed_value_recomputes_commission(self, svc: EngagementService) -> None:
        updated = await svc.update(
            COMPLETED_ID, EngagementPatch(consulting_value=Decimal("4000.00"))
        )
        assert updated.commission_value == Decimal("480")

    @pytest.mark.anyio
    async def test_edit_completed_duration_uses_service_policy(self) -> None:
        svc = EngagementService(
            FixtureEngagementRepository(),
            policy=DeadlinePolicy(tier_max_days={"Basic": 10}),
        )
        updated = await svc.update(COMPLETED_ID, EngagementPatch(duration_days=11))
        assert updated.deadline_met is False
        assert updated.commission_percent == 8
        assert updated.commission_value == Decimal("240")

    @pytest.mark.anyio
    async def test_delete(self, svc: EngagementService) -> None:
        await svc.delete(IN_PROGRESS_ID)
        with pytest.raises(EngagementNotFoundError):
            await svc.get(IN_PROGRESS_ID)


class TestLifecycle:

    @pytest.mark.anyio
    async def test_pause_defaults_to_today(self, svc: EngagementService) -> None:
        paused = await svc.pause(IN_PROGRESS_ID)
        assert paused.paused_at == date(2024, 5, 10)

    @pytest.mark.anyio
    async def test_resume_adds_pause_interval(self, svc: EngagementService) -> None:
        resumed = await svc.resume(PAUSED_ID, date(2024, 5, 12))
        assert resumed.status == EngagementStatus.IN_PROGRESS
        assert resumed.paused_days == 3 + 10

    @pytest.mark.anyio
    async def test_complete_persists_outcome(self, svc: EngagementService) -> None:
        done = await svc.complete(IN_PROGRESS_ID, rating=5, completed_on=date(2024, 4, 20))
        assert done.deadline_met is True
        assert done.commission_value == Decimal("720")
        assert (await svc.get(IN_PROGRESS_ID)).status == EngagementStatus.COMPLETED

    @pytest.mark.anyio
    async def test_complete_uses_service_policy(self) -> None:
        svc = EngagementService(
            FixtureEngagementRepository(),
            policy=DeadlinePolicy(tier_max_days={"Starter": 10}),
        )
        done = await svc.complete(IN_PROGRESS_ID, rating=5, completed_on=date(2024, 4, 20))
        assert done.deadline_met is False
        assert done.commission_percent == 8

    @pytest.mark.anyio
    async def test_preview_does_not_persist(self, svc: EngagementService) -> None:
        patch = await svc.preview_completion(IN_PROGRESS_ID, rating=4)
        assert patch.commission_percent == 8
        assert (await svc.get(IN_PROGRESS_ID)).status == EngagementStatus.IN_PROGRESS

    @pytest.mark.anyio
    async def test_cancel_completed_rejected(self, svc: EngagementService) -> None:
        with pytest.raises(InvalidTransitionError):
            await svc.cancel(COMPLETED_ID)


class TestReporting:

    @pytest.mark.anyio
    async def test_stats(self, svc: EngagementService) -> None:
        stats = await svc.stats()
        assert stats.total_projects == 9
        assert stats.total_revenue == Decimal("73000.00")

    @pytest.mark.anyio
    async def test_stats_filtered(self, svc: EngagementService) -> None:
        stats = await svc.stats(FilterSpec(consultant="Ana Souza"))
        assert stats.total_projects == 3
        assert stats.completed_projects == 2

    @pytest.mark.anyio
    async def test_stats_unknown_consultant_is_zeroes(self, svc: EngagementService) -> None:
        stats = await svc.stats(FilterSpec(consultant="Nobody"))
        assert stats.total_projects == 0
        assert stats.deadline_compliance_rate == 0.0

    @pytest.mark.anyio
    async def test_consultants(self, svc: EngagementService) -> None:
        assert await svc.consultants() == ["Ana Souza", "Bruno Lima", "Carla Mendes"]

    @pytest.mark.anyio
    async def test_commissions(self, svc: EngagementService) -> None:
        rows = await svc.commissions(consultants=["Bruno Lima"])
        assert rows[0].total_commission == Decimal("1160")

    @pytest.mark.anyio
    async def test_reports_share_the_filter(self, svc: EngagementService) -> None:
        spec = FilterSpec(status="completed")
        assert len(await svc.consultant_performance(spec)) == 4
        assert set(await svc.distribution(Dimension.STATUS, spec)) == {"completed"}
        assert (await svc.bonus_analysis(spec)).total_projects == 6
        assert len(await svc.monthly_revenue(spec)) == 4
        assert (await svc.executive_summary(spec)).on_time_rate == pytest.approx(4 / 6 * 100)
