"""Tests for SqlEngagementRepository."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from uuid_extensions import uuid7

from consultrack.engine import lifecycle
from consultrack.errors import EngagementNotFoundError, RepositoryError
from consultrack.models.common import EngagementStatus, EngagementType
from consultrack.models.engagement import EngagementCreate, EngagementPatch, FilterSpec
from consultrack.repositories.engagements import SqlEngagementRepository


@pytest.fixture
def repo(db_session):
    return SqlEngagementRepository(db_session)


def _create(**overrides) -> EngagementCreate:
    data = {
        "client_name": "Oficina Rapida",
        "engagement_type": "consulting",
        "size_tier": "Pro",
        "consultant": "Bruno Lima",
        "start_date": date(2024, 5, 1),
        "consulting_value": Decimal("7500.00"),
    }
    data.update(overrides)
    return EngagementCreate(**data)


class TestSqlEngagementRepository:

    @pytest.mark.anyio
    async def test_create_and_get(self, repo: SqlEngagementRepository) -> None:
        created = await repo.create(_create())
        fetched = await repo.get_by_id(created.engagement_id)
        assert fetched is not None
        assert fetched.client_name == "Oficina Rapida"
        assert fetched.engagement_type == EngagementType.CONSULTING
        assert fetched.consulting_value == Decimal("7500.00")
        assert fetched.status == EngagementStatus.IN_PROGRESS

    @pytest.mark.anyio
    async def test_get_missing_returns_none(self, repo: SqlEngagementRepository) -> None:
        assert await repo.get_by_id(uuid7()) is None

    @pytest.mark.anyio
    async def test_list_most_recent_first(self, repo: SqlEngagementRepository) -> None:
        await repo.create(_create(client_name="Old", start_date=date(2024, 1, 1)))
        await repo.create(_create(client_name="New", start_date=date(2024, 6, 1)))
        rows = await repo.list()
        assert [r.client_name for r in rows] == ["New", "Old"]

    @pytest.mark.anyio
    async def test_list_filters_in_query(self, repo: SqlEngagementRepository) -> None:
        await repo.create(_create(consultant="Ana Souza"))
        await repo.create(_create(consultant="Bruno Lima", engagement_type="upsell"))
        rows = await repo.list(FilterSpec(consultant="Bruno Lima", engagement_type="upsell"))
        assert len(rows) == 1
        assert rows[0].engagement_type == EngagementType.UPSELL

    @pytest.mark.anyio
    async def test_list_date_containment(self, repo: SqlEngagementRepository) -> None:
        await repo.create(_create(client_name="Inside", end_date=date(2024, 5, 20)))
        await repo.create(_create(client_name="Overlap", end_date=date(2024, 7, 2)))
        await repo.create(_create(client_name="Open"))
        rows = await repo.list(FilterSpec(date_from=date(2024, 5, 1), date_to=date(2024, 6, 30)))
        assert [r.client_name for r in rows] == ["Inside"]

    @pytest.mark.anyio
    async def test_update_persists_completion(self, repo: SqlEngagementRepository) -> None:
        created = await repo.create(_create())
        patch = lifecycle.complete(created, rating=5, completed_on=date(2024, 5, 31))
        updated = await repo.update(created.engagement_id, patch)
        assert updated.status == EngagementStatus.COMPLETED

        fetched = await repo.get_by_id(created.engagement_id)
        assert fetched.deadline_met is True
        assert fetched.commission_percent == 12
        assert fetched.commission_value == Decimal("900")
        assert fetched.duration_days == 30

    @pytest.mark.anyio
    async def test_update_missing_raises(self, repo: SqlEngagementRepository) -> None:
        with pytest.raises(EngagementNotFoundError):
            await repo.update(uuid7(), EngagementPatch(client_name="X"))

    @pytest.mark.anyio
    async def test_delete(self, repo: SqlEngagementRepository) -> None:
        created = await repo.create(_create())
        await repo.delete(created.engagement_id)
        assert await repo.get_by_id(created.engagement_id) is None

    @pytest.mark.anyio
    async def test_delete_missing_raises(self, repo: SqlEngagementRepository) -> None:
        with pytest.raises(EngagementNotFoundError):
            await repo.delete(uuid7())

    @pytest.mark.anyio
    async def test_add_keeps_demo_id(self, repo: SqlEngagementRepository, demo_records) -> None:
        record = demo_records[0]
        stored = await repo.add(record)
        assert stored.engagement_id == record.engagement_id
        assert stored.commission_value == record.commission_value


class _BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    async def get(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestRepositoryErrors:
    """Driver failures surface as RepositoryError, never as empty results."""

    @pytest.mark.anyio
    async def test_list_failure(self) -> None:
        repo = SqlEngagementRepository(_BrokenSession())  # type: ignore[arg-type]
        with pytest.raises(RepositoryError):
            await repo.list()

    @pytest.mark.anyio
    async def test_get_failure(self) -> None:
        repo = SqlEngagementRepository(_BrokenSession())  # type: ignore[arg-type]
        with pytest.raises(RepositoryError):
            await repo.get_by_id(uuid7())
