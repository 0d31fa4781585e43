"""Engagement service — repository I/O around the pure rule engine.

Reads pass the FilterSpec through to the repository and run the filter
pipeline and aggregators over whatever comes back; live and fixture data
are treated identically. Repository errors propagate unchanged: the
service neither retries nor substitutes fixture data.

Concurrency: the engine holds no shared state. The service takes no
locks, so two completions racing on the same engagement resolve
last-write-wins at the repository. That is accepted for this reporting
data. Each transition is one update carrying every field that must
change together, so a cancelled request never leaves a half-completed
engagement.
"""

import logging
from collections.abc import Callable, Hashable, Sequence
from datetime import date
from uuid import UUID

from consultrack.engine import breakdowns, lifecycle
from consultrack.engine.breakdowns import (
    BonusAnalysis,
    ConsultantCommission,
    ConsultantPerformance,
    Dimension,
    ExecutiveSummary,
    MonthlyRevenue,
)
from consultrack.engine.deadline import DeadlinePolicy
from consultrack.engine.filters import apply_filters
from consultrack.engine.stats import EngagementStats, GroupBucket, aggregate
from consultrack.errors import EngagementNotFoundError
from consultrack.models.engagement import (
    Engagement,
    EngagementCreate,
    EngagementPatch,
    FilterSpec,
)
from consultrack.repositories.base import EngagementRepository

logger = logging.getLogger(__name__)


class EngagementService:
    """Engagement CRUD, lifecycle transitions, and dashboard reporting."""

    def __init__(
        self,
        repo: EngagementRepository,
        *,
        policy: DeadlinePolicy | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._repo = repo
        self._policy = policy or DeadlinePolicy()
        self._today = today

    # -----------------------------------------------------------------
    # Records
    # -----------------------------------------------------------------

    async def list_engagements(self, spec: FilterSpec | None = None) -> list[Engagement]:
        return apply_filters(await self._repo.list(spec), spec)

    async def get(self, engagement_id: UUID) -> Engagement:
        """Fetch one engagement. Raises EngagementNotFoundError if missing."""
        record = await self._repo.get_by_id(engagement_id)
        if record is None:
            raise EngagementNotFoundError(engagement_id)
        return record

    async def create(self, payload: EngagementCreate) -> Engagement:
        record = await self._repo.create(payload)
        logger.info("Engagement %s created for %s", record.engagement_id, record.client_name)
        return record

    async def update(self, engagement_id: UUID, changes: EngagementPatch) -> Engagement:
        """Apply a user edit, keeping derived duration and commission consistent."""
        record = await self.get(engagement_id)
        patch = lifecycle.revise(record, changes, self._policy)
        return await self._repo.update(engagement_id, patch)

    async def delete(self, engagement_id: UUID) -> None:
        await self._repo.delete(engagement_id)
        logger.info("Engagement %s deleted", engagement_id)

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------

    async def pause(self, engagement_id: UUID, on: date | None = None) -> Engagement:
        record = await self.get(engagement_id)
        updated = await self._repo.update(
            engagement_id, lifecycle.pause(record, on or self._today())
        )
        logger.info("Engagement %s paused on %s", engagement_id, updated.paused_at)
        return updated

    async def resume(self, engagement_id: UUID, on: date | None = None) -> Engagement:
        record = await self.get(engagement_id)
        updated = await self._repo.update(
            engagement_id, lifecycle.resume(record, on or self._today())
        )
        logger.info(
            "Engagement %s resumed (%d paused days total)", engagement_id, updated.paused_days
        )
        return updated

    async def complete(
        self,
        engagement_id: UUID,
        *,
        rating: int,
        completed_on: date | None = None,
        duration_days: int | None = None,
        bonused: bool | None = None,
        closure_signed: bool | None = None,
    ) -> Engagement:
        """Rate, evaluate the deadline, compute commission, and persist all at once."""
        record = await self.get(engagement_id)
        patch = lifecycle.complete(
            record,
            rating=rating,
            completed_on=completed_on or self._today(),
            policy=self._policy,
            duration_days=duration_days,
            bonused=bonused,
            closure_signed=closure_signed,
        )
        updated = await self._repo.update(engagement_id, patch)
        logger.info(
            "Engagement %s completed: rating=%s deadline_met=%s commission=%s%% (%s)",
            engagement_id,
            updated.rating,
            updated.deadline_met,
            updated.commission_percent,
            updated.commission_value,
        )
        return updated

    async def preview_completion(
        self,
        engagement_id: UUID,
        *,
        rating: int,
        completed_on: date | None = None,
    ) -> EngagementPatch:
        """The completion patch ``complete`` would persist, without persisting it."""
        record = await self.get(engagement_id)
        return lifecycle.complete(
            record,
            rating=rating,
            completed_on=completed_on or self._today(),
            policy=self._policy,
        )

    async def cancel(self, engagement_id: UUID) -> Engagement:
        record = await self.get(engagement_id)
        updated = await self._repo.update(engagement_id, lifecycle.cancel(record))
        logger.info("Engagement %s cancelled", engagement_id)
        return updated

    # -----------------------------------------------------------------
    # Reporting
    # -----------------------------------------------------------------

    async def stats(self, spec: FilterSpec | None = None) -> EngagementStats:
        return aggregate(await self.list_engagements(spec))

    async def consultants(self, spec: FilterSpec | None = None) -> list[str]:
        return breakdowns.list_consultants(await self.list_engagements(spec))

    async def commissions(
        self,
        spec: FilterSpec | None = None,
        consultants: Sequence[str] | None = None,
    ) -> list[ConsultantCommission]:
        records = await self.list_engagements(spec)
        return breakdowns.commission_by_consultant(records, consultants)

    async def consultant_performance(
        self, spec: FilterSpec | None = None
    ) -> list[ConsultantPerformance]:
        return breakdowns.consultant_performance(await self.list_engagements(spec))

    async def distribution(
        self, dimension: Dimension, spec: FilterSpec | None = None
    ) -> dict[Hashable, GroupBucket]:
        return breakdowns.distribution(await self.list_engagements(spec), dimension)

    async def bonus_analysis(self, spec: FilterSpec | None = None) -> BonusAnalysis:
        return breakdowns.bonus_analysis(await self.list_engagements(spec))

    async def monthly_revenue(self, spec: FilterSpec | None = None) -> list[MonthlyRevenue]:
        return breakdowns.monthly_revenue(await self.list_engagements(spec))

    async def executive_summary(self, spec: FilterSpec | None = None) -> ExecutiveSummary:
        return breakdowns.executive_summary(await self.list_engagements(spec))
