"""In-memory engagement repository seeded with the static demo dataset.

Selected explicitly with ``DATA_SOURCE=fixture``; the engine cannot tell
it apart from the live repository. Writes only touch this instance's
copy, so each instance starts from the same demo state.
"""

from collections.abc import Iterable
from uuid import UUID

from consultrack.data.fixtures import demo_engagements
from consultrack.engine.filters import apply_filters
from consultrack.errors import EngagementNotFoundError
from consultrack.models.engagement import (
    Engagement,
    EngagementCreate,
    EngagementPatch,
    FilterSpec,
    apply_patch,
)
from consultrack.repositories.base import EngagementRepository


class FixtureEngagementRepository(EngagementRepository):
    def __init__(self, records: Iterable[Engagement] | None = None) -> None:
        seed = demo_engagements() if records is None else records
        self._store: dict[UUID, Engagement] = {r.engagement_id: r for r in seed}

    async def list(self, spec: FilterSpec | None = None) -> list[Engagement]:
        ordered = sorted(
            self._store.values(),
            key=lambda r: (-r.start_date.toordinal(), str(r.engagement_id)),
        )
        return apply_filters(ordered, spec)

    async def get_by_id(self, engagement_id: UUID) -> Engagement | None:
        return self._store.get(engagement_id)

    async def create(self, patch: EngagementCreate) -> Engagement:
        record = patch.build()
        self._store[record.engagement_id] = record
        return record

    async def update(self, engagement_id: UUID, patch: EngagementPatch) -> Engagement:
        current = self._store.get(engagement_id)
        if current is None:
            raise EngagementNotFoundError(engagement_id)
        updated = apply_patch(current, patch)
        self._store[engagement_id] = updated
        return updated

    async def delete(self, engagement_id: UUID) -> None:
        if self._store.pop(engagement_id, None) is None:
            raise EngagementNotFoundError(engagement_id)
