"""Abstract repository interface for engagement persistence.

Every operation is async and fallible: I/O failures surface as
RepositoryError, unknown ids on update/delete as EngagementNotFoundError.
Repositories persist validated records; business rules live in
``consultrack.engine``.

SQL repositories call add()/flush()/refresh() only and never commit().
The session dependency handles commit/rollback (Unit-of-Work).
"""

from abc import ABC, abstractmethod
from uuid import UUID

from consultrack.models.engagement import (
    Engagement,
    EngagementCreate,
    EngagementPatch,
    FilterSpec,
)


class EngagementRepository(ABC):
    """Engagement store: list/filter, fetch, create, update, delete."""

    @abstractmethod
    async def list(self, spec: FilterSpec | None = None) -> list[Engagement]:
        """Engagements matching ``spec``, most recent start first."""
        ...

    @abstractmethod
    async def get_by_id(self, engagement_id: UUID) -> Engagement | None:
        ...

    @abstractmethod
    async def create(self, patch: EngagementCreate) -> Engagement:
        ...

    @abstractmethod
    async def update(self, engagement_id: UUID, patch: EngagementPatch) -> Engagement:
        """Apply ``patch`` atomically and return the stored record."""
        ...

    @abstractmethod
    async def delete(self, engagement_id: UUID) -> None:
        ...
