"""Engagement repository backed by async SQLAlchemy (the live data source)."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from consultrack.db.tables import EngagementRow
from consultrack.errors import EngagementNotFoundError, RepositoryError
from consultrack.models.engagement import (
    Engagement,
    EngagementCreate,
    EngagementPatch,
    FilterSpec,
    apply_patch,
    build_engagement,
)
from consultrack.repositories.base import EngagementRepository

logger = logging.getLogger(__name__)

_COLUMNS = tuple(EngagementRow.__table__.columns.keys())


@contextmanager
def _io_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.warning("Engagement repository: %s failed: %s", action, exc)
        raise RepositoryError(f"{action} failed: {exc}") from exc


def _row_to_model(row: EngagementRow) -> Engagement:
    return build_engagement({name: getattr(row, name) for name in _COLUMNS})


def _model_values(model: Engagement) -> dict[str, Any]:
    values = model.model_dump(include=set(_COLUMNS))
    values["engagement_type"] = model.engagement_type.value
    values["status"] = model.status.value
    return values


def _where(spec: FilterSpec) -> list:
    """Translate a FilterSpec into WHERE clauses with FilterPipeline semantics."""
    clauses = []
    if spec.consultant is not None:
        clauses.append(EngagementRow.consultant == spec.consultant)
    if spec.engagement_type is not None:
        clauses.append(EngagementRow.engagement_type == spec.engagement_type.value)
    if spec.status is not None:
        clauses.append(EngagementRow.status == spec.status.value)
    if spec.date_from is not None:
        clauses.append(EngagementRow.start_date >= spec.date_from)
    if spec.date_to is not None:
        # NULL end dates never compare true, matching containment.
        clauses.append(EngagementRow.end_date <= spec.date_to)
    return clauses


class SqlEngagementRepository(EngagementRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(self, spec: FilterSpec | None = None) -> list[Engagement]:
        stmt = select(EngagementRow).order_by(
            EngagementRow.start_date.desc(), EngagementRow.engagement_id
        )
        if spec is not None:
            stmt = stmt.where(*_where(spec))
        with _io_errors("list"):
            result = await self._session.execute(stmt)
            rows = list(result.scalars().all())
        return [_row_to_model(r) for r in rows]

    async def get_by_id(self, engagement_id: UUID) -> Engagement | None:
        with _io_errors("get"):
            row = await self._session.get(EngagementRow, engagement_id)
        return _row_to_model(row) if row is not None else None

    async def create(self, patch: EngagementCreate) -> Engagement:
        model = patch.build()
        return await self.add(model)

    async def add(self, model: Engagement) -> Engagement:
        """Persist an already-built Engagement (seeding, imports)."""
        row = EngagementRow(**_model_values(model))
        with _io_errors("create"):
            self._session.add(row)
            await self._session.flush()
            await self._session.refresh(row)
        return _row_to_model(row)

    async def update(self, engagement_id: UUID, patch: EngagementPatch) -> Engagement:
        with _io_errors("update"):
            row = await self._session.get(EngagementRow, engagement_id)
        if row is None:
            raise EngagementNotFoundError(engagement_id)

        updated = apply_patch(_row_to_model(row), patch)
        with _io_errors("update"):
            for name, value in _model_values(updated).items():
                setattr(row, name, value)
            await self._session.flush()
        return updated

    async def delete(self, engagement_id: UUID) -> None:
        with _io_errors("delete"):
            row = await self._session.get(EngagementRow, engagement_id)
        if row is None:
            raise EngagementNotFoundError(engagement_id)
        with _io_errors("delete"):
            await self._session.delete(row)
            await self._session.flush()
