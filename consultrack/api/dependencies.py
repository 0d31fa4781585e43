"""FastAPI dependency injection factories.

The engagement repository is chosen by configuration, not by probing
the environment: with ``DATA_SOURCE=fixture`` the app installs a
FixtureEngagementRepository on ``app.state`` at startup and every request
uses it; otherwise each request gets a SqlEngagementRepository bound to
its Unit-of-Work session.
"""

from datetime import date

from fastapi import Depends, HTTPException, Query, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from consultrack.config.settings import Settings, get_settings
from consultrack.db.session import get_async_session
from consultrack.engine.deadline import DeadlinePolicy
from consultrack.models.engagement import FilterSpec
from consultrack.reporting.colors import ConsultantColorCache
from consultrack.reporting.service import EngagementService
from consultrack.repositories.base import EngagementRepository
from consultrack.repositories.engagements import SqlEngagementRepository

# ---------------------------------------------------------------------------
# Repository / service
# ---------------------------------------------------------------------------


async def get_engagement_repo(
    request: Request,
    session: AsyncSession = Depends(get_async_session),
) -> EngagementRepository:
    fixture = getattr(request.app.state, "fixture_repository", None)
    if fixture is not None:
        return fixture
    return SqlEngagementRepository(session)


def get_deadline_policy(settings: Settings = Depends(get_settings)) -> DeadlinePolicy:
    return DeadlinePolicy(default_max_days=settings.DEFAULT_MAX_DEADLINE_DAYS)


async def get_engagement_service(
    repo: EngagementRepository = Depends(get_engagement_repo),
    policy: DeadlinePolicy = Depends(get_deadline_policy),
) -> EngagementService:
    return EngagementService(repo, policy=policy)


# ---------------------------------------------------------------------------
# Request-scoped helpers
# ---------------------------------------------------------------------------


def get_filter_spec(
    consultant: str | None = Query(default=None),
    engagement_type: str | None = Query(default=None),
    status: str | None = Query(default=None),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
) -> FilterSpec:
    """Build a FilterSpec from query params ("all"/"todos" mean no constraint)."""
    try:
        return FilterSpec(
            consultant=consultant,
            engagement_type=engagement_type,
            status=status,
            date_from=date_from,
            date_to=date_to,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def get_color_cache() -> ConsultantColorCache:
    """A fresh colour cache per request."""
    return ConsultantColorCache()
