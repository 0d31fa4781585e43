"""FastAPI engagement endpoints.

GET    /v1/engagements                  — list (filter query params)
POST   /v1/engagements                  — create
GET    /v1/engagements/{id}             — fetch
PATCH  /v1/engagements/{id}             — edit descriptive/financial fields
DELETE /v1/engagements/{id}             — delete permanently
POST   /v1/engagements/{id}/pause       — pause
POST   /v1/engagements/{id}/resume      — resume
POST   /v1/engagements/{id}/complete    — rate, evaluate deadline, compute commission
POST   /v1/engagements/{id}/cancel      — cancel (no commission)
GET    /v1/engagements/{id}/commission-preview — commission if completed now
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field

from consultrack.api.dependencies import get_engagement_service, get_filter_spec
from consultrack.models.common import EngagementType, Money, Rating
from consultrack.models.engagement import (
    Engagement,
    EngagementCreate,
    EngagementPatch,
    FilterSpec,
)
from consultrack.reporting.service import EngagementService

router = APIRouter(prefix="/v1/engagements", tags=["engagements"])


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class EditEngagementRequest(BaseModel):
    """User-editable fields. Status and outcome change only through transitions."""

    client_name: str | None = Field(default=None, min_length=1, max_length=255)
    engagement_type: EngagementType | None = None
    size_tier: str | None = Field(default=None, min_length=1, max_length=50)
    consultant: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    duration_days: int | None = Field(default=None, ge=0)
    closure_signed: bool | None = None
    consulting_value: Money | None = None
    bonus_value: Money | None = None
    bonused: bool | None = None
    rating: Rating | None = None


class TransitionRequest(BaseModel):
    on: date | None = None


class CompleteRequest(BaseModel):
    rating: Rating
    completed_on: date | None = None
    duration_days: int | None = Field(default=None, ge=0)
    bonused: bool | None = None
    closure_signed: bool | None = None


class CommissionPreviewResponse(BaseModel):
    percent: int
    value: Decimal
    deadline_met: bool


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.get("", response_model=list[Engagement])
async def list_engagements(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
) -> list[Engagement]:
    """List engagements matching the filter, most recent start first."""
    return await svc.list_engagements(spec)


@router.post("", status_code=201, response_model=Engagement)
async def create_engagement(
    body: EngagementCreate,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    return await svc.create(body)


@router.get("/{engagement_id}", response_model=Engagement)
async def get_engagement(
    engagement_id: UUID,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    return await svc.get(engagement_id)


@router.patch("/{engagement_id}", response_model=Engagement)
async def edit_engagement(
    engagement_id: UUID,
    body: EditEngagementRequest,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    changes = EngagementPatch(**body.model_dump(exclude_unset=True))
    return await svc.update(engagement_id, changes)


@router.delete("/{engagement_id}", status_code=204)
async def delete_engagement(
    engagement_id: UUID,
    svc: EngagementService = Depends(get_engagement_service),
) -> Response:
    await svc.delete(engagement_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


@router.post("/{engagement_id}/pause", response_model=Engagement)
async def pause_engagement(
    engagement_id: UUID,
    body: TransitionRequest | None = None,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    return await svc.pause(engagement_id, body.on if body else None)


@router.post("/{engagement_id}/resume", response_model=Engagement)
async def resume_engagement(
    engagement_id: UUID,
    body: TransitionRequest | None = None,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    return await svc.resume(engagement_id, body.on if body else None)


@router.post("/{engagement_id}/complete", response_model=Engagement)
async def complete_engagement(
    engagement_id: UUID,
    body: CompleteRequest,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    """Finish the engagement. Deadline and commission are computed, never supplied."""
    return await svc.complete(
        engagement_id,
        rating=body.rating,
        completed_on=body.completed_on,
        duration_days=body.duration_days,
        bonused=body.bonused,
        closure_signed=body.closure_signed,
    )


@router.post("/{engagement_id}/cancel", response_model=Engagement)
async def cancel_engagement(
    engagement_id: UUID,
    svc: EngagementService = Depends(get_engagement_service),
) -> Engagement:
    return await svc.cancel(engagement_id)


@router.get("/{engagement_id}/commission-preview", response_model=CommissionPreviewResponse)
async def preview_commission(
    engagement_id: UUID,
    rating: int = Query(..., ge=1, le=5),
    completed_on: date | None = Query(default=None),
    svc: EngagementService = Depends(get_engagement_service),
) -> CommissionPreviewResponse:
    """Commission the engagement would earn if completed now with ``rating``. Nothing is saved."""
    patch = await svc.preview_completion(engagement_id, rating=rating, completed_on=completed_on)
    return CommissionPreviewResponse(
        percent=patch.commission_percent,
        value=patch.commission_value,
        deadline_met=patch.deadline_met,
    )
