"""FastAPI dashboard endpoints.

GET /v1/dashboard/stats                   — headline statistics
GET /v1/dashboard/consultants             — consultant names with chart colours
GET /v1/dashboard/commissions             — commission totals per consultant
GET /v1/dashboard/consultant-performance  — per-consultant performance table
GET /v1/dashboard/breakdown/{dimension}   — revenue by type / tier / status / consultant
GET /v1/dashboard/bonus                   — bonus analysis
GET /v1/dashboard/monthly-revenue         — revenue by completion month
GET /v1/dashboard/executive-summary       — executive summary

Every endpoint accepts the same filter query params as the engagement list.
Read-only.
"""

from dataclasses import asdict
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from consultrack.api.dependencies import (
    get_color_cache,
    get_engagement_service,
    get_filter_spec,
)
from consultrack.engine.breakdowns import Dimension
from consultrack.models.engagement import FilterSpec
from consultrack.reporting.colors import ConsultantColorCache
from consultrack.reporting.service import EngagementService

router = APIRouter(prefix="/v1/dashboard", tags=["dashboard"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class StatsResponse(BaseModel):
    total_projects: int
    active_projects: int
    completed_projects: int
    average_rating: float
    total_revenue: Decimal
    average_project_duration: float
    deadline_compliance_rate: float


class ConsultantOut(BaseModel):
    name: str
    color: str


class ConsultantsResponse(BaseModel):
    consultants: list[ConsultantOut]


class ConsultantCommissionOut(BaseModel):
    consultant: str
    total_commission: Decimal
    projects: int
    color: str


class ConsultantPerformanceOut(BaseModel):
    consultant: str
    projects: int
    revenue: Decimal
    commissions: Decimal
    net_revenue: Decimal
    average_rating: float
    deadline_rate: float
    bonus_rate: float
    average_ticket: Decimal
    color: str


class GroupBucketOut(BaseModel):
    key: str
    total: Decimal
    count: int
    samples: int
    average: Decimal


class BreakdownResponse(BaseModel):
    dimension: Dimension
    groups: list[GroupBucketOut]


class BonusAnalysisResponse(BaseModel):
    total_projects: int
    bonused_projects: int
    bonus_rate: float
    bonused_revenue: Decimal
    non_bonused_revenue: Decimal
    average_bonused_ticket: Decimal
    by_consultant: dict[str, float]
    by_type: dict[str, float]
    by_tier: dict[str, float]


class MonthlyRevenueOut(BaseModel):
    month: str
    revenue: Decimal
    commissions: Decimal
    net_revenue: Decimal
    projects: int
    consulting_revenue: Decimal
    upsell_revenue: Decimal


class ExecutiveSummaryResponse(BaseModel):
    total_projects: int
    total_revenue: Decimal
    total_commissions: Decimal
    average_rating: float
    on_time_rate: float
    bonus_rate: float
    average_duration: float
    average_ticket: Decimal


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
) -> StatsResponse:
    stats = await svc.stats(spec)
    return StatsResponse(**stats.to_dict())


@router.get("/consultants", response_model=ConsultantsResponse)
async def get_consultants(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
    colors: ConsultantColorCache = Depends(get_color_cache),
) -> ConsultantsResponse:
    """Distinct consultant names, sorted, each with its stable chart colour."""
    names = await svc.consultants(spec)
    return ConsultantsResponse(
        consultants=[ConsultantOut(name=n, color=colors.color_for(n)) for n in names],
    )


@router.get("/commissions", response_model=list[ConsultantCommissionOut])
async def get_commissions(
    consultants: list[str] | None = Query(default=None),
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
    colors: ConsultantColorCache = Depends(get_color_cache),
) -> list[ConsultantCommissionOut]:
    """Commission totals for completed work.

    Repeat ``consultants`` to ask for specific people; listed names with
    no commissioned work come back with zero totals.
    """
    rows = await svc.commissions(spec, consultants)
    return [
        ConsultantCommissionOut(**asdict(row), color=colors.color_for(row.consultant))
        for row in rows
    ]


@router.get("/consultant-performance", response_model=list[ConsultantPerformanceOut])
async def get_consultant_performance(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
    colors: ConsultantColorCache = Depends(get_color_cache),
) -> list[ConsultantPerformanceOut]:
    rows = await svc.consultant_performance(spec)
    return [
        ConsultantPerformanceOut(**asdict(row), color=colors.color_for(row.consultant))
        for row in rows
    ]


@router.get("/breakdown/{dimension}", response_model=BreakdownResponse)
async def get_breakdown(
    dimension: Dimension,
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
) -> BreakdownResponse:
    buckets = await svc.distribution(dimension, spec)
    return BreakdownResponse(
        dimension=dimension,
        groups=[
            GroupBucketOut(key=str(key), **bucket.to_dict())
            for key, bucket in buckets.items()
        ],
    )


@router.get("/bonus", response_model=BonusAnalysisResponse)
async def get_bonus_analysis(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
) -> BonusAnalysisResponse:
    return BonusAnalysisResponse(**asdict(await svc.bonus_analysis(spec)))


@router.get("/monthly-revenue", response_model=list[MonthlyRevenueOut])
async def get_monthly_revenue(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
) -> list[MonthlyRevenueOut]:
    rows = await svc.monthly_revenue(spec)
    return [MonthlyRevenueOut(**asdict(row)) for row in rows]


@router.get("/executive-summary", response_model=ExecutiveSummaryResponse)
async def get_executive_summary(
    spec: FilterSpec = Depends(get_filter_spec),
    svc: EngagementService = Depends(get_engagement_service),
) -> ExecutiveSummaryResponse:
    return ExecutiveSummaryResponse(**asdict(await svc.executive_summary(spec)))
