"""FastAPI application entry point for Consultrack.

Health check with DB connectivity (skipped when serving fixture data).
Domain errors map to HTTP status codes here, once, for every router.
"""

import logging

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from consultrack.api.dashboard import router as dashboard_router
from consultrack.api.engagements import router as engagements_router
from consultrack.config.settings import Environment, get_settings
from consultrack.errors import (
    EngagementNotFoundError,
    EngagementValidationError,
    RepositoryError,
)
from consultrack.repositories.fixture import FixtureEngagementRepository

APP_VERSION = "0.1.0"

settings = get_settings()

_LOG_NAME_TO_LEVEL: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# --- Structured logging ---
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer() if settings.ENVIRONMENT == Environment.DEV
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value],
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(level=_LOG_NAME_TO_LEVEL[settings.LOG_LEVEL.value])

logger: structlog.stdlib.BoundLogger = structlog.get_logger()

# --- FastAPI app ---
app = FastAPI(
    title="Consultrack API",
    description="Consulting engagement tracking, commissions and dashboard reporting.",
    version=APP_VERSION,
)

# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == Environment.DEV else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Data source ---
if settings.uses_fixture_data:
    app.state.fixture_repository = FixtureEngagementRepository()
    logger.info("data_source_selected", source=settings.DATA_SOURCE.value)


# --- Routers ---
app.include_router(engagements_router)
app.include_router(dashboard_router)


# --- Error mapping ---


@app.exception_handler(EngagementValidationError)
async def _validation_error(request: Request, exc: EngagementValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(EngagementNotFoundError)
async def _not_found(request: Request, exc: EngagementNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RepositoryError)
async def _repository_error(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.error("repository_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": "Engagement data is unavailable."})


# --- Infrastructure Endpoints (global) ---


@app.get("/health")
async def health_check(request: Request) -> dict:
    """Liveness probe with component health checks.

    Returns 200 always (degraded status if components are down).
    """
    checks: dict[str, bool] = {"api": True}

    if getattr(request.app.state, "fixture_repository", None) is not None:
        checks["fixture_data"] = True
    else:
        try:
            from consultrack.db.session import async_session_factory
            async with async_session_factory() as session:
                await session.execute(text("SELECT 1"))
            checks["database"] = True
        except Exception:
            checks["database"] = False

    all_ok = all(checks.values())

    return {
        "status": "ok" if all_ok else "degraded",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
        "data_source": settings.DATA_SOURCE.value,
        "checks": checks,
    }


@app.get("/api/version")
async def get_version() -> dict[str, str]:
    """Return application name, version, and environment."""
    return {
        "name": "Consultrack",
        "version": APP_VERSION,
        "environment": settings.ENVIRONMENT.value,
    }
