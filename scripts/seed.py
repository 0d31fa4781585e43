"""Seed script — load the demo engagements into the Consultrack database.

Creates the nine demo engagements served in fixture mode: six completed
(one per commission outcome plus an unassigned custom tier), one in
progress, one paused and one cancelled.

Idempotent: safe to run multiple times — skips if the first demo
engagement already exists.

Usage:
    python -m scripts.seed          # against DATABASE_URL from .env
    pytest tests/scripts/test_seed.py  # against aiosqlite in-memory
"""

import asyncio
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from consultrack.data.fixtures import demo_engagements
from consultrack.engine.stats import aggregate
from consultrack.repositories.engagements import SqlEngagementRepository


async def seed_demo(session: AsyncSession) -> dict:
    """Idempotent demo seed.

    Returns dict with keys: created (bool), engagement_count.
    If the demo data is already present, returns created=False and skips.
    """
    repo = SqlEngagementRepository(session)
    records = demo_engagements()

    # Idempotency check: look for the first demo engagement
    if await repo.get_by_id(records[0].engagement_id) is not None:
        return {"created": False, "engagement_count": 0}

    for record in records:
        await repo.add(record)

    return {"created": True, "engagement_count": len(records)}


# ---------------------------------------------------------------------------
# CLI entry point: python -m scripts.seed
# ---------------------------------------------------------------------------


async def _run_seed() -> None:
    """Run the seed against the real database."""
    from consultrack.db.session import async_session_factory

    async with async_session_factory() as session:
        result = await seed_demo(session)

        if not result["created"]:
            print("Demo engagements already seeded. Skipping.")
            return

        await session.commit()

        print("Seed complete.")
        print(f"  Engagements:  {result['engagement_count']}")
        print()
        _print_summary()


def _print_summary() -> None:
    """Print the headline statistics of the demo dataset."""
    stats = aggregate(demo_engagements())
    print("Demo dataset:")
    print(f"  {'Completed':<22} {stats.completed_projects:>10}")
    print(f"  {'Active':<22} {stats.active_projects:>10}")
    print(f"  {'Revenue':<22} {stats.total_revenue:>10,.2f}")
    print(f"  {'Average rating':<22} {stats.average_rating:>10.2f}")
    print(f"  {'Deadline compliance %':<22} {stats.deadline_compliance_rate:>10.1f}")


if __name__ == "__main__":
    asyncio.run(_run_seed())


def __getattr__(name: str):  # type: ignore[misc]
    """Allow `python -m scripts.seed` to work."""
    if name == "__main__":
        asyncio.run(_run_seed())
        sys.exit(0)
    raise AttributeError(name)
