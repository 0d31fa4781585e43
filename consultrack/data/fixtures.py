"""Static demonstration dataset.

Served by FixtureEngagementRepository when ``DATA_SOURCE=fixture`` and
loaded into the database by ``scripts/seed.py``. Completed engagements
are finished through the lifecycle rules, so their deadline flags and
commissions are exactly what the engine would compute.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from consultrack.engine import lifecycle
from consultrack.models.engagement import Engagement, apply_patch, build_engagement

_OPEN: list[dict] = [
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000001"),
        "client_name": "Padaria Bom Gosto",
        "engagement_type": "consulting",
        "size_tier": "Basic",
        "consultant": "Ana Souza",
        "start_date": date(2024, 1, 2),
        "end_date": date(2024, 1, 14),
        "duration_days": 12,
        "consulting_value": Decimal("3000.00"),
        "bonus_value": Decimal("0.00"),
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000002"),
        "client_name": "Clinica Vida Plena",
        "engagement_type": "consulting",
        "size_tier": "Pro",
        "consultant": "Bruno Lima",
        "start_date": date(2024, 1, 8),
        "end_date": date(2024, 2, 28),
        "duration_days": 51,
        "consulting_value": Decimal("12000.00"),
        "bonus_value": Decimal("500.00"),
        "bonused": True,
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000003"),
        "client_name": "Loja Estrela",
        "engagement_type": "upsell",
        "size_tier": "Starter",
        "consultant": "Ana Souza",
        "start_date": date(2024, 2, 1),
        "end_date": date(2024, 2, 20),
        "duration_days": 19,
        "consulting_value": Decimal("5000.00"),
        "bonus_value": Decimal("0.00"),
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000004"),
        "client_name": "Transportes Rapido",
        "engagement_type": "consulting",
        "size_tier": "Enterprise",
        "consultant": "Carla Mendes",
        "start_date": date(2024, 2, 5),
        "end_date": date(2024, 3, 30),
        "duration_days": 54,
        "consulting_value": Decimal("25000.00"),
        "bonus_value": Decimal("1500.00"),
        "bonused": True,
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000005"),
        "client_name": "Escola Aprender",
        "engagement_type": "upsell",
        "size_tier": "Basic",
        "consultant": "Bruno Lima",
        "start_date": date(2024, 3, 1),
        "end_date": date(2024, 3, 21),
        "duration_days": 20,
        "consulting_value": Decimal("2500.00"),
        "bonus_value": Decimal("0.00"),
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000006"),
        "client_name": "Mercado Central",
        "engagement_type": "consulting",
        "size_tier": "Custom",
        "consultant": None,
        "start_date": date(2024, 3, 4),
        "end_date": date(2024, 4, 1),
        "duration_days": 28,
        "consulting_value": Decimal("8000.00"),
        "bonus_value": Decimal("0.00"),
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000007"),
        "client_name": "Academia Forca Total",
        "engagement_type": "consulting",
        "size_tier": "Starter",
        "consultant": "Carla Mendes",
        "start_date": date(2024, 4, 2),
        "end_date": None,
        "duration_days": 0,
        "consulting_value": Decimal("6000.00"),
        "bonus_value": Decimal("0.00"),
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000008"),
        "client_name": "Hotel Maravilha",
        "engagement_type": "upsell",
        "size_tier": "Pro",
        "consultant": "Ana Souza",
        "start_date": date(2024, 4, 10),
        "end_date": None,
        "duration_days": 0,
        "paused_days": 3,
        "consulting_value": Decimal("9500.00"),
        "bonus_value": Decimal("0.00"),
    },
    {
        "engagement_id": UUID("01900000-0000-7000-8000-000000000009"),
        "client_name": "Pet Shop Amigo Fiel",
        "engagement_type": "consulting",
        "size_tier": "Basic",
        "consultant": "Bruno Lima",
        "start_date": date(2024, 4, 15),
        "end_date": None,
        "duration_days": 0,
        "consulting_value": Decimal("2000.00"),
        "bonus_value": Decimal("0.00"),
    },
]

# engagement number -> how it ends
_OUTCOMES: dict[int, dict] = {
    1: {"rating": 5, "completed_on": date(2024, 1, 15)},
    2: {"rating": 4, "completed_on": date(2024, 3, 1)},
    3: {"rating": 3, "completed_on": date(2024, 2, 21)},
    4: {"rating": 5, "completed_on": date(2024, 4, 2)},
    5: {"rating": 4, "completed_on": date(2024, 3, 22)},
    6: {"rating": 5, "completed_on": date(2024, 4, 2)},
}
_PAUSED: dict[int, date] = {8: date(2024, 5, 2)}
_CANCELLED: frozenset[int] = frozenset({9})


def demo_engagements() -> list[Engagement]:
    """Fresh copies of the demonstration engagements."""
    records = []
    for number, data in enumerate(_OPEN, start=1):
        record = build_engagement(data)
        if number in _OUTCOMES:
            record = apply_patch(record, lifecycle.complete(record, **_OUTCOMES[number]))
        elif number in _PAUSED:
            record = apply_patch(record, lifecycle.pause(record, _PAUSED[number]))
        elif number in _CANCELLED:
            record = apply_patch(record, lifecycle.cancel(record))
        records.append(record)
    return records

