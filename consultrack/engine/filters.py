"""Filter pipeline — select engagements matching a FilterSpec.

All supplied constraints are ANDed. Consultant matching is exact and
case-sensitive. The date range is a containment filter: an engagement
matches only when it starts on/after ``date_from`` and ends on/before
``date_to``; engagements merely overlapping the window are excluded, and
an engagement without an end date never satisfies ``date_to``.

Deterministic, no I/O. Input order is preserved.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from consultrack.models.engagement import Engagement, FilterSpec

Predicate = Callable[[Engagement], bool]


def build_predicates(spec: FilterSpec) -> list[Predicate]:
    """One predicate per constraint actually present in ``spec``."""
    predicates: list[Predicate] = []

    if spec.consultant is not None:
        consultant = spec.consultant
        predicates.append(lambda e: e.consultant == consultant)
    if spec.engagement_type is not None:
        engagement_type = spec.engagement_type
        predicates.append(lambda e: e.engagement_type == engagement_type)
    if spec.status is not None:
        status = spec.status
        predicates.append(lambda e: e.status == status)
    if spec.date_from is not None:
        date_from = spec.date_from
        predicates.append(lambda e: e.start_date >= date_from)
    if spec.date_to is not None:
        date_to = spec.date_to
        predicates.append(lambda e: e.end_date is not None and e.end_date <= date_to)

    return predicates


def matches(record: Engagement, spec: FilterSpec) -> bool:
    return all(predicate(record) for predicate in build_predicates(spec))


def apply_filters(
    records: Iterable[Engagement],
    spec: FilterSpec | None = None,
) -> list[Engagement]:
    """Return the records satisfying every constraint in ``spec``."""
    if spec is None or spec.is_unconstrained:
        return list(records)
    predicates = build_predicates(spec)
    return [r for r in records if all(p(r) for p in predicates)]
