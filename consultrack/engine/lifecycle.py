"""Engagement lifecycle — status transitions as validated patches.

    in_progress <-> paused
    in_progress | paused -> completed | cancelled   (terminal)

Each transition returns an EngagementPatch holding every field that must
change together. Completion evaluates the deadline first and then
derives the commission from it, so status, rating, deadline flag and
commission are written in one update or not at all.

No I/O here: callers persist the patch through the repository.
"""

from __future__ import annotations

from datetime import date

from consultrack.engine.commission import calculate_commission
from consultrack.engine.deadline import DeadlinePolicy, evaluate_deadline
from consultrack.errors import EngagementValidationError, InvalidTransitionError
from consultrack.models.common import EngagementStatus
from consultrack.models.engagement import (
    Engagement,
    EngagementPatch,
    derive_duration,
)

ALLOWED_TRANSITIONS: dict[EngagementStatus, frozenset[EngagementStatus]] = {
    EngagementStatus.IN_PROGRESS: frozenset({
        EngagementStatus.PAUSED,
        EngagementStatus.COMPLETED,
        EngagementStatus.CANCELLED,
    }),
    EngagementStatus.PAUSED: frozenset({
        EngagementStatus.IN_PROGRESS,
        EngagementStatus.COMPLETED,
        EngagementStatus.CANCELLED,
    }),
    EngagementStatus.COMPLETED: frozenset(),
    EngagementStatus.CANCELLED: frozenset(),
}


def can_transition(current: EngagementStatus, target: EngagementStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: EngagementStatus, target: EngagementStatus) -> None:
    """Raise InvalidTransitionError if ``current -> target`` is not allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current.value, target.value)


def _elapsed_pause(record: Engagement, on: date) -> int:
    if record.paused_at is None:
        return 0
    if on < record.paused_at:
        msg = f"Resume date {on} precedes pause date {record.paused_at}."
        raise EngagementValidationError(msg)
    return (on - record.paused_at).days


def pause(record: Engagement, on: date) -> EngagementPatch:
    """Pause an in-progress engagement, recording the pause date."""
    check_transition(record.status, EngagementStatus.PAUSED)
    return EngagementPatch(status=EngagementStatus.PAUSED, paused_at=on)


def resume(record: Engagement, on: date) -> EngagementPatch:
    """Resume a paused engagement, folding the pause interval into paused_days."""
    check_transition(record.status, EngagementStatus.IN_PROGRESS)
    return EngagementPatch(
        status=EngagementStatus.IN_PROGRESS,
        paused_at=None,
        paused_days=record.paused_days + _elapsed_pause(record, on),
    )


def complete(
    record: Engagement,
    *,
    rating: int,
    completed_on: date,
    policy: DeadlinePolicy | None = None,
    duration_days: int | None = None,
    bonused: bool | None = None,
    closure_signed: bool | None = None,
) -> EngagementPatch:
    """Finish an engagement: rating, deadline evaluation, then commission.

    Duration defaults to the stored one. When the engagement has none
    yet, it is derived from the start and completion dates minus
    paused days. Completing a paused engagement folds the open pause in.
    """
    check_transition(record.status, EngagementStatus.COMPLETED)

    paused_days = record.paused_days + _elapsed_pause(record, completed_on)
    if duration_days is None:
        duration_days = record.duration_days or derive_duration(
            record.start_date, completed_on, paused_days
        )

    deadline_met = evaluate_deadline(record.size_tier, duration_days, policy)
    commission = calculate_commission(rating, deadline_met, record.consulting_value)

    patch = EngagementPatch(
        status=EngagementStatus.COMPLETED,
        rating=rating,
        deadline_met=deadline_met,
        commission_percent=commission.percent,
        commission_value=commission.value,
        completed_on=completed_on,
        duration_days=duration_days,
        paused_days=paused_days,
        paused_at=None,
    )
    if record.end_date is None:
        patch.end_date = completed_on
    if bonused is not None:
        patch.bonused = bonused
    if closure_signed is not None:
        patch.closure_signed = closure_signed
    return patch


def cancel(record: Engagement) -> EngagementPatch:
    """Cancel an open engagement. No commission is computed."""
    check_transition(record.status, EngagementStatus.CANCELLED)
    return EngagementPatch(status=EngagementStatus.CANCELLED, paused_at=None)


_DEADLINE_INPUTS = frozenset({
    "size_tier",
    "duration_days",
    "start_date",
    "end_date",
    "paused_days",
})


def revise(
    record: Engagement,
    changes: EngagementPatch,
    policy: DeadlinePolicy | None = None,
) -> EngagementPatch:
    """Complete a user edit with the derived fields it invalidates.

    - dates changed without an explicit duration: duration is re-derived
    - tier, duration, dates or paused days changed on a completed
      engagement: the deadline is re-evaluated
    - any of the above, consulting value or rating changed on a completed
      engagement: commission is recomputed from the current deadline flag
    """
    if changes.status is not None and changes.status != record.status:
        msg = "Status changes go through pause/resume/complete/cancel."
        raise EngagementValidationError(msg)

    data = changes.changes()
    patch = EngagementPatch(**data)

    start = data.get("start_date", record.start_date)
    end = data.get("end_date", record.end_date)
    paused_days = data.get("paused_days", record.paused_days)

    dates_changed = "start_date" in data or "end_date" in data
    if dates_changed and "duration_days" not in data:
        patch.duration_days = derive_duration(start, end, paused_days)

    if not record.is_completed:
        return patch

    deadline_met = record.deadline_met
    if _DEADLINE_INPUTS.intersection(data):
        duration = patch.duration_days
        if duration is None:
            duration = record.duration_days
        if duration is None:
            duration = derive_duration(start, end, paused_days)
        deadline_met = evaluate_deadline(
            data.get("size_tier", record.size_tier), duration, policy
        )
        patch.deadline_met = deadline_met
    elif "consulting_value" not in data and "rating" not in data:
        return patch

    commission = calculate_commission(
        data.get("rating", record.rating),
        deadline_met,
        data.get("consulting_value", record.consulting_value),
    )
    patch.commission_percent = commission.percent
    patch.commission_value = commission.value
    return patch
