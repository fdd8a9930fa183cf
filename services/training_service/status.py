"""Status derivation for assignments and employee x learning item pairs.

The persisted ``Assignment.status`` can lag behind the clock (the scheduler
flips pending rows to overdue on its own cadence), so every read site
re-derives "overdue" through ``is_overdue``. The compliance aggregator, the
overdue extractor, the skills matrix and the reminder query all import the
functions below; none of them re-implement the rules.
"""

import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping, Optional

from libs.common.datetime_utils import ensure_utc
from services.training_service.metrics import whole_percentage
from services.training_service.models.enums import AssignmentStatus, CellStatus

SECONDS_PER_DAY = 86400

_CLOSED_STATUSES = {AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}
_OPEN_STATUSES = {AssignmentStatus.PENDING, AssignmentStatus.OVERDUE}


def is_overdue(status: AssignmentStatus, due_date: datetime, now: datetime) -> bool:
    """Overdue when flagged so, or still open past its due date."""
    if status == AssignmentStatus.OVERDUE:
        return True
    if status in _CLOSED_STATUSES:
        return False
    return ensure_utc(due_date) < ensure_utc(now)


def days_overdue(due_date: datetime, now: datetime) -> int:
    """Whole days past due, rounded up. Never negative."""
    elapsed = (ensure_utc(now) - ensure_utc(due_date)).total_seconds()
    return max(0, math.ceil(elapsed / SECONDS_PER_DAY))


@dataclass(frozen=True)
class ResolvedStatus:
    status: CellStatus
    score: Optional[int] = None
    completed_at: Optional[datetime] = None
    due_date: Optional[datetime] = None
    days_overdue: Optional[int] = None


NOT_ASSIGNED = ResolvedStatus(status=CellStatus.NOT_ASSIGNED)


def resolve_cell_status(
    assignments: Iterable,
    completions: Mapping[uuid.UUID, object],
    now: datetime,
) -> ResolvedStatus:
    """Collapse every assignment of one employee x learning item pair into one status.

    First match wins:
    1. any completed assignment -> completed (latest completion, score as a
       whole percentage when the quiz was scored)
    2. any in-progress assignment -> in progress
    3. latest-due pending/overdue assignment -> overdue or assigned
    4. nothing left -> not assigned

    Cancelled assignments never count.
    """
    live = [a for a in assignments if a.status != AssignmentStatus.CANCELLED]
    if not live:
        return NOT_ASSIGNED

    completed = [
        (a, completions.get(a.id))
        for a in live
        if a.id in completions or a.status == AssignmentStatus.COMPLETED
    ]
    if completed:
        with_record = [(a, c) for a, c in completed if c is not None]
        if not with_record:
            return ResolvedStatus(status=CellStatus.COMPLETED)
        _, completion = max(
            with_record, key=lambda pair: ensure_utc(pair[1].completed_at)
        )
        return ResolvedStatus(
            status=CellStatus.COMPLETED,
            score=whole_percentage(completion.quiz_score, completion.quiz_max_score),
            completed_at=ensure_utc(completion.completed_at),
        )

    in_progress = [a for a in live if a.status == AssignmentStatus.IN_PROGRESS]
    if in_progress:
        current = max(in_progress, key=lambda a: ensure_utc(a.due_date))
        return ResolvedStatus(
            status=CellStatus.IN_PROGRESS, due_date=ensure_utc(current.due_date)
        )

    open_rows = [a for a in live if a.status in _OPEN_STATUSES]
    if not open_rows:
        return NOT_ASSIGNED

    latest = max(open_rows, key=lambda a: ensure_utc(a.due_date))
    due_date = ensure_utc(latest.due_date)
    if is_overdue(latest.status, due_date, now):
        return ResolvedStatus(
            status=CellStatus.OVERDUE,
            due_date=due_date,
            days_overdue=days_overdue(due_date, now),
        )
    return ResolvedStatus(status=CellStatus.ASSIGNED, due_date=due_date)
