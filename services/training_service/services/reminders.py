import uuid
from datetime import datetime
from typing import Optional

from libs.common.config import get_settings
from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from libs.common.results import ServiceResult, service_operation
from libs.db.session import stream_rows
from services.training_service.models import Assignment
from services.training_service.schemas import ReminderCandidateResponse
from services.training_service.services.extracts import open_assignments_query
from services.training_service.status import days_overdue, is_overdue
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@service_operation("listing reminder candidates")
async def list_reminder_candidates(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    now: Optional[datetime] = None,
    max_reminders: Optional[int] = None,
) -> ServiceResult[list[ReminderCandidateResponse]]:
    """Overdue assignments still under the reminder cap, oldest due first.

    Read-only: the dispatcher that sends the reminders records them.
    """
    now = ensure_utc(now) or utc_now()
    if max_reminders is None:
        max_reminders = get_settings().MAX_REMINDERS

    query = open_assignments_query(tenant_id).where(
        Assignment.reminders_sent < max_reminders
    )

    candidates = []
    async for row in stream_rows(db, query):
        assignment, employee = row.Assignment, row.Employee
        if not is_overdue(assignment.status, assignment.due_date, now):
            continue
        candidates.append(
            ReminderCandidateResponse(
                assignment_id=assignment.id,
                employee_id=employee.id,
                employee_name=employee.full_name,
                email=employee.email,
                learning_item_id=row.LearningItem.id,
                learning_title=row.LearningItem.title,
                due_date=ensure_utc(assignment.due_date),
                days_overdue=days_overdue(assignment.due_date, now),
                reminders_sent=assignment.reminders_sent,
                last_reminder_at=ensure_utc(assignment.last_reminder_at),
            )
        )

    candidates.sort(key=lambda c: c.due_date)
    logger.info(
        "Found %d reminder candidates for tenant %s",
        len(candidates),
        tenant_id,
        extra={"tenant_id": str(tenant_id)},
    )
    return ServiceResult.success(candidates)
