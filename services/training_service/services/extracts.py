"""Flat read-models over assignments: the overdue list and the completion log."""

import math
import uuid
from datetime import datetime
from typing import Optional, Sequence

from libs.common.config import get_settings
from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from libs.common.results import ServiceResult, service_operation
from libs.db.session import stream_rows
from services.training_service.metrics import quiz_percentage
from services.training_service.models import (
    Assignment,
    AssignmentStatus,
    Completion,
    Employee,
    LearningItem,
    Site,
)
from services.training_service.schemas import (
    CompletionDetailResponse,
    CompletionReportResponse,
    OverdueItemResponse,
)
from services.training_service.status import days_overdue, is_overdue
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


def open_assignments_query(tenant_id: uuid.UUID):
    """Assignments that can still become overdue, joined to employee, site and item.

    The overdue decision itself is made in Python by ``is_overdue`` so every
    report agrees on it.
    """
    return (
        select(Assignment, Employee, LearningItem, Site.site_name)
        .join(Employee, Employee.id == Assignment.employee_id)
        .join(LearningItem, LearningItem.id == Assignment.learning_item_id)
        .outerjoin(Site, Site.id == Employee.primary_site_id)
        .where(
            Assignment.tenant_id == tenant_id,
            Assignment.is_deleted.is_(False),
            Employee.is_deleted.is_(False),
            Assignment.status.notin_(
                [AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED]
            ),
        )
    )


# ---------------------------------------------------------------------------
# Overdue list
# ---------------------------------------------------------------------------


@service_operation("generating overdue report")
async def get_overdue_report(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    site_id: Optional[uuid.UUID] = None,
    learning_item_id: Optional[uuid.UUID] = None,
    employee_ids: Optional[Sequence[uuid.UUID]] = None,
    now: Optional[datetime] = None,
) -> ServiceResult[list[OverdueItemResponse]]:
    """One row per overdue assignment, most overdue first.

    Not deduplicated per employee x item: an employee overdue on three items
    (or on two cycles of the same item) appears three times.
    """
    now = ensure_utc(now) or utc_now()

    query = open_assignments_query(tenant_id)
    if learning_item_id is not None:
        query = query.where(Assignment.learning_item_id == learning_item_id)
    if site_id is not None:
        # Only the site's current workforce, as in the compliance report
        query = query.where(
            Employee.primary_site_id == site_id, Employee.is_active.is_(True)
        )
    if employee_ids is not None:
        query = query.where(Assignment.employee_id.in_(list(employee_ids)))

    items: list[OverdueItemResponse] = []
    async for row in stream_rows(db, query):
        assignment, employee, learning_item = row.Assignment, row.Employee, row.LearningItem
        if not is_overdue(assignment.status, assignment.due_date, now):
            continue
        items.append(
            OverdueItemResponse(
                assignment_id=assignment.id,
                employee_id=employee.id,
                employee_name=employee.full_name,
                email=employee.email,
                site_name=row.site_name,
                learning_item_id=learning_item.id,
                learning_code=learning_item.code,
                learning_title=learning_item.title,
                due_date=ensure_utc(assignment.due_date),
                days_overdue=days_overdue(assignment.due_date, now),
                reminders_sent=assignment.reminders_sent,
                last_reminder_at=ensure_utc(assignment.last_reminder_at),
                is_in_progress=assignment.status == AssignmentStatus.IN_PROGRESS,
                video_watch_percent=assignment.video_watch_percent,
            )
        )

    items.sort(key=lambda item: (-item.days_overdue, item.due_date, item.employee_name))

    logger.info(
        "Generated overdue report for tenant %s: %d overdue assignments",
        tenant_id,
        len(items),
        extra={"tenant_id": str(tenant_id)},
    )
    return ServiceResult.success(items)


# ---------------------------------------------------------------------------
# Completion log
# ---------------------------------------------------------------------------


@service_operation("generating completion report")
async def get_completion_report(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    learning_item_id: Optional[uuid.UUID] = None,
    site_id: Optional[uuid.UUID] = None,
    employee_ids: Optional[Sequence[uuid.UUID]] = None,
    page_number: int = 1,
    page_size: Optional[int] = None,
) -> ServiceResult[CompletionReportResponse]:
    """Completions newest first, one page at a time.

    ``date_from``/``date_to`` bound the completion time, inclusive.
    """
    settings = get_settings()
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    if page_number < 1:
        return ServiceResult.invalid("page_number must be 1 or greater")
    if page_size < 1 or page_size > settings.MAX_PAGE_SIZE:
        return ServiceResult.invalid(
            f"page_size must be between 1 and {settings.MAX_PAGE_SIZE}"
        )

    filters = [Assignment.tenant_id == tenant_id, Assignment.is_deleted.is_(False)]
    if date_from is not None:
        filters.append(Completion.completed_at >= ensure_utc(date_from))
    if date_to is not None:
        filters.append(Completion.completed_at <= ensure_utc(date_to))
    if learning_item_id is not None:
        filters.append(Assignment.learning_item_id == learning_item_id)
    if site_id is not None:
        filters.extend(
            [Employee.primary_site_id == site_id, Employee.is_active.is_(True)]
        )
    if employee_ids is not None:
        filters.append(Assignment.employee_id.in_(list(employee_ids)))

    base = (
        select(Completion, Assignment, Employee, LearningItem, Site.site_name)
        .join(Assignment, Assignment.id == Completion.assignment_id)
        .join(Employee, Employee.id == Assignment.employee_id)
        .join(LearningItem, LearningItem.id == Assignment.learning_item_id)
        .outerjoin(Site, Site.id == Employee.primary_site_id)
        .where(*filters)
    )

    total_count = await db.scalar(
        select(func.count())
        .select_from(Completion)
        .join(Assignment, Assignment.id == Completion.assignment_id)
        .join(Employee, Employee.id == Assignment.employee_id)
        .where(*filters)
    )
    total_count = total_count or 0

    result = await db.execute(
        base.order_by(Completion.completed_at.desc(), Completion.id)
        .offset((page_number - 1) * page_size)
        .limit(page_size)
    )
    items = [
        _completion_detail(row.Completion, row.Assignment, row.Employee, row.LearningItem, row.site_name)
        for row in result.all()
    ]

    total_pages = math.ceil(total_count / page_size) if total_count else 0
    return ServiceResult.success(
        CompletionReportResponse(
            items=items,
            total_count=total_count,
            page_number=page_number,
            page_size=page_size,
            total_pages=total_pages,
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )
    )


def _completion_detail(
    completion: Completion,
    assignment: Assignment,
    employee: Employee,
    learning_item: LearningItem,
    site_name: Optional[str],
) -> CompletionDetailResponse:
    completed_at = ensure_utc(completion.completed_at)
    due_date = ensure_utc(assignment.due_date)
    return CompletionDetailResponse(
        assignment_id=assignment.id,
        completion_id=completion.id,
        employee_id=employee.id,
        employee_name=employee.full_name,
        email=employee.email,
        site_name=site_name,
        learning_item_id=learning_item.id,
        learning_code=learning_item.code,
        learning_title=learning_item.title,
        required_date=ensure_utc(assignment.required_date),
        due_date=due_date,
        completed_at=completed_at,
        completed_on_time=completed_at <= due_date,
        time_spent_minutes=completion.total_time_spent_seconds // 60,
        video_watch_percent=completion.video_watch_percent,
        quiz_score=completion.quiz_score,
        quiz_max_score=completion.quiz_max_score,
        quiz_passed=completion.quiz_passed,
        quiz_score_percentage=quiz_percentage(
            completion.quiz_score, completion.quiz_max_score
        ),
        signed_by_name=completion.signed_by_name,
        signed_at=ensure_utc(completion.signed_at),
        certificate_url=completion.certificate_url,
        started_latitude=assignment.started_latitude,
        started_longitude=assignment.started_longitude,
        started_accuracy_meters=assignment.started_accuracy_meters,
        started_location_timestamp=ensure_utc(assignment.started_location_timestamp),
        completed_latitude=completion.completed_latitude,
        completed_longitude=completion.completed_longitude,
        completed_accuracy_meters=completion.completed_accuracy_meters,
        completed_location_timestamp=ensure_utc(completion.completed_location_timestamp),
    )
