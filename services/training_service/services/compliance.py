"""Compliance aggregation: totals, percentages and per-site / per-item breakdowns."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from libs.common.results import ServiceResult, service_operation
from libs.db.session import stream_rows
from services.training_service.metrics import average, percentage, raw_percentage
from services.training_service.models import (
    Assignment,
    AssignmentStatus,
    Completion,
    Employee,
    LearningItem,
    Site,
)
from services.training_service.schemas import (
    ComplianceReportResponse,
    LearningComplianceResponse,
    SiteComplianceResponse,
)
from services.training_service.status import is_overdue
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


@dataclass
class ComplianceTally:
    """Running counts over a set of assignments."""

    assigned: int = 0
    completed: int = 0
    overdue: int = 0
    pending: int = 0
    in_progress: int = 0

    def add(self, status: AssignmentStatus, due_date: datetime, now: datetime) -> None:
        self.assigned += 1
        if status == AssignmentStatus.COMPLETED:
            self.completed += 1
        elif status == AssignmentStatus.PENDING:
            self.pending += 1
        elif status == AssignmentStatus.IN_PROGRESS:
            self.in_progress += 1
        # Counted independently: a pending row past due is both pending and overdue
        if is_overdue(status, due_date, now):
            self.overdue += 1

    @property
    def compliance_percentage(self) -> Decimal:
        return percentage(self.completed, self.assigned)

    def as_counts(self) -> dict:
        return {
            "assigned_count": self.assigned,
            "completed_count": self.completed,
            "overdue_count": self.overdue,
            "pending_count": self.pending,
            "in_progress_count": self.in_progress,
            "compliance_percentage": self.compliance_percentage,
        }


@dataclass
class LearningTally(ComplianceTally):
    code: str = ""
    title: str = ""
    quiz_percentages: list[Decimal] = field(default_factory=list)
    quiz_passed: int = 0

    def add_quiz(
        self, score: Optional[int], max_score: Optional[int], passed: Optional[bool]
    ) -> None:
        if score is None or max_score is None:
            return
        # A zero max-score still counts towards the pass rate, at 0%
        self.quiz_percentages.append(raw_percentage(score, max_score) or Decimal(0))
        if passed:
            self.quiz_passed += 1

    @property
    def average_quiz_score(self) -> Optional[Decimal]:
        return average(self.quiz_percentages)

    @property
    def quiz_pass_rate(self) -> Optional[Decimal]:
        if not self.quiz_percentages:
            return None
        return percentage(self.quiz_passed, len(self.quiz_percentages))


def _employee_scope_filters(
    tenant_id: uuid.UUID,
    site_id: Optional[uuid.UUID],
    employee_ids: Optional[Sequence[uuid.UUID]],
) -> list:
    filters = [
        Employee.tenant_id == tenant_id,
        Employee.is_deleted.is_(False),
        Employee.is_active.is_(True),
    ]
    if site_id is not None:
        filters.append(Employee.primary_site_id == site_id)
    if employee_ids is not None:
        filters.append(Employee.id.in_(list(employee_ids)))
    return filters


@service_operation("generating compliance report")
async def get_compliance_report(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    site_id: Optional[uuid.UUID] = None,
    employee_ids: Optional[Sequence[uuid.UUID]] = None,
    now: Optional[datetime] = None,
) -> ServiceResult[ComplianceReportResponse]:
    """Build the compliance report for one tenant.

    ``employee_ids`` restricts both the population and the assignments
    (supervisor "my team" views). ``date_from``/``date_to`` bound the
    assignments' required date, inclusive.
    """
    now = ensure_utc(now) or utc_now()
    utc_from = ensure_utc(date_from)
    utc_to = ensure_utc(date_to)

    employee_filters = _employee_scope_filters(tenant_id, site_id, employee_ids)
    total_employees = await db.scalar(
        select(func.count()).select_from(Employee).where(*employee_filters)
    )

    query = (
        select(
            Assignment.status,
            Assignment.due_date,
            Assignment.learning_item_id,
            Employee.primary_site_id,
            Employee.is_active,
            LearningItem.code,
            LearningItem.title,
            Completion.quiz_score,
            Completion.quiz_max_score,
            Completion.quiz_passed,
        )
        .join(Employee, Employee.id == Assignment.employee_id)
        .join(LearningItem, LearningItem.id == Assignment.learning_item_id)
        .outerjoin(Completion, Completion.assignment_id == Assignment.id)
        .where(
            Assignment.tenant_id == tenant_id,
            Assignment.is_deleted.is_(False),
            Employee.is_deleted.is_(False),
        )
    )
    if utc_from is not None:
        query = query.where(Assignment.required_date >= utc_from)
    if utc_to is not None:
        query = query.where(Assignment.required_date <= utc_to)
    if employee_ids is not None:
        query = query.where(Assignment.employee_id.in_(list(employee_ids)))
    if site_id is not None:
        # Only the site's current workforce, same as the population count
        query = query.where(
            Employee.primary_site_id == site_id, Employee.is_active.is_(True)
        )

    overall = ComplianceTally()
    by_site: dict[uuid.UUID, ComplianceTally] = {}
    by_item: dict[uuid.UUID, LearningTally] = {}

    async for row in stream_rows(db, query):
        overall.add(row.status, row.due_date, now)

        # Site breakdown only counts the site's current workforce
        if row.primary_site_id is not None and row.is_active:
            by_site.setdefault(row.primary_site_id, ComplianceTally()).add(
                row.status, row.due_date, now
            )

        item_tally = by_item.get(row.learning_item_id)
        if item_tally is None:
            item_tally = LearningTally(code=row.code, title=row.title)
            by_item[row.learning_item_id] = item_tally
        item_tally.add(row.status, row.due_date, now)
        item_tally.add_quiz(row.quiz_score, row.quiz_max_score, row.quiz_passed)

    site_rows = await _site_breakdown(db, tenant_id, by_site)
    item_rows = [
        LearningComplianceResponse(
            learning_item_id=item_id,
            code=tally.code,
            title=tally.title,
            average_quiz_score=tally.average_quiz_score,
            quiz_pass_rate=tally.quiz_pass_rate,
            **tally.as_counts(),
        )
        for item_id, tally in by_item.items()
    ]
    item_rows.sort(key=lambda r: (-r.assigned_count, r.code))

    logger.info(
        "Generated compliance report for tenant %s: %d employees, %d assignments",
        tenant_id,
        total_employees or 0,
        overall.assigned,
        extra={"tenant_id": str(tenant_id)},
    )

    return ServiceResult.success(
        ComplianceReportResponse(
            total_employees=total_employees or 0,
            by_site=site_rows,
            by_learning_item=item_rows,
            date_from=date_from,
            date_to=date_to,
            generated_at=now,
            **overall.as_counts(),
        )
    )


async def _site_breakdown(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    tallies: dict[uuid.UUID, ComplianceTally],
) -> list[SiteComplianceResponse]:
    """Shape per-site tallies; sites without in-scope assignments are left out."""
    if not tallies:
        return []

    sites_result = await db.execute(
        select(Site).where(
            Site.tenant_id == tenant_id,
            Site.is_deleted.is_(False),
            Site.id.in_(list(tallies.keys())),
        )
    )
    sites = sites_result.scalars().all()

    headcount_result = await db.execute(
        select(Employee.primary_site_id, func.count())
        .where(
            Employee.tenant_id == tenant_id,
            Employee.is_deleted.is_(False),
            Employee.is_active.is_(True),
            Employee.primary_site_id.in_([s.id for s in sites]),
        )
        .group_by(Employee.primary_site_id)
    )
    headcount = {site_id: count for site_id, count in headcount_result.all()}

    rows = [
        SiteComplianceResponse(
            site_id=site.id,
            site_name=site.site_name,
            total_employees=headcount.get(site.id, 0),
            **tallies[site.id].as_counts(),
        )
        for site in sites
    ]
    rows.sort(key=lambda r: (-r.compliance_percentage, r.site_name))
    return rows
