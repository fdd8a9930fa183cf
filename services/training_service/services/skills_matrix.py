"""Employee x learning item status grid."""

import uuid
from collections import defaultdict
from datetime import datetime
from typing import Optional, Sequence

from libs.common.datetime_utils import ensure_utc, utc_now
from libs.common.logging import get_logger
from libs.common.results import ServiceResult, service_operation
from libs.db.session import stream_rows
from services.lookups_service.models import TRAINING_CATEGORY
from services.lookups_service.resolution import display_names
from services.lookups_service.services.lookup_ops import get_effective_values
from services.training_service.models import (
    Assignment,
    AssignmentStatus,
    Completion,
    Employee,
    LearningItem,
)
from services.training_service.schemas import (
    SkillsMatrixCell,
    SkillsMatrixEmployee,
    SkillsMatrixLearning,
    SkillsMatrixResponse,
)
from services.training_service.status import resolve_cell_status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def _category_names(db: AsyncSession, tenant_id: uuid.UUID) -> dict[str, str]:
    """Display names of the tenant's training categories, keyed by code."""
    result = await get_effective_values(
        db, tenant_id=tenant_id, category_name=TRAINING_CATEGORY
    )
    if not result.ok:
        logger.warning(
            "Training categories unavailable for tenant %s: %s",
            tenant_id,
            result.error.message,
            extra={"tenant_id": str(tenant_id)},
        )
        return {}
    return display_names(result.value)


@service_operation("generating skills matrix")
async def build_skills_matrix(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    employee_ids: Optional[Sequence[uuid.UUID]] = None,
    category: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ServiceResult[SkillsMatrixResponse]:
    """Build the matrix in two passes.

    Pass one streams the in-scope assignments once and indexes them by
    (employee, learning item). Pass two walks every row x column pair and
    asks the resolver for the cell.

    With ``employee_ids`` None (administrative view) every active employee
    gets a row, assigned or not. With an id list only employees that have
    assignments in scope appear. Columns are always the learning items that
    have assignments in scope.
    """
    now = ensure_utc(now) or utc_now()

    query = (
        select(Assignment, Employee, LearningItem, Completion)
        .join(Employee, Employee.id == Assignment.employee_id)
        .join(LearningItem, LearningItem.id == Assignment.learning_item_id)
        .outerjoin(Completion, Completion.assignment_id == Assignment.id)
        .where(
            Assignment.tenant_id == tenant_id,
            Assignment.is_deleted.is_(False),
            Assignment.status != AssignmentStatus.CANCELLED,
            Employee.is_deleted.is_(False),
        )
    )
    if employee_ids is not None:
        query = query.where(Assignment.employee_id.in_(list(employee_ids)))
    if category:
        query = query.where(LearningItem.category == category)

    by_pair: dict[tuple[uuid.UUID, uuid.UUID], list[Assignment]] = defaultdict(list)
    completions: dict[uuid.UUID, Completion] = {}
    employees: dict[uuid.UUID, Employee] = {}
    learning_items: dict[uuid.UUID, LearningItem] = {}

    async for row in stream_rows(db, query):
        assignment = row.Assignment
        by_pair[(assignment.employee_id, assignment.learning_item_id)].append(assignment)
        if row.Completion is not None:
            completions[assignment.id] = row.Completion
        employees.setdefault(row.Employee.id, row.Employee)
        learning_items.setdefault(row.LearningItem.id, row.LearningItem)

    if employee_ids is None:
        # Assigned employees are already keyed; the rest get empty rows
        workforce = select(Employee).where(
            Employee.tenant_id == tenant_id,
            Employee.is_deleted.is_(False),
            Employee.is_active.is_(True),
        )
        async for row in stream_rows(db, workforce):
            employees.setdefault(row.Employee.id, row.Employee)

    category_names = await _category_names(db, tenant_id) if learning_items else {}

    rows = sorted(employees.values(), key=lambda e: (e.last_name, e.first_name))
    columns = sorted(learning_items.values(), key=lambda item: item.code)

    cells = []
    for employee in rows:
        for item in columns:
            resolved = resolve_cell_status(
                by_pair.get((employee.id, item.id), ()), completions, now
            )
            cells.append(
                SkillsMatrixCell(
                    employee_id=employee.id,
                    learning_item_id=item.id,
                    status=resolved.status,
                    score=resolved.score,
                    completed_at=resolved.completed_at,
                    due_date=resolved.due_date,
                    days_overdue=resolved.days_overdue,
                )
            )

    logger.info(
        "Generated skills matrix for tenant %s: %d employees x %d learning items",
        tenant_id,
        len(rows),
        len(columns),
        extra={"tenant_id": str(tenant_id)},
    )

    return ServiceResult.success(
        SkillsMatrixResponse(
            employees=[
                SkillsMatrixEmployee(
                    id=e.id,
                    employee_code=e.employee_code,
                    full_name=e.full_name,
                    department=e.department,
                    job_title=e.job_title,
                )
                for e in rows
            ],
            learning_items=[
                SkillsMatrixLearning(
                    id=item.id,
                    code=item.code,
                    title=item.title,
                    category=item.category,
                    category_name=category_names.get(item.category, item.category)
                    if item.category
                    else None,
                )
                for item in columns
            ],
            cells=cells,
        )
    )
