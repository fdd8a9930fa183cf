import uuid
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from libs.auth.dependencies import get_tenant_context
from libs.auth.models import TenantContext
from libs.common.results import raise_for_failure
from libs.db.session import get_async_db
from services.training_service.schemas import (
    ComplianceReportResponse,
    CompletionReportResponse,
    OverdueItemResponse,
    SkillsMatrixResponse,
)
from services.training_service.services.compliance import get_compliance_report
from services.training_service.services.extracts import (
    get_completion_report,
    get_overdue_report,
)
from services.training_service.services.scoping import resolve_employee_scope
from services.training_service.services.skills_matrix import build_skills_matrix
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/compliance", response_model=ComplianceReportResponse)
async def compliance_report(
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    site_id: Optional[uuid.UUID] = Query(None),
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Compliance totals with per-site and per-learning-item breakdowns."""
    employee_ids = await resolve_employee_scope(db, context)
    result = await get_compliance_report(
        db,
        tenant_id=context.tenant_id,
        date_from=date_from,
        date_to=date_to,
        site_id=site_id,
        employee_ids=employee_ids,
    )
    return raise_for_failure(result)


@router.get("/overdue", response_model=List[OverdueItemResponse])
async def overdue_report(
    site_id: Optional[uuid.UUID] = Query(None),
    learning_item_id: Optional[uuid.UUID] = Query(None),
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    employee_ids = await resolve_employee_scope(db, context)
    result = await get_overdue_report(
        db,
        tenant_id=context.tenant_id,
        site_id=site_id,
        learning_item_id=learning_item_id,
        employee_ids=employee_ids,
    )
    return raise_for_failure(result)


@router.get("/completions", response_model=CompletionReportResponse)
async def completion_report(
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    learning_item_id: Optional[uuid.UUID] = Query(None),
    site_id: Optional[uuid.UUID] = Query(None),
    page_number: int = Query(1),
    page_size: Optional[int] = Query(None),
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Paged completion log, newest first."""
    employee_ids = await resolve_employee_scope(db, context)
    result = await get_completion_report(
        db,
        tenant_id=context.tenant_id,
        date_from=date_from,
        date_to=date_to,
        learning_item_id=learning_item_id,
        site_id=site_id,
        employee_ids=employee_ids,
        page_number=page_number,
        page_size=page_size,
    )
    return raise_for_failure(result)


@router.get("/skills-matrix", response_model=SkillsMatrixResponse)
async def skills_matrix(
    category: Optional[str] = Query(None),
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Employee x learning item grid.

    Admins get every active employee; supervisors and employees only the rows
    their scope has assignments for.
    """
    employee_ids = await resolve_employee_scope(db, context)
    result = await build_skills_matrix(
        db,
        tenant_id=context.tenant_id,
        employee_ids=employee_ids,
        category=category,
    )
    return raise_for_failure(result)
