"""Which employees a caller's reports cover."""

import uuid
from typing import Optional

from libs.auth.models import TenantContext
from services.training_service.models import Employee, SupervisorAssignment
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


async def resolve_employee_scope(
    db: AsyncSession, context: TenantContext
) -> Optional[list[uuid.UUID]]:
    """Employee ids the caller may report on, or None for the whole tenant.

    Admins and super users see the whole tenant. Supervisors see the operators
    assigned to them. Anyone else sees only their own record, or nothing when
    the token carries no employee id.
    """
    if context.is_admin:
        return None

    if context.employee_id is None:
        return []

    if context.is_supervisor:
        result = await db.execute(
            select(SupervisorAssignment.operator_employee_id)
            .join(Employee, Employee.id == SupervisorAssignment.operator_employee_id)
            .where(
                SupervisorAssignment.tenant_id == context.tenant_id,
                SupervisorAssignment.supervisor_employee_id == context.employee_id,
                Employee.is_deleted.is_(False),
            )
        )
        return list(result.scalars().all())

    return [context.employee_id]
