"""Integration tests for report scoping and reminder candidates."""

import uuid
from datetime import timedelta

import pytest
from libs.auth.models import TenantContext
from services.training_service.models import AssignmentStatus
from services.training_service.services.reminders import list_reminder_candidates
from services.training_service.services.scoping import resolve_employee_scope
from tests.factories import (
    AssignmentFactory,
    EmployeeFactory,
    LearningItemFactory,
    SupervisorAssignmentFactory,
)
from tests.scenarios import NOW


def _context(tenant_id, role, employee_id=None, is_super_user=False):
    return TenantContext(
        tenant_id=tenant_id,
        user_id="user-1",
        role=role,
        employee_id=employee_id,
        is_super_user=is_super_user,
    )


# ---------------------------------------------------------------------------
# resolve_employee_scope
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_admins_see_whole_tenant(db_session, tenant_id):
    assert await resolve_employee_scope(db_session, _context(tenant_id, "admin")) is None
    assert (
        await resolve_employee_scope(
            db_session, _context(tenant_id, "employee", is_super_user=True)
        )
        is None
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_supervisor_sees_their_operators(db_session, tenant_id):
    supervisor = EmployeeFactory.create(tenant_id=tenant_id)
    op1 = EmployeeFactory.create(tenant_id=tenant_id)
    op2 = EmployeeFactory.create(tenant_id=tenant_id)
    gone = EmployeeFactory.create(tenant_id=tenant_id, is_deleted=True)
    other = EmployeeFactory.create(tenant_id=tenant_id)
    db_session.add_all([supervisor, op1, op2, gone, other])
    await db_session.flush()
    for operator in (op1, op2, gone):
        db_session.add(
            SupervisorAssignmentFactory.create(
                supervisor.id, operator.id, tenant_id=tenant_id
            )
        )
    await db_session.commit()

    scope = await resolve_employee_scope(
        db_session, _context(tenant_id, "supervisor", employee_id=supervisor.id)
    )

    assert set(scope) == {op1.id, op2.id}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_employee_sees_only_self(db_session, tenant_id):
    me = uuid.uuid4()

    assert await resolve_employee_scope(
        db_session, _context(tenant_id, "employee", employee_id=me)
    ) == [me]
    assert (
        await resolve_employee_scope(db_session, _context(tenant_id, "employee"))
        == []
    )


# ---------------------------------------------------------------------------
# list_reminder_candidates
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reminder_candidates_respect_cap_and_order(db_session, tenant_id):
    employee = EmployeeFactory.create(tenant_id=tenant_id)
    item = LearningItemFactory.create(tenant_id=tenant_id)
    db_session.add_all([employee, item])
    await db_session.flush()

    recent = AssignmentFactory.create(
        tenant_id=tenant_id,
        employee_id=employee.id,
        learning_item_id=item.id,
        due_date=NOW - timedelta(days=1),
        reminders_sent=1,
    )
    oldest = AssignmentFactory.create(
        tenant_id=tenant_id,
        employee_id=employee.id,
        learning_item_id=item.id,
        status=AssignmentStatus.OVERDUE,
        due_date=NOW - timedelta(days=9),
    )
    capped = AssignmentFactory.create(
        tenant_id=tenant_id,
        employee_id=employee.id,
        learning_item_id=item.id,
        due_date=NOW - timedelta(days=4),
        reminders_sent=3,
    )
    done = AssignmentFactory.create(
        tenant_id=tenant_id,
        employee_id=employee.id,
        learning_item_id=item.id,
        status=AssignmentStatus.COMPLETED,
        due_date=NOW - timedelta(days=6),
    )
    not_due = AssignmentFactory.create(
        tenant_id=tenant_id,
        employee_id=employee.id,
        learning_item_id=item.id,
        due_date=NOW + timedelta(days=6),
    )
    db_session.add_all([recent, oldest, capped, done, not_due])
    await db_session.commit()

    result = await list_reminder_candidates(
        db_session, tenant_id=tenant_id, now=NOW, max_reminders=3
    )

    assert result.ok, result.error
    assert [c.assignment_id for c in result.value] == [oldest.id, recent.id]
    assert result.value[0].days_overdue == 9
    assert result.value[1].reminders_sent == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_reminder_cap_defaults_to_settings(db_session, tenant_id):
    employee = EmployeeFactory.create(tenant_id=tenant_id)
    item = LearningItemFactory.create(tenant_id=tenant_id)
    db_session.add_all([employee, item])
    await db_session.flush()
    db_session.add(
        AssignmentFactory.create(
            tenant_id=tenant_id,
            employee_id=employee.id,
            learning_item_id=item.id,
            due_date=NOW - timedelta(days=2),
            reminders_sent=3,
        )
    )
    await db_session.commit()

    result = await list_reminder_candidates(db_session, tenant_id=tenant_id, now=NOW)

    assert result.value == []
