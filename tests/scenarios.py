"""A small tenant shared by the report integration tests.

Layout (``NOW`` = 2026-03-10 12:00 UTC):

    North site: Ann Adams, Ben Brown
    South site: Cat Cole, Dan Dunn (inactive)
    No site:    Eve Evans

    #  employee  item  status       due         completion
    1  Ann       FS-01 completed    NOW-5d      NOW-6d, quiz 8/10 passed
    2  Ben       FS-01 pending      NOW-2d      -
    3  Cat       FS-01 in_progress  NOW+3d      -
    4  Cat       GS-01 completed    NOW-1d      NOW-12h, quiz 5/10 failed
    5  Dan       GS-01 overdue      NOW-10d     -
    6  Eve       GS-01 pending      NOW+10d     -
    7  Ann       GS-01 cancelled    NOW-20d     -
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from services.training_service.models import AssignmentStatus
from tests.factories import (
    AssignmentFactory,
    CompletionFactory,
    EmployeeFactory,
    LearningItemFactory,
    SiteFactory,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@dataclass
class ReportScenario:
    sites: dict = field(default_factory=dict)
    employees: dict = field(default_factory=dict)
    items: dict = field(default_factory=dict)
    assignments: dict = field(default_factory=dict)
    completions: dict = field(default_factory=dict)


async def seed_report_scenario(db, tenant_id) -> ReportScenario:
    s = ReportScenario()

    s.sites["north"] = SiteFactory.create(tenant_id=tenant_id, site_name="North")
    s.sites["south"] = SiteFactory.create(tenant_id=tenant_id, site_name="South")
    db.add_all(s.sites.values())
    await db.flush()

    people = [
        ("ann", "Ann", "Adams", "north", True),
        ("ben", "Ben", "Brown", "north", True),
        ("cat", "Cat", "Cole", "south", True),
        ("dan", "Dan", "Dunn", "south", False),
        ("eve", "Eve", "Evans", None, True),
    ]
    for key, first, last, site, active in people:
        s.employees[key] = EmployeeFactory.create(
            tenant_id=tenant_id,
            first_name=first,
            last_name=last,
            primary_site_id=s.sites[site].id if site else None,
            is_active=active,
        )
    db.add_all(s.employees.values())

    s.items["fire"] = LearningItemFactory.create(
        tenant_id=tenant_id,
        code="FS-01",
        title="Fire Safety",
        category="fire-safety",
        requires_quiz=True,
    )
    s.items["general"] = LearningItemFactory.create(
        tenant_id=tenant_id,
        code="GS-01",
        title="General Site Safety",
        category="general-safety",
        requires_quiz=True,
    )
    db.add_all(s.items.values())
    await db.flush()

    rows = [
        (1, "ann", "fire", AssignmentStatus.COMPLETED, NOW - timedelta(days=5)),
        (2, "ben", "fire", AssignmentStatus.PENDING, NOW - timedelta(days=2)),
        (3, "cat", "fire", AssignmentStatus.IN_PROGRESS, NOW + timedelta(days=3)),
        (4, "cat", "general", AssignmentStatus.COMPLETED, NOW - timedelta(days=1)),
        (5, "dan", "general", AssignmentStatus.OVERDUE, NOW - timedelta(days=10)),
        (6, "eve", "general", AssignmentStatus.PENDING, NOW + timedelta(days=10)),
        (7, "ann", "general", AssignmentStatus.CANCELLED, NOW - timedelta(days=20)),
    ]
    for number, employee, item, status, due in rows:
        s.assignments[number] = AssignmentFactory.create(
            tenant_id=tenant_id,
            employee_id=s.employees[employee].id,
            learning_item_id=s.items[item].id,
            status=status,
            required_date=due - timedelta(days=14),
            due_date=due,
        )
    db.add_all(s.assignments.values())
    await db.flush()

    s.completions[1] = CompletionFactory.create(
        assignment_id=s.assignments[1].id,
        completed_at=NOW - timedelta(days=6),
        total_time_spent_seconds=754,
        quiz_score=8,
        quiz_max_score=10,
        quiz_passed=True,
    )
    s.completions[4] = CompletionFactory.create(
        assignment_id=s.assignments[4].id,
        completed_at=NOW - timedelta(hours=12),
        total_time_spent_seconds=59,
        quiz_score=5,
        quiz_max_score=10,
        quiz_passed=False,
    )
    db.add_all(s.completions.values())
    await db.commit()
    return s
