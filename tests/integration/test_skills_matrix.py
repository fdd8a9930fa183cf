"""Integration tests for the skills matrix builder."""

from datetime import timedelta

import pytest
from services.lookups_service.models import TRAINING_CATEGORY
from services.training_service.models import CellStatus
from services.training_service.services.skills_matrix import build_skills_matrix
from tests.factories import (
    EmployeeFactory,
    LookupCategoryFactory,
    LookupValueFactory,
    TenantLookupValueFactory,
)
from tests.scenarios import NOW, seed_report_scenario


def _cells(matrix):
    return {(c.employee_id, c.learning_item_id): c for c in matrix.cells}


async def _seed_training_categories(db, tenant_id, general_override=None):
    category = LookupCategoryFactory.create(name=TRAINING_CATEGORY, allow_custom=True)
    db.add(category)
    await db.flush()
    fire = LookupValueFactory.create(category.id, code="fire-safety", name="Fire Safety")
    general = LookupValueFactory.create(
        category.id, code="general-safety", name="General Safety"
    )
    db.add_all([fire, general])
    await db.flush()
    if general_override is not None:
        db.add(
            TenantLookupValueFactory.create(
                tenant_id,
                category.id,
                lookup_value_id=general.id,
                code="general-safety",
                **general_override,
            )
        )
    await db.commit()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_admin_view_is_complete(db_session, tenant_id):
    s = await seed_report_scenario(db_session, tenant_id)
    zed = EmployeeFactory.create(tenant_id=tenant_id, first_name="Zed", last_name="Young")
    db_session.add(zed)
    await db_session.commit()

    result = await build_skills_matrix(db_session, tenant_id=tenant_id, now=NOW)

    assert result.ok, result.error
    matrix = result.value
    assert [e.full_name for e in matrix.employees] == [
        "Ann Adams",
        "Ben Brown",
        "Cat Cole",
        "Dan Dunn",
        "Eve Evans",
        "Zed Young",
    ]
    assert [i.code for i in matrix.learning_items] == ["FS-01", "GS-01"]
    # One cell per employee x learning item
    assert len(matrix.cells) == 12
    assert len(_cells(matrix)) == 12

    cells = _cells(matrix)
    fire, general = s.items["fire"].id, s.items["general"].id
    e = s.employees

    ann_fire = cells[(e["ann"].id, fire)]
    assert ann_fire.status == CellStatus.COMPLETED
    assert ann_fire.score == 80
    assert ann_fire.completed_at == NOW - timedelta(days=6)

    # Ann's only general-safety row is cancelled
    assert cells[(e["ann"].id, general)].status == CellStatus.NOT_ASSIGNED

    ben_fire = cells[(e["ben"].id, fire)]
    assert ben_fire.status == CellStatus.OVERDUE
    assert ben_fire.days_overdue == 2

    assert cells[(e["cat"].id, fire)].status == CellStatus.IN_PROGRESS
    assert cells[(e["cat"].id, fire)].due_date == NOW + timedelta(days=3)
    assert cells[(e["cat"].id, general)].score == 50
    assert cells[(e["dan"].id, general)].days_overdue == 10
    assert cells[(e["eve"].id, general)].status == CellStatus.ASSIGNED
    assert cells[(zed.id, fire)].status == CellStatus.NOT_ASSIGNED


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_scoped_view_only_has_assigned_employees(db_session, tenant_id):
    s = await seed_report_scenario(db_session, tenant_id)
    zed = EmployeeFactory.create(tenant_id=tenant_id, first_name="Zed", last_name="Young")
    db_session.add(zed)
    await db_session.commit()

    matrix = (
        await build_skills_matrix(
            db_session,
            tenant_id=tenant_id,
            employee_ids=[s.employees["ben"].id, s.employees["eve"].id, zed.id],
            now=NOW,
        )
    ).value

    assert [e.full_name for e in matrix.employees] == ["Ben Brown", "Eve Evans"]
    assert [i.code for i in matrix.learning_items] == ["FS-01", "GS-01"]
    assert len(matrix.cells) == 4


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_category_filter(db_session, tenant_id):
    await seed_report_scenario(db_session, tenant_id)

    matrix = (
        await build_skills_matrix(
            db_session, tenant_id=tenant_id, category="fire-safety", now=NOW
        )
    ).value

    assert [i.code for i in matrix.learning_items] == ["FS-01"]
    # Dan is inactive and has nothing in this category
    assert [e.full_name for e in matrix.employees] == [
        "Ann Adams",
        "Ben Brown",
        "Cat Cole",
        "Eve Evans",
    ]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_empty_tenant(db_session, tenant_id):
    matrix = (await build_skills_matrix(db_session, tenant_id=tenant_id, now=NOW)).value

    assert matrix.employees == []
    assert matrix.learning_items == []
    assert matrix.cells == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_category_names_come_from_lookups(db_session, tenant_id):
    await seed_report_scenario(db_session, tenant_id)
    await _seed_training_categories(
        db_session, tenant_id, general_override={"name": "Site Safety Basics"}
    )

    matrix = (await build_skills_matrix(db_session, tenant_id=tenant_id, now=NOW)).value

    names = {i.code: i.category_name for i in matrix.learning_items}
    assert names == {"FS-01": "Fire Safety", "GS-01": "Site Safety Basics"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_category_name_falls_back_to_code(db_session, tenant_id):
    await seed_report_scenario(db_session, tenant_id)
    await _seed_training_categories(
        db_session, tenant_id, general_override={"is_enabled": False}
    )

    matrix = (await build_skills_matrix(db_session, tenant_id=tenant_id, now=NOW)).value

    names = {i.code: i.category_name for i in matrix.learning_items}
    assert names == {"FS-01": "Fire Safety", "GS-01": "general-safety"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_without_lookup_category(db_session, tenant_id):
    await seed_report_scenario(db_session, tenant_id)

    result = await build_skills_matrix(db_session, tenant_id=tenant_id, now=NOW)

    assert result.ok
    names = {i.code: i.category_name for i in result.value.learning_items}
    assert names == {"FS-01": "fire-safety", "GS-01": "general-safety"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_matrix_admin_view_lists_workforce_without_assignments(
    db_session, tenant_id
):
    db_session.add_all(
        [
            EmployeeFactory.create(tenant_id=tenant_id, first_name="Amy", last_name="Hart"),
            EmployeeFactory.create(tenant_id=tenant_id, first_name="Bo", last_name="Gale"),
            EmployeeFactory.create(tenant_id=tenant_id, is_active=False),
            EmployeeFactory.create(tenant_id=tenant_id, is_deleted=True),
        ]
    )
    await db_session.commit()

    matrix = (await build_skills_matrix(db_session, tenant_id=tenant_id, now=NOW)).value

    assert [e.full_name for e in matrix.employees] == ["Bo Gale", "Amy Hart"]
    assert matrix.learning_items == []
    assert matrix.cells == []
