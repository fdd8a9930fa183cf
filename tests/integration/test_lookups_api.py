"""Integration tests for the lookups_service HTTP API."""

import uuid

import pytest
from services.lookups_service.app.main import app
from services.lookups_service.models import TRAINING_CATEGORY
from tests.conftest import make_user, override_auth
from tests.factories import LookupCategoryFactory, LookupValueFactory


async def _seed(db):
    category = LookupCategoryFactory.create(name=TRAINING_CATEGORY, allow_custom=True)
    db.add(category)
    await db.flush()
    general = LookupValueFactory.create(
        category.id, code="general-safety", name="General Safety", sort_order=1
    )
    db.add(general)
    await db.commit()
    return category, general


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(lookups_client):
    response = await lookups_client.get("/health")

    assert response.status_code == 200
    assert response.json()["service"] == "lookups"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_categories(lookups_client, db_session):
    await _seed(db_session)

    response = await lookups_client.get("/lookups/categories")

    assert response.status_code == 200, response.text
    assert [c["name"] for c in response.json()] == [TRAINING_CATEGORY]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_custom_value_lifecycle(lookups_client, db_session):
    await _seed(db_session)

    created = await lookups_client.post(
        f"/lookups/{TRAINING_CATEGORY}/values",
        json={"code": "lone-working", "name": "Lone Working", "sort_order": 5},
    )
    assert created.status_code == 201, created.text
    value_id = created.json()["id"]
    assert created.json()["is_global"] is False

    updated = await lookups_client.put(
        f"/lookups/values/{value_id}",
        json={"code": "lone-working", "name": "Lone Working (night)", "is_enabled": False},
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["is_enabled"] is False

    # include_disabled only reveals disabled overrides, never disabled customs
    listed = await lookups_client.get(
        f"/lookups/{TRAINING_CATEGORY}", params={"include_disabled": True}
    )
    assert "lone-working" not in [v["code"] for v in listed.json()]

    deleted = await lookups_client.delete(f"/lookups/values/{value_id}")
    assert deleted.status_code == 204

    missing = await lookups_client.delete(f"/lookups/values/{value_id}")
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_duplicate_custom_code_is_bad_request(lookups_client, db_session):
    await _seed(db_session)
    url = f"/lookups/{TRAINING_CATEGORY}/values"

    first = await lookups_client.post(url, json={"code": "ppe-site", "name": "PPE"})
    second = await lookups_client.post(url, json={"code": "ppe-site", "name": "PPE 2"})

    assert first.status_code == 201
    assert second.status_code == 400


@pytest.mark.asyncio
@pytest.mark.integration
async def test_toggle_global_value(lookups_client, db_session):
    _, general = await _seed(db_session)
    url = f"/lookups/{TRAINING_CATEGORY}/global/{general.id}/toggle"

    first = await lookups_client.put(url, json={"is_enabled": False})
    second = await lookups_client.put(url, json={"is_enabled": False})
    visible = await lookups_client.get(f"/lookups/{TRAINING_CATEGORY}")

    assert first.status_code == 200, first.text
    assert first.json()["id"] == second.json()["id"]
    assert first.json()["overridden_global_id"] == str(general.id)
    assert visible.json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_category_is_not_found(lookups_client):
    response = await lookups_client.get("/lookups/Nope")

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_mutations_require_admin(lookups_client, db_session, tenant_id):
    _, general = await _seed(db_session)

    with override_auth(app, make_user(tenant_id, role="employee")):
        read = await lookups_client.get(f"/lookups/{TRAINING_CATEGORY}")
        create = await lookups_client.post(
            f"/lookups/{TRAINING_CATEGORY}/values",
            json={"code": "x", "name": "X"},
        )
        toggle = await lookups_client.put(
            f"/lookups/{TRAINING_CATEGORY}/global/{general.id}/toggle",
            json={"is_enabled": False},
        )
        delete = await lookups_client.delete(f"/lookups/values/{uuid.uuid4()}")

    assert read.status_code == 200
    assert create.status_code == 403
    assert toggle.status_code == 403
    assert delete.status_code == 403
