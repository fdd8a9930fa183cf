"""Auth helpers shared by the API tests.

Fixtures live in the repository root ``conftest.py``.
"""

import uuid
from contextlib import contextmanager
from typing import Optional

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser


def make_user(
    tenant_id: uuid.UUID,
    role: str = "employee",
    employee_id: Optional[uuid.UUID] = None,
    is_super_user: bool = False,
) -> AuthUser:
    return AuthUser(
        user_id=f"user-{uuid.uuid4().hex[:8]}",
        email="user@example.com",
        role=role,
        tenant_id=tenant_id,
        employee_id=employee_id,
        is_super_user=is_super_user,
    )


@contextmanager
def override_auth(app, user: AuthUser):
    """Act as ``user`` for the duration of the block."""
    previous = app.dependency_overrides.get(get_current_user)

    async def _override_user():
        return user

    app.dependency_overrides[get_current_user] = _override_user
    try:
        yield
    finally:
        if previous is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = previous
