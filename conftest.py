import os
import uuid
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient

# Load .env.test when present; otherwise every test gets a private in-memory
# SQLite database.
env_test_path = os.path.join(os.path.dirname(__file__), ".env.test")
if os.path.exists(env_test_path):
    load_dotenv(env_test_path, override=True)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "local")

from libs.auth.dependencies import get_current_user  # noqa: E402
from libs.common.config import get_settings  # noqa: E402
from libs.db.base import Base  # noqa: E402
from libs.db.config import build_engine  # noqa: E402
from libs.db.session import get_async_db  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

# Import all models so metadata includes every table
from services.lookups_service import models as _lookup_models  # noqa: F401,E402
from services.training_service import models as _training_models  # noqa: F401,E402

# Clear cached settings to reload with new env vars
get_settings.cache_clear()
settings = get_settings()


@pytest_asyncio.fixture
async def test_engine():
    """
    Fresh schema per test. With the default in-memory SQLite URL each engine
    is its own database, so tests never see each other's rows.
    """
    engine = build_engine(settings)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a database session bound to the per-test engine.
    """
    session_factory = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    session = session_factory()

    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def tenant_id():
    return uuid.uuid4()


def _wire_app(app, db_session, user):
    async def _override_db():
        yield db_session

    async def _override_user():
        return user

    app.dependency_overrides[get_async_db] = _override_db
    app.dependency_overrides[get_current_user] = _override_user


@pytest_asyncio.fixture
async def training_client(db_session, tenant_id) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient for the training service, authenticated as a tenant admin.
    Use ``override_auth`` to act as someone else.
    """
    from services.training_service.app.main import app
    from tests.conftest import make_user

    _wire_app(app, db_session, make_user(tenant_id, role="admin"))

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def lookups_client(db_session, tenant_id) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient for the lookups service, authenticated as a tenant admin.
    """
    from services.lookups_service.app.main import app
    from tests.conftest import make_user

    _wire_app(app, db_session, make_user(tenant_id, role="admin"))

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
