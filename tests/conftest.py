"""
Shared test fixtures for the Dispatch Planner API test suite.
"""

import itertools
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dispatch.config import Settings
from dispatch.middleware.auth import SessionUser


def _make_result(scalar=None, scalars=None, rowcount=0):
    """A stand-in for the Result returned by AsyncSession.execute."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalar_one.return_value = scalar
    result.scalars.return_value.all.return_value = list(scalars or [])
    result.rowcount = rowcount
    return result


@pytest.fixture
def make_result():
    """Factory for mocked query results."""
    return _make_result


@pytest.fixture
def test_settings():
    """Settings configured for testing (no real DB connection needed)."""
    return Settings(
        db_host="localhost",
        db_port=5432,
        db_name="dispatch_test",
        db_user="test",
        db_password="test",
        debug=True,
    )


@pytest.fixture
def mock_db_session():
    """
    Create a mock async database session.

    ``refresh`` plays the database: it assigns ids and timestamps to new rows.
    """
    ids = itertools.count(100)

    async def refresh(obj, *args, **kwargs):
        if getattr(obj, "id", None) is None:
            obj.id = next(ids)
        if hasattr(obj, "created_at") and obj.created_at is None:
            obj.created_at = datetime(2024, 1, 1, 12, 0, 0)

    session = AsyncMock()
    session.execute = AsyncMock(return_value=_make_result())
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.refresh = AsyncMock(side_effect=refresh)
    session.add = MagicMock()
    session.add_all = MagicMock()
    return session


@pytest.fixture
def admin_user():
    return SessionUser({"id": 1, "username": "admin", "full_name": "Ada Admin", "role": "admin"})


@pytest.fixture
def worker_user():
    return SessionUser({"id": 2, "username": "wes", "full_name": "Wes Worker", "role": "worker"})


@pytest.fixture
def test_app(mock_db_session):
    """Application with the database dependencies replaced by the mock."""
    from dispatch.database import get_db, get_db_readonly
    from dispatch.main import create_app

    app = create_app()
    app.dependency_overrides[get_db] = lambda: mock_db_session
    app.dependency_overrides[get_db_readonly] = lambda: mock_db_session
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def app_client(test_app):
    """Create an unauthenticated test client with mocked database dependencies."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _login_as(app, client, user):
    from dispatch.middleware.auth import get_current_user

    app.dependency_overrides[get_current_user] = lambda: user
    return client


@pytest_asyncio.fixture
async def admin_client(test_app, app_client, admin_user):
    """Test client authenticated as an admin."""
    return _login_as(test_app, app_client, admin_user)


@pytest_asyncio.fixture
async def worker_client(test_app, app_client, worker_user):
    """Test client authenticated as a worker."""
    return _login_as(test_app, app_client, worker_user)
