"""
Snippetbox — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Provides reusable test infrastructure (real SQLite database, app,
       HTTP client, mock sessions).
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at a fresh SQLite file in tmp_path
    ├── app: FastAPI app built from test_settings, tables created
    ├── db_session: AsyncSession on the app's engine
    ├── test_client: HTTPX AsyncClient over ASGITransport (https://test)
    └── mock_db_session: AsyncMock session for tests that need no database
"""

import os

# Override settings for testing BEFORE any application imports
# Why: the module-level settings singleton reads the environment once
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["SESSION_SECRET_KEY"] = "test-secret-key"
os.environ["TLS_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Dict  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from snippetbox.config import Settings  # noqa: E402
from snippetbox.database import Base  # noqa: E402
from snippetbox.main import create_app  # noqa: E402
from snippetbox.models.snippet import Snippet  # noqa: E402,F401
from snippetbox.models.user import User  # noqa: E402,F401


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """
    Settings for an isolated app instance.

    bcrypt_rounds=4 is the library minimum and keeps signup/login tests fast.
    """
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'snippetbox.db'}",
        session_secret_key="test-secret-key",
        bcrypt_rounds=4,
        tls_enabled=False,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fully wired app with its tables created.

    ASGITransport doesn't run the lifespan, so the schema is created here and
    the engine disposed on teardown.
    """
    application = create_app(test_settings)
    async with application.state.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield application
    await application.state.engine.dispose()


@pytest_asyncio.fixture
async def db_session(app):
    """A session on the same database the app uses."""
    async with app.state.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app in-process.

    https base URL: the session cookie is Secure, so the client only sends
    it back over https.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for tests that only check which calls are made.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = None
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def user_credentials() -> Dict[str, str]:
    return {
        "name": "Alice Jones",
        "email": "alice@example.com",
        "password": "pa$$word123",
    }


@pytest_asyncio.fixture
async def logged_in_client(test_client: AsyncClient, user_credentials):
    """test_client after a successful signup and login."""
    response = await test_client.post("/user/signup", data=user_credentials)
    assert response.status_code == 303
    response = await test_client.post(
        "/user/login",
        data={"email": user_credentials["email"], "password": user_credentials["password"]},
    )
    assert response.status_code == 303
    return test_client
