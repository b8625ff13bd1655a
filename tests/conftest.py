"""Test fixtures and configuration.

Every test gets its own SQLite file database and its own application built
through ``create_app``, so no state leaks between tests and no PostgreSQL
server is needed.
"""

import logging
import sys
from uuid import UUID

import pytest
import pytest_asyncio
import structlog
from httpx import ASGITransport, AsyncClient

from happy_thoughts.config import Settings
from happy_thoughts.main import create_app

TEST_SECRET_KEY = "test-secret-key-with-enough-entropy-0123456789"
DEFAULT_PASSWORD = "secret1"


# --- Structlog Configuration for Tests ---
@pytest.fixture(autouse=True, scope="session")
def configure_structlog_for_tests():
    """Configure structlog for proper capsys capture in tests."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=processors[:-1],
    )

    root_logger = logging.getLogger()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    yield

    root_logger.removeHandler(handler)
    structlog.reset_defaults()


def make_settings(database_url: str, **overrides) -> Settings:
    """Build Settings for tests without reading the environment's .env file."""
    values = {
        "database_url": database_url,
        "SECRET_KEY": TEST_SECRET_KEY,
        "bcrypt_rounds": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'happy_thoughts_test.db'}"


@pytest.fixture
def settings_factory(database_url):
    """Settings for this test's database with selected overrides."""

    def _factory(**overrides) -> Settings:
        return make_settings(overrides.pop("database_url", database_url), **overrides)

    return _factory


@pytest.fixture
def settings(settings_factory) -> Settings:
    return settings_factory()


@pytest_asyncio.fixture
async def app(settings):
    """Application with tables created; disposed after the test."""
    application = create_app(settings)
    await application.state.db.init_db()
    yield application
    await application.state.db.dispose()


@pytest_asyncio.fixture
async def client(app):
    """Async test client without auth headers."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_user(client):
    """Sign up and log in a user; returns (user_id, auth headers)."""

    async def _register(email: str, password: str = DEFAULT_PASSWORD) -> tuple[UUID, dict[str, str]]:
        response = await client.post("/signup", json={"email": email, "password": password})
        assert response.status_code == 201, response.text
        user_id = UUID(response.json()["id"])

        response = await client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return user_id, bearer(response.json()["token"])

    return _register


@pytest_asyncio.fixture
async def alice(register_user) -> tuple[UUID, dict[str, str]]:
    """Signed-up user A with ready-to-use auth headers."""
    return await register_user("alice@example.com")


@pytest_asyncio.fixture
async def bob(register_user) -> tuple[UUID, dict[str, str]]:
    """Signed-up user B with ready-to-use auth headers."""
    return await register_user("bob@example.com")


@pytest_asyncio.fixture
async def alice_thought(client, alice) -> dict:
    """A thought posted by alice."""
    _, headers = alice
    response = await client.post("/thoughts", json={"message": "alice is happy today"}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
