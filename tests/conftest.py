# =============================================================================
# QUOTE API - TEST CONFIGURATION
# =============================================================================
# File: tests/conftest.py
# Description: Pytest fixtures: file-backed SQLite per test, ASGI client,
#              and a scripted driver for connection lifecycle tests
# =============================================================================

import asyncio
from typing import Any, AsyncGenerator, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from quote_api.core.config import BackendKind, Settings
from quote_api.core.exceptions import DatabaseConnectionError
from quote_api.db.base import BackendDriver, ConnectionHandle, QueryResult
from quote_api.db.dialects import SQLiteDialect, Statement
from quote_api.main import create_application


# Variables that would steer backend auto-detection away from SQLite
BACKEND_ENV_VARS = (
    "DB_BACKEND",
    "AZURE_SQL_SERVER",
    "AZURE_SQL_DATABASE",
    "AZURE_SQL_USER",
    "AZURE_SQL_PASSWORD",
    "AZURE_SQL_AUTH",
    "DATABASE_URL",
    "SQLITE_DB",
    "JWT_SECRET",
    "APP_ENV",
)

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def make_settings(**overrides: Any) -> Settings:
    """Settings isolated from .env, with cheap Argon2 parameters."""
    values: Dict[str, Any] = {
        "_env_file": None,
        "jwt_secret": TEST_SECRET,
        "argon2_memory_cost": 1024,
        "argon2_time_cost": 1,
        "argon2_parallelism": 1,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in BACKEND_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """SQLite settings pointing at a fresh file for each test."""
    return make_settings(sqlite_db=str(tmp_path / "data" / "test.db"))


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================

@pytest_asyncio.fixture
async def app(settings: Settings):
    """Application with its lifespan running (database connected)."""
    application = create_application(settings)
    async with application.router.lifespan_context(application):
        yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# USER FIXTURES
# =============================================================================

@pytest.fixture
def alice() -> Dict[str, str]:
    """Sample user registration data."""
    return {"name": "Alice", "email": "a@x.com", "password": "secret1"}


@pytest_asyncio.fixture
async def auth_headers(client: AsyncClient, alice: Dict[str, str]) -> Dict[str, str]:
    response = await client.post("/api/register", json=alice)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


# =============================================================================
# SCRIPTED DRIVER
# =============================================================================

class FakeEngine:
    """Stand-in for AsyncEngine; only dispose() is ever called."""

    def __init__(self) -> None:
        self.disposed = False

    async def dispose(self) -> None:
        self.disposed = True


class ScriptedDriver(BackendDriver):
    """
    Driver that counts lifecycle calls instead of talking to a database.

    ``connect_delay`` keeps a reconnect in flight long enough for other
    callers to observe it; ``fail_connect`` makes connect raise.
    """

    kind = BackendKind.SQLITE
    dialect = SQLiteDialect()

    def __init__(
        self,
        settings: Settings,
        connect_delay: float = 0.0,
        fail_connect: bool = False,
        fail_close: bool = False,
    ):
        super().__init__(settings)
        self.connect_delay = connect_delay
        self.fail_connect = fail_connect
        self.fail_close = fail_close
        self.connect_calls = 0
        self.close_calls = 0
        self.schema_calls = 0
        self.executed = []

    async def connect(self) -> ConnectionHandle:
        self.connect_calls += 1
        if self.connect_delay:
            await asyncio.sleep(self.connect_delay)
        if self.fail_connect:
            raise DatabaseConnectionError(details={"backend": "scripted"})
        return ConnectionHandle(backend=self.kind, engine=FakeEngine())

    async def ensure_schema(self, handle: ConnectionHandle) -> None:
        self.schema_calls += 1

    async def execute(self, handle: ConnectionHandle, statement: Statement) -> QueryResult:
        self.executed.append(statement)
        return QueryResult(rows=[{"1": 1}])

    async def close(self, handle: Optional[ConnectionHandle]) -> None:
        self.close_calls += 1
        if handle is not None:
            handle.closed = True
        if self.fail_close:
            raise OSError("socket already gone")
