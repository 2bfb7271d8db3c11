# =============================================================================
# QUOTE API - SQLITE DRIVER AND QUERY FACADE TESTS
# =============================================================================
# File: tests/test_sqlite_driver.py
# Description: Real SQLite round trips through the driver and the facade
# =============================================================================

from typing import AsyncGenerator

import pytest
import pytest_asyncio

from quote_api.core.exceptions import DuplicateRecordError, StorageIOError
from quote_api.db.connection import ConnectionManager
from quote_api.db.dialects import Operation, Query
from quote_api.db.drivers import SQLiteDriver
from quote_api.db.queries import QueryFacade

from conftest import make_settings


@pytest_asyncio.fixture
async def manager(settings) -> AsyncGenerator[ConnectionManager, None]:
    connection_manager = ConnectionManager(settings)
    await connection_manager.initialize()
    yield connection_manager
    await connection_manager.shutdown()


class TestSQLiteDriver:
    """Driver contract against a file database."""

    @pytest.mark.asyncio
    async def test_connect_creates_file_and_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "app.db"
        driver = SQLiteDriver(make_settings(sqlite_db=str(path)))

        handle = await driver.connect()
        try:
            assert path.exists()
            assert handle.is_open
        finally:
            await driver.close(handle)

    @pytest.mark.asyncio
    async def test_home_relative_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        driver = SQLiteDriver(make_settings(sqlite_db="~/data/users.db"))

        handle = await driver.connect()
        try:
            assert (tmp_path / "data" / "users.db").exists()
        finally:
            await driver.close(handle)

    @pytest.mark.asyncio
    async def test_ensure_schema_twice(self, settings):
        driver = SQLiteDriver(settings)
        handle = await driver.connect()
        try:
            await driver.ensure_schema(handle)
            await driver.execute(handle, driver.dialect.render(
                Query(Operation.INSERT_USER, {"name": "A", "email": "a@x.com", "password": "h"})
            ))
            await driver.ensure_schema(handle)

            result = await driver.execute(handle, driver.dialect.render(Query(Operation.LIST_USERS)))
            assert len(result.rows) == 1
        finally:
            await driver.close(handle)

    @pytest.mark.asyncio
    async def test_close_twice(self, settings):
        driver = SQLiteDriver(settings)
        handle = await driver.connect()

        await driver.close(handle)
        await driver.close(handle)

        assert handle.closed
        assert not handle.is_open

    @pytest.mark.asyncio
    async def test_unusable_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        driver = SQLiteDriver(make_settings(sqlite_db=str(blocker / "app.db")))

        with pytest.raises(StorageIOError):
            await driver.connect()

    @pytest.mark.asyncio
    async def test_memory_database(self):
        driver = SQLiteDriver(make_settings(sqlite_db=":memory:"))
        handle = await driver.connect()
        try:
            await driver.ensure_schema(handle)
            inserted = await driver.execute(handle, driver.dialect.render(
                Query(Operation.INSERT_QUOTE, {"company": "Acme", "tag_name": "T1"})
            ))
            found = await driver.execute(handle, driver.dialect.render(
                Query(Operation.FIND_QUOTE_BY_ID, {"id": inserted.inserted_id})
            ))
            assert found.first()["company"] == "Acme"
        finally:
            await driver.close(handle)


class TestQueryFacade:
    """Normalized results and error translation."""

    @pytest.mark.asyncio
    async def test_inserted_ids_increase(self, manager):
        queries = QueryFacade(manager)

        first = await queries.execute(Operation.INSERT_QUOTE, {"company": "A", "tag_name": "1"})
        second = await queries.execute(Operation.INSERT_QUOTE, {"company": "B", "tag_name": "2"})

        assert isinstance(first.inserted_id, int)
        assert second.inserted_id > first.inserted_id
        assert first.rows == []

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, manager):
        queries = QueryFacade(manager)
        user = {"name": "A", "email": "a@x.com", "password": "h"}
        await queries.execute(Operation.INSERT_USER, user)

        with pytest.raises(DuplicateRecordError):
            await queries.execute(Operation.INSERT_USER, user)

    @pytest.mark.asyncio
    async def test_find_missing_user(self, manager):
        result = await QueryFacade(manager).execute(Operation.FIND_USER_BY_EMAIL, {"email": "none"})

        assert result.rows == []
        assert result.first() is None

    @pytest.mark.asyncio
    async def test_ping(self, manager):
        assert await QueryFacade(manager).ping() is True

    @pytest.mark.asyncio
    async def test_reconnects_after_invalidate(self, manager):
        queries = QueryFacade(manager)
        await queries.execute(Operation.INSERT_QUOTE, {"company": "A", "tag_name": "1"})
        old = await manager.acquire()

        manager.invalidate(old)
        rows = (await queries.execute(Operation.LIST_QUOTES)).rows

        assert len(rows) == 1
        assert old.closed
        assert (await manager.acquire()) is not old
