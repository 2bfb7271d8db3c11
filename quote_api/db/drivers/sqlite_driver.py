# =============================================================================
# QUOTE API - SQLITE DRIVER
# =============================================================================
# File: db/drivers/sqlite_driver.py
# Description: Embedded file database driver for development and testing
#              Uses aiosqlite for async operations with SQLAlchemy
# =============================================================================

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from quote_api.core.config import BackendKind
from quote_api.core.exceptions import StorageIOError
from quote_api.db.base import BackendDriver, ConnectionHandle
from quote_api.db.dialects import SQLiteDialect, Statement


logger = logging.getLogger(__name__)


class SQLiteDriver(BackendDriver):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    SQLITE DRIVER                                         │
    │  Async SQLite implementation for local development and tests           │
    │  Uses aiosqlite driver with SQLAlchemy's async engine                   │
    └─────────────────────────────────────────────────────────────────────────┘

    Features:
        - Zero-configuration setup
        - File created on first connect, parent directory included
        - In-memory option (``SQLITE_DB=:memory:``) on a single shared connection
        - WAL journal and busy timeout applied to every pooled connection
    """

    kind = BackendKind.SQLITE
    dialect = SQLiteDialect()

    @property
    def database_path(self) -> str:
        return self._settings.sqlite_db

    @property
    def is_memory(self) -> bool:
        return self.database_path == ":memory:"

    async def connect(self) -> ConnectionHandle:
        """
        Open (creating if absent) the database file.

        Raises:
            StorageIOError: Directory cannot be created or file cannot be opened
        """
        path = self.database_path
        if not self.is_memory:
            path = str(Path(path).expanduser())

        engine_options: Dict[str, Any] = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": 30,
            },
        }

        if self.is_memory:
            engine_options["poolclass"] = StaticPool
        else:
            try:
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageIOError(
                    message=f"Cannot create directory for SQLite database '{path}'",
                    details={"error": str(e)},
                )

        engine = self._create_engine(f"sqlite+aiosqlite:///{path}", **engine_options)
        event.listen(engine.sync_engine, "connect", self._apply_pragmas)

        try:
            await self._probe(engine)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StorageIOError(
                message=f"Cannot open SQLite database '{path}'",
                details={"error": str(e)},
            )

        logger.info(f"Opened SQLite database at {path}")
        return ConnectionHandle(backend=self.kind, engine=engine)

    @staticmethod
    def _apply_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
        """Apply SQLite pragmas to each new DBAPI connection."""
        cursor = dbapi_connection.cursor()
        # Write-Ahead Logging lets readers proceed during a write
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=30000")
        cursor.close()

    def _inserted_id(
        self,
        statement: Statement,
        result: Any,
        rows: List[Dict[str, Any]],
    ) -> Optional[Any]:
        if not statement.returns_id:
            return None
        return result.lastrowid
