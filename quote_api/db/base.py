# =============================================================================
# QUOTE API - DATABASE BASE MODULE
# =============================================================================
# File: db/base.py
# Description: Abstract driver interface shared by every storage backend
#              All backend implementations must conform to this interface
# =============================================================================

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from quote_api.core.config import BackendKind, Settings
from quote_api.db.dialects import SQLDialect, Statement


logger = logging.getLogger(__name__)


# =============================================================================
# HANDLE AND RESULT TYPES
# =============================================================================

@dataclass
class ConnectionHandle:
    """
    Live connection pool for one backend.

    ``expires_at`` is set when the credential behind the pool is short-lived
    (Azure AD access tokens); past that instant the handle reports itself
    closed so the connection manager replaces it.
    """
    backend: BackendKind
    engine: AsyncEngine
    opened_at: float = field(default_factory=time.time)
    expires_at: Optional[float] = None
    closed: bool = False
    invalidated: bool = False

    @property
    def is_open(self) -> bool:
        if self.closed or self.invalidated:
            return False
        if self.expires_at is not None and time.time() >= self.expires_at:
            return False
        return True


@dataclass
class QueryResult:
    """Normalized result: rows as dicts plus the inserted id, if any."""
    rows: List[Dict[str, Any]] = field(default_factory=list)
    inserted_id: Optional[Any] = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


# =============================================================================
# ABSTRACT BACKEND DRIVER INTERFACE
# =============================================================================

class BackendDriver(ABC):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    ABSTRACT BACKEND DRIVER INTERFACE                     │
    │  Defines the contract that all storage backends must follow            │
    │  Enables seamless switching between SQLite, Azure SQL and PostgreSQL   │
    └─────────────────────────────────────────────────────────────────────────┘

    Methods:
        connect()        - Open a pool and verify connectivity
        ensure_schema()  - Idempotently create the users/quotes tables
        execute()        - Run one bound statement as an autocommit unit
        close()          - Dispose the pool (safe to call twice)
    """

    kind: BackendKind
    dialect: SQLDialect

    def __init__(self, settings: Settings):
        self._settings = settings

    @abstractmethod
    async def connect(self) -> ConnectionHandle:
        """
        Establish a connection pool to the backend.

        Raises:
            ConfigurationError: Required settings missing
            DatabaseConnectionError: Backend unreachable
        """

    async def ensure_schema(self, handle: ConnectionHandle) -> None:
        """
        Create the users and quotes tables if they do not exist.

        Every statement is guarded, so calling this on each startup against
        an existing schema changes nothing.
        """
        async with handle.engine.begin() as conn:
            for ddl in self.dialect.schema_statements():
                await conn.execute(text(ddl))
        logger.info(f"{self.kind.value} tables ready")

    async def execute(
        self,
        handle: ConnectionHandle,
        statement: Statement,
    ) -> QueryResult:
        """
        Execute a bound statement and normalize its result.

        Parameter values travel separately from the SQL text; SQLAlchemy
        renders the named ``:param`` markers into the driver's own
        paramstyle.
        """
        async with handle.engine.begin() as conn:
            result = await conn.execute(text(statement.sql), statement.params)
            rows: List[Dict[str, Any]] = []
            if result.returns_rows:
                rows = [dict(row) for row in result.mappings().all()]
            inserted_id = self._inserted_id(statement, result, rows)
        return QueryResult(rows=rows, inserted_id=inserted_id)

    def _inserted_id(self, statement: Statement, result: Any, rows: List[Dict[str, Any]]) -> Optional[Any]:
        """Pull the generated key from a RETURNING / OUTPUT row."""
        if not statement.returns_id or not rows:
            return None
        return rows[0].get("id")

    async def close(self, handle: Optional[ConnectionHandle]) -> None:
        """Dispose of the engine. Closing twice is a no-op."""
        if handle is None or handle.closed:
            return
        handle.closed = True
        await handle.engine.dispose()

    # -------------------------------------------------------------------------
    # SHARED HELPERS
    # -------------------------------------------------------------------------

    def _create_engine(self, url: Any, **engine_options: Any) -> AsyncEngine:
        return create_async_engine(url, **engine_options)

    async def _probe(self, engine: AsyncEngine) -> None:
        """Open one connection and run the dialect's ping statement."""
        async with engine.connect() as conn:
            await conn.execute(text(self.dialect.ping().sql))
