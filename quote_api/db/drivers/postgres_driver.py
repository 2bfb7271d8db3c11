# =============================================================================
# QUOTE API - POSTGRESQL DRIVER
# =============================================================================
# File: db/drivers/postgres_driver.py
# Description: PostgreSQL driver (self-hosted or Supabase)
#              Uses asyncpg for high-performance async operations
# =============================================================================

import logging
import ssl
from typing import Any, Dict

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from quote_api.core.config import BackendKind
from quote_api.core.exceptions import ConfigurationError, DatabaseConnectionError
from quote_api.db.base import BackendDriver, ConnectionHandle
from quote_api.db.dialects import PostgresDialect


logger = logging.getLogger(__name__)


class PostgresDriver(BackendDriver):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    POSTGRESQL DRIVER                                     │
    │  Async PostgreSQL implementation for hosted deployments                 │
    │  Uses asyncpg driver with SQLAlchemy's async engine                     │
    └─────────────────────────────────────────────────────────────────────────┘

    Connection Pool Configuration:
        - pool_size:     Initial connections (DB_POOL_SIZE)
        - max_overflow:  Extra connections allowed (DB_MAX_OVERFLOW)
        - pool_timeout:  Wait time for connection (DB_POOL_TIMEOUT)
        - pool_recycle:  Recycle connections after 1800s

    SSL is on by default without certificate verification, which is what
    managed providers such as Supabase expect; ``DB_SSL=false`` or
    ``sslmode=disable`` in the URL turns it off.
    """

    kind = BackendKind.POSTGRES
    dialect = PostgresDialect()

    def build_url(self) -> URL:
        """
        Convert DATABASE_URL into an asyncpg SQLAlchemy URL.

        ``postgres://`` and ``postgresql://`` schemes are both accepted.
        ``sslmode`` is libpq syntax asyncpg does not understand, so it is
        removed from the query string and honoured through connect_args.
        """
        raw = self._settings.database_url
        if not raw:
            raise ConfigurationError("DATABASE_URL required for PostgreSQL")

        try:
            url = make_url(raw)
        except ArgumentError as e:
            raise ConfigurationError(
                "DATABASE_URL is not a valid connection URL",
                details={"error": str(e)},
            )

        if url.get_backend_name() not in ("postgres", "postgresql"):
            raise ConfigurationError(
                f"DATABASE_URL must use the postgresql scheme, got '{url.drivername}'"
            )

        url = url.set(drivername="postgresql+asyncpg")
        return url.difference_update_query(["sslmode"])

    def ssl_enabled(self) -> bool:
        if not self._settings.db_ssl:
            return False
        raw = self._settings.database_url or ""
        try:
            sslmode = make_url(raw).query.get("sslmode")
        except ArgumentError:
            return True
        return sslmode != "disable"

    def connect_args(self) -> Dict[str, Any]:
        args: Dict[str, Any] = {"command_timeout": 60}
        if self.ssl_enabled():
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            args["ssl"] = context
        else:
            args["ssl"] = False
        return args

    async def connect(self) -> ConnectionHandle:
        """
        Create the asyncpg pool and verify connectivity.

        Raises:
            ConfigurationError: DATABASE_URL missing or malformed
            DatabaseConnectionError: Server unreachable or login rejected
        """
        settings = self._settings
        url = self.build_url()

        engine = self._create_engine(
            url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=1800,
            pool_pre_ping=True,
            connect_args=self.connect_args(),
        )

        try:
            await self._probe(engine)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise DatabaseConnectionError(details={"backend": self.kind.value, "error": str(e)})

        logger.info(f"Connected to PostgreSQL at {url.host}/{url.database}")
        return ConnectionHandle(backend=self.kind, engine=engine)

