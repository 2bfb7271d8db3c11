# =============================================================================
# QUOTE API - AZURE SQL DRIVER
# =============================================================================
# File: db/drivers/azure_sql_driver.py
# Description: Azure SQL / SQL Server driver for production deployments
#              SQL authentication or Azure AD managed identity access tokens
# =============================================================================

import logging
import struct
from typing import Any, Callable, Dict, Optional

from azure.core.credentials import AccessToken
from azure.core.exceptions import AzureError
from azure.identity.aio import ManagedIdentityCredential
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError

from quote_api.core.config import BackendKind, Settings
from quote_api.core.exceptions import (
    ConfigurationError,
    CredentialError,
    DatabaseConnectionError,
)
from quote_api.db.base import BackendDriver, ConnectionHandle
from quote_api.db.dialects import MSSQLDialect


logger = logging.getLogger(__name__)

# pyodbc pre-connect attribute carrying an AAD access token
SQL_COPT_SS_ACCESS_TOKEN = 1256
AZURE_SQL_SCOPE = "https://database.windows.net/.default"


def encode_access_token(token: str) -> bytes:
    """Pack a token the way the ODBC driver expects: length-prefixed UTF-16-LE."""
    raw = token.encode("utf-16-le")
    return struct.pack(f"<I{len(raw)}s", len(raw), raw)


def _odbc_escape(value: str) -> str:
    return "{" + value.replace("}", "}}") + "}"


class AzureSQLDriver(BackendDriver):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    AZURE SQL DRIVER                                      │
    │  Async SQL Server implementation over aioodbc / pyodbc                  │
    │  Supports static SQL logins and managed identity access tokens          │
    └─────────────────────────────────────────────────────────────────────────┘

    Credential modes (``AZURE_SQL_AUTH``):
        - sql: AZURE_SQL_USER / AZURE_SQL_PASSWORD
        - aad: token for https://database.windows.net/.default fetched from
               the managed identity endpoint on every connect

    AAD tokens expire (typically after an hour or so). The driver does not
    refresh them; instead the handle it returns carries the token expiry,
    and the connection manager reconnects once the handle reports stale.
    """

    kind = BackendKind.AZURE
    dialect = MSSQLDialect()

    def __init__(
        self,
        settings: Settings,
        credential_factory: Optional[Callable[[], Any]] = None,
    ):
        super().__init__(settings)
        self._credential_factory = credential_factory or ManagedIdentityCredential

    # -------------------------------------------------------------------------
    # CONFIGURATION
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Check the settings required by the selected credential mode.

        Raises:
            ConfigurationError: Server/database, or login for SQL auth, missing
        """
        s = self._settings
        if not s.azure_sql_server or not s.azure_sql_database:
            raise ConfigurationError("AZURE_SQL_SERVER and AZURE_SQL_DATABASE required")
        if s.azure_sql_auth == "sql" and (not s.azure_sql_user or not s.azure_sql_password):
            raise ConfigurationError("AZURE_SQL_USER and AZURE_SQL_PASSWORD required for SQL auth")

    def odbc_connection_string(self) -> str:
        s = self._settings
        parts = [
            f"Driver={_odbc_escape(s.azure_sql_odbc_driver)}",
            f"Server=tcp:{s.azure_sql_server},{s.azure_sql_port}",
            f"Database={s.azure_sql_database}",
            f"Encrypt={'yes' if s.azure_sql_encrypt else 'no'}",
            "TrustServerCertificate=no",
            "Connection Timeout=30",
        ]
        if s.azure_sql_auth == "sql":
            parts.append(f"Uid={s.azure_sql_user}")
            parts.append(f"Pwd={_odbc_escape(s.azure_sql_password or '')}")
        return ";".join(parts) + ";"

    def build_url(self) -> URL:
        return URL.create(
            "mssql+aioodbc",
            query={"odbc_connect": self.odbc_connection_string()},
        )

    # -------------------------------------------------------------------------
    # CREDENTIALS
    # -------------------------------------------------------------------------

    async def acquire_token(self) -> AccessToken:
        """
        Fetch an access token from the managed identity endpoint.

        Raises:
            CredentialError: Identity endpoint unavailable or token refused
        """
        try:
            credential = self._credential_factory()
        except (AzureError, ValueError) as e:
            raise CredentialError(
                "Managed Identity credential unavailable",
                details={"error": str(e)},
            )

        try:
            token = await credential.get_token(AZURE_SQL_SCOPE)
        except AzureError as e:
            raise CredentialError(
                "Failed to acquire AAD token",
                details={"error": str(e)},
            )
        finally:
            await credential.close()

        if not token or not token.token:
            raise CredentialError("Failed to acquire AAD token")
        return token

    # -------------------------------------------------------------------------
    # CONNECTION
    # -------------------------------------------------------------------------

    async def connect(self) -> ConnectionHandle:
        """
        Build the pool for the configured credential mode and verify it.

        Raises:
            ConfigurationError: Required settings missing
            CredentialError: AAD token could not be acquired
            DatabaseConnectionError: Server unreachable or login rejected
        """
        self.validate()
        settings = self._settings

        connect_args: Dict[str, Any] = {}
        expires_at: Optional[float] = None

        if settings.azure_sql_auth == "aad":
            token = await self.acquire_token()
            connect_args["attrs_before"] = {
                SQL_COPT_SS_ACCESS_TOKEN: encode_access_token(token.token),
            }
            expires_at = float(token.expires_on - settings.azure_token_refresh_margin)

        engine = self._create_engine(
            self.build_url(),
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=1800,
            pool_pre_ping=True,
            connect_args=connect_args,
        )

        try:
            await self._probe(engine)
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise DatabaseConnectionError(details={"backend": self.kind.value, "error": str(e)})

        logger.info(
            f"Connected to Azure SQL {settings.azure_sql_server}/{settings.azure_sql_database} "
            f"({settings.azure_sql_auth} auth)"
        )
        return ConnectionHandle(backend=self.kind, engine=engine, expires_at=expires_at)
