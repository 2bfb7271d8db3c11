# =============================================================================
# DATABASE DRIVERS PACKAGE
# =============================================================================
# File: db/drivers/__init__.py
# Description: Concrete backend drivers
# =============================================================================

from quote_api.db.drivers.sqlite_driver import SQLiteDriver
from quote_api.db.drivers.postgres_driver import PostgresDriver
from quote_api.db.drivers.azure_sql_driver import AzureSQLDriver

__all__ = [
    "SQLiteDriver",
    "PostgresDriver",
    "AzureSQLDriver",
]
