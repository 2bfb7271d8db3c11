# =============================================================================
# QUOTE API - DRIVER FACTORY
# =============================================================================
# File: db/factory.py
# Description: Factory for backend driver instantiation
#              Maps the resolved backend kind onto its driver class
# =============================================================================

import logging
from typing import Dict, Optional, Type

from quote_api.core.config import BackendKind, Settings
from quote_api.core.exceptions import ConfigurationError
from quote_api.db.base import BackendDriver
from quote_api.db.drivers import AzureSQLDriver, PostgresDriver, SQLiteDriver


logger = logging.getLogger(__name__)


DRIVER_REGISTRY: Dict[BackendKind, Type[BackendDriver]] = {
    BackendKind.SQLITE: SQLiteDriver,
    BackendKind.AZURE: AzureSQLDriver,
    BackendKind.POSTGRES: PostgresDriver,
}


def create_driver(
    settings: Settings,
    kind: Optional[BackendKind] = None,
) -> BackendDriver:
    """
    Instantiate the driver for the configured backend.

    Args:
        settings: Application settings
        kind: Override the backend resolved from settings

    Returns:
        BackendDriver: Unconnected driver instance

    Raises:
        ConfigurationError: If no driver is registered for the kind

    Example:
        driver = create_driver(settings)
        handle = await driver.connect()
    """
    selected = kind or settings.backend
    driver_cls = DRIVER_REGISTRY.get(selected)
    if driver_cls is None:
        raise ConfigurationError(
            f"Unsupported database backend: {selected}",
            details={"supported": [k.value for k in DRIVER_REGISTRY]},
        )

    logger.info(f"Selected {selected.value} storage backend")
    return driver_cls(settings)
