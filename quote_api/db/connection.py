# =============================================================================
# QUOTE API - CONNECTION MANAGER
# =============================================================================
# File: db/connection.py
# Description: Owner of the single process-wide connection handle
#              Lazy reconnect when the handle goes stale
# =============================================================================

import asyncio
import logging
from typing import Optional

from quote_api.core.config import BackendKind, Settings
from quote_api.core.exceptions import DatabaseConnectionError
from quote_api.db.base import BackendDriver, ConnectionHandle
from quote_api.db.factory import create_driver


logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    CONNECTION MANAGER                                    │
    │  Owns the one live handle, hands it out on every request                │
    │  Reconnects lazily, at most one reconnect in flight at a time           │
    └─────────────────────────────────────────────────────────────────────────┘

    Reconnection is serialized by a single in-flight event rather than a
    lock queue. A caller that finds a reconnect already running waits on
    the event for at most ``reconnect_wait_seconds``, then looks again; if
    the wait times out it receives whatever handle is current (possibly
    stale) and its query is left to fail.

    Usage:
        manager = ConnectionManager(settings)
        await manager.initialize()
        handle = await manager.acquire()
        ...
        await manager.shutdown()
    """

    def __init__(
        self,
        settings: Settings,
        driver: Optional[BackendDriver] = None,
    ):
        self._settings = settings
        self._driver = driver or create_driver(settings)
        self._handle: Optional[ConnectionHandle] = None
        self._reconnecting: Optional[asyncio.Event] = None
        self._wait_seconds = settings.reconnect_wait_seconds

    # -------------------------------------------------------------------------
    # ACCESSORS
    # -------------------------------------------------------------------------

    @property
    def driver(self) -> BackendDriver:
        return self._driver

    @property
    def backend(self) -> BackendKind:
        return self._driver.kind

    @property
    def is_initialized(self) -> bool:
        return self._handle is not None

    @property
    def is_connected(self) -> bool:
        return self._handle is not None and self._handle.is_open

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Connect and bootstrap the schema.

        Any failure here is fatal: it is logged and re-raised so the
        server refuses to start instead of serving in a degraded state.
        """
        try:
            handle = await self._driver.connect()
        except Exception as e:
            logger.critical(f"Database connection failed ({self.backend.value}): {e}")
            raise

        try:
            await self._driver.ensure_schema(handle)
        except Exception as e:
            logger.critical(f"Schema bootstrap failed ({self.backend.value}): {e}")
            await self._close_quietly(handle)
            raise

        self._handle = handle
        logger.info(f"Connection manager ready ({self.backend.value})")

    async def shutdown(self) -> None:
        """Close the current handle. Safe to call twice or before initialize."""
        handle, self._handle = self._handle, None
        if handle is None:
            return
        await self._driver.close(handle)
        logger.info(f"Connection to {self.backend.value} closed")

    # -------------------------------------------------------------------------
    # ACCESS
    # -------------------------------------------------------------------------

    async def acquire(self) -> ConnectionHandle:
        """
        Return the live handle, reconnecting first if it has gone stale.

        Raises:
            BackendError: The reconnect attempt failed, or there is no
                handle at all to fall back on
        """
        handle = self._handle
        if handle is not None and handle.is_open:
            return handle

        in_flight = self._reconnecting
        if in_flight is None:
            return await self._reconnect(handle)

        try:
            await asyncio.wait_for(in_flight.wait(), timeout=self._wait_seconds)
        except asyncio.TimeoutError:
            logger.warning("Timed out waiting for reconnect; returning current handle")

        current = self._handle
        if current is None:
            raise DatabaseConnectionError(details={"backend": self.backend.value})
        return current

    def invalidate(self, handle: Optional[ConnectionHandle] = None) -> None:
        """
        Mark a handle stale so the next acquire reconnects.

        Passing the handle a failed query used avoids invalidating a
        replacement created in the meantime.
        """
        target = handle or self._handle
        if target is None or target is not self._handle:
            return
        if not target.invalidated:
            logger.warning(f"Connection to {self.backend.value} invalidated")
        target.invalidated = True

    # -------------------------------------------------------------------------
    # INTERNALS
    # -------------------------------------------------------------------------

    async def _reconnect(self, stale: Optional[ConnectionHandle]) -> ConnectionHandle:
        event = asyncio.Event()
        self._reconnecting = event
        logger.info(f"Reconnecting to {self.backend.value}")
        try:
            if stale is not None:
                await self._close_quietly(stale)
            try:
                handle = await self._driver.connect()
            except Exception as e:
                self._handle = None
                logger.error(f"Reconnect to {self.backend.value} failed: {e}")
                raise
            self._handle = handle
            logger.info(f"Reconnected to {self.backend.value}")
            return handle
        finally:
            self._reconnecting = None
            event.set()

    async def _close_quietly(self, handle: ConnectionHandle) -> None:
        try:
            await self._driver.close(handle)
        except Exception as e:
            logger.warning(f"Ignoring error while closing stale connection: {e}")
