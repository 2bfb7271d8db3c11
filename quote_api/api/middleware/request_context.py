# =============================================================================
# QUOTE API - REQUEST CONTEXT MIDDLEWARE
# =============================================================================
# File: api/middleware/request_context.py
# Description: Request ID propagation and access logging
# =============================================================================

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Probes hit these constantly; logged at DEBUG only
QUIET_PATHS = frozenset({"/api/health", "/api/health/ready"})


def client_ip(request: Request) -> str:
    """Client address, honouring the proxy headers App Service sets."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    REQUEST ID MIDDLEWARE                                 │
    │  Reuses the caller's X-Request-ID or mints one, echoes it back          │
    └─────────────────────────────────────────────────────────────────────────┘
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    LOGGING MIDDLEWARE                                    │
    │  One access-log line per request with status and duration               │
    └─────────────────────────────────────────────────────────────────────────┘
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        start_time = time.perf_counter()

        method = request.method
        path = request.url.path
        ip = client_ip(request)
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.error(
                f"{method} {path} - ERROR - {duration_ms}ms - "
                f"IP: {ip} - RequestID: {request_id} - {e}"
            )
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        level = logging.DEBUG if path in QUIET_PATHS else logging.INFO
        logger.log(
            level,
            f"{method} {path} - {response.status_code} - {duration_ms}ms - "
            f"IP: {ip} - RequestID: {request_id}",
        )
        return response
