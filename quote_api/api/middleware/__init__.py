# =============================================================================
# MIDDLEWARE MODULE INITIALIZATION
# =============================================================================
# File: api/middleware/__init__.py
# Description: Middleware module exports
# =============================================================================

from quote_api.api.middleware.request_context import (
    LoggingMiddleware,
    RequestIDMiddleware,
    client_ip,
)

__all__ = [
    "RequestIDMiddleware",
    "LoggingMiddleware",
    "client_ip",
]
