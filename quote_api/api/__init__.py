# =============================================================================
# API MODULE INITIALIZATION
# =============================================================================
# File: api/__init__.py
# Description: API module exports
# =============================================================================

from quote_api.api.v1 import api_router
from quote_api.api.middleware import LoggingMiddleware, RequestIDMiddleware

__all__ = [
    "api_router",
    "RequestIDMiddleware",
    "LoggingMiddleware",
]
