# =============================================================================
# QUOTES MODULE INITIALIZATION
# =============================================================================
# File: quotes/__init__.py
# Description: Quote form storage
# =============================================================================

from quote_api.quotes.schemas import (
    QuoteCreate,
    QuoteCreatedResponse,
    QuoteDetail,
    QuoteListResponse,
    QuoteResponse,
    QuoteSummary,
)
from quote_api.quotes.repository import QuoteRepository
from quote_api.quotes.service import QuoteService

__all__ = [
    "QuoteCreate",
    "QuoteSummary",
    "QuoteDetail",
    "QuoteCreatedResponse",
    "QuoteListResponse",
    "QuoteResponse",
    "QuoteRepository",
    "QuoteService",
]
