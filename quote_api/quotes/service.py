# =============================================================================
# QUOTE API - QUOTE SERVICE
# =============================================================================
# File: quotes/service.py
# Description: Quote submission and retrieval
#              Serializes order types and measurements for storage
# =============================================================================

import json
import logging
from typing import Any, Dict, List, Optional, Union

from quote_api.core.exceptions import QuoteNotFoundError
from quote_api.db.queries import QueryFacade
from quote_api.quotes.repository import QuoteRepository
from quote_api.quotes.schemas import QuoteCreate, QuoteDetail, QuoteSummary


logger = logging.getLogger(__name__)

ORDER_TYPES_SEPARATOR = ","


# =============================================================================
# COLUMN CODECS
# =============================================================================

def encode_order_types(value: Optional[Union[List[str], str]]) -> Optional[str]:
    """Join a list of order types for storage; strings pass through."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    joined = ORDER_TYPES_SEPARATOR.join(value)
    return joined or None


def decode_order_types(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return value.split(ORDER_TYPES_SEPARATOR)


def encode_measurements(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value)


def decode_measurements(value: Optional[str]) -> Any:
    """Parse stored measurements; text that is not JSON is returned as-is."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except ValueError:
        return value


# =============================================================================
# SERVICE
# =============================================================================

class QuoteService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    QUOTE SERVICE                                         │
    │  Stores form submissions and reads them back                            │
    └─────────────────────────────────────────────────────────────────────────┘
    """

    def __init__(self, queries: QueryFacade):
        self._repo = QuoteRepository(queries)

    async def create(self, data: QuoteCreate) -> Any:
        values: Dict[str, Any] = {
            "company": data.company,
            "tag_name": data.tag_name,
            "po_number": data.po_number,
            "delivery": data.delivery,
            "size_shape": data.size_shape,
            "order_types": encode_order_types(data.order_types),
            "grid_size": data.grid_size,
            "colour": data.colour,
            "comments": data.comments,
            "measurements": encode_measurements(data.measurements),
        }
        quote_id = await self._repo.create(values)
        logger.info(f"Quote stored: id={quote_id} company={data.company}")
        return quote_id

    async def list_recent(self) -> List[QuoteSummary]:
        rows = await self._repo.list_recent()
        return [QuoteSummary.model_validate(row) for row in rows]

    async def get(self, quote_id: int) -> QuoteDetail:
        row = await self._repo.get_by_id(quote_id)
        if row is None:
            raise QuoteNotFoundError(quote_id)

        row = dict(row)
        row["order_types"] = decode_order_types(row.get("order_types"))
        row["measurements"] = decode_measurements(row.get("measurements"))
        return QuoteDetail.model_validate(row)
