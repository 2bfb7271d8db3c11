# =============================================================================
# QUOTE API - QUOTE SCHEMAS
# =============================================================================
# File: quotes/schemas.py
# Description: Pydantic models for quote submission and read-back
#              Request bodies use the camelCase names the form posts
# =============================================================================

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QuoteCreate(BaseModel):
    """
    Schema for a quote form submission.

    Validation Rules:
        - company, tagName: required, non-empty
        - everything else optional; empty strings are treated as absent
        - orderTypes: list of strings or a single pre-joined string
        - measurements: any JSON structure
    """
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    company: str = Field(..., min_length=1, max_length=255)
    tag_name: str = Field(..., alias="tagName", min_length=1, max_length=255)
    po_number: Optional[str] = Field(None, alias="poNumber", max_length=255)
    delivery: Optional[str] = Field(None, max_length=50)
    size_shape: Optional[str] = Field(None, alias="sizeShape", max_length=255)
    order_types: Optional[Union[List[str], str]] = Field(None, alias="orderTypes")
    grid_size: Optional[str] = Field(None, alias="gridSize", max_length=50)
    colour: Optional[str] = Field(None, max_length=50)
    comments: Optional[str] = None
    measurements: Optional[Any] = None

    @field_validator(
        "po_number", "delivery", "size_shape", "order_types",
        "grid_size", "colour", "comments", "measurements",
        mode="before",
    )
    @classmethod
    def empty_is_absent(cls, v):
        """Blank optional fields are stored as NULL."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class QuoteSummary(BaseModel):
    """Row shape of the quote listing."""
    id: Union[int, str]
    company: str
    tag_name: str
    grid_size: Optional[str] = None
    colour: Optional[str] = None
    created_at: Optional[Union[datetime, str]] = None


class QuoteDetail(QuoteSummary):
    """Full stored quote with order types and measurements decoded."""
    po_number: Optional[str] = None
    delivery: Optional[str] = None
    size_shape: Optional[str] = None
    order_types: List[str] = Field(default_factory=list)
    comments: Optional[str] = None
    measurements: Optional[Any] = None


class QuoteCreatedResponse(BaseModel):
    message: str
    id: Union[int, str]


class QuoteListResponse(BaseModel):
    quotes: List[QuoteSummary]


class QuoteResponse(BaseModel):
    quote: QuoteDetail
