# =============================================================================
# QUOTE API - QUOTE ROUTES
# =============================================================================
# File: api/v1/quote_routes.py
# Description: Quote submission and listing endpoints (bearer token required)
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, status

from quote_api.auth.dependencies import CurrentToken, Queries
from quote_api.quotes.schemas import (
    QuoteCreate,
    QuoteCreatedResponse,
    QuoteListResponse,
    QuoteResponse,
)
from quote_api.quotes.service import QuoteService


router = APIRouter(tags=["Quotes"])


def get_quote_service(queries: Queries) -> QuoteService:
    return QuoteService(queries)


QuoteServiceDep = Annotated[QuoteService, Depends(get_quote_service)]


@router.post(
    "/quote",
    response_model=QuoteCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a quote",
)
async def create_quote(
    data: QuoteCreate,
    token: CurrentToken,
    quote_service: QuoteServiceDep,
) -> QuoteCreatedResponse:
    """
    Store a quote form submission.

    - **company**, **tagName**: required
    - **orderTypes**: list or comma-separated string
    - **measurements**: any JSON structure
    """
    quote_id = await quote_service.create(data)
    return QuoteCreatedResponse(message="Quote stored", id=quote_id)


@router.get(
    "/quotes",
    response_model=QuoteListResponse,
    summary="List recent quotes",
    description="Newest first, at most 200, summary columns only.",
)
async def list_quotes(
    token: CurrentToken,
    quote_service: QuoteServiceDep,
) -> QuoteListResponse:
    return QuoteListResponse(quotes=await quote_service.list_recent())


@router.get(
    "/quotes/{quote_id}",
    response_model=QuoteResponse,
    summary="Get one quote",
)
async def get_quote(
    quote_id: int,
    token: CurrentToken,
    quote_service: QuoteServiceDep,
) -> QuoteResponse:
    """Full quote with order types as a list and measurements decoded."""
    return QuoteResponse(quote=await quote_service.get(quote_id))
