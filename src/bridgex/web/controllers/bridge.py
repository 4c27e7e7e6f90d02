"""Bridge quote API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from bridgex.errors import InvalidBridgeInputError, QuoteNotFoundError
from bridgex.web.contracts.form import BridgeFormRequest, BridgeFormResponse
from bridgex.web.contracts.quotes import (
    BridgeQuotesResponse,
    QuoteModel,
    SelectQuoteRequest,
    SortOrderRequest,
)
from bridgex.web.contracts.validation import ValidationRequest, ValidationResponse
from bridgex.web.services.bridge_service import BridgeQuoteService

router = APIRouter(prefix="/bridge", tags=["bridge"])


def get_bridge_service(request: Request) -> BridgeQuoteService:
    return request.app.state.bridge_service


@router.get("/form", response_model=BridgeFormResponse)
async def get_form(
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> BridgeFormResponse:
    """Get the current form inputs."""
    return service.get_form()


@router.put("/form", response_model=BridgeFormResponse)
async def update_form(
    request: BridgeFormRequest,
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> BridgeFormResponse:
    """Update chains, tokens, amount or slippage.

    Changes that alter the quote request are forwarded to the quote fetcher
    after the debounce window.
    """
    try:
        return service.update_form(request)
    except InvalidBridgeInputError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/quotes", response_model=BridgeQuotesResponse)
async def get_quotes(
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> BridgeQuotesResponse:
    """Get ranked quotes for the current request.

    Includes the recommended and active quote and the refresh status.
    """
    return service.get_quotes()


@router.put("/sort-order", response_model=BridgeQuotesResponse)
async def set_sort_order(
    request: SortOrderRequest,
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> BridgeQuotesResponse:
    """Change the quote ordering and return the re-ranked quotes."""
    return service.set_sort_order(request.sort_order)


@router.put("/selected-quote", response_model=QuoteModel)
async def select_quote(
    request: SelectQuoteRequest,
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> QuoteModel:
    """Pin a quote so it stays active across refreshes."""
    try:
        return service.select_quote(request.identifier, request.request_id)
    except QuoteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/selected-quote")
async def clear_selected_quote(
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> dict:
    """Drop the pinned quote so the recommendation becomes active."""
    service.clear_selection()
    return {"success": True}


@router.post("/validation", response_model=ValidationResponse)
async def validate(
    request: ValidationRequest,
    service: BridgeQuoteService = Depends(get_bridge_service),
) -> ValidationResponse:
    """Validate the active quote against the given balances."""
    return service.validate(request)
