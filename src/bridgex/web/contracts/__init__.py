"""Request and response contracts for the web layer.

These Pydantic models define the API interface for the presentation layer.
"""

from bridgex.web.contracts.form import BridgeFormRequest, BridgeFormResponse, TokenSelection
from bridgex.web.contracts.quotes import (
    AmountModel,
    BridgeQuotesResponse,
    QuoteModel,
    SelectQuoteRequest,
    SortOrderRequest,
    TokenModel,
)
from bridgex.web.contracts.validation import ValidationRequest, ValidationResponse

__all__ = [
    # Form contracts
    "BridgeFormRequest",
    "BridgeFormResponse",
    "TokenSelection",
    # Quote contracts
    "AmountModel",
    "BridgeQuotesResponse",
    "QuoteModel",
    "SelectQuoteRequest",
    "SortOrderRequest",
    "TokenModel",
    # Validation contracts
    "ValidationRequest",
    "ValidationResponse",
]
