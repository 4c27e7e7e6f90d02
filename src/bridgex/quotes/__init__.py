"""Quote ranking and validation engine.

- rates: token exchange rate resolution
- gas: gas fee estimates
- enricher: currency metrics for raw quotes
- ranker: ordering and recommendation
- continuity: selection tracking across refreshes
- validation / submission: predicates gating submission
"""

from bridgex.quotes.continuity import quote_identifier, track_selected_quote
from bridgex.quotes.enricher import enrich_quote, enrich_quotes
from bridgex.quotes.ranker import recommended_quote, sort_quotes
from bridgex.quotes.types import (
    EnrichedQuote,
    Quote,
    QuoteRequest,
    QuoteResponse,
    SortOrder,
    Token,
)
from bridgex.quotes.validation import ValidationErrors, get_validation_errors

__all__ = [
    # Types
    "Token",
    "Quote",
    "QuoteResponse",
    "QuoteRequest",
    "EnrichedQuote",
    "SortOrder",
    "ValidationErrors",
    # Pipeline
    "enrich_quote",
    "enrich_quotes",
    "sort_quotes",
    "recommended_quote",
    "quote_identifier",
    "track_selected_quote",
    "get_validation_errors",
]
