"""Quote ordering and recommendation."""

import logging
from decimal import Decimal
from typing import Optional, Sequence

from bridgex.quotes.types import EnrichedQuote, SortOrder

logger = logging.getLogger(__name__)


def _cost_key(quote: EnrichedQuote) -> tuple[bool, Decimal]:
    # Unknown costs go last
    value = quote.cost.value_in_currency
    return (value is None, value if value is not None else Decimal(0))


def sort_quotes(quotes: Sequence[EnrichedQuote], sort_order: SortOrder) -> list[EnrichedQuote]:
    """Sort quotes ascending by ETA or by cost. Ties keep batch order."""
    if sort_order == SortOrder.ETA_ASC:
        return sorted(quotes, key=lambda q: q.estimated_processing_time_in_seconds)
    return sorted(quotes, key=_cost_key)


def best_return_value(quotes: Sequence[EnrichedQuote]) -> Optional[Decimal]:
    """Highest known adjusted return across the batch."""
    values = [
        q.adjusted_return.value_in_currency
        for q in quotes
        if q.adjusted_return.value_in_currency is not None
    ]
    return max(values) if values else None


def is_return_reasonable(
    adjusted_return: Optional[Decimal],
    best_value: Optional[Decimal],
    return_tolerance: Decimal,
) -> bool:
    """Check a quote keeps enough of the best available return.

    A quote without a known return cannot be excluded, and neither can any
    quote when no positive best return exists to compare against.
    """
    if adjusted_return is None or best_value is None or best_value <= 0:
        return True
    return adjusted_return / best_value >= return_tolerance


def recommended_quote(
    sorted_quotes: Sequence[EnrichedQuote],
    sort_order: SortOrder,
    return_tolerance: Decimal,
    max_eta_seconds: int,
) -> Optional[EnrichedQuote]:
    """Pick the best quote on the preferred axis that is reasonable on the other.

    With ETA ordering the fastest quote whose return is within tolerance of
    the best wins; with cost ordering the cheapest quote that arrives before
    the ETA ceiling wins. Falls back to the head of the list.
    """
    if not sorted_quotes:
        return None

    if sort_order == SortOrder.ETA_ASC:
        best_value = best_return_value(sorted_quotes)
        candidate = next(
            (
                q
                for q in sorted_quotes
                if is_return_reasonable(
                    q.adjusted_return.value_in_currency, best_value, return_tolerance
                )
            ),
            None,
        )
    else:
        candidate = next(
            (
                q
                for q in sorted_quotes
                if q.estimated_processing_time_in_seconds < max_eta_seconds
            ),
            None,
        )

    if candidate is None:
        logger.debug(f"No quote satisfies the {sort_order.value} heuristic, using first quote")
        candidate = sorted_quotes[0]

    logger.debug(
        f"Recommended quote: {candidate.bridge_id} "
        f"(eta: {candidate.estimated_processing_time_in_seconds}s, "
        f"adjusted return: {candidate.adjusted_return.value_in_currency})"
    )
    return candidate
