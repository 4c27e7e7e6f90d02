"""Keeps a user's quote selection across quote refreshes.

Refreshed quotes are new objects, so a previous selection is matched to its
counterpart in the new batch by route identity.
"""

import logging
from typing import Optional, Sequence, Union

from bridgex.quotes.types import EnrichedQuote, QuoteResponse

logger = logging.getLogger(__name__)

QuoteLike = Union[EnrichedQuote, QuoteResponse]


def quote_identifier(quote: QuoteLike) -> str:
    """Pseudo-unique id from aggregator, first bridge and step count.

    Distinct routes can share this id.
    """
    route = quote.quote
    first_bridge = route.bridges[0] if route.bridges else ""
    return f"{route.bridge_id}-{first_bridge}-{len(route.steps)}"


def route_signature(quote: QuoteLike) -> tuple:
    """Full route shape: every bridge and every step, without amounts."""
    route = quote.quote
    return (
        route.bridge_id,
        route.bridges,
        tuple((s.action, s.protocol, s.src_chain_id, s.dest_chain_id) for s in route.steps),
    )


def find_matching_quote(
    selected: EnrichedQuote,
    sorted_quotes: Sequence[EnrichedQuote],
) -> Optional[EnrichedQuote]:
    """Find the counterpart of a selection in a new batch.

    Among quotes sharing the identifier, the selection itself wins when it is
    still listed, then an exact route match, otherwise the first in sorted order.
    """
    identifier = quote_identifier(selected)
    matches = [q for q in sorted_quotes if quote_identifier(q) == identifier]
    if not matches:
        return None
    if len(matches) > 1:
        if selected in matches:
            return selected
        signature = route_signature(selected)
        for match in matches:
            if route_signature(match) == signature:
                return match
    return matches[0]


def track_selected_quote(
    quotes_refresh_count: int,
    selected_quote: Optional[EnrichedQuote],
    sorted_quotes: Sequence[EnrichedQuote],
) -> Optional[EnrichedQuote]:
    """Resolve the user's selection against the current batch.

    Before any refresh the selection is returned as-is. After a refresh the
    matching quote is returned, or None when the route disappeared.
    """
    if quotes_refresh_count <= 1:
        return selected_quote
    if selected_quote is None:
        return None

    match = find_matching_quote(selected_quote, sorted_quotes)
    if match is None:
        logger.info(
            f"Selected quote {quote_identifier(selected_quote)} not found after refresh "
            f"#{quotes_refresh_count}"
        )
    return match
