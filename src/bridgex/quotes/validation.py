"""Validation predicates gating quote submission.

Predicates are pure functions of a live balance and the current quote state.
Any missing input makes a predicate return False, so a loading gap never
raises a warning on its own.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from bridgex.quotes.types import EnrichedQuote, Token

BalancePredicate = Callable[[Optional[Decimal]], bool]


@dataclass(frozen=True)
class ValidationErrors:
    """Validation outcomes for the active quote."""

    is_no_quotes_available: bool
    is_insufficient_gas_balance: BalancePredicate
    is_insufficient_gas_for_quote: BalancePredicate
    is_insufficient_balance: BalancePredicate
    is_estimated_return_low: bool


def is_no_quotes_available(
    active_quote: Optional[EnrichedQuote],
    quotes_last_fetched_ms: Optional[int],
    is_loading: bool,
) -> bool:
    """Quotes were fetched, nothing came back, and no fetch is in flight."""
    return active_quote is None and bool(quotes_last_fetched_ms) and not is_loading


def is_insufficient_gas_balance(
    balance: Optional[Decimal],
    active_quote: Optional[EnrichedQuote],
    validated_src_amount: Optional[Decimal],
    from_token: Optional[Token],
) -> bool:
    """Check native balance before quotes arrive.

    Native source: sending the whole balance leaves nothing for gas.
    Token source: no native asset at all.
    """
    if balance is None or active_quote is not None:
        return False
    if validated_src_amount is None or from_token is None:
        return False
    if from_token.is_native:
        return balance == validated_src_amount
    return balance <= 0


def is_insufficient_gas_for_quote(
    balance: Optional[Decimal],
    active_quote: Optional[EnrichedQuote],
    from_token: Optional[Token],
    from_token_input_value: Optional[str],
) -> bool:
    """Check native balance covers the active quote's network fee."""
    if balance is None or active_quote is None or from_token is None:
        return False
    if not from_token_input_value:
        return False

    network_fee = active_quote.total_network_fee.amount
    if network_fee is None:
        return False
    if from_token.is_native:
        sent = active_quote.sent_amount.amount
        if sent is None:
            return False
        return balance - network_fee - sent <= 0
    return balance <= network_fee


def is_insufficient_balance(
    balance: Optional[Decimal],
    validated_src_amount: Optional[Decimal],
) -> bool:
    """Source token balance is below the requested amount."""
    if validated_src_amount is None or balance is None:
        return False
    return balance < validated_src_amount


def is_estimated_return_low(
    active_quote: Optional[EnrichedQuote],
    from_token_input_value: Optional[str],
    return_tolerance: Decimal,
) -> bool:
    """Adjusted return is below the tolerated fraction of the value sent."""
    if active_quote is None or not from_token_input_value:
        return False
    sent_value = active_quote.sent_amount.value_in_currency
    return_value = active_quote.adjusted_return.value_in_currency
    if sent_value is None or return_value is None:
        return False
    return return_value < return_tolerance * sent_value


def get_validation_errors(
    active_quote: Optional[EnrichedQuote],
    quotes_last_fetched_ms: Optional[int],
    is_loading: bool,
    validated_src_amount: Optional[Decimal],
    from_token: Optional[Token],
    from_token_input_value: Optional[str],
    return_tolerance: Decimal,
) -> ValidationErrors:
    """Bundle the predicates over the current quote state.

    Balance-dependent checks are returned as closures so callers can pass
    the latest balance without rebuilding the bundle.
    """
    return ValidationErrors(
        is_no_quotes_available=is_no_quotes_available(
            active_quote, quotes_last_fetched_ms, is_loading
        ),
        is_insufficient_gas_balance=lambda balance=None: is_insufficient_gas_balance(
            balance, active_quote, validated_src_amount, from_token
        ),
        is_insufficient_gas_for_quote=lambda balance=None: is_insufficient_gas_for_quote(
            balance, active_quote, from_token, from_token_input_value
        ),
        is_insufficient_balance=lambda balance=None: is_insufficient_balance(
            balance, validated_src_amount
        ),
        is_estimated_return_low=is_estimated_return_low(
            active_quote, from_token_input_value, return_tolerance
        ),
    )
