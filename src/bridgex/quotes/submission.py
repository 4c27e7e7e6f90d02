"""Submission gate and call-to-action state for the active quote."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from bridgex.quotes.types import EnrichedQuote, Token
from bridgex.quotes.validation import ValidationErrors


class CtaState(str, Enum):
    """What the submit button should offer."""

    LOADING = "loading"
    NO_QUOTES = "no_quotes"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INSUFFICIENT_GAS = "insufficient_gas"
    SELECT_TOKEN_AND_AMOUNT = "select_token_and_amount"
    ENTER_AMOUNT = "enter_amount"
    SUBMIT = "submit"
    SELECT_TOKEN = "select_token"


def is_tx_submittable(
    validation: ValidationErrors,
    active_quote: Optional[EnrichedQuote],
    from_token: Optional[Token],
    to_token: Optional[Token],
    from_chain_id: Optional[int],
    to_chain_id: Optional[int],
    from_token_input_value: Optional[str],
    balance: Optional[Decimal],
    native_balance: Optional[Decimal],
) -> bool:
    """Check every submission precondition holds.

    Unlike the predicates, an unknown balance blocks submission here.
    """
    if not (from_token and to_token and from_chain_id and to_chain_id):
        return False
    if not from_token_input_value or active_quote is None:
        return False
    if balance is None or native_balance is None:
        return False
    return not (
        validation.is_insufficient_balance(balance)
        or validation.is_insufficient_gas_balance(native_balance)
        or validation.is_insufficient_gas_for_quote(native_balance)
    )


def cta_state(
    validation: ValidationErrors,
    is_loading: bool,
    is_submittable: bool,
    from_token_input_value: Optional[str],
    to_token: Optional[Token],
    balance: Optional[Decimal],
    native_balance: Optional[Decimal],
) -> CtaState:
    """Resolve the call-to-action state, most blocking reason first."""
    if is_loading and not is_submittable:
        return CtaState.LOADING
    if validation.is_no_quotes_available:
        return CtaState.NO_QUOTES
    if validation.is_insufficient_balance(balance):
        return CtaState.INSUFFICIENT_BALANCE
    if validation.is_insufficient_gas_for_quote(native_balance):
        return CtaState.INSUFFICIENT_GAS
    if not from_token_input_value:
        if to_token is None:
            return CtaState.SELECT_TOKEN_AND_AMOUNT
        return CtaState.ENTER_AMOUNT
    if is_submittable:
        return CtaState.SUBMIT
    return CtaState.SELECT_TOKEN
