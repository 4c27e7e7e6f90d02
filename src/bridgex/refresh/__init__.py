"""Quote request debouncing and refresh cadence."""

from bridgex.refresh.debounce import Debouncer
from bridgex.refresh.request import (
    build_quote_params,
    calc_token_value,
    is_quote_going_to_refresh,
    is_valid_quote_request,
    milliseconds_until_next_refresh,
)

__all__ = [
    "Debouncer",
    "build_quote_params",
    "calc_token_value",
    "is_quote_going_to_refresh",
    "is_valid_quote_request",
    "milliseconds_until_next_refresh",
]
