"""Quote request construction and refresh cadence helpers."""

import re
from decimal import Decimal, InvalidOperation, Overflow
from typing import Optional, Sequence

from bridgex.quotes.types import QuoteRequest, Token

_POSITIVE_INTEGER = re.compile(r"^[1-9]\d*$")


def calc_token_value(value: str, decimals: int) -> str:
    """Scale a user-entered token amount up to raw integer units.

    Empty or incomplete input ("" or "."), unparsable text, negative amounts
    and non-finite values ("nan", "inf") all count as zero.
    """
    if value in ("", "."):
        value = "0"
    try:
        amount = Decimal(value)
        if not amount.is_finite() or amount < 0:
            amount = Decimal(0)
        scaled = amount.scaleb(int(decimals))
    except (InvalidOperation, Overflow):
        scaled = Decimal(0)
    return f"{int(scaled):d}"


def is_test_fork_rpc(rpc_url: Optional[str], markers: Sequence[str]) -> bool:
    """Check whether the wallet points at a test fork RPC."""
    if not rpc_url:
        return False
    url = rpc_url.lower()
    return any(marker in url for marker in markers)


def build_quote_params(
    from_token: Optional[Token],
    to_token: Optional[Token],
    from_chain_id: Optional[int],
    to_chain_id: Optional[int],
    from_amount: Optional[str],
    slippage: Optional[Decimal],
    rpc_url: Optional[str] = None,
    fork_markers: Sequence[str] = ("tenderly",),
    wallet_address: Optional[str] = None,
) -> QuoteRequest:
    """Build the quote request for the current form inputs.

    Balances on a test fork differ from the real chain, so such requests
    carry the insufficient balance override.
    """
    src_token_amount = None
    if from_amount is not None and from_token is not None and from_token.decimals:
        src_token_amount = calc_token_value(from_amount, from_token.decimals)

    return QuoteRequest(
        src_chain_id=from_chain_id,
        dest_chain_id=to_chain_id,
        src_token_address=from_token.address if from_token else None,
        dest_token_address=to_token.address if to_token else None,
        src_token_amount=src_token_amount,
        slippage=slippage,
        insufficient_bal=is_test_fork_rpc(rpc_url, fork_markers),
        wallet_address=wallet_address,
    )


def is_valid_quote_request(request: QuoteRequest, require_amount: bool = True) -> bool:
    """Check a request has everything the quote fetcher needs."""
    string_fields = [request.src_token_address, request.dest_token_address]
    if require_amount:
        string_fields.append(request.src_token_amount)
    if any(value is None or value == "" for value in string_fields):
        return False

    number_fields = [request.src_chain_id, request.dest_chain_id, request.slippage]
    if any(value is None for value in number_fields):
        return False

    if require_amount:
        return bool(_POSITIVE_INTEGER.match(request.src_token_amount or ""))
    return True


def is_quote_going_to_refresh(
    quotes_refresh_count: int,
    max_refresh_count: int,
    insufficient_bal: bool,
) -> bool:
    """Whether the fetcher will poll again for the current request."""
    if insufficient_bal:
        return False
    return quotes_refresh_count < max_refresh_count


def milliseconds_until_next_refresh(
    quotes_last_fetched_ms: Optional[int],
    refresh_rate_ms: int,
    now_ms: int,
) -> int:
    """Time left until the next scheduled refresh, for progress display."""
    if not quotes_last_fetched_ms:
        return refresh_rate_ms
    return max(0, refresh_rate_ms - (now_ms - quotes_last_fetched_ms))
