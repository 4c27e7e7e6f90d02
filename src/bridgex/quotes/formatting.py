"""Display formatting for quote metrics."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

CURRENCY_SYMBOLS = {
    "usd": "$",
    "eur": "€",
    "gbp": "£",
    "jpy": "¥",
}


def format_eta_in_minutes(estimated_processing_time_in_seconds: int) -> str:
    """Format an ETA as whole minutes, or "< 1" under a minute."""
    if estimated_processing_time_in_seconds < 60:
        return "< 1"
    minutes = Decimal(estimated_processing_time_in_seconds) / 60
    return str(minutes.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_currency_amount(
    amount: Optional[Decimal],
    currency: str,
    precision: int = 2,
) -> Optional[str]:
    """Format a currency value; None when the value is unknown."""
    if amount is None:
        return None
    quantized = amount.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
    symbol = CURRENCY_SYMBOLS.get(currency.lower())
    if symbol:
        return f"{symbol}{quantized:,}"
    return f"{quantized:,} {currency.upper()}"


def format_token_amount(
    amount: Optional[Decimal],
    symbol: str,
    precision: int = 2,
) -> Optional[str]:
    """Format a token amount with its ticker."""
    if amount is None:
        return None
    quantized = amount.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
    return f"{quantized:,} {symbol}"
