"""Token exchange rate resolution.

Rates are expressed relative to the chain's native asset and converted to the
display currency (and USD) with per-chain scalars. An unknown rate is None,
never zero, so callers can tell "unknown" apart from "worthless".
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional

from bridgex.chains import is_native_address

logger = logging.getLogger(__name__)

# chain_id -> lowercase token address -> price in the chain's native asset
MarketData = Mapping[int, Mapping[str, Decimal]]


@dataclass(frozen=True)
class ExchangeRates:
    """Token to currency rates."""

    value_in_currency: Optional[Decimal] = None
    usd: Optional[Decimal] = None


@dataclass(frozen=True)
class ExchangeRateSet:
    """Snapshot of market prices and native asset conversion rates."""

    market_data: MarketData = field(default_factory=dict)
    native_to_currency: Mapping[int, Decimal] = field(default_factory=dict)
    native_to_usd: Mapping[int, Decimal] = field(default_factory=dict)

    def currency_rate(self, chain_id: Optional[int]) -> Optional[Decimal]:
        if chain_id is None:
            return None
        return self.native_to_currency.get(chain_id)

    def usd_rate(self, chain_id: Optional[int]) -> Optional[Decimal]:
        if chain_id is None:
            return None
        return self.native_to_usd.get(chain_id)


def _known(value: Optional[Decimal]) -> bool:
    return value is not None and value != 0


def exchange_rate_from_market_data(
    chain_id: int,
    token_address: str,
    market_data: Optional[MarketData],
) -> Optional[Decimal]:
    """Get a token's price in native asset from market data.

    The native asset is always worth exactly one unit of itself.
    """
    if is_native_address(token_address):
        return Decimal(1)
    if not market_data:
        return None
    price = market_data.get(chain_id, {}).get(token_address.lower())
    return price if _known(price) else None


def token_price_in_native_asset(
    token_exchange_rate: Optional[Decimal],
    native_to_currency_rate: Optional[Decimal],
) -> Optional[Decimal]:
    """Recover a native-denominated price from a currency-denominated one."""
    if _known(token_exchange_rate) and _known(native_to_currency_rate):
        return token_exchange_rate / native_to_currency_rate
    return None


def resolve_token_to_native_rate(
    chain_id: int,
    token_address: str,
    rate_set: ExchangeRateSet,
    token_exchange_rate: Optional[Decimal] = None,
) -> Optional[Decimal]:
    """Resolve a token's rate in native asset.

    Market data wins; otherwise the fetched currency rate of the token is
    converted back through the native asset's currency rate.

    Args:
        chain_id: Chain the token lives on
        token_address: Token contract address (or native sentinel)
        rate_set: Current exchange rate snapshot
        token_exchange_rate: Token price in display currency, if fetched

    Returns:
        Rate in native asset, or None when unknown
    """
    rate = exchange_rate_from_market_data(chain_id, token_address, rate_set.market_data)
    if rate is not None:
        return rate
    rate = token_price_in_native_asset(token_exchange_rate, rate_set.currency_rate(chain_id))
    if rate is None:
        logger.debug(f"No exchange rate for {token_address} on chain {chain_id}")
    return rate


def exchange_rates_from_native_and_currency_rates(
    token_to_native_rate: Optional[Decimal] = None,
    native_to_currency_rate: Optional[Decimal] = None,
    native_to_usd_rate: Optional[Decimal] = None,
) -> ExchangeRates:
    """Compose a native-denominated rate with native to currency/USD scalars."""
    if not _known(token_to_native_rate):
        return ExchangeRates()
    return ExchangeRates(
        value_in_currency=(
            token_to_native_rate * native_to_currency_rate
            if _known(native_to_currency_rate)
            else None
        ),
        usd=(
            token_to_native_rate * native_to_usd_rate
            if _known(native_to_usd_rate)
            else None
        ),
    )
