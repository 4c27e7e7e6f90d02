"""Derived bridge state.

Each selector is a memoized node over ``BridgeAppState``. Enrichment,
ranking, continuity and validation all read one snapshot, so a batch of
quotes is never mixed with rates or gas estimates from another snapshot.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from bridgex.chains import ALLOWED_BRIDGE_CHAIN_IDS, ChainConfig, get_chain, get_native_token
from bridgex.quotes.continuity import track_selected_quote
from bridgex.quotes.enricher import calc_token_amount, enrich_quotes
from bridgex.quotes.gas import get_bridge_fees_per_gas as fees_per_gas_from_estimates
from bridgex.quotes.ranker import recommended_quote, sort_quotes
from bridgex.quotes.rates import (
    ExchangeRates,
    exchange_rates_from_native_and_currency_rates,
    resolve_token_to_native_rate,
)
from bridgex.quotes.types import EnrichedQuote, RequestStatus, Token
from bridgex.quotes.validation import get_validation_errors as build_validation_errors
from bridgex.refresh.request import is_quote_going_to_refresh
from bridgex.state.memo import create_deep_equal_selector, create_selector
from bridgex.state.models import BridgeAppState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BridgeQuotes:
    """Ranked quotes and refresh status for the presentation layer."""

    sorted_quotes: tuple[EnrichedQuote, ...]
    recommended_quote: Optional[EnrichedQuote]
    active_quote: Optional[EnrichedQuote]
    quotes_last_fetched_ms: Optional[int]
    is_loading: bool
    quote_fetch_error: Optional[str]
    quotes_refresh_count: int
    quotes_initial_load_time_ms: Optional[int]
    is_quote_going_to_refresh: bool


# ======================
# Chains
# ======================

def _bridgeable_chains(configured_chain_ids: tuple[int, ...]) -> tuple[ChainConfig, ...]:
    seen = set()
    chains = []
    for chain_id in configured_chain_ids:
        if chain_id in seen or chain_id not in ALLOWED_BRIDGE_CHAIN_IDS:
            continue
        seen.add(chain_id)
        chains.append(get_chain(chain_id))
    return tuple(chains)


get_all_bridgeable_networks = create_deep_equal_selector(
    lambda state: state.network.configured_chain_ids,
    _bridgeable_chains,
)

get_from_chains = create_deep_equal_selector(
    get_all_bridgeable_networks,
    lambda state: state.controller.feature_flags.src_network_allowlist,
    lambda chains, allowlist: tuple(c for c in chains if c.chain_id in allowlist),
)

get_to_chains = create_deep_equal_selector(
    get_all_bridgeable_networks,
    lambda state: state.controller.feature_flags.dest_network_allowlist,
    lambda chains, allowlist: tuple(c for c in chains if c.chain_id in allowlist),
)


def get_from_chain(state: BridgeAppState) -> Optional[ChainConfig]:
    """The wallet's active network, when it is configured."""
    chain_id = state.network.active_chain_id
    if chain_id is None or chain_id not in state.network.configured_chain_ids:
        return None
    return get_chain(chain_id)


get_to_chain = create_deep_equal_selector(
    get_to_chains,
    lambda state: state.ui.to_chain_id,
    lambda chains, to_chain_id: next((c for c in chains if c.chain_id == to_chain_id), None),
)


def get_is_bridge_tx(state: BridgeAppState) -> bool:
    """True when source and destination are different chains."""
    from_chain = get_from_chain(state)
    to_chain = get_to_chain(state)
    if not state.is_bridge_enabled or to_chain is None or from_chain is None:
        return False
    return from_chain.chain_id != to_chain.chain_id


# ======================
# Tokens and rates
# ======================

def _from_token(token: Optional[Token], from_chain: Optional[ChainConfig]) -> Optional[Token]:
    if from_chain is None:
        return None
    if token is not None and token.address:
        return token
    return get_native_token(from_chain.chain_id)


get_from_token = create_selector(
    lambda state: state.ui.from_token,
    get_from_chain,
    _from_token,
)


def get_to_token(state: BridgeAppState) -> Optional[Token]:
    return state.ui.to_token


def get_from_amount(state: BridgeAppState) -> Optional[str]:
    return state.ui.from_token_input_value


def _conversion_rate(chain, token, rate_set, token_exchange_rate) -> ExchangeRates:
    if chain is None or token is None:
        return ExchangeRates()
    token_to_native = resolve_token_to_native_rate(
        chain.chain_id, token.address, rate_set, token_exchange_rate
    )
    return exchange_rates_from_native_and_currency_rates(
        token_to_native,
        rate_set.currency_rate(chain.chain_id),
        rate_set.usd_rate(chain.chain_id),
    )


get_from_token_conversion_rate = create_deep_equal_selector(
    get_from_chain,
    get_from_token,
    lambda state: state.market.exchange_rates,
    lambda state: state.ui.from_token_exchange_rate,
    _conversion_rate,
)

# A destination chain can be picked before the wallet tracks it, so the
# token's fetched currency rate backs up missing market data.
get_to_token_conversion_rate = create_deep_equal_selector(
    get_to_chain,
    get_to_token,
    lambda state: state.market.exchange_rates,
    lambda state: state.ui.to_token_exchange_rate,
    _conversion_rate,
)


def get_native_conversion_rate(state: BridgeAppState) -> Optional[Decimal]:
    """Source chain native asset price in display currency."""
    from_chain = get_from_chain(state)
    return state.market.exchange_rates.currency_rate(from_chain.chain_id if from_chain else None)


get_bridge_fees_per_gas = create_deep_equal_selector(
    lambda state: state.market.gas_fee_estimates,
    lambda state: state.ranking.preferred_gas_estimate,
    fees_per_gas_from_estimates,
)


# ======================
# Quotes
# ======================

get_quotes_with_metadata = create_deep_equal_selector(
    lambda state: state.controller.quotes,
    get_to_token_conversion_rate,
    get_from_token_conversion_rate,
    get_native_conversion_rate,
    get_bridge_fees_per_gas,
    lambda quotes, to_rate, from_rate, native_rate, fees_per_gas: tuple(
        enrich_quotes(
            quotes,
            to_rate.value_in_currency,
            from_rate.value_in_currency,
            native_rate,
            fees_per_gas,
        )
    ),
)

get_sorted_quotes = create_deep_equal_selector(
    get_quotes_with_metadata,
    lambda state: state.ui.sort_order,
    lambda quotes, sort_order: tuple(sort_quotes(quotes, sort_order)),
)

get_recommended_quote = create_deep_equal_selector(
    get_sorted_quotes,
    lambda state: state.ui.sort_order,
    lambda state: state.ranking,
    lambda quotes, sort_order, ranking: recommended_quote(
        quotes, sort_order, ranking.return_tolerance, ranking.max_eta_seconds
    ),
)

get_selected_quote = create_selector(
    lambda state: state.controller.quotes_refresh_count,
    lambda state: state.ui.selected_quote,
    get_sorted_quotes,
    track_selected_quote,
)


def _bridge_quotes(
    sorted_quotes,
    recommended,
    selected,
    quotes_last_fetched_ms,
    loading_status,
    quotes_refresh_count,
    quotes_initial_load_time_ms,
    quote_fetch_error,
    max_refresh_count,
    insufficient_bal,
) -> BridgeQuotes:
    return BridgeQuotes(
        sorted_quotes=sorted_quotes,
        recommended_quote=recommended,
        active_quote=selected if selected is not None else recommended,
        quotes_last_fetched_ms=quotes_last_fetched_ms,
        is_loading=loading_status == RequestStatus.LOADING,
        quote_fetch_error=quote_fetch_error,
        quotes_refresh_count=quotes_refresh_count,
        quotes_initial_load_time_ms=quotes_initial_load_time_ms,
        is_quote_going_to_refresh=is_quote_going_to_refresh(
            quotes_refresh_count, max_refresh_count, insufficient_bal
        ),
    )


get_bridge_quotes = create_selector(
    get_sorted_quotes,
    get_recommended_quote,
    get_selected_quote,
    lambda state: state.controller.quotes_last_fetched_ms,
    lambda state: state.controller.quotes_loading_status,
    lambda state: state.controller.quotes_refresh_count,
    lambda state: state.controller.quotes_initial_load_time_ms,
    lambda state: state.controller.quote_fetch_error,
    lambda state: state.controller.feature_flags.max_refresh_count,
    lambda state: state.controller.quote_request.insufficient_bal,
    _bridge_quotes,
)


# ======================
# Amounts and validation
# ======================

def _validated_src_amount(from_token: Optional[Token], src_token_amount: Optional[str]):
    if not src_token_amount or from_token is None or not from_token.decimals:
        return None
    return calc_token_amount(src_token_amount, from_token.decimals)


get_validated_src_amount = create_selector(
    get_from_token,
    lambda state: state.controller.quote_request.src_token_amount,
    _validated_src_amount,
)


def _from_amount_in_currency(from_token, from_chain, validated_src_amount, rates):
    if from_token is None or from_chain is None or validated_src_amount is None:
        return None
    if rates.value_in_currency is None:
        return None
    return validated_src_amount * rates.value_in_currency


get_from_amount_in_currency = create_selector(
    get_from_token,
    get_from_chain,
    get_validated_src_amount,
    get_from_token_conversion_rate,
    _from_amount_in_currency,
)


get_validation_errors = create_deep_equal_selector(
    get_bridge_quotes,
    get_validated_src_amount,
    get_from_token,
    get_from_amount,
    lambda state: state.ranking.return_tolerance,
    lambda bridge_quotes, validated_src_amount, from_token, from_amount, tolerance: (
        build_validation_errors(
            active_quote=bridge_quotes.active_quote,
            quotes_last_fetched_ms=bridge_quotes.quotes_last_fetched_ms,
            is_loading=bridge_quotes.is_loading,
            validated_src_amount=validated_src_amount,
            from_token=from_token,
            from_token_input_value=from_amount,
            return_tolerance=tolerance,
        )
    ),
)


ALL_SELECTORS = (
    get_all_bridgeable_networks,
    get_from_chains,
    get_to_chains,
    get_to_chain,
    get_from_token,
    get_from_token_conversion_rate,
    get_to_token_conversion_rate,
    get_bridge_fees_per_gas,
    get_quotes_with_metadata,
    get_sorted_quotes,
    get_recommended_quote,
    get_selected_quote,
    get_bridge_quotes,
    get_validated_src_amount,
    get_from_amount_in_currency,
    get_validation_errors,
)


def reset_selectors() -> None:
    """Drop every cached derivation."""
    for selector in ALL_SELECTORS:
        selector.reset()
