"""Immutable state snapshot consumed by the selectors.

The controller part is owned by the external quote fetcher, the market part
by the rate and gas services. Only the UI part is written from here, by the
user interaction path.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from bridgex.config import Settings
from bridgex.quotes.gas import GasFeeEstimates
from bridgex.quotes.rates import ExchangeRateSet
from bridgex.quotes.types import (
    EnrichedQuote,
    QuoteRequest,
    QuoteResponse,
    RequestStatus,
    SortOrder,
    Token,
)


@dataclass(frozen=True)
class BridgeFeatureFlags:
    """Remote feature flags for the bridge."""

    max_refresh_count: int = 5
    refresh_rate_ms: int = 30000
    src_network_allowlist: tuple[int, ...] = ()
    dest_network_allowlist: tuple[int, ...] = ()


@dataclass(frozen=True)
class BridgeControllerState:
    """Quote fetch cycle as exposed by the quote fetcher."""

    quotes: tuple[QuoteResponse, ...] = ()
    quote_request: QuoteRequest = field(default_factory=QuoteRequest)
    quotes_last_fetched_ms: Optional[int] = None
    quotes_loading_status: Optional[RequestStatus] = None
    quote_fetch_error: Optional[str] = None
    quotes_refresh_count: int = 0
    quotes_initial_load_time_ms: Optional[int] = None
    feature_flags: BridgeFeatureFlags = field(default_factory=BridgeFeatureFlags)


@dataclass(frozen=True)
class BridgeUiState:
    """User selections on the bridge form."""

    to_chain_id: Optional[int] = None
    from_token: Optional[Token] = None
    to_token: Optional[Token] = None
    from_token_input_value: Optional[str] = None
    from_token_exchange_rate: Optional[Decimal] = None  # in display currency
    to_token_exchange_rate: Optional[Decimal] = None  # in display currency
    sort_order: SortOrder = SortOrder.COST_ASC
    selected_quote: Optional[EnrichedQuote] = None
    slippage: Optional[Decimal] = Decimal("0.5")


@dataclass(frozen=True)
class MarketState:
    exchange_rates: ExchangeRateSet = field(default_factory=ExchangeRateSet)
    gas_fee_estimates: Optional[GasFeeEstimates] = None


@dataclass(frozen=True)
class NetworkState:
    """Wallet network configuration."""

    configured_chain_ids: tuple[int, ...] = ()
    active_chain_id: Optional[int] = None
    rpc_url: Optional[str] = None


@dataclass(frozen=True)
class RankingConfig:
    """Thresholds for the recommendation heuristic and return warnings."""

    return_tolerance: Decimal = Decimal("0.8")
    max_eta_seconds: int = 3600
    preferred_gas_estimate: str = "medium"

    @classmethod
    def from_settings(cls, settings: Settings) -> "RankingConfig":
        return cls(
            return_tolerance=settings.return_tolerance,
            max_eta_seconds=settings.max_eta_seconds,
            preferred_gas_estimate=settings.preferred_gas_estimate,
        )


@dataclass(frozen=True)
class BridgeAppState:
    """Complete snapshot the derived values are computed from."""

    controller: BridgeControllerState = field(default_factory=BridgeControllerState)
    ui: BridgeUiState = field(default_factory=BridgeUiState)
    market: MarketState = field(default_factory=MarketState)
    network: NetworkState = field(default_factory=NetworkState)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    is_bridge_enabled: bool = True
