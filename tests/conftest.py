"""Pytest configuration and fixtures."""

import os
from decimal import Decimal

import pytest

# Set test environment
os.environ["BRIDGEX_ENVIRONMENT"] = "test"
os.environ["BRIDGEX_DEBUG"] = "true"

from bridgex.chains import get_native_token
from bridgex.config import get_settings
from bridgex.quotes.gas import GasFeeEstimates, GasFeeTier
from bridgex.quotes.rates import ExchangeRateSet
from bridgex.quotes.types import (
    Cost,
    CurrencyValue,
    EnrichedQuote,
    FeeData,
    Quote,
    QuoteRequest,
    QuoteResponse,
    RequestStatus,
    Step,
    Token,
    TokenAmount,
    TxData,
)
from bridgex.state import selectors
from bridgex.state.models import (
    BridgeAppState,
    BridgeControllerState,
    BridgeFeatureFlags,
    BridgeUiState,
    MarketState,
    NetworkState,
)
from bridgex.state.store import BridgeStore

USDC_MAINNET_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDC_OPTIMISM_ADDRESS = "0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85"


@pytest.fixture(autouse=True)
def fresh_caches():
    """Clear memoized selectors and cached settings between tests."""
    selectors.reset_selectors()
    get_settings.cache_clear()
    yield
    selectors.reset_selectors()


@pytest.fixture
def usdc_mainnet() -> Token:
    return Token(chain_id=1, address=USDC_MAINNET_ADDRESS, symbol="USDC", decimals=6)


@pytest.fixture
def usdc_optimism() -> Token:
    return Token(chain_id=10, address=USDC_OPTIMISM_ADDRESS, symbol="USDC", decimals=6)


@pytest.fixture
def eth_mainnet() -> Token:
    return get_native_token(1)


@pytest.fixture
def make_quote_response(usdc_mainnet, usdc_optimism):
    """Factory for raw provider quotes.

    Defaults: 100 USDC + 0.5 USDC fee on mainnet for 99 USDC on Optimism,
    250k gas in total and 0.001 ETH of relayer value.
    """

    def factory(
        bridge_id="lifi",
        bridges=("across",),
        step_count=1,
        steps=None,
        src_asset=None,
        dest_asset=None,
        src_token_amount=100_000_000,
        dest_token_amount=99_000_000,
        fee_amount=500_000,
        eta=600,
        trade_value=10**15,
        trade_gas_limit=200_000,
        approval_gas_limit=50_000,
        l1_gas_fees_in_wei=None,
        request_id="req-1",
    ) -> QuoteResponse:
        src_asset = src_asset or usdc_mainnet
        dest_asset = dest_asset or usdc_optimism
        if steps is None:
            protocol = bridges[0] if bridges else bridge_id
            steps = tuple(
                Step(
                    action="bridge",
                    protocol=protocol,
                    src_chain_id=src_asset.chain_id,
                    dest_chain_id=dest_asset.chain_id,
                )
                for _ in range(step_count)
            )
        quote = Quote(
            request_id=request_id,
            bridge_id=bridge_id,
            bridges=tuple(bridges),
            steps=tuple(steps),
            src_asset=src_asset,
            dest_asset=dest_asset,
            src_chain_id=src_asset.chain_id,
            dest_chain_id=dest_asset.chain_id,
            src_token_amount=src_token_amount,
            dest_token_amount=dest_token_amount,
            fee_data=FeeData(amount=fee_amount, asset=src_asset),
        )
        return QuoteResponse(
            quote=quote,
            trade=TxData(value=trade_value, gas_limit=trade_gas_limit),
            estimated_processing_time_in_seconds=eta,
            approval=TxData(gas_limit=approval_gas_limit) if approval_gas_limit else None,
            l1_gas_fees_in_wei=l1_gas_fees_in_wei,
        )

    return factory


@pytest.fixture
def make_enriched_quote(make_quote_response):
    """Factory for enriched quotes with chosen metrics."""

    def factory(
        bridge_id="lifi",
        bridges=("across",),
        step_count=1,
        steps=None,
        eta=600,
        adjusted_return=Decimal("90"),
        sent_value=Decimal("100"),
        sent_amount=Decimal("100"),
        total_network_fee=Decimal("0.01"),
        src_asset=None,
        request_id="req-1",
    ) -> EnrichedQuote:
        response = make_quote_response(
            bridge_id=bridge_id,
            bridges=bridges,
            step_count=step_count,
            steps=steps,
            eta=eta,
            src_asset=src_asset,
            request_id=request_id,
        )
        cost = Cost()
        if adjusted_return is not None and sent_value is not None:
            lost = sent_value - adjusted_return
            cost = Cost(value_in_currency=lost, ratio=lost / sent_value if sent_value else None)
        return EnrichedQuote(
            response=response,
            to_token_amount=TokenAmount(amount=Decimal("99"), value_in_currency=None),
            sent_amount=TokenAmount(amount=sent_amount, value_in_currency=sent_value),
            gas_fee=TokenAmount(amount=total_network_fee),
            relayer_fee=TokenAmount(amount=Decimal(0)),
            total_network_fee=TokenAmount(amount=total_network_fee),
            adjusted_return=CurrencyValue(value_in_currency=adjusted_return),
            swap_rate=None,
            cost=cost,
        )

    return factory


@pytest.fixture
def gas_fee_estimates() -> GasFeeEstimates:
    return GasFeeEstimates(
        estimated_base_fee=Decimal("20"),
        low=GasFeeTier(Decimal("1"), Decimal("30")),
        medium=GasFeeTier(Decimal("2"), Decimal("40")),
        high=GasFeeTier(Decimal("3"), Decimal("50")),
    )


@pytest.fixture
def exchange_rates(usdc_mainnet, usdc_optimism) -> ExchangeRateSet:
    """ETH at 2000, USDC at 0.0005 ETH on both chains."""
    return ExchangeRateSet(
        market_data={
            1: {usdc_mainnet.address.lower(): Decimal("0.0005")},
            10: {usdc_optimism.address.lower(): Decimal("0.0005")},
        },
        native_to_currency={1: Decimal("2000"), 10: Decimal("2000")},
        native_to_usd={1: Decimal("2000"), 10: Decimal("2000")},
    )


@pytest.fixture
def lifi_response(make_quote_response):
    """Cheaper, slower route: 99 USDC out in 10 minutes."""
    return make_quote_response(bridge_id="lifi", bridges=("across",), eta=600)


@pytest.fixture
def socket_response(make_quote_response):
    """Pricier, faster route: 98 USDC out in 1 minute."""
    return make_quote_response(
        bridge_id="socket",
        bridges=("hop",),
        dest_token_amount=98_000_000,
        eta=60,
    )


@pytest.fixture
def bridge_state(
    usdc_mainnet,
    usdc_optimism,
    exchange_rates,
    gas_fee_estimates,
    lifi_response,
    socket_response,
) -> BridgeAppState:
    """Mainnet USDC to Optimism USDC with two fetched quotes."""
    return BridgeAppState(
        controller=BridgeControllerState(
            quotes=(lifi_response, socket_response),
            quote_request=QuoteRequest(
                src_chain_id=1,
                dest_chain_id=10,
                src_token_address=usdc_mainnet.address,
                dest_token_address=usdc_optimism.address,
                src_token_amount="100000000",
                slippage=Decimal("0.5"),
            ),
            quotes_last_fetched_ms=1_700_000_000_000,
            quotes_loading_status=RequestStatus.FETCHED,
            quotes_refresh_count=1,
            quotes_initial_load_time_ms=850,
            feature_flags=BridgeFeatureFlags(
                src_network_allowlist=(1, 10),
                dest_network_allowlist=(1, 10),
            ),
        ),
        ui=BridgeUiState(
            to_chain_id=10,
            from_token=usdc_mainnet,
            to_token=usdc_optimism,
            from_token_input_value="100",
        ),
        market=MarketState(
            exchange_rates=exchange_rates,
            gas_fee_estimates=gas_fee_estimates,
        ),
        network=NetworkState(configured_chain_ids=(1, 10), active_chain_id=1),
    )


@pytest.fixture
def store(bridge_state) -> BridgeStore:
    return BridgeStore(bridge_state)
