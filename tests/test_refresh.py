"""Tests for quote request debouncing and refresh cadence."""

import asyncio
from decimal import Decimal

import pytest

from bridgex.config import Settings
from bridgex.quotes.types import QuoteRequest
from bridgex.refresh.controller import RefreshController
from bridgex.refresh.debounce import Debouncer
from bridgex.refresh.request import (
    build_quote_params,
    calc_token_value,
    is_quote_going_to_refresh,
    is_valid_quote_request,
    milliseconds_until_next_refresh,
)


class RecordingFetcher:
    """Quote fetcher double that records forwarded requests."""

    def __init__(self):
        self.calls: list[QuoteRequest] = []

    async def update_quote_request_params(self, params: QuoteRequest) -> None:
        self.calls.append(params)


class GatedFetcher(RecordingFetcher):
    """Quote fetcher double that stays in flight until released."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def update_quote_request_params(self, params: QuoteRequest) -> None:
        self.calls.append(params)
        await self.release.wait()


class FailingFetcher(RecordingFetcher):
    """Quote fetcher double whose provider is unavailable."""

    async def update_quote_request_params(self, params: QuoteRequest) -> None:
        self.calls.append(params)
        raise RuntimeError("provider down")


class TestRequestHelpers:
    """Tests for quote request construction."""

    def test_calc_token_value(self):
        assert calc_token_value("1.5", 6) == "1500000"
        assert calc_token_value("", 18) == "0"
        assert calc_token_value(".", 18) == "0"

    def test_calc_token_value_rejects_unusable_amounts(self):
        """Non-finite, negative and unparsable amounts count as zero."""
        assert calc_token_value("nan", 6) == "0"
        assert calc_token_value("inf", 6) == "0"
        assert calc_token_value("-inf", 6) == "0"
        assert calc_token_value("-1", 6) == "0"
        assert calc_token_value("abc", 6) == "0"

    def test_non_finite_amount_is_not_valid(self, usdc_mainnet, usdc_optimism):
        params = build_quote_params(usdc_mainnet, usdc_optimism, 1, 10, "nan", Decimal("0.5"))

        assert params.src_token_amount == "0"
        assert not is_valid_quote_request(params)

    def test_build_quote_params(self, usdc_mainnet, usdc_optimism):
        params = build_quote_params(
            usdc_mainnet, usdc_optimism, 1, 10, "100", Decimal("0.5")
        )

        assert params.src_token_amount == "100000000"
        assert params.src_token_address == usdc_mainnet.address
        assert params.dest_token_address == usdc_optimism.address
        assert params.insufficient_bal is False
        assert is_valid_quote_request(params)

    def test_test_fork_rpc_sets_insufficient_bal(self, usdc_mainnet, usdc_optimism):
        params = build_quote_params(
            usdc_mainnet,
            usdc_optimism,
            1,
            10,
            "100",
            Decimal("0.5"),
            rpc_url="https://rpc.tenderly.co/fork/abc",
        )
        assert params.insufficient_bal is True

    def test_zero_amount_is_not_valid(self, usdc_mainnet, usdc_optimism):
        params = build_quote_params(usdc_mainnet, usdc_optimism, 1, 10, "0", Decimal("0.5"))

        assert not is_valid_quote_request(params)
        assert is_valid_quote_request(params, require_amount=False)

    def test_missing_destination_is_not_valid(self, usdc_mainnet):
        params = build_quote_params(usdc_mainnet, None, 1, None, "1", Decimal("0.5"))
        assert not is_valid_quote_request(params, require_amount=False)


class TestRefreshCadence:
    """Tests for refresh status helpers."""

    def test_going_to_refresh(self):
        assert is_quote_going_to_refresh(2, 5, insufficient_bal=False)
        assert not is_quote_going_to_refresh(5, 5, insufficient_bal=False)

    def test_insufficient_bal_stops_refresh(self):
        assert not is_quote_going_to_refresh(0, 5, insufficient_bal=True)

    def test_milliseconds_until_next_refresh(self):
        assert milliseconds_until_next_refresh(None, 30000, 5000) == 30000
        assert milliseconds_until_next_refresh(1000, 30000, 11000) == 20000
        assert milliseconds_until_next_refresh(1000, 30000, 99000) == 0


class TestDebouncer:
    """Tests for the trailing-edge debouncer."""

    @pytest.mark.asyncio
    async def test_last_call_wins(self):
        calls = []
        debounced = Debouncer(calls.append, wait=0.05)

        for value in range(5):
            debounced(value)
        assert debounced.pending

        await asyncio.sleep(0.15)
        assert calls == [4]
        assert not debounced.pending

    @pytest.mark.asyncio
    async def test_cancel(self):
        calls = []
        debounced = Debouncer(calls.append, wait=0.05)

        debounced("dropped")
        debounced.cancel()
        await asyncio.sleep(0.1)

        assert calls == []

    @pytest.mark.asyncio
    async def test_flush_delivers_immediately(self):
        fetcher = RecordingFetcher()
        debounced = Debouncer(fetcher.update_quote_request_params, wait=10)

        debounced(QuoteRequest(src_chain_id=1))
        await debounced.flush()

        assert fetcher.calls == [QuoteRequest(src_chain_id=1)]

    @pytest.mark.asyncio
    async def test_failed_call_is_logged(self, caplog):
        async def failing(_value):
            raise RuntimeError("fetch failed")

        debounced = Debouncer(failing, wait=0)
        debounced(1)
        await debounced.flush()
        await asyncio.sleep(0)

        assert "fetch failed" in caplog.text

    @pytest.mark.asyncio
    async def test_synchronous_failure_is_logged(self, caplog):
        def failing(_value):
            raise ValueError("bad params")

        debounced = Debouncer(failing, wait=0)
        debounced(1)
        await debounced.flush()

        assert "bad params" in caplog.text
        assert not debounced.pending

    @pytest.mark.asyncio
    async def test_call_from_another_thread(self):
        calls = []
        debounced = Debouncer(calls.append, wait=0.01, loop=asyncio.get_running_loop())

        await asyncio.to_thread(debounced, "threaded")
        await asyncio.sleep(0.1)

        assert calls == ["threaded"]

    def test_call_without_loop_is_held(self):
        calls = []
        debounced = Debouncer(calls.append, wait=10)

        debounced("first")
        debounced("second")
        assert debounced.pending

        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(debounced.flush())
        finally:
            loop.close()

        assert calls == ["second"]
        assert not debounced.pending


class TestRefreshController:
    """Tests for forwarding form changes to the quote fetcher."""

    @pytest.mark.asyncio
    async def test_rapid_updates_forward_once(self, store):
        """Updates within the 300 ms window forward only the final parameters."""
        fetcher = RecordingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings())
        controller.start()

        for value in ("1", "1.5", "2", "25"):
            store.set_from_token_input_value(value)
        await asyncio.sleep(0.45)

        assert len(fetcher.calls) == 1
        assert fetcher.calls[0].src_token_amount == "25000000"
        controller.stop()

    @pytest.mark.asyncio
    async def test_forwarding_clears_selection(self, store, make_enriched_quote):
        fetcher = RecordingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings(), debounce_seconds=10)
        controller.start()

        store.set_selected_quote(make_enriched_quote())
        store.set_from_token_input_value("3")
        assert controller.has_pending_update

        await controller.flush()

        assert store.state.ui.selected_quote is None
        assert fetcher.calls[-1].src_token_amount == "3000000"
        controller.stop()

    @pytest.mark.asyncio
    async def test_unchanged_params_are_not_forwarded(self, store):
        """UI changes that do not affect the request are ignored."""
        fetcher = RecordingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings(), debounce_seconds=0)
        controller.start()

        store.set_from_token_input_value("4")
        await asyncio.sleep(0.01)
        await controller.join()
        store.set_selected_quote(None)
        store.update_ui(to_token_exchange_rate=Decimal("1"))
        await asyncio.sleep(0.01)
        await controller.join()

        assert len(fetcher.calls) == 1
        controller.stop()

    @pytest.mark.asyncio
    async def test_stop_drops_pending_update(self, store):
        fetcher = RecordingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings(), debounce_seconds=0.05)
        controller.start()

        store.set_from_token_input_value("5")
        controller.stop()
        await asyncio.sleep(0.1)

        assert fetcher.calls == []

    def test_milliseconds_until_next_refresh(self, store):
        controller = RefreshController(store, RecordingFetcher(), settings=Settings())
        last_fetched = store.state.controller.quotes_last_fetched_ms

        assert controller.milliseconds_until_next_refresh(last_fetched + 10000) == 20000

    @pytest.mark.asyncio
    async def test_selection_cleared_while_fetch_in_flight(self, store, make_enriched_quote):
        """The selection is gone as soon as new params go out, and a later choice survives."""
        fetcher = GatedFetcher()
        controller = RefreshController(store, fetcher, settings=Settings(), debounce_seconds=0)
        controller.start()

        store.set_selected_quote(make_enriched_quote())
        store.set_from_token_input_value("3")
        await asyncio.sleep(0.02)

        assert len(fetcher.calls) == 1
        assert store.state.ui.selected_quote is None

        fresh_choice = make_enriched_quote(bridge_id="socket", bridges=("hop",))
        store.set_selected_quote(fresh_choice)
        fetcher.release.set()
        await controller.join()

        assert store.state.ui.selected_quote == fresh_choice
        controller.stop()

    @pytest.mark.asyncio
    async def test_failed_fetch_still_clears_selection(self, store, make_enriched_quote, caplog):
        fetcher = FailingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings(), debounce_seconds=10)
        controller.start()

        store.set_selected_quote(make_enriched_quote())
        store.set_from_token_input_value("3")
        await controller.flush()
        await asyncio.sleep(0)

        assert store.state.ui.selected_quote is None
        assert "provider down" in caplog.text
        controller.stop()

    def test_update_outside_event_loop_is_held(self, store):
        """Store updates without any event loop wait for the next flush."""
        fetcher = RecordingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings())
        controller.start()

        store.set_from_token_input_value("7")
        assert controller.has_pending_update

        loop = asyncio.new_event_loop()
        try:
            loop.run_until_complete(controller.flush())
        finally:
            loop.close()

        assert fetcher.calls[-1].src_token_amount == "7000000"
        controller.stop()

    def test_update_outside_bound_loop_is_handed_over(self, store):
        """Updates made off the loop are scheduled on the loop bound at start."""
        fetcher = RecordingFetcher()
        controller = RefreshController(store, fetcher, settings=Settings(), debounce_seconds=0.01)

        loop = asyncio.new_event_loop()
        try:
            controller.start(loop=loop)
            store.set_from_token_input_value("7")
            assert fetcher.calls == []

            loop.run_until_complete(asyncio.sleep(0.05))
            loop.run_until_complete(controller.join())
        finally:
            controller.stop()
            loop.close()

        assert [call.src_token_amount for call in fetcher.calls] == ["7000000"]
