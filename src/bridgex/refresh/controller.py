"""Forwards quote request changes to the quote fetcher.

Form edits arrive far faster than quotes can be fetched, so parameter
changes are debounced and only the latest set reaches the fetcher. Every
forwarded request invalidates the user's quote selection.
"""

import asyncio
import logging
import time
from typing import Any, Optional, Protocol, Sequence

from bridgex.config import Settings, get_settings
from bridgex.quotes.types import QuoteRequest
from bridgex.refresh.debounce import Debouncer
from bridgex.refresh.request import build_quote_params, milliseconds_until_next_refresh
from bridgex.state.models import BridgeAppState
from bridgex.state.selectors import get_from_chain, get_from_token, get_to_chain, get_to_token
from bridgex.state.store import BridgeStore

logger = logging.getLogger(__name__)


def quote_params_for_state(state: BridgeAppState, fork_markers: Sequence[str]) -> QuoteRequest:
    """Quote request for the form inputs of a snapshot."""
    from_chain = get_from_chain(state)
    to_chain = get_to_chain(state)
    return build_quote_params(
        from_token=get_from_token(state),
        to_token=get_to_token(state),
        from_chain_id=from_chain.chain_id if from_chain else None,
        to_chain_id=to_chain.chain_id if to_chain else None,
        from_amount=state.ui.from_token_input_value,
        slippage=state.ui.slippage,
        rpc_url=state.network.rpc_url,
        fork_markers=fork_markers,
    )


class QuoteFetcher(Protocol):
    """The collaborator that fetches and periodically refreshes quotes."""

    def update_quote_request_params(self, params: QuoteRequest) -> Any:
        """Start fetching quotes for new request parameters."""
        ...


class RefreshController:
    """Debounced bridge between form state and the quote fetcher."""

    def __init__(
        self,
        store: BridgeStore,
        fetcher: QuoteFetcher,
        settings: Optional[Settings] = None,
        debounce_seconds: Optional[float] = None,
    ):
        self.store = store
        self.fetcher = fetcher
        self.settings = settings or get_settings()
        if debounce_seconds is None:
            debounce_seconds = self.settings.quote_debounce_ms / 1000
        self._debouncer = Debouncer(self._forward, wait=debounce_seconds)
        self._last_params: Optional[QuoteRequest] = None
        self._unsubscribe = None

    def current_params(self) -> QuoteRequest:
        """Quote request for the store's current form inputs."""
        return quote_params_for_state(self.store.state, self.settings.fork_markers)

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Follow store updates and push parameter changes.

        Debounce timers run on ``loop``, or on the loop running at start time.
        Updates made from other threads are handed over to that loop.
        """
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
        if loop is not None:
            self._debouncer.bind(loop)
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(lambda _state: self.on_state_change())

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._debouncer.cancel()

    def on_state_change(self) -> None:
        """Schedule a push when the request parameters changed."""
        params = self.current_params()
        if params == self._last_params:
            return
        self._last_params = params
        self.request_update(params)

    def request_update(self, params: QuoteRequest) -> None:
        """Schedule params for forwarding, superseding any pending push."""
        self._debouncer(params)

    @property
    def has_pending_update(self) -> bool:
        return self._debouncer.pending

    async def flush(self) -> None:
        await self._debouncer.flush()

    async def join(self) -> None:
        await self._debouncer.join()

    def _forward(self, params: QuoteRequest) -> Any:
        logger.info(
            f"Updating quote request: chain {params.src_chain_id} -> {params.dest_chain_id}, "
            f"amount {params.src_token_amount}"
        )
        # A selection never outlives the request it was made against
        self.store.set_selected_quote(None)
        return self.fetcher.update_quote_request_params(params)

    def milliseconds_until_next_refresh(self, now_ms: Optional[int] = None) -> int:
        """Countdown to the next quote refresh."""
        controller = self.store.state.controller
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return milliseconds_until_next_refresh(
            controller.quotes_last_fetched_ms,
            controller.feature_flags.refresh_rate_ms,
            now_ms,
        )
