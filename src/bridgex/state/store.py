"""Holder of the current bridge state snapshot.

Updates never patch the snapshot in place: every change produces a new
``BridgeAppState`` so readers always see one consistent version.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Callable, Optional

from bridgex.config import Settings
from bridgex.quotes.types import EnrichedQuote, SortOrder, Token
from bridgex.state.models import (
    BridgeAppState,
    BridgeControllerState,
    BridgeFeatureFlags,
    BridgeUiState,
    NetworkState,
    RankingConfig,
)

logger = logging.getLogger(__name__)

Listener = Callable[[BridgeAppState], None]


class BridgeStore:
    """Single owner of the bridge state snapshot.

    The quote fetcher and market services push their slices in; user
    actions write the UI slice.
    """

    def __init__(self, state: Optional[BridgeAppState] = None):
        self._state = state or BridgeAppState()
        self._listeners: list[Listener] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> "BridgeStore":
        """Create a store with flags and thresholds taken from settings.

        Every allowlisted chain starts out as a configured network.
        """
        flags = BridgeFeatureFlags(
            max_refresh_count=settings.max_refresh_count,
            refresh_rate_ms=settings.refresh_rate_ms,
            src_network_allowlist=tuple(settings.src_chain_ids),
            dest_network_allowlist=tuple(settings.dest_chain_ids),
        )
        return cls(
            BridgeAppState(
                controller=BridgeControllerState(feature_flags=flags),
                ranking=RankingConfig.from_settings(settings),
                network=NetworkState(
                    configured_chain_ids=tuple(
                        dict.fromkeys(settings.src_chain_ids + settings.dest_chain_ids)
                    ),
                ),
            )
        )

    @property
    def state(self) -> BridgeAppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after each update. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: BridgeAppState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Store listener failed: {type(e).__name__}: {e}")

    # ======================
    # External slices
    # ======================

    def update_controller(self, **changes) -> None:
        """Apply an update from the quote fetcher."""
        controller = replace(self._state.controller, **changes)
        if "quotes" in changes:
            logger.debug(
                f"Received {len(controller.quotes)} quote(s), "
                f"refresh #{controller.quotes_refresh_count}"
            )
        self._set_state(replace(self._state, controller=controller))

    def update_market(self, **changes) -> None:
        """Apply new exchange rates or gas estimates."""
        self._set_state(replace(self._state, market=replace(self._state.market, **changes)))

    def update_network(self, **changes) -> None:
        self._set_state(replace(self._state, network=replace(self._state.network, **changes)))

    def update_ui(self, **changes) -> None:
        self._set_state(replace(self._state, ui=replace(self._state.ui, **changes)))

    # ======================
    # User actions
    # ======================

    def set_sort_order(self, sort_order: SortOrder) -> None:
        logger.debug(f"Sort order set to {sort_order.value}")
        self.update_ui(sort_order=sort_order)

    def set_selected_quote(self, quote: Optional[EnrichedQuote]) -> None:
        self.update_ui(selected_quote=quote)

    def set_from_chain(self, chain_id: int) -> None:
        """Switch the source network, clearing the source token and amount."""
        if chain_id == self._state.ui.to_chain_id:
            self.update_ui(to_chain_id=None)
        self.update_network(active_chain_id=chain_id)
        self.update_ui(from_token=None, from_token_input_value=None)

    def set_to_chain_id(self, chain_id: Optional[int]) -> None:
        self.update_ui(to_chain_id=chain_id)

    def set_from_token(
        self,
        token: Optional[Token],
        exchange_rate: Optional[Decimal] = None,
    ) -> None:
        """Select the source token, clearing the entered amount."""
        self.update_ui(
            from_token=token,
            from_token_exchange_rate=exchange_rate,
            from_token_input_value=None,
        )

    def set_to_token(self, token: Optional[Token], exchange_rate: Optional[Decimal] = None) -> None:
        self.update_ui(to_token=token, to_token_exchange_rate=exchange_rate)

    def set_from_token_input_value(self, value: Optional[str]) -> None:
        self.update_ui(from_token_input_value=value)

    def set_slippage(self, slippage: Optional[Decimal]) -> None:
        self.update_ui(slippage=slippage)

    def switch_tokens(self) -> None:
        """Swap source and destination chains and tokens."""
        ui = self._state.ui
        from_chain_id = self._state.network.active_chain_id
        from_token = ui.from_token
        if ui.to_chain_id is not None:
            self.update_network(active_chain_id=ui.to_chain_id)
        self.update_ui(
            from_token=ui.to_token,
            from_token_exchange_rate=ui.to_token_exchange_rate,
            from_token_input_value=None,
            to_chain_id=from_chain_id,
            to_token=from_token,
            to_token_exchange_rate=ui.from_token_exchange_rate,
        )

    def reset(self) -> None:
        """Clear user inputs and the last quote cycle."""
        logger.info("Resetting bridge state")
        flags = self._state.controller.feature_flags
        self._set_state(
            replace(
                self._state,
                controller=BridgeControllerState(feature_flags=flags),
                ui=BridgeUiState(),
            )
        )
