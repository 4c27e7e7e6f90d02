"""Bridge quote service.

Reads ranked quotes and validation results from the current store snapshot
and records form input. It never fetches quotes or submits transactions
itself: form changes reach the quote fetcher through the refresh controller.
"""

import logging
import time
from typing import Optional

from bridgex.config import Settings, get_settings
from bridgex.errors import InvalidBridgeInputError, QuoteNotFoundError
from bridgex.quotes.continuity import quote_identifier
from bridgex.quotes.submission import cta_state, is_tx_submittable
from bridgex.quotes.types import SortOrder
from bridgex.refresh.controller import quote_params_for_state
from bridgex.refresh.request import is_valid_quote_request, milliseconds_until_next_refresh
from bridgex.state import selectors
from bridgex.state.store import BridgeStore
from bridgex.web.contracts.form import BridgeFormRequest, BridgeFormResponse
from bridgex.web.contracts.quotes import BridgeQuotesResponse, QuoteModel, TokenModel
from bridgex.web.contracts.validation import ValidationRequest, ValidationResponse

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class BridgeQuoteService:
    """Service exposing the bridge selectors to the web layer."""

    def __init__(self, store: BridgeStore, settings: Optional[Settings] = None):
        self._store = store
        self._settings = settings or get_settings()

    @property
    def store(self) -> BridgeStore:
        return self._store

    def get_quotes(self, now_ms: Optional[int] = None) -> BridgeQuotesResponse:
        """Get ranked quotes for the current snapshot.

        Args:
            now_ms: Current time in milliseconds, defaults to the wall clock

        Returns:
            BridgeQuotesResponse with sorted, recommended and active quotes
        """
        state = self._store.state
        bridge_quotes = selectors.get_bridge_quotes(state)

        currency = self._settings.currency

        def to_model(quote):
            return QuoteModel.from_quote(quote, currency) if quote is not None else None

        return BridgeQuotesResponse(
            sort_order=state.ui.sort_order,
            quotes=[QuoteModel.from_quote(q, currency) for q in bridge_quotes.sorted_quotes],
            recommended_quote=to_model(bridge_quotes.recommended_quote),
            active_quote=to_model(bridge_quotes.active_quote),
            is_loading=bridge_quotes.is_loading,
            quote_fetch_error=bridge_quotes.quote_fetch_error,
            quotes_last_fetched_ms=bridge_quotes.quotes_last_fetched_ms,
            quotes_refresh_count=bridge_quotes.quotes_refresh_count,
            quotes_initial_load_time_ms=bridge_quotes.quotes_initial_load_time_ms,
            is_quote_going_to_refresh=bridge_quotes.is_quote_going_to_refresh,
            milliseconds_until_next_refresh=milliseconds_until_next_refresh(
                bridge_quotes.quotes_last_fetched_ms,
                state.controller.feature_flags.refresh_rate_ms,
                now_ms if now_ms is not None else _now_ms(),
            ),
        )

    def set_sort_order(self, sort_order: SortOrder) -> BridgeQuotesResponse:
        self._store.set_sort_order(sort_order)
        return self.get_quotes()

    def select_quote(self, identifier: str, request_id: Optional[str] = None) -> QuoteModel:
        """Pin a quote from the current batch by its identifier.

        Distinct routes can share an identifier; ``request_id`` then picks one
        of them. Without it the best ranked match is taken.

        Raises:
            QuoteNotFoundError: No quote in the current batch matches
        """
        sorted_quotes = selectors.get_sorted_quotes(self._store.state)
        for quote in sorted_quotes:
            if quote_identifier(quote) != identifier:
                continue
            if request_id is not None and quote.quote.request_id != request_id:
                continue
            self._store.set_selected_quote(quote)
            logger.info(f"Selected quote {identifier} ({quote.quote.request_id})")
            return QuoteModel.from_quote(quote, self._settings.currency)
        raise QuoteNotFoundError(identifier if request_id is None else f"{identifier}/{request_id}")

    def clear_selection(self) -> None:
        self._store.set_selected_quote(None)

    # ======================
    # Form input
    # ======================

    def get_form(self) -> BridgeFormResponse:
        state = self._store.state
        from_chain = selectors.get_from_chain(state)
        to_chain = selectors.get_to_chain(state)
        from_token = selectors.get_from_token(state)
        to_token = selectors.get_to_token(state)
        params = quote_params_for_state(state, self._settings.fork_markers)
        return BridgeFormResponse(
            from_chain_id=from_chain.chain_id if from_chain else None,
            to_chain_id=to_chain.chain_id if to_chain else None,
            from_token=TokenModel.from_token(from_token) if from_token else None,
            to_token=TokenModel.from_token(to_token) if to_token else None,
            from_token_input_value=state.ui.from_token_input_value,
            slippage=state.ui.slippage,
            is_bridge_tx=selectors.get_is_bridge_tx(state),
            is_quote_request_valid=is_valid_quote_request(params),
            insufficient_bal=params.insufficient_bal,
        )

    def update_form(self, request: BridgeFormRequest) -> BridgeFormResponse:
        """Apply the fields present in a form update.

        The whole update is checked before anything is written, so a rejected
        update leaves the form untouched.

        Raises:
            InvalidBridgeInputError: A chain is not allowed or a token is on another chain
        """
        fields = request.model_fields_set
        state = self._store.state

        from_chain_id = state.network.active_chain_id
        if request.from_chain_id is not None:
            allowed = {c.chain_id for c in selectors.get_from_chains(state)}
            if request.from_chain_id not in allowed:
                raise InvalidBridgeInputError(
                    f"Chain {request.from_chain_id} is not an allowed bridge source"
                )
            from_chain_id = request.from_chain_id

        to_chain_id = request.to_chain_id if "to_chain_id" in fields else state.ui.to_chain_id
        if "to_chain_id" in fields and to_chain_id is not None:
            allowed = {c.chain_id for c in selectors.get_to_chains(state)}
            if to_chain_id not in allowed:
                raise InvalidBridgeInputError(
                    f"Chain {to_chain_id} is not an allowed bridge destination"
                )

        for name, selection, chain_id in (
            ("from_token", request.from_token, from_chain_id),
            ("to_token", request.to_token, to_chain_id),
        ):
            if selection is not None and selection.token.chain_id != chain_id:
                raise InvalidBridgeInputError(
                    f"{name} {selection.token.symbol} is on chain {selection.token.chain_id}, "
                    f"expected {chain_id}"
                )

        store = self._store
        if from_chain_id != state.network.active_chain_id:
            store.set_from_chain(from_chain_id)
        if "to_chain_id" in fields:
            store.set_to_chain_id(to_chain_id)
        if "from_token" in fields:
            selection = request.from_token
            store.set_from_token(
                selection.token.to_token() if selection else None,
                selection.exchange_rate if selection else None,
            )
        if "to_token" in fields:
            selection = request.to_token
            store.set_to_token(
                selection.token.to_token() if selection else None,
                selection.exchange_rate if selection else None,
            )
        if "from_token_input_value" in fields:
            store.set_from_token_input_value(request.from_token_input_value)
        if request.slippage is not None:
            store.set_slippage(request.slippage)
        if "rpc_url" in fields:
            store.update_network(rpc_url=request.rpc_url)

        logger.debug(f"Form updated: {sorted(fields)}")
        return self.get_form()

    def validate(self, request: ValidationRequest) -> ValidationResponse:
        """Evaluate the validation predicates and submission gate for the active quote."""
        state = self._store.state
        validation = selectors.get_validation_errors(state)
        bridge_quotes = selectors.get_bridge_quotes(state)
        from_token = selectors.get_from_token(state)
        to_token = selectors.get_to_token(state)
        from_chain = selectors.get_from_chain(state)
        to_chain = selectors.get_to_chain(state)
        from_amount = selectors.get_from_amount(state)

        submittable = is_tx_submittable(
            validation,
            bridge_quotes.active_quote,
            from_token,
            to_token,
            from_chain.chain_id if from_chain else None,
            to_chain.chain_id if to_chain else None,
            from_amount,
            request.balance,
            request.native_balance,
        )

        return ValidationResponse(
            is_no_quotes_available=validation.is_no_quotes_available,
            is_insufficient_gas_balance=validation.is_insufficient_gas_balance(
                request.native_balance
            ),
            is_insufficient_gas_for_quote=validation.is_insufficient_gas_for_quote(
                request.native_balance
            ),
            is_insufficient_balance=validation.is_insufficient_balance(request.balance),
            is_estimated_return_low=validation.is_estimated_return_low,
            is_tx_submittable=submittable,
            cta_state=cta_state(
                validation,
                bridge_quotes.is_loading,
                submittable,
                from_amount,
                to_token,
                request.balance,
                request.native_balance,
            ),
        )
