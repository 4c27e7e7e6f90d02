"""Quote list and selection contracts."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bridgex.quotes.continuity import quote_identifier
from bridgex.quotes.formatting import format_currency_amount, format_eta_in_minutes
from bridgex.quotes.types import EnrichedQuote, SortOrder, Token, TokenAmount


class TokenModel(BaseModel):
    """Token on a chain."""

    chain_id: int
    address: str
    symbol: str
    decimals: int
    icon_url: Optional[str] = None

    @classmethod
    def from_token(cls, token: Token) -> "TokenModel":
        return cls(
            chain_id=token.chain_id,
            address=token.address,
            symbol=token.symbol,
            decimals=token.decimals,
            icon_url=token.icon_url,
        )

    def to_token(self) -> Token:
        return Token(
            chain_id=self.chain_id,
            address=self.address,
            symbol=self.symbol,
            decimals=self.decimals,
            icon_url=self.icon_url,
        )


class AmountModel(BaseModel):
    """Amount in token units with its currency value (null when unknown)."""

    amount: Optional[Decimal] = None
    value_in_currency: Optional[Decimal] = None

    @classmethod
    def from_amount(cls, amount: TokenAmount) -> "AmountModel":
        return cls(amount=amount.amount, value_in_currency=amount.value_in_currency)


class QuoteModel(BaseModel):
    """An enriched quote."""

    identifier: str = Field(..., description="Route identifier used for selection")
    request_id: str
    bridge_id: str
    bridges: list[str]
    step_count: int
    src_chain_id: int
    dest_chain_id: int
    src_asset: TokenModel
    dest_asset: TokenModel
    estimated_processing_time_in_seconds: int
    eta_minutes: str
    to_token_amount: AmountModel
    sent_amount: AmountModel
    gas_fee: AmountModel
    relayer_fee: AmountModel
    total_network_fee: AmountModel
    adjusted_return: Optional[Decimal] = Field(None, description="Return net of network fees")
    swap_rate: Optional[Decimal] = None
    cost: Optional[Decimal] = Field(None, description="Value lost, in currency")
    cost_ratio: Optional[Decimal] = Field(None, description="Value lost, as fraction of value sent")
    requires_approval: bool = False
    currency: str = Field("usd", description="Currency of the display fields")
    adjusted_return_display: Optional[str] = None
    cost_display: Optional[str] = None
    total_network_fee_display: Optional[str] = None

    @classmethod
    def from_quote(cls, quote: EnrichedQuote, currency: str = "usd") -> "QuoteModel":
        route = quote.quote
        return cls(
            identifier=quote_identifier(quote),
            request_id=route.request_id,
            bridge_id=route.bridge_id,
            bridges=list(route.bridges),
            step_count=len(route.steps),
            src_chain_id=route.src_chain_id,
            dest_chain_id=route.dest_chain_id,
            src_asset=TokenModel.from_token(route.src_asset),
            dest_asset=TokenModel.from_token(route.dest_asset),
            estimated_processing_time_in_seconds=quote.estimated_processing_time_in_seconds,
            eta_minutes=format_eta_in_minutes(quote.estimated_processing_time_in_seconds),
            to_token_amount=AmountModel.from_amount(quote.to_token_amount),
            sent_amount=AmountModel.from_amount(quote.sent_amount),
            gas_fee=AmountModel.from_amount(quote.gas_fee),
            relayer_fee=AmountModel.from_amount(quote.relayer_fee),
            total_network_fee=AmountModel.from_amount(quote.total_network_fee),
            adjusted_return=quote.adjusted_return.value_in_currency,
            swap_rate=quote.swap_rate,
            cost=quote.cost.value_in_currency,
            cost_ratio=quote.cost.ratio,
            requires_approval=quote.approval is not None,
            currency=currency,
            adjusted_return_display=format_currency_amount(
                quote.adjusted_return.value_in_currency, currency
            ),
            cost_display=format_currency_amount(quote.cost.value_in_currency, currency),
            total_network_fee_display=format_currency_amount(
                quote.total_network_fee.value_in_currency, currency
            ),
        )


class BridgeQuotesResponse(BaseModel):
    """Ranked quotes with refresh status."""

    sort_order: SortOrder
    quotes: list[QuoteModel] = Field(default_factory=list)
    recommended_quote: Optional[QuoteModel] = None
    active_quote: Optional[QuoteModel] = None
    is_loading: bool = False
    quote_fetch_error: Optional[str] = None
    quotes_last_fetched_ms: Optional[int] = None
    quotes_refresh_count: int = 0
    quotes_initial_load_time_ms: Optional[int] = None
    is_quote_going_to_refresh: bool = False
    milliseconds_until_next_refresh: int = 0


class SortOrderRequest(BaseModel):
    sort_order: SortOrder = Field(..., description="Quote ordering")


class SelectQuoteRequest(BaseModel):
    identifier: str = Field(..., min_length=1, description="Identifier of a listed quote")
    request_id: Optional[str] = Field(
        None, description="Picks between listed quotes sharing an identifier"
    )
