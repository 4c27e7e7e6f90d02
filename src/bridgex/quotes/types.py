"""Quote data model: raw provider quotes and their enriched form."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

from bridgex.chains import is_native_address


class SortOrder(str, Enum):
    """Quote list ordering selected by the user."""

    COST_ASC = "cost_ascending"
    ETA_ASC = "eta_ascending"


class RequestStatus(str, Enum):
    """Loading status reported by the quote fetcher."""

    LOADING = "loading"
    FETCHED = "fetched"
    ERROR = "error"


@dataclass(frozen=True)
class Token:
    """A token on a specific chain."""

    chain_id: int
    address: str
    symbol: str
    decimals: int
    icon_url: Optional[str] = None

    @property
    def is_native(self) -> bool:
        return is_native_address(self.address)

    @property
    def key(self) -> tuple[int, str]:
        return (self.chain_id, self.address.lower())


@dataclass(frozen=True)
class Step:
    """A single hop of a route."""

    action: str  # "bridge" or "swap"
    protocol: str
    src_chain_id: int
    dest_chain_id: int


@dataclass(frozen=True)
class FeeData:
    """Provider fee deducted from the source amount, in source token units."""

    amount: int = 0
    asset: Optional[Token] = None


@dataclass(frozen=True)
class TxData:
    """Transaction parameters attached to a quote."""

    value: int = 0  # wei
    gas_limit: Optional[int] = None


@dataclass(frozen=True)
class Quote:
    """Route details of a provider quote. Amounts are raw token units."""

    request_id: str
    bridge_id: str
    bridges: tuple[str, ...]
    steps: tuple[Step, ...]
    src_asset: Token
    dest_asset: Token
    src_chain_id: int
    dest_chain_id: int
    src_token_amount: int
    dest_token_amount: int
    fee_data: FeeData = field(default_factory=FeeData)


@dataclass(frozen=True)
class QuoteResponse:
    """A quote as returned by a provider, with its transactions."""

    quote: Quote
    trade: TxData
    estimated_processing_time_in_seconds: int
    approval: Optional[TxData] = None
    l1_gas_fees_in_wei: Optional[int] = None


@dataclass(frozen=True)
class TokenAmount:
    """An amount in token units and its value in the display currency.

    ``amount`` is only None for gas fees computed without a gas estimate.
    """

    amount: Optional[Decimal]
    value_in_currency: Optional[Decimal] = None


@dataclass(frozen=True)
class CurrencyValue:
    value_in_currency: Optional[Decimal] = None


@dataclass(frozen=True)
class Cost:
    """Value lost to fees: absolute in currency and as a fraction of value sent."""

    value_in_currency: Optional[Decimal] = None
    ratio: Optional[Decimal] = None


@dataclass(frozen=True)
class EnrichedQuote:
    """A provider quote with computed economic metrics."""

    response: QuoteResponse
    to_token_amount: TokenAmount
    sent_amount: TokenAmount
    gas_fee: TokenAmount
    relayer_fee: TokenAmount
    total_network_fee: TokenAmount
    adjusted_return: CurrencyValue
    swap_rate: Optional[Decimal]
    cost: Cost

    @property
    def quote(self) -> Quote:
        return self.response.quote

    @property
    def bridge_id(self) -> str:
        return self.response.quote.bridge_id

    @property
    def estimated_processing_time_in_seconds(self) -> int:
        return self.response.estimated_processing_time_in_seconds

    @property
    def approval(self) -> Optional[TxData]:
        return self.response.approval


@dataclass(frozen=True)
class QuoteRequest:
    """Parameters sent to the quote fetcher."""

    src_chain_id: Optional[int] = None
    dest_chain_id: Optional[int] = None
    src_token_address: Optional[str] = None
    dest_token_address: Optional[str] = None
    src_token_amount: Optional[str] = None  # raw units
    slippage: Optional[Decimal] = None
    insufficient_bal: bool = False
    wallet_address: Optional[str] = None
