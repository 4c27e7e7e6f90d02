"""Quote enrichment: currency-denominated metrics for raw provider quotes.

Every function here is pure. Unknown inputs propagate as None so that a
missing rate never turns into a zero fee or a zero return.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from bridgex.chains import get_native_decimals
from bridgex.quotes.gas import BridgeFeesPerGas, wei_to_dec_gwei, GWEI_DECIMALS
from bridgex.quotes.types import (
    Cost,
    CurrencyValue,
    EnrichedQuote,
    Quote,
    QuoteResponse,
    TokenAmount,
)

logger = logging.getLogger(__name__)


def calc_token_amount(value: Union[int, str, Decimal], decimals: int) -> Decimal:
    """Scale a raw integer amount down to token units."""
    return Decimal(value).scaleb(-int(decimals))


def _in_currency(amount: Optional[Decimal], rate: Optional[Decimal]) -> Optional[Decimal]:
    if amount is None or rate is None:
        return None
    return amount * rate


def calc_to_amount(quote: Quote, to_token_rate: Optional[Decimal]) -> TokenAmount:
    """Destination amount received, in token units and currency."""
    amount = calc_token_amount(quote.dest_token_amount, quote.dest_asset.decimals)
    return TokenAmount(amount=amount, value_in_currency=_in_currency(amount, to_token_rate))


def calc_sent_amount(quote: Quote, from_token_rate: Optional[Decimal]) -> TokenAmount:
    """Source amount sent, including the provider fee."""
    amount = calc_token_amount(
        quote.src_token_amount + quote.fee_data.amount,
        quote.src_asset.decimals,
    )
    return TokenAmount(amount=amount, value_in_currency=_in_currency(amount, from_token_rate))


def calc_total_gas_fee(
    response: QuoteResponse,
    fees_per_gas: BridgeFeesPerGas,
    native_rate: Optional[Decimal],
) -> TokenAmount:
    """Estimated gas for the approval and trade transactions, in native asset.

    Returns an unknown amount when the base or priority fee is not available.
    """
    base_fee = fees_per_gas.estimated_base_fee_in_dec_gwei
    priority_fee = fees_per_gas.max_priority_fee_per_gas_in_dec_gwei
    if base_fee is None or priority_fee is None:
        return TokenAmount(amount=None, value_in_currency=None)

    total_gas_limit = Decimal(response.trade.gas_limit or 0)
    if response.approval is not None:
        total_gas_limit += Decimal(response.approval.gas_limit or 0)

    gas_fees_in_dec_gwei = total_gas_limit * (base_fee + priority_fee) + wei_to_dec_gwei(
        response.l1_gas_fees_in_wei
    )
    native_decimals = get_native_decimals(response.quote.src_chain_id)
    amount = gas_fees_in_dec_gwei.scaleb(GWEI_DECIMALS - native_decimals)
    return TokenAmount(amount=amount, value_in_currency=_in_currency(amount, native_rate))


def calc_relayer_fee(response: QuoteResponse, native_rate: Optional[Decimal]) -> TokenAmount:
    """Native value attached to the trade beyond the amount being bridged."""
    quote = response.quote
    value_in_wei = response.trade.value
    if quote.src_asset.is_native:
        value_in_wei -= quote.src_token_amount
    amount = calc_token_amount(value_in_wei, get_native_decimals(quote.src_chain_id))
    return TokenAmount(amount=amount, value_in_currency=_in_currency(amount, native_rate))


def calc_total_network_fee(gas_fee: TokenAmount, relayer_fee: TokenAmount) -> TokenAmount:
    """Sum gas and relayer fees; the sum is unknown if either leg is."""
    amount = None
    if gas_fee.amount is not None and relayer_fee.amount is not None:
        amount = gas_fee.amount + relayer_fee.amount

    value_in_currency = None
    if gas_fee.value_in_currency is not None and relayer_fee.value_in_currency is not None:
        value_in_currency = gas_fee.value_in_currency + relayer_fee.value_in_currency

    return TokenAmount(amount=amount, value_in_currency=value_in_currency)


def calc_adjusted_return(
    to_token_value: Optional[Decimal],
    total_network_fee_value: Optional[Decimal],
) -> CurrencyValue:
    """Value received net of network fees."""
    if to_token_value is None or total_network_fee_value is None:
        return CurrencyValue()
    return CurrencyValue(value_in_currency=to_token_value - total_network_fee_value)


def calc_swap_rate(sent_amount: Decimal, to_token_amount: Decimal) -> Optional[Decimal]:
    """Destination token units received per source token unit sent."""
    if not sent_amount:
        return None
    return to_token_amount / sent_amount


def calc_cost(
    adjusted_return_value: Optional[Decimal],
    sent_amount_value: Optional[Decimal],
) -> Cost:
    """Value lost between sending and receiving, absolute and relative."""
    if adjusted_return_value is None or sent_amount_value is None:
        return Cost()
    value = sent_amount_value - adjusted_return_value
    ratio = value / sent_amount_value if sent_amount_value else None
    return Cost(value_in_currency=value, ratio=ratio)


def enrich_quote(
    response: QuoteResponse,
    to_token_rate: Optional[Decimal],
    from_token_rate: Optional[Decimal],
    native_rate: Optional[Decimal],
    fees_per_gas: BridgeFeesPerGas,
) -> EnrichedQuote:
    """Attach monetary metrics to a single quote.

    Args:
        response: Raw provider quote
        to_token_rate: Destination token price in display currency
        from_token_rate: Source token price in display currency
        native_rate: Source chain native asset price in display currency
        fees_per_gas: Current gas fee estimates

    Returns:
        EnrichedQuote with all derived fields
    """
    quote = response.quote
    to_token_amount = calc_to_amount(quote, to_token_rate)
    sent_amount = calc_sent_amount(quote, from_token_rate)
    gas_fee = calc_total_gas_fee(response, fees_per_gas, native_rate)
    relayer_fee = calc_relayer_fee(response, native_rate)
    total_network_fee = calc_total_network_fee(gas_fee, relayer_fee)
    adjusted_return = calc_adjusted_return(
        to_token_amount.value_in_currency,
        total_network_fee.value_in_currency,
    )

    return EnrichedQuote(
        response=response,
        to_token_amount=to_token_amount,
        sent_amount=sent_amount,
        gas_fee=gas_fee,
        relayer_fee=relayer_fee,
        total_network_fee=total_network_fee,
        adjusted_return=adjusted_return,
        swap_rate=calc_swap_rate(sent_amount.amount, to_token_amount.amount),
        cost=calc_cost(adjusted_return.value_in_currency, sent_amount.value_in_currency),
    )


def enrich_quotes(
    responses: Iterable[QuoteResponse],
    to_token_rate: Optional[Decimal],
    from_token_rate: Optional[Decimal],
    native_rate: Optional[Decimal],
    fees_per_gas: BridgeFeesPerGas,
) -> list[EnrichedQuote]:
    """Enrich a whole batch against one snapshot of rates and gas estimates."""
    enriched = [
        enrich_quote(response, to_token_rate, from_token_rate, native_rate, fees_per_gas)
        for response in responses
    ]
    logger.debug(
        f"Enriched {len(enriched)} quote(s) "
        f"(to rate: {to_token_rate}, from rate: {from_token_rate}, native rate: {native_rate})"
    )
    return enriched
