"""Gas fee estimates in decimal gwei and conversion helpers."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

GWEI_DECIMALS = 9

DecimalLike = Union[Decimal, str, int, None]


@dataclass(frozen=True)
class GasFeeTier:
    """Suggested fees for one priority tier, in decimal gwei."""

    suggested_max_priority_fee_per_gas: Optional[Decimal] = None
    suggested_max_fee_per_gas: Optional[Decimal] = None


@dataclass(frozen=True)
class GasFeeEstimates:
    """Network gas fee estimates as reported by the gas-estimate service."""

    estimated_base_fee: Optional[Decimal] = None
    low: Optional[GasFeeTier] = None
    medium: Optional[GasFeeTier] = None
    high: Optional[GasFeeTier] = None

    def tier(self, name: str) -> Optional[GasFeeTier]:
        if name not in ("low", "medium", "high"):
            return None
        return getattr(self, name)


@dataclass(frozen=True)
class BridgeFeesPerGas:
    """Fees per gas used for quote enrichment and transaction submission."""

    estimated_base_fee_in_dec_gwei: Optional[Decimal] = None
    max_priority_fee_per_gas_in_dec_gwei: Optional[Decimal] = None
    max_fee_per_gas: Optional[int] = None  # wei
    max_priority_fee_per_gas: Optional[int] = None  # wei


def _to_decimal(value: DecimalLike) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(value)
    except (InvalidOperation, ValueError):
        return None


def dec_gwei_to_wei(value: DecimalLike) -> Optional[int]:
    """Convert a decimal gwei value to integer wei."""
    gwei = _to_decimal(value)
    if gwei is None:
        return None
    return int(gwei.scaleb(GWEI_DECIMALS))


def wei_to_dec_gwei(value: Optional[int]) -> Decimal:
    return Decimal(value or 0).scaleb(-GWEI_DECIMALS)


def get_bridge_fees_per_gas(
    estimates: Optional[GasFeeEstimates],
    preferred_tier: str = "medium",
) -> BridgeFeesPerGas:
    """Extract the fees per gas for quote metrics and submission.

    The preferred tier feeds network fee estimates; submission always uses
    the high tier caps.
    """
    if estimates is None:
        return BridgeFeesPerGas()

    preferred = estimates.tier(preferred_tier)
    high = estimates.high
    return BridgeFeesPerGas(
        estimated_base_fee_in_dec_gwei=_to_decimal(estimates.estimated_base_fee),
        max_priority_fee_per_gas_in_dec_gwei=(
            _to_decimal(preferred.suggested_max_priority_fee_per_gas) if preferred else None
        ),
        max_fee_per_gas=dec_gwei_to_wei(high.suggested_max_fee_per_gas) if high else None,
        max_priority_fee_per_gas=(
            dec_gwei_to_wei(high.suggested_max_priority_fee_per_gas) if high else None
        ),
    )
