"""Submission validation contracts."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bridgex.quotes.submission import CtaState


class ValidationRequest(BaseModel):
    """Live balances to validate the active quote against."""

    balance: Optional[Decimal] = Field(None, ge=0, description="Source token balance")
    native_balance: Optional[Decimal] = Field(
        None, ge=0, description="Source chain native asset balance"
    )


class ValidationResponse(BaseModel):
    """Validation outcome for the active quote."""

    is_no_quotes_available: bool
    is_insufficient_gas_balance: bool
    is_insufficient_gas_for_quote: bool
    is_insufficient_balance: bool
    is_estimated_return_low: bool
    is_tx_submittable: bool
    cta_state: CtaState
