"""Bridge form input contracts."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bridgex.web.contracts.quotes import TokenModel


class TokenSelection(BaseModel):
    """A picked token with its exchange rate in the display currency."""

    token: TokenModel
    exchange_rate: Optional[Decimal] = Field(None, ge=0)


class BridgeFormRequest(BaseModel):
    """Partial update of the bridge form.

    Only fields present in the body are applied. An explicit null clears the
    destination chain, a token or the amount.
    """

    from_chain_id: Optional[int] = Field(None, description="Source chain; null keeps the current one")
    to_chain_id: Optional[int] = None
    from_token: Optional[TokenSelection] = None
    to_token: Optional[TokenSelection] = None
    from_token_input_value: Optional[str] = Field(
        None, max_length=80, pattern=r"^\d*\.?\d*$", description="Amount as typed"
    )
    slippage: Optional[Decimal] = Field(None, ge=0, le=100, description="Slippage in percent")
    rpc_url: Optional[str] = Field(None, description="RPC endpoint of the wallet's network")


class BridgeFormResponse(BaseModel):
    """Current form inputs and whether they make a complete quote request."""

    from_chain_id: Optional[int] = None
    to_chain_id: Optional[int] = None
    from_token: Optional[TokenModel] = None
    to_token: Optional[TokenModel] = None
    from_token_input_value: Optional[str] = None
    slippage: Optional[Decimal] = None
    is_bridge_tx: bool = False
    is_quote_request_valid: bool = False
    insufficient_bal: bool = False
