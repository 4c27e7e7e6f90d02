"""Chain metadata for bridgeable EVM networks.

Every chain has a native asset represented by the zero address. Contract
tokens use their own address.
"""

from dataclasses import dataclass
from typing import Optional

NATIVE_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for a bridgeable chain."""

    name: str
    chain_id: int
    symbol: str  # native asset ticker
    decimals: int = 18
    icon_url: Optional[str] = None


CHAINS: dict[int, ChainConfig] = {
    1: ChainConfig(name="Ethereum Mainnet", chain_id=1, symbol="ETH"),
    10: ChainConfig(name="OP Mainnet", chain_id=10, symbol="ETH"),
    56: ChainConfig(name="BNB Chain", chain_id=56, symbol="BNB"),
    137: ChainConfig(name="Polygon", chain_id=137, symbol="POL"),
    324: ChainConfig(name="zkSync Era Mainnet", chain_id=324, symbol="ETH"),
    8453: ChainConfig(name="Base", chain_id=8453, symbol="ETH"),
    42161: ChainConfig(name="Arbitrum One", chain_id=42161, symbol="ETH"),
    43114: ChainConfig(name="Avalanche Network C-Chain", chain_id=43114, symbol="AVAX"),
    59144: ChainConfig(name="Linea", chain_id=59144, symbol="ETH"),
}

ALLOWED_BRIDGE_CHAIN_IDS: tuple[int, ...] = tuple(CHAINS.keys())


def is_native_address(address: Optional[str]) -> bool:
    """Check whether an address denotes the chain's native asset."""
    return not address or address.lower() == NATIVE_ADDRESS


def get_chain(chain_id: Optional[int]) -> Optional[ChainConfig]:
    """Get chain configuration by id."""
    if chain_id is None:
        return None
    return CHAINS.get(chain_id)


def get_native_decimals(chain_id: Optional[int]) -> int:
    """Native asset decimals for a chain (18 when unknown)."""
    chain = get_chain(chain_id)
    return chain.decimals if chain else 18


def get_native_token(chain_id: Optional[int]):
    """Build the native Token for a chain, or None for unknown chains."""
    from bridgex.quotes.types import Token

    chain = get_chain(chain_id)
    if chain is None:
        return None
    return Token(
        chain_id=chain.chain_id,
        address=NATIVE_ADDRESS,
        symbol=chain.symbol,
        decimals=chain.decimals,
        icon_url=chain.icon_url,
    )
