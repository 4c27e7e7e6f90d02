"""Bridge state snapshot, store and memoized selectors."""

from bridgex.state.models import (
    BridgeAppState,
    BridgeControllerState,
    BridgeFeatureFlags,
    BridgeUiState,
    MarketState,
    NetworkState,
    RankingConfig,
)
from bridgex.state.store import BridgeStore

__all__ = [
    "BridgeAppState",
    "BridgeControllerState",
    "BridgeFeatureFlags",
    "BridgeUiState",
    "MarketState",
    "NetworkState",
    "RankingConfig",
    "BridgeStore",
]
