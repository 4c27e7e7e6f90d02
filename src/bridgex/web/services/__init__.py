"""Web services over the bridge state store."""

from bridgex.web.services.bridge_service import BridgeQuoteService

__all__ = [
    "BridgeQuoteService",
]
