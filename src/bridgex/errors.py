"""Exceptions raised by the service layer.

The quote engine itself reports problems as values; these are only used at
the HTTP boundary.
"""


class BridgeError(Exception):
    """Base class for bridge service errors."""


class QuoteNotFoundError(BridgeError):
    """Raised when a quote identifier is not part of the current batch."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Quote '{identifier}' is not in the current quote set")


class InvalidBridgeInputError(BridgeError):
    """Raised when form input names a chain or token the bridge cannot use."""
