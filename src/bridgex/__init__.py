"""Cross-chain bridge quote ranking and validation engine."""

__version__ = "0.1.0"
