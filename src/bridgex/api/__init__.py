"""HTTP API application."""
