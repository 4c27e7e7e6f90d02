"""Tests for display formatting."""

from decimal import Decimal

from bridgex.quotes.formatting import (
    format_currency_amount,
    format_eta_in_minutes,
    format_token_amount,
)


class TestFormatting:
    """Tests for ETA and amount formatting."""

    def test_eta_under_a_minute(self):
        assert format_eta_in_minutes(45) == "< 1"

    def test_eta_rounds_to_minutes(self):
        assert format_eta_in_minutes(60) == "1"
        assert format_eta_in_minutes(150) == "3"
        assert format_eta_in_minutes(140) == "2"

    def test_currency_amount(self):
        assert format_currency_amount(Decimal("1234.5"), "usd") == "$1,234.50"
        assert format_currency_amount(Decimal("3"), "chf") == "3.00 CHF"

    def test_unknown_currency_amount(self):
        assert format_currency_amount(None, "usd") is None

    def test_token_amount(self):
        assert format_token_amount(Decimal("0.0065"), "ETH", precision=4) == "0.0065 ETH"
        assert format_token_amount(None, "ETH") is None
