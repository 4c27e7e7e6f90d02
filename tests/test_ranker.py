"""Tests for quote ordering and recommendation."""

from decimal import Decimal

from bridgex.quotes.ranker import (
    best_return_value,
    is_return_reasonable,
    recommended_quote,
    sort_quotes,
)
from bridgex.quotes.types import SortOrder


class TestSortQuotes:
    """Tests for quote ordering."""

    def test_cost_ascending(self, make_enriched_quote):
        """Cheapest quote first, and costs never decrease along the list."""
        quotes = [
            make_enriched_quote(bridge_id="a", adjusted_return=Decimal("80")),
            make_enriched_quote(bridge_id="b", adjusted_return=Decimal("95")),
            make_enriched_quote(bridge_id="c", adjusted_return=Decimal("90")),
        ]
        ranked = sort_quotes(quotes, SortOrder.COST_ASC)

        assert [q.bridge_id for q in ranked] == ["b", "c", "a"]
        costs = [q.cost.value_in_currency for q in ranked]
        assert costs == sorted(costs)

    def test_unknown_cost_sorts_last(self, make_enriched_quote):
        quotes = [
            make_enriched_quote(bridge_id="unknown", adjusted_return=None),
            make_enriched_quote(bridge_id="known", adjusted_return=Decimal("90")),
        ]
        ranked = sort_quotes(quotes, SortOrder.COST_ASC)

        assert [q.bridge_id for q in ranked] == ["known", "unknown"]

    def test_eta_ascending(self, make_enriched_quote):
        quotes = [
            make_enriched_quote(bridge_id="slow", eta=900),
            make_enriched_quote(bridge_id="fast", eta=30),
        ]
        ranked = sort_quotes(quotes, SortOrder.ETA_ASC)

        assert [q.bridge_id for q in ranked] == ["fast", "slow"]

    def test_ties_keep_batch_order(self, make_enriched_quote):
        quotes = [
            make_enriched_quote(bridge_id="first", eta=60),
            make_enriched_quote(bridge_id="second", eta=60),
        ]
        ranked = sort_quotes(quotes, SortOrder.ETA_ASC)

        assert [q.bridge_id for q in ranked] == ["first", "second"]


class TestReturnTolerance:
    """Tests for the reasonable return check."""

    def test_best_return_ignores_unknown(self, make_enriched_quote):
        quotes = [
            make_enriched_quote(adjusted_return=None),
            make_enriched_quote(adjusted_return=Decimal("42")),
        ]
        assert best_return_value(quotes) == Decimal("42")

    def test_within_tolerance(self):
        assert is_return_reasonable(Decimal("97"), Decimal("100"), Decimal("0.95"))
        assert not is_return_reasonable(Decimal("94"), Decimal("100"), Decimal("0.95"))

    def test_non_positive_best_accepts_everything(self):
        """Without a positive best return nothing can be compared."""
        assert is_return_reasonable(Decimal("-5"), Decimal("0"), Decimal("0.95"))
        assert is_return_reasonable(Decimal("-5"), None, Decimal("0.95"))


class TestRecommendedQuote:
    """Tests for the recommendation heuristic."""

    def test_empty_batch(self):
        assert recommended_quote([], SortOrder.COST_ASC, Decimal("0.8"), 3600) is None

    def test_eta_order_picks_fastest_reasonable(self, make_enriched_quote):
        """A 97 return is within 0.95 of the best 100, so the faster quote wins."""
        fast = make_enriched_quote(bridge_id="fast", eta=60, adjusted_return=Decimal("97"))
        slow = make_enriched_quote(bridge_id="slow", eta=600, adjusted_return=Decimal("100"))
        ranked = sort_quotes([slow, fast], SortOrder.ETA_ASC)

        assert recommended_quote(ranked, SortOrder.ETA_ASC, Decimal("0.95"), 3600) is fast

    def test_eta_order_skips_poor_return(self, make_enriched_quote):
        """The fastest quote is passed over when its return is too low."""
        fast = make_enriched_quote(bridge_id="fast", eta=60, adjusted_return=Decimal("50"))
        slow = make_enriched_quote(bridge_id="slow", eta=600, adjusted_return=Decimal("100"))
        ranked = sort_quotes([slow, fast], SortOrder.ETA_ASC)

        recommended = recommended_quote(ranked, SortOrder.ETA_ASC, Decimal("0.8"), 3600)
        assert recommended is slow
        assert recommended.adjusted_return.value_in_currency >= Decimal("0.8") * Decimal("100")

    def test_cost_order_respects_eta_ceiling(self, make_enriched_quote):
        """The cheapest quote is passed over when it takes too long."""
        cheap = make_enriched_quote(bridge_id="cheap", eta=7200, adjusted_return=Decimal("99"))
        quick = make_enriched_quote(bridge_id="quick", eta=120, adjusted_return=Decimal("95"))
        ranked = sort_quotes([cheap, quick], SortOrder.COST_ASC)

        assert recommended_quote(ranked, SortOrder.COST_ASC, Decimal("0.8"), 3600) is quick

    def test_falls_back_to_first_quote(self, make_enriched_quote):
        """When nothing passes the heuristic the head of the list wins."""
        cheap = make_enriched_quote(bridge_id="cheap", eta=7200, adjusted_return=Decimal("99"))
        pricey = make_enriched_quote(bridge_id="pricey", eta=9000, adjusted_return=Decimal("95"))
        ranked = sort_quotes([pricey, cheap], SortOrder.COST_ASC)

        assert recommended_quote(ranked, SortOrder.COST_ASC, Decimal("0.8"), 3600) is cheap
