"""Tests for the pricing strategies."""

from decimal import Decimal

import pytest

from campus_eats.errors import UnknownPricingError
from campus_eats.models import CartItem, MenuItem
from campus_eats.pricing import (
    ComboPricingStrategy,
    PricingStrategy,
    SimplePricingStrategy,
    pricing_strategy_for,
)


class TestSimplePricing:
    def test_skips_unavailable_items(self, menu):
        items = [CartItem("m1", 2), CartItem("m2", 1)]
        assert SimplePricingStrategy().compute_total(items, menu) == Decimal("7.00")

    def test_skips_unknown_items(self, menu):
        items = [CartItem("m1", 1), CartItem("ghost", 5)]
        assert SimplePricingStrategy().compute_total(items, menu) == Decimal("3.50")

    @pytest.mark.parametrize("price", ["3.50", "0.125", "1.15"])
    @pytest.mark.parametrize("qty", [1, 2, 5, 10])
    def test_scales_linearly_with_quantity(self, price, qty):
        menu = [MenuItem(id="a", name="A", price=price, category="x")]
        single = SimplePricingStrategy().compute_total([CartItem("a", 1)], menu)
        total = SimplePricingStrategy().compute_total([CartItem("a", qty)], menu)
        assert single == Decimal(price)
        assert total == single * qty

    def test_empty_cart_costs_nothing(self, menu):
        assert SimplePricingStrategy().compute_total([], menu) == Decimal("0.00")

    def test_does_not_mutate_inputs(self, menu):
        items = [CartItem("m1", 2)]
        SimplePricingStrategy().compute_total(items, menu)
        assert items == [CartItem("m1", 2)]
        assert menu[0].price == Decimal("3.50")


class TestComboPricing:
    def test_below_threshold_matches_simple(self, menu):
        items = [CartItem("m1", 2), CartItem("m2", 1)]
        assert ComboPricingStrategy().compute_total(items, menu) == Decimal("7.00")
        assert ComboPricingStrategy().compute_total(items, menu) == SimplePricingStrategy().compute_total(items, menu)

    def test_discount_at_threshold(self, menu):
        items = [CartItem("m1", 4)]
        assert SimplePricingStrategy().compute_total(items, menu) == Decimal("14.00")
        assert ComboPricingStrategy().compute_total(items, menu) == Decimal("12.60")

    def test_exactly_three_items_is_discounted(self, menu):
        assert ComboPricingStrategy().compute_total([CartItem("m1", 3)], menu) == Decimal("9.45")

    @pytest.mark.parametrize("price", ["1.15", "0.125", "3.33"])
    def test_discount_is_exactly_ten_percent_off_cent_fractions(self, price):
        menu = [MenuItem(id="a", name="A", price=price, category="x")]
        items = [CartItem("a", 3)]
        simple = SimplePricingStrategy().compute_total(items, menu)
        combo = ComboPricingStrategy().compute_total(items, menu)
        assert combo == simple * Decimal("0.9")

    def test_discount_keeps_sub_cent_precision(self):
        menu = [MenuItem(id="a", name="A", price="1.15", category="x")]
        total = ComboPricingStrategy().compute_total([CartItem("a", 3)], menu)
        assert total == Decimal("3.105")

    def test_unavailable_quantities_do_not_count_towards_threshold(self, menu):
        items = [CartItem("m1", 2), CartItem("m2", 5)]
        assert ComboPricingStrategy().compute_total(items, menu) == Decimal("7.00")

    def test_discount_applies_to_whole_total(self):
        menu = [
            MenuItem(id="a", name="A", price="1.00", category="x"),
            MenuItem(id="b", name="B", price="10.00", category="x"),
        ]
        items = [CartItem("a", 2), CartItem("b", 1)]
        assert ComboPricingStrategy().compute_total(items, menu) == Decimal("10.80")

    def test_custom_threshold_and_rate(self, menu):
        strategy = ComboPricingStrategy(min_quantity=2, discount_rate=Decimal("0.5"))
        assert strategy.compute_total([CartItem("m1", 2)], menu) == Decimal("3.50")


class TestStrategyContract:
    def test_base_class_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            PricingStrategy()

    def test_incomplete_variant_cannot_be_instantiated(self):
        class HappyHour(PricingStrategy):
            pass

        with pytest.raises(TypeError):
            HappyHour()

    def test_new_variant_only_needs_compute_total(self, menu):
        class FreeLunch(PricingStrategy):
            def compute_total(self, items, menu):
                return Decimal("0")

        assert FreeLunch().compute_total([CartItem("m1", 3)], menu) == Decimal("0")


class TestStrategyLookup:
    @pytest.mark.parametrize(
        "name, expected",
        [("simple", SimplePricingStrategy), ("combo", ComboPricingStrategy), (" Combo ", ComboPricingStrategy)],
    )
    def test_known_names(self, name, expected):
        assert isinstance(pricing_strategy_for(name), expected)

    def test_unknown_name(self):
        with pytest.raises(UnknownPricingError, match="tiered"):
            pricing_strategy_for("tiered")
