"""Pluggable pricing strategies.

A strategy turns cart lines plus a menu snapshot into a total. Lines pointing at
an unknown or unavailable menu item contribute nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Iterable, Sequence

from campus_eats.config import COMBO_DISCOUNT_RATE, COMBO_MIN_QUANTITY
from campus_eats.errors import UnknownPricingError
from campus_eats.models import CartItem, MenuItem

def _priced_lines(items: Iterable[CartItem], menu: Sequence[MenuItem]) -> Iterable[tuple[MenuItem, int]]:
    """Yield (menu item, quantity) for every line that resolves to an available item."""
    menu_by_id = {menu_item.id: menu_item for menu_item in menu}
    for item in items:
        menu_item = menu_by_id.get(item.menu_item_id)
        if menu_item is None or not menu_item.available:
            continue
        yield menu_item, item.quantity


class PricingStrategy(ABC):
    name: str = ""

    @abstractmethod
    def compute_total(self, items: Sequence[CartItem], menu: Sequence[MenuItem]) -> Decimal:
        """Return the total for ``items`` priced against ``menu``."""


class SimplePricingStrategy(PricingStrategy):
    """Plain sum of price times quantity."""

    name = "simple"

    def compute_total(self, items: Sequence[CartItem], menu: Sequence[MenuItem]) -> Decimal:
        total = Decimal("0")
        for menu_item, quantity in _priced_lines(items, menu):
            total += menu_item.price * quantity
        return total


class ComboPricingStrategy(PricingStrategy):
    """Flat discount on the whole order once enough items are bought."""

    name = "combo"

    def __init__(
        self,
        min_quantity: int = COMBO_MIN_QUANTITY,
        discount_rate: Decimal = COMBO_DISCOUNT_RATE,
    ) -> None:
        self.min_quantity = min_quantity
        self.discount_rate = Decimal(str(discount_rate))

    def compute_total(self, items: Sequence[CartItem], menu: Sequence[MenuItem]) -> Decimal:
        total = Decimal("0")
        matched_quantity = 0
        for menu_item, quantity in _priced_lines(items, menu):
            total += menu_item.price * quantity
            matched_quantity += quantity
        if matched_quantity >= self.min_quantity:
            total *= Decimal("1") - self.discount_rate
        return total


PRICING_STRATEGIES: dict[str, Callable[[], PricingStrategy]] = {
    SimplePricingStrategy.name: SimplePricingStrategy,
    ComboPricingStrategy.name: ComboPricingStrategy,
}


def pricing_strategy_for(name: str) -> PricingStrategy:
    """Build a strategy from its registered name."""
    try:
        factory = PRICING_STRATEGIES[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(PRICING_STRATEGIES))
        raise UnknownPricingError(f"Unknown pricing strategy {name!r} (expected one of: {known})") from None
    return factory()
