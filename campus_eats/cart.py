"""Per-session shopping cart."""

from __future__ import annotations

from campus_eats.models import CartItem


class Cart:
    """Pre-checkout collection of menu item ids and quantities.

    The cart never looks menu items up; unknown ids are priced as zero later on.
    """

    def __init__(self) -> None:
        self._items: list[CartItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def add_item(self, menu_item_id: str, qty: int = 1) -> None:
        if qty <= 0:
            return
        for item in self._items:
            if item.menu_item_id == menu_item_id:
                item.quantity += qty
                return
        self._items.append(CartItem(menu_item_id, qty))

    def remove_item(self, menu_item_id: str) -> None:
        self._items = [item for item in self._items if item.menu_item_id != menu_item_id]

    def get_items(self) -> list[CartItem]:
        """Return copies of the cart lines in insertion order."""
        return [item.copy() for item in self._items]

    def quantity_of(self, menu_item_id: str) -> int:
        for item in self._items:
            if item.menu_item_id == menu_item_id:
                return item.quantity
        return 0

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()
