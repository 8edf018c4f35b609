"""Storage contracts for menu items and orders, plus volatile implementations.

Every read hands out copies; mutating a returned record never changes what is stored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

import structlog

from campus_eats.models import MenuItem, Order, OrderStatus

logger = structlog.get_logger(__name__)


class MenuRepository(ABC):
    @abstractmethod
    def find_all(self) -> list[MenuItem]:
        """Return every menu item in insertion order."""

    @abstractmethod
    def find_by_id(self, item_id: str) -> MenuItem | None:
        ...

    @abstractmethod
    def save(self, item: MenuItem) -> None:
        """Insert ``item`` or replace the stored item with the same id."""

    @abstractmethod
    def toggle_availability(self, item_id: str, available: bool) -> None:
        """Set the availability flag; unknown ids are ignored."""


class OrderRepository(ABC):
    @abstractmethod
    def save(self, order: Order) -> None:
        """Insert ``order`` or replace the stored order with the same id."""

    @abstractmethod
    def find_by_id(self, order_id: str) -> Order | None:
        ...

    @abstractmethod
    def find_by_status(self, status: OrderStatus) -> list[Order]:
        ...

    @abstractmethod
    def find_all(self) -> list[Order]:
        ...

    @abstractmethod
    def update_status(self, order_id: str, status: OrderStatus) -> None:
        """Overwrite the status directly, without walking the lifecycle."""


class InMemoryMenuRepository(MenuRepository):
    def __init__(self, seed: Iterable[MenuItem] | None = None) -> None:
        self._items: dict[str, MenuItem] = {}
        for item in seed or ():
            self.save(item)

    def find_all(self) -> list[MenuItem]:
        return [item.copy() for item in self._items.values()]

    def find_by_id(self, item_id: str) -> MenuItem | None:
        item = self._items.get(item_id)
        return item.copy() if item is not None else None

    def save(self, item: MenuItem) -> None:
        # dict assignment keeps the original slot for an existing key
        self._items[item.id] = item.copy()

    def toggle_availability(self, item_id: str, available: bool) -> None:
        item = self._items.get(item_id)
        if item is None:
            logger.debug("Availability toggle for unknown menu item", item_id=item_id)
            return
        item.available = bool(available)


class InMemoryOrderRepository(OrderRepository):
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}

    def save(self, order: Order) -> None:
        self._orders[order.id] = order.copy()

    def find_by_id(self, order_id: str) -> Order | None:
        order = self._orders.get(order_id)
        return order.copy() if order is not None else None

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        wanted = OrderStatus(status)
        return [order.copy() for order in self._orders.values() if order.status is wanted]

    def find_all(self) -> list[Order]:
        return [order.copy() for order in self._orders.values()]

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        order = self._orders.get(order_id)
        if order is None:
            logger.debug("Status update for unknown order", order_id=order_id)
            return
        order.status = OrderStatus(status)


def build_repositories(backend: str, db_path: str | None = None) -> tuple[MenuRepository, OrderRepository]:
    """Create the menu/order repository pair for ``backend`` ("memory" or "sqlite")."""
    backend = backend.strip().lower()
    if backend == "memory":
        return InMemoryMenuRepository(), InMemoryOrderRepository()
    if backend == "sqlite":
        from campus_eats.persistence import SqliteMenuRepository, SqliteOrderRepository

        path = db_path or ":memory:"
        return SqliteMenuRepository(path), SqliteOrderRepository(path)
    raise ValueError(f"Unknown storage backend {backend!r}")
