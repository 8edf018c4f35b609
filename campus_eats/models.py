"""Domain models for campus-eats."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from campus_eats.pricing import PricingStrategy


class Role(str, Enum):
    STUDENT = "STUDENT"
    STAFF = "STAFF"


class OrderStatus(str, Enum):
    """Order lifecycle, in the only order it may be walked."""

    RECEIVED = "RECEIVED"
    PREPARING = "PREPARING"
    READY = "READY"
    PICKED_UP = "PICKED_UP"


STATUS_SEQUENCE: tuple[OrderStatus, ...] = tuple(OrderStatus)


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Coerce a price-like value into a Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class User:
    """The person placing orders in a session."""

    id: str
    name: str
    role: Role = Role.STUDENT

    @property
    def is_staff(self) -> bool:
        return self.role is Role.STAFF


@dataclass
class MenuItem:
    """A catalog entry."""

    id: str
    name: str
    price: Decimal
    category: str
    tags: frozenset[str] = field(default_factory=frozenset)
    available: bool = True

    def __post_init__(self) -> None:
        self.price = to_money(self.price)
        if self.price < 0:
            raise ValueError(f"price of {self.id!r} must not be negative")
        self.tags = frozenset(tag.strip().upper() for tag in self.tags if tag.strip())

    def copy(self) -> MenuItem:
        return MenuItem(
            id=self.id,
            name=self.name,
            price=self.price,
            category=self.category,
            tags=self.tags,
            available=self.available,
        )


@dataclass
class CartItem:
    """One cart line; at most one per menu item inside a cart."""

    menu_item_id: str
    quantity: int = 1

    def copy(self) -> CartItem:
        return CartItem(self.menu_item_id, self.quantity)


@dataclass
class Order:
    """A placed purchase tracked through the linear status lifecycle."""

    id: str
    user_id: str
    items: tuple[CartItem, ...]
    pickup_time: datetime
    status: OrderStatus = OrderStatus.RECEIVED
    total: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        self.items = copy_items(self.items)
        self.status = OrderStatus(self.status)
        self.total = to_money(self.total)

    @property
    def is_terminal(self) -> bool:
        return self.status is OrderStatus.PICKED_UP

    def calculate_total(self, pricing: PricingStrategy, menu: Sequence[MenuItem]) -> Decimal:
        """Price the captured items with ``pricing`` and cache the result."""
        self.total = pricing.compute_total(self.items, menu)
        return self.total

    def advance_status(self) -> OrderStatus:
        """Step to the next status; stays put once picked up."""
        try:
            position = STATUS_SEQUENCE.index(self.status)
        except ValueError:
            return self.status
        if position + 1 < len(STATUS_SEQUENCE):
            self.status = STATUS_SEQUENCE[position + 1]
        return self.status

    def copy(self) -> Order:
        return Order(
            id=self.id,
            user_id=self.user_id,
            items=self.items,
            pickup_time=self.pickup_time,
            status=self.status,
            total=self.total,
        )


def copy_items(items: Iterable[CartItem]) -> tuple[CartItem, ...]:
    return tuple(item.copy() for item in items)
