"""Ordering session: wires a cart, a pricing strategy, repositories and a subject together."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

import structlog

from campus_eats.cart import Cart
from campus_eats.config import DB_PATH, DEFAULT_PRICING, PICKUP_LEAD_MINUTES, STORAGE_BACKEND
from campus_eats.data import default_user, seed_menu
from campus_eats.errors import EmptyCartError, OrderNotFoundError, PickupTimeError
from campus_eats.models import MenuItem, Order, OrderStatus, User
from campus_eats.observers import LoggingOrderObserver, OrderSubject
from campus_eats.pricing import PricingStrategy, pricing_strategy_for
from campus_eats.repositories import MenuRepository, OrderRepository, build_repositories

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

_CLOCK_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def new_order_id(now: datetime, is_taken: Callable[[str], bool] = lambda _: False) -> str:
    """Return ``"o" + epoch milliseconds``, bumped until it is unused."""
    millis = int(now.timestamp() * 1000)
    candidate = f"o{millis}"
    while is_taken(candidate):
        millis += 1
        candidate = f"o{millis}"
    return candidate


def default_pickup_time(now: datetime) -> datetime:
    return now + timedelta(minutes=PICKUP_LEAD_MINUTES)


def parse_pickup_time(text: str, now: datetime) -> datetime:
    """Read a pickup time typed by the user.

    ``HH:MM`` means the next occurrence of that clock time; anything else must be ISO-8601.
    """
    raw = text.strip()
    if not raw:
        raise PickupTimeError("Pickup time is required.")

    match = _CLOCK_TIME_RE.match(raw)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 23 or minute > 59:
            raise PickupTimeError(f"{raw!r} is not a valid clock time.")
        pickup = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if pickup < now:
            pickup += timedelta(days=1)
        return pickup

    try:
        pickup = datetime.fromisoformat(raw)
    except ValueError:
        raise PickupTimeError(f"Cannot read pickup time {raw!r}; use HH:MM or YYYY-MM-DDTHH:MM.") from None

    if pickup.tzinfo is not None and now.tzinfo is None:
        pickup = pickup.astimezone().replace(tzinfo=None)
    elif pickup.tzinfo is None and now.tzinfo is not None:
        pickup = pickup.replace(tzinfo=now.tzinfo)
    if pickup < now:
        raise PickupTimeError("Pickup time is in the past.")
    return pickup


class OrderingSession:
    """State for one active user, from first cart item to order pickup."""

    def __init__(
        self,
        user: User,
        menu: MenuRepository,
        orders: OrderRepository,
        pricing: PricingStrategy,
        subject: OrderSubject | None = None,
        clock: Clock = datetime.now,
    ) -> None:
        self.user = user
        self.menu = menu
        self.orders = orders
        self.pricing = pricing
        self.subject = subject if subject is not None else OrderSubject()
        self.clock = clock
        self.cart = Cart()

    def add_to_cart(self, menu_item_id: str, qty: int = 1) -> None:
        self.cart.add_item(menu_item_id, qty)

    def remove_from_cart(self, menu_item_id: str) -> None:
        self.cart.remove_item(menu_item_id)

    def menu_items(self) -> list[MenuItem]:
        return self.menu.find_all()

    def set_pricing(self, pricing: PricingStrategy) -> None:
        self.pricing = pricing
        logger.info("Pricing strategy changed", strategy=type(pricing).__name__)

    def cart_total(self) -> Decimal:
        return self.pricing.compute_total(self.cart.get_items(), self.menu.find_all())

    def place_order(self, pickup_time: datetime | None = None) -> Order:
        """Turn the cart into a saved order and empty the cart."""
        if self.cart.is_empty():
            raise EmptyCartError("Cart is empty.")

        now = self.clock()
        order = Order(
            id=new_order_id(now, lambda candidate: self.orders.find_by_id(candidate) is not None),
            user_id=self.user.id,
            items=tuple(self.cart.get_items()),
            pickup_time=pickup_time or default_pickup_time(now),
        )
        order.calculate_total(self.pricing, self.menu.find_all())
        self.orders.save(order)
        logger.info(
            "Order placed",
            order_id=order.id,
            user_id=order.user_id,
            lines=len(order.items),
            total=str(order.total),
            pickup_time=order.pickup_time.isoformat(),
        )
        self.subject.notify(order.id, order.status)
        self.cart.clear()
        return order

    def advance_order(self, order_id: str) -> Order:
        """Move an order one step along its lifecycle and tell observers."""
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        previous = order.status
        if order.advance_status() is previous:
            return order
        self.orders.save(order)
        self.subject.notify(order.id, order.status)
        return order

    def toggle_availability(self, menu_item_id: str) -> bool | None:
        """Flip availability of a menu item; returns the new flag, or None for an unknown id."""
        item = self.menu.find_by_id(menu_item_id)
        if item is None:
            return None
        self.menu.toggle_availability(menu_item_id, not item.available)
        logger.info("Menu availability changed", item_id=menu_item_id, available=not item.available)
        return not item.available

    def orders_for_user(self) -> list[Order]:
        return [order for order in self.orders.find_all() if order.user_id == self.user.id]

    def active_orders(self) -> list[Order]:
        return [order for order in self.orders.find_all() if order.status is not OrderStatus.PICKED_UP]

    def close(self) -> None:
        for observer in self.subject.observers:
            self.subject.detach(observer)
        for repo in (self.menu, self.orders):
            close = getattr(repo, "close", None)
            if close is not None:
                close()


def create_session(
    storage: str = STORAGE_BACKEND,
    db_path: str = DB_PATH,
    pricing: str = DEFAULT_PRICING,
    user: User | None = None,
    clock: Clock = datetime.now,
) -> OrderingSession:
    """Build a session from configuration, seeding an empty menu."""
    menu_repo, order_repo = build_repositories(storage, db_path)
    if not menu_repo.find_all():
        for item in seed_menu():
            menu_repo.save(item)

    subject = OrderSubject()
    subject.attach(LoggingOrderObserver())
    session = OrderingSession(
        user=user or default_user(),
        menu=menu_repo,
        orders=order_repo,
        pricing=pricing_strategy_for(pricing),
        subject=subject,
        clock=clock,
    )
    logger.info("Session started", storage=storage, pricing=session.pricing.name, user_id=session.user.id)
    return session
