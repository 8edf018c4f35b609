"""Rendering helpers for menu rows, cart lines and the order board."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from rich.text import Text

from campus_eats.models import CartItem, MenuItem, Order, OrderStatus

UNKNOWN_ITEM_NAME = "Unknown"

_STATUS_STYLES: dict[OrderStatus, str] = {
    OrderStatus.RECEIVED: "bold #ffffff on #2f6db5",
    OrderStatus.PREPARING: "bold #0b1f0f on #e0b040",
    OrderStatus.READY: "bold #0b1f0f on #5fbf72",
    OrderStatus.PICKED_UP: "dim",
}

_TAG_STYLES: dict[str, str] = {
    "HALAL": "bold #ffffff on #1f7a5a",
    "VEG": "bold #0b1f0f on #8fd694",
    "VEGAN": "bold #0b1f0f on #5fbf72",
}


def format_price(amount: Decimal) -> str:
    return f"{amount:.2f}"


def status_badge(status: OrderStatus) -> Text:
    return Text(f" {status.value} ", style=_STATUS_STYLES[status])


def format_tags(tags: Iterable[str]) -> Text:
    """Render tags as compact badges, diet tags first."""
    text = Text()
    ordered = sorted(tags, key=lambda tag: (tag not in _TAG_STYLES, tag))
    for idx, tag in enumerate(ordered):
        if idx > 0:
            text.append(" ")
        text.append(tag, style=_TAG_STYLES.get(tag, "white"))
    return text


def format_menu_item(item: MenuItem) -> Text:
    text = Text()
    name_style = "white" if item.available else "dim strike"
    text.append(item.name, style=name_style)
    text.append(f"  {format_price(item.price)}")
    if item.tags:
        text.append("  ")
        text.append_text(format_tags(item.tags))
    if not item.available:
        text.append("  (sold out)", style="dim")
    return text


def item_name(menu_item_id: str, menu: Sequence[MenuItem]) -> str:
    for item in menu:
        if item.id == menu_item_id:
            return item.name
    return UNKNOWN_ITEM_NAME


def format_cart_line(line: CartItem, menu: Sequence[MenuItem]) -> Text:
    text = Text()
    text.append(f"{line.quantity} x ")
    text.append(item_name(line.menu_item_id, menu))
    return text


def format_order(order: Order, menu: Sequence[MenuItem]) -> Text:
    """One order on the board: id, status badge, pickup time, total and lines."""
    text = Text()
    text.append(order.id, style="bold")
    text.append(" ")
    text.append_text(status_badge(order.status))
    text.append(f"  pickup {order.pickup_time:%H:%M}  total {format_price(order.total)}")
    summary = ", ".join(f"{line.quantity} x {item_name(line.menu_item_id, menu)}" for line in order.items)
    if summary:
        text.append(f"\n      {summary}", style="white")
    return text
