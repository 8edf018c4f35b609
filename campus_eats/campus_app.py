"""Main Textual app class."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

import structlog
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.widgets import Header, Static

from campus_eats.constant import DIET_TAGS
from campus_eats.data import categories, filter_menu
from campus_eats.errors import CampusEatsError
from campus_eats.models import MenuItem, OrderStatus
from campus_eats.observers import OrderObserver
from campus_eats.ordering import OrderingSession
from campus_eats.pickup_time_modal import PickupTimeModal
from campus_eats.pricing import ComboPricingStrategy, SimplePricingStrategy
from campus_eats.rendering import format_cart_line, format_menu_item, format_order, format_price

logger = structlog.get_logger(__name__)


class BoardRefreshObserver(OrderObserver):
    """Forwards status changes to a UI callback."""

    def __init__(self, on_change: Callable[[str, OrderStatus], None]) -> None:
        self.on_change = on_change

    def on_status_changed(self, order_id: str, status: OrderStatus) -> None:
        self.on_change(order_id, status)


class CampusOrderApp(App):
    """A Textual app for browsing the campus menu, filling a cart and tracking orders."""

    TITLE = "Campus Eats"
    SUB_TITLE = "Order ahead, pick up on time"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #menu-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #side-pane {
        width: 2fr;
    }

    #cart-pane {
        height: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #orders-pane {
        height: 1fr;
        border: round $secondary;
        padding: 1;
    }

    #filter-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #menu-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list, #orders-list {
        height: 1fr;
        padding: 0 1;
    }

    #status-line {
        height: 1;
        padding: 0 1;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_text = reactive("")
    selected_index = reactive(0)
    order_selected_index = reactive(None)

    BINDINGS = [
        ("up", "move_menu(-1)", "Previous item"),
        ("down", "move_menu(1)", "Next item"),
        ("enter", "add_selected", "Add to cart"),
        ("backspace", "backspace_search", "Delete search char"),
        Binding("ctrl+s", "checkout", "Place order", priority=True),
        ("ctrl+c", "cancel_search", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, session: OrderingSession) -> None:
        super().__init__()
        self.session = session
        self.category: str | None = None
        self.tag: str | None = None
        self.system_status = ""
        self._observer = BoardRefreshObserver(self._on_order_status_changed)

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="menu-pane"):
                yield Static(id="filter-bar")
                yield Static(id="menu-list")
            with Vertical(id="side-pane"):
                with Vertical(id="cart-pane"):
                    yield Static("Cart", classes="pane-title")
                    yield Static("(cart is empty)", id="cart-list")
                with Vertical(id="orders-pane"):
                    yield Static(self._orders_title(), id="orders-title", classes="pane-title")
                    yield Static("(no orders yet)", id="orders-list")
        yield Static(id="status-line")

    def on_mount(self) -> None:
        self.session.subject.attach(self._observer)
        self.system_status = f"Hello {self.session.user.name}"
        self._refresh_all()

    def _orders_title(self) -> str:
        if self.session.user.is_staff:
            return "Kitchen board  [ ] select  n advance  v sold out"
        return "Your orders"

    def on_unmount(self) -> None:
        self.session.subject.detach(self._observer)

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, PickupTimeModal):
            return
        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        if self.input_state == "search":
            self.search_text += event.character
            self.selected_index = 0
            self._refresh_menu()
            event.stop()
            return

        handlers: dict[str, Callable[[], None]] = {
            "/": self._start_search,
            "j": lambda: self.action_move_menu(1),
            "k": lambda: self.action_move_menu(-1),
            "a": self.action_add_selected,
            "x": self._remove_selected_from_cart,
            "c": self._cycle_category,
            "t": self._cycle_tag,
            "p": self._toggle_pricing,
            "v": self._toggle_selected_availability,
            "[": lambda: self._move_order_selection(-1),
            "]": lambda: self._move_order_selection(1),
            "n": self._advance_selected_order,
        }
        handler = handlers.get(event.character.lower() if event.character.isalpha() else event.character)
        if handler is None:
            return
        handler()
        event.stop()

    def action_move_menu(self, delta: int) -> None:
        results = self._filtered_menu()
        if not results:
            self.selected_index = 0
        else:
            self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_menu()

    def action_add_selected(self) -> None:
        item = self._selected_menu_item()
        if item is None:
            return
        if not item.available:
            self._set_status(f"{item.name} is sold out")
            return
        self.session.add_to_cart(item.id)
        self._set_status(f"Added {item.name}")
        self._refresh_cart()

    def action_backspace_search(self) -> None:
        if self.input_state != "search" or not self.search_text:
            return
        self.search_text = self.search_text[:-1]
        self.selected_index = 0
        self._refresh_menu()

    def action_cancel_search(self) -> None:
        if self.input_state == "normal":
            return
        self.input_state = "normal"
        self.search_text = ""
        self.selected_index = 0
        self._refresh_menu()

    def action_checkout(self) -> None:
        if isinstance(self.screen, PickupTimeModal):
            return
        if self.session.cart.is_empty():
            self._set_status("Nothing to order")
            return
        self.push_screen(PickupTimeModal(clock=self.session.clock), self._place_order)

    def _place_order(self, pickup_time: datetime | None) -> None:
        if pickup_time is None:
            self._set_status("Checkout cancelled")
            return
        try:
            order = self.session.place_order(pickup_time)
        except CampusEatsError as exc:
            self._set_status(str(exc))
            return
        self._set_status(f"Placed {order.id}, total {format_price(order.total)}")
        self._refresh_all()

    def _start_search(self) -> None:
        self.input_state = "search"
        self.search_text = ""
        self.selected_index = 0
        self._refresh_menu()

    def _cycle_category(self) -> None:
        options: list[str | None] = [None, *categories(self.session.menu_items())]
        current = options.index(self.category) if self.category in options else 0
        self.category = options[(current + 1) % len(options)]
        self.selected_index = 0
        self._refresh_menu()

    def _cycle_tag(self) -> None:
        options: list[str | None] = [None, *DIET_TAGS]
        current = options.index(self.tag) if self.tag in options else 0
        self.tag = options[(current + 1) % len(options)]
        self.selected_index = 0
        self._refresh_menu()

    def _toggle_pricing(self) -> None:
        if isinstance(self.session.pricing, ComboPricingStrategy):
            self.session.set_pricing(SimplePricingStrategy())
        else:
            self.session.set_pricing(ComboPricingStrategy())
        self._set_status(f"Pricing: {self.session.pricing.name}")
        self._refresh_cart()

    def _remove_selected_from_cart(self) -> None:
        item = self._selected_menu_item()
        if item is None:
            return
        self.session.remove_from_cart(item.id)
        self._refresh_cart()

    def _toggle_selected_availability(self) -> None:
        item = self._selected_menu_item()
        if item is None:
            return
        available = self.session.toggle_availability(item.id)
        self._set_status(f"{item.name} is {'available' if available else 'sold out'}")
        self._refresh_menu()
        self._refresh_cart()

    def _advance_selected_order(self) -> None:
        orders = self.session.orders.find_all()
        if self.order_selected_index is None or not (0 <= self.order_selected_index < len(orders)):
            self._set_status("Select an order with [ or ]")
            return
        try:
            self.session.advance_order(orders[self.order_selected_index].id)
        except CampusEatsError as exc:
            self._set_status(str(exc))
        self._refresh_orders()

    def _on_order_status_changed(self, order_id: str, status: OrderStatus) -> None:
        self._set_status(f"{order_id} is now {status.value}")
        self._refresh_orders()

    def _filtered_menu(self) -> list[MenuItem]:
        return filter_menu(self.session.menu_items(), category=self.category, tag=self.tag, query=self.search_text)

    def _selected_menu_item(self) -> MenuItem | None:
        results = self._filtered_menu()
        if not results:
            return None
        if self.selected_index >= len(results):
            self.selected_index = 0
        return results[self.selected_index]

    def _move_order_selection(self, delta: int) -> None:
        total = len(self.session.orders.find_all())
        if not total:
            return
        if self.order_selected_index is None:
            self.order_selected_index = 0 if delta > 0 else total - 1
        else:
            self.order_selected_index = (self.order_selected_index + delta) % total
        self._refresh_orders()

    def _set_status(self, message: str) -> None:
        self.system_status = message
        logger.debug("ui_status", message=message)
        try:
            self.query_one("#status-line", Static).update(message)
        except NoMatches:
            return

    def _refresh_all(self) -> None:
        self._refresh_menu()
        self._refresh_cart()
        self._refresh_orders()
        self._set_status(self.system_status)

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_filter_bar(self) -> None:
        bar = self.query_one("#filter-bar", Static)
        text = Text()
        text.append(f"Category: {self.category or 'All'}  Tag: {self.tag or 'Any'}")
        if self.input_state == "search":
            text.append(f"\nSearch: {self.search_text}|", style="bold")
        else:
            text.append("\n/ search  c category  t tag  a add  x remove  p pricing  Ctrl+S order", style="dim")
        bar.update(text)

    def _refresh_menu(self) -> None:
        try:
            menu_widget = self.query_one("#menu-list", Static)
        except NoMatches:
            return
        self._refresh_filter_bar()

        results = self._filtered_menu()
        if not results:
            menu_widget.update("No results")
            return
        if self.selected_index >= len(results):
            self.selected_index = 0

        start, end = self._window_bounds(len(results), self._visible_rows(menu_widget), self.selected_index)
        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")
        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            lines.append("➤ " if idx == self.selected_index else "  ")
            lines.append_text(format_menu_item(results[idx]))
        if end < len(results):
            lines.append("\n⋮", style="dim")
        menu_widget.update(lines)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
        except NoMatches:
            return
        items = self.session.cart.get_items()
        if not items:
            cart_widget.update("(cart is empty)")
            return

        menu = self.session.menu_items()
        lines = Text()
        for idx, line in enumerate(items):
            if idx > 0:
                lines.append("\n")
            lines.append_text(format_cart_line(line, menu))
        lines.append(f"\n\nTotal ({self.session.pricing.name}): ", style="bold")
        lines.append(format_price(self.session.cart_total()), style="bold")
        cart_widget.update(lines)

    def _refresh_orders(self) -> None:
        try:
            orders_widget = self.query_one("#orders-list", Static)
        except NoMatches:
            return
        orders = self.session.orders.find_all()
        if not orders:
            self.order_selected_index = None
            orders_widget.update("(no orders yet)")
            return
        if self.order_selected_index is not None and self.order_selected_index >= len(orders):
            self.order_selected_index = len(orders) - 1

        menu = self.session.menu_items()
        lines = Text()
        for idx, order in enumerate(orders):
            if idx > 0:
                lines.append("\n")
            lines.append("➤ " if idx == self.order_selected_index else "  ")
            lines.append_text(format_order(order, menu))
        orders_widget.update(lines)
