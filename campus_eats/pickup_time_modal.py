"""Pickup time entry modal screen."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from campus_eats.errors import PickupTimeError
from campus_eats.ordering import default_pickup_time, parse_pickup_time

_MAX_INPUT_LENGTH = 25


class PickupTimeModal(ModalScreen[datetime | None]):
    """Ask when the order will be collected; dismisses with the parsed time or None."""

    CSS = """
    PickupTimeModal {
        align: center middle;
    }

    #pickup-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        padding: 1 2;
    }

    #pickup-error {
        color: #ffb3b3;
    }
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        super().__init__()
        self.clock = clock
        self.value = ""
        self.error = ""

    def compose(self) -> ComposeResult:
        default = default_pickup_time(self.clock())
        with Container(id="pickup-dialog"):
            yield Static(f"Pickup time (HH:MM or ISO date-time, empty for {default:%H:%M})")
            yield Static(id="pickup-value")
            yield Static(id="pickup-error")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        event.stop()
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
        elif event.key == "enter":
            self._submit()
        elif event.key == "backspace":
            self.value = self.value[:-1]
            self._check_draft()
        elif event.is_printable and event.character and len(self.value) < _MAX_INPUT_LENGTH:
            self.value += event.character
            self._check_draft()

    def _check_draft(self) -> None:
        """Only flag obviously bad drafts; partial input like ``12:`` stays quiet until submit."""
        self.error = ""
        if self.value and not set(self.value) <= set("0123456789:-T+"):
            try:
                parse_pickup_time(self.value, self.clock())
            except PickupTimeError as exc:
                self.error = str(exc)
        self._refresh_content()

    def _submit(self) -> None:
        now = self.clock()
        if not self.value.strip():
            self.dismiss(default_pickup_time(now))
            return
        try:
            pickup = parse_pickup_time(self.value, now)
        except PickupTimeError as exc:
            self.error = str(exc)
            self._refresh_content()
            return
        self.dismiss(pickup)

    def _refresh_content(self) -> None:
        self.query_one("#pickup-value", Static).update(Text(f"> {self.value}"))
        self.query_one("#pickup-error", Static).update(Text(self.error))
