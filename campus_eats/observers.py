"""Publish/subscribe for order status transitions."""

from __future__ import annotations

from abc import ABC, abstractmethod

import structlog

from campus_eats.models import OrderStatus

logger = structlog.get_logger(__name__)


class OrderObserver(ABC):
    @abstractmethod
    def on_status_changed(self, order_id: str, status: OrderStatus) -> None:
        """React to ``order_id`` entering ``status``."""


class OrderSubject:
    """Delivers status changes to attached observers, synchronously and in attachment order."""

    def __init__(self) -> None:
        self._observers: list[OrderObserver] = []

    @property
    def observers(self) -> tuple[OrderObserver, ...]:
        return tuple(self._observers)

    def attach(self, observer: OrderObserver) -> None:
        if any(existing is observer for existing in self._observers):
            return
        self._observers.append(observer)

    def detach(self, observer: OrderObserver) -> None:
        self._observers = [existing for existing in self._observers if existing is not observer]

    def notify(self, order_id: str, status: OrderStatus) -> int:
        """Broadcast a transition and return how many observers handled it.

        A failing observer is logged and skipped; the rest still get the event.
        """
        delivered = 0
        for observer in list(self._observers):
            try:
                observer.on_status_changed(order_id, status)
            except Exception:
                logger.exception(
                    "Order observer failed",
                    observer=type(observer).__name__,
                    order_id=order_id,
                    status=getattr(status, "value", status),
                )
                continue
            delivered += 1
        return delivered


class LoggingOrderObserver(OrderObserver):
    """Writes one log record per status transition."""

    def __init__(self, log: structlog.stdlib.BoundLogger | None = None) -> None:
        self.log = log or logger

    def on_status_changed(self, order_id: str, status: OrderStatus) -> None:
        self.log.info("Order status changed", order_id=order_id, status=getattr(status, "value", status))
