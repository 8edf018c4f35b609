"""Errors raised when an ordering action cannot be carried out."""

from __future__ import annotations


class CampusEatsError(Exception):
    """Base class for user-facing ordering failures."""


class EmptyCartError(CampusEatsError):
    pass


class OrderNotFoundError(CampusEatsError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order {order_id!r} does not exist")
        self.order_id = order_id


class PickupTimeError(CampusEatsError, ValueError):
    pass


class UnknownPricingError(CampusEatsError, ValueError):
    pass
