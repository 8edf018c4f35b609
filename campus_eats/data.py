"""Seed menu data and menu filtering."""

from __future__ import annotations

from typing import Iterable

from campus_eats.constant import DEFAULT_USER, DIET_TAGS, MENU_SEED
from campus_eats.models import MenuItem, Role, User

__all__ = ["DIET_TAGS", "categories", "default_user", "filter_menu", "seed_menu"]


def seed_menu() -> list[MenuItem]:
    """Build fresh MenuItem instances from the static seed rows."""
    return [
        MenuItem(
            id=str(row["id"]),
            name=str(row["name"]),
            price=str(row["price"]),
            category=str(row["category"]),
            tags=frozenset(row.get("tags", [])),  # type: ignore[arg-type]
            available=bool(row.get("available", True)),
        )
        for row in MENU_SEED
    ]


def default_user() -> User:
    return User(id=DEFAULT_USER["id"], name=DEFAULT_USER["name"], role=Role(DEFAULT_USER["role"]))


def categories(items: Iterable[MenuItem]) -> list[str]:
    """Distinct categories in first-seen order."""
    seen: list[str] = []
    for item in items:
        if item.category not in seen:
            seen.append(item.category)
    return seen


def filter_menu(
    items: Iterable[MenuItem],
    category: str | None = None,
    tag: str | None = None,
    query: str = "",
) -> list[MenuItem]:
    """Keep items in ``category`` carrying ``tag`` whose name contains ``query`` (case-insensitive)."""
    wanted_tag = tag.strip().upper() if tag else None
    q = query.strip().lower()
    results = []
    for item in items:
        if category is not None and item.category != category:
            continue
        if wanted_tag is not None and wanted_tag not in item.tags:
            continue
        if q and q not in item.name.lower():
            continue
        results.append(item)
    return results
