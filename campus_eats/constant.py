"""Editable static menu and session defaults."""

from __future__ import annotations

DIET_TAGS: tuple[str, ...] = ("HALAL", "VEG", "VEGAN")

# Raw seed rows consumed by campus_eats.data (which wraps them into MenuItem instances).
MENU_SEED: list[dict[str, object]] = [
    {"id": "m1", "name": "Chicken Shawarma Wrap", "price": "6.50", "category": "Mains", "tags": ["HALAL"]},
    {"id": "m2", "name": "Falafel Bowl", "price": "5.75", "category": "Mains", "tags": ["VEG", "VEGAN", "HALAL"]},
    {"id": "m3", "name": "Margherita Flatbread", "price": "5.25", "category": "Mains", "tags": ["VEG"]},
    {"id": "m4", "name": "Beef Burger", "price": "7.00", "category": "Mains", "tags": []},
    {"id": "m5", "name": "Tomato Soup", "price": "3.25", "category": "Soups", "tags": ["VEG", "VEGAN"]},
    {"id": "m6", "name": "Chicken Noodle Soup", "price": "3.75", "category": "Soups", "tags": ["HALAL"]},
    {"id": "m7", "name": "Garden Salad", "price": "4.00", "category": "Sides", "tags": ["VEG", "VEGAN"]},
    {"id": "m8", "name": "Fries", "price": "2.25", "category": "Sides", "tags": ["VEG", "VEGAN"]},
    {"id": "m9", "name": "Chocolate Brownie", "price": "2.50", "category": "Desserts", "tags": ["VEG"]},
    {"id": "m10", "name": "Fruit Cup", "price": "2.00", "category": "Desserts", "tags": ["VEG", "VEGAN", "HALAL"]},
    {"id": "m11", "name": "Iced Tea", "price": "1.75", "category": "Drinks", "tags": ["VEG", "VEGAN", "HALAL"]},
    {"id": "m12", "name": "Flat White", "price": "3.00", "category": "Drinks", "tags": ["VEG"], "available": False},
]

# Single pre-set active user; there is no sign-in.
DEFAULT_USER: dict[str, str] = {"id": "u1", "name": "Campus Student", "role": "STUDENT"}
