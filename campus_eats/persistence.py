"""SQLite-backed menu and order repositories."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

import structlog

from campus_eats.models import CartItem, MenuItem, Order, OrderStatus
from campus_eats.repositories import MenuRepository, OrderRepository

logger = structlog.get_logger(__name__)

_MEMORY_DB = ":memory:"


def _connect(db_path: str) -> sqlite3.Connection:
    if db_path != _MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def _join_tags(tags: frozenset[str]) -> str:
    return ",".join(sorted(tags))


def _split_tags(raw: str) -> frozenset[str]:
    return frozenset(tag for tag in raw.split(",") if tag)


class _SqliteRepository:
    """Holds one connection for the repository lifetime so ``:memory:`` databases survive."""

    SCHEMA = ""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        self._conn = _connect(db_path)
        with self._conn:
            self._conn.executescript(self.SCHEMA)

    def close(self) -> None:
        self._conn.close()


class SqliteMenuRepository(_SqliteRepository, MenuRepository):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS menu_items (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL,
            price TEXT NOT NULL,
            category TEXT NOT NULL,
            tags TEXT NOT NULL DEFAULT '',
            available INTEGER NOT NULL DEFAULT 1
        );
    """

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> MenuItem:
        return MenuItem(
            id=row["id"],
            name=row["name"],
            price=row["price"],
            category=row["category"],
            tags=_split_tags(row["tags"]),
            available=bool(row["available"]),
        )

    def find_all(self) -> list[MenuItem]:
        rows = self._conn.execute("SELECT * FROM menu_items ORDER BY rowid").fetchall()
        return [self._row_to_item(row) for row in rows]

    def find_by_id(self, item_id: str) -> MenuItem | None:
        row = self._conn.execute("SELECT * FROM menu_items WHERE id = ?", (item_id,)).fetchone()
        return self._row_to_item(row) if row is not None else None

    def save(self, item: MenuItem) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO menu_items (id, name, price, category, tags, available)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    price = excluded.price,
                    category = excluded.category,
                    tags = excluded.tags,
                    available = excluded.available
                """,
                (item.id, item.name, str(item.price), item.category, _join_tags(item.tags), int(item.available)),
            )

    def toggle_availability(self, item_id: str, available: bool) -> None:
        with self._conn:
            cur = self._conn.execute(
                "UPDATE menu_items SET available = ? WHERE id = ?",
                (int(bool(available)), item_id),
            )
        if cur.rowcount == 0:
            logger.debug("Availability toggle for unknown menu item", item_id=item_id)


class SqliteOrderRepository(_SqliteRepository, OrderRepository):
    SCHEMA = """
        CREATE TABLE IF NOT EXISTS orders (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            status TEXT NOT NULL,
            pickup_time TEXT NOT NULL,
            total TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS order_items (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            order_id TEXT NOT NULL,
            line_index INTEGER NOT NULL,
            menu_item_id TEXT NOT NULL,
            quantity INTEGER NOT NULL,
            FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
        );

        CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
            ON order_items(order_id, line_index);

        CREATE INDEX IF NOT EXISTS idx_orders_status
            ON orders(status);
    """

    def _load(self, rows: list[sqlite3.Row]) -> list[Order]:
        orders = []
        for row in rows:
            lines = self._conn.execute(
                "SELECT menu_item_id, quantity FROM order_items WHERE order_id = ? ORDER BY line_index",
                (row["id"],),
            ).fetchall()
            orders.append(
                Order(
                    id=row["id"],
                    user_id=row["user_id"],
                    items=tuple(CartItem(line["menu_item_id"], line["quantity"]) for line in lines),
                    pickup_time=datetime.fromisoformat(row["pickup_time"]),
                    status=OrderStatus(row["status"]),
                    total=row["total"],
                )
            )
        return orders

    def save(self, order: Order) -> None:
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO orders (id, user_id, status, pickup_time, total)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    user_id = excluded.user_id,
                    status = excluded.status,
                    pickup_time = excluded.pickup_time,
                    total = excluded.total
                """,
                (order.id, order.user_id, order.status.value, order.pickup_time.isoformat(), str(order.total)),
            )
            self._conn.execute("DELETE FROM order_items WHERE order_id = ?", (order.id,))
            self._conn.executemany(
                "INSERT INTO order_items (order_id, line_index, menu_item_id, quantity) VALUES (?, ?, ?, ?)",
                [(order.id, idx, item.menu_item_id, item.quantity) for idx, item in enumerate(order.items)],
            )

    def find_by_id(self, order_id: str) -> Order | None:
        rows = self._conn.execute("SELECT * FROM orders WHERE id = ?", (order_id,)).fetchall()
        found = self._load(rows)
        return found[0] if found else None

    def find_by_status(self, status: OrderStatus) -> list[Order]:
        rows = self._conn.execute(
            "SELECT * FROM orders WHERE status = ? ORDER BY rowid",
            (OrderStatus(status).value,),
        ).fetchall()
        return self._load(rows)

    def find_all(self) -> list[Order]:
        return self._load(self._conn.execute("SELECT * FROM orders ORDER BY rowid").fetchall())

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        with self._conn:
            cur = self._conn.execute(
                "UPDATE orders SET status = ? WHERE id = ?",
                (OrderStatus(status).value, order_id),
            )
        if cur.rowcount == 0:
            logger.debug("Status update for unknown order", order_id=order_id)
