"""Contract tests shared by the in-memory and SQLite repositories."""

from datetime import datetime
from decimal import Decimal

import pytest

from campus_eats.models import CartItem, MenuItem, Order, OrderStatus
from campus_eats.persistence import SqliteMenuRepository, SqliteOrderRepository
from campus_eats.repositories import (
    InMemoryMenuRepository,
    InMemoryOrderRepository,
    MenuRepository,
    OrderRepository,
    build_repositories,
)

PICKUP = datetime(2026, 10, 18, 12, 30)


def _item(item_id, price="3.50", available=True, **overrides):
    fields = {"id": item_id, "name": f"Item {item_id}", "price": price, "category": "Mains", "available": available}
    fields.update(overrides)
    return MenuItem(**fields)


def _order(order_id, status=OrderStatus.RECEIVED, items=(CartItem("m1", 2),)):
    return Order(id=order_id, user_id="u1", items=items, pickup_time=PICKUP, status=status, total=Decimal("7.00"))


@pytest.fixture(params=["memory", "sqlite"])
def menu_repo(request):
    if request.param == "memory":
        yield InMemoryMenuRepository()
        return
    repo = SqliteMenuRepository(":memory:")
    yield repo
    repo.close()


@pytest.fixture(params=["memory", "sqlite"])
def order_repo(request):
    if request.param == "memory":
        yield InMemoryOrderRepository()
        return
    repo = SqliteOrderRepository(":memory:")
    yield repo
    repo.close()


class TestMenuRepository:
    def test_save_new_id_grows_find_all(self, menu_repo):
        menu_repo.save(_item("m1"))
        before = len(menu_repo.find_all())
        menu_repo.save(_item("m2"))
        assert len(menu_repo.find_all()) == before + 1

    def test_save_existing_id_replaces_in_place(self, menu_repo):
        menu_repo.save(_item("m1"))
        menu_repo.save(_item("m2"))
        menu_repo.save(_item("m1", price="4.25", name="Renamed", tags=frozenset({"VEG"})))

        items = menu_repo.find_all()
        assert [item.id for item in items] == ["m1", "m2"]
        assert items[0].name == "Renamed"
        assert items[0].price == Decimal("4.25")
        assert items[0].tags == frozenset({"VEG"})

    def test_find_by_id(self, menu_repo):
        menu_repo.save(_item("m1", tags=frozenset({"HALAL", "VEG"})))
        found = menu_repo.find_by_id("m1")
        assert found == _item("m1", tags=frozenset({"HALAL", "VEG"}))
        assert menu_repo.find_by_id("missing") is None

    def test_toggle_availability(self, menu_repo):
        menu_repo.save(_item("m1"))
        menu_repo.toggle_availability("m1", False)
        assert menu_repo.find_by_id("m1").available is False
        menu_repo.toggle_availability("m1", True)
        assert menu_repo.find_by_id("m1").available is True

    def test_toggle_unknown_id_is_noop(self, menu_repo):
        menu_repo.save(_item("m1"))
        menu_repo.toggle_availability("ghost", False)
        assert menu_repo.find_all() == [_item("m1")]

    def test_reads_are_snapshots(self, menu_repo):
        menu_repo.save(_item("m1"))
        items = menu_repo.find_all()
        items[0].available = False
        items.append(_item("m9"))
        menu_repo.find_by_id("m1").name = "Changed"
        assert menu_repo.find_all() == [_item("m1")]

    def test_saved_instance_is_not_aliased(self, menu_repo):
        item = _item("m1")
        menu_repo.save(item)
        item.price = Decimal("99")
        assert menu_repo.find_by_id("m1").price == Decimal("3.50")


class TestOrderRepository:
    def test_save_and_find_by_id(self, order_repo):
        order_repo.save(_order("o1"))
        found = order_repo.find_by_id("o1")
        assert found == _order("o1")
        assert order_repo.find_by_id("o2") is None

    def test_save_existing_id_upserts(self, order_repo):
        order_repo.save(_order("o1"))
        order_repo.save(_order("o2"))
        order_repo.save(_order("o1", status=OrderStatus.READY, items=(CartItem("m3", 1), CartItem("m1", 1))))

        orders = order_repo.find_all()
        assert [order.id for order in orders] == ["o1", "o2"]
        assert orders[0].status is OrderStatus.READY
        assert orders[0].items == (CartItem("m3", 1), CartItem("m1", 1))

    def test_find_by_status_keeps_insertion_order(self, order_repo):
        order_repo.save(_order("o1"))
        order_repo.save(_order("o2", status=OrderStatus.READY))
        order_repo.save(_order("o3"))
        assert [order.id for order in order_repo.find_by_status(OrderStatus.RECEIVED)] == ["o1", "o3"]
        assert [order.id for order in order_repo.find_by_status("READY")] == ["o2"]
        assert order_repo.find_by_status(OrderStatus.PICKED_UP) == []

    def test_update_status_bypasses_lifecycle(self, order_repo):
        order_repo.save(_order("o1"))
        order_repo.update_status("o1", OrderStatus.PICKED_UP)
        assert order_repo.find_by_id("o1").status is OrderStatus.PICKED_UP
        order_repo.update_status("o1", OrderStatus.RECEIVED)
        assert order_repo.find_by_id("o1").status is OrderStatus.RECEIVED

    def test_update_status_unknown_id_is_noop(self, order_repo):
        order_repo.save(_order("o1"))
        order_repo.update_status("ghost", OrderStatus.READY)
        assert order_repo.find_all() == [_order("o1")]

    def test_reads_are_snapshots(self, order_repo):
        order_repo.save(_order("o1"))
        order_repo.find_by_id("o1").advance_status()
        order_repo.find_all()[0].items[0].quantity = 40
        assert order_repo.find_by_id("o1") == _order("o1")


class TestContracts:
    def test_incomplete_menu_repository_is_rejected(self):
        class HalfMenu(MenuRepository):
            def find_all(self):
                return []

        with pytest.raises(TypeError):
            HalfMenu()

    def test_incomplete_order_repository_is_rejected(self):
        class HalfOrders(OrderRepository):
            def save(self, order):
                pass

        with pytest.raises(TypeError):
            HalfOrders()


class TestBuildRepositories:
    def test_memory_backend(self):
        menu, orders = build_repositories("memory")
        assert isinstance(menu, InMemoryMenuRepository)
        assert isinstance(orders, InMemoryOrderRepository)

    def test_sqlite_backend(self, tmp_path):
        menu, orders = build_repositories("SQLite", str(tmp_path / "eats.db"))
        try:
            assert isinstance(menu, SqliteMenuRepository)
            assert isinstance(orders, SqliteOrderRepository)
        finally:
            menu.close()
            orders.close()

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="postgres"):
            build_repositories("postgres")
