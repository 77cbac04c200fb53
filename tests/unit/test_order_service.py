"""
OrderService placement, checkout and edits.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from core.models import (
    Order,
    OrderNotificationMessage,
    OrderStatus,
    Product,
    StockUpdateMessage,
)
from exceptions import InsufficientStockError, ResourceNotFoundError, ValidationError
from services import CartService, OrderService
from tests.factories.model_factories import make_customer, make_order, make_product


@pytest.fixture
def cart_service(fake_storage, fake_cart):
    return CartService(fake_storage, cart=fake_cart)


@pytest.fixture
def orders(fake_storage, cart_service):
    return OrderService(fake_storage, cart_service)


def stored_product(storage, product_id):
    return storage.get_entity(Product, "Product", product_id)


class TestCreateOrder:
    def test_places_order_and_draws_down_stock(self, orders, fake_storage):
        fake_storage.seed(
            make_customer(username="ada", name="Ada", surname="Lovelace"),
            make_product(product_id="p-1", product_name="Lamp", price=Decimal("12.50"), stock_available=10),
        )
        order_date = datetime(2025, 5, 1, 9, 0)

        order = orders.create_order("ada", "p-1", 3, order_date)

        assert order.total_price == Decimal("37.50")
        assert order.unit_price == Decimal("12.50")
        assert order.order_date.tzinfo == timezone.utc
        assert order.status == OrderStatus.SUBMITTED.value
        assert stored_product(fake_storage, "p-1").stock_available == 7
        assert fake_storage.get_entity(Order, "Order", order.order_id) is not None

    def test_sends_notification_and_stock_update(self, orders, fake_storage):
        fake_storage.seed(
            make_customer(username="ada", name="Ada", surname="Lovelace"),
            make_product(product_id="p-1", product_name="Lamp", price=Decimal("2.00"), stock_available=5),
        )
        order = orders.create_order("ada", "p-1", 2, datetime.now(timezone.utc))

        notification, = fake_storage.messages_for("order-notifications")
        assert isinstance(notification, OrderNotificationMessage)
        assert notification.order_id == order.order_id
        assert notification.customer_name == "Ada Lovelace"
        assert notification.total_price == 4.0

        stock, = fake_storage.messages_for("stock-updates")
        assert isinstance(stock, StockUpdateMessage)
        assert (stock.previous_stock, stock.new_stock) == (5, 3)
        assert stock.update_by == "Order System"

    def test_insufficient_stock(self, orders, fake_storage):
        fake_storage.seed(
            make_customer(username="ada"),
            make_product(product_id="p-1", product_name="Lamp", stock_available=1),
        )
        with pytest.raises(InsufficientStockError) as exc_info:
            orders.create_order("ada", "p-1", 2, datetime.now(timezone.utc))

        assert str(exc_info.value) == "Insufficient stock. Available: 1"
        assert exc_info.value.available == 1
        assert not fake_storage.get_all_entities(Order)
        assert not fake_storage.sent

    @pytest.mark.parametrize("customer_id,product_id", [("ghost", "p-1"), ("ada", "missing"), ("", "")])
    def test_unknown_customer_or_product(self, orders, fake_storage, customer_id, product_id):
        fake_storage.seed(make_customer(username="ada"), make_product(product_id="p-1"))
        with pytest.raises(ValidationError, match="Invalid customer or product selected."):
            orders.create_order(customer_id, product_id, 1, datetime.now(timezone.utc))


class TestCreateFromCart:
    def test_one_order_per_line_then_cart_cleared(self, orders, fake_storage, fake_cart):
        fake_storage.seed(
            make_product(product_id="p-1", price=Decimal("3.00"), stock_available=5),
            make_product(product_id="p-2", price=Decimal("1.50"), stock_available=5),
        )
        fake_cart.add("ada", "p-1", 2)
        fake_cart.add("ada", "p-2", 4)
        fake_cart.add("bob", "p-1", 1)

        created = orders.create_from_cart("ada")

        assert len(created) == 2
        placed = {o.product_id: o for o in fake_storage.get_all_entities(Order)}
        assert placed["p-1"].total_price == Decimal("6.00")
        assert placed["p-2"].total_price == Decimal("6.00")
        assert all(o.customer_id == "ada" and o.username == "ada" for o in placed.values())
        assert stored_product(fake_storage, "p-2").stock_available == 1
        assert len(fake_storage.messages_for("order-notifications")) == 2
        assert not fake_storage.messages_for("stock-updates")
        assert [r.customer_username for r in fake_cart.rows.values()] == ["bob"]

    def test_line_with_zero_quantity_skipped(self, orders, fake_storage, fake_cart):
        fake_storage.seed(
            make_product(product_id="p-1", price=Decimal("2.00"), stock_available=5),
            make_product(product_id="p-2", stock_available=5),
        )
        fake_cart.add("ada", "p-1", 1)
        fake_cart.add("ada", "p-2", 0)

        created = orders.create_from_cart("ada")

        order, = fake_storage.get_all_entities(Order)
        assert created == [order.order_id]
        assert order.product_id == "p-1"
        assert stored_product(fake_storage, "p-2").stock_available == 5
        assert not fake_cart.rows

    def test_empty_cart(self, orders):
        with pytest.raises(ValidationError, match="Your cart is empty"):
            orders.create_from_cart("ada")

    def test_insufficient_stock_keeps_earlier_orders_and_cart(self, orders, fake_storage, fake_cart):
        fake_storage.seed(
            make_product(product_id="p-1", stock_available=5),
            make_product(product_id="p-2", product_name="Chair", stock_available=1),
        )
        fake_cart.add("ada", "p-1", 1)
        fake_cart.add("ada", "p-2", 3)

        with pytest.raises(InsufficientStockError, match="Insufficient stock for Chair. Available: 1"):
            orders.create_from_cart("ada")

        assert len(fake_storage.get_all_entities(Order)) == 1
        assert len(fake_cart.rows) == 2


class TestReadOrders:
    def test_customer_sees_own_orders(self, orders, fake_storage):
        fake_storage.seed(make_order(username="ada"), make_order(username="bob"))
        assert [o.username for o in orders.list_orders("ada", is_admin=False)] == ["ada"]
        assert len(orders.list_orders("root", is_admin=True)) == 2

    def test_my_orders_newest_first(self, orders, fake_storage):
        old = make_order(username="ada", order_date=datetime(2024, 1, 1, tzinfo=timezone.utc))
        new = make_order(username="ada", order_date=datetime(2025, 1, 1, tzinfo=timezone.utc))
        fake_storage.seed(old, new)
        assert [o.order_id for o in orders.my_orders("ada")] == [new.order_id, old.order_id]

    def test_get_missing_order(self, orders):
        with pytest.raises(ResourceNotFoundError):
            orders.get_order("nope")

    def test_product_price_lookup(self, orders, fake_storage):
        fake_storage.seed(make_product(product_id="p-1", product_name="Lamp",
                                       price=Decimal("9.99"), stock_available=3))
        assert orders.get_product_price("p-1") == {
            "success": True, "price": 9.99, "stock": 3, "productName": "Lamp",
        }
        assert orders.get_product_price("missing") == {"success": False}


class TestUpdateOrder:
    def test_total_recomputed_when_quantity_changes(self, orders, fake_storage):
        order = make_order(quantity=1, unit_price=Decimal("5.00"))
        fake_storage.seed(order)

        updated = orders.update_order(order.order_id, datetime(2025, 2, 2), 3, Decimal("5.00"),
                                      OrderStatus.PROCESSING.value)

        assert updated.total_price == Decimal("15.00")
        assert updated.status == "Processing"
        assert fake_storage.updates[-1].total_price == Decimal("15.00")

    def test_total_kept_when_price_and_quantity_unchanged(self, orders, fake_storage):
        order = make_order(quantity=2, unit_price=Decimal("5.00"), total_price=Decimal("9.00"))
        fake_storage.seed(order)
        updated = orders.update_order(order.order_id, order.order_date, 2, Decimal("5.00"), order.status)
        assert updated.total_price == Decimal("9.00")

    def test_delete(self, orders, fake_storage):
        order = make_order()
        fake_storage.seed(order)
        orders.delete_order(order.order_id)
        assert not fake_storage.get_all_entities(Order)
