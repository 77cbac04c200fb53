"""
CartService against the in-memory cart table and storage.
"""

from decimal import Decimal

import pytest

from services import CartService
from tests.factories.model_factories import make_product


@pytest.fixture
def cart_service(fake_storage, fake_cart):
    return CartService(fake_storage, cart=fake_cart)


class TestAddToCart:
    def test_new_line(self, cart_service, fake_cart):
        assert cart_service.add_to_cart("ada", "p-1", 2)
        assert [(r.product_id, r.quantity) for r in fake_cart.rows.values()] == [("p-1", 2)]

    def test_same_product_merges(self, cart_service, fake_cart):
        cart_service.add_to_cart("ada", "p-1", 2)
        cart_service.add_to_cart("ada", "p-1", 3)
        assert len(fake_cart.rows) == 1
        assert cart_service.get_cart_item_count("ada") == 5

    def test_users_do_not_share_rows(self, cart_service, fake_cart):
        cart_service.add_to_cart("ada", "p-1", 1)
        cart_service.add_to_cart("bob", "p-1", 1)
        assert len(fake_cart.rows) == 2

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_rejected(self, cart_service, fake_cart, quantity):
        assert cart_service.add_to_cart("ada", "p-1", quantity) is False
        assert not fake_cart.rows

    def test_negative_quantity_cannot_shrink_existing_line(self, cart_service, fake_cart):
        cart_service.add_to_cart("ada", "p-1", 3)
        assert cart_service.add_to_cart("ada", "p-1", -3) is False
        assert cart_service.get_cart_item_count("ada") == 3

    def test_database_failure_reported_as_false(self, cart_service, fake_cart):
        fake_cart.fail = True
        assert cart_service.add_to_cart("ada", "p-1", 1) is False


class TestChangeCart:
    def test_update_quantity(self, cart_service, fake_cart):
        row = fake_cart.add("ada", "p-1", 1)
        assert cart_service.update_quantity(row.id, "ada", 4)
        assert fake_cart.rows[row.id].quantity == 4

    def test_zero_quantity_removes(self, cart_service, fake_cart):
        row = fake_cart.add("ada", "p-1", 1)
        assert cart_service.update_quantity(row.id, "ada", 0)
        assert row.id not in fake_cart.rows

    def test_other_users_row_untouched(self, cart_service, fake_cart):
        row = fake_cart.add("bob", "p-1", 1)
        assert cart_service.update_quantity(row.id, "ada", 5) is False
        assert cart_service.remove_from_cart(row.id, "ada") is False
        assert fake_cart.rows[row.id].quantity == 1

    def test_remove(self, cart_service, fake_cart):
        row = fake_cart.add("ada", "p-1", 1)
        assert cart_service.remove_from_cart(row.id, "ada")
        assert not fake_cart.rows

    def test_clear_only_own_rows(self, cart_service, fake_cart):
        fake_cart.add("ada", "p-1", 1)
        fake_cart.add("ada", "p-2", 1)
        fake_cart.add("bob", "p-1", 1)
        assert cart_service.clear_cart("ada")
        assert [r.customer_username for r in fake_cart.rows.values()] == ["bob"]

    def test_clear_failure(self, cart_service, fake_cart):
        fake_cart.fail = True
        assert cart_service.clear_cart("ada") is False


class TestReadCart:
    def test_items_joined_with_products(self, cart_service, fake_storage, fake_cart):
        product = make_product(product_id="p-1", price=Decimal("4.25"))
        fake_storage.seed(product)
        fake_cart.add("ada", "p-1", 2)

        items = cart_service.get_cart_items("ada")

        assert len(items) == 1
        assert items[0].product_name == product.product_name
        assert items[0].total_price == Decimal("8.50")
        assert cart_service.get_cart_total(items) == Decimal("8.50")

    def test_rows_without_product_skipped(self, cart_service, fake_storage, fake_cart):
        fake_storage.seed(make_product(product_id="p-1"))
        fake_cart.add("ada", "p-1", 1)
        fake_cart.add("ada", None, 1)
        fake_cart.add("ada", "deleted-product", 1)
        assert [i.product_id for i in cart_service.get_cart_items("ada")] == ["p-1"]

    def test_empty_total(self, cart_service):
        assert cart_service.get_cart_total([]) == Decimal("0")
