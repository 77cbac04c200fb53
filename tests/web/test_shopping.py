"""
Registration, login, cart and checkout through the HTTP surface.
"""

from decimal import Decimal

from core.models import Order, Product
from tests.factories.model_factories import make_customer, make_order, make_product, make_user
from tests.factories.web_helpers import csrf_from


class TestRegistration:
    def test_register_then_login(self, client, fake_users):
        token = csrf_from(client, "/login/register")
        response = client.post("/login/register", data={
            "csrf_token": token, "username": "newbie", "password": "secret123",
            "confirm_password": "secret123", "role": "Customer",
        }, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/login/login"
        assert fake_users.users["newbie"].password_hash.startswith("$2")

        page = client.get("/login/login")
        assert "Registration successful! Please login." in page.text

    def test_password_mismatch(self, client, fake_users):
        token = csrf_from(client, "/login/register")
        response = client.post("/login/register", data={
            "csrf_token": token, "username": "newbie", "password": "secret123",
            "confirm_password": "secret124",
        })
        assert "Passwords do not match." in response.text
        assert not fake_users.users

    def test_duplicate_username(self, client, fake_users):
        fake_users.add(make_user(username="taken"))
        token = csrf_from(client, "/login/register")
        response = client.post("/login/register", data={
            "csrf_token": token, "username": "taken", "password": "secret123",
            "confirm_password": "secret123",
        })
        assert "Username already exists. Please choose a different username." in response.text


class TestLogin:
    def test_bad_credentials(self, client, fake_users):
        fake_users.add(make_user(username="ada", password_hash="rightpw"))
        token = csrf_from(client)
        response = client.post("/login/login", data={
            "csrf_token": token, "username": "ada", "password": "wrongpw",
        })
        assert "Invalid username or password." in response.text

    def test_missing_fields(self, client):
        token = csrf_from(client)
        response = client.post("/login/login", data={"csrf_token": token, "username": "ada"})
        assert "Username and password are required." in response.text

    def test_welcome_flash_and_logout(self, customer_client):
        page = customer_client.get("/home/customer-dashboard")
        assert "Welcome back, ada!" in page.text

        response = customer_client.post("/login/logout", data={"csrf_token": customer_client.csrf})
        assert "You have been logged out successfully." in response.text
        assert customer_client.get("/cart", follow_redirects=False).headers["location"] == "/login/login"


class TestCart:
    def test_add_requires_login(self, client):
        token = csrf_from(client, "/")
        response = client.post("/cart/add", data={"productId": "p-1", "quantity": "1"},
                               headers={"X-CSRF-Token": token})
        assert response.json() == {"success": False, "message": "Please login to add items to cart"}

    def test_add_with_header_token(self, customer_client, fake_cart):
        response = customer_client.post("/cart/add", data={"productId": "p-1", "quantity": "2"},
                                        headers={"X-CSRF-Token": customer_client.csrf})
        assert response.json() == {"success": True, "message": "Item added to cart", "itemCount": 2}

        customer_client.post("/cart/add", data={"productId": "p-1", "quantity": "1"},
                             headers={"X-CSRF-Token": customer_client.csrf})
        row, = fake_cart.rows.values()
        assert row.quantity == 3

    def test_add_rejects_zero_quantity(self, customer_client, fake_cart):
        response = customer_client.post("/cart/add", data={"productId": "p-1", "quantity": "0"},
                                        headers={"X-CSRF-Token": customer_client.csrf})
        assert response.json() == {"success": False, "message": "Quantity must be at least 1"}
        assert not fake_cart.rows

    def test_add_reports_database_failure(self, customer_client, fake_cart):
        fake_cart.fail = True
        response = customer_client.post("/cart/add", data={"productId": "p-1"},
                                        headers={"X-CSRF-Token": customer_client.csrf})
        assert response.json() == {"success": False, "message": "Failed to add item to cart"}

    def test_cart_page_lists_items(self, customer_client, fake_storage, fake_cart):
        fake_storage.seed(make_product(product_id="p-1", product_name="Lamp", price=Decimal("4.50")))
        fake_cart.add("ada", "p-1", 2)
        response = customer_client.get("/cart")
        assert "Lamp" in response.text
        assert "$9.00" in response.text

    def test_update_and_remove(self, customer_client, fake_cart):
        row = fake_cart.add("ada", "p-1", 1)
        response = customer_client.post("/cart/update-quantity", data={
            "csrf_token": customer_client.csrf, "cartId": str(row.id), "quantity": "5",
        })
        assert "Cart updated successfully" in response.text
        assert fake_cart.rows[row.id].quantity == 5

        response = customer_client.post("/cart/remove", data={
            "csrf_token": customer_client.csrf, "cartId": str(row.id),
        })
        assert "Item removed from cart" in response.text
        assert not fake_cart.rows

    def test_cannot_touch_other_users_row(self, customer_client, fake_cart):
        row = fake_cart.add("bob", "p-1", 1)
        response = customer_client.post("/cart/remove", data={
            "csrf_token": customer_client.csrf, "cartId": str(row.id),
        })
        assert "Failed to remove item from cart" in response.text
        assert row.id in fake_cart.rows

    def test_empty_checkout_redirects(self, customer_client):
        response = customer_client.get("/cart/checkout")
        assert response.url.path == "/cart"
        assert "Your cart is empty" in response.text


class TestCheckout:
    def test_confirm_hands_over_to_order_creation(self, customer_client):
        response = customer_client.post("/cart/checkout", data={"csrf_token": customer_client.csrf},
                                        follow_redirects=False)
        assert response.status_code == 307
        assert response.headers["location"] == "/order/create-from-cart"

    def test_create_from_cart(self, customer_client, fake_storage, fake_cart):
        fake_storage.seed(make_product(product_id="p-1", price=Decimal("3.00"), stock_available=4))
        fake_cart.add("ada", "p-1", 2)

        response = customer_client.post("/order/create-from-cart",
                                        data={"csrf_token": customer_client.csrf}, follow_redirects=False)

        assert response.headers["location"] == "/cart/confirmation"
        order, = fake_storage.get_all_entities(Order)
        assert order.total_price == Decimal("6.00")
        assert fake_storage.get_entity(Product, "Product", "p-1").stock_available == 2
        assert not fake_cart.rows

        page = customer_client.get("/cart/confirmation")
        assert "Successfully created 1 order(s)!" in page.text

    def test_insufficient_stock_back_to_cart(self, customer_client, fake_storage, fake_cart):
        fake_storage.seed(make_product(product_id="p-1", product_name="Chair", stock_available=1))
        fake_cart.add("ada", "p-1", 3)

        response = customer_client.post("/order/create-from-cart", data={"csrf_token": customer_client.csrf})

        assert response.url.path == "/cart"
        assert "Insufficient stock for Chair. Available: 1" in response.text
        assert not fake_storage.get_all_entities(Order)


class TestOrders:
    def test_customer_sees_only_own_orders(self, customer_client, fake_storage):
        fake_storage.seed(make_order(username="ada", product_name="Mine"),
                          make_order(username="bob", product_name="Theirs"))
        response = customer_client.get("/order/my-orders")
        assert "Mine" in response.text
        assert "Theirs" not in response.text

    def test_product_price_json(self, client, fake_storage):
        fake_storage.seed(make_product(product_id="p-1", product_name="Lamp",
                                       price=Decimal("12.00"), stock_available=6))
        assert client.get("/order/product-price", params={"productId": "p-1"}).json() == {
            "success": True, "price": 12.0, "stock": 6, "productName": "Lamp",
        }
        assert client.get("/order/product-price", params={"productId": "x"}).json() == {"success": False}

    def test_admin_edit_recomputes_total(self, admin_client, fake_storage):
        order = make_order(quantity=1, unit_price=Decimal("5.00"))
        fake_storage.seed(order)

        response = admin_client.post(f"/order/edit/{order.order_id}", data={
            "csrf_token": admin_client.csrf, "order_date": "2025-03-01T10:00",
            "quantity": "4", "unit_price": "5.00", "status": "Completed",
        }, follow_redirects=False)

        assert response.status_code == 303
        stored = fake_storage.get_entity(Order, "Order", order.order_id)
        assert stored.total_price == Decimal("20.00")
        assert stored.status == "Completed"

    def test_create_rejects_unknown_status(self, admin_client, fake_storage):
        fake_storage.seed(make_customer(username="ada"), make_product(product_id="p-1", stock_available=5))

        response = admin_client.post("/order/create", data={
            "csrf_token": admin_client.csrf, "customer_id": "ada", "product_id": "p-1",
            "quantity": "1", "order_date": "2025-03-01T10:00", "status": "Shipped",
        })

        assert response.status_code == 200
        assert "Please choose a valid status." in response.text
        assert not fake_storage.get_all_entities(Order)
