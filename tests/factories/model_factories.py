"""
Randomized model factories for storefront entities.

Every factory call generates randomized non-identity fields
(names, prices, stock levels, timestamps) so tests cannot rely on
specific default values.
"""

import random
import string
import uuid
from datetime import datetime, timezone, timedelta
from decimal import Decimal


def _random_suffix(length: int = 6) -> str:
    """Generate random alphanumeric suffix."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def _random_timestamp() -> datetime:
    """Generate random timestamp within last 30 days."""
    offset = random.randint(0, 30 * 24 * 3600)
    return datetime.now(timezone.utc) - timedelta(seconds=offset)


def _random_price() -> Decimal:
    return Decimal(random.randint(100, 99999)) / Decimal(100)


def make_product(product_id: str = None, **overrides):
    """Build a Product with randomized fields."""
    from core.models import Product

    suffix = _random_suffix()
    base = {
        "row_key": product_id or str(uuid.uuid4()),
        "product_name": f"Product {suffix}",
        "description": f"Description {suffix}",
        "price": _random_price(),
        "stock_available": random.randint(5, 50),
        "image_url": f"https://example.blob.core.windows.net/product-images/{suffix}.png",
        "updated_at": _random_timestamp(),
    }
    base.update(overrides)
    return Product(**base)


def make_customer(username: str = None, **overrides):
    """Build a Customer keyed by username."""
    from core.models import Customer

    suffix = _random_suffix()
    _username = username or f"user_{suffix}"
    base = {
        "row_key": _username,
        "username": _username,
        "name": f"Name{suffix}",
        "surname": f"Surname{suffix}",
        "email": f"{_username}@example.com",
        "shipping_address": f"{random.randint(1, 999)} Main Road",
        "updated_at": _random_timestamp(),
    }
    base.update(overrides)
    return Customer(**base)


def make_order(username: str = None, status: str = None, **overrides):
    """Build an Order whose total matches unit price x quantity."""
    from core.models import Order, OrderStatus

    suffix = _random_suffix()
    _username = username or f"user_{suffix}"
    quantity = overrides.pop("quantity", random.randint(1, 5))
    unit_price = overrides.pop("unit_price", _random_price())
    base = {
        "customer_id": _username,
        "username": _username,
        "product_id": str(uuid.uuid4()),
        "product_name": f"Product {suffix}",
        "order_date": _random_timestamp(),
        "quantity": quantity,
        "unit_price": unit_price,
        "total_price": unit_price * quantity,
        "status": status or OrderStatus.SUBMITTED.value,
        "updated_at": _random_timestamp(),
    }
    base.update(overrides)
    return Order(**base)


def make_user(username: str = None, role: str = None, password_hash: str = None, **overrides):
    """Build a relational User."""
    from core.models import User, UserRole

    suffix = _random_suffix()
    base = {
        "id": random.randint(1, 100000),
        "username": username or f"user_{suffix}",
        "password_hash": password_hash or f"plain{suffix}",
        "role": role or UserRole.CUSTOMER.value,
    }
    base.update(overrides)
    return User(**base)
