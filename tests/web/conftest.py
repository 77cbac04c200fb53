"""
Web test fixtures: TestClient over the FastAPI app with in-memory services.

The client is not entered as a context manager, so the lifespan hook
(relational tables, storage provisioning) never runs.
"""

import pytest
from fastapi.testclient import TestClient

from services import AuthService, CartService, CustomerService
from tests.factories.web_helpers import login_as


@pytest.fixture
def app(fake_storage, fake_users, fake_cart):
    from web_service import app
    from web import dependencies

    app.dependency_overrides[dependencies.get_storage] = lambda: fake_storage
    app.dependency_overrides[dependencies.get_auth_service] = lambda: AuthService(users=fake_users)
    app.dependency_overrides[dependencies.get_cart_service] = lambda: CartService(fake_storage, cart=fake_cart)
    app.dependency_overrides[dependencies.get_customer_service] = \
        lambda: CustomerService(fake_storage, users=fake_users)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def customer_client(client, fake_users):
    """Client signed in as the customer 'ada'; .csrf holds the session token."""
    client.csrf = login_as(client, fake_users, "ada")
    return client


@pytest.fixture
def admin_client(client, fake_users):
    client.csrf = login_as(client, fake_users, "root", role="Admin")
    return client
