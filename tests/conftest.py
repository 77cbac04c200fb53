"""
Root conftest.py: sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without database connections or Azure credentials.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'core', 'services', 'config', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

MINIMAL_ENV = {
    "AzureWebJobsStorage": "UseDevelopmentStorage=true",
    "POSTGRES_HOST": "localhost",
    "POSTGRES_DB": "storefront_test",
    "POSTGRES_USER": "tester",
    "POSTGRES_PASSWORD": "not-a-real-password",
    "SESSION_SECRET_KEY": "test-session-secret",
    "ENVIRONMENT": "dev",
}

# web_service reads config at import time, before any fixture runs
for _key, _value in MINIMAL_ENV.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables to prevent import crashes.

    Config modules read env vars when first loaded. We provide safe
    defaults so imports succeed without Azure infrastructure.
    """
    for key, value in MINIMAL_ENV.items():
        os.environ.setdefault(key, value)


@pytest.fixture
def fake_storage():
    """In-memory StorageService stand-in."""
    from tests.factories.fakes import FakeStorage
    return FakeStorage()


@pytest.fixture
def fake_users():
    from tests.factories.fakes import FakeUserRepository
    return FakeUserRepository()


@pytest.fixture
def fake_cart():
    from tests.factories.fakes import FakeCartRepository
    return FakeCartRepository()
