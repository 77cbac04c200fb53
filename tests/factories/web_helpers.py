"""
Session helpers for web tests: CSRF token scraping and logging in.
"""

import re

from services import AuthService
from tests.factories.model_factories import make_user

CSRF_PATTERN = re.compile(r'name="csrf_token" value="([^"]+)"')


def csrf_from(client, path="/login/login"):
    """Open a page and read the session's CSRF token from its form."""
    response = client.get(path)
    match = CSRF_PATTERN.search(response.text)
    assert match, f"no CSRF token on {path}"
    return match.group(1)


def login_as(client, fake_users, username, role="Customer", password="secret123"):
    """Create an account in the fake users table and sign in through the form."""
    fake_users.add(make_user(username=username, role=role, password_hash=AuthService.hash_password(password)))
    token = csrf_from(client)
    response = client.post("/login/login", data={
        "csrf_token": token, "username": username, "password": password,
    }, follow_redirects=False)
    assert response.status_code == 303
    return token
