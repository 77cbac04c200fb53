"""
Web Dependencies - Service Wiring, Session Auth, Flash Messages, CSRF.

Routers never build services themselves. Every service comes from a
provider function here so tests can swap it through
app.dependency_overrides.

Session layout (starlette SessionMiddleware, signed cookie):
    username, role, user_id   set at login
    expires_at                epoch seconds; 30 days with remember me, else 24 hours
    _flashes                  list of [category, message] until rendered
    _csrf                     per-session token checked on every form POST

Exports:
    SessionUser: Logged-in user read from the session
    LoginRequired, AccessDenied, CsrfError: Raised by the guards below
    get_current_user, require_user, require_admin, verify_csrf
    login_user, logout_user, flash, pop_flashes, csrf_token, redirect
    get_storage and the get_*_service providers
"""

import secrets
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from fastapi import Depends, Form, Request
from fastapi.responses import RedirectResponse

from config import get_config
from core.models import User, UserRole
from infrastructure.storage import StorageService, get_storage_service
from services import (
    AuthService,
    CartService,
    CustomerService,
    DashboardService,
    OrderService,
    ProductService,
    UploadService,
)
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "WebSession")

SESSION_USERNAME = "username"
SESSION_ROLE = "role"
SESSION_USER_ID = "user_id"
SESSION_EXPIRES_AT = "expires_at"
SESSION_FLASHES = "_flashes"
SESSION_CSRF = "_csrf"

CSRF_HEADER = "X-CSRF-Token"


# ============================================================================
# GUARD EXCEPTIONS (mapped to redirects in web_service)
# ============================================================================

class LoginRequired(Exception):
    """No logged-in user for a page that needs one."""


class AccessDenied(Exception):
    """Logged in, but not allowed here."""


class CsrfError(Exception):
    """Form POST without a valid CSRF token."""


# ============================================================================
# SESSION USER
# ============================================================================

@dataclass
class SessionUser:
    username: str
    role: str
    user_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def login_user(request: Request, user: User, remember_me: bool = False) -> None:
    """Put the user in the session with the lifetime the login form asked for."""
    auth = get_config().auth
    lifetime = auth.remember_me_days * 24 * 3600 if remember_me else auth.session_hours * 3600

    request.session[SESSION_USERNAME] = user.username
    request.session[SESSION_ROLE] = user.role
    request.session[SESSION_USER_ID] = user.id
    request.session[SESSION_EXPIRES_AT] = time.time() + lifetime
    logger.debug(f"Session opened for {user.username}, remember_me={remember_me}")


def logout_user(request: Request) -> None:
    """Drop the login but keep pending flash messages."""
    flashes = request.session.get(SESSION_FLASHES, [])
    request.session.clear()
    if flashes:
        request.session[SESSION_FLASHES] = flashes


def get_current_user(request: Request) -> Optional[SessionUser]:
    """The logged-in user, or None. An expired login is cleared."""
    username = request.session.get(SESSION_USERNAME)
    if not username:
        return None

    expires_at = request.session.get(SESSION_EXPIRES_AT, 0)
    if expires_at < time.time():
        logger.info(f"Session expired for {username}")
        logout_user(request)
        return None

    return SessionUser(
        username=username,
        role=request.session.get(SESSION_ROLE, UserRole.CUSTOMER.value),
        user_id=request.session.get(SESSION_USER_ID),
    )


def require_user(user: Optional[SessionUser] = Depends(get_current_user)) -> SessionUser:
    if user is None:
        raise LoginRequired()
    return user


def require_admin(user: SessionUser = Depends(require_user)) -> SessionUser:
    if not user.is_admin:
        logger.warning(f"⚠️ Admin page refused for {user.username}")
        raise AccessDenied()
    return user


# ============================================================================
# FLASH MESSAGES
# ============================================================================

def flash(request: Request, category: str, message: str) -> None:
    """Queue a one-shot message ('success' or 'error') for the next page."""
    flashes = request.session.get(SESSION_FLASHES, [])
    flashes.append([category, message])
    request.session[SESSION_FLASHES] = flashes


def pop_flashes(request: Request) -> List[Tuple[str, str]]:
    flashes = request.session.pop(SESSION_FLASHES, [])
    return [(category, message) for category, message in flashes]


# ============================================================================
# CSRF
# ============================================================================

def csrf_token(request: Request) -> str:
    """The session's CSRF token, created on first use."""
    token = request.session.get(SESSION_CSRF)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[SESSION_CSRF] = token
    return token


def verify_csrf(request: Request, csrf_token: Optional[str] = Form(None)) -> None:
    """
    Check the token sent as a form field (or the X-CSRF-Token header for
    script posts) against the session.
    """
    expected = request.session.get(SESSION_CSRF)
    sent = csrf_token or request.headers.get(CSRF_HEADER)
    if not expected or not sent or not secrets.compare_digest(expected, sent):
        logger.warning(f"⚠️ CSRF check failed for {request.method} {request.url.path}")
        raise CsrfError()


def redirect(url: str) -> RedirectResponse:
    """Post/redirect/get: always follow up with a GET."""
    return RedirectResponse(url=url, status_code=303)


# ============================================================================
# SERVICE PROVIDERS
# ============================================================================

def get_storage() -> StorageService:
    return get_storage_service()


def get_auth_service() -> AuthService:
    return AuthService()


def get_cart_service(storage: StorageService = Depends(get_storage)) -> CartService:
    return CartService(storage)


def get_product_service(storage: StorageService = Depends(get_storage)) -> ProductService:
    return ProductService(storage)


def get_customer_service(storage: StorageService = Depends(get_storage)) -> CustomerService:
    return CustomerService(storage)


def get_order_service(storage: StorageService = Depends(get_storage),
                      cart_service: CartService = Depends(get_cart_service)) -> OrderService:
    return OrderService(storage, cart_service)


def get_dashboard_service(storage: StorageService = Depends(get_storage),
                          cart_service: CartService = Depends(get_cart_service)) -> DashboardService:
    return DashboardService(storage, cart_service)


def get_upload_service(storage: StorageService = Depends(get_storage)) -> UploadService:
    return UploadService(storage)
