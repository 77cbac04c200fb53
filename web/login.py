"""
Login Router - registration, sign-in, sign-out, access denied page.
"""

from typing import List

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from core.models import UserRole
from exceptions import DatabaseError
from services import AuthService
from templates_utils import render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import (
    SessionUser,
    flash,
    get_auth_service,
    login_user,
    logout_user,
    redirect,
    require_user,
    verify_csrf,
)

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "LoginRouter")

router = APIRouter(prefix="/login", tags=["login"])

USERNAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6
# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72


def validate_registration(username: str, password: str, confirm_password: str, role: str) -> List[str]:
    errors = []
    if not username:
        errors.append("Username is required.")
    elif len(username) > USERNAME_MAX_LENGTH:
        errors.append(f"Username must be at most {USERNAME_MAX_LENGTH} characters.")
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters.")
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"Password must be at most {PASSWORD_MAX_BYTES} bytes.")
    if password != confirm_password:
        errors.append("Passwords do not match.")
    if role not in (UserRole.CUSTOMER.value, UserRole.ADMIN.value):
        errors.append("Please choose a valid role.")
    return errors


@router.get("/register", response_class=HTMLResponse)
def register_form(request: Request):
    return render_template(request, "login/register.html", username="", role=UserRole.CUSTOMER.value)


@router.post("/register", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def register(request: Request,
             username: str = Form(""),
             password: str = Form(""),
             confirm_password: str = Form(""),
             role: str = Form(UserRole.CUSTOMER.value),
             auth: AuthService = Depends(get_auth_service)):
    username = username.strip()
    errors = validate_registration(username, password, confirm_password, role)

    if not errors:
        try:
            if auth.register(username, password, role):
                flash(request, "success", "Registration successful! Please login.")
                return redirect("/login/login")
            errors.append("Username already exists. Please choose a different username.")
        except DatabaseError as e:
            logger.error(f"❌ Registration failed for {username}: {e}")
            errors.append("An error occurred during registration. Please try again.")

    return render_template(request, "login/register.html", errors=errors, username=username, role=role)


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request):
    return render_template(request, "login/login.html", username="")


@router.post("/login", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def login(request: Request,
          username: str = Form(""),
          password: str = Form(""),
          remember_me: bool = Form(False),
          auth: AuthService = Depends(get_auth_service)):
    username = username.strip()
    if not username or not password:
        return render_template(request, "login/login.html", username=username,
                               errors=["Username and password are required."])

    try:
        user = auth.login(username, password)
    except DatabaseError as e:
        logger.error(f"❌ Login failed for {username}: {e}")
        return render_template(request, "login/login.html", username=username,
                               errors=["An error occurred during login. Please try again."])

    if user is None:
        return render_template(request, "login/login.html", username=username,
                               errors=["Invalid username or password."])

    login_user(request, user, remember_me)
    flash(request, "success", f"Welcome back, {user.username}!")
    if user.is_admin:
        return redirect("/home/admin-dashboard")
    return redirect("/home/customer-dashboard")


@router.post("/logout", dependencies=[Depends(verify_csrf)])
def logout(request: Request, user: SessionUser = Depends(require_user)):
    logout_user(request)
    flash(request, "success", "You have been logged out successfully.")
    logger.info(f"🔒 Logout: {user.username}")
    return redirect("/")


@router.get("/access-denied", response_class=HTMLResponse)
def access_denied(request: Request):
    return render_template(request, "login/access_denied.html")
