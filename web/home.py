"""
Home Router - landing page, dashboards, static pages, storage provisioning.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from exceptions import StorageError
from infrastructure.storage import StorageService
from services import DashboardService
from templates_utils import render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import (
    SessionUser,
    flash,
    get_current_user,
    get_dashboard_service,
    get_storage,
    redirect,
    require_admin,
    require_user,
    verify_csrf,
)

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "HomeRouter")

router = APIRouter(tags=["home"])


@router.get("/", response_class=HTMLResponse)
def index(request: Request,
          user: Optional[SessionUser] = Depends(get_current_user),
          dashboards: DashboardService = Depends(get_dashboard_service)):
    """Logged-in users land on their dashboard; visitors see the shop front."""
    if user is not None:
        if user.is_admin:
            return redirect("/home/admin-dashboard")
        return redirect("/home/customer-dashboard")

    summary = dashboards.home_summary()
    return render_template(request, "home/index.html", summary=summary, nav_active="home")


@router.get("/home/admin-dashboard", response_class=HTMLResponse)
def admin_dashboard(request: Request,
                    user: SessionUser = Depends(require_admin),
                    dashboards: DashboardService = Depends(get_dashboard_service)):
    return render_template(request, "home/admin_dashboard.html",
                           dashboard=dashboards.admin_dashboard(), nav_active="home")


@router.get("/home/customer-dashboard", response_class=HTMLResponse)
def customer_dashboard(request: Request,
                       user: SessionUser = Depends(require_user),
                       dashboards: DashboardService = Depends(get_dashboard_service)):
    return render_template(request, "home/customer_dashboard.html",
                           dashboard=dashboards.customer_dashboard(user.username), nav_active="home")


@router.get("/home/privacy", response_class=HTMLResponse)
def privacy(request: Request):
    return render_template(request, "home/privacy.html", nav_active="privacy")


@router.get("/home/contact", response_class=HTMLResponse)
def contact(request: Request):
    return render_template(request, "home/contact.html", nav_active="contact")


@router.post("/home/initialize-storage", dependencies=[Depends(verify_csrf)])
def initialize_storage(request: Request, storage: StorageService = Depends(get_storage)):
    """Re-run storage provisioning on demand."""
    try:
        storage.initialize(force=True)
        flash(request, "success", "Azure Storage initialized successfully!")
    except StorageError as e:
        logger.error(f"❌ Manual storage initialization failed: {e}")
        flash(request, "error", f"Failed to initialize storage: {e}")
    return redirect("/")
