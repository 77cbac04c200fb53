"""
Jinja2 Template Utilities.

Provides the shared Jinja2Templates instance and the helpers every router
uses to render storefront pages.

Usage:
    from templates_utils import render_template

    @router.get("", response_class=HTMLResponse)
    def index(request: Request, products: ProductService = Depends(get_product_service)):
        return render_template(request, "product/index.html", products=products.list_products())

Exports:
    templates: Jinja2Templates instance
    get_template_context: Build standard context with common variables
    render_template: Convenience wrapper for rendering templates
"""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import Request
from starlette.templating import Jinja2Templates

from config import __version__, get_config
from core.models import format_price
from web.dependencies import csrf_token, get_current_user, pop_flashes

# Initialize templates directory (relative to this file)
_templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=_templates_dir)


def money(value: Union[Decimal, float, int, None]) -> str:
    """Jinja filter: 29.9 -> '$29.90'."""
    if value is None:
        return ""
    return f"${format_price(Decimal(str(value)))}"


def display_date(value: Optional[datetime], fmt: str = "%Y-%m-%d %H:%M") -> str:
    """Jinja filter: UTC datetime -> short text."""
    if value is None:
        return ""
    return value.strftime(fmt)


templates.env.filters["money"] = money
templates.env.filters["display_date"] = display_date


def get_template_context(request: Request, **kwargs: Any) -> Dict[str, Any]:
    """
    Build a standard template context with common variables.

    Every template receives these variables automatically:
        - request: FastAPI request object (required for url_for)
        - version: Application version from config
        - current_user: SessionUser or None
        - flashes: Pending flash messages (removed from the session)
        - csrf_token: Token for POST forms
        - nav_active: Current navigation item (for highlighting)

    Args:
        request: The FastAPI request object
        **kwargs: Additional context variables

    Returns:
        Dictionary with standard context variables plus any extras
    """
    config = get_config()

    context = {
        # Required by Jinja2
        "request": request,

        # Application info
        "version": __version__,
        "environment": config.environment,
        "debug_mode": config.debug_mode,

        # Session
        "current_user": get_current_user(request),
        "flashes": pop_flashes(request),
        "csrf_token": csrf_token(request),

        "nav_active": "",
        "errors": [],
    }
    context.update(kwargs)
    return context


def render_template(
    request: Request,
    template_name: str,
    status_code: int = 200,
    **kwargs: Any
):
    """
    Render a Jinja2 template with standard context.

    Args:
        request: The FastAPI request object
        template_name: Path to template file (e.g., "cart/index.html")
        status_code: HTTP status of the response
        **kwargs: Additional context variables for the template

    Returns:
        Starlette TemplateResponse
    """
    context = get_template_context(request, **kwargs)
    return templates.TemplateResponse(request, template_name, context, status_code=status_code)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    'templates',
    'get_template_context',
    'render_template',
    'money',
    'display_date',
]
