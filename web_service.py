"""
Storefront Web Service - FastAPI application entry point.

Serves the storefront pages (Jinja2 templates), the static assets and a
liveness endpoint.

Startup (lifespan):
    1. Ensure the relational users and cart tables exist
    2. Build the StorageService, which provisions the Azure Storage
       tables, containers, queues and file share once per process

Run:
    uvicorn web_service:app --host 0.0.0.0 --port 8000
"""

import os
import sys
import uuid
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware


# ============================================================================
# LOGGING SETUP
# ============================================================================

def configure_logging():
    """Configure root logging for the web process."""
    if hasattr(sys.stdout, 'reconfigure'):
        sys.stdout.reconfigure(line_buffering=True)

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    for logger_name in ['uvicorn', 'uvicorn.error', 'uvicorn.access']:
        uvi_logger = logging.getLogger(logger_name)
        uvi_logger.handlers = []
        uvi_logger.addHandler(handler)
        uvi_logger.propagate = False

    # Azure SDK request logging drowns out application logs
    logging.getLogger("azure.identity").setLevel(logging.WARNING)
    logging.getLogger("azure.identity._internal").setLevel(logging.WARNING)
    logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)
    logging.getLogger("azure.storage").setLevel(logging.WARNING)
    logging.getLogger("azure.data.tables").setLevel(logging.WARNING)
    logging.getLogger("azure.core").setLevel(logging.WARNING)
    logging.getLogger("msal").setLevel(logging.WARNING)


configure_logging()

from config import __version__, debug_config, get_config
from exceptions import DatabaseError, ResourceNotFoundError, StorageError
from infrastructure.database_initializer import DatabaseInitializer
from infrastructure.storage import StorageService, get_storage_service
from templates_utils import render_template, templates
from util_logger import LoggerFactory, ComponentType, bind_request_context, reset_request_context
from web import cart, customer, home, login, order, product, upload
from web.dependencies import AccessDenied, CsrfError, LoginRequired, get_current_user, redirect

logger = logging.getLogger(__name__)
error_logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "ErrorHandler")


# ============================================================================
# FASTAPI LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create relational tables and provision storage before serving."""
    logger.info("STOREFRONT - STARTING")

    result = DatabaseInitializer().ensure_tables()
    if not result.success:
        logger.error(f"Relational table setup incomplete: {result.to_dict()}")

    try:
        get_storage_service()
    except StorageError as e:
        # Provisioning is retried on the next request that needs storage
        logger.error(f"Storage provisioning failed at startup: {e}")

    yield

    logger.info("STOREFRONT - SHUT DOWN")


config = get_config()

app = FastAPI(
    title="Cloud Storefront",
    description="Storefront over Azure Storage and PostgreSQL",
    version=__version__,
    lifespan=lifespan
)

@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag the request (and every log line it produces) with a short request id."""
    request_id = uuid.uuid4().hex[:8]
    request.state.request_id = request_id
    user = get_current_user(request)
    token = bind_request_context(request_id=request_id, username=user.username if user else None)
    try:
        response = await call_next(request)
    finally:
        reset_request_context(token)
    response.headers["X-Request-ID"] = request_id
    return response


# Added last so it wraps request_context_middleware and the session is readable there
app.add_middleware(
    SessionMiddleware,
    secret_key=config.auth.secret_key,
    session_cookie=config.auth.cookie_name,
    max_age=config.auth.cookie_max_age_seconds,
    https_only=config.auth.https_only,
    same_site="lax",
)


# ============================================================================
# STATIC FILES AND ROUTERS
# ============================================================================

_static_dir = Path(__file__).parent / "static"
if _static_dir.exists():
    app.mount("/static", StaticFiles(directory=_static_dir), name="static")
    logger.info(f"Static files mounted from: {_static_dir}")
else:
    logger.warning(f"Static directory not found: {_static_dir}")

for module in (home, login, cart, product, customer, order, upload):
    app.include_router(module.router)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

def _request_id(request: Request) -> str:
    """Id bound by request_context_middleware; fresh one if the request never got that far."""
    return getattr(request.state, "request_id", None) or uuid.uuid4().hex[:8]


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return redirect("/login/login")


@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    return redirect("/login/access-denied")


@app.exception_handler(CsrfError)
async def csrf_error_handler(request: Request, exc: CsrfError):
    return render_template(request, "errors/error.html", status_code=400,
                           message="Your form has expired. Please go back, reload the page and try again.")


@app.exception_handler(ResourceNotFoundError)
async def not_found_handler(request: Request, exc: ResourceNotFoundError):
    logger.info(f"Not found: {request.url.path} ({exc})")
    return render_template(request, "errors/not_found.html", status_code=404)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return render_template(request, "errors/not_found.html", status_code=404)
    return await http_exception_handler(request, exc)


@app.exception_handler(StorageError)
@app.exception_handler(DatabaseError)
async def backend_error_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    error_logger.error(
        f"❌ Backend failure [{request_id}] on {request.url.path}: {exc}",
        extra={'custom_dimensions': {'exception_type': type(exc).__name__}}
    )
    return render_template(request, "errors/error.html", status_code=503, request_id=request_id,
                           message="The storefront could not reach its data stores. Please try again shortly.")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Last resort; runs outside the session middleware, so no session context."""
    request_id = _request_id(request)
    error_logger.exception(
        f"❌ Unhandled error [{request_id}] on {request.url.path}: {exc}",
        extra={'custom_dimensions': {'request_id': request_id, 'exception_type': type(exc).__name__}}
    )
    return templates.TemplateResponse(request, "errors/error.html", {
        "request": request,
        "version": __version__,
        "current_user": None,
        "flashes": [],
        "csrf_token": "",
        "nav_active": "",
        "errors": [],
        "request_id": request_id,
        "message": "An error occurred while processing your request.",
    }, status_code=500)


# ============================================================================
# HEALTH CHECK
# ============================================================================

@app.get("/healthz")
def health_check():
    """Liveness with a secret-masked configuration summary."""
    return {
        "status": "ok",
        "version": __version__,
        "storage_initialized": StorageService.is_initialized(),
        "config": debug_config(),
    }
