"""
SpareLink - Application Entry Point
=====================================
FastAPI app initialization, middleware, exception handlers and router registration.
"""

import logging
import time as _time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from config.database import Base, engine
from common.exceptions import SparelinkError
from common.helpers import get_real_ip
from common.templating import templates

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("sparelink")
request_logger = logging.getLogger("sparelink.requests")


# ==========================================
# Import ALL models so Alembic/Base can see them
# ==========================================
from modules.user.models import User  # noqa: F401, E402
from modules.catalog.models import Product, ProductImage  # noqa: F401, E402
from modules.cart.models import Cart, CartItem  # noqa: F401, E402
from modules.pickup.models import PickupLocation  # noqa: F401, E402
from modules.order.models import Order, OrderItem  # noqa: F401, E402

# ==========================================
# Import routers
# ==========================================
from modules.user.routes import router as user_router  # noqa: E402
from modules.catalog.routes import router as catalog_router  # noqa: E402
from modules.cart.routes import router as cart_router  # noqa: E402
from modules.order.routes import router as order_router  # noqa: E402
from modules.order.admin_routes import router as order_admin_router  # noqa: E402
from modules.pickup.routes import router as pickup_router  # noqa: E402
from modules.shop.routes import router as shop_router  # noqa: E402


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)
    logger.info("SpareLink started")
    yield


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="SpareLink",
    description="Spare parts marketplace",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ==========================================
# Static Files
# ==========================================
app.mount("/static", StaticFiles(directory="static"), name="static")


# ==========================================
# Exception handlers: every failure -> {"error": "..."}
# ==========================================

def _wants_html(request: Request) -> bool:
    return (
        not request.url.path.startswith("/api/")
        and "text/html" in request.headers.get("accept", "")
    )


@app.exception_handler(SparelinkError)
async def sparelink_error_handler(request: Request, exc: SparelinkError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render a page for browser navigation, JSON for everything else."""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    if exc.status_code == 404 and _wants_html(request):
        return templates.TemplateResponse("shop/error.html", {
            "request": request,
            "user": None,
            "status_code": 404,
            "message": "Page not found",
        }, status_code=404)
    return JSONResponse({"error": message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse({"error": message}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"error": "Server error"}, status_code=500)


# ==========================================
# Middleware: No-Cache for Admin pages
# ==========================================
_NO_CACHE_PREFIXES = ("/admin/", "/api/admin/")


@app.middleware("http")
async def no_cache_admin(request: Request, call_next):
    """Prevent browser caching on admin pages so order lists are always fresh."""
    response = await call_next(request)
    path = request.url.path
    if any(path.startswith(p) for p in _NO_CACHE_PREFIXES):
        ct = response.headers.get("content-type", "")
        if "text/html" in ct or "application/json" in ct:
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
    return response


# ==========================================
# Middleware: Request Log
# ==========================================
_SKIP_PATHS = ("/static/", "/health", "/favicon.ico")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and elapsed time of every request."""
    path = request.url.path
    if any(path.startswith(p) for p in _SKIP_PATHS):
        return await call_next(request)

    start = _time.time()
    response = await call_next(request)
    elapsed_ms = int((_time.time() - start) * 1000)
    request_logger.info(
        f"{get_real_ip(request)} {request.method} {path} -> {response.status_code} ({elapsed_ms} ms)"
    )
    return response


# ==========================================
# Register Routers
# ==========================================
app.include_router(user_router)
app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(order_admin_router)
app.include_router(pickup_router)
app.include_router(shop_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}
