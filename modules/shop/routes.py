"""
Shop Module - Page Routes
===========================
Server-rendered pages. Each page ships a small script that talks to the
JSON API under /api; the routes here only resolve the viewer and the data
needed for the first paint.
"""

from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from config.database import get_db
from common.templating import templates
from modules.auth.deps import get_current_user
from modules.catalog.service import product_service
from modules.order.models import SETTABLE_STATUSES
from modules.pickup.service import pickup_service

router = APIRouter(tags=["shop"])


def _error_page(request: Request, user, status_code: int, message: str):
    return templates.TemplateResponse("shop/error.html", {
        "request": request,
        "user": user,
        "status_code": status_code,
        "message": message,
    }, status_code=status_code)


@router.get("/", response_class=HTMLResponse)
async def home_page(
    request: Request,
    search: str = Query(""),
    user=Depends(get_current_user),
):
    """Catalog with search box and filters; results are fetched client-side."""
    return templates.TemplateResponse("shop/home.html", {
        "request": request,
        "user": user,
        "search": search,
    })


@router.get("/product/{product_id}", response_class=HTMLResponse)
async def product_detail(
    request: Request,
    product_id: str,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    product = product_service.get_by_id(db, product_id)
    if not product:
        return _error_page(request, user, 404, "Product not found")

    return templates.TemplateResponse("shop/product_detail.html", {
        "request": request,
        "user": user,
        "p": product,
        "is_owner": bool(user and user.id == product.seller_id),
    })


@router.get("/products/{product_id}/edit", response_class=HTMLResponse)
async def product_edit(
    request: Request,
    product_id: str,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    if not user:
        return _error_page(request, user, 401, "Please sign in")
    product = product_service.get_by_id(db, product_id)
    if not product or product.seller_id != user.id:
        return _error_page(request, user, 404, "Product not found")

    return templates.TemplateResponse("shop/product_form.html", {
        "request": request,
        "user": user,
        "p": product,
    })


@router.get("/sell", response_class=HTMLResponse)
async def product_new(request: Request, user=Depends(get_current_user)):
    if not user:
        return _error_page(request, user, 401, "Please sign in")
    return templates.TemplateResponse("shop/product_form.html", {
        "request": request,
        "user": user,
        "p": None,
    })


@router.get("/cart", response_class=HTMLResponse)
async def cart_page(
    request: Request,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    if not user:
        return _error_page(request, user, 401, "Please sign in to view your cart")

    return templates.TemplateResponse("shop/cart.html", {
        "request": request,
        "user": user,
        "locations": pickup_service.list_locations(db),
    })


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard_page(request: Request, user=Depends(get_current_user)):
    """Buyers see their orders, sellers their products, admins a shortcut to orders."""
    if not user:
        return _error_page(request, user, 401, "Please sign in")
    if not user.has_completed_onboarding:
        return RedirectResponse("/onboarding", status_code=302)

    return templates.TemplateResponse("shop/dashboard.html", {
        "request": request,
        "user": user,
    })


@router.get("/onboarding", response_class=HTMLResponse)
async def onboarding_page(request: Request, user=Depends(get_current_user)):
    if user and user.has_completed_onboarding:
        return RedirectResponse("/dashboard", status_code=302)

    return templates.TemplateResponse("shop/onboarding.html", {
        "request": request,
        "user": user,
    })


@router.get("/pick-up", response_class=HTMLResponse)
async def pickup_page(request: Request, user=Depends(get_current_user)):
    return templates.TemplateResponse("shop/pick_up.html", {
        "request": request,
        "user": user,
    })


@router.get("/admin/orders", response_class=HTMLResponse)
async def admin_orders_page(
    request: Request,
    db: Session = Depends(get_db),
    user=Depends(get_current_user),
):
    if not user:
        return _error_page(request, user, 401, "Please sign in as an admin")
    if not user.is_admin:
        return _error_page(request, user, 403, "Admins only")

    return templates.TemplateResponse("admin/orders.html", {
        "request": request,
        "user": user,
        "locations": pickup_service.list_locations(db),
        "statuses": [s.value for s in SETTABLE_STATUSES],
    })
