"""
Order Router - order listing, placement (admin form and cart checkout)
and maintenance.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse

from core.models import Customer, OrderStatus, PROCESSED_STATUS, Product, utc_now
from exceptions import BusinessLogicError, StorageError, ValidationError
from infrastructure.storage import StorageService
from services import OrderService, parse_price
from templates_utils import render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import (
    SessionUser,
    flash,
    get_current_user,
    get_order_service,
    get_storage,
    redirect,
    require_admin,
    require_user,
    verify_csrf,
)

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "OrderRouter")

router = APIRouter(prefix="/order", tags=["order"])

ORDER_STATUSES = [status.value for status in OrderStatus] + [PROCESSED_STATUS]


def parse_order_date(text: Optional[str]) -> datetime:
    """
    Read a date or datetime-local form value.

    An empty or unreadable value falls back to now; the service layer
    normalizes the result to UTC.
    """
    if not text:
        return utc_now()
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        logger.warning(f"⚠️ Date conversion issue for '{text}', using current date")
        return utc_now()


def order_form_errors(quantity: int, status: str) -> List[str]:
    errors: List[str] = []
    if quantity < 1:
        errors.append("Quantity must be at least 1")
    if status not in ORDER_STATUSES:
        errors.append("Please choose a valid status.")
    return errors


def order_form_choices(storage: StorageService) -> Dict[str, Any]:
    return {
        "customers": storage.get_all_entities(Customer),
        "products": storage.get_all_entities(Product),
        "statuses": ORDER_STATUSES,
    }


@router.get("", response_class=HTMLResponse)
def index(request: Request,
          user: Optional[SessionUser] = Depends(get_current_user),
          orders: OrderService = Depends(get_order_service)):
    username = user.username if user else ""
    is_admin = bool(user and user.is_admin)
    return render_template(request, "order/index.html",
                           orders=orders.list_orders(username, is_admin), nav_active="order")


@router.get("/details/{order_id}", response_class=HTMLResponse)
def details(request: Request, order_id: str, orders: OrderService = Depends(get_order_service)):
    return render_template(request, "order/details.html", order=orders.get_order(order_id), nav_active="order")


@router.get("/create", response_class=HTMLResponse)
def create_form(request: Request, storage: StorageService = Depends(get_storage)):
    form = {"customer_id": "", "product_id": "", "quantity": 1,
            "order_date": utc_now().strftime("%Y-%m-%dT%H:%M"), "status": OrderStatus.SUBMITTED.value}
    return render_template(request, "order/create.html", form=form,
                           nav_active="order", **order_form_choices(storage))


@router.post("/create", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def create(request: Request,
           customer_id: str = Form(""),
           product_id: str = Form(""),
           quantity: int = Form(1),
           order_date: str = Form(""),
           status: str = Form(OrderStatus.SUBMITTED.value),
           storage: StorageService = Depends(get_storage),
           orders: OrderService = Depends(get_order_service)):
    form = {"customer_id": customer_id, "product_id": product_id, "quantity": quantity,
            "order_date": order_date, "status": status}
    errors = order_form_errors(quantity, status)

    if not errors:
        try:
            orders.create_order(customer_id, product_id, quantity, parse_order_date(order_date), status)
            flash(request, "success", "Order created successfully!")
            return redirect("/order")
        except ValidationError as e:
            errors.append(e.message)
        except BusinessLogicError as e:
            logger.error(f"❌ Error creating order: {e}")
            errors.append(f"Error creating order: {e}")

    return render_template(request, "order/create.html", form=form, errors=errors,
                           nav_active="order", **order_form_choices(storage))


@router.get("/edit/{order_id}", response_class=HTMLResponse)
def edit_form(request: Request, order_id: str,
              user: SessionUser = Depends(require_admin),
              orders: OrderService = Depends(get_order_service)):
    order = orders.get_order(order_id)
    form = {"order_date": order.order_date.strftime("%Y-%m-%dT%H:%M"), "quantity": order.quantity,
            "unit_price": order.unit_price_string, "status": order.status}
    return render_template(request, "order/edit.html", order=order, form=form,
                           statuses=ORDER_STATUSES, nav_active="order")


@router.post("/edit/{order_id}", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def edit(request: Request,
         order_id: str,
         order_date: str = Form(""),
         quantity: int = Form(1),
         unit_price: str = Form(""),
         status: str = Form(OrderStatus.SUBMITTED.value),
         user: SessionUser = Depends(require_admin),
         orders: OrderService = Depends(get_order_service)):
    form = {"order_date": order_date, "quantity": quantity, "unit_price": unit_price, "status": status}
    errors = order_form_errors(quantity, status)

    if not errors:
        try:
            orders.update_order(order_id, parse_order_date(order_date), quantity, parse_price(unit_price), status)
            flash(request, "success", "Order updated successfully!")
            return redirect("/order")
        except ValidationError as e:
            errors.append(e.message)
        except BusinessLogicError as e:
            logger.error(f"❌ Error updating order {order_id}: {e}")
            errors.append(f"Error updating order: {e}")

    return render_template(request, "order/edit.html", order=orders.get_order(order_id), form=form,
                           statuses=ORDER_STATUSES, errors=errors, nav_active="order")


@router.get("/delete/{order_id}", response_class=HTMLResponse)
def delete_form(request: Request, order_id: str, orders: OrderService = Depends(get_order_service)):
    return render_template(request, "order/delete.html", order=orders.get_order(order_id), nav_active="order")


@router.post("/delete/{order_id}", dependencies=[Depends(verify_csrf)])
def delete(request: Request, order_id: str, orders: OrderService = Depends(get_order_service)):
    try:
        orders.delete_order(order_id)
        flash(request, "success", "Order deleted successfully!")
    except BusinessLogicError as e:
        logger.error(f"❌ Error deleting order {order_id}: {e}")
        flash(request, "error", f"Error deleting order: {e}")
    return redirect("/order")


@router.get("/product-price")
def product_price(product_id: str = Query("", alias="productId"),
                  orders: OrderService = Depends(get_order_service)):
    """Price lookup used by the order form script."""
    try:
        return JSONResponse(orders.get_product_price(product_id))
    except StorageError as e:
        logger.error(f"❌ Price lookup failed for {product_id}: {e}")
        return JSONResponse({"success": False})


@router.post("/create-from-cart", dependencies=[Depends(verify_csrf)])
def create_from_cart(request: Request,
                     user: SessionUser = Depends(require_user),
                     orders: OrderService = Depends(get_order_service)):
    try:
        created = orders.create_from_cart(user.username)
    except ValidationError as e:
        flash(request, "error", e.message)
        return redirect("/cart")
    except BusinessLogicError as e:
        logger.error(f"❌ Checkout failed for {user.username}: {e}")
        flash(request, "error", f"Error creating order: {e}")
        return redirect("/cart")

    flash(request, "success", f"Successfully created {len(created)} order(s)!")
    return redirect("/cart/confirmation")


@router.get("/my-orders", response_class=HTMLResponse)
def my_orders(request: Request,
              user: SessionUser = Depends(require_user),
              orders: OrderService = Depends(get_order_service)):
    return render_template(request, "order/my_orders.html",
                           orders=orders.my_orders(user.username), nav_active="my-orders")


@router.get("/manage", response_class=HTMLResponse)
def manage(request: Request,
           user: SessionUser = Depends(require_admin),
           orders: OrderService = Depends(get_order_service)):
    return render_template(request, "order/manage.html",
                           orders=orders.manage_orders(), statuses=ORDER_STATUSES, nav_active="manage")
