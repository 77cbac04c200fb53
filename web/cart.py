"""
Cart Router - the shopping cart and the checkout review.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from exceptions import BusinessLogicError
from services import CartService
from templates_utils import render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import (
    SessionUser,
    flash,
    get_cart_service,
    get_current_user,
    redirect,
    require_user,
    verify_csrf,
)

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "CartRouter")

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_class=HTMLResponse)
def index(request: Request,
          user: SessionUser = Depends(require_user),
          cart: CartService = Depends(get_cart_service)):
    items = cart.get_cart_items(user.username)
    return render_template(request, "cart/index.html", items=items,
                           total=cart.get_cart_total(items), nav_active="cart")


@router.post("/add", dependencies=[Depends(verify_csrf)])
def add_to_cart(request: Request,
                product_id: str = Form("", alias="productId"),
                quantity: int = Form(1),
                user: Optional[SessionUser] = Depends(get_current_user),
                cart: CartService = Depends(get_cart_service)):
    """Script endpoint used by the product pages; always answers JSON."""
    if user is None:
        return JSONResponse({"success": False, "message": "Please login to add items to cart"})
    if quantity < 1:
        return JSONResponse({"success": False, "message": "Quantity must be at least 1"})

    try:
        if cart.add_to_cart(user.username, product_id, quantity):
            item_count = cart.get_cart_item_count(user.username)
            return JSONResponse({"success": True, "message": "Item added to cart", "itemCount": item_count})
        return JSONResponse({"success": False, "message": "Failed to add item to cart"})
    except BusinessLogicError as e:
        logger.error(f"❌ Add to cart failed for {user.username}: {e}")
        return JSONResponse({"success": False, "message": "An error occurred"})


@router.post("/update-quantity", dependencies=[Depends(verify_csrf)])
def update_quantity(request: Request,
                    cart_id: int = Form(..., alias="cartId"),
                    quantity: int = Form(...),
                    user: SessionUser = Depends(require_user),
                    cart: CartService = Depends(get_cart_service)):
    if cart.update_quantity(cart_id, user.username, quantity):
        flash(request, "success", "Cart updated successfully")
    else:
        flash(request, "error", "Failed to update cart")
    return redirect("/cart")


@router.post("/remove", dependencies=[Depends(verify_csrf)])
def remove_from_cart(request: Request,
                     cart_id: int = Form(..., alias="cartId"),
                     user: SessionUser = Depends(require_user),
                     cart: CartService = Depends(get_cart_service)):
    if cart.remove_from_cart(cart_id, user.username):
        flash(request, "success", "Item removed from cart")
    else:
        flash(request, "error", "Failed to remove item from cart")
    return redirect("/cart")


@router.post("/clear", dependencies=[Depends(verify_csrf)])
def clear_cart(request: Request,
               user: SessionUser = Depends(require_user),
               cart: CartService = Depends(get_cart_service)):
    if cart.clear_cart(user.username):
        flash(request, "success", "Cart cleared successfully")
    else:
        flash(request, "error", "Failed to clear cart")
    return redirect("/cart")


@router.get("/checkout", response_class=HTMLResponse)
def checkout(request: Request,
             user: SessionUser = Depends(require_user),
             cart: CartService = Depends(get_cart_service)):
    items = cart.get_cart_items(user.username)
    if not items:
        flash(request, "error", "Your cart is empty")
        return redirect("/cart")
    return render_template(request, "cart/checkout.html", items=items,
                           total=cart.get_cart_total(items), nav_active="cart")


@router.post("/checkout")
def checkout_confirmed(user: SessionUser = Depends(require_user)):
    """Hand the confirmed checkout (body and CSRF token included) to order creation."""
    return RedirectResponse(url="/order/create-from-cart", status_code=307)


@router.get("/confirmation", response_class=HTMLResponse)
def confirmation(request: Request, user: SessionUser = Depends(require_user)):
    return render_template(request, "cart/confirmation.html", nav_active="cart")
