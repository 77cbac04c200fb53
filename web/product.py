"""
Product Router - catalog listing, details and product maintenance.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from exceptions import BusinessLogicError, ValidationError
from services import ProductService
from templates_utils import money, render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import flash, get_product_service, redirect, verify_csrf

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "ProductRouter")

router = APIRouter(prefix="/product", tags=["product"])


def read_upload(upload: Optional[UploadFile]):
    """(bytes, filename) of an optional file field; empty when nothing was picked."""
    if upload is None or not upload.filename:
        return None, ""
    return upload.file.read(), upload.filename


def product_form(product_name: str, description: str, price: str, stock_available: int) -> Dict[str, Any]:
    return {
        "product_name": product_name,
        "description": description,
        "price": price,
        "stock_available": stock_available,
    }


@router.get("", response_class=HTMLResponse)
def index(request: Request, products: ProductService = Depends(get_product_service)):
    return render_template(request, "product/index.html",
                           products=products.list_products(), nav_active="product")


@router.get("/details/{product_id}", response_class=HTMLResponse)
def details(request: Request, product_id: str, products: ProductService = Depends(get_product_service)):
    return render_template(request, "product/details.html",
                           product=products.get_product(product_id), nav_active="product")


@router.get("/create", response_class=HTMLResponse)
def create_form(request: Request):
    return render_template(request, "product/create.html",
                           form=product_form("", "", "", 0), nav_active="product")


@router.post("/create", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def create(request: Request,
           product_name: str = Form(""),
           description: str = Form(""),
           price: str = Form(""),
           stock_available: int = Form(0),
           image_file: Optional[UploadFile] = File(None),
           products: ProductService = Depends(get_product_service)):
    form = product_form(product_name, description, price, stock_available)
    errors = []
    if not product_name.strip():
        errors.append("Product name is required.")
    if stock_available < 0:
        errors.append("Stock cannot be negative.")

    if not errors:
        image_data, image_filename = read_upload(image_file)
        try:
            product = products.create_product(product_name.strip(), description, price, stock_available,
                                              image_data=image_data, image_filename=image_filename)
            flash(request, "success",
                  f"Product '{product.product_name}' created successfully with price {money(product.price)}!")
            return redirect("/product")
        except ValidationError as e:
            errors.append(e.message)
        except BusinessLogicError as e:
            logger.error(f"❌ Error creating product: {e}")
            errors.append(f"Error creating product: {e}")

    return render_template(request, "product/create.html", form=form, errors=errors, nav_active="product")


@router.get("/edit/{product_id}", response_class=HTMLResponse)
def edit_form(request: Request, product_id: str, products: ProductService = Depends(get_product_service)):
    product = products.get_product(product_id)
    form = product_form(product.product_name, product.description, product.price_string, product.stock_available)
    return render_template(request, "product/edit.html", product=product, form=form, nav_active="product")


@router.post("/edit/{product_id}", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def edit(request: Request,
         product_id: str,
         product_name: str = Form(""),
         description: str = Form(""),
         price: str = Form(""),
         stock_available: int = Form(0),
         image_file: Optional[UploadFile] = File(None),
         products: ProductService = Depends(get_product_service)):
    form = product_form(product_name, description, price, stock_available)
    errors = []
    if not product_name.strip():
        errors.append("Product name is required.")

    if not errors:
        image_data, image_filename = read_upload(image_file)
        try:
            products.update_product(product_id, product_name.strip(), description, price, stock_available,
                                    image_data=image_data, image_filename=image_filename)
            flash(request, "success", "Product updated successfully!")
            return redirect("/product")
        except ValidationError as e:
            errors.append(e.message)
        except BusinessLogicError as e:
            logger.error(f"❌ Error updating product {product_id}: {e}")
            errors.append(f"Error updating product: {e}")

    product = products.get_product(product_id)
    return render_template(request, "product/edit.html", product=product, form=form,
                           errors=errors, nav_active="product")


@router.get("/delete/{product_id}", response_class=HTMLResponse)
def delete_form(request: Request, product_id: str, products: ProductService = Depends(get_product_service)):
    return render_template(request, "product/delete.html",
                           product=products.get_product(product_id), nav_active="product")


@router.post("/delete/{product_id}", dependencies=[Depends(verify_csrf)])
def delete(request: Request, product_id: str, products: ProductService = Depends(get_product_service)):
    try:
        products.delete_product(product_id)
        flash(request, "success", "Product deleted successfully!")
    except BusinessLogicError as e:
        logger.error(f"❌ Error deleting product {product_id}: {e}")
        flash(request, "error", f"Error deleting product: {e}")
    return redirect("/product")
