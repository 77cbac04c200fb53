"""
Customer Router - admin maintenance of customer profiles.
"""

from typing import Dict

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from exceptions import BusinessLogicError
from services import CustomerService
from templates_utils import render_template
from util_logger import LoggerFactory, ComponentType
from .dependencies import flash, get_customer_service, redirect, require_admin, verify_csrf

logger = LoggerFactory.create_logger(ComponentType.CONTROLLER, "CustomerRouter")

router = APIRouter(prefix="/customer", tags=["customer"], dependencies=[Depends(require_admin)])


def customer_form(username: str = "", name: str = "", surname: str = "",
                  email: str = "", shipping_address: str = "") -> Dict[str, str]:
    return {
        "username": username,
        "name": name,
        "surname": surname,
        "email": email,
        "shipping_address": shipping_address,
    }


@router.get("", response_class=HTMLResponse)
def index(request: Request, customers: CustomerService = Depends(get_customer_service)):
    return render_template(request, "customer/index.html",
                           customers=customers.list_customers(), nav_active="customer")


@router.get("/details/{customer_id}", response_class=HTMLResponse)
def details(request: Request, customer_id: str, customers: CustomerService = Depends(get_customer_service)):
    return render_template(request, "customer/details.html",
                           customer=customers.get_or_create_customer(customer_id), nav_active="customer")


@router.get("/create", response_class=HTMLResponse)
def create_form(request: Request):
    return render_template(request, "customer/create.html", form=customer_form(), nav_active="customer")


@router.post("/create", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def create(request: Request,
           username: str = Form(""),
           name: str = Form(""),
           surname: str = Form(""),
           email: str = Form(""),
           shipping_address: str = Form(""),
           customers: CustomerService = Depends(get_customer_service)):
    form = customer_form(username.strip(), name, surname, email, shipping_address)
    try:
        customers.create_customer(**form)
        flash(request, "success", "Customer created successfully!")
        return redirect("/customer")
    except BusinessLogicError as e:
        logger.error(f"❌ Error creating customer: {e}")
        return render_template(request, "customer/create.html", form=form,
                               errors=[f"Error creating customer: {e}"], nav_active="customer")


@router.get("/edit/{customer_id}", response_class=HTMLResponse)
def edit_form(request: Request, customer_id: str, customers: CustomerService = Depends(get_customer_service)):
    customer = customers.get_or_create_customer(customer_id)
    form = customer_form(customer.username, customer.name, customer.surname,
                         customer.email, customer.shipping_address)
    return render_template(request, "customer/edit.html", customer_id=customer.customer_id,
                           form=form, nav_active="customer")


@router.post("/edit/{customer_id}", response_class=HTMLResponse, dependencies=[Depends(verify_csrf)])
def edit(request: Request,
         customer_id: str,
         username: str = Form(""),
         name: str = Form(""),
         surname: str = Form(""),
         email: str = Form(""),
         shipping_address: str = Form(""),
         customers: CustomerService = Depends(get_customer_service)):
    form = customer_form(username.strip(), name, surname, email, shipping_address)
    try:
        customers.update_customer(customer_id, **form)
        flash(request, "success", "Customer updated successfully!")
        return redirect("/customer")
    except BusinessLogicError as e:
        logger.error(f"❌ Error updating customer {customer_id}: {e}")
        return render_template(request, "customer/edit.html", customer_id=customer_id, form=form,
                               errors=[f"Error updating customer: {e}"], nav_active="customer")


@router.get("/delete/{customer_id}", response_class=HTMLResponse)
def delete_form(request: Request, customer_id: str, customers: CustomerService = Depends(get_customer_service)):
    return render_template(request, "customer/delete.html",
                           customer=customers.get_customer(customer_id), nav_active="customer")


@router.post("/delete/{customer_id}", dependencies=[Depends(verify_csrf)])
def delete(request: Request, customer_id: str, customers: CustomerService = Depends(get_customer_service)):
    try:
        customers.delete_customer(customer_id)
        flash(request, "success", "Customer deleted successfully!")
    except BusinessLogicError as e:
        logger.error(f"❌ Error deleting customer {customer_id}: {e}")
        flash(request, "error", f"Error deleting customer: {e}")
    return redirect("/customer")
