"""
Services Package - Business Logic.

One service per storefront area. Services receive the StorageService (and,
where needed, relational repositories or other services) through their
constructors; the web layer wires them together in web.dependencies.

Exports:
    AuthService, CartService, ProductService, CustomerService,
    OrderService, DashboardService, UploadService
"""

from .auth_service import AuthService
from .cart_service import CartService
from .product_service import ProductService, parse_price
from .customer_service import CustomerService
from .order_service import OrderService
from .dashboard_service import DashboardService
from .upload_service import UploadService, UploadResult

__all__ = [
    'AuthService',
    'CartService',
    'ProductService',
    'parse_price',
    'CustomerService',
    'OrderService',
    'DashboardService',
    'UploadService',
    'UploadResult',
]
