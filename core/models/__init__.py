"""
Core Data Models Package.

Contains pure data structures without business logic.

Exports:
    TableModel: Base for table storage entities
    Product, Customer, Order: Table storage entities
    User, CartRow, CartItem: Relational store models
    OrderStatus, UserRole: Enums
    OrderNotificationMessage, StockUpdateMessage: Queue message contracts
"""

# Enums
from .enums import OrderStatus, UserRole, PROCESSED_STATUS

# Table storage entities
from .base import TableModel, utc_now, format_price, parse_price_string
from .product import Product, PRODUCT_PARTITION
from .customer import Customer, CUSTOMER_PARTITION
from .order import Order, ORDER_PARTITION, ensure_utc

# Relational models
from .account import User, CartRow, CartItem

# Queue messages
from .messages import OrderNotificationMessage, StockUpdateMessage

__all__ = [
    'OrderStatus',
    'UserRole',
    'PROCESSED_STATUS',
    'TableModel',
    'utc_now',
    'format_price',
    'parse_price_string',
    'Product',
    'PRODUCT_PARTITION',
    'Customer',
    'CUSTOMER_PARTITION',
    'Order',
    'ORDER_PARTITION',
    'ensure_utc',
    'User',
    'CartRow',
    'CartItem',
    'OrderNotificationMessage',
    'StockUpdateMessage',
]
