"""
Order Service.

Order placement and management over the Orders table. Each order is for
a single product; placing an order draws the product's stock down and
announces the order on the order-notifications queue.

Two entry points create orders:
    - create_order: admin form (customer picked from the Customers table)
    - create_from_cart: customer checkout, one order per cart line

Exports:
    OrderService: Order operations
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from util_logger import LoggerFactory, ComponentType
from config import StorageNames
from core.models import (
    Customer, CUSTOMER_PARTITION,
    Order, ORDER_PARTITION,
    OrderNotificationMessage,
    OrderStatus,
    Product, PRODUCT_PARTITION,
    StockUpdateMessage,
    ensure_utc,
    utc_now,
)
from exceptions import InsufficientStockError, ResourceNotFoundError, ValidationError

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "OrderService")


def newest_first(orders: List[Order]) -> List[Order]:
    return sorted(orders, key=lambda o: ensure_utc(o.order_date), reverse=True)


class OrderService:
    """Business logic for orders."""

    def __init__(self, storage, cart_service):
        """
        Args:
            storage: StorageService
            cart_service: CartService used by checkout
        """
        self.storage = storage
        self.cart_service = cart_service

    # =========================================================================
    # READ
    # =========================================================================

    def list_orders(self, username: str, is_admin: bool) -> List[Order]:
        """Admins see every order; everyone else sees their own."""
        orders = self.storage.get_all_entities(Order)
        if is_admin:
            return orders
        return [o for o in orders if o.belongs_to(username)]

    def my_orders(self, username: str) -> List[Order]:
        return newest_first([o for o in self.storage.get_all_entities(Order) if o.belongs_to(username)])

    def manage_orders(self) -> List[Order]:
        return newest_first(self.storage.get_all_entities(Order))

    def get_order(self, order_id: str) -> Order:
        order = self.storage.get_entity(Order, ORDER_PARTITION, order_id) if order_id else None
        if order is None:
            raise ResourceNotFoundError(f"Order {order_id} not found")
        return order

    def get_product_price(self, product_id: str) -> Dict[str, Any]:
        """Price lookup for the order form."""
        product = self.storage.get_entity(Product, PRODUCT_PARTITION, product_id) if product_id else None
        if product is None:
            return {"success": False}
        return {
            "success": True,
            "price": float(product.price),
            "stock": product.stock_available,
            "productName": product.product_name,
        }

    # =========================================================================
    # CREATE
    # =========================================================================

    def _draw_down_stock(self, product: Product, quantity: int) -> int:
        """Subtract ordered quantity from stock; returns the previous level."""
        previous = product.stock_available
        product.stock_available = previous - quantity
        product.updated_at = utc_now()
        self.storage.update_entity(product)
        logger.info(f"📦 Stock for {product.product_name}: {previous} -> {product.stock_available}")
        return previous

    def _notify_order(self, order: Order, customer_name: str) -> None:
        message = OrderNotificationMessage(
            order_id=order.order_id,
            customer_id=order.customer_id,
            customer_name=customer_name,
            product_name=order.product_name,
            quantity=order.quantity,
            total_price=float(order.total_price),
            order_date=order.order_date,
            status=order.status,
        )
        self.storage.send_message(StorageNames.QUEUE_ORDER_NOTIFICATIONS, message)

    def create_order(self, customer_id: str, product_id: str, quantity: int,
                     order_date: datetime, status: str = OrderStatus.SUBMITTED.value) -> Order:
        """
        Place an order on behalf of a customer.

        Raises:
            ValidationError: Unknown customer or product
            InsufficientStockError: Not enough stock
        """
        customer = self.storage.get_entity(Customer, CUSTOMER_PARTITION, customer_id) if customer_id else None
        product = self.storage.get_entity(Product, PRODUCT_PARTITION, product_id) if product_id else None
        if customer is None or product is None:
            raise ValidationError("Invalid customer or product selected.")

        if product.stock_available < quantity:
            raise InsufficientStockError(
                f"Insufficient stock. Available: {product.stock_available}",
                product_name=product.product_name,
                available=product.stock_available,
            )

        total_price = product.price * quantity
        logger.info(
            f"Creating order - Product Price: {product.price}, Quantity: {quantity}, Calculated Total: {total_price}"
        )
        order = Order(
            customer_id=customer_id,
            username=customer.username,
            product_id=product_id,
            product_name=product.product_name,
            order_date=ensure_utc(order_date),
            quantity=quantity,
            unit_price=product.price,
            total_price=total_price,
            status=status or OrderStatus.SUBMITTED.value,
            updated_at=utc_now(),
        )
        self.storage.add_entity(order)

        previous_stock = self._draw_down_stock(product, quantity)

        self._notify_order(order, customer.full_name)
        self.storage.send_message(StorageNames.QUEUE_STOCK_UPDATES, StockUpdateMessage(
            product_id=product.product_id,
            product_name=product.product_name,
            previous_stock=previous_stock,
            new_stock=product.stock_available,
            update_by="Order System",
            update_date=utc_now(),
        ))

        logger.info(f"✅ Order created: {order.order_id} for {customer_id}")
        return order

    def create_from_cart(self, username: str) -> List[str]:
        """
        Turn every cart line into an order, then empty the cart.

        Lines whose product has gone, or whose quantity is below 1, are
        skipped. Running out of stock stops the checkout; orders already
        placed for earlier lines stay.

        Returns:
            Ids of the created orders

        Raises:
            ValidationError: Cart is empty
            InsufficientStockError: A line asks for more than is in stock
        """
        items = self.cart_service.get_cart_items(username)
        if not items:
            raise ValidationError("Your cart is empty")

        created: List[str] = []
        for item in items:
            product = self.storage.get_entity(Product, PRODUCT_PARTITION, item.product_id)
            if product is None:
                logger.warning(f"⚠️ Product {item.product_id} not found in cart")
                continue
            if item.quantity < 1:
                logger.warning(f"⚠️ Skipping cart line {item.cart_id} with quantity {item.quantity}")
                continue

            if product.stock_available < item.quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product.product_name}. Available: {product.stock_available}",
                    product_name=product.product_name,
                    available=product.stock_available,
                )

            now = utc_now()
            order = Order(
                customer_id=username,
                username=username,
                product_id=item.product_id,
                product_name=item.product_name,
                order_date=now,
                quantity=item.quantity,
                unit_price=item.price,
                total_price=item.total_price,
                status=OrderStatus.SUBMITTED.value,
                updated_at=now,
            )
            self.storage.add_entity(order)
            self._draw_down_stock(product, item.quantity)
            self._notify_order(order, username)
            created.append(order.order_id)

        self.cart_service.clear_cart(username)
        logger.info(f"✅ Checkout for {username} created {len(created)} order(s)")
        return created

    # =========================================================================
    # UPDATE / DELETE
    # =========================================================================

    def update_order(self, order_id: str, order_date: datetime, quantity: int,
                     unit_price: Decimal, status: str) -> Order:
        """
        Edit an order. The total is recomputed when price or quantity changed.
        """
        order = self.get_order(order_id)

        total_price = order.total_price
        if unit_price != order.unit_price or quantity != order.quantity:
            total_price = unit_price * quantity
            logger.info(f"Recalculated TotalPrice: {total_price} (was: {order.total_price})")

        order.order_date = ensure_utc(order_date)
        order.quantity = quantity
        order.unit_price = unit_price
        order.total_price = total_price
        order.status = status
        order.updated_at = utc_now()

        self.storage.update_entity(order)
        logger.info(f"✅ Order updated: {order_id} total={order.total_price_string}")
        return order

    def delete_order(self, order_id: str) -> None:
        self.storage.delete_entity(Order, ORDER_PARTITION, order_id)
        logger.info(f"🗑️ Order deleted: {order_id}")
