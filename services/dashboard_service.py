"""
Dashboard Service.

Read-only summaries for the home page and the two dashboards.

Exports:
    DashboardService: Summary builders
    HomeSummary, AdminDashboard, CustomerDashboard: Page data
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from util_logger import LoggerFactory, ComponentType
from config import StorageNames
from core.models import Customer, Order, OrderStatus, PROCESSED_STATUS, Product
from exceptions import StorageError
from .order_service import newest_first

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "DashboardService")

FEATURED_PRODUCTS = 5
PENDING_ORDERS_SHOWN = 10
RECENT_ORDERS_SHOWN = 5


@dataclass
class HomeSummary:
    featured_products: List[Product]
    product_count: int
    customer_count: int
    order_count: int


@dataclass
class AdminDashboard:
    product_count: int
    customer_count: int
    order_count: int
    pending_orders: int
    processed_orders: int
    pending_orders_list: List[Order]
    # None when the queue could not be read
    queue_lengths: Dict[str, Optional[int]] = field(default_factory=dict)


@dataclass
class CustomerDashboard:
    order_count: int
    recent_orders: List[Order]
    cart_item_count: int


class DashboardService:
    """Builds dashboard data from storage and the cart."""

    MONITORED_QUEUES = (StorageNames.QUEUE_ORDER_NOTIFICATIONS, StorageNames.QUEUE_STOCK_UPDATES)

    def __init__(self, storage, cart_service):
        self.storage = storage
        self.cart_service = cart_service

    def home_summary(self) -> HomeSummary:
        products = self.storage.get_all_entities(Product)
        customers = self.storage.get_all_entities(Customer)
        orders = self.storage.get_all_entities(Order)
        return HomeSummary(
            featured_products=products[:FEATURED_PRODUCTS],
            product_count=len(products),
            customer_count=len(customers),
            order_count=len(orders),
        )

    def admin_dashboard(self) -> AdminDashboard:
        products = self.storage.get_all_entities(Product)
        customers = self.storage.get_all_entities(Customer)
        orders = self.storage.get_all_entities(Order)

        pending_statuses = OrderStatus.pending_values()
        pending = [o for o in orders if o.status in pending_statuses]

        return AdminDashboard(
            product_count=len(products),
            customer_count=len(customers),
            order_count=len(orders),
            pending_orders=len(pending),
            processed_orders=sum(1 for o in orders if o.status == PROCESSED_STATUS),
            pending_orders_list=newest_first(pending)[:PENDING_ORDERS_SHOWN],
            queue_lengths=self._queue_lengths(),
        )

    def _queue_lengths(self) -> Dict[str, Optional[int]]:
        lengths: Dict[str, Optional[int]] = {}
        for queue_name in self.MONITORED_QUEUES:
            try:
                lengths[queue_name] = self.storage.get_queue_length(queue_name)
            except StorageError as e:
                logger.warning(f"⚠️ Could not read length of {queue_name}: {e}")
                lengths[queue_name] = None
        return lengths

    def customer_dashboard(self, username: str) -> CustomerDashboard:
        orders = newest_first([o for o in self.storage.get_all_entities(Order) if o.belongs_to(username)])
        return CustomerDashboard(
            order_count=len(orders),
            recent_orders=orders[:RECENT_ORDERS_SHOWN],
            cart_item_count=self.cart_service.get_cart_item_count(username),
        )
