"""
Order Table Entity.

Orders live in the Orders table under a single "Order" partition with a
random UUID row key, which doubles as the public order id.

Money columns are persisted as two-decimal strings (UnitPriceString,
TotalPriceString). Older rows written without UnitPriceString get their
unit price back from total / quantity.

Exports:
    Order: Pydantic model for order records
    ensure_utc: Normalize a datetime to UTC
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import Field

from .base import TableModel, format_price, parse_price_string, utc_now
from .enums import OrderStatus

ORDER_PARTITION = "Order"


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize an order date to UTC.

    Naive datetimes (HTML date inputs) are taken to already be UTC;
    aware datetimes are converted.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Order(TableModel):
    """
    A single-product order.

    customer_id holds the Customer row key for admin-entered orders and the
    username for orders created from a cart; listings match on either.
    """

    PARTITION = ORDER_PARTITION

    customer_id: str = Field(default="")
    username: str = Field(default="")
    product_id: str = Field(default="")
    product_name: str = Field(default="")
    order_date: datetime = Field(default_factory=utc_now)
    quantity: int = Field(default=1, ge=1, description="Quantity must be at least 1")
    unit_price: Decimal = Field(default=Decimal("0"))
    total_price: Decimal = Field(default=Decimal("0"))
    status: str = Field(default=OrderStatus.SUBMITTED.value)
    updated_at: Optional[datetime] = Field(default_factory=utc_now)

    @property
    def order_id(self) -> str:
        return self.row_key

    @property
    def total_price_string(self) -> str:
        return format_price(self.total_price)

    @property
    def unit_price_string(self) -> str:
        return format_price(self.unit_price)

    def belongs_to(self, username: str) -> bool:
        """True when the order was placed by (or for) this user."""
        return bool(username) and (self.username == username or self.customer_id == username)

    def _entity_properties(self) -> Dict[str, Any]:
        return {
            "CustomerId": self.customer_id,
            "Username": self.username,
            "ProductId": self.product_id,
            "ProductName": self.product_name,
            "OrderDate": ensure_utc(self.order_date),
            "Quantity": self.quantity,
            "UnitPriceString": self.unit_price_string,
            "TotalPriceString": self.total_price_string,
            "Status": self.status,
            "UpdatedAt": self.updated_at,
        }

    @classmethod
    def _fields_from_entity(cls, entity: Mapping[str, Any]) -> Dict[str, Any]:
        quantity = int(entity.get("Quantity") or 1)
        total = parse_price_string(entity.get("TotalPriceString"))
        if "UnitPriceString" in entity:
            unit = parse_price_string(entity.get("UnitPriceString"))
        else:
            unit = (total / quantity) if quantity else Decimal("0")

        return {
            "customer_id": entity.get("CustomerId") or "",
            "username": entity.get("Username") or "",
            "product_id": entity.get("ProductId") or "",
            "product_name": entity.get("ProductName") or "",
            "order_date": entity.get("OrderDate") or utc_now(),
            "quantity": max(quantity, 1),
            "unit_price": unit,
            "total_price": total,
            "status": entity.get("Status") or OrderStatus.SUBMITTED.value,
            "updated_at": entity.get("UpdatedAt"),
        }
