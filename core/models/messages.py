"""
Queue Message Contracts.

JSON bodies sent to the order-notifications and stock-updates queues.
Keys are PascalCase; serialize with model_dump_json(by_alias=True)
(the queue repository does this for any BaseModel).

Exports:
    OrderNotificationMessage: New order notification
    StockUpdateMessage: Stock level change notification
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .base import utc_now


class OrderNotificationMessage(BaseModel):
    """Sent to order-notifications for every order created."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str = Field(..., alias="OrderId")
    customer_id: str = Field(..., alias="CustomerId")
    customer_name: str = Field(..., alias="CustomerName")
    product_name: str = Field(..., alias="ProductName")
    quantity: int = Field(..., alias="Quantity")
    total_price: float = Field(..., alias="TotalPrice")
    order_date: datetime = Field(..., alias="OrderDate")
    status: str = Field(..., alias="Status")


class StockUpdateMessage(BaseModel):
    """Sent to stock-updates when an admin-entered order draws down stock."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="ProductId")
    product_name: str = Field(..., alias="ProductName")
    previous_stock: int = Field(..., alias="PreviousStock")
    new_stock: int = Field(..., alias="NewStock")
    update_by: str = Field(default="Order System", alias="UpdateBy")
    update_date: datetime = Field(default_factory=utc_now, alias="UpdateDate")
