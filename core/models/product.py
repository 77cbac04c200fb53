"""
Product Table Entity.

Products live in the Products table under a single "Product" partition
with a random UUID row key. Price is persisted as PriceString.

Exports:
    Product: Pydantic model for catalog items
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from pydantic import Field

from .base import TableModel, format_price, parse_price_string, utc_now

PRODUCT_PARTITION = "Product"


class Product(TableModel):
    """Catalog item with stock on hand and an optional image URL."""

    PARTITION = PRODUCT_PARTITION

    product_name: str = Field(default="", max_length=200)
    description: str = Field(default="")
    price: Decimal = Field(default=Decimal("0"))
    stock_available: int = Field(default=0)
    image_url: str = Field(default="")
    updated_at: Optional[datetime] = Field(default_factory=utc_now)

    @property
    def product_id(self) -> str:
        return self.row_key

    @property
    def price_string(self) -> str:
        return format_price(self.price)

    def _entity_properties(self) -> Dict[str, Any]:
        return {
            "ProductName": self.product_name,
            "Description": self.description,
            "PriceString": self.price_string,
            "StockAvailable": self.stock_available,
            "ImageUrl": self.image_url,
            "UpdatedAt": self.updated_at,
        }

    @classmethod
    def _fields_from_entity(cls, entity: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "product_name": entity.get("ProductName") or "",
            "description": entity.get("Description") or "",
            "price": parse_price_string(entity.get("PriceString")),
            "stock_available": int(entity.get("StockAvailable") or 0),
            "image_url": entity.get("ImageUrl") or "",
            "updated_at": entity.get("UpdatedAt"),
        }
