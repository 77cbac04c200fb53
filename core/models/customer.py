"""
Customer Table Entity.

Customers are keyed by username (RowKey) in a single "Customer"
partition so a profile can be found straight from the login name.

Exports:
    Customer: Pydantic model for customer profiles
"""

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import Field

from .base import TableModel, utc_now

CUSTOMER_PARTITION = "Customer"


class Customer(TableModel):
    """Customer profile (shipping and contact details)."""

    PARTITION = CUSTOMER_PARTITION

    username: str = Field(default="", max_length=100)
    name: str = Field(default="")
    surname: str = Field(default="")
    email: str = Field(default="")
    shipping_address: str = Field(default="")
    updated_at: Optional[datetime] = Field(default_factory=utc_now)

    @property
    def customer_id(self) -> str:
        return self.row_key

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    @classmethod
    def blank_for_user(cls, username: str, updated_at: Optional[datetime] = None) -> "Customer":
        """Profile with empty details for an account that has none yet."""
        return cls(row_key=username, username=username, updated_at=updated_at)

    def _entity_properties(self) -> Dict[str, Any]:
        return {
            "Username": self.username,
            "Name": self.name,
            "Surname": self.surname,
            "Email": self.email,
            "ShippingAddress": self.shipping_address,
            "UpdatedAt": self.updated_at,
        }

    @classmethod
    def _fields_from_entity(cls, entity: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "username": entity.get("Username") or "",
            "name": entity.get("Name") or "",
            "surname": entity.get("Surname") or "",
            "email": entity.get("Email") or "",
            "shipping_address": entity.get("ShippingAddress") or "",
            "updated_at": entity.get("UpdatedAt"),
        }
