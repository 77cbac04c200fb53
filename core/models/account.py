"""
Relational Store Models - Users and Cart.

These rows live in PostgreSQL, not in table storage. CartItem is the
read model produced by joining a cart row with its Product entity.

Exports:
    User: Account row (users table)
    CartRow: Cart row (cart table)
    CartItem: Cart row joined with product details
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .enums import UserRole


class User(BaseModel):
    """Login account."""

    id: Optional[int] = Field(default=None, description="Identity column")
    username: str = Field(..., max_length=100)
    password_hash: str = Field(..., max_length=255)
    role: str = Field(default=UserRole.CUSTOMER.value, max_length=20)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


class CartRow(BaseModel):
    """One product line in a user's cart."""

    id: int
    customer_username: Optional[str] = Field(default=None, max_length=100)
    product_id: Optional[str] = Field(default=None, max_length=100)
    quantity: int = 0


class CartItem(BaseModel):
    """Cart line ready for display and checkout."""

    cart_id: int
    product_id: str = ""
    product_name: str = ""
    price: Decimal = Decimal("0")
    quantity: int = 0
    image_url: str = ""

    @property
    def total_price(self) -> Decimal:
        return self.price * self.quantity
