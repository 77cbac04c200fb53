"""
Cart Service.

Per-user shopping cart. Rows live in the relational cart table and are
joined with Product entities from table storage when the cart is read.

Mutators report failure as False (and log it) so a database hiccup shows
up as a flash message rather than an error page.

Exports:
    CartService: Cart operations
"""

from decimal import Decimal
from typing import List, Optional

from util_logger import LoggerFactory, ComponentType
from core.models import CartItem, Product, PRODUCT_PARTITION
from exceptions import DatabaseError
from infrastructure.postgresql import CartRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "CartService")


class CartService:
    """Business logic for the shopping cart."""

    def __init__(self, storage, cart: Optional[CartRepository] = None):
        """
        Args:
            storage: StorageService used to look up products
            cart: Cart repository
        """
        self.storage = storage
        self.cart = cart or CartRepository()

    def add_to_cart(self, username: str, product_id: str, quantity: int) -> bool:
        """Add a product, merging into the user's existing row for it. Quantity must be 1 or more."""
        if quantity < 1:
            logger.warning(f"⚠️ Rejected cart quantity {quantity} for {username}/{product_id}")
            return False
        try:
            existing = self.cart.find_item(username, product_id)
            if existing is not None:
                self.cart.set_quantity(existing.id, existing.quantity + quantity)
            else:
                self.cart.insert_item(username, product_id, quantity)
        except DatabaseError as e:
            logger.error(f"❌ Add to cart failed for {username}/{product_id}: {e}")
            return False
        logger.info(f"🛒 {username} added {quantity} x {product_id}")
        return True

    def remove_from_cart(self, cart_id: int, username: str) -> bool:
        try:
            item = self.cart.get_item(cart_id, username)
            if item is None:
                return False
            self.cart.delete_item(item.id)
        except DatabaseError as e:
            logger.error(f"❌ Remove from cart failed for {username}/{cart_id}: {e}")
            return False
        return True

    def update_quantity(self, cart_id: int, username: str, quantity: int) -> bool:
        """Set a row's quantity; zero or less removes the row."""
        try:
            item = self.cart.get_item(cart_id, username)
            if item is None:
                return False
            if quantity <= 0:
                self.cart.delete_item(item.id)
            else:
                self.cart.set_quantity(item.id, quantity)
        except DatabaseError as e:
            logger.error(f"❌ Quantity update failed for {username}/{cart_id}: {e}")
            return False
        return True

    def get_cart_items(self, username: str) -> List[CartItem]:
        """
        The user's cart joined with current product details.

        Rows without a product id, or whose product no longer exists,
        are left out.
        """
        items = []
        for row in self.cart.list_items(username):
            if not row.product_id:
                continue
            product = self.storage.get_entity(Product, PRODUCT_PARTITION, row.product_id)
            if product is None:
                logger.debug(f"Cart row {row.id} points at missing product {row.product_id}")
                continue
            items.append(CartItem(
                cart_id=row.id,
                product_id=row.product_id,
                product_name=product.product_name,
                price=product.price,
                quantity=row.quantity,
                image_url=product.image_url or "",
            ))
        return items

    def get_cart_total(self, items: List[CartItem]) -> Decimal:
        return sum((item.total_price for item in items), Decimal("0"))

    def get_cart_item_count(self, username: str) -> int:
        return self.cart.sum_quantity(username)

    def clear_cart(self, username: str) -> bool:
        try:
            self.cart.delete_all_for_user(username)
        except DatabaseError as e:
            logger.error(f"❌ Clear cart failed for {username}: {e}")
            return False
        return True
