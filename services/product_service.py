"""
Product Service.

Catalog management over the Products table. Prices arrive as form text
and are parsed here; product images go to the product-images container
and the returned SAS URL is stored on the product.

Exports:
    ProductService: Catalog operations
    parse_price: Form price text -> Decimal
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import List, Optional

from util_logger import LoggerFactory, ComponentType
from config import StorageNames
from core.models import Product, PRODUCT_PARTITION, utc_now
from exceptions import ResourceNotFoundError, ValidationError

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "ProductService")
validator_logger = LoggerFactory.create_logger(ComponentType.VALIDATOR, "PriceParser")

TWO_PLACES = Decimal("0.01")


def parse_price(text: Optional[str]) -> Decimal:
    """
    Parse a price typed into a form.

    Raises:
        ValidationError: Missing or not a number
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Price is required", field="price")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        validator_logger.warning(f"Failed to parse price: '{cleaned}'")
        raise ValidationError("Please enter a valid price (e.g., 29.99)", field="price")
    if not value.is_finite():
        raise ValidationError("Please enter a valid price (e.g., 29.99)", field="price")
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class ProductService:
    """Business logic for the product catalog."""

    def __init__(self, storage):
        self.storage = storage

    def list_products(self) -> List[Product]:
        return self.storage.get_all_entities(Product)

    def find_product(self, product_id: str) -> Optional[Product]:
        if not product_id:
            return None
        return self.storage.get_entity(Product, PRODUCT_PARTITION, product_id)

    def get_product(self, product_id: str) -> Product:
        product = self.find_product(product_id)
        if product is None:
            raise ResourceNotFoundError(f"Product {product_id} not found")
        return product

    def _upload_image(self, image_data: Optional[bytes], image_filename: str) -> Optional[str]:
        if not image_data:
            return None
        url = self.storage.upload_image(image_data, image_filename, StorageNames.CONTAINER_PRODUCT_IMAGES)
        logger.info(f"🖼️ Image uploaded successfully for {image_filename}")
        return url

    def create_product(self, product_name: str, description: str, price_text: Optional[str],
                       stock_available: int, image_data: Optional[bytes] = None,
                       image_filename: str = "") -> Product:
        """
        Add a product to the catalog.

        Raises:
            ValidationError: Bad or non-positive price
        """
        price = parse_price(price_text)
        if price <= 0:
            raise ValidationError("Price must be greater than $0.00", field="price")

        product = Product(
            product_name=product_name,
            description=description or "",
            price=price,
            stock_available=stock_available,
            updated_at=utc_now(),
        )
        image_url = self._upload_image(image_data, image_filename)
        if image_url:
            product.image_url = image_url

        self.storage.add_entity(product)
        logger.info(f"✅ Product created: {product.product_name} at {product.price_string}")
        return product

    def update_product(self, product_id: str, product_name: str, description: str,
                       price_text: Optional[str], stock_available: int,
                       image_data: Optional[bytes] = None, image_filename: str = "") -> Product:
        """
        Update a stored product.

        The stored entity's ETag is kept so a concurrent edit is rejected.
        A price that does not parse leaves the stored price unchanged.

        Raises:
            ValidationError: Price parses but is not positive
        """
        product = self.get_product(product_id)

        try:
            price = parse_price(price_text)
        except ValidationError:
            logger.info(f"Edit kept stored price for {product_id}, '{price_text}' did not parse")
            price = product.price
        if price <= 0:
            raise ValidationError("Price must be greater than $0.00", field="price")

        product.product_name = product_name
        product.description = description or ""
        product.price = price
        product.stock_available = stock_available
        product.updated_at = utc_now()

        image_url = self._upload_image(image_data, image_filename)
        if image_url:
            product.image_url = image_url

        self.storage.update_entity(product)
        logger.info(f"✅ Product updated: {product_id}")
        return product

    def delete_product(self, product_id: str) -> None:
        self.storage.delete_entity(Product, PRODUCT_PARTITION, product_id)
        logger.info(f"🗑️ Product deleted: {product_id}")
