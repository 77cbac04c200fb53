"""
Configuration Defaults - Single source of truth for all default values.

Organization:
    - AppDefaults: Core application settings
    - StorageDefaults: Azure Storage settings (SAS lifetime, queue encoding)
    - StorageNames: Resource names provisioned in the storage account
    - DatabaseDefaults: PostgreSQL connection and schema settings
    - AuthDefaults: Session cookie settings

Usage:
    from config.defaults import DatabaseDefaults, StorageNames

    # In Pydantic Field definitions:
    port: int = Field(default=DatabaseDefaults.PORT, ...)

    # Resource names:
    container = StorageNames.CONTAINER_PRODUCT_IMAGES
"""


# =============================================================================
# APPLICATION DEFAULTS
# =============================================================================

class AppDefaults:
    """Core application settings."""

    DEBUG_MODE = False
    ENVIRONMENT = "dev"
    LOG_LEVEL = "INFO"
    APP_NAME = "cloud-storefront"


# =============================================================================
# STORAGE DEFAULTS
# =============================================================================

class StorageDefaults:
    """
    Azure Storage settings.

    Connection string environment variables are checked in order:
    AzureWebJobsStorage, ConnectionStrings__AzureStorage, Storage__ConnectionString.
    """

    CONNECTION_STRING_ENV_VARS = (
        "AzureWebJobsStorage",
        "ConnectionStrings__AzureStorage",
        "Storage__ConnectionString",
    )

    # Product image links are handed out as read-only SAS URLs
    IMAGE_SAS_DAYS = 7

    # Base64 keeps messages readable by Functions queue triggers
    QUEUE_BASE64_ENCODING = True


class StorageNames:
    """Names of every table, container, queue and share the storefront uses."""

    # Tables
    TABLE_CUSTOMERS = "Customers"
    TABLE_PRODUCTS = "Products"
    TABLE_ORDERS = "Orders"

    # Blob containers
    CONTAINER_UPLOADS = "uploads"
    CONTAINER_PRODUCT_IMAGES = "product-images"
    CONTAINER_PAYMENT_PROOFS = "payment-proofs"

    # Queues
    QUEUE_ORDERS = "orders-queue"
    QUEUE_ORDER_NOTIFICATIONS = "order-notifications"
    QUEUE_STOCK_UPDATES = "stock-updates"
    QUEUE_ORDER_NOTIFICATIONS_POISON = "order-notifications-poison"
    QUEUE_STOCK_UPDATES_POISON = "stock-updates-poison"

    # File share
    SHARE_CONTRACTS = "contracts"
    SHARE_CONTRACTS_PAYMENTS_DIR = "payments"

    TABLES = (TABLE_CUSTOMERS, TABLE_PRODUCTS, TABLE_ORDERS)
    CONTAINERS = (CONTAINER_UPLOADS, CONTAINER_PRODUCT_IMAGES, CONTAINER_PAYMENT_PROOFS)
    QUEUES = (
        QUEUE_ORDERS,
        QUEUE_ORDER_NOTIFICATIONS,
        QUEUE_STOCK_UPDATES,
        QUEUE_ORDER_NOTIFICATIONS_POISON,
        QUEUE_STOCK_UPDATES_POISON,
    )


# =============================================================================
# DATABASE DEFAULTS
# =============================================================================

class DatabaseDefaults:
    """PostgreSQL connection reference values."""

    HOST = "localhost"
    PORT = 5432
    DATABASE = "storefront"
    SCHEMA = "public"
    SSLMODE = "prefer"

    USERS_TABLE = "users"
    CART_TABLE = "cart"


# =============================================================================
# AUTH DEFAULTS
# =============================================================================

class AuthDefaults:
    """Session cookie settings."""

    # Development placeholder - MUST be overridden with SESSION_SECRET_KEY in prod
    SECRET_KEY = "change-me-in-production"
    COOKIE_NAME = "storefront_session"

    REMEMBER_ME_DAYS = 30
    SESSION_HOURS = 24

    DEFAULT_ROLE = "Customer"
    ADMIN_ROLE = "Admin"
