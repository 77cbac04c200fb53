"""
Custom Exception Hierarchy

Distinguishes between:
1. Contract Violations (programming bugs that need fixing)
2. Business Logic Failures (expected runtime issues)

This separation ensures bugs are found quickly while the system
remains robust to expected failures. The web layer maps business
failures to form errors, flash messages or status pages.
"""


class ContractViolationError(TypeError):
    """
    Raised when component contracts are violated (programming bugs).

    These should NEVER be caught and handled - they indicate bugs
    that need to be fixed in the code.

    Examples:
        - Table repository asked for a class that is not a TableModel
        - Queue repository given a message that is neither str nor BaseModel
    """
    pass


class BusinessLogicError(Exception):
    """
    Base class for expected runtime business logic failures.

    These are normal failures that occur during system operation
    and should be handled gracefully without crashing.
    """
    pass


class DatabaseError(BusinessLogicError):
    """
    Relational store failures.

    Examples:
        - Connection lost
        - Constraint violation
        - Transaction rollback
    """
    pass


class StorageError(BusinessLogicError):
    """
    Azure Storage failures.

    Examples:
        - Provisioning of tables/containers/queues/shares failed
        - Blob upload rejected
        - Optimistic concurrency (etag) mismatch on update
    """
    pass


class ResourceNotFoundError(BusinessLogicError):
    """
    Requested resource does not exist.

    Examples:
        - Product id not in the Products table
        - Customer and matching user both missing
        - Order id not in the Orders table
    """
    pass


class ValidationError(BusinessLogicError):
    """
    Business validation failed.

    Note: This is different from ContractViolationError.
    This is for business rule validation, not type contracts.

    Examples:
        - Price does not parse or is not positive
        - Username already taken
        - Cart is empty at checkout
        - No file selected for upload
    """

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.message = message
        self.field = field


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the stock on hand."""

    def __init__(self, message: str, product_name: str, available: int):
        super().__init__(message, field="quantity")
        self.product_name = product_name
        self.available = available


class ConfigurationError(Exception):
    """
    System configuration error.

    These are typically fatal and indicate misconfiguration
    that prevents the system from operating.

    Examples:
        - No storage connection string or account name
        - Invalid connection strings
    """
    pass
