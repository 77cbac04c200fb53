"""
Pure Enumeration Types for the Storefront.

No business logic - pure type definitions only.

Exports:
    OrderStatus: Order state enumeration
    UserRole: Account role enumeration
"""

from enum import Enum


class OrderStatus(str, Enum):
    """
    Valid status values for orders placed through the storefront.

    State transitions (admin edits):
    - SUBMITTED -> PROCESSING -> COMPLETED
    - SUBMITTED/PROCESSING -> CANCELLED

    An external order processor may also write "PROCESSED";
    that value is counted on the admin dashboard but never set here.
    """

    SUBMITTED = "Submitted"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @classmethod
    def pending_values(cls) -> tuple:
        """Statuses that count as pending on the admin dashboard."""
        return (cls.SUBMITTED.value, cls.PROCESSING.value)


# Written by the downstream queue processor
PROCESSED_STATUS = "PROCESSED"


class UserRole(str, Enum):
    """Account roles stored in the users table."""

    CUSTOMER = "Customer"
    ADMIN = "Admin"
