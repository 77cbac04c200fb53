"""
Base Repository - Pure Abstract Class.

Abstract base repository class that all storage-specific repositories inherit from.
Contains NO storage implementation details, only common error handling
patterns and logging infrastructure.

Architecture:
    BaseRepository (this file - pure abstract)
        |
    Storage-specific bases (PostgreSQLRepository, TableRepository, etc.)
        |
    Domain-specific repositories (UserRepository, CartRepository)

Exports:
    BaseRepository: Abstract base class for repositories
"""

from abc import ABC
from contextlib import contextmanager
from typing import Optional
import logging

from azure.core.exceptions import AzureError
from pydantic import ValidationError as PydanticValidationError

from exceptions import StorageError
from util_logger import LoggerFactory, ComponentType

# Logger setup
logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Pure abstract base repository.

    Provides shared functionality for ALL repositories regardless of
    storage backend:
    - Logging setup (one component logger per repository class)
    - Error handling with consistent patterns

    Connection management and query execution belong to the
    storage-specific subclasses.

    Usage Example:
    -------------
    ```python
    class CartRepository(PostgreSQLRepository):
        def delete_item(self, cart_id):
            with self._error_context("cart item delete", str(cart_id)):
                self._execute_query(query, (cart_id,))
    ```
    """

    def __init__(self):
        """
        Initialize base repository logging.

        Subclasses MUST call super().__init__() before any storage setup.
        """
        self.logger = LoggerFactory.create_logger(
            ComponentType.REPOSITORY,
            self.__class__.__name__
        )
        logger.debug(f"🏛️ {self.__class__.__name__} base initialized")

    @contextmanager
    def _error_context(self, operation: str, entity_id: Optional[str] = None):
        """
        Context manager for consistent error handling across all operations.

        All errors are logged with the operation name (and entity id when
        given). Azure SDK errors are re-raised as StorageError; anything
        else is re-raised unchanged.

        Args:
            operation: Human-readable description, e.g. "product update"
            entity_id: Row key or id of the entity being operated on

        Logging Format:
            Model Error: "❌ Model validation failed during {operation}: {error}"
            Other Error: "❌ {operation} failed for {entity_id}: {error}"
        """
        try:
            yield

        except PydanticValidationError as e:
            # Stored row does not fit the model
            self.logger.error(f"❌ Model validation failed during {operation}: {e}")
            raise

        except AzureError as e:
            self.logger.error(self._failure_message(operation, entity_id, e))
            raise StorageError(f"{operation} failed: {e}") from e

        except Exception as e:
            self.logger.error(self._failure_message(operation, entity_id, e))
            raise

    @staticmethod
    def _failure_message(operation: str, entity_id: Optional[str], error: Exception) -> str:
        if entity_id:
            return f"❌ {operation} failed for {entity_id}: {error}"
        return f"❌ {operation} failed: {error}"
