"""
Infrastructure Package - Lazy Loading Implementation.

Provides all repository implementations with lazy loading so that importing
the package does not read configuration, build Azure SDK clients or create
DefaultAzureCredential. Those happen the first time a repository class is
actually used (application lifespan, or a test that injects mocks).
"""

from typing import TYPE_CHECKING

# For type checking only - doesn't actually import at runtime
if TYPE_CHECKING:
    from .base import BaseRepository as _BaseRepository
    from .tables import TableRepository as _TableRepository
    from .blob import BlobRepository as _BlobRepository
    from .queue import QueueRepository as _QueueRepository
    from .file_share import FileShareRepository as _FileShareRepository
    from .storage import StorageService as _StorageService
    from .postgresql import PostgreSQLRepository as _PostgreSQLRepository
    from .postgresql import UserRepository as _UserRepository
    from .postgresql import CartRepository as _CartRepository
    from .database_initializer import DatabaseInitializer as _DatabaseInitializer


def __getattr__(name: str):
    """
    Lazy import mechanism - only imports when actually accessed.
    """
    # Base repository
    if name == "BaseRepository":
        from .base import BaseRepository
        return BaseRepository

    # Azure Storage repositories
    elif name == "TableRepository":
        from .tables import TableRepository
        return TableRepository
    elif name == "table_name_for":
        from .tables import table_name_for
        return table_name_for
    elif name == "BlobRepository":
        from .blob import BlobRepository
        return BlobRepository
    elif name == "QueueRepository":
        from .queue import QueueRepository
        return QueueRepository
    elif name == "FileShareRepository":
        from .file_share import FileShareRepository
        return FileShareRepository

    # Storage facade
    elif name == "StorageService":
        from .storage import StorageService
        return StorageService
    elif name == "get_storage_service":
        from .storage import get_storage_service
        return get_storage_service

    # PostgreSQL repositories
    elif name == "PostgreSQLRepository":
        from .postgresql import PostgreSQLRepository
        return PostgreSQLRepository
    elif name == "UserRepository":
        from .postgresql import UserRepository
        return UserRepository
    elif name == "CartRepository":
        from .postgresql import CartRepository
        return CartRepository
    elif name == "DatabaseInitializer":
        from .database_initializer import DatabaseInitializer
        return DatabaseInitializer

    else:
        raise AttributeError(f"module 'infrastructure' has no attribute '{name}'")


# Define what's available for * imports (though we discourage using import *)
__all__ = [
    "BaseRepository",
    "TableRepository",
    "table_name_for",
    "BlobRepository",
    "QueueRepository",
    "FileShareRepository",
    "StorageService",
    "get_storage_service",
    "PostgreSQLRepository",
    "UserRepository",
    "CartRepository",
    "DatabaseInitializer",
]
