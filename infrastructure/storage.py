"""
Storage Service - One Interface Over Tables, Blobs, Queues and Shares.

Services talk to Azure Storage only through StorageService. It delegates
to the per-kind repositories and makes sure the storage account is
provisioned (InfrastructureInitializer) once per process before the first
use.

Initialization guard:
    Double-checked class-level lock. The flag is set only after a fully
    successful provisioning run, so a failed run is retried by the next
    StorageService built in the process. initialize(force=True) always
    re-runs provisioning.

Exports:
    StorageService: Storage facade
    get_storage_service: Process-wide StorageService
"""

import threading
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from core.models import TableModel
from exceptions import StorageError
from infrastructure_initializer import InfrastructureInitializer, InfrastructureStatus
from util_logger import LoggerFactory, ComponentType
from .blob import BlobRepository
from .file_share import FileShareRepository
from .queue import QueueRepository
from .tables import TableRepository

T = TypeVar("T", bound=TableModel)

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "StorageService")


class StorageService:
    """
    Facade over the four storage repositories.

    Usage:
        storage = get_storage_service()
        products = storage.get_all_entities(Product)
        url = storage.upload_image(data, "shoe.png", "product-images")
        storage.send_message("order-notifications", message)
    """

    _initialized: bool = False
    _init_lock = threading.Lock()

    def __init__(self,
                 tables: Optional[TableRepository] = None,
                 blobs: Optional[BlobRepository] = None,
                 queues: Optional[QueueRepository] = None,
                 shares: Optional[FileShareRepository] = None,
                 auto_initialize: bool = True):
        self.tables = tables or TableRepository.instance()
        self.blobs = blobs or BlobRepository.instance()
        self.queues = queues or QueueRepository.instance()
        self.shares = shares or FileShareRepository.instance()
        self.last_status: Optional[InfrastructureStatus] = None

        if auto_initialize:
            self.initialize()

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._initialized

    @classmethod
    def reset_initialization(cls) -> None:
        """Forget that provisioning ran (next initialize() runs it again)."""
        with cls._init_lock:
            cls._initialized = False

    def initialize(self, force: bool = False) -> Optional[InfrastructureStatus]:
        """
        Provision storage resources once per process.

        Args:
            force: Re-run provisioning even if it already succeeded

        Returns:
            InfrastructureStatus of the run, or None when it was skipped

        Raises:
            StorageError: Provisioning failed (the guard stays unset)
        """
        cls = type(self)
        if cls._initialized and not force:
            return None

        with cls._init_lock:
            if cls._initialized and not force:
                return None

            logger.info("🚀 Initializing Azure Storage resources")
            try:
                status = InfrastructureInitializer(
                    self.tables, self.blobs, self.queues, self.shares
                ).initialize_all()
            except Exception as e:
                logger.error(f"❌ Azure Storage initialization failed: {e}")
                raise StorageError(f"Azure Storage initialization failed: {e}") from e

            self.last_status = status
            if not status.overall_success:
                logger.error(f"❌ Azure Storage initialization failed: {status.errors}")
                raise StorageError(
                    f"Azure Storage initialization failed for: {', '.join(sorted(status.errors))}"
                )

            cls._initialized = True
            logger.info("✅ Azure Storage resources initialized")
            return status

    # ========================================================================
    # TABLES
    # ========================================================================

    def get_all_entities(self, model_cls: Type[T]) -> List[T]:
        return self.tables.get_all_entities(model_cls)

    def get_entity(self, model_cls: Type[T], partition_key: str, row_key: str) -> Optional[T]:
        return self.tables.get_entity(model_cls, partition_key, row_key)

    def add_entity(self, entity: T) -> T:
        return self.tables.add_entity(entity)

    def update_entity(self, entity: T) -> T:
        return self.tables.update_entity(entity)

    def delete_entity(self, model_cls: type, partition_key: str, row_key: str) -> None:
        self.tables.delete_entity(model_cls, partition_key, row_key)

    # ========================================================================
    # BLOBS
    # ========================================================================

    def upload_image(self, data: bytes, filename: str, container: str) -> str:
        return self.blobs.upload_image(data, filename, container)

    def upload_file(self, data: bytes, filename: str, container: str) -> str:
        return self.blobs.upload_file(data, filename, container)

    def delete_blob(self, blob_name: str, container: str) -> bool:
        return self.blobs.delete_blob(blob_name, container)

    # ========================================================================
    # QUEUES
    # ========================================================================

    def send_message(self, queue_name: str, message: Union[str, BaseModel]) -> str:
        return self.queues.send_message(queue_name, message)

    def receive_message(self, queue_name: str) -> Optional[str]:
        return self.queues.receive_message(queue_name)

    def get_queue_length(self, queue_name: str) -> int:
        return self.queues.get_queue_length(queue_name)

    def peek_messages(self, queue_name: str, max_messages: int = 5) -> List[Dict[str, Any]]:
        return self.queues.peek_messages(queue_name, max_messages)

    # ========================================================================
    # FILE SHARES
    # ========================================================================

    def upload_to_file_share(self, data: bytes, filename: str, share_name: str, directory: str = "") -> str:
        return self.shares.upload_file(data, filename, share_name, directory)

    def download_from_file_share(self, share_name: str, filename: str, directory: str = "") -> bytes:
        return self.shares.download_file(share_name, filename, directory)


_storage_service: Optional[StorageService] = None
_storage_lock = threading.Lock()


def get_storage_service() -> StorageService:
    """
    Get the process-wide StorageService (built and provisioned on first call).

    A failed provisioning run is not cached; the next call tries again.
    """
    global _storage_service
    if _storage_service is None:
        with _storage_lock:
            if _storage_service is None:
                _storage_service = StorageService()
    return _storage_service
