"""
Table Storage Repository.

Entity CRUD over Azure Table Storage for the TableModel entities
(Customer, Product, Order). Each model class maps to one table:

    Customer -> Customers
    Product  -> Products
    Order    -> Orders
    <Other>  -> <Other>s

Updates are full replacements. An entity read from the table carries its
ETag and is written back with an If-Match precondition; an entity built
in memory (no ETag) is written unconditionally.

Exports:
    TableRepository: Singleton table repository
    table_name_for: Model class -> table name
"""

import threading
from typing import Dict, List, Optional, Type, TypeVar

from azure.core import MatchConditions
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError, ResourceModifiedError
from azure.data.tables import TableClient, TableServiceClient, UpdateMode
from azure.identity import DefaultAzureCredential

from config import StorageConfig, StorageNames, get_config
from core.models import TableModel
from exceptions import ContractViolationError, StorageError
from .base import BaseRepository

T = TypeVar("T", bound=TableModel)

_TABLE_NAMES = {
    "Customer": StorageNames.TABLE_CUSTOMERS,
    "Product": StorageNames.TABLE_PRODUCTS,
    "Order": StorageNames.TABLE_ORDERS,
}


def table_name_for(model_cls: type) -> str:
    """Table name for a model class (class name + 's' when not a known entity)."""
    return _TABLE_NAMES.get(model_cls.__name__, f"{model_cls.__name__}s")


class TableRepository(BaseRepository):
    """
    Azure Table Storage repository.

    Authenticates with the connection string when one is configured,
    otherwise with DefaultAzureCredential against the account endpoint.
    Table clients are cached per table name.

    Usage:
        tables = TableRepository.instance()
        products = tables.get_all_entities(Product)
        product = tables.get_entity(Product, "Product", product_id)
    """

    _instance: Optional['TableRepository'] = None
    _lock = threading.Lock()

    def __init__(self, service_client: Optional[TableServiceClient] = None,
                 config: Optional[StorageConfig] = None):
        super().__init__()
        if service_client is None:
            config = config or get_config().storage
            config.require_credentials()
            if config.connection_string:
                self.logger.info("🔐 Initializing TableRepository with connection string")
                service_client = TableServiceClient.from_connection_string(config.connection_string)
            else:
                self.logger.info(
                    f"🔐 Initializing TableRepository with DefaultAzureCredential for account: {config.account_name}"
                )
                service_client = TableServiceClient(
                    endpoint=config.account_url("table"),
                    credential=DefaultAzureCredential()
                )
        self.table_service = service_client
        self._table_clients: Dict[str, TableClient] = {}

    @classmethod
    def instance(cls) -> 'TableRepository':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def _get_table_client(self, table_name: str) -> TableClient:
        if table_name not in self._table_clients:
            self._table_clients[table_name] = self.table_service.get_table_client(table_name)
            self.logger.debug(f"Created table client for: {table_name}")
        return self._table_clients[table_name]

    def _client_for(self, model_cls: type) -> TableClient:
        if not (isinstance(model_cls, type) and issubclass(model_cls, TableModel)):
            raise ContractViolationError(f"Expected a TableModel subclass, got {model_cls!r}")
        return self._get_table_client(table_name_for(model_cls))

    def create_table(self, table_name: str) -> bool:
        """
        Create a table if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        with self._error_context("table creation", table_name):
            try:
                self.table_service.create_table(table_name)
                self.logger.info(f"✅ Created table: {table_name}")
                return True
            except ResourceExistsError:
                self.logger.debug(f"Table already exists: {table_name}")
                return False

    # ========================================================================
    # ENTITY OPERATIONS
    # ========================================================================

    def get_all_entities(self, model_cls: Type[T]) -> List[T]:
        """Read every entity of a table into models."""
        table_client = self._client_for(model_cls)
        with self._error_context(f"{table_name_for(model_cls)} listing"):
            entities = [model_cls.from_entity(e) for e in table_client.list_entities()]
        self.logger.debug(f"📋 Read {len(entities)} entities from {table_name_for(model_cls)}")
        return entities

    def get_entity(self, model_cls: Type[T], partition_key: str, row_key: str) -> Optional[T]:
        """
        Read one entity.

        Returns:
            The model, or None when the entity does not exist
        """
        table_client = self._client_for(model_cls)
        with self._error_context(f"{table_name_for(model_cls)} read", row_key):
            try:
                entity = table_client.get_entity(partition_key=partition_key, row_key=row_key)
            except ResourceNotFoundError:
                self.logger.debug(f"Entity not found: {table_name_for(model_cls)}/{partition_key}/{row_key}")
                return None
            return model_cls.from_entity(entity)

    def add_entity(self, entity: T) -> T:
        """Insert a new entity; the returned model carries the new ETag."""
        table_client = self._client_for(type(entity))
        with self._error_context(f"{table_name_for(type(entity))} insert", entity.row_key):
            metadata = table_client.create_entity(entity=entity.to_entity())
        if metadata and metadata.get("etag"):
            entity.etag = metadata["etag"]
        self.logger.info(f"✅ Added entity {table_name_for(type(entity))}/{entity.row_key}")
        return entity

    def update_entity(self, entity: T) -> T:
        """
        Replace an existing entity.

        Raises:
            StorageError: The entity changed since it was read (ETag mismatch)
        """
        table_client = self._client_for(type(entity))
        if entity.etag:
            conditions = {"etag": entity.etag, "match_condition": MatchConditions.IfNotModified}
        else:
            conditions = {"match_condition": MatchConditions.Unconditionally}

        with self._error_context(f"{table_name_for(type(entity))} update", entity.row_key):
            try:
                metadata = table_client.update_entity(
                    entity=entity.to_entity(),
                    mode=UpdateMode.REPLACE,
                    **conditions
                )
            except ResourceModifiedError as e:
                raise StorageError(
                    f"{type(entity).__name__} {entity.row_key} was modified by another request"
                ) from e

        if metadata and metadata.get("etag"):
            entity.etag = metadata["etag"]
        self.logger.info(f"✅ Updated entity {table_name_for(type(entity))}/{entity.row_key}")
        return entity

    def delete_entity(self, model_cls: type, partition_key: str, row_key: str) -> None:
        """Delete an entity (no error when it is already gone)."""
        table_client = self._client_for(model_cls)
        with self._error_context(f"{table_name_for(model_cls)} delete", row_key):
            table_client.delete_entity(partition_key=partition_key, row_key=row_key)
        self.logger.info(f"🗑️ Deleted entity {table_name_for(model_cls)}/{row_key}")
