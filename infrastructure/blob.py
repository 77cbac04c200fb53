"""
Blob Storage Repository.

Product image and payment proof uploads. Product images are stored under
a fresh UUID name and handed out as read-only SAS URLs; other uploads keep
their original file name behind a timestamp prefix.

SAS generation:
    - Connection string with an account key: service SAS signed with the key
    - DefaultAzureCredential: user delegation SAS
    - Neither possible: the plain blob URL is returned

Exports:
    BlobRepository: Singleton blob repository
    timestamped_name: "{YYYYMMDD_HHMMSS}_{filename}" helper
"""

import mimetypes
import os
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.identity import DefaultAzureCredential
from azure.storage.blob import (
    BlobSasPermissions,
    BlobServiceClient,
    ContainerClient,
    ContentSettings,
    generate_blob_sas,
)

from config import StorageConfig, get_config
from .base import BaseRepository


def timestamped_name(filename: str) -> str:
    """Prefix a file name with the local upload time."""
    return f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_{os.path.basename(filename)}"


class BlobRepository(BaseRepository):
    """
    Azure Blob Storage repository.

    Container clients are cached per name and containers are created on
    first use.

    Usage:
        blobs = BlobRepository.instance()
        url = blobs.upload_image(data, "shoe.png", "product-images")
    """

    _instance: Optional['BlobRepository'] = None
    _lock = threading.Lock()

    def __init__(self, service_client: Optional[BlobServiceClient] = None,
                 config: Optional[StorageConfig] = None):
        super().__init__()
        config = config or get_config().storage
        self.sas_days = config.image_sas_days
        self.use_managed_identity = False
        if service_client is None:
            config.require_credentials()
            if config.connection_string:
                self.logger.info("🔐 Initializing BlobRepository with connection string")
                service_client = BlobServiceClient.from_connection_string(config.connection_string)
            else:
                self.logger.info(
                    f"🔐 Initializing BlobRepository with DefaultAzureCredential for account: {config.account_name}"
                )
                service_client = BlobServiceClient(
                    account_url=config.account_url("blob"),
                    credential=DefaultAzureCredential()
                )
                self.use_managed_identity = True
        self.blob_service = service_client
        self._container_clients: Dict[str, ContainerClient] = {}

    @classmethod
    def instance(cls) -> 'BlobRepository':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def _get_container_client(self, container: str) -> ContainerClient:
        """
        Get or create cached container client.

        The container is created the first time it is requested.
        """
        if container not in self._container_clients:
            container_client = self.blob_service.get_container_client(container)
            with self._error_context("container creation", container):
                try:
                    container_client.create_container()
                    self.logger.info(f"✅ Created container: {container}")
                except ResourceExistsError:
                    self.logger.debug(f"Container already exists: {container}")
            self._container_clients[container] = container_client
        return self._container_clients[container]

    def create_container(self, container: str) -> bool:
        """
        Create a container if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        with self._error_context("container creation", container):
            try:
                self.blob_service.create_container(container)
                self.logger.info(f"✅ Created container: {container}")
                return True
            except ResourceExistsError:
                self.logger.debug(f"Container already exists: {container}")
                return False

    # ========================================================================
    # UPLOADS
    # ========================================================================

    def upload_image(self, data: bytes, filename: str, container: str) -> str:
        """
        Upload an image under a new UUID name.

        Args:
            data: Image bytes
            filename: Original file name (only its extension is kept)
            container: Target container

        Returns:
            Read-only SAS URL valid for image_sas_days, or the plain blob URL
            when no SAS can be produced
        """
        extension = os.path.splitext(filename or "")[1]
        blob_name = f"{uuid.uuid4()}{extension}"
        content_type = mimetypes.guess_type(filename or "")[0] or "application/octet-stream"

        container_client = self._get_container_client(container)
        blob_client = container_client.get_blob_client(blob_name)
        with self._error_context("image upload", f"{container}/{blob_name}"):
            blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type)
            )
        self.logger.info(f"✅ Uploaded image: {container}/{blob_name} ({len(data)} bytes)")

        return self.get_blob_url_with_sas(container, blob_name, blob_client.url)

    def upload_file(self, data: bytes, filename: str, container: str) -> str:
        """
        Upload a file as "{YYYYMMDD_HHMMSS}_{filename}".

        Returns:
            The stored blob name
        """
        blob_name = timestamped_name(filename)
        container_client = self._get_container_client(container)
        with self._error_context("file upload", f"{container}/{blob_name}"):
            container_client.get_blob_client(blob_name).upload_blob(data, overwrite=True)
        self.logger.info(f"✅ Uploaded file: {container}/{blob_name} ({len(data)} bytes)")
        return blob_name

    def delete_blob(self, blob_name: str, container: str) -> bool:
        """
        Delete a blob if it exists.

        Returns:
            True if deleted, False if it did not exist
        """
        container_client = self._get_container_client(container)
        with self._error_context("blob delete", f"{container}/{blob_name}"):
            deleted = container_client.get_blob_client(blob_name).delete_blob_if_exists()
        deleted = bool(deleted)
        if deleted:
            self.logger.info(f"🗑️ Deleted blob: {container}/{blob_name}")
        else:
            self.logger.warning(f"Blob not found for deletion: {container}/{blob_name}")
        return deleted

    # ========================================================================
    # SAS
    # ========================================================================

    def get_blob_url_with_sas(self, container_name: str, blob_name: str, blob_url: str) -> str:
        """
        Append a read-only SAS token to a blob URL.

        Args:
            container_name: Container name
            blob_name: Blob name
            blob_url: Plain blob URL

        Returns:
            blob_url with SAS query string, or blob_url unchanged when a
            SAS cannot be produced
        """
        start_time = datetime.now(timezone.utc)
        expiry_time = start_time + timedelta(days=self.sas_days)
        account_name = self.blob_service.account_name
        account_key = getattr(self.blob_service.credential, "account_key", None)

        if account_key:
            sas_token = generate_blob_sas(
                account_name=account_name,
                container_name=container_name,
                blob_name=blob_name,
                account_key=account_key,
                permission=BlobSasPermissions(read=True),
                expiry=expiry_time
            )
            return f"{blob_url}?{sas_token}"

        if self.use_managed_identity:
            try:
                user_delegation_key = self.blob_service.get_user_delegation_key(
                    key_start_time=start_time,
                    key_expiry_time=expiry_time
                )
            except AzureError as e:
                self.logger.warning(
                    f"⚠️ Could not get user delegation key, returning plain URL "
                    f"(needs 'Storage Blob Delegator' role): {e}"
                )
                return blob_url
            sas_token = generate_blob_sas(
                account_name=account_name,
                container_name=container_name,
                blob_name=blob_name,
                user_delegation_key=user_delegation_key,
                permission=BlobSasPermissions(read=True),
                expiry=expiry_time,
                start=start_time
            )
            return f"{blob_url}?{sas_token}"

        self.logger.debug(f"No SAS signer available for {container_name}/{blob_name}, returning plain URL")
        return blob_url
