"""
File Share Repository.

Azure Files access for contract documents and payment proofs. Uploaded
files are named "{YYYYMMDD_HHMMSS}_{filename}" inside an optional
directory that is created on demand.

Exports:
    FileShareRepository: Singleton file share repository
"""

import threading
from typing import Dict, Optional

from azure.core.exceptions import ResourceExistsError
from azure.identity import DefaultAzureCredential
from azure.storage.fileshare import ShareClient, ShareDirectoryClient, ShareServiceClient

from config import StorageConfig, get_config
from .base import BaseRepository
from .blob import timestamped_name


class FileShareRepository(BaseRepository):
    """
    Azure file share repository.

    With DefaultAzureCredential the client is created with
    token_intent="backup", which the file service requires for OAuth access.
    """

    _instance: Optional['FileShareRepository'] = None
    _lock = threading.Lock()

    def __init__(self, service_client: Optional[ShareServiceClient] = None,
                 config: Optional[StorageConfig] = None):
        super().__init__()
        if service_client is None:
            config = config or get_config().storage
            config.require_credentials()
            if config.connection_string:
                self.logger.info("🔐 Initializing FileShareRepository with connection string")
                service_client = ShareServiceClient.from_connection_string(config.connection_string)
            else:
                self.logger.info(
                    f"🔐 Initializing FileShareRepository with DefaultAzureCredential for account: {config.account_name}"
                )
                service_client = ShareServiceClient(
                    account_url=config.account_url("file"),
                    credential=DefaultAzureCredential(),
                    token_intent="backup"
                )
        self.share_service = service_client
        self._share_clients: Dict[str, ShareClient] = {}

    @classmethod
    def instance(cls) -> 'FileShareRepository':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def _get_share_client(self, share_name: str) -> ShareClient:
        if share_name not in self._share_clients:
            self._share_clients[share_name] = self.share_service.get_share_client(share_name)
            self.logger.debug(f"Created share client for: {share_name}")
        return self._share_clients[share_name]

    def _get_directory_client(self, share_name: str, directory: str, create: bool) -> ShareDirectoryClient:
        share_client = self._get_share_client(share_name)
        if not directory:
            return share_client.get_directory_client()

        directory_client = share_client.get_directory_client(directory)
        if create:
            with self._error_context("directory creation", f"{share_name}/{directory}"):
                try:
                    directory_client.create_directory()
                    self.logger.info(f"✅ Created directory: {share_name}/{directory}")
                except ResourceExistsError:
                    self.logger.debug(f"Directory already exists: {share_name}/{directory}")
        return directory_client

    def create_share(self, share_name: str) -> bool:
        """
        Create a share if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        with self._error_context("share creation", share_name):
            try:
                self._get_share_client(share_name).create_share()
                self.logger.info(f"✅ Created share: {share_name}")
                return True
            except ResourceExistsError:
                self.logger.debug(f"Share already exists: {share_name}")
                return False

    def create_directory(self, share_name: str, directory: str) -> bool:
        """
        Create a directory in a share if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        with self._error_context("directory creation", f"{share_name}/{directory}"):
            try:
                self._get_share_client(share_name).get_directory_client(directory).create_directory()
                self.logger.info(f"✅ Created directory: {share_name}/{directory}")
                return True
            except ResourceExistsError:
                self.logger.debug(f"Directory already exists: {share_name}/{directory}")
                return False

    def upload_file(self, data: bytes, filename: str, share_name: str, directory: str = "") -> str:
        """
        Upload a file into a share.

        Args:
            data: File content
            filename: Original file name
            share_name: Target share
            directory: Directory inside the share ("" for the root)

        Returns:
            The stored file name
        """
        name = timestamped_name(filename)
        directory_client = self._get_directory_client(share_name, directory, create=True)
        with self._error_context("share upload", f"{share_name}/{directory}/{name}"):
            directory_client.get_file_client(name).upload_file(data, length=len(data))
        self.logger.info(f"✅ Uploaded file to share: {share_name}/{directory or '.'}/{name} ({len(data)} bytes)")
        return name

    def download_file(self, share_name: str, filename: str, directory: str = "") -> bytes:
        """Read a file from a share."""
        directory_client = self._get_directory_client(share_name, directory, create=False)
        with self._error_context("share download", f"{share_name}/{directory}/{filename}"):
            data = directory_client.get_file_client(filename).download_file().readall()
        self.logger.debug(f"Read {len(data)} bytes from {share_name}/{directory or '.'}/{filename}")
        return data
