"""
Azure Storage Configuration.

Provides configuration for:
    - Connection string resolution (three environment variable names)
    - Passwordless access via DefaultAzureCredential (account name only)
    - SAS lifetime for product images
    - Queue message encoding

Exports:
    StorageConfig: Pydantic storage configuration model
"""

import os
from typing import Optional
from pydantic import BaseModel, Field

from exceptions import ConfigurationError
from .defaults import StorageDefaults


class StorageConfig(BaseModel):
    """
    Azure Storage account configuration.

    Two authentication modes:
    - Connection string (local dev / Azurite / account key deployments)
    - Account name + DefaultAzureCredential (managed identity)

    The connection string wins when both are set.
    """

    connection_string: Optional[str] = Field(
        default=None,
        repr=False,
        description="Storage connection string from AzureWebJobsStorage, "
                    "ConnectionStrings__AzureStorage or Storage__ConnectionString"
    )

    account_name: Optional[str] = Field(
        default=None,
        description="Storage account name for DefaultAzureCredential auth (STORAGE_ACCOUNT_NAME)",
        examples=["storefrontstorage"]
    )

    image_sas_days: int = Field(
        default=StorageDefaults.IMAGE_SAS_DAYS,
        ge=1,
        le=7,
        description="Validity of product image SAS URLs in days (user delegation keys cap at 7)"
    )

    queue_base64_encoding: bool = Field(
        default=StorageDefaults.QUEUE_BASE64_ENCODING,
        description="Base64-encode queue message bodies (Functions queue trigger compatible)"
    )

    @property
    def use_managed_identity(self) -> bool:
        """True when clients should authenticate with DefaultAzureCredential."""
        return not self.connection_string and bool(self.account_name)

    def account_url(self, service: str) -> str:
        """
        Build the service endpoint for managed identity mode.

        Args:
            service: One of 'blob', 'queue', 'table', 'file'

        Returns:
            https://{account}.{service}.core.windows.net
        """
        if not self.account_name:
            raise ConfigurationError("STORAGE_ACCOUNT_NAME is required for managed identity storage access")
        return f"https://{self.account_name}.{service}.core.windows.net"

    def require_credentials(self) -> None:
        """Raise ConfigurationError when no way to reach the storage account is configured."""
        if not self.connection_string and not self.account_name:
            raise ConfigurationError("Azure Storage connection string not found")

    def debug_dict(self) -> dict:
        """Debug output with masked connection string."""
        return {
            "connection_string": "***MASKED***" if self.connection_string else None,
            "account_name": self.account_name,
            "use_managed_identity": self.use_managed_identity,
            "image_sas_days": self.image_sas_days,
            "queue_base64_encoding": self.queue_base64_encoding,
        }

    @staticmethod
    def resolve_connection_string() -> Optional[str]:
        """Return the first non-empty connection string from the supported variables."""
        for env_var in StorageDefaults.CONNECTION_STRING_ENV_VARS:
            value = os.environ.get(env_var)
            if value:
                return value
        return None

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            connection_string=cls.resolve_connection_string(),
            account_name=os.environ.get("STORAGE_ACCOUNT_NAME") or None,
            image_sas_days=int(os.environ.get("IMAGE_SAS_DAYS", str(StorageDefaults.IMAGE_SAS_DAYS))),
            queue_base64_encoding=os.environ.get(
                "QUEUE_BASE64_ENCODING", str(StorageDefaults.QUEUE_BASE64_ENCODING)
            ).lower() == "true",
        )
