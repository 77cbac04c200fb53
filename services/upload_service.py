"""
Upload Service.

Proof-of-payment uploads. Every file is stored twice: in the
payment-proofs blob container and in the payments directory of the
contracts file share.

Exports:
    UploadService: Proof-of-payment upload
    UploadResult: Stored names
"""

from dataclasses import dataclass
from typing import Optional

from util_logger import LoggerFactory, ComponentType
from config import StorageNames
from exceptions import ValidationError

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "UploadService")


@dataclass
class UploadResult:
    blob_name: str
    share_file_name: str


class UploadService:
    """Stores proof-of-payment documents."""

    def __init__(self, storage):
        self.storage = storage

    def upload_proof_of_payment(self, data: Optional[bytes], filename: str,
                                order_id: str = "", customer_name: str = "") -> UploadResult:
        """
        Store a proof of payment in blob storage and the contracts share.

        Raises:
            ValidationError: No file, or an empty one
        """
        if not data or not filename:
            logger.warning("No file selected for upload.")
            raise ValidationError("Please select a file to upload.", field="proof_of_payment")

        logger.info(
            f"Starting uploads for file {filename} (size: {len(data)} bytes). "
            f"OrderId: {order_id}, Customer: {customer_name}"
        )
        blob_name = self.storage.upload_file(data, filename, StorageNames.CONTAINER_PAYMENT_PROOFS)
        logger.info(f"Blob upload complete. Container: {StorageNames.CONTAINER_PAYMENT_PROOFS}, StoredName: {blob_name}")

        share_file_name = self.storage.upload_to_file_share(
            data, filename, StorageNames.SHARE_CONTRACTS, StorageNames.SHARE_CONTRACTS_PAYMENTS_DIR
        )
        logger.info(
            f"File share upload complete. Share: {StorageNames.SHARE_CONTRACTS}, "
            f"Directory: {StorageNames.SHARE_CONTRACTS_PAYMENTS_DIR}, StoredName: {share_file_name}"
        )

        return UploadResult(blob_name=blob_name, share_file_name=share_file_name)
