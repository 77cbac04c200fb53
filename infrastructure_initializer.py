"""
Infrastructure Initialization Service for the storefront.

This module ensures all required Azure storage resources exist before the
application serves requests. It creates and validates:

- Azure Storage Tables (Customers, Products, Orders)
- Blob containers (uploads, product-images, payment-proofs)
- Azure Storage Queues (orders-queue, order-notifications, stock-updates, poison queues)
- The contracts file share and its payments directory

Key Features:
    - Idempotent operations (safe to run multiple times)
    - Per-resource error reporting
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import StorageNames
from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "InfrastructureInitializer")


@dataclass
class InfrastructureStatus:
    """Status of infrastructure initialization"""
    tables_created: List[str] = field(default_factory=list)
    tables_validated: List[str] = field(default_factory=list)
    tables_failed: List[str] = field(default_factory=list)
    containers_created: List[str] = field(default_factory=list)
    containers_validated: List[str] = field(default_factory=list)
    containers_failed: List[str] = field(default_factory=list)
    queues_created: List[str] = field(default_factory=list)
    queues_validated: List[str] = field(default_factory=list)
    queues_failed: List[str] = field(default_factory=list)
    shares_created: List[str] = field(default_factory=list)
    shares_validated: List[str] = field(default_factory=list)
    shares_failed: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def overall_success(self) -> bool:
        return not (self.tables_failed or self.containers_failed
                    or self.queues_failed or self.shares_failed)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'tables_created': self.tables_created,
            'tables_validated': self.tables_validated,
            'tables_failed': self.tables_failed,
            'containers_created': self.containers_created,
            'containers_validated': self.containers_validated,
            'containers_failed': self.containers_failed,
            'queues_created': self.queues_created,
            'queues_validated': self.queues_validated,
            'queues_failed': self.queues_failed,
            'shares_created': self.shares_created,
            'shares_validated': self.shares_validated,
            'shares_failed': self.shares_failed,
            'errors': self.errors,
            'overall_success': self.overall_success
        }


class InfrastructureInitializer:
    """
    Ensures all required Azure storage resources exist.

    Works through the storage repositories so it shares their clients and
    authentication mode.

    Usage:
        initializer = InfrastructureInitializer(tables, blobs, queues, shares)
        status = initializer.initialize_all()
        if not status.overall_success:
            logger.error(f"Infrastructure issues: {status.to_dict()}")
    """

    REQUIRED_TABLES = StorageNames.TABLES
    REQUIRED_CONTAINERS = StorageNames.CONTAINERS
    REQUIRED_QUEUES = StorageNames.QUEUES
    REQUIRED_SHARES = {StorageNames.SHARE_CONTRACTS: [StorageNames.SHARE_CONTRACTS_PAYMENTS_DIR]}

    def __init__(self, tables, blobs, queues, shares):
        self.tables = tables
        self.blobs = blobs
        self.queues = queues
        self.shares = shares

    def initialize_all(self) -> InfrastructureStatus:
        """
        Create every missing table, container, queue, share and directory.

        Returns:
            InfrastructureStatus: Detailed status of initialization
        """
        logger.info("🚀 Starting infrastructure initialization")
        status = InfrastructureStatus()

        logger.info("📊 Initializing storage tables...")
        self._initialize(self.REQUIRED_TABLES, self.tables.create_table, "table",
                         status.tables_created, status.tables_validated, status.tables_failed, status)

        logger.info("🗂️ Initializing blob containers...")
        self._initialize(self.REQUIRED_CONTAINERS, self.blobs.create_container, "container",
                         status.containers_created, status.containers_validated, status.containers_failed, status)

        logger.info("📮 Initializing storage queues...")
        self._initialize(self.REQUIRED_QUEUES, self.queues.create_queue, "queue",
                         status.queues_created, status.queues_validated, status.queues_failed, status)

        logger.info("📁 Initializing file shares...")
        self._initialize_shares(status)

        if status.overall_success:
            logger.info("✅ Infrastructure initialization completed successfully")
        else:
            logger.error("❌ Infrastructure initialization had failures")
            logger.error(f"Failed resources: {status.errors}")

        return status

    def _initialize(self, names, create, kind: str, created: List[str], validated: List[str],
                    failed: List[str], status: InfrastructureStatus) -> None:
        for name in names:
            try:
                if create(name):
                    created.append(name)
                else:
                    validated.append(name)
            except Exception as e:
                failed.append(name)
                status.errors[f"{kind}:{name}"] = str(e)
                logger.error(f"❌ Failed to initialize {kind} {name}: {e}")

    def _initialize_shares(self, status: InfrastructureStatus) -> None:
        for share_name, directories in self.REQUIRED_SHARES.items():
            current: Optional[str] = share_name
            try:
                if self.shares.create_share(share_name):
                    status.shares_created.append(share_name)
                else:
                    status.shares_validated.append(share_name)
                for directory in directories:
                    current = f"{share_name}/{directory}"
                    if self.shares.create_directory(share_name, directory):
                        status.shares_created.append(current)
                    else:
                        status.shares_validated.append(current)
            except Exception as e:
                status.shares_failed.append(current)
                status.errors[f"share:{current}"] = str(e)
                logger.error(f"❌ Failed to initialize share {current}: {e}")
