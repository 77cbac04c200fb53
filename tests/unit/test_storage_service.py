"""
StorageService provisioning guard and InfrastructureInitializer status.
"""

from unittest.mock import MagicMock

import pytest

from config import StorageNames
from exceptions import StorageError
from infrastructure.storage import StorageService
from infrastructure_initializer import InfrastructureInitializer


@pytest.fixture(autouse=True)
def reset_guard():
    StorageService.reset_initialization()
    yield
    StorageService.reset_initialization()


def make_repos():
    tables, blobs, queues, shares = MagicMock(), MagicMock(), MagicMock(), MagicMock()
    tables.create_table.return_value = True
    blobs.create_container.return_value = True
    queues.create_queue.return_value = False
    shares.create_share.return_value = True
    shares.create_directory.return_value = False
    return tables, blobs, queues, shares


def make_service(*repos, auto_initialize=True):
    tables, blobs, queues, shares = repos or make_repos()
    return StorageService(tables=tables, blobs=blobs, queues=queues, shares=shares,
                          auto_initialize=auto_initialize)


class TestInitializationGuard:
    def test_provisions_on_construction(self):
        repos = make_repos()
        service = make_service(*repos)
        assert StorageService.is_initialized()
        assert repos[0].create_table.call_count == len(StorageNames.TABLES)
        assert service.last_status.overall_success

    def test_second_service_skips_provisioning(self):
        make_service()
        repos = make_repos()
        service = make_service(*repos)
        repos[0].create_table.assert_not_called()
        assert service.last_status is None

    def test_force_reruns(self):
        repos = make_repos()
        service = make_service(*repos)
        status = service.initialize(force=True)
        assert status is not None
        assert repos[0].create_table.call_count == 2 * len(StorageNames.TABLES)

    def test_failed_run_leaves_guard_unset(self):
        repos = make_repos()
        repos[2].create_queue.side_effect = RuntimeError("queue service unavailable")

        with pytest.raises(StorageError, match="queue:orders-queue"):
            make_service(*repos)
        assert not StorageService.is_initialized()

        repos[2].create_queue.side_effect = None
        make_service(*repos)
        assert StorageService.is_initialized()

    def test_deferred_initialization(self):
        make_service(auto_initialize=False)
        assert not StorageService.is_initialized()


class TestDelegation:
    def test_calls_reach_repositories(self):
        tables, blobs, queues, shares = make_repos()
        service = make_service(tables, blobs, queues, shares)

        service.get_entity(object, "Product", "p-1")
        tables.get_entity.assert_called_once_with(object, "Product", "p-1")

        service.upload_file(b"x", "a.pdf", "payment-proofs")
        blobs.upload_file.assert_called_once_with(b"x", "a.pdf", "payment-proofs")

        service.send_message("stock-updates", "body")
        queues.send_message.assert_called_once_with("stock-updates", "body")

        service.upload_to_file_share(b"x", "a.pdf", "contracts", "payments")
        shares.upload_file.assert_called_once_with(b"x", "a.pdf", "contracts", "payments")


class TestInfrastructureInitializer:
    def test_status_sorts_created_and_validated(self):
        status = InfrastructureInitializer(*make_repos()).initialize_all()
        assert status.tables_created == list(StorageNames.TABLES)
        assert status.containers_created == list(StorageNames.CONTAINERS)
        assert status.queues_validated == list(StorageNames.QUEUES)
        assert status.shares_created == ["contracts"]
        assert status.shares_validated == ["contracts/payments"]
        assert status.to_dict()["overall_success"] is True

    def test_one_failure_does_not_stop_others(self):
        tables, blobs, queues, shares = make_repos()
        tables.create_table.side_effect = [True, RuntimeError("boom"), True]

        status = InfrastructureInitializer(tables, blobs, queues, shares).initialize_all()

        assert status.tables_failed == ["Products"]
        assert status.tables_created == ["Customers", "Orders"]
        assert status.errors == {"table:Products": "boom"}
        assert not status.overall_success
        assert blobs.create_container.call_count == len(StorageNames.CONTAINERS)

    def test_directory_failure_reported_with_path(self):
        tables, blobs, queues, shares = make_repos()
        shares.create_directory.side_effect = RuntimeError("denied")

        status = InfrastructureInitializer(tables, blobs, queues, shares).initialize_all()

        assert status.shares_created == ["contracts"]
        assert status.shares_failed == ["contracts/payments"]
        assert "share:contracts/payments" in status.errors
