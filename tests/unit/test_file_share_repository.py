"""
FileShareRepository uploads and downloads.
"""

import re
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import ResourceExistsError

from infrastructure.file_share import FileShareRepository


@pytest.fixture
def share():
    return MagicMock()


@pytest.fixture
def repo(share):
    service = MagicMock()
    service.get_share_client.return_value = share
    return FileShareRepository(service_client=service)


class TestUpload:
    def test_upload_to_directory(self, repo, share):
        directory = share.get_directory_client.return_value
        directory.create_directory.side_effect = ResourceExistsError("exists")

        name = repo.upload_file(b"12345", "proof.pdf", "contracts", "payments")

        assert re.fullmatch(r"\d{8}_\d{6}_proof\.pdf", name)
        share.get_directory_client.assert_called_with("payments")
        file_client = directory.get_file_client.return_value
        directory.get_file_client.assert_called_once_with(name)
        file_client.upload_file.assert_called_once_with(b"12345", length=5)

    def test_upload_to_share_root(self, repo, share):
        root = share.get_directory_client.return_value
        repo.upload_file(b"x", "contract.docx", "contracts")
        share.get_directory_client.assert_called_once_with()
        root.create_directory.assert_not_called()


class TestDownload:
    def test_download_reads_all(self, repo, share):
        directory = share.get_directory_client.return_value
        directory.get_file_client.return_value.download_file.return_value.readall.return_value = b"data"
        assert repo.download_file("contracts", "a.txt", "payments") == b"data"
        directory.create_directory.assert_not_called()


class TestProvisioning:
    def test_create_share(self, repo, share):
        assert repo.create_share("contracts") is True
        share.create_share.side_effect = ResourceExistsError("exists")
        assert repo.create_share("contracts") is False

    def test_create_directory(self, repo, share):
        share.get_directory_client.return_value.create_directory.side_effect = ResourceExistsError("exists")
        assert repo.create_directory("contracts", "payments") is False
