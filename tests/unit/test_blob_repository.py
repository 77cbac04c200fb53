"""
BlobRepository uploads and SAS URL generation.
"""

import base64
import re
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import AzureError, ResourceExistsError

from config import StorageConfig
from infrastructure.blob import BlobRepository, timestamped_name

ACCOUNT_KEY = base64.b64encode(b"k" * 64).decode()
UUID_PATTERN = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


@pytest.fixture
def service():
    service = MagicMock()
    service.account_name = "storefrontdev"
    service.credential.account_key = ACCOUNT_KEY
    container = MagicMock()
    service.get_container_client.return_value = container
    blob = MagicMock()
    blob.url = "https://storefrontdev.blob.core.windows.net/product-images/x.png"
    container.get_blob_client.return_value = blob
    return service


@pytest.fixture
def repo(service):
    return BlobRepository(service_client=service, config=StorageConfig(image_sas_days=7))


def _container(service):
    return service.get_container_client.return_value


class TestUploadImage:
    def test_blob_named_by_uuid_with_extension(self, repo, service):
        repo.upload_image(b"png-bytes", "Shoe Photo.PNG", "product-images")
        name = _container(service).get_blob_client.call_args.args[0]
        assert re.fullmatch(UUID_PATTERN + r"\.PNG", name)

    def test_content_type_from_file_name(self, repo, service):
        repo.upload_image(b"jpg", "a.jpg", "product-images")
        settings = _container(service).get_blob_client.return_value.upload_blob.call_args.kwargs["content_settings"]
        assert settings.content_type == "image/jpeg"

    def test_returns_sas_url_when_key_available(self, repo, service):
        url = repo.upload_image(b"png", "a.png", "product-images")
        assert url.startswith("https://storefrontdev.blob.core.windows.net/product-images/x.png?")
        assert "sig=" in url
        assert "sp=r" in url

    def test_plain_url_without_signer(self, repo, service):
        service.credential = None
        url = repo.upload_image(b"png", "a.png", "product-images")
        assert url == "https://storefrontdev.blob.core.windows.net/product-images/x.png"

    def test_container_created_once(self, repo, service):
        _container(service).create_container.side_effect = ResourceExistsError("exists")
        repo.upload_image(b"1", "a.png", "product-images")
        repo.upload_image(b"2", "b.png", "product-images")
        assert service.get_container_client.call_count == 1


class TestManagedIdentitySas:
    def test_delegation_failure_returns_plain_url(self, repo, service):
        service.credential = None
        repo.use_managed_identity = True
        service.get_user_delegation_key.side_effect = AzureError("forbidden")
        url = repo.get_blob_url_with_sas("product-images", "x.png", "https://plain/x.png")
        assert url == "https://plain/x.png"


class TestOtherBlobOperations:
    def test_upload_file_uses_timestamp_prefix(self, repo, service):
        name = repo.upload_file(b"pdf", "receipt.pdf", "payment-proofs")
        assert re.fullmatch(r"\d{8}_\d{6}_receipt\.pdf", name)

    def test_delete_blob_reports_result(self, repo, service):
        blob = _container(service).get_blob_client.return_value
        blob.delete_blob_if_exists.return_value = True
        assert repo.delete_blob("x.png", "product-images") is True
        blob.delete_blob_if_exists.return_value = False
        assert repo.delete_blob("x.png", "product-images") is False

    def test_create_container(self, repo, service):
        assert repo.create_container("contracts") is True
        service.create_container.side_effect = ResourceExistsError("exists")
        assert repo.create_container("contracts") is False

    def test_timestamped_name_drops_directories(self):
        assert re.fullmatch(r"\d{8}_\d{6}_proof\.png", timestamped_name("../../proof.png"))
