"""
Storage Infrastructure Tests
=============================

Unit tests for the attachment blob store adapters.
"""

from io import BytesIO
from unittest.mock import MagicMock, patch

from django.test import TestCase, override_settings

from infrastructure.storage import (
    DjangoStorageAdapter,
    S3StorageAdapter,
    StorageException,
    StorageFactory,
    StorageInterface,
)


class StorageInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        """StorageInterface should not be instantiable."""
        with self.assertRaises(TypeError):
            StorageInterface()


class InMemoryStorageAdapterTest(TestCase):
    def setUp(self):
        self.storage = StorageFactory.create_memory()

    def test_upload_open_delete(self):
        stored = self.storage.upload(BytesIO(b"design"), "orders/attachments/abc/poster.pdf", "application/pdf")

        self.assertEqual(stored.key, "orders/attachments/abc/poster.pdf")
        self.assertEqual(stored.size, 6)
        self.assertEqual(stored.content_type, "application/pdf")
        self.assertEqual(stored.bucket, "memory")
        self.assertTrue(self.storage.exists(stored.key))
        self.assertEqual(self.storage.open(stored.key).read(), b"design")

        self.assertTrue(self.storage.delete(stored.key))
        self.assertFalse(self.storage.exists(stored.key))

    def test_delete_missing_returns_false(self):
        self.assertFalse(self.storage.delete("orders/attachments/none/file.pdf"))

    def test_open_missing_raises(self):
        with self.assertRaises(StorageException):
            self.storage.open("orders/attachments/none/file.pdf")

    def test_upload_failure_is_wrapped(self):
        backend = MagicMock()
        backend.save.side_effect = OSError("disk full")
        adapter = DjangoStorageAdapter(backend)

        with self.assertRaises(StorageException):
            adapter.upload(BytesIO(b"x"), "k", "text/plain")


@override_settings(
    AWS_STORAGE_BUCKET_NAME="test-bucket",
    AWS_ACCESS_KEY_ID="test-key",
    AWS_SECRET_ACCESS_KEY="test-secret",
)
class S3StorageAdapterTest(TestCase):
    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_upload_file_success(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.save.return_value = "orders/attachments/abc/poster.pdf"
        mock_storage.size.return_value = 15
        mock_storage.url.return_value = "https://s3.amazonaws.com/test-bucket/orders/attachments/abc/poster.pdf"

        adapter = S3StorageAdapter()
        result = adapter.upload(BytesIO(b"S3 test content"), "orders/attachments/abc/poster.pdf", "application/pdf")

        self.assertEqual(result.key, "orders/attachments/abc/poster.pdf")
        self.assertEqual(result.size, 15)
        self.assertEqual(result.bucket, "test-bucket")
        mock_storage.save.assert_called_once()

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_open_failure_raises_storage_exception(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.open.side_effect = Exception("NoSuchKey")

        with self.assertRaises(StorageException):
            S3StorageAdapter().open("missing")


class StorageFactoryTest(TestCase):
    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_default_backend_is_s3(self, _mock_storage):
        with self.settings(INFRASTRUCTURE={"STORAGE_BACKEND": "s3"}):
            self.assertIsInstance(StorageFactory.create(), S3StorageAdapter)

    def test_local_backend(self):
        storage = StorageFactory.create("local")

        self.assertIsInstance(storage, DjangoStorageAdapter)
        self.assertEqual(storage.bucket_name, "local")

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            StorageFactory.create("ftp")
