"""
Django Storage Adapter
======================

StorageInterface on top of any ``django.core.files.storage.Storage``.
Used with FileSystemStorage for local development and InMemoryStorage in
tests. The S3 adapter builds on it with an S3Boto3Storage backend.
"""

import logging
from typing import BinaryIO

from django.core.files import File
from django.core.files.storage import Storage

from .interface import StorageException, StorageFile, StorageInterface

logger = logging.getLogger(__name__)


class DjangoStorageAdapter(StorageInterface):
    backend_label = "django"

    def __init__(self, storage: Storage, bucket_name: str = "local"):
        self.storage = storage
        self._bucket_name = bucket_name

    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        try:
            content = file if isinstance(file, File) else File(file, name=path)
            saved_path = self.storage.save(path, content)
            size = self.storage.size(saved_path)

            logger.info(f"Uploaded file to {self.backend_label} storage: {saved_path}")

            return StorageFile(
                key=saved_path,
                url=self._safe_url(saved_path),
                size=size,
                content_type=content_type,
                bucket=self._bucket_name,
            )
        except Exception as e:
            logger.error(f"Failed to upload file to {self.backend_label} storage: {path}. Error: {str(e)}")
            raise StorageException(f"{self.backend_label} upload failed: {str(e)}") from e

    def open(self, key: str) -> BinaryIO:
        try:
            return self.storage.open(key, "rb")
        except Exception as e:
            logger.error(f"Failed to open {key} from {self.backend_label} storage. Error: {str(e)}")
            raise StorageException(f"{self.backend_label} read failed: {str(e)}") from e

    def delete(self, key: str) -> bool:
        try:
            if not self.storage.exists(key):
                logger.warning(f"File not found in {self.backend_label} storage, cannot delete: {key}")
                return False
            self.storage.delete(key)
            logger.info(f"Deleted file from {self.backend_label} storage: {key}")
            return True
        except Exception as e:
            logger.error(f"Failed to delete {key} from {self.backend_label} storage. Error: {str(e)}")
            raise StorageException(f"{self.backend_label} deletion failed: {str(e)}") from e

    def get_url(self, key: str, expires_in: int = 3600) -> str:
        try:
            return self.storage.url(key)
        except Exception as e:
            logger.error(f"Failed to generate URL for {key}. Error: {str(e)}")
            raise StorageException(f"URL generation failed: {str(e)}") from e

    def exists(self, key: str) -> bool:
        try:
            return self.storage.exists(key)
        except Exception as e:
            logger.error(f"Error checking existence of {key}. Error: {str(e)}")
            return False

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def _safe_url(self, key: str) -> str:
        # Storages without a base_url raise ValueError ("not accessible via a URL").
        try:
            return self.storage.url(key)
        except ValueError:
            return ""
