"""
Storage Interface
=================

Contract for the blob store holding order attachments. Contents are opaque:
callers write a stream under a key and read it back by the same key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass
class StorageFile:
    """
    A stored blob and its metadata.

    Attributes:
        key: Path the blob was saved under (may differ from the requested path)
        url: Public or signed URL to the blob
        size: Size in bytes
        content_type: MIME type as declared by the uploader
        bucket: Bucket/container name (optional)
    """

    key: str
    url: str
    size: int
    content_type: str
    bucket: Optional[str] = None


class StorageInterface(ABC):
    """
    Abstract blob store.

    Implementations:
        - S3StorageAdapter: S3/MinIO through django-storages
        - DjangoStorageAdapter: any Django storage (filesystem, in-memory)
    """

    @abstractmethod
    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        """
        Write a blob.

        Raises:
            StorageException: If the write fails
        """

    @abstractmethod
    def open(self, key: str) -> BinaryIO:
        """
        Open a blob for binary reading. The caller closes the stream.

        Raises:
            StorageException: If the blob is missing or unreadable
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a blob. Returns False when there was nothing to delete."""

    @abstractmethod
    def get_url(self, key: str, expires_in: int = 3600) -> str:
        """URL for the blob (signed where the backend supports it)."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        pass


class StorageException(Exception):
    """Base exception for storage operations."""
