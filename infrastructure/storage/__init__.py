"""
Storage Abstraction Layer
==========================

Unified blob store for order attachments (S3/MinIO, filesystem, in-memory).
"""

from .django_adapter import DjangoStorageAdapter
from .factory import StorageFactory
from .interface import StorageException, StorageFile, StorageInterface
from .s3_adapter import S3StorageAdapter

__all__ = [
    "StorageInterface",
    "StorageFile",
    "StorageException",
    "DjangoStorageAdapter",
    "S3StorageAdapter",
    "StorageFactory",
]
