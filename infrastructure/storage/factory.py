"""
Storage Factory
===============

Creates the blob store selected by ``INFRASTRUCTURE["STORAGE_BACKEND"]``.
"""

import logging
from typing import Literal, Optional

from django.conf import settings
from django.core.files.storage import FileSystemStorage, InMemoryStorage

from .django_adapter import DjangoStorageAdapter
from .interface import StorageInterface
from .s3_adapter import S3StorageAdapter

logger = logging.getLogger(__name__)

StorageBackend = Literal["s3", "local", "memory"]


class StorageFactory:
    """
    Usage:
        # settings.py
        INFRASTRUCTURE = {"STORAGE_BACKEND": "s3"}  # or "local" / "memory"

        storage = StorageFactory.create()
    """

    @staticmethod
    def create(backend: Optional[StorageBackend] = None) -> StorageInterface:
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("STORAGE_BACKEND", "s3")

        logger.info(f"Creating storage backend: {backend_type}")

        if backend_type == "s3":
            return S3StorageAdapter()
        elif backend_type == "local":
            return StorageFactory.create_local()
        elif backend_type == "memory":
            return StorageFactory.create_memory()
        else:
            raise ValueError(f"Invalid storage backend: {backend_type}. Must be 's3', 'local' or 'memory'")

    @staticmethod
    def create_local() -> DjangoStorageAdapter:
        return DjangoStorageAdapter(FileSystemStorage(location=settings.MEDIA_ROOT), bucket_name="local")

    @staticmethod
    def create_memory() -> DjangoStorageAdapter:
        return DjangoStorageAdapter(InMemoryStorage(), bucket_name="memory")
