"""
S3 Storage Adapter
==================

S3/MinIO blob store via django-storages.

Configuration (in settings.py):
    AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY: credentials
    AWS_STORAGE_BUCKET_NAME: bucket holding order attachments
    AWS_S3_REGION_NAME: region
    AWS_S3_ENDPOINT_URL: MinIO endpoint (optional)
    AWS_QUERYSTRING_AUTH: signed URLs (True for private buckets)
"""

from django.conf import settings
from storages.backends.s3boto3 import S3Boto3Storage

from .django_adapter import DjangoStorageAdapter


class S3StorageAdapter(DjangoStorageAdapter):
    backend_label = "S3"

    def __init__(self, storage: S3Boto3Storage = None):
        super().__init__(
            storage=storage or S3Boto3Storage(),
            bucket_name=getattr(settings, "AWS_STORAGE_BUCKET_NAME", "default-bucket"),
        )
