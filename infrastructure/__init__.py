"""
Infrastructure Package
======================

Adapters for the external systems the order engine talks to.

Modules:
    - storage: Blob store for order attachments (S3/MinIO, filesystem, in-memory)
    - notifications: Order notification publishing (Celery + Channels, mock)
    - container: Service locator wiring adapters into domain services
"""
