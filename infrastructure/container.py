"""
Dependency Injection Container
================================

Service locator for infrastructure adapters and the order domain services
built on them.

Usage:
    from infrastructure.container import container

    storage = container.storage()
    order_service = container.order_service()
"""

import logging
from typing import Optional

from .notifications import NotificationFactory, NotificationPublisherInterface
from .storage import StorageFactory, StorageInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Lazily builds and caches service instances. Singleton.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._storage: Optional[StorageInterface] = None
        self._notifications: Optional[NotificationPublisherInterface] = None

        # Domain services
        self._pricing_service = None
        self._attachment_service = None
        self._catalog_service = None
        self._order_repository = None
        self._order_service = None

    def storage(self) -> StorageInterface:
        """Blob store for order attachments (cached)."""
        if self._storage is None:
            self._storage = StorageFactory.create()
            logger.debug(f"Created storage service: {type(self._storage).__name__}")
        return self._storage

    def notifications(self, backend: Optional[str] = None) -> NotificationPublisherInterface:
        """
        Notification publisher (cached).

        Args:
            backend: 'celery' or 'mock'; if None, uses settings
        """
        if self._notifications is None or backend is not None:
            self._notifications = NotificationFactory.create(backend)
            logger.debug(f"Created notification publisher: {type(self._notifications).__name__}")
        return self._notifications

    def pricing_service(self):
        if self._pricing_service is None:
            from marketplace.ordering.domain.services.pricing_service import PricingService

            self._pricing_service = PricingService()
        return self._pricing_service

    def attachment_service(self):
        if self._attachment_service is None:
            from marketplace.ordering.domain.services.attachment_service import AttachmentService

            self._attachment_service = AttachmentService(storage=self.storage())
        return self._attachment_service

    def catalog_service(self):
        if self._catalog_service is None:
            from marketplace.catalog.domain.services.catalog_service import CatalogService

            self._catalog_service = CatalogService()
        return self._catalog_service

    def order_repository(self):
        if self._order_repository is None:
            from marketplace.ordering.domain.repositories.order_repository import OrderRepository

            self._order_repository = OrderRepository()
        return self._order_repository

    def order_service(self):
        """OrderService wired to the cached collaborators."""
        if self._order_service is None:
            from marketplace.ordering.domain.services.order_service import OrderService

            self._order_service = OrderService(
                repository=self.order_repository(),
                catalog_service=self.catalog_service(),
                pricing_service=self.pricing_service(),
                attachment_service=self.attachment_service(),
                publisher=self.notifications(),
            )
            logger.debug("Created OrderService")
        return self._order_service

    def reset(self):
        """Drop every cached instance. Used by tests and on settings changes."""
        self._clear()
        logger.info("Service container reset")

    def configure_for_testing(self):
        """
        Swap in in-memory adapters: InMemoryStorage blobs and the mock
        notification publisher.
        """
        self._clear()
        self._storage = StorageFactory.create("memory")
        self._notifications = NotificationFactory.create("mock")
        logger.info("Service container configured for testing")


# Global singleton instance
container = ServiceContainer()
