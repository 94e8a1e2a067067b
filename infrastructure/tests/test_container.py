"""
Service Container Tests
========================

Unit tests for the dependency injection container.
"""

from unittest.mock import MagicMock, patch

from django.test import TestCase

from infrastructure.container import ServiceContainer, container
from infrastructure.notifications import CeleryNotificationPublisher, MockNotificationPublisher
from infrastructure.storage import S3StorageAdapter, StorageInterface
from marketplace.ordering.domain.services.order_service import OrderService


class ServiceContainerTest(TestCase):
    def setUp(self):
        container.reset()

    def test_container_is_singleton(self):
        self.assertIs(ServiceContainer(), ServiceContainer())
        self.assertIs(ServiceContainer(), container)

    @patch("infrastructure.storage.s3_adapter.S3Boto3Storage")
    def test_get_storage_service(self, mock_storage):
        mock_storage.return_value = MagicMock()

        with self.settings(INFRASTRUCTURE={"STORAGE_BACKEND": "s3", "NOTIFICATION_BACKEND": "mock"}):
            storage = container.storage()

        self.assertIsInstance(storage, StorageInterface)
        self.assertIsInstance(storage, S3StorageAdapter)
        self.assertIs(container.storage(), storage)

    def test_notifications_backend_override(self):
        self.assertIsInstance(container.notifications("celery"), CeleryNotificationPublisher)
        self.assertIsInstance(container.notifications("mock"), MockNotificationPublisher)
        self.assertIsInstance(container.notifications(), MockNotificationPublisher)

    def test_order_service_is_wired_and_cached(self):
        container.configure_for_testing()

        service = container.order_service()

        self.assertIsInstance(service, OrderService)
        self.assertIs(container.order_service(), service)
        self.assertIs(service.publisher, container.notifications())
        self.assertIs(service.attachment_service.storage, container.storage())
        self.assertIs(service.repository, container.order_repository())

    def test_reset_drops_cached_instances(self):
        container.configure_for_testing()
        service = container.order_service()

        container.reset()
        container.configure_for_testing()

        self.assertIsNot(container.order_service(), service)
