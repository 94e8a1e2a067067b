"""
Notification Publisher Factory
==============================

Creates the publisher selected by ``INFRASTRUCTURE["NOTIFICATION_BACKEND"]``.
"""

import logging
from typing import Literal, Optional

from django.conf import settings

from .celery_publisher import CeleryNotificationPublisher
from .interface import NotificationPublisherInterface
from .mock_publisher import MockNotificationPublisher

logger = logging.getLogger(__name__)

NotificationBackend = Literal["celery", "mock"]


class NotificationFactory:
    @staticmethod
    def create(backend: Optional[NotificationBackend] = None) -> NotificationPublisherInterface:
        """
        Args:
            backend: 'celery' or 'mock'. If None, read from settings
                     (defaults to 'mock' when TESTING is set).

        Raises:
            ValueError: If backend type is invalid
        """
        default_backend = "mock" if getattr(settings, "TESTING", False) else "celery"
        backend_type = backend or getattr(settings, "INFRASTRUCTURE", {}).get("NOTIFICATION_BACKEND", default_backend)

        logger.info(f"Creating notification backend: {backend_type}")

        if backend_type == "celery":
            return CeleryNotificationPublisher()
        elif backend_type == "mock":
            return MockNotificationPublisher()
        else:
            raise ValueError(f"Invalid notification backend: {backend_type}. Must be 'celery' or 'mock'")
