"""
Notification Abstraction Layer
==============================

Publishes order notifications (placed, status changed, pickup confirmed)
to the recipient's online presence.
"""

from .celery_publisher import CeleryNotificationPublisher
from .factory import NotificationFactory
from .interface import NotificationDeliveryError, NotificationEvent, NotificationPublisherInterface
from .mock_publisher import MockNotificationPublisher

__all__ = [
    "NotificationEvent",
    "NotificationPublisherInterface",
    "NotificationDeliveryError",
    "CeleryNotificationPublisher",
    "MockNotificationPublisher",
    "NotificationFactory",
]
