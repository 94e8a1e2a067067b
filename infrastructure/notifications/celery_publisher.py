"""
Celery Notification Publisher
=============================

Hands each event to the ``notifications.tasks.deliver_notification`` task.
The worker persists the Notification row and pushes it to the recipient's
Channels group, so the request thread never waits on Redis or the database
write for delivery.
"""

import logging

from .interface import NotificationDeliveryError, NotificationEvent, NotificationPublisherInterface

logger = logging.getLogger(__name__)


class CeleryNotificationPublisher(NotificationPublisherInterface):
    def publish(self, event: NotificationEvent) -> None:
        from notifications.tasks import deliver_notification

        try:
            deliver_notification.delay(event.to_dict())
            logger.info(f"Queued {event.event_type} notification for user {event.recipient_id}")
        except Exception as e:
            logger.error(f"Failed to queue {event.event_type} notification: {str(e)}")
            raise NotificationDeliveryError(f"Notification enqueue failed: {str(e)}") from e
