"""
Mock Notification Publisher
===========================

Stores published events in memory for test assertions. Setting
``fail_with`` makes every publish raise, to exercise the best-effort path.
"""

import logging
from typing import List, Optional

from .interface import NotificationDeliveryError, NotificationEvent, NotificationPublisherInterface

logger = logging.getLogger(__name__)


class MockNotificationPublisher(NotificationPublisherInterface):
    def __init__(self):
        self.published: List[NotificationEvent] = []
        self.fail_with: Optional[Exception] = None

    def publish(self, event: NotificationEvent) -> None:
        if self.fail_with is not None:
            raise NotificationDeliveryError(str(self.fail_with)) from self.fail_with

        logger.info(f"[MOCK NOTIFICATION] {event.event_type} -> {event.audience} {event.recipient_id}: {event.title}")
        self.published.append(event)

    def events_of_type(self, event_type: str) -> List[NotificationEvent]:
        return [e for e in self.published if e.event_type == event_type]

    def clear(self):
        self.published.clear()
        self.fail_with = None
