"""
Notification Publisher Interface
================================

Contract for emitting order notifications to a user's online presence.
Publishing is fire-and-forget: ``publish`` returns nothing and callers treat
any failure as best-effort.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict


@dataclass
class NotificationEvent:
    """
    A notification addressed to one user.

    Attributes:
        recipient_id: Primary key of the receiving user (as a string)
        audience: "owner" or "customer"
        event_type: e.g. "order.placed", "order.status_changed"
        title: Short headline
        description: One-sentence body
        data: JSON-serializable payload (order id, status, amounts)
    """

    recipient_id: str
    audience: str
    event_type: str
    title: str
    description: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NotificationPublisherInterface(ABC):
    """
    Implementations:
        - CeleryNotificationPublisher: queues delivery on a Celery worker
        - MockNotificationPublisher: records events in memory
    """

    @abstractmethod
    def publish(self, event: NotificationEvent) -> None:
        """
        Emit a notification.

        Raises:
            NotificationDeliveryError: If the event could not be handed off
        """


class NotificationDeliveryError(Exception):
    """Raised when a notification cannot be handed to its transport."""
