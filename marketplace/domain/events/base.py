from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from django.utils import timezone

from infrastructure.notifications.interface import NotificationEvent


@dataclass
class DomainEvent:
    """Base class for all domain events."""

    event_type: str
    occurred_at: datetime = field(default_factory=timezone.now)
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"event_type": self.event_type, "occurred_at": self.occurred_at.isoformat(), "payload": self.payload}


@dataclass
class NotifiableEvent(DomainEvent):
    """A domain event addressed to one user, convertible to a notification."""

    recipient_id: str = ""
    audience: str = ""
    title: str = ""
    description: str = ""

    def to_notification(self) -> NotificationEvent:
        return NotificationEvent(
            recipient_id=self.recipient_id,
            audience=self.audience,
            event_type=self.event_type,
            title=self.title,
            description=self.description,
            data={**self.payload, "occurred_at": self.occurred_at.isoformat()},
        )
