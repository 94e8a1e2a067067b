import uuid

from django.conf import settings
from django.db import models


class Notification(models.Model):
    """
    An order notification delivered to one user's inbox.

    Rows are written by the ``deliver_notification`` task; the same payload is
    pushed live to any websocket the recipient has open.
    """

    AUDIENCE_CHOICES = [
        ("owner", "Store owner"),
        ("customer", "Customer"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    audience = models.CharField(max_length=20, choices=AUDIENCE_CHOICES)
    event_type = models.CharField(max_length=50)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    data = models.JSONField(default=dict, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["recipient", "is_read", "-created_at"], name="notif_recipient_unread_idx"),
        ]

    def __str__(self):
        return f"{self.event_type} -> {self.recipient_id}"

    def to_payload(self) -> dict:
        """Websocket/inbox representation."""
        return {
            "id": str(self.id),
            "audience": self.audience,
            "event_type": self.event_type,
            "title": self.title,
            "description": self.description,
            "data": self.data,
            "is_read": self.is_read,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
