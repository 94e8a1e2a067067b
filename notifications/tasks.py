"""
Notification delivery tasks

Runs on the ``notification_tasks`` queue. Each task persists one inbox row
and pushes it to the recipient's presence group on the Channels layer.
"""

import logging

from asgiref.sync import async_to_sync
from celery import shared_task
from channels.layers import get_channel_layer
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from .models import Notification

logger = logging.getLogger(__name__)


def user_group_name(user_id) -> str:
    return f"notifications_user_{user_id}"


def push_to_user(notification: Notification) -> bool:
    """
    Send a persisted notification to the recipient's open websockets.

    Returns:
        False if the channel layer is missing or refused the message
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("No channel layer configured; notification stored but not pushed")
        return False

    try:
        async_to_sync(channel_layer.group_send)(
            user_group_name(notification.recipient_id),
            {"type": "notification", "notification": notification.to_payload()},
        )
    except Exception as e:
        logger.error(f"Failed to push notification {notification.id} to user {notification.recipient_id}: {e}")
        return False
    return True


@shared_task(bind=True, max_retries=3, queue="notification_tasks")
def deliver_notification(self, event: dict):
    """
    Persist a NotificationEvent (as a dict) and push it live.

    Args:
        event: ``NotificationEvent.to_dict()`` output

    Returns:
        dict: ``{"success", "notification_id", "pushed"}``
    """
    User = get_user_model()
    recipient_id = event.get("recipient_id")

    try:
        recipient = User.objects.filter(pk=recipient_id).first()
    except (ValidationError, ValueError):
        recipient = None
    if recipient is None:
        logger.warning(f"Dropping {event.get('event_type')} notification: unknown recipient {recipient_id}")
        return {"success": False, "error": "Recipient not found"}

    try:
        notification = Notification.objects.create(
            recipient=recipient,
            audience=event.get("audience", ""),
            event_type=event.get("event_type", ""),
            title=event.get("title", ""),
            description=event.get("description", ""),
            data=event.get("data") or {},
        )
    except DatabaseError as e:
        logger.error(f"Failed to store notification for user {recipient_id}: {e}")
        raise self.retry(exc=e, countdown=2 ** self.request.retries)

    pushed = push_to_user(notification)
    logger.info(f"Delivered {notification.event_type} notification {notification.id} (pushed={pushed})")
    return {"success": True, "notification_id": str(notification.id), "pushed": pushed}
