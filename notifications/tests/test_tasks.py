import uuid
from unittest.mock import MagicMock, patch

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.test import TestCase

from marketplace.tests.factories import OwnerFactory
from notifications.models import Notification
from notifications.tasks import deliver_notification, user_group_name


def make_event(recipient_id, **overrides):
    event = {
        "recipient_id": str(recipient_id),
        "audience": "owner",
        "event_type": "order.placed",
        "title": "New Order",
        "description": "A new order was placed for Poster (x2).",
        "data": {"order_id": "abc", "subtotal": "240.00"},
    }
    event.update(overrides)
    return event


class DeliverNotificationTaskTest(TestCase):
    def setUp(self):
        self.owner = OwnerFactory()

    def test_persists_and_pushes(self):
        channel_layer = get_channel_layer()
        channel_name = async_to_sync(channel_layer.new_channel)()
        async_to_sync(channel_layer.group_add)(user_group_name(self.owner.pk), channel_name)

        result = deliver_notification.apply(args=[make_event(self.owner.pk)]).get()

        self.assertTrue(result["success"])
        self.assertTrue(result["pushed"])
        notification = Notification.objects.get(recipient=self.owner)
        self.assertEqual(notification.title, "New Order")
        self.assertEqual(notification.data["subtotal"], "240.00")
        self.assertFalse(notification.is_read)

        message = async_to_sync(channel_layer.receive)(channel_name)
        self.assertEqual(message["type"], "notification")
        self.assertEqual(message["notification"]["id"], str(notification.id))

    def test_unknown_recipient_is_dropped(self):
        result = deliver_notification.apply(args=[make_event(uuid.uuid4())]).get()

        self.assertFalse(result["success"])
        self.assertEqual(Notification.objects.count(), 0)

    def test_malformed_recipient_is_dropped(self):
        result = deliver_notification.apply(args=[make_event("guest-123")]).get()

        self.assertFalse(result["success"])

    def test_push_failure_keeps_the_inbox_row(self):
        layer = MagicMock()
        layer.group_send.side_effect = RuntimeError("redis down")

        with patch("notifications.tasks.get_channel_layer", return_value=layer):
            result = deliver_notification.apply(args=[make_event(self.owner.pk)]).get()

        self.assertTrue(result["success"])
        self.assertFalse(result["pushed"])
        self.assertEqual(Notification.objects.filter(recipient=self.owner).count(), 1)
