"""
Notification Publisher Tests
============================
"""

from unittest.mock import patch

from django.test import TestCase

from infrastructure.notifications import (
    CeleryNotificationPublisher,
    MockNotificationPublisher,
    NotificationDeliveryError,
    NotificationEvent,
    NotificationFactory,
)


def make_event(**overrides):
    fields = {
        "recipient_id": "user-1",
        "audience": "owner",
        "event_type": "order.placed",
        "title": "New Order",
        "description": "A new order was placed for Poster (x1).",
        "data": {"order_id": "abc"},
    }
    fields.update(overrides)
    return NotificationEvent(**fields)


class MockNotificationPublisherTest(TestCase):
    def setUp(self):
        self.publisher = MockNotificationPublisher()

    def test_records_events(self):
        self.publisher.publish(make_event())
        self.publisher.publish(make_event(event_type="order.cancelled"))

        self.assertEqual(len(self.publisher.published), 2)
        self.assertEqual(len(self.publisher.events_of_type("order.cancelled")), 1)

    def test_fail_with(self):
        self.publisher.fail_with = RuntimeError("down")

        with self.assertRaises(NotificationDeliveryError):
            self.publisher.publish(make_event())
        self.assertEqual(self.publisher.published, [])

    def test_clear_resets_failure(self):
        self.publisher.fail_with = RuntimeError("down")
        self.publisher.clear()

        self.publisher.publish(make_event())
        self.assertEqual(len(self.publisher.published), 1)


class CeleryNotificationPublisherTest(TestCase):
    @patch("notifications.tasks.deliver_notification.delay")
    def test_queues_delivery_task(self, mock_delay):
        event = make_event()

        CeleryNotificationPublisher().publish(event)

        mock_delay.assert_called_once_with(event.to_dict())

    @patch("notifications.tasks.deliver_notification.delay", side_effect=ConnectionError("broker down"))
    def test_enqueue_failure_raises_delivery_error(self, _mock_delay):
        with self.assertRaises(NotificationDeliveryError):
            CeleryNotificationPublisher().publish(make_event())


class NotificationFactoryTest(TestCase):
    def test_backends(self):
        self.assertIsInstance(NotificationFactory.create("mock"), MockNotificationPublisher)
        self.assertIsInstance(NotificationFactory.create("celery"), CeleryNotificationPublisher)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            NotificationFactory.create("sms")

    def test_event_to_dict(self):
        self.assertEqual(make_event().to_dict()["data"], {"order_id": "abc"})
