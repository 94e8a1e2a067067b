from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from django.test import TransactionTestCase
from rest_framework_simplejwt.tokens import AccessToken

from marketplace.tests.factories import CustomerFactory
from notifications.consumers import NotificationConsumer
from notifications.middleware import JWTQueryStringAuthMiddleware
from notifications.routing import websocket_urlpatterns
from notifications.tasks import user_group_name


class NotificationConsumerTests(TransactionTestCase):
    def setUp(self):
        self.user = CustomerFactory()

    async def test_connect_and_receive_notification(self):
        communicator = WebsocketCommunicator(NotificationConsumer.as_asgi(), "/ws/notifications/")
        communicator.scope["user"] = self.user

        connected, _ = await communicator.connect()
        self.assertTrue(connected)
        hello = await communicator.receive_json_from()
        self.assertEqual(hello["type"], "connection_success")

        await get_channel_layer().group_send(
            user_group_name(self.user.pk),
            {"type": "notification", "notification": {"title": "New Order", "event_type": "order.placed"}},
        )

        message = await communicator.receive_json_from()
        self.assertEqual(message["type"], "notification")
        self.assertEqual(message["notification"]["title"], "New Order")

        await communicator.disconnect()

    async def test_ping(self):
        communicator = WebsocketCommunicator(NotificationConsumer.as_asgi(), "/ws/notifications/")
        communicator.scope["user"] = self.user
        await communicator.connect()
        await communicator.receive_json_from()

        await communicator.send_json_to({"type": "ping"})

        self.assertEqual(await communicator.receive_json_from(), {"type": "pong"})
        await communicator.disconnect()

    async def test_anonymous_is_rejected(self):
        communicator = WebsocketCommunicator(NotificationConsumer.as_asgi(), "/ws/notifications/")
        communicator.scope["user"] = AnonymousUser()

        connected, code = await communicator.connect()

        self.assertFalse(connected)
        self.assertEqual(code, 4001)

    async def test_jwt_query_string_authentication(self):
        token = str(AccessToken.for_user(self.user))
        application = JWTQueryStringAuthMiddleware(URLRouter(websocket_urlpatterns))
        communicator = WebsocketCommunicator(application, f"/ws/notifications/?token={token}")
        communicator.scope["user"] = AnonymousUser()

        connected, _ = await communicator.connect()

        self.assertTrue(connected)
        hello = await communicator.receive_json_from()
        self.assertEqual(hello["user_id"], str(self.user.pk))
        await communicator.disconnect()

    async def test_invalid_jwt_is_rejected(self):
        application = JWTQueryStringAuthMiddleware(URLRouter(websocket_urlpatterns))
        communicator = WebsocketCommunicator(application, "/ws/notifications/?token=not-a-jwt")
        communicator.scope["user"] = AnonymousUser()

        connected, code = await communicator.connect()

        self.assertFalse(connected)
        self.assertEqual(code, 4001)
