import json
import logging

from channels.generic.websocket import AsyncWebsocketConsumer

from .tasks import user_group_name

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncWebsocketConsumer):
    """
    Live order notifications for the connected user.

    Joins ``notifications_user_<id>`` and relays every ``notification``
    message sent to that group.
    """

    async def connect(self):
        self.user = self.scope.get("user")

        if self.user is None or not self.user.is_authenticated:
            logger.warning("Unauthenticated notification websocket attempt")
            await self.close(code=4001)
            return

        self.group_name = user_group_name(self.user.pk)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info(f"User {self.user.pk} connected to notifications")

        await self.send(text_data=json.dumps({"type": "connection_success", "user_id": str(self.user.pk)}))

    async def disconnect(self, close_code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
            logger.info(f"User {self.user.pk} disconnected from notifications")

    async def receive(self, text_data=None, bytes_data=None):
        try:
            message = json.loads(text_data or "")
        except json.JSONDecodeError:
            logger.debug("Ignoring non-JSON websocket frame")
            return

        if message.get("type") == "ping":
            await self.send(text_data=json.dumps({"type": "pong"}))

    # Group message handlers
    async def notification(self, event):
        await self.send(text_data=json.dumps({"type": "notification", "notification": event["notification"]}))
