import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.conf import settings

logger = logging.getLogger(__name__)


class PosEventsConsumer(AsyncJsonWebsocketConsumer):
    """
    Pushes order, kitchen and stock events to every connected terminal.

    Clients only listen; anything they send is ignored.
    """

    async def connect(self):
        self.group_name = getattr(settings, "POS_EVENTS_GROUP", "pos_events")
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info(f"PosEventsConsumer: {self.channel_name} joined {self.group_name}")

    async def disconnect(self, close_code):
        if hasattr(self, "group_name"):
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
        logger.info(f"PosEventsConsumer: {self.channel_name} disconnected ({close_code})")

    async def receive_json(self, content, **kwargs):
        logger.debug(f"PosEventsConsumer: ignoring client message {content!r}")

    async def pos_event(self, message):
        """Handler for messages sent by ChannelsEventPublisher"""
        await self.send_json({"type": message["event"], "data": message["data"]})
