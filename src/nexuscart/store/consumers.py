"""WebSocket consumer for live cart updates."""

import json
import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import WebsocketConsumer

from .broadcast import cart_group_name
from .cart import is_newer_snapshot, read_cart_document

logger = logging.getLogger(__name__)


class CartConsumer(WebsocketConsumer):
    """Pushes the signed-in user's cart document on every committed write.

    Route: /ws/cart/

    On connect the current snapshot is sent; afterwards each write arrives
    as a ``cart_snapshot`` message carrying the document version. Pushes that
    arrive out of order are dropped: only snapshots newer than the last one
    sent reach the socket.
    """

    version = 0

    def connect(self):
        """Handle WebSocket connection."""
        self.group_name = None

        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            logger.warning("Unauthorized cart WebSocket connection attempt")
            self.close()
            return

        self.user = user
        self.group_name = cart_group_name(user.pk)

        try:
            async_to_sync(self.channel_layer.group_add)(
                self.group_name,
                self.channel_name,
            )
        except Exception as e:
            logger.exception(f"Failed to join cart group: {e}")
            self.group_name = None
            self.close()
            return

        self.accept()
        logger.info(f"Cart WebSocket connected: {self.group_name}")

        items, version = read_cart_document(user)
        self.send_snapshot([item.to_dict() for item in items], version)

    def disconnect(self, close_code):
        """Handle WebSocket disconnection."""
        if self.group_name:
            async_to_sync(self.channel_layer.group_discard)(
                self.group_name,
                self.channel_name,
            )
            logger.info(f"Cart WebSocket disconnected: {self.group_name}")

    def receive(self, text_data=None, bytes_data=None):
        """Only ``ping`` is accepted; cart writes go through the HTTP API."""
        try:
            data = json.loads(text_data or "{}")
        except json.JSONDecodeError:
            logger.warning("Invalid JSON in cart WebSocket message")
            return

        if data.get("type") == "ping":
            self.send(text_data=json.dumps({"type": "pong"}))

    def cart_snapshot(self, event):
        """Forward a broadcast cart snapshot unless it is stale."""
        version = event.get("version", 0)
        if not is_newer_snapshot(version, self.version):
            logger.debug(
                "Dropping stale cart snapshot",
                extra={"snapshot_version": version, "sent_version": self.version},
            )
            return
        self.send_snapshot(event.get("items", []), version)

    def send_snapshot(self, items, version):
        self.version = version
        self.send(text_data=json.dumps({
            "type": "cart_snapshot",
            "items": items,
            "version": version,
        }))
