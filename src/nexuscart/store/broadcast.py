"""WebSocket broadcast of cart documents.

Every committed cart write is pushed to the owner's group so other open
sessions can replace their local view:

    CartBroadcastService.broadcast_on_commit(owner_id, items, version)

The payload always carries the document ``version``; receivers drop any
snapshot that is not newer than what they already hold.
"""

import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def cart_group_name(owner_id) -> str:
    return f"cart_{owner_id}"


class CartBroadcastService:
    """Pushes cart snapshots to ``cart_{owner_id}`` websocket groups."""

    @staticmethod
    def broadcast_cart(owner_id, items: list[dict], version: int):
        """Send a cart snapshot to every socket subscribed for ``owner_id``.

        Failures are logged and never propagate to the write that triggered
        the broadcast.
        """
        try:
            from asgiref.sync import async_to_sync
            from channels.layers import get_channel_layer

            channel_layer = get_channel_layer()
            if not channel_layer:
                logger.warning("No channel layer configured, skipping cart broadcast")
                return

            group = cart_group_name(owner_id)
            async_to_sync(channel_layer.group_send)(
                group,
                {
                    "type": "cart_snapshot",
                    "items": items,
                    "version": version,
                },
            )

            logger.debug(
                "Broadcast cart snapshot",
                extra={"group": group, "version": version, "item_count": len(items)},
            )

        except Exception as e:
            logger.exception(f"Failed to broadcast cart snapshot: {e}")

    @staticmethod
    def broadcast_on_commit(owner_id, items: list[dict], version: int):
        """Broadcast after the current transaction commits.

        A rolled-back write (for example a failed checkout) never reaches
        subscribers.
        """
        items = [dict(item) for item in items]
        transaction.on_commit(
            lambda: CartBroadcastService.broadcast_cart(owner_id, items, version)
        )
