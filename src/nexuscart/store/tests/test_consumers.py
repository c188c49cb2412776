"""Tests for the cart WebSocket consumer."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from django.contrib.auth.models import AnonymousUser

from nexuscart.store.consumers import CartConsumer

from .conftest import pid


def make_consumer(user):
    """Consumer with its socket and channel layer replaced by mocks."""
    consumer = CartConsumer()
    consumer.scope = {"type": "websocket", "user": user}
    consumer.channel_name = "test.channel"
    consumer.channel_layer = MagicMock()
    consumer.channel_layer.group_add = AsyncMock()
    consumer.channel_layer.group_discard = AsyncMock()
    consumer.accept = MagicMock()
    consumer.close = MagicMock()
    consumer.send = MagicMock()
    return consumer


def sent_messages(consumer):
    return [json.loads(c.kwargs["text_data"]) for c in consumer.send.call_args_list]


class TestCartConsumerConnect:
    """Tests for CartConsumer.connect"""

    def test_anonymous_connection_is_closed(self):
        consumer = make_consumer(AnonymousUser())

        consumer.connect()

        consumer.close.assert_called_once()
        consumer.accept.assert_not_called()
        consumer.channel_layer.group_add.assert_not_called()

    @pytest.mark.django_db
    def test_signed_in_user_joins_group_and_gets_snapshot(self, customer, cart_store, product):
        cart_store.add(pid(product))
        consumer = make_consumer(customer)

        consumer.connect()

        consumer.accept.assert_called_once()
        consumer.channel_layer.group_add.assert_awaited_once_with(
            f"cart_{customer.pk}", "test.channel"
        )
        assert sent_messages(consumer) == [{
            "type": "cart_snapshot",
            "items": [{"product_id": pid(product), "quantity": 1}],
            "version": 1,
        }]

    @pytest.mark.django_db
    def test_disconnect_leaves_group(self, customer):
        consumer = make_consumer(customer)
        consumer.connect()

        consumer.disconnect(1000)

        consumer.channel_layer.group_discard.assert_awaited_once_with(
            f"cart_{customer.pk}", "test.channel"
        )


class TestCartConsumerMessages:
    """Tests for messages on an open cart socket"""

    def test_snapshot_event_is_forwarded(self):
        consumer = make_consumer(AnonymousUser())

        consumer.cart_snapshot({
            "type": "cart_snapshot",
            "items": [{"product_id": "p1", "quantity": 3}],
            "version": 4,
        })

        assert sent_messages(consumer) == [{
            "type": "cart_snapshot",
            "items": [{"product_id": "p1", "quantity": 3}],
            "version": 4,
        }]

    def test_ping_gets_pong(self):
        consumer = make_consumer(AnonymousUser())

        consumer.receive(text_data=json.dumps({"type": "ping"}))

        assert sent_messages(consumer) == [{"type": "pong"}]

    def test_other_messages_are_ignored(self):
        consumer = make_consumer(AnonymousUser())

        consumer.receive(text_data=json.dumps({"type": "cart_add", "product_id": "p1"}))
        consumer.receive(text_data="not json")

        consumer.send.assert_not_called()

    def test_older_snapshot_after_newer_is_dropped(self):
        consumer = make_consumer(AnonymousUser())

        consumer.cart_snapshot({
            "type": "cart_snapshot",
            "items": [{"product_id": "p1", "quantity": 3}],
            "version": 3,
        })
        consumer.cart_snapshot({
            "type": "cart_snapshot",
            "items": [{"product_id": "p1", "quantity": 2}],
            "version": 2,
        })

        assert [message["version"] for message in sent_messages(consumer)] == [3]
        assert consumer.version == 3

    def test_repeated_snapshot_is_dropped(self):
        consumer = make_consumer(AnonymousUser())
        event = {"type": "cart_snapshot", "items": [], "version": 3}

        consumer.cart_snapshot(event)
        consumer.cart_snapshot(event)

        assert len(sent_messages(consumer)) == 1

    @pytest.mark.django_db
    def test_connect_snapshot_sets_version_floor(self, customer, cart_store, product):
        cart_store.add(pid(product))
        consumer = make_consumer(customer)
        consumer.connect()

        consumer.cart_snapshot({"type": "cart_snapshot", "items": [], "version": 1})
        consumer.cart_snapshot({
            "type": "cart_snapshot",
            "items": [{"product_id": pid(product), "quantity": 2}],
            "version": 2,
        })

        assert [message["version"] for message in sent_messages(consumer)] == [1, 2]
        assert sent_messages(consumer)[-1]["items"] == [
            {"product_id": pid(product), "quantity": 2}
        ]
