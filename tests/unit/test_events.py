import json
import logging

import pytest
from redis.exceptions import TimeoutError as RedisTimeoutError

from facility_booking.redis_client import redis_client
from facility_booking.services.collaborators import CurrentUser
from facility_booking.services.events import (
    BOOKING_CREATED,
    ChangeNotifier,
    booking_channel,
    format_sse,
    subscribe_booking_changes,
)
from facility_booking.services.lifecycle import BookingLifecycle

from tests.helpers import (
    FakeAsyncPubSub,
    FakeAsyncRedis,
    FakeRedis,
    FixedClock,
    InMemoryBookingStore,
    make_booking,
)


def test_notifier_publishes_refresh_hint_per_facility():
    redis = FakeRedis()
    notifier = ChangeNotifier(redis, channel_prefix="events:booking")

    notifier.booking_changed(BOOKING_CREATED, make_booking(10, booking_id=5, facility_id=3))

    [(channel, raw)] = redis.published
    event = json.loads(raw)
    assert channel == "events:booking:3"
    assert event["type"] == BOOKING_CREATED
    assert event["facility_id"] == 3
    assert event["booking_id"] == 5
    assert event["date"] == "2030-01-15"
    assert isinstance(event["ts"], int)


def test_notifier_swallows_publish_failure(caplog):
    notifier = ChangeNotifier(FakeRedis(fail=True), channel_prefix="events:booking")

    with caplog.at_level(logging.ERROR):
        notifier.booking_changed(BOOKING_CREATED, make_booking(10, booking_id=5))

    assert "Failed to emit event booking_created" in caplog.text


def test_format_sse_frame():
    frame = format_sse({"type": "booking_cancelled", "facility_id": 1})

    assert frame == 'event: booking\ndata: {"type": "booking_cancelled", "facility_id": 1}\n\n'


@pytest.mark.asyncio
async def test_subscription_yields_decoded_events_and_cleans_up():
    pubsub = FakeAsyncPubSub([
        None,
        {"type": "message", "data": json.dumps({"type": "booking_created", "facility_id": 1})},
        {"type": "message", "data": b"not json"},
        {"type": "message", "data": json.dumps({"type": "booking_cancelled", "facility_id": 1}).encode()},
    ])

    received = []
    stream = subscribe_booking_changes(FakeAsyncRedis(pubsub), "events:booking:1", poll_timeout=0)
    async for event in stream:
        received.append(event)
        if len(received) == 2:
            break
    await stream.aclose()

    assert [e["type"] for e in received] == ["booking_created", "booking_cancelled"]
    assert pubsub.subscribed == ["events:booking:1"]
    assert pubsub.unsubscribed == ["events:booking:1"]
    assert pubsub.closed


def test_shared_client_fails_fast_when_redis_hangs():
    kwargs = redis_client.connection_pool.connection_kwargs

    assert 0 < kwargs["socket_connect_timeout"] <= 1
    assert 0 < kwargs["socket_timeout"] <= 1


def test_timed_out_publish_does_not_block_cancel(caplog):
    redis = FakeRedis(error=RedisTimeoutError("Timeout connecting to server"))
    store = InMemoryBookingStore([make_booking(10, user_id="r1")])
    lifecycle = BookingLifecycle(store, ChangeNotifier(redis, channel_prefix="events:booking"), FixedClock())

    with caplog.at_level(logging.ERROR):
        cancelled = lifecycle.cancel(1, CurrentUser("r1"))

    assert cancelled.cancelled_by == "r1"
    assert redis.publish_calls == 1
    assert "Failed to emit event booking_cancelled" in caplog.text


def test_notifier_and_stream_share_channel_names():
    notifier = ChangeNotifier(FakeRedis())

    assert notifier.channel(7) == booking_channel(7)
    assert ChangeNotifier(FakeRedis(), channel_prefix="x").channel(7) == booking_channel(7, "x")
