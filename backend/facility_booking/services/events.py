"""
backend/facility_booking/services/events.py

Booking change notifications over Redis pub/sub.

One channel per facility: events:booking:{facility_id}

Events are refresh hints: {"type", "facility_id", "date", "booking_id", "ts"}.
Subscribers refetch slots, occupancy and quota instead of trusting the
payload. There is no backlog; a subscriber that connects late must load the
current state first.
"""

import asyncio
import json
import logging
import time
from collections.abc import AsyncIterator

from redis import Redis

from ..config import settings
from .slots.records import Booking

logger = logging.getLogger(__name__)

BOOKING_CREATED = "booking_created"
BOOKING_CANCELLED = "booking_cancelled"


def booking_channel(facility_id: int, prefix: str | None = None) -> str:
    return f"{prefix or settings.events_channel_prefix}:{facility_id}"


class ChangeNotifier:
    """Publishes booking changes; publishing never raises."""

    def __init__(self, redis: Redis, channel_prefix: str | None = None):
        self.redis = redis
        self.channel_prefix = channel_prefix or settings.events_channel_prefix

    def channel(self, facility_id: int) -> str:
        return booking_channel(facility_id, self.channel_prefix)

    def booking_changed(self, event_type: str, booking: Booking) -> None:
        event = {
            "type": event_type,
            "facility_id": booking.facility_id,
            "date": booking.starts_at.date().isoformat(),
            "booking_id": booking.id,
            "ts": int(time.time()),
        }
        channel = self.channel(booking.facility_id)
        try:
            receivers = self.redis.publish(channel, json.dumps(event))
            logger.info(f"Event emitted: {event_type} → {channel} ({receivers} receivers)")
        except Exception as e:
            logger.error(f"Failed to emit event {event_type}: {e}")


async def subscribe_booking_changes(
    redis,
    channel: str,
    poll_timeout: float = 5.0,
) -> AsyncIterator[dict]:
    """
    Yield events published on `channel` while the caller keeps iterating.

    `redis` is a redis.asyncio client. Undecodable messages are skipped.
    """
    pubsub = redis.pubsub()
    await pubsub.subscribe(channel)
    logger.info(f"Subscribed to {channel}")

    try:
        while True:
            message = await pubsub.get_message(
                ignore_subscribe_messages=True,
                timeout=poll_timeout,
            )
            if message is None:
                await asyncio.sleep(0)
                continue

            raw = message.get("data")
            if isinstance(raw, bytes):
                raw = raw.decode()
            try:
                yield json.loads(raw)
            except (TypeError, json.JSONDecodeError):
                logger.error(f"Invalid JSON on {channel}: {raw!r}")
    finally:
        await pubsub.unsubscribe(channel)
        await pubsub.aclose()
        logger.info(f"Unsubscribed from {channel}")


def format_sse(event: dict, event_name: str = "booking") -> str:
    """Serialise an event as a Server-Sent Events frame."""
    return f"event: {event_name}\ndata: {json.dumps(event)}\n\n"
