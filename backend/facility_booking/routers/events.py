# backend/facility_booking/routers/events.py
"""
Server-Sent Events stream of booking changes for one facility.

Clients refetch slots / occupancy / quota on every `booking` event and on
(re)connect; the stream has no backlog.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..services.events import booking_channel, format_sse, subscribe_booking_changes
from .deps import get_event_redis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.get("/events")
async def booking_events(facility_id: int, request: Request, r=Depends(get_event_redis)):
    channel = booking_channel(facility_id)

    async def stream():
        try:
            yield ": connected\n\n"
            async for event in subscribe_booking_changes(r, channel):
                if await request.is_disconnected():
                    break
                yield format_sse(event)
        except Exception:
            logger.exception(f"Event stream for facility {facility_id} failed")
        finally:
            await r.aclose()

    return StreamingResponse(
        stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
