# backend/facility_booking/routers/deps.py
"""
FastAPI dependencies shared by the routers.

Identity comes from the upstream gateway, which authenticates the caller and
forwards X-User-Id / X-User-Role.
"""

import redis.asyncio as aioredis
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..redis_client import redis_client
from ..services.collaborators import CurrentUser
from ..services.engine import BookingEngine
from ..services.events import ChangeNotifier
from ..services.store import SqlBookingStore, SqlFacilityDirectory


def get_current_user(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> CurrentUser:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user identity")
    return CurrentUser(id=x_user_id, role=(x_user_role or "resident").lower())


def get_notifier() -> ChangeNotifier:
    return ChangeNotifier(redis_client)


def get_engine(
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> BookingEngine:
    return BookingEngine(
        facilities=SqlFacilityDirectory(db),
        store=SqlBookingStore(db),
        notifier=notifier,
    )


def get_store(db: Session = Depends(get_db)) -> SqlBookingStore:
    return SqlBookingStore(db)


def get_event_redis() -> aioredis.Redis:
    """Dedicated async client per SSE subscriber; the stream closes it."""
    return aioredis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=settings.redis_socket_timeout,
    )
