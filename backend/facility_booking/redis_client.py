# backend/facility_booking/redis_client.py

from redis import Redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from .config import settings

# Shared by the publish path of every submit/cancel: one attempt, bounded wait
redis_client = Redis.from_url(
    settings.redis_url,
    decode_responses=True,
    socket_connect_timeout=settings.redis_socket_timeout,
    socket_timeout=settings.redis_socket_timeout,
    retry=Retry(NoBackoff(), 0),
)
