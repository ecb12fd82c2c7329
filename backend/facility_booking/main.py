import logging

from fastapi import FastAPI

from .config import settings
from .redis_client import redis_client
from .routers import bookings, events, facilities

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Facility Booking API")

app.include_router(facilities.router)
app.include_router(bookings.router)
app.include_router(events.router)


@app.get("/health")
def health():
    return {"redis": redis_client.ping()}
