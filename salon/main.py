import logging

from fastapi import Depends, FastAPI
from redis import Redis

from .config import settings
from .redis_client import get_redis
from .routers import catalog, drafts, employees, reservations, slots

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Salon Booking API")

app.include_router(catalog.router)
app.include_router(employees.router)
app.include_router(slots.router)
app.include_router(reservations.router)
app.include_router(drafts.router)


@app.get("/health")
def health(redis: Redis = Depends(get_redis)):
    return {"redis": redis.ping()}
