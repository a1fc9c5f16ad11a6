# salon/redis_client.py

import redis

from .config import settings

redis_client = redis.from_url(settings.redis_url, decode_responses=True)


# FastAPI dependency (overridden in tests)
def get_redis() -> redis.Redis:
    return redis_client
