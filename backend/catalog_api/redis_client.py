# backend/catalog_api/redis_client.py
"""
Shared Redis client. None when REDIS_URL is not configured:
the delivery engine then resolves schedules from the database every time.
"""

from redis import Redis

from .config import settings

redis_client: Redis | None = (
    Redis.from_url(settings.redis_url, decode_responses=True)
    if settings.redis_url
    else None
)


# Dependency for FastAPI
def get_redis() -> Redis | None:
    return redis_client
