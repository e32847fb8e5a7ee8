# userauth/core/redis.py

import redis.asyncio as redis
from userauth.core.configuration import settings

redis_client = redis.Redis(
    host=settings.REDIS_HOST,
    port=settings.REDIS_PORT,
    db=settings.REDIS_DB,
    password=settings.REDIS_PASSWORD,
    decode_responses=True
)


def get_redis_client() -> redis.Redis:
    return redis_client
