from __future__ import annotations

import redis

from app.config import get_settings


def create_redis() -> redis.Redis:
    # decode_responses=True => strings in/out instead of bytes
    return redis.Redis.from_url(get_settings().redis_url, decode_responses=True)
