from __future__ import annotations

from collections.abc import Generator

import redis

from app.infra.redis_client import create_redis


def get_redis() -> Generator[redis.Redis, None, None]:
    """Per-request store client.

    Core functions take the client as an argument, so tests swap in fakeredis
    by overriding this dependency.
    """

    client = create_redis()
    try:
        yield client
    finally:
        client.close()
