from __future__ import annotations

from collections.abc import Callable, Generator

import fakeredis
import pytest


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so env tweaks made with monkeypatch are picked up."""

    from app.config import reset_settings_for_tests

    reset_settings_for_tests()
    yield
    reset_settings_for_tests()


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def client_and_redis(r: fakeredis.FakeRedis):
    """FastAPI TestClient wired to the same fakeredis instance as the `r` fixture."""

    from fastapi.testclient import TestClient

    from app.api.deps import get_redis
    from app.main import app

    def _override() -> Generator[fakeredis.FakeRedis, None, None]:
        yield r

    app.dependency_overrides[get_redis] = _override
    with TestClient(app) as c:
        yield c, r
    app.dependency_overrides.clear()


def _read_next_message(pubsub, *, attempts: int = 50) -> dict:
    for _ in range(attempts):
        msg = pubsub.get_message(ignore_subscribe_messages=True, timeout=0.05)
        if msg is not None:
            return msg
    raise AssertionError("no pubsub message received")


@pytest.fixture()
def next_message() -> Callable[..., dict]:
    """Reader for the next non-subscribe message on a pubsub handle."""

    return _read_next_message
