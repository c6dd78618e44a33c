from __future__ import annotations

import pytest

from app.config import Settings, get_settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REDIS_URL", "LOG_LEVEL", "ROOM_TTL_SECONDS", "GAME_TTL_SECONDS", "PLAYER_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.redis_url == "redis://localhost:6379/0"
    assert s.log_level == "INFO"
    assert (s.room_ttl_seconds, s.game_ttl_seconds, s.player_ttl_seconds) == (7200, 3600, 3600)


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://cache:6380/2")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("GAME_TTL_SECONDS", "120")

    s = get_settings()
    assert s.redis_url == "redis://cache:6380/2"
    assert s.log_level == "DEBUG"
    assert s.game_ttl_seconds == 120
    assert get_settings() is s


def test_malformed_int_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PLAYER_TTL_SECONDS", "an hour")
    with pytest.raises(ValueError, match="PLAYER_TTL_SECONDS"):
        Settings.from_env()


def test_unknown_log_level_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        Settings.from_env()


def test_log_level_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    assert Settings.from_env().log_level == "WARNING"
