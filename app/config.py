from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


_PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _log_level_env(name: str, default: str) -> str:
    level = os.environ.get(name, default).strip().upper() or default
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"{name} must be a logging level name, got {level!r}")
    return level


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str
    log_level: str
    # TTLs for the ephemeral entities; rooms outlive a single game.
    room_ttl_seconds: int
    game_ttl_seconds: int
    player_ttl_seconds: int

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            redis_url=os.environ.get("REDIS_URL", "redis://localhost:6379/0"),
            log_level=_log_level_env("LOG_LEVEL", "INFO"),
            room_ttl_seconds=_int_env("ROOM_TTL_SECONDS", 7200),
            game_ttl_seconds=_int_env("GAME_TTL_SECONDS", 3600),
            player_ttl_seconds=_int_env("PLAYER_TTL_SECONDS", 3600),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process.

    A `.env` at the project root is honoured for local runs, but never
    overrides variables already present in the environment.
    """

    env_path = _PROJECT_ROOT / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)
    return Settings.from_env()


def reset_settings_for_tests() -> None:
    get_settings.cache_clear()
