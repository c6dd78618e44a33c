from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

import redis

from app.api.models import RoomSnapshot
from app.config import get_settings
from app.core.events import GameEventType
from app.keyspace import Namespace, boards_key, game_key, list_keys, player_key, room_key
from app.pubsub import publish_to_room


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _load(raw: str | None, *, key: str) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Corrupt JSON stored under {key}") from e


def save_room(*, r: redis.Redis, room_id: str, room: dict[str, Any]) -> None:
    key = room_key(room_id)
    r.set(key, json.dumps(room), ex=get_settings().room_ttl_seconds)
    publish_to_room(r=r, room_id=room_id, type=GameEventType.room_updated, data=room)


def get_room(*, r: redis.Redis, room_id: str) -> dict[str, Any] | None:
    key = room_key(room_id)
    return _load(r.get(key), key=key)


def list_rooms(*, r: redis.Redis) -> list[dict[str, Any]]:
    rooms: list[dict[str, Any]] = []
    for key in list_keys(r=r, namespace=Namespace.rooms):
        # A room may expire between KEYS and GET.
        room = _load(r.get(key), key=key)
        if room is not None:
            rooms.append(room)
    return rooms


def save_game_state(*, r: redis.Redis, room_id: str, state: dict[str, Any]) -> None:
    key = game_key(room_id)
    r.set(key, json.dumps(state), ex=get_settings().game_ttl_seconds)
    publish_to_room(r=r, room_id=room_id, type=GameEventType.room_updated, data=state)


def get_game_state(*, r: redis.Redis, room_id: str) -> dict[str, Any] | None:
    key = game_key(room_id)
    return _load(r.get(key), key=key)


def set_board_selection(*, r: redis.Redis, room_id: str, player_id: str, selection: dict[str, Any]) -> None:
    r.hset(boards_key(room_id), player_id, json.dumps(selection))
    publish_to_room(
        r=r,
        room_id=room_id,
        type=GameEventType.board_selected,
        data={"playerId": player_id, "selection": selection},
        player_id=player_id,
    )


def remove_board_selection(*, r: redis.Redis, room_id: str, player_id: str) -> bool:
    removed = bool(r.hdel(boards_key(room_id), player_id))
    if removed:
        publish_to_room(
            r=r,
            room_id=room_id,
            type=GameEventType.board_deselected,
            data={"playerId": player_id},
            player_id=player_id,
        )
    return removed


def get_board_selections(*, r: redis.Redis, room_id: str) -> list[dict[str, Any]]:
    key = boards_key(room_id)
    out: list[dict[str, Any]] = []
    for pid, raw in sorted(r.hgetall(key).items()):
        selection = _load(raw, key=f"{key}[{pid}]")
        if isinstance(selection, dict):
            out.append({"playerId": pid, **selection})
        else:
            out.append({"playerId": pid, "selection": selection})
    return out


def set_player_session(*, r: redis.Redis, player_id: str, room_id: str) -> None:
    r.set(player_key(player_id), room_id, ex=get_settings().player_ttl_seconds)
    publish_to_room(
        r=r,
        room_id=room_id,
        type=GameEventType.player_joined,
        data={"playerId": player_id},
        player_id=player_id,
    )


def get_player_session(*, r: redis.Redis, player_id: str) -> str | None:
    return r.get(player_key(player_id))


def remove_player_session(*, r: redis.Redis, player_id: str) -> str | None:
    """Drop a player's session and return the room they were in, if any."""

    room_id = get_player_session(r=r, player_id=player_id)
    r.delete(player_key(player_id))
    if room_id:
        publish_to_room(
            r=r,
            room_id=room_id,
            type=GameEventType.player_left,
            data={"playerId": player_id},
            player_id=player_id,
        )
    return room_id


def snapshot_room(*, r: redis.Redis, room_id: str) -> RoomSnapshot:
    """Read everything an observer needs to catch up on a room.

    This is the delivery path for room events: clients poll it on an interval
    rather than waiting for pushed messages.
    """

    return RoomSnapshot(
        room_id=room_id,
        room=get_room(r=r, room_id=room_id),
        game_state=get_game_state(r=r, room_id=room_id),
        board_selections=get_board_selections(r=r, room_id=room_id),
        fetched_at=_now(),
    )
