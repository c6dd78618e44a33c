from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


GLOBAL_ROOM_ID = "global"


class GameEventType(StrEnum):
    player_joined = "player_joined"
    player_left = "player_left"
    game_started = "game_started"
    number_called = "number_called"
    game_finished = "game_finished"
    room_updated = "room_updated"
    board_selected = "board_selected"
    board_deselected = "board_deselected"


@dataclass(frozen=True, slots=True)
class GameEvent:
    """Envelope for a room lifecycle notification.

    `data` is opaque here; its shape is owned by whoever emits the given `type`.
    `timestamp` is always assigned by `stamp()`, never by callers.
    """

    type: GameEventType
    room_id: str
    data: Any
    timestamp: str
    player_id: str | None = None

    @staticmethod
    def stamp(
        *,
        type: GameEventType | str,
        room_id: str,
        data: Any = None,
        player_id: str | None = None,
    ) -> "GameEvent":
        if not room_id:
            raise ValueError("room_id must be non-empty")
        return GameEvent(
            type=GameEventType(type),
            room_id=room_id,
            data=data,
            timestamp=datetime.now(tz=UTC).isoformat(),
            player_id=player_id,
        )

    def to_wire(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "type": self.type.value,
            "roomId": self.room_id,
            "data": self.data,
            "timestamp": self.timestamp,
        }
        if self.player_id is not None:
            out["playerId"] = self.player_id
        return out

    def to_json(self) -> str:
        # allow_nan=False keeps the wire format strict JSON.
        return json.dumps(self.to_wire(), allow_nan=False)

    @staticmethod
    def from_json(raw: str | bytes) -> "GameEvent":
        obj = json.loads(raw)
        if not isinstance(obj, dict):
            raise ValueError("event must be a JSON object")
        try:
            return GameEvent(
                type=GameEventType(obj["type"]),
                room_id=str(obj["roomId"]),
                data=obj.get("data"),
                timestamp=str(obj["timestamp"]),
                player_id=obj.get("playerId"),
            )
        except KeyError as e:
            raise ValueError(f"event is missing field {e.args[0]!r}") from e
