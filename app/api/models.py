from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.events import GameEventType


class _CamelModel(BaseModel):
    # Wire format is camelCase (roomId, deletedKeys, ...); Python side stays snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeletedKeysModel(_CamelModel):
    rooms: int = 0
    players: int = 0
    games: int = 0
    boards: int = 0


class ClearRoomsResponse(_CamelModel):
    success: Literal[True] = True
    message: str = "All room data cleared successfully"
    deleted_keys: DeletedKeysModel


class ClearRoomsFailure(_CamelModel):
    success: Literal[False] = False
    error: str
    details: str
    category: str
    # Counts for namespaces that were cleared before the failure; these stay deleted.
    completed: DeletedKeysModel = Field(default_factory=DeletedKeysModel)


class KeyCountsResponse(_CamelModel):
    keys: DeletedKeysModel


class RoomSnapshot(_CamelModel):
    room_id: str
    room: dict[str, Any] | None = None
    game_state: dict[str, Any] | None = None
    board_selections: list[dict[str, Any]] = Field(default_factory=list)
    fetched_at: datetime

    @property
    def is_empty(self) -> bool:
        return self.room is None and self.game_state is None and not self.board_selections


class PublishEventRequest(_CamelModel):
    type: GameEventType
    data: Any = None
    player_id: str | None = None


class PublishGlobalRequest(PublishEventRequest):
    room_id: str


class PublishResponse(_CamelModel):
    published: bool


class SubscribeResponse(_CamelModel):
    acknowledged: bool
    # There is no push channel to the client; it must poll.
    live: Literal[False] = False
    poll_url: str


class RoomListResponse(_CamelModel):
    rooms: list[dict[str, Any]]


class BoardSelectionsResponse(_CamelModel):
    room_id: str
    board_selections: list[dict[str, Any]]


class PlayerSessionResponse(_CamelModel):
    player_id: str
    room_id: str
