from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
import redis

from app.api.deps import get_redis
from app.api.models import (
    BoardSelectionsResponse,
    ClearRoomsFailure,
    ClearRoomsResponse,
    DeletedKeysModel,
    KeyCountsResponse,
    PlayerSessionResponse,
    PublishEventRequest,
    PublishGlobalRequest,
    PublishResponse,
    RoomListResponse,
    RoomSnapshot,
    SubscribeResponse,
)
from app.errors import KeyspaceClearError
from app.keyspace import clear_all, count_keys
from app.pubsub import publish_global, publish_to_room, subscribe_to_room
from app.room_store import (
    get_board_selections,
    get_game_state,
    get_player_session,
    get_room,
    list_rooms,
    remove_board_selection,
    remove_player_session,
    save_game_state,
    save_room,
    set_board_selection,
    set_player_session,
    snapshot_room,
)

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post(
    "/clear-rooms",
    response_model=ClearRoomsResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ClearRoomsFailure}},
)
async def clear_rooms_route(r: redis.Redis = Depends(get_redis)) -> ClearRoomsResponse | JSONResponse:
    """Maintenance command: wipe every room, player, game and boards key."""

    try:
        result = clear_all(r=r)
    except KeyspaceClearError as e:
        failure = ClearRoomsFailure(
            error=e.message,
            details=e.details,
            category=e.category,
            completed=DeletedKeysModel(**e.completed),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure.model_dump(by_alias=True),
        )

    return ClearRoomsResponse(deleted_keys=DeletedKeysModel(**result.deleted_keys.as_dict()))


@router.get("/debug/keys", response_model=KeyCountsResponse)
async def debug_keys_route(r: redis.Redis = Depends(get_redis)) -> KeyCountsResponse:
    return KeyCountsResponse(keys=DeletedKeysModel(**count_keys(r=r).as_dict()))


@router.get("/rooms/{room_id}/state", response_model=RoomSnapshot)
async def room_state_route(room_id: str, r: redis.Redis = Depends(get_redis)) -> RoomSnapshot:
    """Polling endpoint: observers re-read this instead of holding a subscription."""

    try:
        snapshot = snapshot_room(r=r, room_id=room_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e

    if snapshot.is_empty:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return snapshot


@router.post("/rooms/{room_id}/events", response_model=PublishResponse)
async def publish_room_event_route(
    room_id: str,
    payload: PublishEventRequest,
    r: redis.Redis = Depends(get_redis),
) -> PublishResponse:
    ok = publish_to_room(r=r, room_id=room_id, type=payload.type, data=payload.data, player_id=payload.player_id)
    return PublishResponse(published=ok)


@router.post("/events/global", response_model=PublishResponse)
async def publish_global_event_route(
    payload: PublishGlobalRequest,
    r: redis.Redis = Depends(get_redis),
) -> PublishResponse:
    ok = publish_global(
        r=r,
        type=payload.type,
        data=payload.data,
        room_id=payload.room_id,
        player_id=payload.player_id,
    )
    return PublishResponse(published=ok)


@router.post("/rooms/{room_id}/subscribe", response_model=SubscribeResponse)
async def subscribe_room_route(room_id: str, r: redis.Redis = Depends(get_redis)) -> SubscribeResponse:
    """Tell a client how to follow a room. Nothing is pushed; the client polls `poll_url`."""

    ok = subscribe_to_room(r=r, room_id=room_id, callback=lambda _event: None)
    return SubscribeResponse(acknowledged=ok, poll_url=f"/rooms/{room_id}/state")


@router.get("/rooms", response_model=RoomListResponse)
async def list_rooms_route(r: redis.Redis = Depends(get_redis)) -> RoomListResponse:
    try:
        rooms = list_rooms(r=r)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    return RoomListResponse(rooms=rooms)


@router.get("/rooms/{room_id}")
async def get_room_route(room_id: str, r: redis.Redis = Depends(get_redis)) -> dict[str, Any]:
    try:
        room = get_room(r=r, room_id=room_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room


@router.put("/rooms/{room_id}")
async def save_room_route(room_id: str, body: dict[str, Any], r: redis.Redis = Depends(get_redis)) -> dict[str, Any]:
    save_room(r=r, room_id=room_id, room=body)
    return body


@router.get("/rooms/{room_id}/game-state")
async def get_game_state_route(room_id: str, r: redis.Redis = Depends(get_redis)) -> dict[str, Any]:
    try:
        state = get_game_state(r=r, room_id=room_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    if state is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game state not found")
    return state


@router.put("/rooms/{room_id}/game-state")
async def save_game_state_route(
    room_id: str,
    body: dict[str, Any],
    r: redis.Redis = Depends(get_redis),
) -> dict[str, Any]:
    save_game_state(r=r, room_id=room_id, state=body)
    return body


@router.get("/rooms/{room_id}/boards", response_model=BoardSelectionsResponse)
async def get_boards_route(room_id: str, r: redis.Redis = Depends(get_redis)) -> BoardSelectionsResponse:
    try:
        selections = get_board_selections(r=r, room_id=room_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)) from e
    return BoardSelectionsResponse(room_id=room_id, board_selections=selections)


@router.post("/rooms/{room_id}/boards/{player_id}", response_model=BoardSelectionsResponse)
async def select_board_route(
    room_id: str,
    player_id: str,
    body: dict[str, Any],
    r: redis.Redis = Depends(get_redis),
) -> BoardSelectionsResponse:
    set_board_selection(r=r, room_id=room_id, player_id=player_id, selection=body)
    return BoardSelectionsResponse(room_id=room_id, board_selections=get_board_selections(r=r, room_id=room_id))


@router.delete("/rooms/{room_id}/boards/{player_id}", response_model=BoardSelectionsResponse)
async def deselect_board_route(
    room_id: str,
    player_id: str,
    r: redis.Redis = Depends(get_redis),
) -> BoardSelectionsResponse:
    if not remove_board_selection(r=r, room_id=room_id, player_id=player_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Board selection not found")
    return BoardSelectionsResponse(room_id=room_id, board_selections=get_board_selections(r=r, room_id=room_id))


@router.post("/rooms/{room_id}/players/{player_id}", response_model=PlayerSessionResponse)
async def join_room_route(room_id: str, player_id: str, r: redis.Redis = Depends(get_redis)) -> PlayerSessionResponse:
    set_player_session(r=r, player_id=player_id, room_id=room_id)
    return PlayerSessionResponse(player_id=player_id, room_id=room_id)


@router.get("/players/{player_id}/session", response_model=PlayerSessionResponse)
async def get_player_session_route(player_id: str, r: redis.Redis = Depends(get_redis)) -> PlayerSessionResponse:
    room_id = get_player_session(r=r, player_id=player_id)
    if room_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player session not found")
    return PlayerSessionResponse(player_id=player_id, room_id=room_id)


@router.delete("/players/{player_id}/session", response_model=PlayerSessionResponse)
async def leave_room_route(player_id: str, r: redis.Redis = Depends(get_redis)) -> PlayerSessionResponse:
    """Leave whatever room the player is in; `roomId` in the response is the room they left."""

    room_id = remove_player_session(r=r, player_id=player_id)
    if room_id is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Player session not found")
    return PlayerSessionResponse(player_id=player_id, room_id=room_id)
