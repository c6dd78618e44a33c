from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import redis

from app.core.events import GLOBAL_ROOM_ID, GameEvent, GameEventType
from app.keyspace import Namespace


logger = logging.getLogger(__name__)

GLOBAL_CHANNEL = "global"


def room_channel(room_id: str) -> str:
    if not room_id:
        raise ValueError("room_id must be non-empty")
    # Channels share the room prefix with the room's state key; pub/sub channels
    # and keys live in separate spaces in Redis, so they never collide.
    return Namespace.rooms.key(room_id)


def _publish(*, r: redis.Redis, channel: str, event: GameEvent) -> None:
    message = event.to_json()
    receivers = r.publish(channel, message)
    logger.info("Published %s to %s", event.type.value, channel)
    logger.debug("%s had %s receivers for %s", channel, receivers, event.type.value)


def publish_to_room(
    *,
    r: redis.Redis,
    room_id: str,
    type: GameEventType | str,
    data: Any = None,
    player_id: str | None = None,
) -> bool:
    """Stamp an event and publish it on the room's channel.

    Best-effort: returns False on any failure (bad input, unserializable
    payload, store error) and never raises. True only means the publish call
    completed; Redis does not tell us whether anyone consumed it.
    """

    try:
        event = GameEvent.stamp(type=type, room_id=room_id, data=data, player_id=player_id)
        _publish(r=r, channel=room_channel(room_id), event=event)
    except Exception:
        logger.exception("Error publishing %s to room %r", type, room_id)
        return False
    return True


def publish_global(
    *,
    r: redis.Redis,
    type: GameEventType | str,
    data: Any = None,
    room_id: str | None = None,
    player_id: str | None = None,
) -> bool:
    """Publish on the global channel.

    The envelope's roomId defaults to "global" so consumers that log or
    replay events always see a non-empty room id.
    """

    try:
        event = GameEvent.stamp(type=type, room_id=room_id or GLOBAL_ROOM_ID, data=data, player_id=player_id)
        _publish(r=r, channel=GLOBAL_CHANNEL, event=event)
    except Exception:
        logger.exception("Error publishing global %s event", type)
        return False
    return True


def subscribe_to_room(
    *,
    r: redis.Redis,
    room_id: str,
    callback: Callable[[GameEvent], None],
) -> bool:
    """Acknowledge interest in a room's events. This is NOT a live subscription.

    The deployment model has no long-lived server-side connection, so
    `callback` is never attached and will never be called. A True result only
    means the registration call itself did not error. Observers must poll the
    room's durable state instead (see `app.room_store.snapshot_room` and
    `GET /rooms/{room_id}/state`).
    """

    try:
        channel = room_channel(room_id)
    except ValueError:
        logger.error("Error subscribing to room %r: empty room id", room_id)
        return False

    logger.info("Subscription to %s acknowledged; delivery is by polling, not push", channel)
    return True
