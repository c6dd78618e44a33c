from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from enum import StrEnum

import redis

from app.errors import ErrorCategory, KeyspaceClearError


logger = logging.getLogger(__name__)


class Namespace(StrEnum):
    """Key prefixes for the ephemeral entities.

    Declaration order is the order `clear_all` walks them in.
    """

    rooms = "room"
    players = "player"
    games = "game"
    boards = "boards"

    def key(self, entity_id: str) -> str:
        return f"{self.value}:{entity_id}"

    @property
    def pattern(self) -> str:
        return f"{self.value}:*"


def room_key(room_id: str) -> str:
    return Namespace.rooms.key(room_id)


def player_key(player_id: str) -> str:
    return Namespace.players.key(player_id)


def game_key(room_id: str) -> str:
    return Namespace.games.key(room_id)


def boards_key(room_id: str) -> str:
    return Namespace.boards.key(room_id)


@dataclass(frozen=True, slots=True)
class DeletedKeys:
    rooms: int = 0
    players: int = 0
    games: int = 0
    boards: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class ClearAllResult:
    success: bool
    deleted_keys: DeletedKeys


def list_keys(*, r: redis.Redis, namespace: Namespace) -> list[str]:
    """Enumerate every key under a namespace.

    This is a full KEYS scan: fine for maintenance and debugging, never for request hot paths.
    """

    return sorted(r.keys(namespace.pattern))


def count_keys(*, r: redis.Redis) -> DeletedKeys:
    return DeletedKeys(**{ns.name: len(list_keys(r=r, namespace=ns)) for ns in Namespace})


def _clear_failed(
    *,
    category: ErrorCategory,
    error: Exception,
    namespace: Namespace,
    completed: dict[str, int],
) -> KeyspaceClearError:
    logger.exception(
        "Clearing room data failed on %s keys after %s; earlier deletions are not rolled back",
        namespace.name,
        completed or "nothing",
    )
    return KeyspaceClearError(
        category=category,
        details=str(error) or "Unknown error",
        namespace=namespace.name,
        completed=dict(completed),
    )


def clear_all(*, r: redis.Redis) -> ClearAllResult:
    """Delete every key under the four entity namespaces.

    Namespaces are processed one at a time: enumerate, then a single bulk
    delete when anything matched. The first failing store call aborts the
    whole operation with `KeyspaceClearError`; there is no cross-call
    transaction, so namespaces already cleared stay cleared.
    """

    logger.info("Clearing all room data")
    completed: dict[str, int] = {}

    for ns in Namespace:
        try:
            keys = list_keys(r=r, namespace=ns)
            if keys:
                # DEL with no arguments is an error on real Redis.
                r.delete(*keys)
        except redis.RedisError as e:
            raise _clear_failed(category="store_error", error=e, namespace=ns, completed=completed) from e
        except Exception as e:
            raise _clear_failed(category="unexpected_error", error=e, namespace=ns, completed=completed) from e

        completed[ns.name] = len(keys)
        if keys:
            logger.info("Deleted %d %s keys", len(keys), ns.name)

    return ClearAllResult(success=True, deleted_keys=DeletedKeys(**completed))
