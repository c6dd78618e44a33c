from __future__ import annotations

from typing import Literal


ErrorCategory = Literal["store_error", "unexpected_error"]


class BingoRoomsError(Exception):
    """Base class for errors surfaced to operators by administrative calls."""


class KeyspaceClearError(BingoRoomsError):
    """A bulk clear aborted part way through.

    Deletions committed before the failing call are not rolled back;
    `completed` holds the per-namespace counts that did go through.
    """

    def __init__(
        self,
        *,
        category: ErrorCategory,
        details: str,
        namespace: str,
        completed: dict[str, int],
        message: str = "Failed to clear room data",
    ) -> None:
        super().__init__(f"{message}: {details}")
        self.category = category
        self.message = message
        self.details = details
        self.namespace = namespace
        self.completed = completed
