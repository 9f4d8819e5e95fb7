"""Exceptions raised by the draw subsystem.

Every error derived from :class:`DrawError` is recoverable: the caller shows
the message to the user and the draw is simply not performed.
"""

from __future__ import annotations

from typing import Sequence


class DrawError(ValueError):
    """Base class for recoverable draw failures."""


class EmptyListError(DrawError):
    """Raised when there is nothing to draw from."""

    def __init__(self, message: str = "Add names first.") -> None:
        super().__init__(message)


class PoolExhaustedError(DrawError):
    """Raised when a no-repeat pool has no candidates left.

    Attributes
    ----------
    reset_pool : tuple[int, ...]
        Full index range of the list at the time of exhaustion. The caller
        stores it as the new pool.
    """

    def __init__(
        self,
        reset_pool: Sequence[int],
        message: str = "All names drawn! Resetting list.",
    ) -> None:
        super().__init__(message)
        self.reset_pool = tuple(reset_pool)


class InvalidGroupCountError(DrawError):
    """Raised when fewer than one group is requested."""

    def __init__(self, message: str = "Invalid group number.") -> None:
        super().__init__(message)


class InsufficientItemsError(DrawError):
    """Raised when a list is too short for the requested draw."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"Need at least {required} names.")
        self.required = required
        self.available = available


class NoTasksAvailableError(DrawError):
    """Raised for a paired draw when the task list is empty."""

    def __init__(self, message: str = "Add tasks for paired mode.") -> None:
        super().__init__(message)


class SessionAlreadyActiveError(DrawError):
    """Raised when an animation session is requested while one is running."""

    def __init__(self, message: str = "A draw is already in progress.") -> None:
        super().__init__(message)


class UnknownParticipantError(DrawError):
    """Raised when a simulator is asked to reveal a winner it does not know."""

    def __init__(self, winner_name: str) -> None:
        super().__init__(f"Winner '{winner_name}' is not among the participants.")
        self.winner_name = winner_name


__all__ = [
    "DrawError",
    "EmptyListError",
    "InsufficientItemsError",
    "InvalidGroupCountError",
    "NoTasksAvailableError",
    "PoolExhaustedError",
    "SessionAlreadyActiveError",
    "UnknownParticipantError",
]
