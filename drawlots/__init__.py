"""Classroom random draws whose result is decided before it is animated."""

from .cues import Cue
from .errors import (
    DrawError,
    EmptyListError,
    InsufficientItemsError,
    InvalidGroupCountError,
    NoTasksAvailableError,
    PoolExhaustedError,
    SessionAlreadyActiveError,
    UnknownParticipantError,
)
from .modes import DrawMode, ListKind, Visualization
from .orchestrator import DrawOrchestrator
from .state import AppState
from .storage import StateStore

__all__ = [
    "AppState",
    "Cue",
    "DrawError",
    "DrawMode",
    "DrawOrchestrator",
    "EmptyListError",
    "InsufficientItemsError",
    "InvalidGroupCountError",
    "ListKind",
    "NoTasksAvailableError",
    "PoolExhaustedError",
    "SessionAlreadyActiveError",
    "StateStore",
    "UnknownParticipantError",
    "Visualization",
]
