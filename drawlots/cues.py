"""Audio cue triggers fired at the key moments of a draw."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Cue(str, Enum):
    DRAW_COMMITTED = "draw_committed"
    WHEEL_STOPPED = "wheel_stopped"
    RACE_FINISHED = "race_finished"
    CARD_REVEALED = "card_revealed"


CueHandler = Callable[[Cue], None]


def log_cue(cue: Cue) -> None:
    """Default cue handler for headless use: records the cue and plays nothing."""
    logger.debug(f"Cue: {cue.value}")


__all__ = ["Cue", "CueHandler", "log_cue"]
