"""Draw modes and interactive visualizations."""

from __future__ import annotations

from enum import Enum


class DrawMode(str, Enum):
    """How a draw is performed."""

    SINGLE = "single"
    PAIRED = "paired"
    GROUPS = "groups"
    INTERACTIVE = "interactive"

    @property
    def is_animated(self) -> bool:
        return self is DrawMode.INTERACTIVE


class ListKind(str, Enum):
    """Which editable list an operation targets."""

    NAMES = "names"
    TASKS = "tasks"


class Visualization(str, Enum):
    """Animation used to reveal an interactive draw."""

    WHEEL = "wheel"
    RACE = "race"
    MARBLE = "marble"
    CARD = "card"


__all__ = ["DrawMode", "ListKind", "Visualization"]
