"""Animations that reveal a predetermined winner."""

from typing import Any

from ..modes import Visualization
from .base import SessionState, Simulator, WHEEL_COLORS, participant_color
from .card import CardFrame, CardPhase, CardRevealSimulator
from .races import DuckRaceSimulator, MarbleRaceSimulator, RaceFrame
from .scheduler import AsyncioScheduler, ManualScheduler, ScheduledCall, Scheduler
from .wheel import WheelFrame, WheelSimulator

SIMULATOR_TYPES: dict[Visualization, type[Simulator]] = {
    Visualization.WHEEL: WheelSimulator,
    Visualization.RACE: DuckRaceSimulator,
    Visualization.MARBLE: MarbleRaceSimulator,
    Visualization.CARD: CardRevealSimulator,
}


def build_simulators(
    scheduler: Scheduler, **kwargs: Any
) -> dict[Visualization, Simulator]:
    """Create one simulator per visualization sharing ``scheduler``.

    ``kwargs`` (``rng``, ``on_frame``, ``on_cue``) are passed to every
    simulator.
    """
    return {kind: cls(scheduler, **kwargs) for kind, cls in SIMULATOR_TYPES.items()}


__all__ = [
    "AsyncioScheduler",
    "CardFrame",
    "CardPhase",
    "CardRevealSimulator",
    "DuckRaceSimulator",
    "ManualScheduler",
    "MarbleRaceSimulator",
    "RaceFrame",
    "SIMULATOR_TYPES",
    "ScheduledCall",
    "Scheduler",
    "SessionState",
    "Simulator",
    "WHEEL_COLORS",
    "WheelFrame",
    "WheelSimulator",
    "build_simulators",
    "participant_color",
]
