"""Lane races (ducks and marbles) rigged so the predetermined winner finishes first.

Every lane gets a traversal duration. Non-winner durations are random; the
winner's is derived from them so that it is strictly the shortest, and this
is checked as a hard post-condition before the race starts. Progress along a
lane is a function of elapsed time over that lane's duration that only
reaches the finish when the duration is up, so cosmetic wobble can never
change the finishing order.
"""

from __future__ import annotations

import logging
import math
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..cues import Cue
from ..modes import Visualization
from .base import Simulator, participant_color
from .easing import ease_in_out_quad
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lane:
    """Fixed parameters of one participant's lane."""

    index: int
    name: str
    color: str
    duration_ms: float
    wobble_phase: float
    is_winner: bool


@dataclass(frozen=True)
class LanePosition:
    """Where a participant is drawn in one frame.

    ``progress`` runs from 0 at the start line to 1 at the finish line.
    ``offset`` is the cosmetic displacement perpendicular to the direction of
    travel.
    """

    index: int
    name: str
    progress: float
    offset: float

    @property
    def finished(self) -> bool:
        return self.progress >= 1.0


@dataclass(frozen=True)
class RaceFrame:
    elapsed_ms: float
    positions: tuple[LanePosition, ...]
    winner_declared: bool
    winner_name: str

    def leader(self) -> LanePosition:
        return max(self.positions, key=lambda p: p.progress)


def check_winner_first(lanes: Sequence[Lane]) -> None:
    """Raise ``RuntimeError`` unless the winner's lane is strictly the fastest."""

    winners = [lane for lane in lanes if lane.is_winner]
    if len(winners) != 1:
        raise RuntimeError("a race needs exactly one winning lane")
    winner = winners[0]
    for lane in lanes:
        if lane is not winner and lane.duration_ms <= winner.duration_ms:
            raise RuntimeError(
                f"lane '{lane.name}' ({lane.duration_ms:.1f} ms) would not finish "
                f"after the winner '{winner.name}' ({winner.duration_ms:.1f} ms)"
            )


class LaneRaceSimulator(Simulator):
    """Frame-driven race that concludes once the winner is home.

    The race is decided on the first frame where the winner has reached the
    finish and at least ``min_elapsed_ms`` have passed. A single "winner"
    frame is then published and the session completes ``celebration_ms``
    later.
    """

    min_elapsed_ms: float
    celebration_ms: float

    def __init__(self, scheduler: Scheduler, **kwargs: Any) -> None:
        super().__init__(scheduler, **kwargs)
        self._lanes: tuple[Lane, ...] = ()

    @property
    def lanes(self) -> tuple[Lane, ...]:
        return self._lanes

    @abstractmethod
    def _plan_lanes(self) -> list[Lane]:
        """Draw random lane parameters for the current participants."""

    @abstractmethod
    def progress(self, lane: Lane, elapsed_ms: float) -> float:
        """Fraction of ``lane`` covered after ``elapsed_ms``."""

    def offset(self, lane: Lane, elapsed_ms: float) -> float:
        return 0.0

    def _celebration_positions(self, elapsed: float) -> tuple[LanePosition, ...]:
        return self._positions(elapsed)

    def _positions(self, elapsed: float) -> tuple[LanePosition, ...]:
        return tuple(
            LanePosition(
                index=lane.index,
                name=lane.name,
                progress=self.progress(lane, elapsed),
                offset=self.offset(lane, elapsed),
            )
            for lane in self._lanes
        )

    def _begin(self) -> None:
        lanes = self._plan_lanes()
        check_winner_first(lanes)
        self._lanes = tuple(lanes)
        logger.debug(
            f"{type(self).__name__} planned {len(lanes)} lanes; winner finishes at "
            f"{self._winner_lane().duration_ms:.0f} ms"
        )
        self._emit(self._frame(0.0, declared=False))
        self._next_frame(self._on_frame_tick)

    def _winner_lane(self) -> Lane:
        return self._lanes[self._winner_index]

    def _frame(self, elapsed: float, *, declared: bool) -> RaceFrame:
        positions = (
            self._celebration_positions(elapsed) if declared else self._positions(elapsed)
        )
        return RaceFrame(
            elapsed_ms=elapsed,
            positions=positions,
            winner_declared=declared,
            winner_name=self.winner_name or "",
        )

    def _on_frame_tick(self, timestamp: float) -> None:
        elapsed = self._elapsed(timestamp)
        winner_home = self.progress(self._winner_lane(), elapsed) >= 1.0
        if winner_home and elapsed >= self.min_elapsed_ms:
            self._conclude()
            self._cue(Cue.RACE_FINISHED)
            self._emit(self._frame(elapsed, declared=True))
            self._after(self.celebration_ms, self._finish)
            return
        self._emit(self._frame(elapsed, declared=False))
        self._next_frame(self._on_frame_tick)


class DuckRaceSimulator(LaneRaceSimulator):
    """Ducks paddle across at random speeds; the winner gets a speed boost.

    Non-winner speeds are uniform in ``[min_speed, max_speed]`` track units
    per second. The winner moves at ``winner_boost`` times the fastest of them,
    so its traversal time is strictly the shortest. Each duck surges and lags
    along its lane by a wobble that vanishes at both ends of the track.
    """

    kind = Visualization.RACE

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        track_length: float = 700.0,
        min_speed: float = 120.0,
        max_speed: float = 200.0,
        winner_boost: float = 1.15,
        min_elapsed_ms: float = 3000.0,
        celebration_ms: float = 2000.0,
        wobble_amplitude: float = 0.15,
        wobble_cycles: int = 2,
        **kwargs: Any,
    ) -> None:
        super().__init__(scheduler, **kwargs)
        if winner_boost <= 1.0:
            raise ValueError("winner_boost must be greater than 1")
        if not 0 < min_speed <= max_speed:
            raise ValueError("speeds must satisfy 0 < min_speed <= max_speed")
        # Keeps progress monotonic: amplitude * (1 + pi * cycles / 2) < 1.
        if wobble_amplitude * (1.0 + math.pi * wobble_cycles / 2.0) >= 1.0:
            raise ValueError("wobble is too strong to keep ducks moving forward")
        self.track_length = track_length
        self.min_speed = min_speed
        self.max_speed = max_speed
        self.winner_boost = winner_boost
        self.min_elapsed_ms = min_elapsed_ms
        self.celebration_ms = celebration_ms
        self.wobble_amplitude = wobble_amplitude
        self.wobble_cycles = wobble_cycles
        self._speeds: tuple[float, ...] = ()

    @property
    def speeds(self) -> tuple[float, ...]:
        """Base speed of every lane, in list order."""
        return self._speeds

    def _plan_lanes(self) -> list[Lane]:
        speeds = [
            self._rng.uniform(self.min_speed, self.max_speed)
            for _ in self._participants
        ]
        fastest_other = max(
            (s for i, s in enumerate(speeds) if i != self._winner_index),
            default=self.min_speed,
        )
        speeds[self._winner_index] = max(fastest_other, self.min_speed) * self.winner_boost
        self._speeds = tuple(speeds)

        return [
            Lane(
                index=i,
                name=name,
                color=participant_color(i),
                duration_ms=self.track_length / speeds[i] * 1000.0,
                wobble_phase=self._rng.uniform(0.0, 2.0 * math.pi),
                is_winner=i == self._winner_index,
            )
            for i, name in enumerate(self._participants)
        ]

    def progress(self, lane: Lane, elapsed_ms: float) -> float:
        u = min(1.0, max(0.0, elapsed_ms / lane.duration_ms))
        if u >= 1.0:
            return 1.0
        surge = math.sin(2.0 * math.pi * self.wobble_cycles * u + lane.wobble_phase)
        return min(1.0, max(0.0, u + self.wobble_amplitude * u * (1.0 - u) * surge))

    def offset(self, lane: Lane, elapsed_ms: float) -> float:
        # Bobbing on the water, in track units.
        return math.sin(elapsed_ms / 200.0 + lane.index) * 2.0


class MarbleRaceSimulator(LaneRaceSimulator):
    """Marbles roll down parallel lanes with eased, time-based motion.

    The winner takes exactly ``winner_duration_ms``; every other marble takes
    that plus a random extra in ``[min_extra_ms, max_extra_ms]``. The race is
    called ``decision_delay_ms`` after the winner lands.
    """

    kind = Visualization.MARBLE

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        winner_duration_ms: float = 3000.0,
        min_extra_ms: float = 500.0,
        max_extra_ms: float = 2000.0,
        decision_delay_ms: float = 500.0,
        celebration_ms: float = 2000.0,
        sway: float = 0.15,
        **kwargs: Any,
    ) -> None:
        super().__init__(scheduler, **kwargs)
        if not 0 < min_extra_ms <= max_extra_ms:
            raise ValueError("extras must satisfy 0 < min_extra_ms <= max_extra_ms")
        self.winner_duration_ms = winner_duration_ms
        self.min_extra_ms = min_extra_ms
        self.max_extra_ms = max_extra_ms
        self.min_elapsed_ms = winner_duration_ms + decision_delay_ms
        self.celebration_ms = celebration_ms
        self.sway = sway

    def _plan_lanes(self) -> list[Lane]:
        lanes = []
        for i, name in enumerate(self._participants):
            is_winner = i == self._winner_index
            duration = self.winner_duration_ms
            if not is_winner:
                duration += self._rng.uniform(self.min_extra_ms, self.max_extra_ms)
            lanes.append(
                Lane(
                    index=i,
                    name=name,
                    color=participant_color(i),
                    duration_ms=duration,
                    wobble_phase=self._rng.random() * 1000.0,
                    is_winner=is_winner,
                )
            )
        return lanes

    def progress(self, lane: Lane, elapsed_ms: float) -> float:
        return ease_in_out_quad(elapsed_ms / lane.duration_ms)

    def offset(self, lane: Lane, elapsed_ms: float) -> float:
        # Sideways sway as a fraction of the lane width.
        return math.sin((elapsed_ms + lane.wobble_phase) / 200.0) * self.sway

    def _celebration_positions(self, elapsed: float) -> tuple[LanePosition, ...]:
        return tuple(
            LanePosition(index=lane.index, name=lane.name, progress=1.0, offset=0.0)
            for lane in self._lanes
        )


def first_finisher(simulator: LaneRaceSimulator, elapsed_ms: float) -> Optional[str]:
    """Name of the first lane home by ``elapsed_ms``, if any."""
    home = [
        lane for lane in simulator.lanes if simulator.progress(lane, elapsed_ms) >= 1.0
    ]
    if not home:
        return None
    return min(home, key=lambda lane: lane.duration_ms).name


__all__ = [
    "DuckRaceSimulator",
    "Lane",
    "LanePosition",
    "LaneRaceSimulator",
    "MarbleRaceSimulator",
    "RaceFrame",
    "check_winner_first",
    "first_finisher",
]
