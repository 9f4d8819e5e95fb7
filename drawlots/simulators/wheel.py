"""Spinning wheel that stops with the predetermined winner under the pointer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from ..cues import Cue
from ..modes import Visualization
from .base import Simulator, participant_color
from .easing import WHEEL_EASING, Easing
from .scheduler import Scheduler

SPIN_DURATION_MS = 6000.0
FULL_SPINS = 5
MIN_SPIN_DEGREES = 1.0


@dataclass(frozen=True)
class WheelSegment:
    index: int
    name: str
    start_angle: float
    end_angle: float
    color: str

    @property
    def center_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2.0


@dataclass(frozen=True)
class WheelFrame:
    """Wheel orientation at one point of a spin.

    ``rotation`` is the accumulated rotation in degrees. The wheel is drawn
    rotated by ``-rotation`` with segment 0 starting at the pointer, so the
    segment under the pointer is the one containing ``rotation % 360``.
    """

    elapsed_ms: float
    rotation: float
    progress: float
    pointer_index: int


def segment_angle(count: int) -> float:
    if count < 1:
        raise ValueError("a wheel needs at least one segment")
    return 360.0 / count


def build_segments(names: tuple[str, ...]) -> tuple[WheelSegment, ...]:
    """Lay ``names`` out as equal segments in list order."""
    angle = segment_angle(len(names))
    return tuple(
        WheelSegment(
            index=i,
            name=name,
            start_angle=i * angle,
            end_angle=(i + 1) * angle,
            color=participant_color(i),
        )
        for i, name in enumerate(names)
    )


def segment_at_pointer(rotation: float, count: int) -> int:
    """Index of the segment under the fixed pointer at ``rotation`` degrees."""
    angle = segment_angle(count)
    return int(math.floor((rotation % 360.0) / angle)) % count


def target_rotation(
    current: float,
    winner_index: int,
    count: int,
    *,
    full_spins: int = FULL_SPINS,
) -> float:
    """Absolute rotation at which the wheel must stop.

    The centre of the winning segment is brought under the pointer by the
    smallest forward turn of more than :data:`MIN_SPIN_DEGREES`, followed by
    ``full_spins`` complete revolutions.

    Parameters
    ----------
    current : float
        Accumulated rotation left by the previous spin.
    winner_index : int
        Segment that must end under the pointer.
    count : int
        Number of segments.
    full_spins : int, default: 5
        Extra whole turns for effect.

    Returns
    -------
    float
        Rotation strictly greater than ``current``.
    """

    if not 0 <= winner_index < count:
        raise ValueError("winner_index out of range")
    angle = segment_angle(count)
    center = winner_index * angle + angle / 2.0
    delta = (center - current % 360.0 + 360.0) % 360.0
    if delta < MIN_SPIN_DEGREES:
        delta += 360.0
    return current + delta + 360.0 * full_spins


class WheelSimulator(Simulator):
    """Rotates the wheel over a fixed duration with an ease-out curve.

    The final rotation is kept as the baseline for the next spin, so repeated
    spins keep turning forward instead of snapping back.
    """

    kind = Visualization.WHEEL

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        duration_ms: float = SPIN_DURATION_MS,
        full_spins: int = FULL_SPINS,
        easing: Easing = WHEEL_EASING,
        rotation: float = 0.0,
        **kwargs: Any,
    ) -> None:
        super().__init__(scheduler, **kwargs)
        self.duration_ms = duration_ms
        self.full_spins = full_spins
        self._easing = easing
        self._rotation = rotation
        self._from = rotation
        self._to = rotation

    @property
    def rotation(self) -> float:
        """Resting rotation left by the last completed spin."""
        return self._rotation

    @property
    def target(self) -> float:
        """Rotation the current (or last) spin stops at."""
        return self._to

    def segments(self) -> tuple[WheelSegment, ...]:
        return build_segments(self._participants)

    def _begin(self) -> None:
        count = len(self._participants)
        self._from = self._rotation
        self._to = target_rotation(
            self._rotation, self._winner_index, count, full_spins=self.full_spins
        )
        self._emit(self._frame_at(0.0))
        self._next_frame(self._on_frame_tick)
        self._after(self.duration_ms, self._on_stopped)

    def _frame_at(self, elapsed: float) -> WheelFrame:
        progress = min(1.0, elapsed / self.duration_ms) if self.duration_ms > 0 else 1.0
        rotation = self._from + (self._to - self._from) * self._easing(progress)
        return WheelFrame(
            elapsed_ms=elapsed,
            rotation=rotation,
            progress=progress,
            pointer_index=segment_at_pointer(rotation, len(self._participants)),
        )

    def _on_frame_tick(self, timestamp: float) -> None:
        frame = self._frame_at(self._elapsed(timestamp))
        self._emit(frame)
        if frame.progress < 1.0:
            self._next_frame(self._on_frame_tick)
        else:
            self._conclude()

    def _on_stopped(self) -> None:
        self._rotation = self._to
        self._conclude()
        self._emit(
            WheelFrame(
                elapsed_ms=self._elapsed(),
                rotation=self._to,
                progress=1.0,
                pointer_index=segment_at_pointer(self._to, len(self._participants)),
            )
        )
        self._cue(Cue.WHEEL_STOPPED)
        self._finish()


__all__ = [
    "FULL_SPINS",
    "SPIN_DURATION_MS",
    "WheelFrame",
    "WheelSegment",
    "WheelSimulator",
    "build_segments",
    "segment_angle",
    "segment_at_pointer",
    "target_rotation",
]
