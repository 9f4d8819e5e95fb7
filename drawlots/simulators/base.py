"""State machine shared by every animation that reveals a predetermined winner."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Sequence

from ..cues import Cue, CueHandler, log_cue
from ..errors import SessionAlreadyActiveError, UnknownParticipantError
from ..modes import Visualization
from .scheduler import ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

WHEEL_COLORS: tuple[str, ...] = (
    "#fb923c",  # orange
    "#a78bfa",  # purple
    "#34d399",  # emerald
    "#f87171",  # red
    "#60a5fa",  # blue
    "#fde047",  # yellow
    "#e879f9",  # fuchsia
    "#4ade80",  # green
)


def participant_color(index: int) -> str:
    """Colour assigned to the participant at ``index``."""
    return WHEEL_COLORS[index % len(WHEEL_COLORS)]


class SessionState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    CONCLUDING = "concluding"
    DONE = "done"


FrameHandler = Callable[[Any], None]


class Simulator(ABC):
    """Plays one animation session that always ends on a given winner.

    A session goes ``IDLE -> RUNNING -> CONCLUDING -> DONE``. ``on_done`` is
    invoked exactly once, on the transition to ``DONE``. :meth:`cancel` drops
    every pending callback, returns the simulator to ``IDLE`` and never
    invokes ``on_done``.

    Subclasses implement :meth:`_begin` and drive themselves with
    :meth:`_after` and :meth:`_next_frame`, which ignore callbacks belonging to
    a session that has since been cancelled or replaced.
    """

    kind: ClassVar[Visualization]

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        rng: Optional[random.Random] = None,
        on_frame: Optional[FrameHandler] = None,
        on_cue: Optional[CueHandler] = None,
    ) -> None:
        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self._on_frame = on_frame
        self._on_cue = on_cue or log_cue

        self._state = SessionState.IDLE
        self._session = 0
        self._calls: set[ScheduledCall] = set()
        self._on_done: Optional[Callable[[], None]] = None
        self._participants: tuple[str, ...] = ()
        self._winner_index: Optional[int] = None
        self._started_at = 0.0
        self._last_frame: Any = None

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<{type(self).__name__}(state={self._state.value}, winner={self.winner_name!r})>"

    # -------- public API --------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        """``True`` while a session is running or concluding."""
        return self._state in (SessionState.RUNNING, SessionState.CONCLUDING)

    @property
    def participants(self) -> tuple[str, ...]:
        return self._participants

    @property
    def winner_index(self) -> Optional[int]:
        return self._winner_index

    @property
    def winner_name(self) -> Optional[str]:
        if self._winner_index is None:
            return None
        return self._participants[self._winner_index]

    @property
    def last_frame(self) -> Any:
        """Most recent frame published, or ``None`` outside a session."""
        return self._last_frame

    def start(
        self,
        participants: Sequence[str],
        winner_name: str,
        on_done: Callable[[], None],
        *,
        winner_index: Optional[int] = None,
    ) -> None:
        """Begin a session that ends on ``winner_name``.

        Parameters
        ----------
        participants : Sequence[str]
            Names in list order.
        winner_name : str
            Predetermined winner; must be one of ``participants``.
        on_done : Callable[[], None]
            Invoked once when the animation completes.
        winner_index : Optional[int], default: None
            Position of the winner. Looked up by name when omitted.

        Raises
        ------
        SessionAlreadyActiveError
            If a session is already running or concluding.
        UnknownParticipantError
            If ``winner_name`` is not at ``winner_index`` (or not present).
        """

        if self.is_active:
            raise SessionAlreadyActiveError()

        names = tuple(participants)
        if winner_index is None:
            if winner_name not in names:
                raise UnknownParticipantError(winner_name)
            winner_index = names.index(winner_name)
        elif not 0 <= winner_index < len(names) or names[winner_index] != winner_name:
            raise UnknownParticipantError(winner_name)

        self._session += 1
        self._participants = names
        self._winner_index = winner_index
        self._on_done = on_done
        self._calls = set()
        self._last_frame = None
        self._started_at = self._scheduler.now()
        self._set_state(SessionState.RUNNING)
        self._begin()

    def cancel(self) -> bool:
        """Tear down the active session without completing it.

        Returns
        -------
        bool
            ``True`` if a session was cancelled.
        """
        if not self.is_active:
            return False
        self._drop_calls()
        self._session += 1
        self._on_done = None
        self._last_frame = None
        self._set_state(SessionState.IDLE)
        logger.info(f"{type(self).__name__} session cancelled")
        return True

    # -------- helpers for subclasses --------
    @abstractmethod
    def _begin(self) -> None:
        """Publish the first frame and schedule the rest of the session."""

    def _elapsed(self, timestamp: Optional[float] = None) -> float:
        now = self._scheduler.now() if timestamp is None else timestamp
        return max(0.0, now - self._started_at)

    def _track(self, schedule: Callable[[Callable[..., None]], ScheduledCall], fn: Callable[..., None]) -> None:
        session = self._session
        holder: list[ScheduledCall] = []

        def fire(*args: Any) -> None:
            if holder:
                self._calls.discard(holder[0])
            if session != self._session or not self.is_active:
                return
            fn(*args)

        call = schedule(fire)
        holder.append(call)
        self._calls.add(call)

    def _after(self, delay_ms: float, fn: Callable[[], None]) -> None:
        self._track(lambda cb: self._scheduler.call_later(delay_ms, cb), fn)

    def _next_frame(self, fn: Callable[[float], None]) -> None:
        self._track(self._scheduler.call_next_frame, fn)

    def _emit(self, frame: Any) -> None:
        self._last_frame = frame
        if self._on_frame is not None:
            self._on_frame(frame)

    def _cue(self, cue: Cue) -> None:
        self._on_cue(cue)

    def _conclude(self) -> None:
        if self._state is SessionState.RUNNING:
            self._set_state(SessionState.CONCLUDING)

    def _finish(self) -> None:
        if not self.is_active:
            return
        self._drop_calls()
        callback = self._on_done
        self._on_done = None
        self._set_state(SessionState.DONE)
        if callback is not None:
            callback()

    def _drop_calls(self) -> None:
        for call in list(self._calls):
            call.cancel()
        self._calls.clear()

    def _set_state(self, state: SessionState) -> None:
        logger.debug(f"{type(self).__name__}: {self._state.value} -> {state.value}")
        self._state = state


__all__ = [
    "FrameHandler",
    "SessionState",
    "Simulator",
    "WHEEL_COLORS",
    "participant_color",
]
