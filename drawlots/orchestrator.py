"""Single writer of :class:`~drawlots.state.AppState`.

The orchestrator owns the participant and task lists, both no-repeat pools
and the history log. A draw is always decided first by the
:class:`~drawlots.draw.outcome.OutcomePredeterminer`; interactive draws then
hand the committed winner to one simulator and finalize when it completes.
"""

from __future__ import annotations

import logging
import random
import re
from datetime import datetime
from typing import Callable, Mapping, Optional

from .cues import Cue, CueHandler, log_cue
from .draw.history import HistoryEntry, append_entry, format_history
from .draw.outcome import DrawOutcome, OutcomePredeterminer
from .draw.pool import full_pool
from .errors import InsufficientItemsError, PoolExhaustedError, SessionAlreadyActiveError
from .modes import DrawMode, ListKind, Visualization
from .simulators import ManualScheduler, Scheduler, Simulator, build_simulators
from .simulators.base import FrameHandler
from .state import AppState
from .storage import StateStore

logger = logging.getLogger(__name__)

OutcomeListener = Callable[[HistoryEntry], None]
Notifier = Callable[[str], None]

INTERACTIVE_MIN_NAMES = 2
IDLE_TEXT = "Click 'DRAW LOTS' to begin!"
ANIMATING_TEXT = "...ANIMATING..."

_NAME_SEPARATORS = re.compile(r"[\n\t]+")

_LIST_FIELDS = {
    ListKind.NAMES: ("names", "name_pool", "name_no_repeat"),
    ListKind.TASKS: ("tasks", "task_pool", "task_no_repeat"),
}


def split_items(kind: ListKind, text: str) -> list[str]:
    """Break user input into list items.

    Names accept one item per line or per tab-separated cell; a task is the
    whole trimmed text. Blank items are dropped.
    """
    if kind is ListKind.NAMES:
        parts = _NAME_SEPARATORS.split(text)
    else:
        parts = [text]
    return [part.strip() for part in parts if part.strip()]


class DrawOrchestrator:
    """Runs draws and list edits against one :class:`AppState`.

    Every accepted change replaces the state with ``state.evolve(...)`` and
    is handed to the optional :class:`~drawlots.storage.StateStore`. Errors
    derived from :class:`~drawlots.errors.DrawError` leave the state as it
    was, except that an exhausted name pool is refilled before
    :class:`~drawlots.errors.PoolExhaustedError` is raised.
    """

    def __init__(
        self,
        state: Optional[AppState] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        store: Optional[StateStore] = None,
        simulators: Optional[Mapping[Visualization, Simulator]] = None,
        notifier: Optional[Notifier] = None,
        on_cue: Optional[CueHandler] = None,
        on_frame: Optional[FrameHandler] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Create an orchestrator.

        Parameters
        ----------
        state : Optional[AppState], default: None
            Starting state. When omitted the state is loaded from ``store``
            and falls back to the defaults.
        scheduler : Optional[Scheduler], default: None
            Drives the simulators. Defaults to a :class:`ManualScheduler`,
            which only moves when advanced.
        rng : Optional[random.Random], default: None
            Random source for draws, shuffles and simulator parameters.
        store : Optional[StateStore], default: None
            Receives every new state.
        simulators : Optional[Mapping[Visualization, Simulator]], default: None
            One simulator per visualization. Built on ``scheduler`` when
            omitted.
        notifier : Optional[Callable[[str], None]], default: None
            Receives informational messages such as "2 item(s) added.".
        on_cue : Optional[Callable[[Cue], None]], default: None
            Audio cue trigger.
        on_frame : Optional[Callable[[Any], None]], default: None
            Render hook passed to the default simulators.
        clock : Optional[Callable[[], datetime]], default: None
            Wall clock for history ids and timestamps.
        """

        self._rng = rng or random.Random()
        self._scheduler = scheduler or ManualScheduler()
        self._store = store
        self._notifier = notifier
        self._on_cue = on_cue or log_cue
        self._clock = clock or datetime.now
        self._predeterminer = OutcomePredeterminer(rng=self._rng, notify=self._notify)
        if simulators is None:
            simulators = build_simulators(
                self._scheduler, rng=self._rng, on_frame=on_frame, on_cue=self._on_cue
            )
        self._simulators = dict(simulators)
        self._listeners: list[OutcomeListener] = []
        self._active: Optional[Simulator] = None
        self.display_text = IDLE_TEXT

        if state is None and store is not None:
            state = store.load()
        self._state = state or AppState()
        self._last_entry_id = max((e.id for e in self._state.history), default=0)

    # -------- read side --------
    @property
    def state(self) -> AppState:
        return self._state

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def is_busy(self) -> bool:
        """``True`` while an interactive session has not reached ``DONE``."""
        return self._active is not None and self._active.is_active

    @property
    def active_simulator(self) -> Optional[Simulator]:
        return self._active if self.is_busy else None

    def simulator(self, visualization: Visualization) -> Simulator:
        return self._simulators[visualization]

    def history_text(self) -> str:
        """History as plain text for the clipboard."""
        return format_history(self._state.history)

    def subscribe(self, listener: OutcomeListener) -> Callable[[], None]:
        """Call ``listener(entry)`` whenever an outcome is finalized.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------- list editing --------
    def add_items(self, kind: ListKind, text: str) -> tuple[str, ...]:
        """Append new items parsed from ``text`` and refill that list's pool.

        Items already in the list are skipped.

        Returns
        -------
        tuple[str, ...]
            The items actually added.
        """

        items_field, pool_field, _ = _LIST_FIELDS[kind]
        current: tuple[str, ...] = getattr(self._state, items_field)
        added: list[str] = []
        for item in split_items(kind, text):
            if item not in current and item not in added:
                added.append(item)

        if not added:
            if text.strip():
                self._notify("Items already exist in the list.")
            return ()

        items = current + tuple(added)
        self._commit(**{items_field: items, pool_field: full_pool(items)})
        self._notify(f"{len(added)} item(s) added.")
        return tuple(added)

    def remove_item(self, kind: ListKind, index: int) -> str:
        """Remove the item at ``index`` and refill that list's pool.

        Raises
        ------
        IndexError
            If ``index`` is out of range.
        """

        items_field, pool_field, _ = _LIST_FIELDS[kind]
        items = list(getattr(self._state, items_field))
        if not 0 <= index < len(items):
            raise IndexError(f"{kind.value} index {index} out of range")
        removed = items.pop(index)
        self._commit(**{items_field: tuple(items), pool_field: full_pool(items)})
        return removed

    def clear_list(self, kind: ListKind) -> None:
        """Empty a list. Clearing the names also clears the history."""

        items_field, pool_field, _ = _LIST_FIELDS[kind]
        changes = {items_field: (), pool_field: ()}
        if kind is ListKind.NAMES:
            changes["history"] = ()
        self._commit(**changes)

    def shuffle_names(self) -> None:
        """Shuffle the names in place, refill the name pool and clear history."""

        names = list(self._state.names)
        self._rng.shuffle(names)
        self._commit(names=tuple(names), name_pool=full_pool(names), history=())
        self._notify("Names shuffled & history cleared.")

    def set_no_repeat(self, kind: ListKind, enabled: bool) -> None:
        """Toggle no-repeat for a list; switching it on refills the pool."""

        items_field, pool_field, flag_field = _LIST_FIELDS[kind]
        changes: dict[str, object] = {flag_field: enabled}
        if enabled:
            changes[pool_field] = full_pool(getattr(self._state, items_field))
        self._commit(**changes)

    def set_mode(self, mode: DrawMode) -> None:
        """Switch draw mode, tearing down any running animation."""

        self.cancel_interactive()
        if mode is not self._state.mode:
            self._commit(mode=mode)

    def set_visualization(self, visualization: Visualization) -> None:
        """Pick the animation for interactive draws.

        Raises
        ------
        SessionAlreadyActiveError
            While an interactive session is running.
        """

        if self.is_busy:
            raise SessionAlreadyActiveError()
        if visualization is not self._state.visualization:
            self._commit(visualization=visualization)

    def set_num_groups(self, num_groups: int) -> None:
        self._commit(num_groups=max(1, int(num_groups)))

    def reset_all(self) -> None:
        """Clear history and refill both pools."""

        self.cancel_interactive()
        self._commit(
            history=(),
            name_pool=full_pool(self._state.names),
            task_pool=full_pool(self._state.tasks),
        )
        self._notify("All pools and history reset.")

    # -------- drawing --------
    def request_draw(self, mode: Optional[DrawMode] = None) -> Optional[HistoryEntry]:
        """Perform a draw in ``mode`` (the current mode when omitted).

        Single, paired and group draws are finalized immediately. An
        interactive draw commits the winner and starts the selected
        simulator; the entry is logged and published when it completes.

        Returns
        -------
        Optional[HistoryEntry]
            The finalized entry, or ``None`` for an interactive draw.

        Raises
        ------
        SessionAlreadyActiveError
            If an interactive session is still running. Nothing is drawn.
        EmptyListError, InsufficientItemsError, InvalidGroupCountError, NoTasksAvailableError
            If the lists do not allow the draw. Nothing is drawn.
        PoolExhaustedError
            If the name pool is exhausted. The pool has been refilled; draw
            again.
        """

        mode = mode or self._state.mode
        if self.is_busy:
            logger.info("Draw rejected: an interactive session is still running")
            raise SessionAlreadyActiveError()
        if mode is DrawMode.INTERACTIVE and 0 < len(self._state.names) < INTERACTIVE_MIN_NAMES:
            raise InsufficientItemsError(INTERACTIVE_MIN_NAMES, len(self._state.names))

        try:
            result = self._predeterminer.predetermine(mode, self._state)
        except PoolExhaustedError as exc:
            logger.info(f"Name pool exhausted; refilled with {len(exc.reset_pool)} names")
            self._commit(name_pool=exc.reset_pool)
            raise

        self._commit(name_pool=result.name_pool, task_pool=result.task_pool)
        outcome = result.outcome

        if mode.is_animated:
            self._start_session(outcome)
            return None

        self._on_cue(Cue.DRAW_COMMITTED)
        return self._finalize(outcome)

    def cancel_interactive(self) -> bool:
        """Tear down the running interactive session, if any.

        The winner already taken from a no-repeat pool stays taken; no
        history entry is written.
        """

        if not self.is_busy:
            self._active = None
            return False
        simulator = self._active
        self._active = None
        self.display_text = IDLE_TEXT
        return simulator.cancel()

    def _start_session(self, outcome: DrawOutcome) -> None:
        simulator = self._simulators[self._state.visualization]
        self._active = simulator
        self.display_text = ANIMATING_TEXT
        logger.info(
            f"Starting {self._state.visualization.value} reveal for '{outcome.winner_name}'"
        )
        try:
            simulator.start(
                self._state.names,
                outcome.winner_name,
                lambda: self._on_session_done(simulator, outcome),
                winner_index=outcome.winner_index,
            )
        except Exception:
            self._active = None
            self.display_text = IDLE_TEXT
            raise

    def _on_session_done(self, simulator: Simulator, outcome: DrawOutcome) -> None:
        if self._active is not simulator:
            return
        self._active = None
        self._finalize(outcome)

    def _finalize(self, outcome: DrawOutcome) -> HistoryEntry:
        entry = self._make_entry(outcome)
        self._commit(history=append_entry(self._state.history, entry))
        if outcome.groups is not None:
            self.display_text = f"Groups Created! ({len(outcome.groups)} groups)"
        else:
            self.display_text = entry.result
        logger.info(f"Draw finalized ({entry.mode.value}): {entry.result}")
        for listener in list(self._listeners):
            listener(entry)
        return entry

    def _make_entry(self, outcome: DrawOutcome) -> HistoryEntry:
        now = self._clock()
        entry_id = max(int(now.timestamp() * 1000), self._last_entry_id + 1)
        self._last_entry_id = entry_id
        return HistoryEntry(
            id=entry_id,
            result=outcome.result_text,
            mode=outcome.mode,
            timestamp=now.strftime("%H:%M:%S"),
            groups=outcome.groups,
        )

    # -------- plumbing --------
    def _commit(self, **changes: object) -> None:
        self._state = self._state.evolve(**changes)
        if self._store is not None:
            self._store.save(self._state)

    def _notify(self, message: str) -> None:
        logger.debug(f"Notice: {message}")
        if self._notifier is not None:
            self._notifier(message)


__all__ = [
    "ANIMATING_TEXT",
    "DrawOrchestrator",
    "IDLE_TEXT",
    "INTERACTIVE_MIN_NAMES",
    "Notifier",
    "OutcomeListener",
    "split_items",
]
