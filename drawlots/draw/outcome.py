"""Decide the result of a draw before anything is animated."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from ..errors import EmptyListError, NoTasksAvailableError, PoolExhaustedError
from ..modes import DrawMode
from .groups import format_groups, partition
from .pool import draw_index

if TYPE_CHECKING:
    from ..state import AppState

logger = logging.getLogger(__name__)

TASK_POOL_RESET_MESSAGE = "All tasks assigned! Resetting task list."


@dataclass(frozen=True)
class DrawOutcome:
    """The committed result of one draw.

    Attributes
    ----------
    mode : DrawMode
        Mode the outcome was produced for.
    winner_index : Optional[int]
        Position of the winner in the name list; ``None`` for group draws.
    winner_name : Optional[str]
        Winning name; ``None`` for group draws.
    paired_task : Optional[str]
        Task assigned to the winner in paired mode.
    groups : Optional[tuple[tuple[str, ...], ...]]
        Group composition in group mode.
    """

    mode: DrawMode
    winner_index: Optional[int] = None
    winner_name: Optional[str] = None
    paired_task: Optional[str] = None
    groups: Optional[tuple[tuple[str, ...], ...]] = None

    @property
    def result_text(self) -> str:
        """Display string stored in the history log."""
        if self.groups is not None:
            return format_groups(self.groups)
        if self.paired_task is not None:
            return f"{self.winner_name} is assigned to: {self.paired_task}"
        return self.winner_name or ""


@dataclass(frozen=True)
class Predetermination:
    """Outcome plus the pool bookkeeping the caller must persist.

    Attributes
    ----------
    outcome : DrawOutcome
        The committed result.
    name_pool : tuple[int, ...]
        Name pool after the draw.
    task_pool : tuple[int, ...]
        Task pool after the draw.
    task_pool_reset : bool
        ``True`` when the task pool was exhausted and refilled during the draw.
    """

    outcome: DrawOutcome
    name_pool: tuple[int, ...]
    task_pool: tuple[int, ...]
    task_pool_reset: bool = False


class OutcomePredeterminer:
    """Chooses winners from an :class:`AppState` without mutating it."""

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        notify: Optional[Callable[[str], None]] = None,
    ) -> None:
        """Create a predeterminer.

        Parameters
        ----------
        rng : Optional[random.Random], default: None
            Random source shared by every draw made through this instance.
        notify : Optional[Callable[[str], None]], default: None
            Receives informational messages, such as a task pool reset, that
            do not abort the draw.
        """

        self._rng = rng or random.Random()
        self._notify = notify

    @property
    def rng(self) -> random.Random:
        return self._rng

    def predetermine(self, mode: DrawMode, state: AppState) -> Predetermination:
        """Produce the outcome of a draw in ``mode`` against ``state``.

        Parameters
        ----------
        mode : DrawMode
            Draw mode. Single and interactive draws pick one name, paired
            draws also pick a task and group draws partition the names.
        state : AppState
            Current lists, pools and settings.

        Returns
        -------
        Predetermination
            The outcome together with the updated pools.

        Raises
        ------
        EmptyListError
            If there are no names.
        PoolExhaustedError
            If the name pool is exhausted in no-repeat mode. The draw is not
            performed; store ``reset_pool`` and ask the user to draw again.
        NoTasksAvailableError
            If a paired draw is requested with an empty task list.
        InvalidGroupCountError, InsufficientItemsError
            If group mode is misconfigured.
        """

        if not state.names:
            raise EmptyListError()

        if mode is DrawMode.GROUPS:
            groups = partition(state.names, state.num_groups, rng=self._rng)
            outcome = DrawOutcome(
                mode=mode, groups=tuple(tuple(g) for g in groups)
            )
            return Predetermination(
                outcome=outcome,
                name_pool=state.name_pool,
                task_pool=state.task_pool,
            )

        if mode is DrawMode.PAIRED and not state.tasks:
            raise NoTasksAvailableError()

        name_draw = draw_index(
            state.names, state.name_pool, state.name_no_repeat, rng=self._rng
        )
        winner_name = state.names[name_draw.index]

        if mode is not DrawMode.PAIRED:
            return Predetermination(
                outcome=DrawOutcome(
                    mode=mode,
                    winner_index=name_draw.index,
                    winner_name=winner_name,
                ),
                name_pool=name_draw.pool,
                task_pool=state.task_pool,
            )

        task_pool_reset = False
        try:
            task_draw = draw_index(
                state.tasks, state.task_pool, state.task_no_repeat, rng=self._rng
            )
        except PoolExhaustedError as exc:
            # Tasks are refilled and drawn again in the same call.
            logger.info("Task pool exhausted; retrying against a refreshed pool")
            task_pool_reset = True
            if self._notify is not None:
                self._notify(TASK_POOL_RESET_MESSAGE)
            task_draw = draw_index(
                state.tasks, exc.reset_pool, state.task_no_repeat, rng=self._rng
            )

        return Predetermination(
            outcome=DrawOutcome(
                mode=mode,
                winner_index=name_draw.index,
                winner_name=winner_name,
                paired_task=state.tasks[task_draw.index],
            ),
            name_pool=name_draw.pool,
            task_pool=task_draw.pool,
            task_pool_reset=task_pool_reset,
        )


__all__ = [
    "DrawOutcome",
    "OutcomePredeterminer",
    "Predetermination",
    "TASK_POOL_RESET_MESSAGE",
]
