"""No-repeat sampling pools for participant and task lists."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Sequence

from ..errors import EmptyListError, PoolExhaustedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolDraw:
    """Result of drawing one index from a list.

    Attributes
    ----------
    index : int
        Position of the selected item in the list.
    pool : tuple[int, ...]
        Pool to store for the next draw. Equal to the candidate set minus
        ``index`` in no-repeat mode, otherwise the filtered input pool.
    """

    index: int
    pool: tuple[int, ...]


def full_pool(items: Sequence[object]) -> tuple[int, ...]:
    """Return every index of ``items``."""

    return tuple(range(len(items)))


def live_indices(items: Sequence[object], pool: Sequence[int]) -> tuple[int, ...]:
    """Drop pool indices that no longer point into ``items``."""

    size = len(items)
    return tuple(i for i in pool if 0 <= i < size)


def draw_index(
    items: Sequence[object],
    pool: Sequence[int],
    no_repeat: bool,
    *,
    rng: Optional[random.Random] = None,
    exhausted_message: Optional[str] = None,
) -> PoolDraw:
    """Pick a uniformly random index of ``items``.

    Parameters
    ----------
    items : Sequence[object]
        The list being drawn from.
    pool : Sequence[int]
        Indices not yet drawn since the last reset. Only consulted when
        ``no_repeat`` is set; stale indices are filtered out first.
    no_repeat : bool
        When ``True`` the drawn index is removed from the returned pool.
    rng : Optional[random.Random], default: None
        Random source; a fresh generator is used when omitted.
    exhausted_message : Optional[str], default: None
        Message carried by :class:`PoolExhaustedError`.

    Returns
    -------
    PoolDraw
        Selected index and the pool to persist.

    Raises
    ------
    EmptyListError
        If ``items`` is empty.
    PoolExhaustedError
        If ``no_repeat`` is set and no candidate remains. The exception's
        ``reset_pool`` holds the full index range to store instead.
    """

    if not items:
        raise EmptyListError()

    rng = rng or random.Random()
    candidates = live_indices(items, pool) if no_repeat else full_pool(items)

    if no_repeat and not candidates:
        logger.info(f"No-repeat pool exhausted for a list of {len(items)} items")
        if exhausted_message is None:
            raise PoolExhaustedError(full_pool(items))
        raise PoolExhaustedError(full_pool(items), exhausted_message)

    position = int(rng.random() * len(candidates))
    selected = candidates[position]

    if no_repeat:
        # Remove by position; the pool is a sequence of list positions.
        remaining = candidates[:position] + candidates[position + 1 :]
    else:
        remaining = live_indices(items, pool)

    logger.debug(f"Drew index {selected} from {len(candidates)} candidates")
    return PoolDraw(index=selected, pool=remaining)


__all__ = ["PoolDraw", "draw_index", "full_pool", "live_indices"]
