"""Balanced random partitioning of a list into groups."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from ..errors import InsufficientItemsError, InvalidGroupCountError


def partition(
    items: Sequence[str],
    num_groups: int,
    *,
    rng: Optional[random.Random] = None,
) -> list[list[str]]:
    """Split ``items`` into ``num_groups`` groups whose sizes differ by at most one.

    The list is shuffled with an unbiased Fisher-Yates shuffle and the
    shuffled element at position ``i`` is dealt to group ``i % num_groups``.

    Parameters
    ----------
    items : Sequence[str]
        Items to distribute. The input is not modified.
    num_groups : int
        Number of groups to create. Must be at least one.
    rng : Optional[random.Random], default: None
        Random generator to use; useful for deterministic tests.

    Returns
    -------
    list[list[str]]
        ``num_groups`` lists that together contain every item exactly once.

    Raises
    ------
    InvalidGroupCountError
        If ``num_groups`` is less than one.
    InsufficientItemsError
        If there are fewer items than groups.
    """

    if num_groups < 1:
        raise InvalidGroupCountError()
    if len(items) < num_groups:
        raise InsufficientItemsError(num_groups, len(items))

    rng = rng or random.Random()
    shuffled = list(items)
    rng.shuffle(shuffled)

    groups: list[list[str]] = [[] for _ in range(num_groups)]
    for i, item in enumerate(shuffled):
        groups[i % num_groups].append(item)
    return groups


def format_groups(groups: Sequence[Sequence[str]]) -> str:
    """Render groups as ``"Group 1: a, b | Group 2: c"``."""

    return " | ".join(
        f"Group {i + 1}: {', '.join(group)}" for i, group in enumerate(groups)
    )


__all__ = ["format_groups", "partition"]
