"""Pure draw logic: pools, groups, outcomes and history."""

from .groups import format_groups, partition
from .history import HISTORY_LIMIT, HistoryEntry, append_entry, format_history
from .outcome import DrawOutcome, OutcomePredeterminer, Predetermination
from .pool import PoolDraw, draw_index, full_pool, live_indices

__all__ = [
    "DrawOutcome",
    "HISTORY_LIMIT",
    "HistoryEntry",
    "OutcomePredeterminer",
    "PoolDraw",
    "Predetermination",
    "append_entry",
    "draw_index",
    "format_groups",
    "format_history",
    "full_pool",
    "live_indices",
    "partition",
]
