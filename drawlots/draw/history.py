"""Bounded, most-recent-first log of finalized draws."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from ..modes import DrawMode

HISTORY_LIMIT = 50
"""Maximum number of entries kept in the log."""


@dataclass(frozen=True)
class HistoryEntry:
    """A finalized draw as shown in the history panel.

    Attributes
    ----------
    id : int
        Monotonic identifier (creation time in milliseconds).
    result : str
        Display string of the outcome.
    mode : DrawMode
        Mode the draw was performed in.
    timestamp : str
        Wall-clock display time, e.g. ``"14:03:59"``.
    groups : Optional[tuple[tuple[str, ...], ...]]
        Group composition for group draws.
    """

    id: int
    result: str
    mode: DrawMode
    timestamp: str
    groups: Optional[tuple[tuple[str, ...], ...]] = None

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable dict."""
        data: dict[str, Any] = {
            "id": self.id,
            "result": self.result,
            "mode": self.mode.value,
            "timestamp": self.timestamp,
        }
        if self.groups is not None:
            data["groups"] = [list(g) for g in self.groups]
        return data

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        """Build an entry from :meth:`to_json` output.

        Raises
        ------
        KeyError, ValueError, TypeError
            If ``data`` is missing fields or holds values of the wrong type.
        """
        if not isinstance(data, Mapping):
            raise ValueError("history entry must be a JSON object")
        groups = data.get("groups")
        return cls(
            id=int(data["id"]),
            result=str(data["result"]),
            mode=DrawMode(data["mode"]),
            timestamp=str(data["timestamp"]),
            groups=(
                tuple(tuple(str(item) for item in g) for g in groups)
                if groups is not None
                else None
            ),
        )


def append_entry(
    log: Sequence[HistoryEntry],
    entry: HistoryEntry,
    *,
    limit: int = HISTORY_LIMIT,
) -> tuple[HistoryEntry, ...]:
    """Return a new log with ``entry`` first and at most ``limit`` entries."""

    return (entry, *log)[:limit]


def format_history(log: Sequence[HistoryEntry]) -> str:
    """Render the log as plain text, one numbered line per entry."""

    return "\n".join(
        f"{i + 1}. [{entry.timestamp}] ({entry.mode.value}): {entry.result}"
        for i, entry in enumerate(log)
    )


__all__ = ["HISTORY_LIMIT", "HistoryEntry", "append_entry", "format_history"]
