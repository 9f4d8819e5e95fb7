"""Application state shared between the orchestrator and the presentation layer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from .draw.history import HISTORY_LIMIT, HistoryEntry
from .modes import DrawMode, Visualization

DEFAULT_NAMES: tuple[str, ...] = ("John", "Jane", "Alice", "Bob", "Charlie", "Diana")


def _str_tuple(value: Any, key: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return tuple(value)


def _int_tuple(value: Any, key: str) -> tuple[int, ...]:
    if not isinstance(value, (list, tuple)) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in value
    ):
        raise ValueError(f"'{key}' must be a list of integers")
    return tuple(value)


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


@dataclass(frozen=True)
class AppState:
    """Immutable snapshot of everything the draw tool persists.

    The orchestrator is the only writer: each accepted mutation produces a new
    snapshot with ``version`` incremented by one.

    Attributes
    ----------
    names : tuple[str, ...]
        Participant list.
    tasks : tuple[str, ...]
        Task list used by paired draws.
    history : tuple[HistoryEntry, ...]
        Finalized draws, most recent first.
    name_no_repeat : bool
        Whether names are drawn without repetition.
    name_pool : tuple[int, ...]
        Indices of names not yet drawn since the last reset.
    task_no_repeat : bool
        Whether tasks are drawn without repetition.
    task_pool : tuple[int, ...]
        Indices of tasks not yet drawn since the last reset.
    mode : DrawMode
        Current draw mode.
    visualization : Visualization
        Animation used by interactive draws.
    num_groups : int
        Group count for group draws.
    version : int
        Number of mutations applied since the state was created or loaded.
    """

    names: tuple[str, ...] = DEFAULT_NAMES
    tasks: tuple[str, ...] = ()
    history: tuple[HistoryEntry, ...] = ()
    name_no_repeat: bool = False
    name_pool: tuple[int, ...] = field(
        default_factory=lambda: tuple(range(len(DEFAULT_NAMES)))
    )
    task_no_repeat: bool = False
    task_pool: tuple[int, ...] = ()
    mode: DrawMode = DrawMode.SINGLE
    visualization: Visualization = Visualization.WHEEL
    num_groups: int = 2
    version: int = 0

    def evolve(self, **changes: Any) -> "AppState":
        """Return a copy with ``changes`` applied and the version bumped."""
        return replace(self, version=self.version + 1, **changes)

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable dict of the persisted fields."""
        return {
            "names": list(self.names),
            "tasks": list(self.tasks),
            "history": [entry.to_json() for entry in self.history],
            "name_no_repeat": self.name_no_repeat,
            "name_pool": list(self.name_pool),
            "task_no_repeat": self.task_no_repeat,
            "task_pool": list(self.task_pool),
            "mode": self.mode.value,
            "visualization": self.visualization.value,
            "num_groups": self.num_groups,
        }

    def to_json_str(self) -> str:
        """Serialize the state to a JSON string."""
        return json.dumps(self.to_json(), ensure_ascii=False)

    @classmethod
    def from_json(
        cls, data: Mapping[str, Any], *, base: Optional["AppState"] = None
    ) -> "AppState":
        """Build a state from a (possibly partial) :meth:`to_json` dict.

        Keys absent from ``data`` keep their value from ``base`` (or the
        defaults). Unknown keys are ignored.

        Raises
        ------
        ValueError
            If ``data`` is not a mapping or a known key holds an invalid value.
        """

        if not isinstance(data, Mapping):
            raise ValueError("state payload must be a JSON object")

        state = base or cls()
        changes: dict[str, Any] = {}
        if "names" in data:
            changes["names"] = _str_tuple(data["names"], "names")
        if "tasks" in data:
            changes["tasks"] = _str_tuple(data["tasks"], "tasks")
        if "history" in data:
            entries = data["history"]
            if not isinstance(entries, list):
                raise ValueError("'history' must be a list")
            try:
                changes["history"] = tuple(
                    HistoryEntry.from_json(e) for e in entries[:HISTORY_LIMIT]
                )
            except (AttributeError, KeyError, TypeError) as exc:
                raise ValueError(f"invalid history entry: {exc}") from exc
        if "name_no_repeat" in data:
            changes["name_no_repeat"] = _bool(data["name_no_repeat"], "name_no_repeat")
        if "name_pool" in data:
            changes["name_pool"] = _int_tuple(data["name_pool"], "name_pool")
        if "task_no_repeat" in data:
            changes["task_no_repeat"] = _bool(data["task_no_repeat"], "task_no_repeat")
        if "task_pool" in data:
            changes["task_pool"] = _int_tuple(data["task_pool"], "task_pool")
        if "mode" in data:
            changes["mode"] = DrawMode(data["mode"])
        if "visualization" in data:
            changes["visualization"] = Visualization(data["visualization"])
        if "num_groups" in data:
            num_groups = data["num_groups"]
            if not isinstance(num_groups, int) or isinstance(num_groups, bool):
                raise ValueError("'num_groups' must be an integer")
            changes["num_groups"] = max(1, num_groups)

        return replace(state, **changes)

    @classmethod
    def from_json_str(
        cls, payload: str, *, base: Optional["AppState"] = None
    ) -> "AppState":
        """Parse a JSON string produced by :meth:`to_json_str`."""
        return cls.from_json(json.loads(payload), base=base)


__all__ = ["AppState", "DEFAULT_NAMES"]
