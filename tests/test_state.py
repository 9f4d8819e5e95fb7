import json
import unittest

from drawlots.draw.history import HistoryEntry
from drawlots.modes import DrawMode, Visualization
from drawlots.state import DEFAULT_NAMES, AppState


class AppStateTests(unittest.TestCase):
    def test_defaults(self):
        state = AppState()
        self.assertEqual(state.names, DEFAULT_NAMES)
        self.assertEqual(state.name_pool, (0, 1, 2, 3, 4, 5))
        self.assertEqual(state.tasks, ())
        self.assertIs(state.mode, DrawMode.SINGLE)
        self.assertIs(state.visualization, Visualization.WHEEL)
        self.assertEqual(state.num_groups, 2)
        self.assertFalse(state.name_no_repeat)
        self.assertEqual(state.version, 0)

    def test_evolve_bumps_version_and_keeps_original(self):
        state = AppState()
        changed = state.evolve(num_groups=4).evolve(mode=DrawMode.GROUPS)
        self.assertEqual(changed.version, 2)
        self.assertEqual(changed.num_groups, 4)
        self.assertEqual(state.num_groups, 2)

    def test_json_round_trip(self):
        entry = HistoryEntry(
            id=1, result="Group 1: A | Group 2: B", mode=DrawMode.GROUPS,
            timestamp="08:00:00", groups=(("A",), ("B",)),
        )
        state = AppState(
            names=("A", "B"),
            tasks=("T",),
            history=(entry,),
            name_no_repeat=True,
            name_pool=(1,),
            task_no_repeat=True,
            task_pool=(),
            mode=DrawMode.INTERACTIVE,
            visualization=Visualization.MARBLE,
            num_groups=3,
        )
        restored = AppState.from_json_str(state.to_json_str())
        self.assertEqual(restored, state)

    def test_partial_payload_overrides_only_present_keys(self):
        base = AppState(tasks=("T",), task_pool=(0,))
        restored = AppState.from_json({"names": ["X"], "mode": "paired"}, base=base)
        self.assertEqual(restored.names, ("X",))
        self.assertIs(restored.mode, DrawMode.PAIRED)
        self.assertEqual(restored.tasks, ("T",))

    def test_loaded_history_is_capped(self):
        history = [
            {"id": i, "result": "A", "mode": "single", "timestamp": "t"}
            for i in range(60)
        ]
        restored = AppState.from_json({"history": history})
        self.assertEqual(len(restored.history), 50)
        self.assertEqual(restored.history[0].id, 0)

    def test_group_count_is_clamped(self):
        self.assertEqual(AppState.from_json({"num_groups": -3}).num_groups, 1)

    def test_invalid_payloads_raise_value_error(self):
        bad = [
            [],
            {"names": "Alice"},
            {"name_pool": [0, "1"]},
            {"name_no_repeat": "yes"},
            {"mode": "lottery"},
            {"visualization": "slots"},
            {"history": [{"id": 1}]},
            {"history": [1]},
            {"history": ["x"]},
            {"num_groups": True},
        ]
        for payload in bad:
            with self.assertRaises(ValueError, msg=repr(payload)):
                AppState.from_json(payload)
        with self.assertRaises(ValueError):
            AppState.from_json_str("{not json")

    def test_json_uses_plain_values(self):
        data = json.loads(AppState().to_json_str())
        self.assertEqual(data["mode"], "single")
        self.assertEqual(data["visualization"], "wheel")
        self.assertEqual(data["name_pool"], [0, 1, 2, 3, 4, 5])


if __name__ == "__main__":
    unittest.main()
