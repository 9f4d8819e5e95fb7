import unittest

from drawlots.draw.history import (
    HISTORY_LIMIT,
    HistoryEntry,
    append_entry,
    format_history,
)
from drawlots.modes import DrawMode


def _entry(i: int, **kwargs) -> HistoryEntry:
    return HistoryEntry(
        id=i, result=f"r{i}", mode=DrawMode.SINGLE, timestamp="10:00:00", **kwargs
    )


class HistoryLogTests(unittest.TestCase):
    def test_keeps_the_fifty_most_recent_entries(self):
        log = ()
        for i in range(1, 52):
            log = append_entry(log, _entry(i))
        self.assertEqual(len(log), HISTORY_LIMIT)
        self.assertEqual(log[0].id, 51)
        self.assertEqual(log[-1].id, 2)

    def test_append_does_not_touch_the_old_log(self):
        old = (_entry(1),)
        new = append_entry(old, _entry(2))
        self.assertEqual([e.id for e in old], [1])
        self.assertEqual([e.id for e in new], [2, 1])

    def test_format_history(self):
        log = (
            HistoryEntry(
                id=2,
                result="Group 1: a | Group 2: b",
                mode=DrawMode.GROUPS,
                timestamp="09:01:02",
                groups=(("a",), ("b",)),
            ),
            _entry(1),
        )
        self.assertEqual(
            format_history(log),
            "1. [09:01:02] (groups): Group 1: a | Group 2: b\n"
            "2. [10:00:00] (single): r1",
        )
        self.assertEqual(format_history(()), "")

    def test_json_keeps_groups(self):
        entry = _entry(5, groups=(("a", "b"), ("c",)))
        data = entry.to_json()
        self.assertEqual(data["groups"], [["a", "b"], ["c"]])
        self.assertEqual(HistoryEntry.from_json(data), entry)
        self.assertNotIn("groups", _entry(6).to_json())


if __name__ == "__main__":
    unittest.main()
