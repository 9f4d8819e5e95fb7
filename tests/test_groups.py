import random
import unittest
from collections import Counter

from drawlots.draw.groups import format_groups, partition
from drawlots.errors import InsufficientItemsError, InvalidGroupCountError


class PartitionTests(unittest.TestCase):
    def test_groups_are_balanced_and_cover_the_list(self):
        items = [f"s{i}" for i in range(11)] + ["s0"]
        for k in range(1, len(items) + 1):
            for seed in range(5):
                groups = partition(items, k, rng=random.Random(seed))
                self.assertEqual(len(groups), k)
                sizes = [len(g) for g in groups]
                self.assertLessEqual(max(sizes) - min(sizes), 1)
                self.assertEqual(
                    Counter(item for g in groups for item in g), Counter(items)
                )

    def test_five_names_into_two_groups(self):
        names = ["A", "B", "C", "D", "E"]
        for seed in range(30):
            groups = partition(names, 2, rng=random.Random(seed))
            self.assertEqual(sorted(len(g) for g in groups), [2, 3])
            self.assertEqual(sorted(n for g in groups for n in g), names)

    def test_input_is_not_modified(self):
        names = ["A", "B", "C"]
        partition(names, 2, rng=random.Random(4))
        self.assertEqual(names, ["A", "B", "C"])

    def test_more_groups_than_items(self):
        with self.assertRaises(InsufficientItemsError) as ctx:
            partition(["A", "B"], 3)
        self.assertEqual(str(ctx.exception), "Need at least 3 names.")
        self.assertEqual((ctx.exception.required, ctx.exception.available), (3, 2))

    def test_group_count_below_one(self):
        for k in (0, -2):
            with self.assertRaises(InvalidGroupCountError):
                partition(["A", "B"], k)

    def test_format_groups(self):
        self.assertEqual(
            format_groups([["a", "b"], ["c"]]), "Group 1: a, b | Group 2: c"
        )


if __name__ == "__main__":
    unittest.main()
