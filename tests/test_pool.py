import random
import unittest
from types import SimpleNamespace

from drawlots.draw.pool import draw_index, full_pool, live_indices
from drawlots.errors import EmptyListError, PoolExhaustedError


class DrawIndexTests(unittest.TestCase):
    def test_no_repeat_visits_every_index_before_repeating(self):
        for size in (1, 2, 5, 9):
            items = [f"p{i}" for i in range(size)]
            for seed in range(20):
                rng = random.Random(seed)
                pool = full_pool(items)
                drawn = []
                for _ in range(size):
                    result = draw_index(items, pool, True, rng=rng)
                    drawn.append(result.index)
                    pool = result.pool
                self.assertEqual(sorted(drawn), list(range(size)))
                self.assertEqual(pool, ())

    def test_exhausted_pool_reports_full_reset_pool(self):
        items = ["a", "b", "c"]
        with self.assertRaises(PoolExhaustedError) as ctx:
            draw_index(items, (), True, rng=random.Random(1))
        self.assertEqual(ctx.exception.reset_pool, (0, 1, 2))
        self.assertEqual(str(ctx.exception), "All names drawn! Resetting list.")

    def test_exhausted_message_can_be_overridden(self):
        with self.assertRaises(PoolExhaustedError) as ctx:
            draw_index(["t"], (), True, exhausted_message="tasks done")
        self.assertEqual(str(ctx.exception), "tasks done")

    def test_empty_list_fails_for_any_no_repeat_value(self):
        for no_repeat in (True, False):
            with self.assertRaises(EmptyListError):
                draw_index([], (0, 1), no_repeat)

    def test_stale_indices_are_ignored(self):
        result = draw_index(["a", "b", "c"], (7, 2, 5), True, rng=random.Random(3))
        self.assertEqual(result.index, 2)
        self.assertEqual(result.pool, ())

    def test_pool_is_ignored_without_no_repeat(self):
        # An empty pool would be exhausted in no-repeat mode.
        result = draw_index(["a", "b"], (), False, rng=random.Random(0))
        self.assertIn(result.index, (0, 1))
        self.assertEqual(result.pool, ())

    def test_position_comes_from_random_unit_interval(self):
        low = SimpleNamespace(random=lambda: 0.0)
        high = SimpleNamespace(random=lambda: 0.999)
        self.assertEqual(draw_index(["a", "b", "c"], (2, 0), True, rng=low).index, 2)
        result = draw_index(["a", "b", "c"], (2, 0), True, rng=high)
        self.assertEqual(result.index, 0)
        self.assertEqual(result.pool, (2,))

    def test_live_indices_drops_out_of_range(self):
        self.assertEqual(live_indices(["a", "b"], (1, -1, 2, 0)), (1, 0))


if __name__ == "__main__":
    unittest.main()
