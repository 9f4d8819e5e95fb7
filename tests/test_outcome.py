import random
import unittest

from drawlots.draw.outcome import TASK_POOL_RESET_MESSAGE, OutcomePredeterminer
from drawlots.errors import (
    EmptyListError,
    InsufficientItemsError,
    NoTasksAvailableError,
    PoolExhaustedError,
)
from drawlots.modes import DrawMode
from drawlots.state import AppState


class OutcomePredeterminerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.messages = []
        self.predeterminer = OutcomePredeterminer(
            rng=random.Random(11), notify=self.messages.append
        )

    def test_single_draw_names_the_winner(self):
        state = AppState(names=("A", "B", "C"), name_pool=(0, 1, 2))
        result = self.predeterminer.predetermine(DrawMode.SINGLE, state)
        outcome = result.outcome
        self.assertEqual(state.names[outcome.winner_index], outcome.winner_name)
        self.assertEqual(outcome.result_text, outcome.winner_name)
        self.assertIsNone(outcome.groups)
        # Repeat mode leaves the pool as it was.
        self.assertEqual(result.name_pool, (0, 1, 2))

    def test_no_repeat_draw_consumes_the_pool(self):
        state = AppState(names=("A", "B", "C"), name_pool=(0, 1, 2), name_no_repeat=True)
        result = self.predeterminer.predetermine(DrawMode.INTERACTIVE, state)
        self.assertNotIn(result.outcome.winner_index, result.name_pool)
        self.assertEqual(len(result.name_pool), 2)

    def test_empty_names_fail_in_every_mode(self):
        state = AppState(names=(), name_pool=(), tasks=("T",), task_pool=(0,))
        for mode in DrawMode:
            with self.assertRaises(EmptyListError):
                self.predeterminer.predetermine(mode, state)

    def test_exhausted_name_pool_is_reported(self):
        state = AppState(names=("A", "B"), name_pool=(), name_no_repeat=True)
        with self.assertRaises(PoolExhaustedError) as ctx:
            self.predeterminer.predetermine(DrawMode.SINGLE, state)
        self.assertEqual(ctx.exception.reset_pool, (0, 1))

    def test_paired_without_tasks_draws_nothing(self):
        state = AppState(names=("A",), name_pool=(0,), name_no_repeat=True, tasks=())
        with self.assertRaises(NoTasksAvailableError) as ctx:
            self.predeterminer.predetermine(DrawMode.PAIRED, state)
        self.assertEqual(str(ctx.exception), "Add tasks for paired mode.")

    def test_paired_draw_assigns_a_task(self):
        state = AppState(names=("A",), name_pool=(0,), tasks=("Sweep",), task_pool=(0,))
        result = self.predeterminer.predetermine(DrawMode.PAIRED, state)
        self.assertEqual(result.outcome.paired_task, "Sweep")
        self.assertEqual(result.outcome.result_text, "A is assigned to: Sweep")
        self.assertFalse(result.task_pool_reset)

    def test_exhausted_task_pool_is_refilled_and_drawn_again(self):
        state = AppState(
            names=("A", "B"),
            name_pool=(0, 1),
            tasks=("T1", "T2"),
            task_pool=(),
            task_no_repeat=True,
        )
        result = self.predeterminer.predetermine(DrawMode.PAIRED, state)
        self.assertTrue(result.task_pool_reset)
        self.assertEqual(self.messages, [TASK_POOL_RESET_MESSAGE])
        self.assertIn(result.outcome.paired_task, ("T1", "T2"))
        self.assertEqual(len(result.task_pool), 1)

    def test_group_draw(self):
        state = AppState(names=("A", "B", "C", "D", "E"), num_groups=2)
        result = self.predeterminer.predetermine(DrawMode.GROUPS, state)
        groups = result.outcome.groups
        self.assertEqual(sorted(len(g) for g in groups), [2, 3])
        self.assertTrue(result.outcome.result_text.startswith("Group 1: "))
        self.assertIsNone(result.outcome.winner_name)
        self.assertEqual(result.name_pool, state.name_pool)

    def test_group_draw_with_too_few_names(self):
        state = AppState(names=("A", "B"), name_pool=(0, 1), num_groups=3)
        with self.assertRaises(InsufficientItemsError):
            self.predeterminer.predetermine(DrawMode.GROUPS, state)


if __name__ == "__main__":
    unittest.main()
