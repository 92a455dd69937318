from __future__ import annotations

import unittest

from stepplot_core.steps import StepController


class StepControllerTests(unittest.TestCase):
    def test_navigation_saturates_at_both_ends(self) -> None:
        ctrl = StepController(["a", "b", "c"])
        self.assertEqual(ctrl.prev(), 0)
        self.assertEqual(ctrl.next(), 1)
        self.assertEqual(ctrl.next(), 2)
        self.assertEqual(ctrl.next(), 2)
        self.assertTrue(ctrl.is_last)
        self.assertFalse(ctrl.can_go_next)
        self.assertEqual(ctrl.jump_to(-5), 0)
        self.assertEqual(ctrl.jump_to(99), 2)
        self.assertEqual(ctrl.reset(), 0)
        self.assertFalse(ctrl.can_go_prev)

    def test_out_of_range_jump_is_logged(self) -> None:
        ctrl = StepController(["a", "b", "c"])
        with self.assertLogs("stepplot_core.steps", level="DEBUG") as logs:
            self.assertEqual(ctrl.jump_to(10), 2)
        self.assertIn("clamping", logs.output[0])

    def test_initial_step_is_clamped(self) -> None:
        self.assertEqual(StepController(["a", "b"], initial_step=7).current_index, 1)
        self.assertEqual(StepController(["a", "b"], initial_step=-3).current_index, 0)

    def test_visibility_is_cumulative(self) -> None:
        ctrl = StepController(["grid", "axes", "curves"], initial_step=1)
        self.assertTrue(ctrl.is_visible("grid"))
        self.assertTrue(ctrl.is_visible("axes"))
        self.assertFalse(ctrl.is_visible("curves"))
        self.assertFalse(ctrl.is_visible("unknown"))
        self.assertTrue(ctrl.is_current("axes"))
        self.assertFalse(ctrl.is_current("grid"))
        self.assertEqual(ctrl.current_step.id, "axes")
        self.assertEqual(ctrl.index_of("curves"), 2)
        self.assertIsNone(ctrl.index_of("unknown"))

    def test_listeners_fire_only_on_change(self) -> None:
        seen: list[int] = []
        ctrl = StepController(["a", "b"], on_step_change=seen.append)
        ctrl.prev()
        ctrl.next()
        ctrl.next()
        ctrl.jump_to(1)
        ctrl.reset()
        self.assertEqual(seen, [1, 0])

    def test_unsubscribe_stops_notifications(self) -> None:
        seen: list[int] = []
        ctrl = StepController(["a", "b", "c"])
        unsubscribe = ctrl.subscribe(seen.append)
        ctrl.next()
        unsubscribe()
        unsubscribe()
        ctrl.next()
        self.assertEqual(seen, [1])

    def test_progress(self) -> None:
        self.assertEqual(StepController(["only"]).progress, 100.0)
        ctrl = StepController(["a", "b", "c", "d", "e"])
        self.assertEqual(ctrl.progress, 0.0)
        ctrl.jump_to(2)
        self.assertEqual(ctrl.progress, 50.0)
        ctrl.jump_to(4)
        self.assertEqual(ctrl.progress, 100.0)

    def test_keyboard_navigation(self) -> None:
        ctrl = StepController(["a", "b", "c"])
        self.assertTrue(ctrl.handle_key("ArrowRight"))
        self.assertTrue(ctrl.handle_key(" "))
        self.assertEqual(ctrl.current_index, 2)
        self.assertTrue(ctrl.handle_key("ArrowLeft"))
        self.assertEqual(ctrl.current_index, 1)
        self.assertTrue(ctrl.handle_key("Home"))
        self.assertEqual(ctrl.current_index, 0)
        self.assertTrue(ctrl.handle_key("End"))
        self.assertEqual(ctrl.current_index, 2)
        self.assertFalse(ctrl.handle_key("Enter"))

    def test_update_steps_clamps_current_index(self) -> None:
        seen: list[int] = []
        ctrl = StepController(["a", "b", "c", "d"], initial_step=3, on_step_change=seen.append)
        ctrl.update_steps(["a", "b"])
        self.assertEqual(ctrl.current_index, 1)
        self.assertEqual(ctrl.total_steps, 2)
        self.assertEqual(seen, [1])
        ctrl.update_steps(["x", "y", "z"])
        self.assertEqual(ctrl.current_index, 1)
        self.assertEqual(ctrl.current_step.id, "y")

    def test_rejects_empty_and_duplicate_steps(self) -> None:
        with self.assertRaises(ValueError):
            StepController([])
        with self.assertRaises(ValueError):
            StepController(["a", "a"])
        with self.assertRaises(ValueError):
            StepController(["a", " "])


if __name__ == "__main__":
    unittest.main()
