from __future__ import annotations

import unittest

from stepplot_core.arcs import (
    angle_of,
    arc_label_point,
    arc_path,
    normalize_angle,
    point_on_circle,
    quadrant_path,
    sector_path,
)


class AngleTests(unittest.TestCase):
    def test_normalize_angle_wraps_into_turn(self) -> None:
        self.assertEqual(normalize_angle(-30.0), 330.0)
        self.assertEqual(normalize_angle(720.0), 0.0)
        self.assertEqual(normalize_angle(-1e-12), 0.0)

    def test_point_on_circle_uses_screen_orientation(self) -> None:
        x, y = point_on_circle((0.0, 0.0), 10.0, 90.0)
        self.assertAlmostEqual(x, 0.0)
        self.assertAlmostEqual(y, -10.0)
        x, y = point_on_circle((0.0, 0.0), 10.0, 90.0, invert_y=False)
        self.assertAlmostEqual(y, 10.0)

    def test_angle_of_inverts_point_on_circle(self) -> None:
        for degrees in (0.0, 45.0, 135.0, 270.0, 300.0):
            point = point_on_circle((5.0, 5.0), 3.0, degrees)
            self.assertAlmostEqual(angle_of((5.0, 5.0), point), degrees)


class ArcPathTests(unittest.TestCase):
    def test_arc_across_zero_takes_short_way(self) -> None:
        arc = arc_path((0.0, 0.0), 10.0, 350.0, 10.0)
        self.assertAlmostEqual(arc.span_deg, 20.0)
        self.assertFalse(arc.large_arc)
        self.assertEqual(arc.start_deg, 350.0)

    def test_long_way_is_swapped_to_short_arc(self) -> None:
        arc = arc_path((0.0, 0.0), 10.0, 10.0, 350.0)
        self.assertAlmostEqual(arc.span_deg, 20.0)
        self.assertEqual((arc.start_deg, arc.end_deg), (350.0, 10.0))

    def test_reflex_keeps_endpoints(self) -> None:
        arc = arc_path((0.0, 0.0), 10.0, 10.0, 350.0, reflex=True)
        self.assertAlmostEqual(arc.span_deg, 340.0)
        self.assertTrue(arc.large_arc)

    def test_equal_angles_are_degenerate(self) -> None:
        arc = arc_path((0.0, 0.0), 10.0, 30.0, 390.0)
        self.assertTrue(arc.degenerate)
        self.assertEqual(arc.span_deg, 0.0)
        self.assertTrue(arc.to_svg().startswith("M "))
        self.assertNotIn("A", arc.to_svg())

    def test_svg_sweep_flag_depends_on_orientation(self) -> None:
        self.assertEqual(arc_path((0.0, 0.0), 1.0, 0.0, 90.0).sweep, 0)
        self.assertEqual(arc_path((0.0, 0.0), 1.0, 0.0, 90.0, invert_y=False).sweep, 1)

    def test_rejects_bad_radius(self) -> None:
        with self.assertRaises(ValueError):
            arc_path((0.0, 0.0), -1.0, 0.0, 90.0)
        with self.assertRaises(ValueError):
            arc_path((0.0, 0.0), float("nan"), 0.0, 90.0)

    def test_label_point_lies_on_bisector(self) -> None:
        arc = arc_path((0.0, 0.0), 10.0, 0.0, 90.0)
        x, y = arc_label_point(arc, 20.0)
        self.assertAlmostEqual(x, 14.142135623730951)
        self.assertAlmostEqual(y, -14.142135623730951)


class SectorPathTests(unittest.TestCase):
    def test_sector_closes_through_center(self) -> None:
        self.assertEqual(
            sector_path((0.0, 0.0), 10.0, 0.0, 90.0),
            "M 0.00 0.00 L 10.00 0.00 A 10.00 10.00 0 0 0 0.00 -10.00 Z",
        )

    def test_degenerate_sector_is_a_move(self) -> None:
        self.assertEqual(sector_path((1.0, 2.0), 10.0, 45.0, 45.0), "M 1.00 2.00")

    def test_quadrant_paths(self) -> None:
        self.assertEqual(quadrant_path((0.0, 0.0), 10.0, 1), sector_path((0.0, 0.0), 10.0, 0.0, 90.0))
        self.assertIn("-10.00 0.00", quadrant_path((0.0, 0.0), 10.0, 2))
        with self.assertRaises(ValueError):
            quadrant_path((0.0, 0.0), 10.0, 5)


if __name__ == "__main__":
    unittest.main()
