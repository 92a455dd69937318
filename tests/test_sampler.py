from __future__ import annotations

import math
from typing import Mapping
import unittest

import numpy as np

from stepplot_core.mapping import CoordinateMapper, Padding, Viewport
from stepplot_core.sampler import (
    SamplerConfig,
    path_data,
    sample,
    sample_data,
    segments_from_points,
    slack_band,
)


def _mapper() -> CoordinateMapper:
    return CoordinateMapper((-1.0, 1.0), (-10.0, 10.0), Viewport(400.0, 300.0, Padding.uniform(20.0)))


class _NegativeFails:
    def evaluate(self, expression: str, variables: Mapping[str, float]) -> float:
        x = variables["x"]
        if x < 0:
            raise ArithmeticError("negative input")
        return x * 2.0


class _AlwaysFails:
    def evaluate(self, expression: str, variables: Mapping[str, float]) -> float:
        raise RuntimeError("boom")


class _BrokenArray:
    def evaluate(self, expression: str, variables: Mapping[str, float]) -> float:
        return 0.0

    def evaluate_array(self, expression: str, xs: np.ndarray) -> np.ndarray:
        raise RuntimeError("vectorized failure")


class SampleDataTests(unittest.TestCase):
    def test_pole_splits_curve_and_values_stay_in_slack_band(self) -> None:
        segments = sample_data("1/x", (-1.0, 1.0), y_range=(-10.0, 10.0))
        self.assertGreaterEqual(len(segments), 2)
        for segment in segments:
            self.assertGreaterEqual(len(segment), 2)
            xs = [p[0] for p in segment]
            self.assertEqual(xs, sorted(xs))
            self.assertEqual(len(set(xs)), len(xs))
            for _, y in segment:
                self.assertLessEqual(abs(y), 20.0)
        self.assertTrue(all(x < 0 for x, _ in segments[0]))
        self.assertTrue(all(x > 0 for x, _ in segments[-1]))

    def test_slack_band_widens_by_half_span_per_side(self) -> None:
        self.assertEqual(slack_band((-10.0, 10.0), 0.5), (-20.0, 20.0))

    def test_sqrt_only_yields_non_negative_domain(self) -> None:
        segments = sample_data("sqrt(x)", (-1.0, 1.0))
        self.assertEqual(len(segments), 1)
        self.assertTrue(all(x >= 0 for x, _ in segments[0]))

    def test_sampling_is_deterministic(self) -> None:
        first = sample_data("sin(x)/x", (-5.0, 5.0), 64)
        second = sample_data("sin(x)/x", (-5.0, 5.0), 64)
        self.assertEqual(first, second)

    def test_resolution_controls_sample_count(self) -> None:
        segments = sample_data("x", (0.0, 1.0), 4)
        self.assertEqual(len(segments), 1)
        self.assertEqual([x for x, _ in segments[0]], [0.0, 0.25, 0.5, 0.75, 1.0])
        with self.assertRaises(ValueError):
            sample_data("x", (0.0, 1.0), 0)

    def test_config_resolution_is_the_default(self) -> None:
        segments = sample_data("x", (0.0, 1.0), config=SamplerConfig(resolution=10))
        self.assertEqual(len(segments[0]), 11)

    def test_malformed_expression_yields_nothing(self) -> None:
        with self.assertLogs("stepplot_core.sampler", level="WARNING"):
            self.assertEqual(sample_data("sin(", (-1.0, 1.0)), [])

    def test_degenerate_domain_yields_nothing(self) -> None:
        self.assertEqual(sample_data("x", (2.0, 2.0)), [])

    def test_non_finite_domain_rejected(self) -> None:
        with self.assertRaises(ValueError):
            sample_data("x", (0.0, math.inf))

    def test_custom_evaluator_failures_break_the_curve(self) -> None:
        segments = sample_data("ignored", (-1.0, 1.0), 20, evaluator=_NegativeFails())
        self.assertEqual(len(segments), 1)
        self.assertTrue(all(x >= 0 for x, _ in segments[0]))
        self.assertEqual(sample_data("ignored", (-1.0, 1.0), 20, evaluator=_AlwaysFails()), [])

    def test_vectorized_evaluator_failure_drops_the_curve(self) -> None:
        with self.assertLogs("stepplot_core.sampler", level="WARNING"):
            self.assertEqual(sample_data("x", (0.0, 1.0), evaluator=_BrokenArray()), [])


class SampleToPixelsTests(unittest.TestCase):
    def test_pixel_segments_are_clamped_near_plot(self) -> None:
        mapper = _mapper()
        _, top, _, plot_h = mapper.plot_rect
        segments = sample("1/x", (-1.0, 1.0), mapper=mapper)
        self.assertGreaterEqual(len(segments), 2)
        for segment in segments:
            for px, py in segment:
                self.assertGreaterEqual(py, top - 20.0)
                self.assertLessEqual(py, top + plot_h + 20.0)
                self.assertTrue(20.0 <= px <= 380.0)

    def test_path_data_moves_at_each_segment_start(self) -> None:
        text = path_data([((0.0, 0.0), (1.5, 2.0)), ((3.0, 4.0), (5.0, -0.001))])
        self.assertEqual(text, "M 0.00 0.00 L 1.50 2.00 M 3.00 4.00 L 5.00 0.00")
        self.assertEqual(path_data([]), "")


class SegmentsFromPointsTests(unittest.TestCase):
    def test_splits_on_missing_and_non_finite_values(self) -> None:
        points = [(0.0, 1.0), (1.0, 2.0), (2.0, None), (3.0, 4.0), (4.0, 5.0), (5.0, math.nan), (6.0, 1.0)]
        self.assertEqual(
            segments_from_points(points),
            [((0.0, 1.0), (1.0, 2.0)), ((3.0, 4.0), (4.0, 5.0))],
        )

    def test_splits_when_x_backtracks(self) -> None:
        points = [(0.0, 0.0), (1.0, 1.0), (0.5, 2.0), (2.0, 3.0)]
        self.assertEqual(
            segments_from_points(points),
            [((0.0, 0.0), (1.0, 1.0)), ((0.5, 2.0), (2.0, 3.0))],
        )


if __name__ == "__main__":
    unittest.main()
