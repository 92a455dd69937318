from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import numbers
from typing import Iterable, Sequence

import numpy as np

from .expressions import ExpressionEvaluator, SympyEvaluator, coerce_real
from .mapping import CoordinateMapper, Range, svg_number

LOGGER = logging.getLogger(__name__)

SamplePoint = tuple[float, float | None]
DataSegment = tuple[tuple[float, float], ...]
PathSegment = tuple[tuple[float, float], ...]

_DEFAULT_EVALUATOR = SympyEvaluator()


@dataclass(frozen=True)
class SamplerConfig:
    resolution: int = 200
    out_of_range_slack: float = 0.5
    pixel_clamp_margin: float = 20.0

    def __post_init__(self) -> None:
        if int(self.resolution) < 1:
            raise ValueError("resolution must be >= 1")
        if not math.isfinite(self.out_of_range_slack) or self.out_of_range_slack < 0:
            raise ValueError("out_of_range_slack must be a finite number >= 0")
        if not math.isfinite(self.pixel_clamp_margin) or self.pixel_clamp_margin < 0:
            raise ValueError("pixel_clamp_margin must be a finite number >= 0")


def _contiguous_true_runs(mask: np.ndarray) -> list[tuple[int, int]]:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return []
    # Run boundaries are where consecutive true indices stop being adjacent.
    cuts = np.flatnonzero(np.diff(idx) != 1)
    starts = np.concatenate(([idx[0]], idx[cuts + 1]))
    ends = np.concatenate((idx[cuts] + 1, [idx[-1] + 1]))
    return [(int(s), int(e)) for s, e in zip(starts, ends, strict=True)]


def _sample_xs(domain: Sequence[float], resolution: int) -> np.ndarray | None:
    a, b = (float(v) for v in domain)
    if not (math.isfinite(a) and math.isfinite(b)):
        raise ValueError("domain bounds must be finite")
    lo, hi = min(a, b), max(a, b)
    if hi - lo < 1e-10:
        LOGGER.debug("empty sampling domain %s", (a, b))
        return None
    return np.linspace(lo, hi, resolution + 1, dtype=np.float64)


def slack_band(y_range: Range | Sequence[float], slack: float) -> tuple[float, float]:
    rng = Range.of(y_range).safe()
    extra = slack * rng.span
    return (rng.min - extra, rng.max + extra)


def _evaluate_one(evaluator: ExpressionEvaluator, expression: str, x: float) -> float:
    try:
        value = evaluator.evaluate(expression, {"x": x})
    except Exception as exc:
        LOGGER.debug("`%s` undefined at x=%s: %s", expression, x, exc)
        return math.nan
    if isinstance(value, bool) or not isinstance(value, numbers.Number):
        return math.nan
    return coerce_real(value)


def _evaluate(expression: str, xs: np.ndarray, evaluator: ExpressionEvaluator) -> np.ndarray | None:
    vectorized = getattr(evaluator, "evaluate_array", None)
    if vectorized is not None:
        try:
            ys = np.asarray(vectorized(expression, xs), dtype=np.float64)
        except Exception as exc:
            LOGGER.warning("dropping expression `%s`: %s", expression, exc)
            return None
        if ys.shape != xs.shape:
            LOGGER.warning("dropping expression `%s`: evaluator returned shape %s", expression, ys.shape)
            return None
        return ys
    return np.array([_evaluate_one(evaluator, expression, x) for x in xs.tolist()], dtype=np.float64)


def sample_data(
    expression: str,
    domain: Sequence[float],
    resolution: int | None = None,
    *,
    y_range: Range | Sequence[float] | None = None,
    config: SamplerConfig | None = None,
    evaluator: ExpressionEvaluator | None = None,
) -> list[DataSegment]:
    """Sample ``expression`` over ``domain`` and split the result into continuous data-space runs.

    Non-finite, complex and failing samples break the curve. When ``y_range`` is
    given, values outside the range widened by ``out_of_range_slack`` spans on
    each side break it as well. Runs with fewer than two points are dropped.
    """

    cfg = config if config is not None else SamplerConfig()
    steps = int(resolution) if resolution is not None else cfg.resolution
    if steps < 1:
        raise ValueError("resolution must be >= 1")
    xs = _sample_xs(domain, steps)
    if xs is None:
        return []
    ys = _evaluate(expression, xs, evaluator if evaluator is not None else _DEFAULT_EVALUATOR)
    if ys is None:
        return []

    valid = np.isfinite(ys)
    if y_range is not None:
        lo, hi = slack_band(y_range, cfg.out_of_range_slack)
        with np.errstate(invalid="ignore"):
            valid &= (ys >= lo) & (ys <= hi)
    if not valid.any():
        LOGGER.debug("`%s` produced no drawable samples over %s", expression, tuple(domain))

    segments: list[DataSegment] = []
    for start, end in _contiguous_true_runs(valid):
        if end - start < 2:
            continue
        segments.append(tuple(zip(xs[start:end].tolist(), ys[start:end].tolist(), strict=True)))
    return segments


def segments_from_points(points: Iterable[SamplePoint]) -> list[DataSegment]:
    """Split explicit samples on missing or non-finite values and on x backtracking."""

    segments: list[DataSegment] = []
    current: list[tuple[float, float]] = []

    def flush() -> None:
        if len(current) >= 2:
            segments.append(tuple(current))
        current.clear()

    for x, y in points:
        if y is None or not (math.isfinite(x) and math.isfinite(y)):
            flush()
            continue
        if current and x <= current[-1][0]:
            flush()
        current.append((float(x), float(y)))
    flush()
    return segments


def to_path_segments(
    segments: Iterable[DataSegment],
    mapper: CoordinateMapper,
    *,
    clamp_margin: float = 20.0,
) -> list[PathSegment]:
    _, top, _, plot_h = mapper.plot_rect
    out: list[PathSegment] = []
    for segment in segments:
        xs = np.fromiter((p[0] for p in segment), dtype=np.float64, count=len(segment))
        ys = np.fromiter((p[1] for p in segment), dtype=np.float64, count=len(segment))
        px, py = mapper.map_points(xs, ys)
        np.clip(py, top - clamp_margin, top + plot_h + clamp_margin, out=py)
        out.append(tuple(zip(px.tolist(), py.tolist(), strict=True)))
    return out


def sample(
    expression: str,
    domain: Sequence[float],
    resolution: int | None = None,
    *,
    mapper: CoordinateMapper,
    config: SamplerConfig | None = None,
    evaluator: ExpressionEvaluator | None = None,
) -> list[PathSegment]:
    cfg = config if config is not None else SamplerConfig()
    segments = sample_data(
        expression,
        domain,
        resolution,
        y_range=mapper.y_range,
        config=cfg,
        evaluator=evaluator,
    )
    return to_path_segments(segments, mapper, clamp_margin=cfg.pixel_clamp_margin)


def path_data(segments: Iterable[PathSegment]) -> str:
    parts: list[str] = []
    for segment in segments:
        for i, (x, y) in enumerate(segment):
            parts.append(f"{'M' if i == 0 else 'L'} {svg_number(x)} {svg_number(y)}")
    return " ".join(parts)
