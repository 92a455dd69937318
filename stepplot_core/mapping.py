from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Sequence

import numpy as np

from .ticks import grid_interval

LOGGER = logging.getLogger(__name__)

RANGE_EPSILON = 1e-10

Point = tuple[float, float]


@dataclass(frozen=True)
class Range:
    min: float
    max: float

    @classmethod
    def of(cls, value: Range | Sequence[float]) -> Range:
        if isinstance(value, Range):
            return value
        lo, hi = value
        return cls(float(lo), float(hi))

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2.0

    @property
    def degenerate(self) -> bool:
        # Inverted ranges and NaN bounds fall through this comparison as well.
        return not (self.max - self.min >= RANGE_EPSILON)

    def safe(self) -> Range:
        """Return a usable range, substituting a unit range around the midpoint when degenerate."""

        if not self.degenerate:
            return self
        mid = self.midpoint if np.isfinite(self.midpoint) else 0.0
        return Range(mid - 0.5, mid + 0.5)

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def clamp(self, value: float) -> float:
        return float(min(max(value, self.min), self.max))

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


@dataclass(frozen=True)
class Padding:
    left: float = 0.0
    right: float = 0.0
    top: float = 0.0
    bottom: float = 0.0

    def __post_init__(self) -> None:
        if self.left < 0 or self.right < 0 or self.top < 0 or self.bottom < 0:
            raise ValueError("padding must be >= 0")

    @classmethod
    def uniform(cls, value: float) -> Padding:
        return cls(left=value, right=value, top=value, bottom=value)


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    padding: Padding = field(default_factory=Padding)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("viewport width/height must be > 0")

    @property
    def plot_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def plot_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom

    @property
    def collapsed(self) -> bool:
        return self.plot_width <= 0 or self.plot_height <= 0

    @property
    def center(self) -> Point:
        return (
            self.padding.left + self.plot_width / 2.0,
            self.padding.top + self.plot_height / 2.0,
        )


def to_pixel(
    value: float,
    data_range: Range | Sequence[float],
    pixel_span: float,
    padding: tuple[float, float] = (0.0, 0.0),
    invert: bool = False,
) -> float:
    rng = Range.of(data_range).safe()
    lead, trail = padding
    plot = pixel_span - lead - trail
    frac = (value - rng.min) / rng.span
    if invert:
        return float(lead + plot - frac * plot)
    return float(lead + frac * plot)


def to_data(
    pixel: float,
    data_range: Range | Sequence[float],
    pixel_span: float,
    padding: tuple[float, float] = (0.0, 0.0),
    invert: bool = False,
) -> float:
    rng = Range.of(data_range).safe()
    lead, trail = padding
    plot = pixel_span - lead - trail
    if plot == 0:
        return rng.midpoint
    frac = (lead + plot - pixel) / plot if invert else (pixel - lead) / plot
    return float(rng.min + frac * rng.span)


def snap_interval(span: float) -> float:
    return grid_interval(span)


class CoordinateMapper:
    """Maps data-space points into a padded pixel viewport and back."""

    def __init__(
        self,
        x_range: Range | Sequence[float],
        y_range: Range | Sequence[float],
        viewport: Viewport,
        invert_y: bool = True,
    ) -> None:
        self.x_range = Range.of(x_range)
        self.y_range = Range.of(y_range)
        self.viewport = viewport
        self.invert_y = invert_y
        if viewport.collapsed:
            LOGGER.warning(
                "viewport %sx%s collapses under padding %s; mapped output is undefined",
                viewport.width,
                viewport.height,
                viewport.padding,
            )

    @property
    def _x_padding(self) -> tuple[float, float]:
        return (self.viewport.padding.left, self.viewport.padding.right)

    @property
    def _y_padding(self) -> tuple[float, float]:
        return (self.viewport.padding.top, self.viewport.padding.bottom)

    @property
    def plot_rect(self) -> tuple[float, float, float, float]:
        vp = self.viewport
        return (vp.padding.left, vp.padding.top, vp.plot_width, vp.plot_height)

    def x_to_pixel(self, x: float) -> float:
        return to_pixel(x, self.x_range, self.viewport.width, self._x_padding)

    def y_to_pixel(self, y: float) -> float:
        return to_pixel(y, self.y_range, self.viewport.height, self._y_padding, invert=self.invert_y)

    def x_to_data(self, px: float) -> float:
        return to_data(px, self.x_range, self.viewport.width, self._x_padding)

    def y_to_data(self, py: float) -> float:
        return to_data(py, self.y_range, self.viewport.height, self._y_padding, invert=self.invert_y)

    def to_pixel(self, point: Point) -> Point:
        x, y = point
        return (self.x_to_pixel(x), self.y_to_pixel(y))

    def to_data(self, pixel: Point) -> Point:
        px, py = pixel
        return (self.x_to_data(px), self.y_to_data(py))

    def map_points(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)
        if xs.shape != ys.shape:
            raise ValueError("xs and ys must have the same shape")
        left, top, plot_w, plot_h = self.plot_rect
        xr = self.x_range.safe()
        yr = self.y_range.safe()
        px = left + (xs - xr.min) * (plot_w / xr.span)
        fy = (ys - yr.min) * (plot_h / yr.span)
        py = top + plot_h - fy if self.invert_y else top + fy
        return px, py

    def contains_pixel(self, pixel: Point, margin: float = 0.0) -> bool:
        left, top, plot_w, plot_h = self.plot_rect
        px, py = pixel
        return (left - margin) <= px <= (left + plot_w + margin) and (top - margin) <= py <= (top + plot_h + margin)

    def clamp_data(self, point: Point) -> Point:
        x, y = point
        return (self.x_range.safe().clamp(x), self.y_range.safe().clamp(y))

    def snap(self, point: Point, interval: float | None = None) -> Point:
        """Snap a data point onto the grid, then clamp it into the visible ranges."""

        step = interval if interval is not None else snap_interval(self.x_range.span)
        if step <= 0:
            raise ValueError("snap interval must be > 0")
        x, y = point
        snapped = (round(x / step) * step, round(y / step) * step)
        # round() leaves -0.0 for small negatives.
        snapped = (snapped[0] + 0.0, snapped[1] + 0.0)
        return self.clamp_data(snapped)

    def pixel_to_snapped_data(self, pixel: Point, interval: float | None = None) -> Point:
        return self.snap(self.to_data(pixel), interval)

    def with_equal_aspect(self) -> CoordinateMapper:
        """Widen one range so one data unit spans the same pixel count on both axes."""

        vp = self.viewport
        if vp.collapsed:
            return self
        xr = self.x_range.safe()
        yr = self.y_range.safe()
        units_per_px = max(xr.span / vp.plot_width, yr.span / vp.plot_height)
        half_x = units_per_px * vp.plot_width / 2.0
        half_y = units_per_px * vp.plot_height / 2.0
        return CoordinateMapper(
            Range(xr.midpoint - half_x, xr.midpoint + half_x),
            Range(yr.midpoint - half_y, yr.midpoint + half_y),
            vp,
            invert_y=self.invert_y,
        )

    def __repr__(self) -> str:
        return (
            f"CoordinateMapper(x_range={self.x_range}, y_range={self.y_range}, "
            f"viewport={self.viewport}, invert_y={self.invert_y})"
        )


def svg_number(value: float) -> str:
    """Format a pixel coordinate for path data with two decimals and no ``-0``."""

    text = f"{value:.2f}"
    return "0.00" if text == "-0.00" else text
