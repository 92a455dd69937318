from __future__ import annotations

from typing import Sequence

import numpy as np

MAX_DECIMALS = 6


def grid_interval(span: float) -> float:
    """Grid/tick spacing used by number lines, coordinate planes and snapping."""

    span = abs(float(span))
    if span <= 10:
        return 1.0
    if span <= 20:
        return 2.0
    if span <= 50:
        return 5.0
    return 10.0


def grid_values(data_range: tuple[float, float], interval: float | None = None) -> list[float]:
    vmin, vmax = data_range
    lo, hi = float(min(vmin, vmax)), float(max(vmin, vmax))
    if hi - lo < 1e-10:
        return [lo]
    step = float(interval) if interval is not None else grid_interval(hi - lo)
    if not np.isfinite(step) or step <= 0:
        raise ValueError("interval must be a positive finite number")
    first = np.ceil(lo / step) * step
    values = np.arange(first, hi + step * 1e-9, step, dtype=np.float64)
    values = np.rint(values / step) * step
    values[np.isclose(values, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return [float(v) for v in values]


def format_tick(value: float, *, step: float | None = None) -> str:
    """Fixed-point label with as many decimals as ``step`` needs, trailing zeros trimmed."""

    if not np.isfinite(value):
        return str(value)
    text = f"{value:.{_decimals_for(step)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks(values: Sequence[float]) -> list[str]:
    if len(values) == 0:
        return []
    if len(values) == 1:
        return [format_tick(float(values[0]))]
    step = abs(float(values[1]) - float(values[0]))
    return [format_tick(float(v), step=step) for v in values]


def _decimals_for(step: float | None) -> int:
    if step is None or not np.isfinite(step) or step <= 0:
        return MAX_DECIMALS
    for decimals in range(MAX_DECIMALS):
        if abs(round(step, decimals) - step) <= step * 1e-9:
            return decimals
    return MAX_DECIMALS
