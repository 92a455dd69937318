from __future__ import annotations

from dataclasses import dataclass
import math

from .mapping import Point, svg_number

ANGLE_EPSILON = 1e-9


def normalize_angle(degrees: float) -> float:
    """Wrap ``degrees`` into ``[0, 360)``."""

    value = math.fmod(degrees, 360.0)
    if value < 0:
        value += 360.0
    # fmod of a tiny negative lands on 360.0 after the shift.
    return 0.0 if value >= 360.0 - ANGLE_EPSILON else value


def point_on_circle(center: Point, radius: float, degrees: float, *, invert_y: bool = True) -> Point:
    cx, cy = center
    rad = math.radians(degrees)
    dy = radius * math.sin(rad)
    return (cx + radius * math.cos(rad), cy - dy if invert_y else cy + dy)


def angle_of(center: Point, point: Point, *, invert_y: bool = True) -> float:
    cx, cy = center
    px, py = point
    dy = (cy - py) if invert_y else (py - cy)
    return normalize_angle(math.degrees(math.atan2(dy, px - cx)))


@dataclass(frozen=True)
class ArcPath:
    center: Point
    radius: float
    start: Point
    end: Point
    start_deg: float
    end_deg: float
    span_deg: float
    large_arc: bool
    sweep: int
    degenerate: bool
    invert_y: bool = True

    @property
    def mid_deg(self) -> float:
        return normalize_angle(self.start_deg + self.span_deg / 2.0)

    def to_svg(self) -> str:
        sx, sy = self.start
        if self.degenerate:
            return f"M {svg_number(sx)} {svg_number(sy)}"
        ex, ey = self.end
        r = svg_number(self.radius)
        return (
            f"M {svg_number(sx)} {svg_number(sy)} "
            f"A {r} {r} 0 {int(self.large_arc)} {self.sweep} {svg_number(ex)} {svg_number(ey)}"
        )


def arc_path(
    center: Point,
    radius: float,
    start_deg: float,
    end_deg: float,
    *,
    reflex: bool = False,
    invert_y: bool = True,
) -> ArcPath:
    """Arc between two boundary angles, traced counter-clockwise in math orientation.

    By default the shorter of the two possible arcs is drawn: when the
    counter-clockwise difference from ``start_deg`` to ``end_deg`` exceeds 180
    degrees the endpoints are swapped. ``reflex=True`` keeps the endpoints as
    given, so callers can draw the reflex arc explicitly.
    """

    if radius < 0 or not math.isfinite(radius):
        raise ValueError("arc radius must be a finite number >= 0")
    start = normalize_angle(start_deg)
    end = normalize_angle(end_deg)
    span = normalize_angle(end - start)

    if span < ANGLE_EPSILON:
        point = point_on_circle(center, radius, start, invert_y=invert_y)
        return ArcPath(
            center=center,
            radius=radius,
            start=point,
            end=point,
            start_deg=start,
            end_deg=start,
            span_deg=0.0,
            large_arc=False,
            sweep=0 if invert_y else 1,
            degenerate=True,
            invert_y=invert_y,
        )

    if not reflex and span > 180.0:
        start, end = end, start
        span = 360.0 - span

    return ArcPath(
        center=center,
        radius=radius,
        start=point_on_circle(center, radius, start, invert_y=invert_y),
        end=point_on_circle(center, radius, end, invert_y=invert_y),
        start_deg=start,
        end_deg=end,
        span_deg=span,
        large_arc=span > 180.0,
        # Counter-clockwise in math space is the SVG negative sweep once y points down.
        sweep=0 if invert_y else 1,
        degenerate=False,
        invert_y=invert_y,
    )


def sector_path(
    center: Point,
    radius: float,
    start_deg: float,
    end_deg: float,
    *,
    reflex: bool = False,
    invert_y: bool = True,
) -> str:
    arc = arc_path(center, radius, start_deg, end_deg, reflex=reflex, invert_y=invert_y)
    cx, cy = center
    if arc.degenerate:
        return f"M {svg_number(cx)} {svg_number(cy)}"
    return f"M {svg_number(cx)} {svg_number(cy)} L {arc.to_svg()[2:]} Z"


def quadrant_path(center: Point, radius: float, quadrant: int, *, invert_y: bool = True) -> str:
    if quadrant not in (1, 2, 3, 4):
        raise ValueError("quadrant must be 1, 2, 3 or 4")
    start = (quadrant - 1) * 90.0
    return sector_path(center, radius, start, start + 90.0, invert_y=invert_y)


def arc_label_point(arc: ArcPath, distance: float) -> Point:
    """Point ``distance`` away from the arc center along the bisector of the drawn arc."""

    return point_on_circle(arc.center, distance, arc.mid_deg, invert_y=arc.invert_y)
