from __future__ import annotations

from dataclasses import dataclass
import logging
import math

from stepplot_core.arcs import angle_of, arc_label_point, arc_path, point_on_circle, quadrant_path, sector_path
from stepplot_core.collisions import LabelBox, LabelLayoutConfig, find_label_position, label_box_for_text, stagger_labels
from stepplot_core.expressions import ExpressionEvaluator
from stepplot_core.mapping import CoordinateMapper, Padding, Point, Viewport, svg_number
from stepplot_core.sampler import SamplerConfig, path_data, sample
from stepplot_core.steps import StepController
from stepplot_core.ticks import format_tick, format_ticks, grid_interval, grid_values
from stepplot_core.tree_layout import NodePosition, iter_edges, iter_nodes, layout_tree, level_height_for, tree_depth

from .diagrams import (
    CircleDiagram,
    CoordinatePlaneDiagram,
    Diagram,
    NumberLineDiagram,
    TreeDiagram,
    TriangleDiagram,
    UnitCircleDiagram,
    STANDARD_ANGLES,
    displayed_angles,
)
from .locale import message
from .step_plans import build_step_ids
from .style.theme import DEFAULT_THEME, DiagramTheme

LOGGER = logging.getLogger(__name__)

TREE_NODE_RADIUS = 24.0
TREE_TITLE_HEIGHT = 30.0
POINT_RADIUS = 5.0


@dataclass(frozen=True)
class SceneElement:
    id: str
    step_id: str
    kind: str
    path: str = ""
    points: tuple[Point, ...] = ()
    radius: float = 0.0
    text: str = ""
    color: str = ""
    stroke_width: float = 0.0
    dashed: bool = False
    filled: bool = True
    role: str = ""


@dataclass(frozen=True)
class Scene:
    """Pixel geometry of one diagram, grouped by the step that reveals it."""

    kind: str
    width: float
    height: float
    step_ids: tuple[str, ...]
    elements: tuple[SceneElement, ...]
    title: str = ""
    rtl: bool = False
    placeholder: str | None = None

    def elements_for(self, step_id: str) -> tuple[SceneElement, ...]:
        return tuple(e for e in self.elements if e.step_id == step_id)

    def visible_elements(self, controller: StepController) -> tuple[SceneElement, ...]:
        return tuple(e for e in self.elements if controller.is_visible(e.step_id))

    def spotlight_elements(self, controller: StepController) -> tuple[SceneElement, ...]:
        return tuple(e for e in self.elements if controller.is_current(e.step_id))


class _SceneBuilder:
    def __init__(self, theme: DiagramTheme) -> None:
        self.theme = theme
        self.elements: list[SceneElement] = []

    def add(self, step_id: str, kind: str, id: str, **fields: object) -> None:
        self.elements.append(SceneElement(id=id, step_id=step_id, kind=kind, **fields))

    def line(self, step_id: str, id: str, a: Point, b: Point, *, color: str, width: float | None = None, **fields: object) -> None:
        self.add(step_id, "line", id, points=(a, b), color=color, stroke_width=width or self.theme.line_weight, **fields)

    def path(self, step_id: str, id: str, d: str, *, color: str, width: float | None = None, **fields: object) -> None:
        self.add(step_id, "path", id, path=d, color=color, stroke_width=width or self.theme.line_weight, **fields)

    def circle(self, step_id: str, id: str, center: Point, radius: float, *, color: str, **fields: object) -> None:
        self.add(step_id, "circle", id, points=(center,), radius=radius, color=color, stroke_width=self.theme.line_weight, **fields)

    def label(self, step_id: str, id: str, at: Point, text: str, *, color: str | None = None, **fields: object) -> None:
        self.add(step_id, "label", id, points=(at,), text=text, color=color or self.theme.axis_color, **fields)


def _num(value: float) -> str:
    return format_tick(round(value, 2), step=0.01)


def _offset_from(point: Point, origin: Point, distance: float) -> Point:
    dx, dy = point[0] - origin[0], point[1] - origin[1]
    length = math.hypot(dx, dy)
    if length == 0:
        return (point[0], point[1] - distance)
    return (point[0] + dx / length * distance, point[1] + dy / length * distance)


def _midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


# -- circle ------------------------------------------------------------------


def _circle_scene(d: CircleDiagram, viewport: Viewport, b: _SceneBuilder, **_: object) -> str | None:
    colors = b.theme.colors
    cx, cy = d.center
    extent = d.radius * 1.25
    mapper = CoordinateMapper((cx - extent, cx + extent), (cy - extent, cy + extent), viewport).with_equal_aspect()
    center = mapper.to_pixel(d.center)
    r_px = mapper.x_to_pixel(cx + d.radius) - center[0]

    b.circle("outline", "circle", center, r_px, color=colors.primary, filled=False)
    b.add("center", "point", "center", points=(center,), radius=b.theme.line_weight, color=b.theme.axis_color)
    if d.center_label:
        b.label("center", "center-label", (center[0] - 10.0, center[1] + 15.0), d.center_label)
    if d.show_radius:
        edge = point_on_circle(center, r_px, 0.0)
        b.line("radius", "radius", center, edge, color=colors.primary)
        b.label("radius", "radius-label", (_midpoint(center, edge)[0], center[1] - 10.0), f"r = {_num(d.radius)}", color=colors.primary)
    if d.show_diameter:
        left, right = point_on_circle(center, r_px, 180.0), point_on_circle(center, r_px, 0.0)
        b.line("diameter", "diameter", left, right, color=colors.accent)
        b.label("diameter", "diameter-label", (center[0], center[1] + 18.0), f"d = {_num(2 * d.radius)}", color=colors.accent)
    if d.sector is not None:
        b.path(
            "sector",
            "sector",
            sector_path(center, r_px, d.sector.start, d.sector.end),
            color=d.sector.color or colors.highlight,
        )
    elif d.arc is not None:
        arc = arc_path(center, r_px, d.arc.start, d.arc.end)
        if not arc.degenerate:
            b.path("arc", "arc", arc.to_svg(), color=d.arc.color or colors.accent, filled=False)
            b.label("arc", "arc-label", arc_label_point(arc, r_px + 16.0), f"{_num(arc.span_deg)}°", color=colors.accent)
    if d.chord is not None:
        a = point_on_circle(center, r_px, d.chord.start)
        c = point_on_circle(center, r_px, d.chord.end)
        span = arc_path(center, r_px, d.chord.start, d.chord.end).span_deg
        length = 2 * d.radius * math.sin(math.radians(span) / 2.0)
        b.line("chord", "chord", a, c, color=d.chord.color or colors.dark)
        b.label("chord", "chord-label", _offset_from(_midpoint(a, c), center, 14.0), _num(length), color=colors.dark)
    lines: list[str] = []
    if d.show_formulas:
        lines.extend(("C = 2πr", "A = πr²"))
    if d.show_calculations:
        lines.append(f"C = {_num(2 * math.pi * d.radius)}")
        lines.append(f"A = {_num(math.pi * d.radius**2)}")
    base_y = center[1] + r_px + 24.0
    for i, text in enumerate(lines):
        b.label("measurements", f"measurement-{i}", (center[0], base_y + i * (b.theme.font_size_px + 4.0)), text)
    return None


# -- coordinate plane --------------------------------------------------------


def _curve_palette(theme: DiagramTheme) -> tuple[str, ...]:
    colors = theme.colors
    return (colors.primary, colors.accent, theme.error_color, theme.success_color, colors.dark)


def _coordinate_plane_scene(
    d: CoordinatePlaneDiagram,
    viewport: Viewport,
    b: _SceneBuilder,
    *,
    sampler_config: SamplerConfig | None = None,
    label_config: LabelLayoutConfig | None = None,
    evaluator: ExpressionEvaluator | None = None,
    **_: object,
) -> str | None:
    theme = b.theme
    mapper = CoordinateMapper(d.x_range, d.y_range, viewport)
    xr, yr = mapper.x_range.safe(), mapper.y_range.safe()
    left, top, plot_w, plot_h = mapper.plot_rect

    if d.show_grid:
        for x in grid_values(xr.as_tuple()):
            px = mapper.x_to_pixel(x)
            b.line("grid", f"grid-x-{_num(x)}", (px, top), (px, top + plot_h), color=theme.grid_color, width=1.0)
        for y in grid_values(yr.as_tuple()):
            py = mapper.y_to_pixel(y)
            b.line("grid", f"grid-y-{_num(y)}", (left, py), (left + plot_w, py), color=theme.grid_color, width=1.0)

    axis_y = mapper.y_to_pixel(yr.clamp(0.0))
    axis_x = mapper.x_to_pixel(xr.clamp(0.0))
    b.line("axes", "x-axis", (left, axis_y), (left + plot_w, axis_y), color=theme.axis_color, width=1.5)
    b.line("axes", "y-axis", (axis_x, top), (axis_x, top + plot_h), color=theme.axis_color, width=1.5)
    b.label("axes", "x-axis-label", (left + plot_w + 12.0, axis_y), d.x_label)
    b.label("axes", "y-axis-label", (axis_x, top - 12.0), d.y_label)
    xs = [v for v in grid_values(xr.as_tuple()) if v != 0.0]
    for x, text in zip(xs, format_ticks(xs), strict=True):
        b.label("axes", f"x-tick-{text}", (mapper.x_to_pixel(x), axis_y + 16.0), text)
    ys = [v for v in grid_values(yr.as_tuple()) if v != 0.0]
    for y, text in zip(ys, format_ticks(ys), strict=True):
        b.label("axes", f"y-tick-{text}", (axis_x - 16.0, mapper.y_to_pixel(y)), text)

    placed: list[LabelBox] = []
    for point in d.points:
        at = mapper.to_pixel((point.x, point.y))
        color = point.color or theme.colors.point
        b.add("points", "point", point.id, points=(at,), radius=POINT_RADIUS, color=color)
        if point.label:
            spot = find_label_position(
                at, point.label, placed, font_size=theme.font_size_px, font_family=theme.font_family, config=label_config
            )
            placed.append(
                label_box_for_text(point.id, spot, point.label, theme.font_size_px, font_family=theme.font_family, config=label_config)
            )
            b.label("points", f"{point.id}-label", spot, point.label, color=color)

    placeholder = None
    if d.curves:
        palette = _curve_palette(theme)
        drawn = 0
        for i, curve in enumerate(d.curves):
            domain = curve.domain if curve.domain is not None else xr.as_tuple()
            segments = sample(curve.expression, domain, mapper=mapper, config=sampler_config, evaluator=evaluator)
            if not segments:
                LOGGER.warning("curve `%s` (%s) has nothing to draw", curve.id, curve.expression)
                continue
            drawn += 1
            b.path("curves", curve.id, path_data(segments), color=curve.color or palette[i % len(palette)], filled=False)
        if drawn == 0:
            placeholder = message("no_curve", theme.language)
        if d.show_equation_list:
            line_h = theme.font_size_px + 6.0
            for i, curve in enumerate(d.curves):
                b.label(
                    "list",
                    f"{curve.id}-equation",
                    (left + 8.0, top + 8.0 + i * line_h),
                    f"y = {curve.expression}",
                    color=curve.color or palette[i % len(palette)],
                )
    return placeholder


# -- tree --------------------------------------------------------------------


def _tree_scene(d: TreeDiagram, viewport: Viewport, b: _SceneBuilder, **_: object) -> str | None:
    theme = b.theme
    depth = tree_depth(d.root)
    title_h = TREE_TITLE_HEIGHT if d.title else 0.0
    level_h = level_height_for(viewport.plot_height - title_h, depth)
    positions = layout_tree(
        d.root, viewport.plot_width, level_h, origin=(viewport.padding.left, viewport.padding.top + title_h)
    )

    def xy(node_id: str) -> Point:
        pos = positions[node_id]
        return (pos.x, pos.y)

    def step_for(pos: NodePosition) -> str:
        return "root" if pos.level == 0 else f"level-{pos.level}"

    for parent, child in iter_edges(d.root):
        b.line(step_for(positions[child.id]), f"edge-{parent.id}-{child.id}", xy(parent.id), xy(child.id), color=theme.axis_color)
    for node, _level in iter_nodes(d.root):
        pos = positions[node.id]
        b.circle(step_for(pos), f"node-{node.id}", xy(node.id), TREE_NODE_RADIUS, color=theme.colors.primary)
        if node.label:
            b.label(step_for(pos), f"node-{node.id}-label", xy(node.id), node.label)

    if d.show_probabilities:
        for parent, child in iter_edges(d.root):
            if child.probability is None:
                continue
            mid = _midpoint(xy(parent.id), xy(child.id))
            side = -14.0 if positions[child.id].x < positions[parent.id].x else 14.0
            b.label("probabilities", f"probability-{child.id}", (mid[0] + side, mid[1]), child.probability, color=theme.colors.accent)

    if d.errors is not None and d.errors.has_any:
        for node_id in d.errors.wrong:
            if node_id in positions:
                b.circle("errors", f"wrong-{node_id}", xy(node_id), TREE_NODE_RADIUS + 4.0, color=theme.error_color, filled=False, role="wrong")
        for node_id in d.errors.correct:
            if node_id in positions:
                b.circle("errors", f"correct-{node_id}", xy(node_id), TREE_NODE_RADIUS + 4.0, color=theme.success_color, filled=False, role="correct")
        for i, path in enumerate(d.errors.wrong_paths):
            known = tuple(xy(node_id) for node_id in path if node_id in positions)
            if len(known) >= 2:
                b.add("errors", "polyline", f"wrong-path-{i}", points=known, color=theme.error_color, stroke_width=theme.line_weight, dashed=True, role="wrong")
    if d.root.is_leaf:
        return message("insufficient_data", theme.language)
    return None


# -- triangle ----------------------------------------------------------------


def _triangle_scene(d: TriangleDiagram, viewport: Viewport, b: _SceneBuilder, **_: object) -> str | None:
    theme = b.theme
    colors = theme.colors
    xs = [v[0] for v in d.vertices]
    ys = [v[1] for v in d.vertices]
    span = max(max(xs) - min(xs), max(ys) - min(ys))
    margin = span * 0.15
    mapper = CoordinateMapper(
        (min(xs) - margin, max(xs) + margin), (min(ys) - margin, max(ys) + margin), viewport
    ).with_equal_aspect()
    px = [mapper.to_pixel(v) for v in d.vertices]
    centroid = (sum(p[0] for p in px) / 3.0, sum(p[1] for p in px) / 3.0)

    outline = " ".join(f"{'M' if i == 0 else 'L'} {svg_number(x)} {svg_number(y)}" for i, (x, y) in enumerate(px)) + " Z"
    b.path("drawTriangle", "triangle", outline, color=colors.primary, filled=False)
    for i, (p, name) in enumerate(zip(px, d.labels, strict=True)):
        b.label("drawTriangle", f"vertex-{i}", _offset_from(p, centroid, 16.0), name)

    for i in range(3):
        j = (i + 1) % 3
        a, c = d.vertices[i], d.vertices[j]
        length = d.sides[i] if d.sides[i] is not None else math.dist(a, c)
        b.label("labelSides", f"side-{i}", _offset_from(_midpoint(px[i], px[j]), centroid, 14.0), _num(length), color=colors.dark)

    for i in range(3):
        nxt, prv = (i + 1) % 3, (i + 2) % 3
        arc = arc_path(px[i], 20.0, angle_of(px[i], px[nxt]), angle_of(px[i], px[prv]))
        if d.angles[i] is not None:
            measure = float(d.angles[i])
        else:
            measure = _interior_angle(d.vertices[i], d.vertices[nxt], d.vertices[prv])
        b.path("labelAngles", f"angle-{i}", arc.to_svg(), color=colors.accent, width=1.5, filled=False)
        b.label("labelAngles", f"angle-{i}-label", arc_label_point(arc, 34.0), f"{_num(measure)}°", color=colors.accent)

    base_a, base_b, apex = d.vertices
    foot = _foot_of_perpendicular(apex, base_a, base_b)
    height = math.dist(apex, foot)
    if d.show_height:
        apex_px, foot_px = px[2], mapper.to_pixel(foot)
        b.line("showHeight", "height", apex_px, foot_px, color=colors.highlight, dashed=True)
        b.label("showHeight", "height-label", _offset_from(_midpoint(apex_px, foot_px), centroid, -12.0), f"h = {_num(height)}", color=colors.highlight)
    if d.show_formulas:
        base = math.dist(base_a, base_b)
        lines = ("A = ½ · b · h", f"A = {_num(0.5 * base * height)}", "∠A + ∠B + ∠C = 180°")
        _, top, _, plot_h = mapper.plot_rect
        for i, text in enumerate(lines):
            b.label("showFormulas", f"formula-{i}", (viewport.padding.left + 8.0, top + plot_h - (len(lines) - i) * (theme.font_size_px + 4.0)), text)
    return None


def _interior_angle(vertex: Point, a: Point, c: Point) -> float:
    v1 = (a[0] - vertex[0], a[1] - vertex[1])
    v2 = (c[0] - vertex[0], c[1] - vertex[1])
    cos = (v1[0] * v2[0] + v1[1] * v2[1]) / (math.hypot(*v1) * math.hypot(*v2))
    return math.degrees(math.acos(max(-1.0, min(1.0, cos))))


def _foot_of_perpendicular(p: Point, a: Point, c: Point) -> Point:
    dx, dy = c[0] - a[0], c[1] - a[1]
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / (dx * dx + dy * dy)
    return (a[0] + t * dx, a[1] + t * dy)


# -- number line -------------------------------------------------------------


def _number_line_scene(
    d: NumberLineDiagram,
    viewport: Viewport,
    b: _SceneBuilder,
    *,
    label_config: LabelLayoutConfig | None = None,
    **_: object,
) -> str | None:
    theme = b.theme
    mapper = CoordinateMapper((d.min, d.max), (0.0, 1.0), viewport)
    xr = mapper.x_range.safe()
    left, _, plot_w, _ = mapper.plot_rect
    line_y = viewport.center[1]
    label_cfg = label_config if label_config is not None else LabelLayoutConfig()

    b.line("axis", "axis", (left, line_y), (left + plot_w, line_y), color=theme.axis_color)
    ticks = grid_values(xr.as_tuple(), grid_interval(xr.span))
    for value, text in zip(ticks, format_ticks(ticks), strict=True):
        x = mapper.x_to_pixel(value)
        b.line("ticks", f"tick-{text}", (x, line_y - 6.0), (x, line_y + 6.0), color=theme.axis_color, width=1.5)
        b.label("ticks", f"tick-{text}-label", (x, line_y + 20.0), text)

    boxes = [
        label_box_for_text(
            f"label-{i}",
            (mapper.x_to_pixel(p.value), line_y - 20.0),
            p.label or _num(p.value),
            theme.font_size_px,
            font_family=theme.font_family,
            config=label_config,
        )
        for i, p in enumerate(d.points)
    ]
    staggered = stagger_labels(boxes, spacing=label_cfg.min_spacing, gap=label_cfg.stagger_gap)
    for i, (point, box) in enumerate(zip(d.points, boxes, strict=True)):
        x = mapper.x_to_pixel(point.value)
        color = point.color or theme.colors.point
        b.add("points", "point", f"point-{i}", points=((x, line_y),), radius=POINT_RADIUS + 1.0, color=color, filled=point.style == "filled")
        placed = staggered[box.id]
        b.label("points", f"point-{i}-label", (x, placed.y + box.height / 2.0), point.label or _num(point.value), color=color)

    for i, interval in enumerate(d.intervals):
        color = interval.color or theme.colors.primary
        start = mapper.x_to_pixel(xr.clamp(interval.start)) if interval.start is not None else left
        end = mapper.x_to_pixel(xr.clamp(interval.end)) if interval.end is not None else left + plot_w
        b.line("intervals", f"interval-{i}", (start, line_y), (end, line_y), color=color, width=theme.line_weight + 2.0)
        if interval.start is not None:
            b.add("intervals", "point", f"interval-{i}-start", points=((start, line_y),), radius=POINT_RADIUS, color=color, filled=interval.start_inclusive)
        if interval.end is not None:
            b.add("intervals", "point", f"interval-{i}-end", points=((end, line_y),), radius=POINT_RADIUS, color=color, filled=interval.end_inclusive)

    if d.errors is not None and d.errors.has_any:
        for role, values, color in (("wrong", d.errors.wrong, theme.error_color), ("correct", d.errors.correct, theme.success_color)):
            for value in values:
                try:
                    x = mapper.x_to_pixel(float(value))
                except ValueError:
                    LOGGER.debug("skipping non-numeric number line highlight %r", value)
                    continue
                b.circle("errors", f"{role}-{value}", (x, line_y), POINT_RADIUS + 5.0, color=color, filled=False, role=role)
    if not d.points and not d.intervals and d.errors is None:
        return message("insufficient_data", theme.language)
    return None


# -- unit circle -------------------------------------------------------------


def _unit_circle_scene(d: UnitCircleDiagram, viewport: Viewport, b: _SceneBuilder, **_: object) -> str | None:
    theme = b.theme
    colors = theme.colors
    center = viewport.center
    radius = min(viewport.plot_width, viewport.plot_height) / 2.0
    standard = {deg: (rad, cos, sin) for deg, rad, cos, sin in STANDARD_ANGLES}

    if d.highlight_quadrant is not None:
        b.path("circle", f"quadrant-{d.highlight_quadrant}", quadrant_path(center, radius, d.highlight_quadrant), color=colors.primary)
    b.circle("circle", "unit-circle", center, radius, color=theme.axis_color, filled=False)

    reach = radius + 20.0
    b.line("axes", "x-axis", (center[0] - reach, center[1]), (center[0] + reach, center[1]), color=theme.axis_color, width=1.5)
    b.line("axes", "y-axis", (center[0], center[1] - reach), (center[0], center[1] + reach), color=theme.axis_color, width=1.5)
    for deg, text in ((0.0, "1"), (90.0, "1"), (180.0, "-1"), (270.0, "-1")):
        b.label("axes", f"axis-mark-{int(deg)}", point_on_circle(center, radius + 12.0, deg), text)

    for angle in displayed_angles(d):
        key = int(angle.degrees) if float(angle.degrees).is_integer() else None
        rad, cos, sin = standard.get(key, (None, None, None)) if key is not None else (None, None, None)
        tip = point_on_circle(center, radius, angle.degrees)
        color = colors.accent if angle.highlight else colors.primary
        name = _num(angle.degrees)
        b.line("angles", f"ray-{name}", center, tip, color=color)
        b.add("angles", "point", f"angle-point-{name}", points=(tip,), radius=POINT_RADIUS, color=color)
        b.label("angles", f"angle-{name}-label", point_on_circle(center, radius + 22.0, angle.degrees), angle.label or rad or f"{name}°", color=color)
        if angle.highlight:
            arc = arc_path(center, 30.0, 0.0, angle.degrees, reflex=True)
            if not arc.degenerate:
                b.path("angles", f"angle-arc-{name}", arc.to_svg(), color=colors.accent, filled=False)
        if d.show_sin_cos:
            cos_text = cos or _num(math.cos(math.radians(angle.degrees)))
            sin_text = sin or _num(math.sin(math.radians(angle.degrees)))
            b.line("projections", f"cos-{name}", tip, (tip[0], center[1]), color=colors.light, width=1.0, dashed=True)
            b.line("projections", f"sin-{name}", tip, (center[0], tip[1]), color=colors.light, width=1.0, dashed=True)
            b.label("projections", f"coords-{name}", _offset_from(tip, center, 40.0), f"({cos_text}, {sin_text})")

    if d.errors is not None and d.errors.has_any:
        for role, values, color in (("wrong", d.errors.wrong, theme.error_color), ("correct", d.errors.correct, theme.success_color)):
            for value in values:
                try:
                    deg = float(value)
                except ValueError:
                    LOGGER.debug("skipping non-numeric unit circle highlight %r", value)
                    continue
                b.line("errors", f"{role}-{value}", center, point_on_circle(center, radius, deg), color=color, role=role)
    return None


_SCENE_BUILDERS = {
    CircleDiagram: _circle_scene,
    CoordinatePlaneDiagram: _coordinate_plane_scene,
    TreeDiagram: _tree_scene,
    TriangleDiagram: _triangle_scene,
    NumberLineDiagram: _number_line_scene,
    UnitCircleDiagram: _unit_circle_scene,
}


def build_scene(
    diagram: Diagram,
    viewport: Viewport,
    theme: DiagramTheme | None = None,
    *,
    sampler_config: SamplerConfig | None = None,
    label_config: LabelLayoutConfig | None = None,
    evaluator: ExpressionEvaluator | None = None,
    initial_step: int = 0,
) -> tuple[Scene, StepController]:
    """Compute the pixel geometry of ``diagram`` and a fresh controller over its steps."""

    builder_fn = _SCENE_BUILDERS.get(type(diagram))
    if builder_fn is None:
        raise TypeError(f"no scene builder for {type(diagram).__name__}")
    theme = theme if theme is not None else DEFAULT_THEME
    step_ids = build_step_ids(diagram)
    builder = _SceneBuilder(theme)
    placeholder = builder_fn(
        diagram,
        viewport,
        builder,
        sampler_config=sampler_config,
        label_config=label_config,
        evaluator=evaluator,
    )
    known = set(step_ids)
    elements = tuple(e for e in builder.elements if e.step_id in known)
    scene = Scene(
        kind=diagram.kind,
        width=viewport.width,
        height=viewport.height,
        step_ids=step_ids,
        elements=elements,
        title=diagram.title,
        rtl=theme.rtl,
        placeholder=placeholder,
    )
    return scene, StepController(step_ids, initial_step=initial_step)


def default_viewport(width: float, height: float, *, kind: str = "coordinate_plane") -> Viewport:
    """Viewport with the padding each diagram kind is usually drawn with."""

    paddings = {
        "coordinate_plane": Padding(left=50.0, right=30.0, top=40.0, bottom=50.0),
        "tree": Padding(left=50.0, right=50.0, top=40.0, bottom=30.0),
        "unit_circle": Padding.uniform(60.0),
    }
    return Viewport(width=width, height=height, padding=paddings.get(kind, Padding.uniform(40.0)))
