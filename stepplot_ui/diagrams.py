from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Any, Callable, Literal, Mapping, Sequence, Union

from stepplot_core.errors import DiagramDataError
from stepplot_core.mapping import Point
from stepplot_core.tree_layout import TreeNode, tree_from_dict, validate_tree

PointStyle = Literal["filled", "hollow"]


@dataclass(frozen=True)
class AngleSpan:
    start: float
    end: float
    color: str | None = None


@dataclass(frozen=True)
class ErrorHighlight:
    """Student-error overlay: ids drawn as wrong, ids drawn as the correction."""

    wrong: tuple[str, ...] = ()
    correct: tuple[str, ...] = ()
    wrong_paths: tuple[tuple[str, ...], ...] = ()
    corrections: tuple[tuple[str, str], ...] = ()

    @property
    def has_any(self) -> bool:
        return bool(self.wrong or self.correct or self.wrong_paths or self.corrections)


@dataclass(frozen=True)
class CircleDiagram:
    radius: float
    center: Point = (0.0, 0.0)
    center_label: str = ""
    show_radius: bool = True
    show_diameter: bool = False
    sector: AngleSpan | None = None
    arc: AngleSpan | None = None
    chord: AngleSpan | None = None
    show_calculations: bool = True
    show_formulas: bool = True
    title: str = ""
    kind: str = field(default="circle", init=False)

    def __post_init__(self) -> None:
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise DiagramDataError("circle radius must be a positive number")


@dataclass(frozen=True)
class PlotPoint:
    id: str
    x: float
    y: float
    label: str = ""
    color: str | None = None


@dataclass(frozen=True)
class Curve:
    id: str
    expression: str
    color: str | None = None
    domain: tuple[float, float] | None = None


@dataclass(frozen=True)
class CoordinatePlaneDiagram:
    x_range: tuple[float, float] = (-10.0, 10.0)
    y_range: tuple[float, float] = (-10.0, 10.0)
    x_label: str = "x"
    y_label: str = "y"
    show_grid: bool = True
    points: tuple[PlotPoint, ...] = ()
    curves: tuple[Curve, ...] = ()
    show_equation_list: bool = True
    title: str = ""
    kind: str = field(default="coordinate_plane", init=False)


@dataclass(frozen=True)
class TreeDiagram:
    root: TreeNode
    show_probabilities: bool = True
    errors: ErrorHighlight | None = None
    title: str = ""
    kind: str = field(default="tree", init=False)

    def __post_init__(self) -> None:
        report = validate_tree(self.root)
        if not report.ok:
            raise DiagramDataError("; ".join(report.errors))


@dataclass(frozen=True)
class TriangleDiagram:
    vertices: tuple[Point, Point, Point]
    labels: tuple[str, str, str] = ("A", "B", "C")
    sides: tuple[float | None, float | None, float | None] = (None, None, None)
    angles: tuple[float | None, float | None, float | None] = (None, None, None)
    show_height: bool = False
    show_formulas: bool = False
    title: str = ""
    kind: str = field(default="triangle", init=False)

    def __post_init__(self) -> None:
        if len(self.vertices) != 3:
            raise DiagramDataError("a triangle needs exactly three vertices")
        (ax, ay), (bx, by), (cx, cy) = self.vertices
        if abs((bx - ax) * (cy - ay) - (by - ay) * (cx - ax)) < 1e-12:
            raise DiagramDataError("triangle vertices are collinear")


@dataclass(frozen=True)
class NumberLinePoint:
    value: float
    label: str = ""
    style: PointStyle = "filled"
    color: str | None = None


@dataclass(frozen=True)
class Interval:
    start: float | None
    end: float | None
    start_inclusive: bool = False
    end_inclusive: bool = False
    color: str | None = None


@dataclass(frozen=True)
class NumberLineDiagram:
    min: float
    max: float
    points: tuple[NumberLinePoint, ...] = ()
    intervals: tuple[Interval, ...] = ()
    errors: ErrorHighlight | None = None
    title: str = ""
    kind: str = field(default="number_line", init=False)


@dataclass(frozen=True)
class UnitAngle:
    degrees: float
    highlight: bool = False
    label: str = ""


@dataclass(frozen=True)
class UnitCircleDiagram:
    angles: tuple[UnitAngle, ...] = ()
    show_standard_angles: bool = False
    highlight_quadrant: int | None = None
    show_sin_cos: bool = True
    errors: ErrorHighlight | None = None
    title: str = ""
    kind: str = field(default="unit_circle", init=False)

    def __post_init__(self) -> None:
        if self.highlight_quadrant is not None and self.highlight_quadrant not in (1, 2, 3, 4):
            raise DiagramDataError("highlight_quadrant must be 1, 2, 3 or 4")


Diagram = Union[
    CircleDiagram,
    CoordinatePlaneDiagram,
    TreeDiagram,
    TriangleDiagram,
    NumberLineDiagram,
    UnitCircleDiagram,
]

# (degrees, radians label, cos label, sin label)
STANDARD_ANGLES: tuple[tuple[int, str, str, str], ...] = (
    (0, "0", "1", "0"),
    (30, "π/6", "√3/2", "1/2"),
    (45, "π/4", "√2/2", "√2/2"),
    (60, "π/3", "1/2", "√3/2"),
    (90, "π/2", "0", "1"),
    (120, "2π/3", "-1/2", "√3/2"),
    (135, "3π/4", "-√2/2", "√2/2"),
    (150, "5π/6", "-√3/2", "1/2"),
    (180, "π", "-1", "0"),
    (210, "7π/6", "-√3/2", "-1/2"),
    (225, "5π/4", "-√2/2", "-√2/2"),
    (240, "4π/3", "-1/2", "-√3/2"),
    (270, "3π/2", "0", "-1"),
    (300, "5π/3", "1/2", "-√3/2"),
    (315, "7π/4", "√2/2", "-√2/2"),
    (330, "11π/6", "√3/2", "-1/2"),
)


def displayed_angles(diagram: UnitCircleDiagram) -> tuple[UnitAngle, ...]:
    if not diagram.show_standard_angles:
        return diagram.angles
    highlighted = {a.degrees for a in diagram.angles if a.highlight}
    return tuple(UnitAngle(degrees=float(deg), highlight=deg in highlighted, label=rad) for deg, rad, _, _ in STANDARD_ANGLES)


# -- payload parsing ---------------------------------------------------------


def _number(raw: Mapping[str, Any], key: str, default: float | None = None) -> float:
    value = raw.get(key, default)
    if value is None:
        raise DiagramDataError(f"missing required field `{key}`")
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise DiagramDataError(f"`{key}` must be a finite number")
    return float(value)


def _optional_number(raw: Mapping[str, Any], key: str) -> float | None:
    return None if raw.get(key) is None else _number(raw, key)


def _flag(raw: Mapping[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if not isinstance(value, bool):
        raise DiagramDataError(f"`{key}` must be a boolean")
    return value


def _items(raw: Mapping[str, Any], key: str) -> Sequence[Any]:
    value = raw.get(key) or ()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise DiagramDataError(f"`{key}` must be a list")
    return value


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DiagramDataError(f"{what} must be a mapping")
    return value


def _xy(value: Any, what: str) -> Point:
    raw = _mapping(value, what)
    return (_number(raw, "x"), _number(raw, "y"))


def _angle_span(value: Any, what: str) -> AngleSpan | None:
    if value is None:
        return None
    raw = _mapping(value, what)
    return AngleSpan(start=_number(raw, "from"), end=_number(raw, "to"), color=raw.get("color"))


def _ids(raw: Mapping[str, Any], *keys: str) -> tuple[str, ...]:
    out: list[str] = []
    for key in keys:
        for item in _items(raw, key):
            if isinstance(item, Mapping):
                item = item.get("id", item.get("value"))
            if item is not None:
                out.append(str(item))
    return tuple(out)


def _error_highlight(value: Any, *, wrong: Sequence[str], correct: Sequence[str]) -> ErrorHighlight | None:
    if value is None:
        return None
    raw = _mapping(value, "errorHighlight")
    corrections = raw.get("corrections") or {}
    highlight = ErrorHighlight(
        wrong=_ids(raw, *wrong),
        correct=_ids(raw, *correct),
        wrong_paths=tuple(tuple(str(p) for p in path) for path in _items(raw, "wrongPaths")),
        corrections=tuple((str(k), str(v)) for k, v in _mapping(corrections, "corrections").items()),
    )
    return highlight if highlight.has_any else None


def _circle(raw: Mapping[str, Any]) -> CircleDiagram:
    center = raw.get("center")
    cx, cy = _xy(center, "center") if center is not None else (_number(raw, "centerX", 0.0), _number(raw, "centerY", 0.0))
    return CircleDiagram(
        radius=_number(raw, "radius"),
        center=(cx, cy),
        center_label=str(raw.get("centerLabel", "")),
        show_radius=_flag(raw, "showRadius", True),
        show_diameter=_flag(raw, "showDiameter", False),
        sector=_angle_span(raw.get("showSector"), "showSector"),
        arc=_angle_span(raw.get("showArc"), "showArc"),
        chord=_angle_span(raw.get("showChord"), "showChord"),
        show_calculations=_flag(raw, "showCalculations", True),
        show_formulas=_flag(raw, "showFormulas", True),
        title=str(raw.get("title", "")),
    )


def _coordinate_plane(raw: Mapping[str, Any]) -> CoordinatePlaneDiagram:
    points = []
    for i, item in enumerate(_items(raw, "points")):
        p = _mapping(item, f"points[{i}]")
        points.append(
            PlotPoint(
                id=str(p.get("id", f"point-{i}")),
                x=_number(p, "x"),
                y=_number(p, "y"),
                label=str(p.get("label", "")),
                color=p.get("color"),
            )
        )
    curves = []
    for i, item in enumerate(_items(raw, "curves")):
        c = _mapping(item, f"curves[{i}]")
        expression = c.get("expression")
        if not isinstance(expression, str):
            raise DiagramDataError(f"curves[{i}] needs a string `expression`")
        domain_raw = c.get("domain")
        domain = None
        if domain_raw is not None:
            d = _mapping(domain_raw, f"curves[{i}].domain")
            domain = (_number(d, "min"), _number(d, "max"))
        curves.append(Curve(id=str(c.get("id", f"curve-{i}")), expression=expression, color=c.get("color"), domain=domain))
    return CoordinatePlaneDiagram(
        x_range=(_number(raw, "xMin", -10.0), _number(raw, "xMax", 10.0)),
        y_range=(_number(raw, "yMin", -10.0), _number(raw, "yMax", 10.0)),
        x_label=str(raw.get("xLabel", "x")),
        y_label=str(raw.get("yLabel", "y")),
        show_grid=_flag(raw, "showGrid", True),
        points=tuple(points),
        curves=tuple(curves),
        show_equation_list=_flag(raw, "showEquationList", True),
        title=str(raw.get("title", "")),
    )


def _tree(raw: Mapping[str, Any]) -> TreeDiagram:
    if "root" not in raw:
        raise DiagramDataError("missing required field `root`")
    return TreeDiagram(
        root=tree_from_dict(_mapping(raw["root"], "root")),
        show_probabilities=_flag(raw, "showProbabilities", True),
        errors=_error_highlight(raw.get("errorHighlight"), wrong=("wrongNodes",), correct=("correctPath",)),
        title=str(raw.get("title", "")),
    )


def _triple(raw: Mapping[str, Any], key: str) -> tuple[float | None, float | None, float | None]:
    values = _items(raw, key)
    if not values:
        return (None, None, None)
    if len(values) != 3:
        raise DiagramDataError(f"`{key}` must hold three entries")
    out = []
    for v in values:
        if v is not None and (isinstance(v, bool) or not isinstance(v, (int, float))):
            raise DiagramDataError(f"`{key}` entries must be numbers or null")
        out.append(None if v is None else float(v))
    return (out[0], out[1], out[2])


def _triangle(raw: Mapping[str, Any]) -> TriangleDiagram:
    vertices = _items(raw, "vertices")
    if len(vertices) != 3:
        raise DiagramDataError("a triangle needs exactly three vertices")
    labels = _items(raw, "labels") or ("A", "B", "C")
    if len(labels) != 3:
        raise DiagramDataError("`labels` must hold three entries")
    a, b, c = (_xy(v, f"vertices[{i}]") for i, v in enumerate(vertices))
    return TriangleDiagram(
        vertices=(a, b, c),
        labels=(str(labels[0]), str(labels[1]), str(labels[2])),
        sides=_triple(raw, "sides"),
        angles=_triple(raw, "angles"),
        show_height=_flag(raw, "showHeight", False),
        show_formulas=_flag(raw, "showFormulas", False),
        title=str(raw.get("title", "")),
    )


def _number_line(raw: Mapping[str, Any]) -> NumberLineDiagram:
    points = []
    for i, item in enumerate(_items(raw, "points")):
        p = _mapping(item, f"points[{i}]")
        style = p.get("style", "filled")
        if style not in ("filled", "hollow"):
            raise DiagramDataError(f"points[{i}].style must be `filled` or `hollow`")
        points.append(NumberLinePoint(value=_number(p, "value"), label=str(p.get("label", "")), style=style, color=p.get("color")))
    intervals = []
    for i, item in enumerate(_items(raw, "intervals")):
        iv = _mapping(item, f"intervals[{i}]")
        intervals.append(
            Interval(
                start=_optional_number(iv, "start"),
                end=_optional_number(iv, "end"),
                start_inclusive=_flag(iv, "startInclusive", False),
                end_inclusive=_flag(iv, "endInclusive", False),
                color=iv.get("color"),
            )
        )
    return NumberLineDiagram(
        min=_number(raw, "min"),
        max=_number(raw, "max"),
        points=tuple(points),
        intervals=tuple(intervals),
        errors=_error_highlight(
            raw.get("errorHighlight"),
            wrong=("wrongPoints", "wrongIntervals"),
            correct=("correctPoints", "correctIntervals"),
        ),
        title=str(raw.get("title", "")),
    )


def _unit_circle(raw: Mapping[str, Any]) -> UnitCircleDiagram:
    angles = []
    for i, item in enumerate(_items(raw, "angles")):
        a = _mapping(item, f"angles[{i}]")
        angles.append(UnitAngle(degrees=_number(a, "degrees"), highlight=_flag(a, "highlight", False), label=str(a.get("label", ""))))
    quadrant = raw.get("highlightQuadrant")
    if quadrant is not None and (isinstance(quadrant, bool) or not isinstance(quadrant, int)):
        raise DiagramDataError("`highlightQuadrant` must be an integer")
    return UnitCircleDiagram(
        angles=tuple(angles),
        show_standard_angles=_flag(raw, "showStandardAngles", False),
        highlight_quadrant=None if quadrant is None else int(quadrant),
        show_sin_cos=_flag(raw, "showSinCos", True),
        errors=_error_highlight(raw.get("errorHighlight"), wrong=("wrongAngles",), correct=("correctAngles",)),
        title=str(raw.get("title", "")),
    )


_PARSERS: dict[str, Callable[[Mapping[str, Any]], Diagram]] = {
    "circle": _circle,
    "coordinate_plane": _coordinate_plane,
    "tree": _tree,
    "triangle": _triangle,
    "number_line": _number_line,
    "unit_circle": _unit_circle,
}


def diagram_from_dict(payload: Mapping[str, Any]) -> Diagram:
    """Build the diagram variant named by ``payload["type"]`` from its ``data`` (or inline) fields."""

    payload = _mapping(payload, "diagram payload")
    kind = payload.get("type")
    parser = _PARSERS.get(str(kind))
    if parser is None:
        raise DiagramDataError(f"unknown diagram type: {kind!r}")
    data = payload.get("data", payload)
    return parser(_mapping(data, "diagram data"))
