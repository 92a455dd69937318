from __future__ import annotations

from typing import Callable

from stepplot_core.steps import StepController, StepListener
from stepplot_core.tree_layout import tree_depth

from .diagrams import (
    CircleDiagram,
    CoordinatePlaneDiagram,
    Diagram,
    NumberLineDiagram,
    TreeDiagram,
    TriangleDiagram,
    UnitCircleDiagram,
    displayed_angles,
)


def _circle_steps(d: CircleDiagram) -> list[str]:
    steps = ["outline", "center"]
    if d.show_radius:
        steps.append("radius")
    if d.show_diameter:
        steps.append("diameter")
    if d.sector is not None:
        steps.append("sector")
    elif d.arc is not None:
        steps.append("arc")
    if d.chord is not None:
        steps.append("chord")
    if d.show_calculations or d.show_formulas:
        steps.append("measurements")
    return steps


def _coordinate_plane_steps(d: CoordinatePlaneDiagram) -> list[str]:
    steps = ["grid", "axes"]
    if d.points:
        steps.append("points")
    if d.curves:
        steps.append("curves")
        if d.show_equation_list:
            steps.append("list")
    return steps


def _tree_steps(d: TreeDiagram) -> list[str]:
    steps = ["root"]
    steps.extend(f"level-{level}" for level in range(1, tree_depth(d.root)))
    if d.show_probabilities:
        steps.append("probabilities")
    if d.errors is not None and d.errors.has_any:
        steps.append("errors")
    return steps


def _triangle_steps(d: TriangleDiagram) -> list[str]:
    steps = ["drawTriangle", "labelSides", "labelAngles"]
    if d.show_height:
        steps.append("showHeight")
    if d.show_formulas:
        steps.append("showFormulas")
    return steps


def _number_line_steps(d: NumberLineDiagram) -> list[str]:
    steps = ["axis", "ticks"]
    if d.points:
        steps.append("points")
    if d.intervals:
        steps.append("intervals")
    if d.errors is not None and d.errors.has_any:
        steps.append("errors")
    return steps


def _unit_circle_steps(d: UnitCircleDiagram) -> list[str]:
    steps = ["circle", "axes"]
    angles = displayed_angles(d)
    if angles:
        steps.append("angles")
        if d.show_sin_cos:
            steps.append("projections")
    if d.errors is not None and d.errors.has_any:
        steps.append("errors")
    return steps


_PLANNERS: dict[type, Callable[..., list[str]]] = {
    CircleDiagram: _circle_steps,
    CoordinatePlaneDiagram: _coordinate_plane_steps,
    TreeDiagram: _tree_steps,
    TriangleDiagram: _triangle_steps,
    NumberLineDiagram: _number_line_steps,
    UnitCircleDiagram: _unit_circle_steps,
}


def build_step_ids(diagram: Diagram) -> tuple[str, ...]:
    """Ordered step ids for ``diagram``; optional content adds steps only when present."""

    planner = _PLANNERS.get(type(diagram))
    if planner is None:
        raise TypeError(f"no step plan for {type(diagram).__name__}")
    return tuple(planner(diagram))


def build_controller(
    diagram: Diagram,
    *,
    initial_step: int = 0,
    on_step_change: StepListener | None = None,
) -> StepController:
    return StepController(build_step_ids(diagram), initial_step=initial_step, on_step_change=on_step_change)
