from stepplot_ui.diagrams import (
    AngleSpan,
    CircleDiagram,
    CoordinatePlaneDiagram,
    Curve,
    Diagram,
    ErrorHighlight,
    Interval,
    NumberLineDiagram,
    NumberLinePoint,
    PlotPoint,
    TreeDiagram,
    TriangleDiagram,
    UnitAngle,
    UnitCircleDiagram,
    diagram_from_dict,
)
from stepplot_ui.locale import message, step_counter_text, step_label
from stepplot_ui.scene import Scene, SceneElement, build_scene, default_viewport
from stepplot_ui.settings import DiagramSettings, load_settings, settings_from_dict
from stepplot_ui.step_plans import build_controller, build_step_ids
from stepplot_ui.style import DEFAULT_THEME, DiagramTheme, validate_theme

__all__ = [
    "AngleSpan",
    "CircleDiagram",
    "CoordinatePlaneDiagram",
    "Curve",
    "DEFAULT_THEME",
    "Diagram",
    "DiagramSettings",
    "DiagramTheme",
    "ErrorHighlight",
    "Interval",
    "NumberLineDiagram",
    "NumberLinePoint",
    "PlotPoint",
    "Scene",
    "SceneElement",
    "TreeDiagram",
    "TriangleDiagram",
    "UnitAngle",
    "UnitCircleDiagram",
    "build_controller",
    "build_scene",
    "build_step_ids",
    "default_viewport",
    "diagram_from_dict",
    "load_settings",
    "message",
    "settings_from_dict",
    "step_counter_text",
    "step_label",
    "validate_theme",
]
