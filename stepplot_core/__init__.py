from stepplot_core.arcs import ArcPath, angle_of, arc_label_point, arc_path, normalize_angle, point_on_circle, sector_path
from stepplot_core.collisions import (
    Collision,
    LabelBox,
    LabelLayoutConfig,
    StaggeredLabel,
    detect_collisions,
    find_label_position,
    stagger_labels,
)
from stepplot_core.errors import DiagramDataError, ExpressionError, StepplotError
from stepplot_core.expressions import ExpressionEvaluator, SympyEvaluator, compile_expression, validate_expression
from stepplot_core.mapping import CoordinateMapper, Padding, Range, Viewport, snap_interval, to_data, to_pixel
from stepplot_core.sampler import SamplerConfig, path_data, sample, sample_data, segments_from_points
from stepplot_core.steps import Step, StepController
from stepplot_core.ticks import format_tick, format_ticks, grid_interval, grid_values
from stepplot_core.tree_layout import NodePosition, TreeNode, layout_tree, tree_from_dict, validate_tree

__all__ = [
    "ArcPath",
    "Collision",
    "CoordinateMapper",
    "DiagramDataError",
    "ExpressionError",
    "ExpressionEvaluator",
    "LabelBox",
    "LabelLayoutConfig",
    "NodePosition",
    "Padding",
    "Range",
    "SamplerConfig",
    "StaggeredLabel",
    "Step",
    "StepController",
    "StepplotError",
    "SympyEvaluator",
    "TreeNode",
    "Viewport",
    "angle_of",
    "arc_label_point",
    "arc_path",
    "compile_expression",
    "detect_collisions",
    "find_label_position",
    "format_tick",
    "format_ticks",
    "grid_interval",
    "grid_values",
    "layout_tree",
    "normalize_angle",
    "path_data",
    "point_on_circle",
    "sample",
    "sample_data",
    "sector_path",
    "segments_from_points",
    "snap_interval",
    "stagger_labels",
    "to_data",
    "to_pixel",
    "tree_from_dict",
    "validate_expression",
    "validate_tree",
]
