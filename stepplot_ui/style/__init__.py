from stepplot_ui.style.theme import (
    DEFAULT_THEME,
    DiagramTheme,
    SubjectColors,
    font_size_for,
    line_weight_for,
    subject_colors,
    validate_theme,
)

__all__ = [
    "DEFAULT_THEME",
    "DiagramTheme",
    "SubjectColors",
    "font_size_for",
    "line_weight_for",
    "subject_colors",
    "validate_theme",
]
