from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
import re
from typing import Any, Mapping

LOGGER = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

SUBJECTS = ("math", "physics", "geometry")
COMPLEXITY_LEVELS = ("elementary", "middle_school", "high_school", "advanced")
LANGUAGES = ("en", "he")


@dataclass(frozen=True)
class SubjectColors:
    primary: str
    accent: str
    light: str
    dark: str
    bg: str
    bg_dark: str
    curve: str
    point: str
    highlight: str


SUBJECT_COLORS: dict[str, SubjectColors] = {
    "math": SubjectColors(
        primary="#6366f1",
        accent="#8b5cf6",
        light="#c7d2fe",
        dark="#4338ca",
        bg="#eef2ff",
        bg_dark="#1e1b4b",
        curve="#818cf8",
        point="#6366f1",
        highlight="#a5b4fc",
    ),
    "physics": SubjectColors(
        primary="#f97316",
        accent="#ef4444",
        light="#fed7aa",
        dark="#c2410c",
        bg="#fff7ed",
        bg_dark="#431407",
        curve="#fb923c",
        point="#f97316",
        highlight="#fdba74",
    ),
    "geometry": SubjectColors(
        primary="#ec4899",
        accent="#d946ef",
        light="#fbcfe8",
        dark="#be185d",
        bg="#fdf2f8",
        bg_dark="#500724",
        curve="#f472b6",
        point="#ec4899",
        highlight="#f9a8d4",
    ),
}

LINE_WEIGHTS: dict[str, float] = {
    "elementary": 4.0,
    "middle_school": 3.0,
    "high_school": 2.0,
    "advanced": 2.0,
}

FONT_SIZES: dict[str, float] = {
    "elementary": 18.0,
    "middle_school": 16.0,
    "high_school": 14.0,
    "advanced": 13.0,
}


def subject_colors(subject: str) -> SubjectColors:
    colors = SUBJECT_COLORS.get(subject)
    if colors is None:
        LOGGER.debug("unknown subject %r; using math colors", subject)
        return SUBJECT_COLORS["math"]
    return colors


def line_weight_for(complexity: str) -> float:
    return LINE_WEIGHTS.get(complexity, LINE_WEIGHTS["middle_school"])


def font_size_for(complexity: str) -> float:
    return FONT_SIZES.get(complexity, FONT_SIZES["middle_school"])


@dataclass(frozen=True)
class DiagramTheme:
    """Rendering tokens handed explicitly to scene builders."""

    subject: str = "math"
    complexity: str = "middle_school"
    language: str = "en"
    dark_mode: bool = False
    font_family: str = "DejaVu Sans"
    font_size_px: float | None = None
    background_light: str = "#ffffff"
    background_dark: str = "#1a1a2e"
    grid_light: str = "#e5e7eb"
    grid_dark: str = "#2d2d44"
    axis_color: str = "#374151"
    error_color: str = "#ef4444"
    success_color: str = "#22c55e"

    def __post_init__(self) -> None:
        if self.font_size_px is None:
            object.__setattr__(self, "font_size_px", font_size_for(self.complexity))

    @property
    def colors(self) -> SubjectColors:
        return subject_colors(self.subject)

    @property
    def line_weight(self) -> float:
        return line_weight_for(self.complexity)

    @property
    def rtl(self) -> bool:
        return self.language == "he"

    @property
    def background(self) -> str:
        return self.background_dark if self.dark_mode else self.background_light

    @property
    def grid_color(self) -> str:
        return self.grid_dark if self.dark_mode else self.grid_light


DEFAULT_THEME = DiagramTheme()

_COLOR_TOKENS = (
    "background_light",
    "background_dark",
    "grid_light",
    "grid_dark",
    "axis_color",
    "error_color",
    "success_color",
)


def validate_theme(overrides: Mapping[str, Any] | None = None) -> DiagramTheme:
    """Validate and merge token overrides against the default theme."""

    raw: dict[str, Any] = asdict(DEFAULT_THEME)
    # Unset font size follows the merged complexity.
    raw["font_size_px"] = None
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown theme token: {key}")
            raw[key] = value

    for key in _COLOR_TOKENS:
        if not isinstance(raw[key], str) or not _HEX_COLOR.match(raw[key]):
            raise ValueError(f"Token `{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")

    if raw["subject"] not in SUBJECTS:
        raise ValueError(f"Token `subject` must be one of: {', '.join(SUBJECTS)}")
    if raw["complexity"] not in COMPLEXITY_LEVELS:
        raise ValueError(f"Token `complexity` must be one of: {', '.join(COMPLEXITY_LEVELS)}")
    if raw["language"] not in LANGUAGES:
        raise ValueError(f"Token `language` must be one of: {', '.join(LANGUAGES)}")
    if not isinstance(raw["dark_mode"], bool):
        raise ValueError("Token `dark_mode` must be a boolean")
    if not isinstance(raw["font_family"], str) or not raw["font_family"].strip():
        raise ValueError("Token `font_family` must be a non-empty string")
    size = raw["font_size_px"]
    if size is None:
        size = font_size_for(raw["complexity"])
    if isinstance(size, bool) or not isinstance(size, (int, float)) or float(size) <= 0:
        raise ValueError("Token `font_size_px` must be a positive number")

    raw["font_size_px"] = float(size)
    return DiagramTheme(**raw)
