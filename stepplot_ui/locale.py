from __future__ import annotations

import re

DEFAULT_LANGUAGE = "en"
RTL_LANGUAGES = frozenset({"he"})

STEP_LABELS: dict[str, dict[str, str]] = {
    # circle
    "outline": {"en": "Draw the circle", "he": "ציור המעגל"},
    "center": {"en": "Mark center point", "he": "סימון מרכז"},
    "radius": {"en": "Show radius", "he": "הצגת רדיוס"},
    "diameter": {"en": "Show diameter", "he": "הצגת קוטר"},
    "sector": {"en": "Show sector", "he": "הצגת גזרה"},
    "arc": {"en": "Show arc", "he": "הצגת קשת"},
    "chord": {"en": "Show chord", "he": "הצגת מיתר"},
    "measurements": {"en": "Show measurements", "he": "הצגת מידות"},
    # coordinate plane
    "grid": {"en": "Draw the grid", "he": "ציור הרשת"},
    "axes": {"en": "Draw the axes", "he": "ציור הצירים"},
    "curves": {"en": "Plot the equations", "he": "שרטוט הפונקציות"},
    "list": {"en": "Show equation list", "he": "הצגת רשימת הפונקציות"},
    # tree
    "root": {"en": "Draw the root", "he": "ציור השורש"},
    "probabilities": {"en": "Show probabilities", "he": "הצגת הסתברויות"},
    # triangle
    "drawTriangle": {"en": "Draw triangle", "he": "ציור משולש"},
    "labelSides": {"en": "Label sides", "he": "סימון צלעות"},
    "labelAngles": {"en": "Label angles", "he": "סימון זוויות"},
    "showHeight": {"en": "Show height", "he": "הצגת גובה"},
    "showFormulas": {"en": "Show formulas", "he": "הצגת נוסחאות"},
    # number line
    "axis": {"en": "Draw the number line", "he": "ציור ציר המספרים"},
    "ticks": {"en": "Add tick marks", "he": "הוספת סימני סולם"},
    "points": {"en": "Mark the points", "he": "סימון הנקודות"},
    "intervals": {"en": "Show intervals", "he": "הצגת הקטעים"},
    # unit circle
    "circle": {"en": "Draw the unit circle", "he": "ציור מעגל היחידה"},
    "angles": {"en": "Mark the angles", "he": "סימון הזוויות"},
    "projections": {"en": "Show sine and cosine", "he": "הצגת סינוס וקוסינוס"},
    # shared
    "errors": {"en": "Show corrections", "he": "הצגת תיקונים"},
}

MESSAGES: dict[str, dict[str, str]] = {
    "no_curve": {"en": "No curve to display", "he": "אין גרף להצגה"},
    "insufficient_data": {"en": "Insufficient data", "he": "אין מספיק נתונים"},
    "step_counter": {"en": "Step {current} of {total}", "he": "שלב {current} מתוך {total}"},
    "level": {"en": "Show level {level}", "he": "הצגת רמה {level}"},
}

_LEVEL_STEP = re.compile(r"^level-(\d+)$")


def resolve_language(language: str | None) -> str:
    if language in ("en", "he"):
        return language
    return DEFAULT_LANGUAGE


def is_rtl(language: str | None) -> bool:
    return resolve_language(language) in RTL_LANGUAGES


def message(key: str, language: str | None = DEFAULT_LANGUAGE, **params: object) -> str:
    texts = MESSAGES[key]
    return texts[resolve_language(language)].format(**params)


def step_label(step_id: str, language: str | None = DEFAULT_LANGUAGE) -> str:
    """Localized caption for a step id; unknown ids are returned unchanged."""

    lang = resolve_language(language)
    match = _LEVEL_STEP.match(step_id)
    if match:
        return message("level", lang, level=int(match.group(1)))
    texts = STEP_LABELS.get(step_id)
    if texts is None:
        return step_id
    return texts[lang]


def step_counter_text(current_index: int, total: int, language: str | None = DEFAULT_LANGUAGE) -> str:
    """``Step n of N`` for a zero-based ``current_index``."""

    return message("step_counter", language, current=current_index + 1, total=total)
