from __future__ import annotations

from functools import lru_cache
import logging
from pathlib import Path

from PIL import ImageFont

LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 14.0
CHAR_WIDTH_RATIO = 0.6
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "arial",
    "helvetica",
    "liberationsans",
    "notosans",
)
FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/System/Library/Fonts/Supplemental"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path("C:/Windows/Fonts"),
)


def estimate_text_size(text: str, font_size_px: float = DEFAULT_FONT_SIZE_PX) -> tuple[float, float]:
    """Cheap width/height guess: each character is 0.6 em wide, one line is 1 em tall."""

    if font_size_px <= 0:
        raise ValueError("font_size_px must be > 0")
    return (len(text) * font_size_px * CHAR_WIDTH_RATIO, float(font_size_px))


def text_size(
    text: str,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    font_family: str = DEFAULT_FONT_FAMILY,
) -> tuple[int, int]:
    if font_size_px <= 0:
        raise ValueError("font_size_px must be > 0")
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text)
    return (max(0, int(right - left)), max(1, int(bottom - top)))


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError as exc:
            LOGGER.warning("could not load font %s (%s); using the Pillow default", font_path, exc)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() or DEFAULT_FONT_FAMILY.lower()
    candidates: list[Path] = []
    for base in FONT_DIRS:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in (wanted,) + FONT_FALLBACK_PATTERNS:
        needle = pattern.replace(" ", "")
        for path in candidates:
            if needle in path.name.lower().replace(" ", ""):
                return path
    return None
