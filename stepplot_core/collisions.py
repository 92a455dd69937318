from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Sequence

from .mapping import Point
from .text_metrics import DEFAULT_FONT_FAMILY, estimate_text_size, text_size

Rect = tuple[float, float, float, float]

# Candidate directions for label placement, tried in order (screen space, y down).
LABEL_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)


@dataclass(frozen=True)
class LabelLayoutConfig:
    min_spacing: float = 8.0
    label_offset: float = 18.0
    far_offset_ratio: float = 1.5
    fallback_offset_ratio: float = 2.0
    fallback_direction_deg: float = 45.0
    box_padding_x: float = 16.0
    box_padding_y: float = 10.0
    stagger_gap: float = 4.0
    measure_text: bool = True

    def __post_init__(self) -> None:
        for name in ("min_spacing", "label_offset", "box_padding_x", "box_padding_y", "stagger_gap"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite number >= 0")
        if self.far_offset_ratio <= 0 or self.fallback_offset_ratio <= 0:
            raise ValueError("offset ratios must be > 0")


@dataclass(frozen=True)
class LabelBox:
    id: str
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"label box `{self.id}` width/height must be >= 0")

    @classmethod
    def centered(cls, id: str, center: Point, width: float, height: float) -> LabelBox:
        cx, cy = center
        return cls(id=id, x=cx - width / 2.0, y=cy - height / 2.0, width=width, height=height)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def moved(self, dx: float = 0.0, dy: float = 0.0) -> LabelBox:
        return LabelBox(id=self.id, x=self.x + dx, y=self.y + dy, width=self.width, height=self.height)


@dataclass(frozen=True)
class Collision:
    first: str
    second: str
    overlap: Rect
    severity: float

    @property
    def pair(self) -> frozenset[str]:
        return frozenset((self.first, self.second))

    def involves(self, box_id: str) -> bool:
        return box_id == self.first or box_id == self.second


@dataclass(frozen=True)
class StaggeredLabel:
    id: str
    x: float
    y: float
    staggered: bool


def boxes_overlap(a: LabelBox, b: LabelBox) -> bool:
    """Closed-interval AABB test; boxes that only touch count as overlapping."""

    return not (a.right < b.x or b.right < a.x or a.bottom < b.y or b.bottom < a.y)


def overlap_rect(a: LabelBox, b: LabelBox) -> Rect | None:
    if not boxes_overlap(a, b):
        return None
    x = max(a.x, b.x)
    y = max(a.y, b.y)
    return (x, y, min(a.right, b.right) - x, min(a.bottom, b.bottom) - y)


def overlap_area(a: LabelBox, b: LabelBox) -> float:
    rect = overlap_rect(a, b)
    if rect is None:
        return 0.0
    return max(0.0, rect[2]) * max(0.0, rect[3])


def expand_box(box: LabelBox, padding: float) -> LabelBox:
    return LabelBox(
        id=box.id,
        x=box.x - padding,
        y=box.y - padding,
        width=box.width + padding * 2.0,
        height=box.height + padding * 2.0,
    )


def detect_collisions(boxes: Sequence[LabelBox], *, spacing: float = 0.0) -> list[Collision]:
    """Pairwise collisions among ``boxes``, each box grown by ``spacing / 2`` on every side.

    Severity is the overlap area relative to the larger box, capped at 1.
    """

    if spacing < 0:
        raise ValueError("spacing must be >= 0")
    grown = [expand_box(box, spacing / 2.0) for box in boxes]
    collisions: list[Collision] = []
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            rect = overlap_rect(grown[i], grown[j])
            if rect is None:
                continue
            largest = max(boxes[i].area, boxes[j].area)
            area = overlap_area(grown[i], grown[j])
            severity = min(1.0, area / largest) if largest > 0 else 1.0
            collisions.append(Collision(first=boxes[i].id, second=boxes[j].id, overlap=rect, severity=severity))
    return collisions


def colliding_pairs(boxes: Sequence[LabelBox], *, spacing: float = 0.0) -> set[frozenset[str]]:
    return {c.pair for c in detect_collisions(boxes, spacing=spacing)}


def stagger_labels(
    boxes: Sequence[LabelBox],
    *,
    offset: float | None = None,
    spacing: float = 8.0,
    gap: float = 4.0,
) -> dict[str, StaggeredLabel]:
    """Lift every odd-indexed label that takes part in a collision.

    The lift is ``offset`` when given, else the label's height plus ``gap``. This
    resolves evenly spaced neighbours only; dense irregular sets may still overlap.
    """

    involved: set[str] = set()
    for collision in detect_collisions(boxes, spacing=spacing):
        involved.update(collision.pair)
    out: dict[str, StaggeredLabel] = {}
    for i, box in enumerate(boxes):
        staggered = i % 2 == 1 and box.id in involved
        lift = offset if offset is not None else box.height + gap
        out[box.id] = StaggeredLabel(
            id=box.id,
            x=box.x,
            y=box.y - lift if staggered else box.y,
            staggered=staggered,
        )
    return out


def label_box_for_text(
    id: str,
    center: Point,
    text: str,
    font_size: float = 14.0,
    *,
    measure: bool | None = None,
    font_family: str = DEFAULT_FONT_FAMILY,
    config: LabelLayoutConfig | None = None,
) -> LabelBox:
    """Box around ``text`` centered on ``center``, padded by the layout config.

    The width comes from the Pillow font unless ``measure`` (or
    ``config.measure_text`` when ``measure`` is omitted) is false.
    """

    cfg = config if config is not None else LabelLayoutConfig()
    use_font = cfg.measure_text if measure is None else measure
    if use_font:
        text_w, _ = text_size(text, font_size, font_family)
    else:
        text_w, _ = estimate_text_size(text, font_size)
    return LabelBox.centered(id, center, text_w + cfg.box_padding_x, font_size + cfg.box_padding_y)


def _hits_any(candidate: LabelBox, existing: Sequence[LabelBox], spacing: float) -> bool:
    grown = expand_box(candidate, spacing / 2.0)
    return any(boxes_overlap(grown, expand_box(box, spacing / 2.0)) for box in existing)


def find_label_position(
    anchor: Point,
    text: str,
    existing: Sequence[LabelBox],
    *,
    preferred_direction: float | None = None,
    font_size: float = 14.0,
    font_family: str = DEFAULT_FONT_FAMILY,
    config: LabelLayoutConfig | None = None,
) -> Point:
    """Center point for a label near ``anchor`` that avoids ``existing`` boxes.

    Tries ``preferred_direction`` (degrees, math orientation) first, then eight
    compass offsets, then the same offsets further out. Falls back to a point
    twice the offset away along the preferred direction (or 45 degrees).
    """

    cfg = config if config is not None else LabelLayoutConfig()
    template = label_box_for_text("candidate", (0.0, 0.0), text, font_size, font_family=font_family, config=cfg)
    ax, ay = anchor

    def free(point: Point) -> bool:
        box = LabelBox.centered("candidate", point, template.width, template.height)
        return not _hits_any(box, existing, cfg.min_spacing)

    if preferred_direction is not None:
        rad = math.radians(preferred_direction)
        candidate = (ax + cfg.label_offset * math.cos(rad), ay - cfg.label_offset * math.sin(rad))
        if free(candidate):
            return candidate

    for scale in (1.0, cfg.far_offset_ratio):
        distance = cfg.label_offset * scale
        for dx, dy in LABEL_DIRECTIONS:
            candidate = (ax + dx * distance, ay + dy * distance)
            if free(candidate):
                return candidate

    angle = preferred_direction if preferred_direction is not None else cfg.fallback_direction_deg
    rad = math.radians(angle)
    distance = cfg.label_offset * cfg.fallback_offset_ratio
    return (ax + distance * math.cos(rad), ay - distance * math.sin(rad))
