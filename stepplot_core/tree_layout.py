from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterator, Mapping, Sequence

from .errors import DiagramDataError


@dataclass(frozen=True)
class TreeNode:
    id: str
    label: str = ""
    children: tuple[TreeNode, ...] = ()
    weight: float = 1.0
    probability: str | None = None

    def __post_init__(self) -> None:
        if not str(self.id).strip():
            raise ValueError("tree node id must be non-empty")
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class NodePosition:
    x: float
    y: float
    level: int
    span_start: float
    span_width: float

    @property
    def span_end(self) -> float:
        return self.span_start + self.span_width


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def subtree_weight(node: TreeNode) -> float:
    if node.is_leaf:
        return float(node.weight)
    return math.fsum(subtree_weight(child) for child in node.children)


def tree_depth(node: TreeNode) -> int:
    if node.is_leaf:
        return 1
    return 1 + max(tree_depth(child) for child in node.children)


def level_height_for(available_height: float, depth: int) -> float:
    return available_height / max(depth - 1, 1)


def layout_tree(
    root: TreeNode,
    available_width: float,
    level_height: float,
    *,
    origin: tuple[float, float] = (0.0, 0.0),
) -> dict[str, NodePosition]:
    """Place every node at the midpoint of a horizontal span proportional to its weight.

    Children split their parent's span left to right in child order with no gaps.
    The input must be a finite acyclic tree with unique ids; see ``validate_tree``.
    Leaf weights that are not positive and finite raise ``ValueError``.
    """

    for node, _ in iter_nodes(root):
        if node.is_leaf and (not math.isfinite(node.weight) or node.weight <= 0):
            raise ValueError(f"tree leaf `{node.id}` weight must be a positive finite number")

    ox, oy = origin
    positions: dict[str, NodePosition] = {}

    def place(node: TreeNode, start: float, width: float, level: int, weight: float) -> None:
        positions[node.id] = NodePosition(
            x=start + width / 2.0,
            y=oy + level * level_height,
            level=level,
            span_start=start,
            span_width=width,
        )
        if node.is_leaf:
            return
        weights = [subtree_weight(child) for child in node.children]
        cursor = start
        last = len(node.children) - 1
        for i, (child, child_weight) in enumerate(zip(node.children, weights, strict=True)):
            # The last child takes the remainder so spans tile the parent exactly.
            child_width = (start + width - cursor) if i == last else width * child_weight / weight
            place(child, cursor, child_width, level + 1, child_weight)
            cursor += child_width

    place(root, ox, float(available_width), 0, subtree_weight(root))
    return positions


def iter_nodes(root: TreeNode) -> Iterator[tuple[TreeNode, int]]:
    stack: list[tuple[TreeNode, int]] = [(root, 0)]
    while stack:
        node, level = stack.pop()
        yield node, level
        stack.extend((child, level + 1) for child in reversed(node.children))


def iter_edges(root: TreeNode) -> Iterator[tuple[TreeNode, TreeNode]]:
    for node, _ in iter_nodes(root):
        for child in node.children:
            yield node, child


def nodes_at_level(root: TreeNode, level: int) -> list[TreeNode]:
    return [node for node, lvl in iter_nodes(root) if lvl == level]


def find_path(root: TreeNode, node_id: str) -> tuple[str, ...] | None:
    """Ids from the root down to ``node_id``, or ``None`` when absent."""

    if root.id == node_id:
        return (root.id,)
    for child in root.children:
        sub = find_path(child, node_id)
        if sub is not None:
            return (root.id,) + sub
    return None


def validate_tree(root: TreeNode) -> ValidationReport:
    errors: list[str] = []
    warnings: list[str] = []
    seen: set[str] = set()
    for node, _ in iter_nodes(root):
        if node.id in seen:
            errors.append(f"Duplicate tree node id `{node.id}`")
        seen.add(node.id)
        if node.is_leaf and (not math.isfinite(node.weight) or node.weight <= 0):
            errors.append(f"Tree node `{node.id}` has non-positive weight {node.weight}")
        elif not node.is_leaf and node.weight != 1.0:
            warnings.append(f"Weight of internal node `{node.id}` is ignored")
    return ValidationReport(errors=tuple(errors), warnings=tuple(warnings))


def tree_from_dict(payload: Mapping[str, Any]) -> TreeNode:
    """Build a tree from nested mappings, rejecting payloads that reference themselves."""

    active: set[int] = set()

    def build(raw: Any, path: str) -> TreeNode:
        if not isinstance(raw, Mapping):
            raise DiagramDataError(f"tree node at {path} must be a mapping")
        marker = id(raw)
        if marker in active:
            raise DiagramDataError(f"tree payload contains a cycle at {path}")
        node_id = raw.get("id")
        if node_id is None or not str(node_id).strip():
            raise DiagramDataError(f"tree node at {path} is missing `id`")
        children_raw = raw.get("children") or ()
        if not isinstance(children_raw, Sequence) or isinstance(children_raw, (str, bytes)):
            raise DiagramDataError(f"`children` of tree node `{node_id}` must be a list")
        weight = raw.get("weight", 1.0)
        if isinstance(weight, bool) or not isinstance(weight, (int, float)):
            raise DiagramDataError(f"`weight` of tree node `{node_id}` must be a number")
        if not math.isfinite(weight) or weight <= 0:
            raise DiagramDataError(f"`weight` of tree node `{node_id}` must be positive and finite")
        probability = raw.get("probability", raw.get("value"))
        active.add(marker)
        try:
            children = tuple(build(child, f"{path}.children[{i}]") for i, child in enumerate(children_raw))
        finally:
            active.discard(marker)
        return TreeNode(
            id=str(node_id),
            label=str(raw.get("label", "")),
            children=children,
            weight=float(weight),
            probability=None if probability is None else str(probability),
        )

    return build(payload, "root")


def counting_tree(levels: Sequence[Sequence[str]], *, root_label: str = "Start") -> TreeNode:
    """Full tree with one level per option list; every path is one outcome."""

    def build(level: int, parent_id: str) -> tuple[TreeNode, ...]:
        if level >= len(levels):
            return ()
        return tuple(
            TreeNode(
                id=f"{parent_id}-{level}-{i}",
                label=option,
                children=build(level + 1, f"{parent_id}-{level}-{i}"),
            )
            for i, option in enumerate(levels[level])
        )

    return TreeNode(id="root", label=root_label, children=build(0, "root"))


def probability_tree(events: Sequence[Mapping[str, Any]], *, root_label: str = "Start") -> TreeNode:
    """Two-stage probability tree from ``{"name", "probability", "children"}`` event mappings."""

    children: list[TreeNode] = []
    for i, event in enumerate(events):
        outcomes = tuple(
            TreeNode(id=f"event-{i}-{j}", label=str(child["name"]), probability=str(child["probability"]))
            for j, child in enumerate(event.get("children") or ())
        )
        children.append(
            TreeNode(
                id=f"event-{i}",
                label=str(event["name"]),
                children=outcomes,
                probability=str(event["probability"]),
            )
        )
    return TreeNode(id="root", label=root_label, children=tuple(children))
