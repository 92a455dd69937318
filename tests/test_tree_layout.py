from __future__ import annotations

import unittest

from stepplot_core.errors import DiagramDataError
from stepplot_core.tree_layout import (
    TreeNode,
    counting_tree,
    find_path,
    iter_nodes,
    layout_tree,
    level_height_for,
    nodes_at_level,
    probability_tree,
    subtree_weight,
    tree_depth,
    tree_from_dict,
    validate_tree,
)


def _full_tree(depth: int, branching: int, prefix: str = "n") -> TreeNode:
    if depth == 1:
        return TreeNode(id=prefix)
    return TreeNode(
        id=prefix,
        children=tuple(_full_tree(depth - 1, branching, f"{prefix}.{i}") for i in range(branching)),
    )


class LayoutTreeTests(unittest.TestCase):
    def test_weighted_children_split_parent_span(self) -> None:
        root = TreeNode(id="root", children=(TreeNode(id="a", weight=1.0), TreeNode(id="b", weight=3.0)))
        positions = layout_tree(root, 120.0, 50.0)
        self.assertEqual(positions["root"].x, 60.0)
        self.assertEqual((positions["a"].span_start, positions["a"].span_end), (0.0, 30.0))
        self.assertEqual((positions["b"].span_start, positions["b"].span_end), (30.0, 120.0))
        self.assertEqual(positions["a"].x, 15.0)
        self.assertEqual(positions["b"].x, 75.0)
        self.assertEqual(positions["b"].y, 50.0)
        self.assertEqual(positions["b"].level, 1)

    def test_rejects_leaf_weights_that_cannot_split_a_span(self) -> None:
        for weights in ((0.0, 0.0), (-1.0, 3.0), (float("nan"), 1.0)):
            with self.subTest(weights=weights):
                root = TreeNode(id="root", children=tuple(TreeNode(id=f"c{i}", weight=w) for i, w in enumerate(weights)))
                with self.assertRaisesRegex(ValueError, "positive finite"):
                    layout_tree(root, 120.0, 50.0)

    def test_children_tile_parent_span_exactly(self) -> None:
        for depth in range(1, 6):
            for branching in range(1, 7):
                with self.subTest(depth=depth, branching=branching):
                    root = _full_tree(depth, branching)
                    positions = layout_tree(root, 300.0, 40.0, origin=(10.0, 5.0))
                    self.assertEqual(len(positions), sum(1 for _ in iter_nodes(root)))
                    for node, level in iter_nodes(root):
                        pos = positions[node.id]
                        self.assertAlmostEqual(pos.y, 5.0 + level * 40.0)
                        if node.is_leaf:
                            continue
                        spans = [positions[c.id] for c in node.children]
                        self.assertEqual(spans[0].span_start, pos.span_start)
                        for left, right in zip(spans, spans[1:]):
                            self.assertAlmostEqual(left.span_end, right.span_start)
                        self.assertAlmostEqual(spans[-1].span_end, pos.span_end)

    def test_single_child_chain_stays_centered(self) -> None:
        root = TreeNode(id="a", children=(TreeNode(id="b", children=(TreeNode(id="c"),)),))
        positions = layout_tree(root, 100.0, 30.0)
        self.assertEqual({pos.x for pos in positions.values()}, {50.0})
        self.assertEqual(positions["c"].y, 60.0)

    def test_depth_helpers(self) -> None:
        root = _full_tree(3, 2)
        self.assertEqual(tree_depth(root), 3)
        self.assertEqual(subtree_weight(root), 4.0)
        self.assertEqual(level_height_for(200.0, 3), 100.0)
        self.assertEqual(level_height_for(200.0, 1), 200.0)
        self.assertEqual(len(nodes_at_level(root, 2)), 4)
        self.assertEqual(find_path(root, "n.1.0"), ("n", "n.1", "n.1.0"))
        self.assertIsNone(find_path(root, "missing"))


class TreeFromDictTests(unittest.TestCase):
    def test_builds_nested_nodes(self) -> None:
        root = tree_from_dict(
            {
                "id": "r",
                "label": "Start",
                "children": [
                    {"id": "h", "label": "H", "probability": "1/2"},
                    {"id": "t", "label": "T", "value": 0.5, "weight": 2},
                ],
            }
        )
        self.assertEqual([c.id for c in root.children], ["h", "t"])
        self.assertEqual(root.children[0].probability, "1/2")
        self.assertEqual(root.children[1].probability, "0.5")
        self.assertEqual(root.children[1].weight, 2.0)

    def test_rejects_cycles(self) -> None:
        node: dict = {"id": "a", "children": []}
        node["children"].append(node)
        with self.assertRaisesRegex(DiagramDataError, "cycle"):
            tree_from_dict(node)

    def test_rejects_missing_id_and_bad_children(self) -> None:
        with self.assertRaises(DiagramDataError):
            tree_from_dict({"label": "no id"})
        with self.assertRaises(DiagramDataError):
            tree_from_dict({"id": "a", "children": "b"})
        with self.assertRaises(DiagramDataError):
            tree_from_dict({"id": "a", "weight": "heavy"})

    def test_rejects_non_positive_weights(self) -> None:
        for weight in (0, -1.5, float("inf")):
            with self.subTest(weight=weight):
                with self.assertRaisesRegex(DiagramDataError, "positive and finite"):
                    tree_from_dict({"id": "r", "children": [{"id": "a", "weight": weight}, {"id": "b"}]})


class ValidateTreeTests(unittest.TestCase):
    def test_valid_tree_is_ok(self) -> None:
        self.assertTrue(validate_tree(_full_tree(3, 3)).ok)

    def test_duplicate_ids_and_bad_weights(self) -> None:
        root = TreeNode(
            id="r",
            weight=2.0,
            children=(TreeNode(id="a"), TreeNode(id="a", weight=0.0)),
        )
        report = validate_tree(root)
        self.assertFalse(report.ok)
        self.assertTrue(any("Duplicate" in e for e in report.errors))
        self.assertTrue(any("non-positive weight" in e for e in report.errors))
        self.assertTrue(any("ignored" in w for w in report.warnings))


class TreeBuilderTests(unittest.TestCase):
    def test_counting_tree_has_one_leaf_per_outcome(self) -> None:
        root = counting_tree([["H", "T"], ["H", "T"], ["1", "2", "3"]])
        self.assertEqual(tree_depth(root), 4)
        self.assertEqual(len(nodes_at_level(root, 3)), 12)
        self.assertTrue(validate_tree(root).ok)

    def test_probability_tree_labels_edges(self) -> None:
        root = probability_tree(
            [
                {"name": "Rain", "probability": "0.3", "children": [{"name": "Late", "probability": "0.6"}]},
                {"name": "Dry", "probability": "0.7"},
            ]
        )
        self.assertEqual([c.label for c in root.children], ["Rain", "Dry"])
        self.assertEqual(root.children[0].children[0].probability, "0.6")
        self.assertTrue(root.children[1].is_leaf)


if __name__ == "__main__":
    unittest.main()
