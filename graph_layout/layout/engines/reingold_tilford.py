"""Tidy tree (Reingold-Tilford) layout engine.

Used for decomposition views: parent -> child edges of the tree kinds
(e.g. ``compose``) define a forest, every other node is a one-node tree.

Each subtree keeps a contour, the leftmost and rightmost extent of every
level below its root. Siblings are pushed apart until their contours are at
least ``node_spacing`` apart on every shared level, then the parent is
centered over its first and last child. Trees of a forest sit side by side,
``2 * node_spacing`` apart.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from graph_layout.config.settings import is_enabled
from graph_layout.layout.engines.base import ConfigLike, LayoutEngine
from graph_layout.layout.geometry import (
    build_result,
    empty_result,
    index_nodes,
    straight_routes,
)
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import ReingoldTilfordConfig, TreeOrientation
from graph_layout.models.layout_result import LayoutResult, PositionedNode

logger = logging.getLogger(__name__)

# level below the subtree root -> (left, right) relative to the root's center
Contour = Dict[int, Tuple[float, float]]


@dataclass
class TreeItem:
    node: Node
    children: List["TreeItem"] = field(default_factory=list)
    depth: int = 0
    offset: float = 0.0
    cross: float = 0.0
    contour: Contour = field(default_factory=dict)


class ReingoldTilfordLayoutEngine(LayoutEngine):
    """Compact, symmetric drawings of trees and forests.

    Parents are placed before their children in the output (pre-order), and
    each node's ``layer`` is its depth in its tree.
    """

    config_type = ReingoldTilfordConfig

    @property
    def name(self) -> str:
        return "reingold-tilford"

    @property
    def supports_orthogonal_routing(self) -> bool:
        return False

    @property
    def supports_ports(self) -> bool:
        return False

    def compute(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        config: ConfigLike = None,
    ) -> LayoutResult:
        """Compute a tidy tree layout.

        Args:
            nodes: Input nodes; every node is placed
            edges: Input edges; tree kinds build the forest, all are routed
            config: ReingoldTilfordConfig or mapping of its options

        Returns:
            LayoutResult with each tree in pre-order, trees in input order
        """
        cfg = ReingoldTilfordConfig.coerce(config)
        if not nodes:
            return empty_result(self.name)

        warnings: List[str] = []
        vertical = cfg.orientation.is_vertical

        roots = self._build_forest(nodes, edges, cfg, warnings)
        ordered = self._pre_order(roots)

        for item in reversed(ordered):
            self._fit_children(item, cfg.node_spacing, vertical)

        cursor = 0.0
        for root in roots:
            root.cross = cursor - min(left for left, _ in root.contour.values())
            cursor = root.cross + max(right for _, right in root.contour.values())
            cursor += 2 * cfg.node_spacing

        for item in ordered:
            for child in item.children:
                child.cross = item.cross + child.offset

        positioned = self._place(ordered, cfg, vertical)
        routed = straight_routes(edges, index_nodes(positioned), warnings)

        logger.debug(
            f"Tree layout: {len(roots)} trees, {len(positioned)} nodes, "
            f"depth {max(item.depth for item in ordered)}"
        )
        return build_result(self.name, positioned, routed, warnings)

    def _build_forest(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        cfg: ReingoldTilfordConfig,
        warnings: List[str],
    ) -> List[TreeItem]:
        """Link nodes along tree edges; the first parent seen wins.

        An edge that would close a cycle is left out of the tree and reported.
        """
        items = {n.id: TreeItem(node=n) for n in nodes}
        parent_of: Dict[str, str] = {}

        for edge in edges:
            if edge.kind not in cfg.tree_edge_kinds:
                continue
            if edge.source_id not in items or edge.target_id not in items:
                continue

            if edge.target_id in parent_of:
                self._report(
                    f"Node {edge.target_id} already has parent "
                    f"{parent_of[edge.target_id]}; tree edge from "
                    f"{edge.source_id} ignored",
                    warnings,
                )
                continue

            ancestor = edge.source_id
            while ancestor is not None and ancestor != edge.target_id:
                ancestor = parent_of.get(ancestor)
            if ancestor is not None:
                self._report(
                    f"Tree edge {edge.source_id} -> {edge.target_id} closes a "
                    f"cycle and was ignored",
                    warnings,
                )
                continue

            parent_of[edge.target_id] = edge.source_id
            items[edge.source_id].children.append(items[edge.target_id])

        return [items[n.id] for n in nodes if n.id not in parent_of]

    def _report(self, message: str, warnings: List[str]) -> None:
        warnings.append(message)
        if is_enabled('warn_on_cycles'):
            logger.warning(message)
        else:
            logger.debug(message)

    def _pre_order(self, roots: List[TreeItem]) -> List[TreeItem]:
        """Flatten the forest parent-first, assigning depths on the way."""
        ordered: List[TreeItem] = []
        for root in roots:
            stack = [root]
            while stack:
                item = stack.pop()
                ordered.append(item)
                for child in reversed(item.children):
                    child.depth = item.depth + 1
                    stack.append(child)
        return ordered

    def _fit_children(self, item: TreeItem, spacing: float, vertical: bool) -> None:
        """Pack ``item``'s child subtrees and derive its own contour.

        Children must already carry their contours.
        """
        width, height = item.node.size
        half = (width if vertical else height) / 2
        item.contour = {0: (-half, half)}
        if not item.children:
            return

        merged: Contour = dict(item.children[0].contour)
        positions = [0.0]

        for child in item.children[1:]:
            shift = max(
                merged[level][1] - left + spacing
                for level, (left, _) in child.contour.items()
                if level in merged
            )
            positions.append(shift)
            for level, (left, right) in child.contour.items():
                if level in merged:
                    merged[level] = (
                        min(merged[level][0], left + shift),
                        max(merged[level][1], right + shift),
                    )
                else:
                    merged[level] = (left + shift, right + shift)

        center = (positions[0] + positions[-1]) / 2
        for child, position in zip(item.children, positions):
            child.offset = position - center
        for level, (left, right) in merged.items():
            item.contour[level + 1] = (left - center, right - center)

    def _place(
        self,
        ordered: List[TreeItem],
        cfg: ReingoldTilfordConfig,
        vertical: bool,
    ) -> List[PositionedNode]:
        """Map (cross, depth) to rectangles for the configured orientation."""
        extents = [
            item.node.size[1] if vertical else item.node.size[0]
            for item in ordered
        ]
        level_extent = max(extents)
        level_step = level_extent + cfg.level_spacing
        total = max(item.depth for item in ordered) * level_step + level_extent
        flipped = cfg.orientation in (
            TreeOrientation.BOTTOM_UP,
            TreeOrientation.RIGHT_LEFT,
        )

        placed = []
        for item in ordered:
            main = item.depth * level_step + level_extent / 2
            if flipped:
                main = total - main

            cx, cy = (item.cross, main) if vertical else (main, item.cross)
            width, height = item.node.size
            placed.append(
                PositionedNode.place(
                    item.node,
                    cx - width / 2,
                    cy - height / 2,
                    width,
                    height,
                    layer=item.depth,
                )
            )
        return placed
