"""Squarified treemap layout engine.

Used for allocation views:
- Container nodes (e.g. MOD) nest via containment edges
- Leaf nodes (e.g. FUNC) are packed into the container they are allocated to
- Each container's area is proportional to the number of leaves below it

Rows are squarified: children are added to the current row while doing so
keeps lowering the row's worst aspect ratio, and the row is closed as soon as
the next child would not lower it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Set

from graph_layout.layout.engines.base import ConfigLike, LayoutEngine
from graph_layout.layout.geometry import (
    build_result,
    empty_result,
    index_nodes,
    straight_routes,
)
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import TreemapConfig
from graph_layout.models.layout_result import LayoutResult, PositionedNode

logger = logging.getLogger(__name__)


@dataclass
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    def inset(self, padding: float) -> "Rect":
        """Shrink by ``padding`` on every side, never below zero size."""
        pad_x = min(padding, self.width / 2)
        pad_y = min(padding, self.height / 2)
        return Rect(
            self.x + pad_x,
            self.y + pad_y,
            max(0.0, self.width - 2 * pad_x),
            max(0.0, self.height - 2 * pad_y),
        )


@dataclass
class TreemapNode:
    node: Node
    children: List["TreemapNode"] = field(default_factory=list)
    size: float = 1.0
    rect: Rect = field(default_factory=lambda: Rect(0.0, 0.0, 0.0, 0.0))


class TreemapLayoutEngine(LayoutEngine):
    """Nested rectangles from a containment forest.

    Containers are emitted before their children (pre-order) so renderers
    can paint containers as backgrounds first.
    """

    config_type = TreemapConfig

    @property
    def name(self) -> str:
        return "treemap"

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
        """Compute a treemap layout.

        Args:
            nodes: Input nodes; only containers and allocated leaves are placed
            edges: Input edges; containment/allocation kinds build the tree
            config: TreemapConfig or mapping of its options

        Returns:
            LayoutResult with containers and leaves in pre-order
        """
        cfg = TreemapConfig.coerce(config)
        if not nodes:
            return empty_result(self.name)

        warnings: List[str] = []

        forest = self._build_forest(nodes, edges, cfg, warnings)

        for root in forest:
            self._compute_size(root)

        canvas = Rect(0.0, 0.0, cfg.width, cfg.height)
        self._squarify(self._by_size(forest), canvas, cfg.padding)

        positioned = self._flatten(forest)
        routed = straight_routes(edges, index_nodes(positioned), warnings)

        logger.debug(
            f"Treemap layout: {len(forest)} roots, {len(positioned)} of "
            f"{len(nodes)} nodes placed"
        )
        return build_result(self.name, positioned, routed, warnings)

    def _build_forest(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        cfg: TreemapConfig,
        warnings: List[str],
    ) -> List[TreemapNode]:
        """Build the container hierarchy with leaves attached.

        A container with several parents stays under the first one seen.
        Allocation edges are accepted in either direction.
        """
        containers = [n for n in nodes if n.kind in cfg.container_kinds]
        container_ids = {n.id for n in containers}
        leaves = [
            n for n in nodes
            if n.kind in cfg.leaf_kinds and n.id not in container_ids
        ]
        leaf_ids = {n.id for n in leaves}

        parent_of: Dict[str, str] = {}
        for edge in edges:
            if edge.kind not in cfg.containment_edge_kinds:
                continue
            if edge.source_id not in container_ids or edge.target_id not in container_ids:
                continue
            if edge.target_id in parent_of:
                logger.debug(
                    f"Container {edge.target_id} already nested under "
                    f"{parent_of[edge.target_id]}; ignoring parent {edge.source_id}"
                )
                continue
            parent_of[edge.target_id] = edge.source_id

        allocated_to: Dict[str, str] = {}
        for edge in edges:
            if edge.kind not in cfg.allocation_edge_kinds:
                continue
            if edge.source_id in container_ids and edge.target_id in leaf_ids:
                allocated_to.setdefault(edge.target_id, edge.source_id)
            elif edge.target_id in container_ids and edge.source_id in leaf_ids:
                allocated_to.setdefault(edge.source_id, edge.target_id)

        tree = {n.id: TreemapNode(node=n) for n in containers}
        for container in containers:
            parent_id = parent_of.get(container.id)
            if parent_id is not None:
                tree[parent_id].children.append(tree[container.id])
        for leaf in leaves:
            container_id = allocated_to.get(leaf.id)
            if container_id is not None:
                tree[container_id].children.append(TreemapNode(node=leaf))

        roots = [tree[n.id] for n in containers if n.id not in parent_of]

        reachable: Set[str] = set()
        stack = list(roots)
        while stack:
            current = stack.pop()
            reachable.add(current.node.id)
            stack.extend(c for c in current.children if c.node.id in container_ids)

        orphaned = [n.id for n in containers if n.id not in reachable]
        if orphaned:
            message = f"Containers in a containment cycle were not placed: {', '.join(orphaned)}"
            warnings.append(message)
            logger.warning(message)

        unallocated = len(leaves) - sum(1 for n in leaves if n.id in allocated_to)
        if unallocated:
            logger.debug(f"{unallocated} leaf nodes have no container and were not placed")

        return roots

    def _compute_size(self, item: TreemapNode) -> float:
        """Leaf count below ``item``: 1 for leaves, max(1, sum) for containers."""
        if not item.children:
            item.size = 1.0
            return item.size

        item.size = max(1.0, sum(self._compute_size(child) for child in item.children))
        return item.size

    def _by_size(self, items: List[TreemapNode]) -> List[TreemapNode]:
        return sorted(items, key=lambda item: item.size, reverse=True)

    def _layout_children(self, item: TreemapNode, padding: float) -> None:
        """Pack ``item``'s children inside its rectangle minus padding."""
        if not item.children:
            return
        item.children = self._by_size(item.children)
        self._squarify(item.children, item.rect.inset(padding), padding)

    def _squarify(self, items: List[TreemapNode], rect: Rect, padding: float) -> None:
        """Squarified partition of ``rect`` among ``items`` (sorted descending).

        Orientation is re-evaluated for every row from the remaining
        rectangle: a wide remainder takes a column on its left, a tall one a
        row along its top.
        """
        if not items:
            return

        total = sum(item.size for item in items)
        if rect.area <= 0 or total <= 0:
            self._collapse(items, rect)
            return

        scale = rect.area / total
        remaining = Rect(rect.x, rect.y, rect.width, rect.height)
        row: List[TreemapNode] = []

        for index, item in enumerate(items):
            row.append(item)

            horizontal = remaining.width >= remaining.height
            breadth = remaining.height if horizontal else remaining.width

            is_last = index == len(items) - 1
            if not is_last:
                current = self._worst_ratio(row, breadth, scale)
                extended = self._worst_ratio(row + [items[index + 1]], breadth, scale)
                if extended < current:
                    continue

            remaining = self._layout_row(row, remaining, horizontal, breadth, scale)
            for member in row:
                self._layout_children(member, padding)
            row = []

    def _worst_ratio(self, row: List[TreemapNode], breadth: float, scale: float) -> float:
        """Worst aspect ratio of ``row`` laid along a side of length ``breadth``.

        ``length`` is the strip depth the row would take; the ratio compares
        it against ``breadth`` weighted by the largest and smallest member.
        """
        areas = [item.size * scale for item in row]
        total = sum(areas)
        if breadth <= 0 or total <= 0:
            return float("inf")

        side_sq = breadth * breadth
        length = total / breadth
        return max(
            side_sq * max(areas) / (length * length),
            (length * length) / (side_sq * min(areas)),
        )

    def _layout_row(
        self,
        row: List[TreemapNode],
        remaining: Rect,
        horizontal: bool,
        breadth: float,
        scale: float,
    ) -> Rect:
        """Place ``row`` as one strip and return what is left of ``remaining``."""
        areas = [item.size * scale for item in row]
        depth = sum(areas) / breadth if breadth > 0 else 0.0

        offset = 0.0
        for item, area in zip(row, areas):
            length = area / depth if depth > 0 else 0.0
            if horizontal:
                item.rect = Rect(remaining.x, remaining.y + offset, depth, length)
            else:
                item.rect = Rect(remaining.x + offset, remaining.y, length, depth)
            offset += length

        if horizontal:
            return Rect(
                remaining.x + depth,
                remaining.y,
                max(0.0, remaining.width - depth),
                remaining.height,
            )
        return Rect(
            remaining.x,
            remaining.y + depth,
            remaining.width,
            max(0.0, remaining.height - depth),
        )

    def _collapse(self, items: List[TreemapNode], rect: Rect) -> None:
        """Give ``items`` and their descendants a zero-size rect at ``rect``'s corner."""
        for item in items:
            item.rect = Rect(rect.x, rect.y, 0.0, 0.0)
            self._collapse(item.children, item.rect)

    def _flatten(self, roots: List[TreemapNode]) -> List[PositionedNode]:
        """Pre-order: every container precedes its children."""
        result: List[PositionedNode] = []

        def visit(item: TreemapNode) -> None:
            result.append(
                PositionedNode.place(
                    item.node,
                    item.rect.x,
                    item.rect.y,
                    item.rect.width,
                    item.rect.height,
                )
            )
            for child in item.children:
                visit(child)

        for root in roots:
            visit(root)

        return result

