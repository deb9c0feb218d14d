"""Sugiyama layered layout engine.

Implements the four phases of the Sugiyama framework:
1. Layer assignment (longest path, with per-kind layer overrides)
2. Crossing minimization (barycenter heuristic, alternating sweeps)
3. Coordinate assignment (grid: layer -> y, in-layer position -> x)
4. Edge routing (one straight segment per edge)

Used for general directed hierarchies (functional flow, requirement
traceability, function chains).
"""

import logging
from typing import Callable, Dict, List, Sequence

import networkx as nx

from graph_layout.layout.engines.base import ConfigLike, LayoutEngine
from graph_layout.layout.geometry import (
    build_result,
    empty_result,
    index_nodes,
    report_dangling,
)
from graph_layout.layout.layering import LayerAssignment, assign_layers, build_adjacency
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import LayeredConfig
from graph_layout.models.layout_result import LayoutResult, PositionedEdge, PositionedNode

logger = logging.getLogger(__name__)

NODE_WIDTH = 120.0
NODE_HEIGHT = 60.0

# Route anchor, measured from the node's top-left corner on both axes
ROUTE_ANCHOR_OFFSET = 60.0


class SugiyamaLayoutEngine(LayoutEngine):
    """Layered layout for directed hierarchies.

    Layers grow downward: ``y = layer * layer_spacing``. Within a layer,
    nodes are ordered to reduce crossings and placed at
    ``x = position * horizontal``. Every node is 120x60.
    """

    config_type = LayeredConfig

    @property
    def name(self) -> str:
        return "sugiyama"

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
        """Compute a layered layout.

        Args:
            nodes: Input nodes
            edges: Input edges; only structural kinds shape the layering
            config: LayeredConfig or mapping of its options

        Returns:
            LayoutResult with ``layer`` set on every node
        """
        cfg = LayeredConfig.coerce(config)
        if not nodes:
            return empty_result(self.name)

        warnings: List[str] = []

        # Phase 1: Layer assignment
        graph = build_adjacency(
            [n.id for n in nodes],
            edges,
            include=lambda e: cfg.is_structural(e.kind),
        )
        assignment = self._assign_layers(nodes, graph, cfg)
        warnings.extend(assignment.cycle_warnings())
        layers = self._group_by_layer(nodes, assignment)

        # Phase 2: Crossing minimization
        self._minimize_crossings(layers, graph, cfg.iterations)

        # Phase 3: Coordinate assignment
        positioned = self._assign_coordinates(nodes, layers, cfg)

        # Phase 4: Edge routing
        routed = self._route_edges(edges, positioned, warnings)

        logger.debug(
            f"Sugiyama layout: {len(positioned)} nodes in {len(layers)} layers, "
            f"{len(routed)} edges"
        )
        return build_result(self.name, positioned, routed, warnings)

    def _assign_layers(
        self, nodes: Sequence[Node], graph: nx.MultiDiGraph, cfg: LayeredConfig
    ) -> LayerAssignment:
        """Phase 1: longest-path layering; overrides pin a node's layer."""
        fixed = {
            node.id: cfg.layer_overrides[node.kind]
            for node in nodes
            if node.kind in cfg.layer_overrides
        }
        return assign_layers(graph, fixed)

    def _group_by_layer(
        self, nodes: Sequence[Node], assignment: LayerAssignment
    ) -> Dict[int, List[Node]]:
        """Bucket nodes per layer; initial in-layer order is input order."""
        by_id = {node.id: node for node in nodes}
        buckets = assignment.buckets(node.id for node in nodes)
        return {
            layer: [by_id[node_id] for node_id in node_ids]
            for layer, node_ids in buckets.items()
        }

    def _minimize_crossings(
        self,
        layers: Dict[int, List[Node]],
        graph: nx.MultiDiGraph,
        iterations: int,
    ) -> None:
        """Phase 2: barycenter heuristic, reordering ``layers`` in place.

        Each iteration sweeps down (order by parents in the layer above) and
        then up (order by children in the layer below).
        """
        max_layer = max(layers)

        def parents(node_id: str) -> List[str]:
            return [u for u, _ in graph.in_edges(node_id)]

        def children(node_id: str) -> List[str]:
            return [v for _, v in graph.out_edges(node_id)]

        for _ in range(iterations):
            for layer in range(1, max_layer + 1):
                if layer in layers:
                    self._order_by_barycenter(
                        layers[layer], parents, layers.get(layer - 1, [])
                    )

            for layer in range(max_layer - 1, -1, -1):
                if layer in layers:
                    self._order_by_barycenter(
                        layers[layer], children, layers.get(layer + 1, [])
                    )

    def _order_by_barycenter(
        self,
        current: List[Node],
        neighbors: Callable[[str], List[str]],
        adjacent: List[Node],
    ) -> None:
        """Sort ``current`` by mean neighbor position in ``adjacent``.

        A node without neighbors in ``adjacent`` keeps its current position
        as its sort key. The sort is stable.
        """
        positions = {node.id: index for index, node in enumerate(adjacent)}

        keyed = []
        for index, node in enumerate(current):
            found = [positions[n] for n in neighbors(node.id) if n in positions]
            barycenter = sum(found) / len(found) if found else float(index)
            keyed.append((barycenter, node))

        keyed.sort(key=lambda item: item[0])
        current[:] = [node for _, node in keyed]

    def _assign_coordinates(
        self,
        nodes: Sequence[Node],
        layers: Dict[int, List[Node]],
        cfg: LayeredConfig,
    ) -> List[PositionedNode]:
        """Phase 3: grid coordinates, returned in input order."""
        placement = {}
        for layer, members in layers.items():
            y = layer * cfg.layer_spacing
            for position, node in enumerate(members):
                placement[node.id] = (position * cfg.horizontal, y, layer)

        positioned = []
        for node in nodes:
            x, y, layer = placement[node.id]
            positioned.append(
                PositionedNode.place(node, x, y, NODE_WIDTH, NODE_HEIGHT, layer=layer)
            )
        return positioned

    def _route_edges(
        self,
        edges: Sequence[Edge],
        positioned: List[PositionedNode],
        warnings: List[str],
    ) -> List[PositionedEdge]:
        """Phase 4: one straight segment per edge, empty for dangling edges."""
        node_map = index_nodes(positioned)

        routed = []
        for edge in edges:
            source = node_map.get(edge.source_id)
            target = node_map.get(edge.target_id)

            if source is None or target is None:
                report_dangling(edge, warnings)
                routed.append(PositionedEdge.route(edge))
                continue

            routed.append(
                PositionedEdge.route(
                    edge,
                    [
                        (source.x + ROUTE_ANCHOR_OFFSET, source.y + ROUTE_ANCHOR_OFFSET),
                        (target.x + ROUTE_ANCHOR_OFFSET, target.y + ROUTE_ANCHOR_OFFSET),
                    ],
                )
            )

        return routed
