"""Longest-path layer assignment.

``layer(n) = max(layer(p) for p in parents(n)) + 1``, and 0 for nodes without
parents. Used by the layered (Sugiyama) and orthogonal engines.

Cycle policy:
    Parents are explored with an iterative three-color DFS. A parent that is
    still GRAY (on the DFS stack) closes a cycle; that parent -> child edge is
    a back-edge and is ignored for layering. Every node therefore receives a
    layer, every remaining edge satisfies layer(child) > layer(parent), and
    the broken edges are reported so callers can surface them.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import networkx as nx

from graph_layout.config.settings import is_enabled
from graph_layout.models.graph import Edge

logger = logging.getLogger(__name__)

WHITE, GRAY, BLACK = 0, 1, 2


@dataclass
class LayerAssignment:
    """Result of layer assignment.

    Attributes:
        layers: node_id -> layer index
        back_edges: (parent, child) pairs ignored to break cycles
    """
    layers: Dict[str, int] = field(default_factory=dict)
    back_edges: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def max_layer(self) -> int:
        return max(self.layers.values(), default=0)

    def buckets(self, order: Iterable[str]) -> Dict[int, List[str]]:
        """Group node IDs by layer, keeping ``order`` within each layer.

        Args:
            order: Node IDs in their input order

        Returns:
            layer -> node IDs, keys ascending
        """
        grouped: Dict[int, List[str]] = defaultdict(list)
        for node_id in order:
            grouped[self.layers.get(node_id, 0)].append(node_id)
        return dict(sorted(grouped.items()))

    def cycle_warnings(self) -> List[str]:
        return [
            f"Cycle broken at edge {parent} -> {child}; edge ignored for layering"
            for parent, child in self.back_edges
        ]


def build_adjacency(
    node_ids: Iterable[str],
    edges: Iterable[Edge],
    include: Optional[Callable[[Edge], bool]] = None,
) -> nx.MultiDiGraph:
    """Build a directed multigraph over known nodes.

    Edges whose endpoints are not both in ``node_ids`` are skipped, as are
    edges rejected by ``include``.

    Args:
        node_ids: Node IDs in input order
        edges: Candidate edges
        include: Optional edge predicate

    Returns:
        MultiDiGraph with nodes inserted in input order
    """
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(node_ids)

    for edge in edges:
        if include is not None and not include(edge):
            continue
        if edge.source_id not in graph or edge.target_id not in graph:
            continue
        graph.add_edge(edge.source_id, edge.target_id, kind=edge.kind)

    return graph


def assign_layers(
    graph: nx.MultiDiGraph,
    fixed: Optional[Dict[str, int]] = None,
) -> LayerAssignment:
    """Assign longest-path layers to every node of ``graph``.

    Args:
        graph: Adjacency from ``build_adjacency``
        fixed: node_id -> layer for nodes whose layer is pinned; their parents
            are not explored on their behalf

    Returns:
        LayerAssignment covering every node in ``graph``
    """
    assignment = LayerAssignment()
    layers = assignment.layers
    color: Dict[str, int] = {node: WHITE for node in graph.nodes}
    excluded: Dict[str, Set[str]] = defaultdict(set)

    for node_id, layer in (fixed or {}).items():
        if node_id in color:
            layers[node_id] = layer
            color[node_id] = BLACK

    for root in graph.nodes:
        if color[root] != WHITE:
            continue

        color[root] = GRAY
        stack = [(root, iter(list(graph.predecessors(root))))]

        while stack:
            node, parents = stack[-1]
            descended = False

            for parent in parents:
                state = color[parent]
                if state == WHITE:
                    color[parent] = GRAY
                    stack.append((parent, iter(list(graph.predecessors(parent)))))
                    descended = True
                    break
                if state == GRAY:
                    excluded[node].add(parent)
                    assignment.back_edges.append((parent, node))

            if descended:
                continue

            stack.pop()
            ranks = [
                layers[parent]
                for parent in graph.predecessors(node)
                if parent not in excluded[node]
            ]
            layers[node] = max(ranks) + 1 if ranks else 0
            color[node] = BLACK

    for message in assignment.cycle_warnings():
        if is_enabled('warn_on_cycles'):
            logger.warning(message)
        else:
            logger.debug(message)

    logger.debug(
        f"Assigned {len(layers)} nodes to {assignment.max_layer + 1 if layers else 0} layers"
    )
    return assignment


__all__ = [
    "LayerAssignment",
    "build_adjacency",
    "assign_layers",
]
