"""Geometry helpers shared by the layout engines."""

import logging
from typing import Dict, List, Optional, Sequence

from graph_layout.config.settings import is_enabled
from graph_layout.models.graph import Edge
from graph_layout.models.layout_result import (
    Bounds,
    LayoutResult,
    Point,
    PositionedEdge,
    PositionedNode,
)

logger = logging.getLogger(__name__)


def empty_result(algorithm: str) -> LayoutResult:
    """Zero-valued result returned for an empty input graph."""
    return LayoutResult(algorithm=algorithm, nodes=[], edges=[], bounds=Bounds())


def build_result(
    algorithm: str,
    nodes: List[PositionedNode],
    edges: List[PositionedEdge],
    warnings: Optional[List[str]] = None,
) -> LayoutResult:
    """Assemble a result, computing bounds from the positioned nodes."""
    return LayoutResult(
        algorithm=algorithm,
        nodes=nodes,
        edges=edges,
        bounds=Bounds.from_nodes(nodes),
        warnings=warnings or [],
    )


def index_nodes(nodes: Sequence[PositionedNode]) -> Dict[str, PositionedNode]:
    return {node.id: node for node in nodes}


def report_dangling(edge: Edge, warnings: List[str]) -> None:
    """Record an edge whose endpoints could not both be resolved."""
    message = f"Edge {edge.source_id} -> {edge.target_id} ({edge.kind}) has no resolvable route"
    warnings.append(message)
    if is_enabled('warn_on_dangling_edges'):
        logger.warning(message)
    else:
        logger.debug(message)


def straight_routes(
    edges: Sequence[Edge],
    node_map: Dict[str, PositionedNode],
    warnings: List[str],
) -> List[PositionedEdge]:
    """Route every edge as a single segment between node rectangle centers.

    Edges with a missing endpoint get an empty route.
    """
    routed = []
    for edge in edges:
        source = node_map.get(edge.source_id)
        target = node_map.get(edge.target_id)

        if source is None or target is None:
            report_dangling(edge, warnings)
            routed.append(PositionedEdge.route(edge))
            continue

        routed.append(PositionedEdge.route(edge, [source.center, target.center]))

    return routed


def manhattan_path(source: Point, target: Point) -> List[Point]:
    """Horizontal-vertical-horizontal path between two points.

    The vertical segment runs at the midpoint between the two x coordinates.
    """
    mid_x = (source[0] + target[0]) / 2
    return [
        (source[0], source[1]),
        (mid_x, source[1]),
        (mid_x, target[1]),
        (target[0], target[1]),
    ]


__all__ = [
    "empty_result",
    "build_result",
    "index_nodes",
    "report_dangling",
    "straight_routes",
    "manhattan_path",
]
