"""Orthogonal layout engine with port-based connectivity.

- Flow nodes are rendered as ports on the processing nodes they connect
- Processing nodes are placed in columns, left to right, by longest path
- Flow edges are routed with 90 degree bends only (H-V-H)

Port pairing:
    A flow node F links producers (``P --io--> F``, output port on P) to
    consumers (``F --io--> C``, input port on C). A producer edge is routed
    from P's port to the first consumer's port; a consumer edge is routed
    from the first producer's port to C's port. Either edge has an empty
    route when the other side of F is missing.
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from graph_layout.layout.engines.base import ConfigLike, LayoutEngine
from graph_layout.layout.geometry import (
    build_result,
    empty_result,
    manhattan_path,
    report_dangling,
)
from graph_layout.layout.layering import assign_layers, build_adjacency
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import OrthogonalConfig
from graph_layout.models.layout_result import LayoutResult, PositionedEdge, PositionedNode
from graph_layout.models.port_spec import Port, PortDirection, PortRegistry, PortSide

logger = logging.getLogger(__name__)

NODE_WIDTH = 120.0
NODE_HEIGHT = 60.0


def extract_ports(
    processing_ids: Set[str],
    flow_ids: Set[str],
    flow_edges: Sequence[Edge],
) -> PortRegistry:
    """Build the port registry for one layout run.

    Args:
        processing_ids: IDs of nodes drawn as boxes
        flow_ids: IDs of flow nodes (become ports)
        flow_edges: Edges of the configured flow kinds, input order

    Returns:
        Registry with unplaced ports, offsets in discovery order per side
    """
    registry = PortRegistry()

    for edge in flow_edges:
        # FUNC --io--> FLOW (output port)
        if edge.target_id in flow_ids and edge.source_id in processing_ids:
            registry.add(edge.source_id, PortSide.RIGHT, PortDirection.OUTPUT, edge.target_id)

        # FLOW --io--> FUNC (input port)
        if edge.source_id in flow_ids and edge.target_id in processing_ids:
            registry.add(edge.target_id, PortSide.LEFT, PortDirection.INPUT, edge.source_id)

    logger.debug(f"Extracted {len(registry)} ports from {len(flow_edges)} flow edges")
    return registry


class OrthogonalLayoutEngine(LayoutEngine):
    """Port-based orthogonal layout, flowing left to right.

    Columns: ``x = layer * horizontal``. Rows within a column:
    ``y = row * vertical`` in input order. Every box is 120x60.
    """

    config_type = OrthogonalConfig

    @property
    def name(self) -> str:
        return "orthogonal"

    @property
    def supports_orthogonal_routing(self) -> bool:
        return True

    @property
    def supports_ports(self) -> bool:
        return True

    def compute(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        config: ConfigLike = None,
    ) -> LayoutResult:
        """Compute an orthogonal layout.

        Args:
            nodes: Input nodes; flow-kind nodes become ports and are not placed
            edges: Input edges; flow-kind edges are routed, others shape columns
            config: OrthogonalConfig or mapping of its options

        Returns:
            LayoutResult of processing nodes and every input edge
        """
        cfg = OrthogonalConfig.coerce(config)
        if not nodes:
            return empty_result(self.name)

        warnings: List[str] = []

        # Separate flow nodes from processing nodes
        flow_ids = {n.id for n in nodes if n.kind in cfg.flow_node_kinds}
        processing = [n for n in nodes if n.id not in flow_ids]
        processing_ids = {n.id for n in processing}
        flow_edges = [e for e in edges if e.kind in cfg.flow_edge_kinds]

        registry = extract_ports(processing_ids, flow_ids, flow_edges)

        # Column placement ignores flow edges
        graph = build_adjacency(
            [n.id for n in processing],
            edges,
            include=lambda e: e.kind not in cfg.flow_edge_kinds,
        )
        assignment = assign_layers(graph)
        warnings.extend(assignment.cycle_warnings())

        buckets = assignment.buckets(n.id for n in processing)
        positioned = self._position_nodes(processing, buckets, cfg)

        registry = registry.place(
            {n.id: (n.x, n.y, n.width, n.height) for n in positioned}
        )

        known_ids = processing_ids | flow_ids
        routed = [
            self._route_edge(edge, cfg, flow_ids, known_ids, registry, warnings)
            for edge in edges
        ]

        logger.debug(
            f"Orthogonal layout: {len(positioned)} nodes, {len(registry)} ports, "
            f"{sum(1 for e in routed if e.points)} routed edges"
        )
        return build_result(self.name, positioned, routed, warnings)

    def _position_nodes(
        self,
        processing: Sequence[Node],
        buckets: Dict[int, List[str]],
        cfg: OrthogonalConfig,
    ) -> List[PositionedNode]:
        """Place nodes on the column/row grid, returned in input order."""
        placement: Dict[str, Tuple[float, float]] = {}
        for layer, node_ids in buckets.items():
            x = layer * cfg.horizontal
            for row, node_id in enumerate(node_ids):
                placement[node_id] = (x, row * cfg.vertical)

        return [
            PositionedNode.place(node, *placement[node.id], NODE_WIDTH, NODE_HEIGHT)
            for node in processing
        ]

    def _route_edge(
        self,
        edge: Edge,
        cfg: OrthogonalConfig,
        flow_ids: Set[str],
        known_ids: Set[str],
        registry: PortRegistry,
        warnings: List[str],
    ) -> PositionedEdge:
        """Route one edge; only flow edges between resolvable ports get points."""
        if edge.kind not in cfg.flow_edge_kinds:
            return PositionedEdge.route(edge)

        if edge.source_id not in known_ids or edge.target_id not in known_ids:
            report_dangling(edge, warnings)
            return PositionedEdge.route(edge)

        source_port: Optional[Port] = None
        target_port: Optional[Port] = None

        if edge.target_id in flow_ids:
            source_port = registry.find(edge.source_id, PortSide.RIGHT, edge.target_id)
            target_port = _first(registry.owners(edge.target_id, PortDirection.INPUT))
        elif edge.source_id in flow_ids:
            source_port = _first(registry.owners(edge.source_id, PortDirection.OUTPUT))
            target_port = registry.find(edge.target_id, PortSide.LEFT, edge.source_id)

        if source_port is None or target_port is None:
            logger.debug(
                f"Flow edge {edge.source_id} -> {edge.target_id} has no port pair"
            )
            return PositionedEdge.route(edge)

        return PositionedEdge.route(edge, manhattan_path(source_port.point, target_port.point))


def _first(ports: List[Port]) -> Optional[Port]:
    return ports[0] if ports else None
