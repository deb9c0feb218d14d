"""Layout output schemas: positioned nodes, routed edges and bounds.

This module provides the records every layout engine returns:
- PositionedNode: input node plus x/y/width/height (and layer for layered layouts)
- PositionedEdge: input edge plus an ordered route polyline
- Bounds: tight axis-aligned box over all positioned node extents
- LayoutResult: the complete result of one ``compute()`` call

Coordinates use a top-left origin. A route is a list of (x, y) points from the
source point to the target point inclusive. An empty route means "draw
nothing between these two", never an error.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from graph_layout.models.graph import Edge, Node

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class PositionedNode(Node):
    """Node with computed geometry.

    Attributes:
        x: Left edge
        y: Top edge
        width: Rectangle width
        height: Rectangle height
        layer: Assigned layer index (layered layouts only)
    """

    x: float = Field(..., description="Left edge")
    y: float = Field(..., description="Top edge")
    width: float = Field(..., description="Rectangle width")
    height: float = Field(..., description="Rectangle height")
    layer: Optional[int] = Field(default=None, description="Layer index")

    @classmethod
    def place(
        cls,
        node: Node,
        x: float,
        y: float,
        width: float,
        height: float,
        layer: Optional[int] = None,
    ) -> "PositionedNode":
        """Derive a positioned record from an input node."""
        data = node.model_dump(exclude={"width", "height", "x", "y", "layer"})
        return cls(**data, x=x, y=y, width=width, height=height, layer=layer)

    @property
    def center(self) -> Point:
        """Center point of the node rectangle."""
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


class PositionedEdge(Edge):
    """Edge with a computed route.

    Attributes:
        points: Route polyline (>= 2 points), empty when unresolved
    """

    points: List[Point] = Field(
        default_factory=list, description="Route points, source to target"
    )

    @classmethod
    def route(cls, edge: Edge, points: Sequence[Point] = ()) -> "PositionedEdge":
        """Derive a routed record from an input edge."""
        return cls(**edge.model_dump(exclude={"points"}), points=list(points))

    @computed_field(alias="bendPoints")
    @property
    def bend_points(self) -> List[Point]:
        """Interior points of the route (empty for straight or unresolved routes)."""
        return list(self.points[1:-1])

    @property
    def is_routed(self) -> bool:
        return len(self.points) >= 2


class Bounds(BaseModel):
    """Bounding box of a layout.

    Attributes:
        width: max_x - min_x
        height: max_y - min_y
        min_x: Minimum x over node left edges
        min_y: Minimum y over node top edges
        max_x: Maximum x over node right edges
        max_y: Maximum y over node bottom edges
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    width: float = Field(default=0.0, description="Bounding box width")
    height: float = Field(default=0.0, description="Bounding box height")
    min_x: float = Field(default=0.0, description="Minimum x coordinate")
    min_y: float = Field(default=0.0, description="Minimum y coordinate")
    max_x: float = Field(default=0.0, description="Maximum x coordinate")
    max_y: float = Field(default=0.0, description="Maximum y coordinate")

    @classmethod
    def from_nodes(cls, nodes: Sequence[PositionedNode]) -> "Bounds":
        """Compute the tight box covering every node rectangle.

        Args:
            nodes: Positioned nodes

        Returns:
            Bounds; all zeros when ``nodes`` is empty
        """
        if not nodes:
            return cls()

        min_x = min(n.x for n in nodes)
        min_y = min(n.y for n in nodes)
        max_x = max(n.right for n in nodes)
        max_y = max(n.bottom for n in nodes)

        return cls(
            width=max_x - min_x,
            height=max_y - min_y,
            min_x=min_x,
            min_y=min_y,
            max_x=max_x,
            max_y=max_y,
        )


class LayoutResult(BaseModel):
    """Complete result of a layout computation.

    Attributes:
        algorithm: Engine name that produced the result
        nodes: Positioned nodes (each surviving input node exactly once)
        edges: Routed edges (each input edge exactly once, input order)
        bounds: Tight bounding box over ``nodes``
        warnings: Diagnostics for degraded elements (cycles, dangling edges)
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    algorithm: str = Field(default="", description="Layout algorithm used")
    nodes: List[PositionedNode] = Field(default_factory=list)
    edges: List[PositionedEdge] = Field(default_factory=list)
    bounds: Bounds = Field(default_factory=Bounds)
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges

    def node(self, node_id: str) -> Optional[PositionedNode]:
        """Look up a positioned node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edge_points(self) -> Dict[str, List[Point]]:
        """Route points keyed by edge identity (see ``Edge.key``)."""
        return {edge.key(i): edge.points for i, edge in enumerate(self.edges)}

    def to_dict(self) -> Dict[str, Any]:
        """Export to a JSON-ready dict with deterministic key ordering.

        Keys use the consumer contract's camelCase (``minX``, ``sourceId``).
        Node and edge order is preserved since it is meaningful (containers
        precede their children in treemap output).
        """
        data = self.model_dump(mode="json", by_alias=True)
        data["nodes"] = [dict(sorted(n.items())) for n in data["nodes"]]
        data["edges"] = [dict(sorted(e.items())) for e in data["edges"]]
        data["bounds"] = dict(sorted(data["bounds"].items()))
        return dict(sorted(data.items()))

    def apply_to_networkx_graph(self, graph) -> None:
        """Write positions back onto a NetworkX graph.

        Sets ``pos`` ([x, y] of the top-left corner), ``width``, ``height``
        and, when assigned, ``layer`` node attributes.

        Args:
            graph: NetworkX graph to update

        Note:
            Only updates nodes that exist in both the layout and the graph.
            Logs a warning for any missing nodes.
        """
        for node in self.nodes:
            if node.id not in graph.nodes:
                logger.warning(f"Layout has position for {node.id} but node not in graph")
                continue

            attrs = graph.nodes[node.id]
            attrs["pos"] = [node.x, node.y]
            attrs["width"] = node.width
            attrs["height"] = node.height
            if node.layer is not None:
                attrs["layer"] = node.layer


__all__ = [
    "Point",
    "PositionedNode",
    "PositionedEdge",
    "Bounds",
    "LayoutResult",
]
