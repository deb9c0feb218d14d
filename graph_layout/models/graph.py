"""Input graph elements for the layout engines.

Nodes and edges are the immutable inputs every layout engine consumes. The
engines never mutate them; they derive ``PositionedNode``/``PositionedEdge``
records instead (see ``layout_result.py``).

The ``kind`` tag is an open string taxonomy. Engines only branch on the kinds
their configuration names explicitly (flow nodes, container nodes, hierarchy
edges, ...), everything else passes through untouched.

Upstream Integration:
    Graph-model layers that already hold a NetworkX graph can use
    ``elements_from_networkx`` instead of building node/edge lists by hand.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

DEFAULT_NODE_WIDTH = 120.0
DEFAULT_NODE_HEIGHT = 60.0


class Node(BaseModel):
    """A typed graph node.

    Attributes:
        id: Stable node identity (semantic ID)
        kind: Node type tag (e.g. 'FUNC', 'FLOW', 'MOD')
        label: Free-form display label
        width: Optional preferred width (default 120)
        height: Optional preferred height (default 60)
        attributes: Upstream-specific data, carried through unchanged
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str = Field(..., description="Stable node identity")
    kind: str = Field(..., description="Node type tag")
    label: str = Field(default="", description="Display label")
    width: Optional[float] = Field(default=None, description="Preferred width")
    height: Optional[float] = Field(default=None, description="Preferred height")
    attributes: Dict[str, Any] = Field(
        default_factory=dict, description="Upstream-specific attributes"
    )

    @property
    def size(self) -> Tuple[float, float]:
        """Node size, falling back to the 120x60 default."""
        return (
            self.width if self.width is not None else DEFAULT_NODE_WIDTH,
            self.height if self.height is not None else DEFAULT_NODE_HEIGHT,
        )


class Edge(BaseModel):
    """A typed, directed graph edge.

    Attributes:
        source_id: Source node ID (alias ``sourceId``)
        target_id: Target node ID (alias ``targetId``)
        kind: Edge type tag (e.g. 'compose', 'io', 'allocate')
        id: Optional edge identity
        label: Optional display label
        attributes: Upstream-specific data, carried through unchanged
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    source_id: str = Field(..., description="Source node ID")
    target_id: str = Field(..., description="Target node ID")
    kind: str = Field(..., description="Edge type tag")
    id: Optional[str] = Field(default=None, description="Edge identity")
    label: Optional[str] = Field(default=None, description="Display label")
    attributes: Dict[str, Any] = Field(
        default_factory=dict, description="Upstream-specific attributes"
    )

    def key(self, index: int) -> str:
        """Identity used when edges are keyed in exports.

        Args:
            index: Position of the edge in its input list

        Returns:
            The explicit edge ID, or ``source->target#index``
        """
        if self.id:
            return self.id
        return f"{self.source_id}->{self.target_id}#{index}"


def elements_from_networkx(
    graph: nx.DiGraph,
    kind_attr: str = "kind",
) -> Tuple[List[Node], List[Edge]]:
    """Convert a NetworkX graph into layout input elements.

    Node kind is read from ``kind_attr`` and falls back to ``type``. Edge kind
    follows the same rule. Attributes that do not map onto a model field are
    kept in ``attributes``.

    Args:
        graph: NetworkX DiGraph or MultiDiGraph
        kind_attr: Attribute name holding the kind tag

    Returns:
        Tuple of (nodes, edges) in graph iteration order
    """
    nodes: List[Node] = []
    for node_id, attrs in graph.nodes(data=True):
        kind = attrs.get(kind_attr, attrs.get("type", ""))
        extra = {
            k: v for k, v in attrs.items()
            if k not in (kind_attr, "type", "label", "width", "height")
        }
        nodes.append(
            Node(
                id=str(node_id),
                kind=str(kind),
                label=str(attrs.get("label", node_id)),
                width=attrs.get("width"),
                height=attrs.get("height"),
                attributes=extra,
            )
        )

    if graph.is_multigraph():
        edge_iter = (
            (u, v, attrs) for u, v, _key, attrs in graph.edges(keys=True, data=True)
        )
    else:
        edge_iter = graph.edges(data=True)

    edges: List[Edge] = []
    for source, target, attrs in edge_iter:
        kind = attrs.get(kind_attr, attrs.get("type", ""))
        extra = {
            k: v for k, v in attrs.items()
            if k not in (kind_attr, "type", "id", "label")
        }
        edges.append(
            Edge(
                source_id=str(source),
                target_id=str(target),
                kind=str(kind),
                id=attrs.get("id"),
                label=attrs.get("label"),
                attributes=extra,
            )
        )

    logger.debug(f"Converted NetworkX graph: {len(nodes)} nodes, {len(edges)} edges")
    return nodes, edges


__all__ = [
    "DEFAULT_NODE_WIDTH",
    "DEFAULT_NODE_HEIGHT",
    "Node",
    "Edge",
    "elements_from_networkx",
]
