"""Graph layout engines: layered, orthogonal, treemap, radial and tidy tree.

Example:
    from graph_layout import Edge, Node, compute_layout

    nodes = [Node(id="A", kind="FUNC"), Node(id="B", kind="FUNC")]
    edges = [Edge(source_id="A", target_id="B", kind="flow")]
    result = compute_layout("sugiyama", nodes, edges)
"""

from graph_layout.layout import (
    ENGINES,
    UnknownLayoutEngineError,
    compute_layout,
    get_engine,
)
from graph_layout.models import (
    Bounds,
    Edge,
    LayeredConfig,
    LayoutConfig,
    LayoutResult,
    Node,
    OrthogonalConfig,
    PositionedEdge,
    PositionedNode,
    RadialConfig,
    ReingoldTilfordConfig,
    TreemapConfig,
    TreeOrientation,
    elements_from_networkx,
)

__version__ = "0.1.0"

__all__ = [
    "ENGINES",
    "UnknownLayoutEngineError",
    "compute_layout",
    "get_engine",
    "Node",
    "Edge",
    "elements_from_networkx",
    "LayoutConfig",
    "LayeredConfig",
    "OrthogonalConfig",
    "TreemapConfig",
    "RadialConfig",
    "ReingoldTilfordConfig",
    "TreeOrientation",
    "PositionedNode",
    "PositionedEdge",
    "Bounds",
    "LayoutResult",
]
