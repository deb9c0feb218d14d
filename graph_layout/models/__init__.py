"""Data models for the layout engines.

Pydantic schemas for input elements, per-engine configuration, layout
results and orthogonal-layout ports.
"""

from .graph import (
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_WIDTH,
    Edge,
    Node,
    elements_from_networkx,
)
from .layout_config import (
    LayeredConfig,
    LayoutConfig,
    OrthogonalConfig,
    RadialConfig,
    ReingoldTilfordConfig,
    TreemapConfig,
    TreeOrientation,
)
from .layout_result import (
    Bounds,
    LayoutResult,
    Point,
    PositionedEdge,
    PositionedNode,
)
from .port_spec import (
    Port,
    PortDirection,
    PortRegistry,
    PortSide,
    distribute_ports,
)

__all__ = [
    # Input elements
    "DEFAULT_NODE_WIDTH",
    "DEFAULT_NODE_HEIGHT",
    "Node",
    "Edge",
    "elements_from_networkx",

    # Configuration
    "LayoutConfig",
    "LayeredConfig",
    "OrthogonalConfig",
    "TreemapConfig",
    "RadialConfig",
    "TreeOrientation",
    "ReingoldTilfordConfig",

    # Results
    "Point",
    "PositionedNode",
    "PositionedEdge",
    "Bounds",
    "LayoutResult",

    # Ports
    "PortSide",
    "PortDirection",
    "Port",
    "PortRegistry",
    "distribute_ports",
]
