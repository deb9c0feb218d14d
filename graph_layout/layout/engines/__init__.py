"""Layout engines registry.

Available engines:
- sugiyama (alias: layered): longest-path layers, barycenter ordering
- orthogonal: port-based columns, Manhattan routing
- treemap: squarified nested rectangles
- radial: two concentric rings
- reingold-tilford: tidy trees and forests
"""

from typing import Dict, List, Type

from graph_layout.layout.engines.base import LayoutEngine
from graph_layout.layout.engines.orthogonal import OrthogonalLayoutEngine, extract_ports
from graph_layout.layout.engines.radial import RadialLayoutEngine
from graph_layout.layout.engines.reingold_tilford import ReingoldTilfordLayoutEngine
from graph_layout.layout.engines.sugiyama import SugiyamaLayoutEngine
from graph_layout.layout.engines.treemap import TreemapLayoutEngine

# Engine registry
ENGINES: Dict[str, Type[LayoutEngine]] = {
    "sugiyama": SugiyamaLayoutEngine,
    "layered": SugiyamaLayoutEngine,
    "orthogonal": OrthogonalLayoutEngine,
    "treemap": TreemapLayoutEngine,
    "radial": RadialLayoutEngine,
    "reingold-tilford": ReingoldTilfordLayoutEngine,
}


class UnknownLayoutEngineError(ValueError):
    """Raised when no engine is registered under the requested name."""

    def __init__(self, name: str, available: List[str]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown layout engine: {name}. Available: {available}")


def get_engine(name: str) -> Type[LayoutEngine]:
    """Get layout engine class by name.

    Args:
        name: Engine name ('sugiyama', 'layered', 'orthogonal', 'treemap', 'radial',
            'reingold-tilford')

    Returns:
        Layout engine class

    Raises:
        UnknownLayoutEngineError: If engine not found
    """
    if name not in ENGINES:
        raise UnknownLayoutEngineError(name, list(ENGINES.keys()))
    return ENGINES[name]


__all__ = [
    "LayoutEngine",
    "SugiyamaLayoutEngine",
    "OrthogonalLayoutEngine",
    "TreemapLayoutEngine",
    "RadialLayoutEngine",
    "ReingoldTilfordLayoutEngine",
    "extract_ports",
    "ENGINES",
    "UnknownLayoutEngineError",
    "get_engine",
]
