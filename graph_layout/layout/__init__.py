"""Layout module for automatic graph positioning.

This module provides:
- Layout engine abstraction (LayoutEngine)
- Five engines: layered (Sugiyama), orthogonal, treemap, radial and tidy tree
- ``compute_layout``: look up an engine by name, filter the view, run it

Coordinates use a top-left origin. Every engine is synchronous and
deterministic; one engine instance may be shared between threads.
"""

import logging
from typing import Sequence

from graph_layout.layout.engines import (
    ENGINES,
    LayoutEngine,
    UnknownLayoutEngineError,
    get_engine,
)
from graph_layout.layout.engines.base import ConfigLike
from graph_layout.layout.view_filter import filter_elements
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_result import LayoutResult

logger = logging.getLogger(__name__)


def compute_layout(
    algorithm: str,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: ConfigLike = None,
) -> LayoutResult:
    """Run one layout engine over a filtered view of the graph.

    Args:
        algorithm: Registered engine name (see ``ENGINES``)
        nodes: Input nodes
        edges: Input edges
        config: Engine config, a mapping of its options, or None for defaults

    Returns:
        LayoutResult from the selected engine

    Raises:
        UnknownLayoutEngineError: If ``algorithm`` is not registered
        pydantic.ValidationError: If ``config`` holds wrongly typed options
    """
    engine = get_engine(algorithm)()
    cfg = engine.config_type.coerce(config)

    view_nodes, view_edges = filter_elements(nodes, edges, cfg)
    logger.info(
        f"Computing {engine.name} layout for {len(view_nodes)} nodes, "
        f"{len(view_edges)} edges"
    )

    result = engine.compute(view_nodes, view_edges, cfg)
    if result.warnings:
        logger.info(f"{engine.name} layout finished with {len(result.warnings)} warnings")
    return result


__all__ = [
    "ENGINES",
    "LayoutEngine",
    "UnknownLayoutEngineError",
    "compute_layout",
    "filter_elements",
    "get_engine",
]
