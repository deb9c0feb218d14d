"""Kind-based view filtering applied before a layout runs.

A view usually shows a slice of the whole graph (only functions and flows,
only modules and functions, ...). The filter keeps nodes and edges whose
kind is listed in the config; an empty list keeps everything.

When node kinds are filtered, edges must also have both endpoints among the
kept nodes. Edges into hidden kinds are part of the view definition, not
dangling input, so they never reach the engine.
"""

import logging
from typing import List, Sequence, Tuple

from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import LayoutConfig

logger = logging.getLogger(__name__)


def filter_elements(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    config: LayoutConfig,
) -> Tuple[List[Node], List[Edge]]:
    """Apply ``include_node_kinds`` / ``include_edge_kinds``.

    Args:
        nodes: Input nodes
        edges: Input edges
        config: Any layout config

    Returns:
        Tuple of (nodes, edges) kept, in input order
    """
    kept_nodes = list(nodes)
    kept_edges = list(edges)

    if config.include_node_kinds:
        kinds = set(config.include_node_kinds)
        kept_nodes = [n for n in nodes if n.kind in kinds]
        kept_ids = {n.id for n in kept_nodes}
        kept_edges = [
            e for e in kept_edges
            if e.source_id in kept_ids and e.target_id in kept_ids
        ]

    if config.include_edge_kinds:
        kinds = set(config.include_edge_kinds)
        kept_edges = [e for e in kept_edges if e.kind in kinds]

    dropped = (len(nodes) - len(kept_nodes), len(edges) - len(kept_edges))
    if any(dropped):
        logger.debug(f"View filter dropped {dropped[0]} nodes and {dropped[1]} edges")

    return kept_nodes, kept_edges


__all__ = ["filter_elements"]
