"""Two-ring radial layout engine.

Used for context views: center-kind nodes (e.g. use cases) sit on an inner
ring, outer-kind nodes (e.g. actors) on a concentric outer ring. Nodes of any
other kind are not placed.
"""

import logging
import math
from typing import List, Sequence

from graph_layout.layout.engines.base import ConfigLike, LayoutEngine
from graph_layout.layout.geometry import (
    build_result,
    empty_result,
    index_nodes,
    straight_routes,
)
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import RadialConfig
from graph_layout.models.layout_result import LayoutResult, PositionedNode

logger = logging.getLogger(__name__)


class RadialLayoutEngine(LayoutEngine):
    """Evenly spaced rings around a fixed origin.

    Node ``i`` of ``n`` on a ring of radius ``r`` is centered at angle
    ``i * 2pi/n - pi/2``: index 0 at 12 o'clock, proceeding clockwise.
    """

    config_type = RadialConfig

    @property
    def name(self) -> str:
        return "radial"

    @property
    def supports_orthogonal_routing(self) -> bool:
        return False

    @property
    def supports_ports(self) -> bool:
        return False

    def compute(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        config: ConfigLike = None,
    ) -> LayoutResult:
        """Compute a radial layout.

        Args:
            nodes: Input nodes; only center and outer kinds are placed
            edges: Input edges, routed center to center
            config: RadialConfig or mapping of its options

        Returns:
            LayoutResult with inner ring nodes first, then outer ring nodes
        """
        cfg = RadialConfig.coerce(config)
        if not nodes:
            return empty_result(self.name)

        warnings: List[str] = []

        inner = [n for n in nodes if n.kind == cfg.center_kind]
        outer = [
            n for n in nodes
            if n.kind in cfg.outer_kinds and n.kind != cfg.center_kind
        ]

        positioned = self._place_ring(inner, cfg.radius, cfg)
        positioned.extend(self._place_ring(outer, cfg.outer_radius, cfg))

        skipped = len(nodes) - len(positioned)
        if skipped:
            logger.debug(f"{skipped} nodes are on neither ring and were not placed")

        routed = straight_routes(edges, index_nodes(positioned), warnings)

        logger.debug(
            f"Radial layout: {len(inner)} inner, {len(outer)} outer, {len(routed)} edges"
        )
        return build_result(self.name, positioned, routed, warnings)

    def _place_ring(
        self, ring: Sequence[Node], radius: float, cfg: RadialConfig
    ) -> List[PositionedNode]:
        if not ring:
            return []

        step = 2 * math.pi / len(ring)
        placed = []
        for index, node in enumerate(ring):
            angle = index * step - math.pi / 2
            width, height = node.size
            placed.append(
                PositionedNode.place(
                    node,
                    cfg.center_x + radius * math.cos(angle) - width / 2,
                    cfg.center_y + radius * math.sin(angle) - height / 2,
                    width,
                    height,
                )
            )
        return placed
