"""Base layout engine interface.

Defines the contract all layout engines implement. Engines share nothing but
this interface: each algorithm keeps its own private helpers.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence, Type, Union

from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import LayoutConfig
from graph_layout.models.layout_result import LayoutResult

ConfigLike = Union[None, LayoutConfig, Mapping[str, Any]]


class LayoutEngine(ABC):
    """Abstract base class for layout engines.

    Layout engines convert graph topology into positioned layouts
    with node rectangles, edge routes and overall bounds.

    ``compute`` is a pure function of its arguments: engines hold no
    per-call state, so one instance may serve concurrent callers.
    """

    #: LayoutConfig subclass this engine reads
    config_type: Type[LayoutConfig] = LayoutConfig

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name (e.g., 'sugiyama', 'treemap')."""
        ...

    @property
    @abstractmethod
    def supports_orthogonal_routing(self) -> bool:
        """Whether engine supports orthogonal (Manhattan) edge routing."""
        ...

    @property
    @abstractmethod
    def supports_ports(self) -> bool:
        """Whether engine supports port-aware layout."""
        ...

    @abstractmethod
    def compute(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        config: ConfigLike = None,
    ) -> LayoutResult:
        """Compute layout for a graph.

        Args:
            nodes: Input nodes (never mutated)
            edges: Input edges (never mutated)
            config: Engine config, a mapping of its options, or None for defaults

        Returns:
            LayoutResult with positioned nodes, routed edges and bounds
        """
        ...
