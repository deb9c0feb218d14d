"""Per-call layout configuration models.

One model per engine. All models:
- ignore unrecognized keys (a view config may carry options for other engines)
- accept snake_case or camelCase keys (``layer_spacing`` / ``layerSpacing``)
- fall back to documented defaults for anything omitted

Defaults:
    LayeredConfig:    horizontal=100, vertical=120, layer_spacing=150, iterations=8
    OrthogonalConfig: horizontal=150, vertical=80
    TreemapConfig:    padding=10 inside a 1000x1000 canvas
    RadialConfig:     radius=200, layer_distance=150 around (500, 500)
    ReingoldTilfordConfig: node_spacing=50, level_spacing=100, top-down
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

ConfigT = TypeVar("ConfigT", bound="LayoutConfig")


class LayoutConfig(BaseModel):
    """Options shared by every engine.

    Attributes:
        include_node_kinds: Keep only nodes of these kinds (empty = keep all)
        include_edge_kinds: Keep only edges of these kinds (empty = keep all)
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    include_node_kinds: List[str] = Field(
        default_factory=list, description="Node kinds kept by the view filter"
    )
    include_edge_kinds: List[str] = Field(
        default_factory=list, description="Edge kinds kept by the view filter"
    )

    @classmethod
    def coerce(
        cls: Type[ConfigT],
        value: Union[None, "LayoutConfig", Mapping[str, Any]] = None,
    ) -> ConfigT:
        """Build a config of this type from None, a mapping, or another config.

        A config of a different type is re-read through its own dump, so shared
        options carry over and engine-specific ones fall back to defaults.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, LayoutConfig):
            return cls.model_validate(value.model_dump())
        return cls.model_validate(dict(value))


class LayeredConfig(LayoutConfig):
    """Sugiyama layered layout options.

    Attributes:
        horizontal: Distance between in-layer positions
        vertical: Vertical node spacing (kept for view configs, layers use layer_spacing)
        layer_spacing: Distance between consecutive layers
        iterations: Crossing-minimization sweeps (one down + one up each)
        layer_overrides: Fixed layer per node kind
        structural_edge_kinds: Edge kinds that define the hierarchy (empty = all)
    """

    horizontal: float = Field(default=100.0, ge=0)
    vertical: float = Field(default=120.0, ge=0)
    layer_spacing: float = Field(default=150.0, ge=0)
    iterations: int = Field(default=8, ge=0)
    layer_overrides: Dict[str, int] = Field(default_factory=dict)
    structural_edge_kinds: List[str] = Field(default_factory=list)

    @field_validator("layer_overrides")
    @classmethod
    def validate_overrides(cls, v: Dict[str, int]) -> Dict[str, int]:
        """Layer overrides must be non-negative."""
        for kind, layer in v.items():
            if layer < 0:
                raise ValueError(f"Layer override for '{kind}' must be >= 0, got {layer}")
        return v

    def is_structural(self, edge_kind: str) -> bool:
        return not self.structural_edge_kinds or edge_kind in self.structural_edge_kinds


class OrthogonalConfig(LayoutConfig):
    """Orthogonal (port-based) layout options.

    Attributes:
        horizontal: Column spacing
        vertical: Row spacing
        flow_node_kinds: Node kinds rendered as ports instead of boxes
        flow_edge_kinds: Edge kinds connecting processing nodes to flow nodes
    """

    horizontal: float = Field(default=150.0, ge=0)
    vertical: float = Field(default=80.0, ge=0)
    flow_node_kinds: List[str] = Field(default_factory=lambda: ["FLOW"])
    flow_edge_kinds: List[str] = Field(default_factory=lambda: ["io"])


class TreemapConfig(LayoutConfig):
    """Squarified treemap options.

    Attributes:
        padding: Inset applied inside every container before packing children
        width: Canvas width
        height: Canvas height
        container_kinds: Node kinds that contain other nodes
        leaf_kinds: Node kinds packed into containers
        containment_edge_kinds: Container -> container edge kinds
        allocation_edge_kinds: Container <-> leaf edge kinds (either direction)
    """

    padding: float = Field(default=10.0, ge=0)
    width: float = Field(default=1000.0, gt=0)
    height: float = Field(default=1000.0, gt=0)
    container_kinds: List[str] = Field(default_factory=lambda: ["MOD"])
    leaf_kinds: List[str] = Field(default_factory=lambda: ["FUNC"])
    containment_edge_kinds: List[str] = Field(default_factory=lambda: ["compose"])
    allocation_edge_kinds: List[str] = Field(default_factory=lambda: ["allocate"])


class RadialConfig(LayoutConfig):
    """Two-ring radial layout options.

    Attributes:
        radius: Inner ring radius
        layer_distance: Gap between inner and outer ring
        center_x: Ring center x
        center_y: Ring center y
        center_kind: Node kind placed on the inner ring
        outer_kinds: Node kinds placed on the outer ring
    """

    radius: float = Field(default=200.0, ge=0)
    layer_distance: float = Field(default=150.0, ge=0)
    center_x: float = Field(default=500.0)
    center_y: float = Field(default=500.0)
    center_kind: str = Field(default="UC")
    outer_kinds: List[str] = Field(default_factory=lambda: ["ACTOR"])

    @property
    def outer_radius(self) -> float:
        return self.radius + self.layer_distance


class TreeOrientation(str, Enum):
    """Direction in which a tree grows from its roots."""

    TOP_DOWN = "top-down"
    BOTTOM_UP = "bottom-up"
    LEFT_RIGHT = "left-right"
    RIGHT_LEFT = "right-left"

    @property
    def is_vertical(self) -> bool:
        return self in (TreeOrientation.TOP_DOWN, TreeOrientation.BOTTOM_UP)


class ReingoldTilfordConfig(LayoutConfig):
    """Tidy tree layout options.

    Attributes:
        orientation: Growth direction of every tree
        node_spacing: Minimum gap between neighbouring subtrees on one level
        level_spacing: Gap between consecutive levels
        tree_edge_kinds: Parent -> child edge kinds that define the tree
    """

    orientation: TreeOrientation = Field(default=TreeOrientation.TOP_DOWN)
    node_spacing: float = Field(default=50.0, ge=0)
    level_spacing: float = Field(default=100.0, ge=0)
    tree_edge_kinds: List[str] = Field(default_factory=lambda: ["compose"])


__all__ = [
    "LayoutConfig",
    "LayeredConfig",
    "OrthogonalConfig",
    "TreemapConfig",
    "RadialConfig",
    "TreeOrientation",
    "ReingoldTilfordConfig",
]
