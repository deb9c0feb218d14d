"""Tests for the layout system as a whole.

Tests cover:
- Engine registry and unknown-engine errors
- compute_layout dispatch and view filtering
- Properties every engine shares (empty graph, bounds, determinism)
- Feature flags
"""

import logging

import pytest

from graph_layout import compute_layout
from graph_layout.config import settings
from graph_layout.layout import filter_elements
from graph_layout.layout.engines import (
    ENGINES,
    LayoutEngine,
    RadialLayoutEngine,
    SugiyamaLayoutEngine,
    UnknownLayoutEngineError,
    get_engine,
)
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import LayoutConfig


ENGINE_NAMES = ["sugiyama", "orthogonal", "treemap", "radial", "reingold-tilford"]


@pytest.fixture
def mixed_graph():
    """A small graph with something for every engine."""
    nodes = [
        Node(id="M", kind="MOD"),
        Node(id="F1", kind="FUNC"),
        Node(id="F2", kind="FUNC"),
        Node(id="D", kind="FLOW"),
        Node(id="U", kind="UC"),
        Node(id="A", kind="ACTOR"),
    ]
    edges = [
        Edge(source_id="M", target_id="F1", kind="allocate"),
        Edge(source_id="M", target_id="F2", kind="allocate"),
        Edge(source_id="F1", target_id="D", kind="io"),
        Edge(source_id="D", target_id="F2", kind="io"),
        Edge(source_id="F1", target_id="F2", kind="trigger"),
        Edge(source_id="A", target_id="U", kind="participates"),
    ]
    return nodes, edges


@pytest.fixture
def restore_flags():
    """Restore feature flags after a test changes them."""
    saved = settings.get_all_flags()
    yield
    for flag, enabled in saved.items():
        settings.set_flag(flag, enabled)


# =============================================================================
# Registry
# =============================================================================


class TestEngineRegistry:
    """Test engine lookup by name."""

    def test_all_engines_registered(self):
        """Test every algorithm and the layered alias are available."""
        assert set(ENGINES) == {
            "sugiyama", "layered", "orthogonal", "treemap", "radial", "reingold-tilford",
        }
        assert get_engine("layered") is SugiyamaLayoutEngine
        assert get_engine("radial") is RadialLayoutEngine

    @pytest.mark.parametrize("name", ENGINE_NAMES)
    def test_engine_names_match_registry(self, name):
        """Test each engine reports the name it is registered under."""
        engine = get_engine(name)()
        assert isinstance(engine, LayoutEngine)
        assert engine.name == name

    def test_unknown_engine(self):
        """Test unknown names raise with the available engines listed."""
        with pytest.raises(UnknownLayoutEngineError, match="Unknown layout engine: force"):
            get_engine("force")

    def test_unknown_engine_is_value_error(self):
        """Test the error can be caught as a ValueError."""
        with pytest.raises(ValueError) as exc_info:
            get_engine("force")
        assert "sugiyama" in exc_info.value.available


# =============================================================================
# Dispatcher and view filter
# =============================================================================


class TestViewFilter:
    """Test kind-based view filtering."""

    def test_no_filter_keeps_everything(self, mixed_graph):
        """Test empty include lists keep every element."""
        nodes, edges = mixed_graph
        kept_nodes, kept_edges = filter_elements(nodes, edges, LayoutConfig())

        assert kept_nodes == nodes
        assert kept_edges == edges

    def test_node_kinds(self, mixed_graph):
        """Test only listed node kinds are kept, with the edges between them."""
        nodes, edges = mixed_graph
        config = LayoutConfig(include_node_kinds=["FUNC"])

        kept_nodes, kept_edges = filter_elements(nodes, edges, config)

        assert [n.id for n in kept_nodes] == ["F1", "F2"]
        assert [(e.source_id, e.target_id) for e in kept_edges] == [("F1", "F2")]

    def test_dangling_input_edges_kept_without_node_filter(self):
        """Test edges to unknown nodes pass through when node kinds are not filtered."""
        nodes = [Node(id="A", kind="FUNC")]
        edges = [Edge(source_id="A", target_id="Ghost", kind="flow")]

        _, kept_edges = filter_elements(nodes, edges, LayoutConfig(include_edge_kinds=["flow"]))

        assert kept_edges == edges

    def test_edge_kinds(self, mixed_graph):
        """Test only listed edge kinds are kept."""
        nodes, edges = mixed_graph
        config = LayoutConfig(include_edge_kinds=["io"])

        _, kept_edges = filter_elements(nodes, edges, config)

        assert [e.kind for e in kept_edges] == ["io", "io"]


class TestComputeLayout:
    """Test the compute_layout entry point."""

    def test_dispatch_by_alias(self, mixed_graph):
        """Test the layered alias runs the Sugiyama engine."""
        result = compute_layout("layered", *mixed_graph)
        assert result.algorithm == "sugiyama"
        assert len(result.nodes) == 6

    def test_unknown_algorithm(self, mixed_graph):
        """Test unknown algorithms raise before any work is done."""
        with pytest.raises(UnknownLayoutEngineError):
            compute_layout("force", *mixed_graph)

    def test_filtered_view(self, mixed_graph):
        """Test edges into hidden kinds are left out of the view."""
        result = compute_layout(
            "sugiyama",
            *mixed_graph,
            config={"includeNodeKinds": ["FUNC"], "includeEdgeKinds": ["trigger", "allocate"]},
        )

        assert [n.id for n in result.nodes] == ["F1", "F2"]
        assert [e.kind for e in result.edges] == ["trigger"]
        assert result.edges[0].is_routed
        assert result.warnings == []
        assert result.node("F2").layer == 1

    def test_hidden_kinds_do_not_warn(self, caplog):
        """Test a node-kind view produces no dangling-edge diagnostics."""
        nodes = [
            Node(id="A", kind="FUNC"),
            Node(id="B", kind="FUNC"),
            Node(id="R", kind="REQ"),
        ]
        edges = [
            Edge(source_id="A", target_id="B", kind="flow"),
            Edge(source_id="R", target_id="A", kind="flow"),
        ]

        with caplog.at_level(logging.WARNING, logger="graph_layout"):
            result = compute_layout("sugiyama", nodes, edges, {"includeNodeKinds": ["FUNC"]})

        assert [n.id for n in result.nodes] == ["A", "B"]
        assert [(e.source_id, e.target_id) for e in result.edges] == [("A", "B")]
        assert result.warnings == []
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_config_object(self, mixed_graph):
        """Test an engine config instance is accepted."""
        result = compute_layout(
            "treemap", *mixed_graph, config={"padding": 0, "width": 200, "height": 100}
        )

        assert result.node("M").width == 200
        assert result.bounds.max_y == 100


# =============================================================================
# Shared properties
# =============================================================================


class TestSharedProperties:
    """Test properties every engine guarantees."""

    @pytest.mark.parametrize("name", ENGINE_NAMES)
    def test_empty_graph_law(self, name):
        """Test empty input gives a zero-valued result."""
        result = get_engine(name)().compute([], [], None)
        data = result.to_dict()

        assert data["nodes"] == []
        assert data["edges"] == []
        assert data["warnings"] == []
        assert data["bounds"] == {
            "height": 0.0,
            "maxX": 0.0,
            "maxY": 0.0,
            "minX": 0.0,
            "minY": 0.0,
            "width": 0.0,
        }

    @pytest.mark.parametrize("name", ENGINE_NAMES)
    def test_bounds_tightness(self, name, mixed_graph):
        """Test bounds equal the extremes of the node rectangles."""
        result = compute_layout(name, *mixed_graph)

        assert result.nodes
        assert result.bounds.min_x == min(n.x for n in result.nodes)
        assert result.bounds.min_y == min(n.y for n in result.nodes)
        assert result.bounds.max_x == max(n.x + n.width for n in result.nodes)
        assert result.bounds.max_y == max(n.y + n.height for n in result.nodes)
        assert result.bounds.width == pytest.approx(result.bounds.max_x - result.bounds.min_x)

    @pytest.mark.parametrize("name", ENGINE_NAMES)
    def test_every_edge_once(self, name, mixed_graph):
        """Test every input edge appears exactly once, in input order."""
        nodes, edges = mixed_graph
        result = compute_layout(name, nodes, edges)

        assert [(e.source_id, e.target_id, e.kind) for e in result.edges] == [
            (e.source_id, e.target_id, e.kind) for e in edges
        ]

    @pytest.mark.parametrize("name", ENGINE_NAMES)
    def test_nodes_placed_once(self, name, mixed_graph):
        """Test no node appears twice."""
        result = compute_layout(name, *mixed_graph)
        ids = [n.id for n in result.nodes]
        assert len(ids) == len(set(ids))

    @pytest.mark.parametrize("name", ENGINE_NAMES)
    def test_determinism(self, name, mixed_graph):
        """Test repeated runs are identical."""
        first = compute_layout(name, *mixed_graph).to_dict()
        second = compute_layout(name, *mixed_graph).to_dict()
        assert first == second

    def test_engine_is_reusable(self, mixed_graph):
        """Test one engine instance serves several graphs independently."""
        engine = SugiyamaLayoutEngine()
        nodes, edges = mixed_graph

        big = engine.compute(nodes, edges)
        small = engine.compute(nodes[:2], [])
        again = engine.compute(nodes, edges)

        assert len(small.nodes) == 2
        assert big.to_dict() == again.to_dict()


# =============================================================================
# Feature flags
# =============================================================================


class TestFeatureFlags:
    """Test diagnostic feature flags."""

    def test_defaults(self):
        """Test both diagnostics flags are known."""
        flags = settings.get_all_flags()
        assert set(flags) == {"warn_on_cycles", "warn_on_dangling_edges"}

    def test_unknown_flag(self):
        """Test unknown flags raise KeyError."""
        with pytest.raises(KeyError, match="Unknown feature flag"):
            settings.is_enabled("warn_on_everything")
        with pytest.raises(KeyError):
            settings.set_flag("warn_on_everything", True)

    def test_get_all_flags_is_copy(self):
        """Test the returned mapping does not alias the live flags."""
        flags = settings.get_all_flags()
        flags["warn_on_cycles"] = not flags["warn_on_cycles"]
        assert settings.get_all_flags() != flags

    def test_dangling_edge_logging_level(self, caplog, restore_flags):
        """Test the flag lowers dangling-edge logging to DEBUG."""
        nodes = [Node(id="A", kind="FUNC")]
        edges = [Edge(source_id="A", target_id="Ghost", kind="flow")]

        settings.set_flag("warn_on_dangling_edges", True)
        with caplog.at_level(logging.DEBUG, logger="graph_layout"):
            loud = SugiyamaLayoutEngine().compute(nodes, edges)
        loud_levels = [r.levelno for r in caplog.records if "Ghost" in r.message]
        caplog.clear()

        settings.set_flag("warn_on_dangling_edges", False)
        with caplog.at_level(logging.DEBUG, logger="graph_layout"):
            quiet = SugiyamaLayoutEngine().compute(nodes, edges)
        quiet_levels = [r.levelno for r in caplog.records if "Ghost" in r.message]

        assert loud_levels == [logging.WARNING]
        assert quiet_levels == [logging.DEBUG]
        assert loud.warnings == quiet.warnings
