"""Tests for the Sugiyama layered layout engine."""

import pytest

from graph_layout.layout.engines.sugiyama import SugiyamaLayoutEngine
from graph_layout.models.graph import Edge, Node
from graph_layout.models.layout_config import LayeredConfig


def func(node_id, kind="FUNC"):
    return Node(id=node_id, kind=kind)


def edge(source, target, kind="flow"):
    return Edge(source_id=source, target_id=target, kind=kind)


@pytest.fixture
def engine():
    """Create Sugiyama engine instance."""
    return SugiyamaLayoutEngine()


class TestSugiyamaEngine:
    """Test engine contract."""

    def test_engine_properties(self, engine):
        """Test engine property accessors."""
        assert engine.name == "sugiyama"
        assert engine.supports_orthogonal_routing is False
        assert engine.supports_ports is False
        assert engine.config_type is LayeredConfig

    def test_empty_graph(self, engine):
        """Test empty input gives an empty result."""
        result = engine.compute([], [])
        assert result.nodes == []
        assert result.edges == []
        assert result.bounds.width == 0
        assert result.algorithm == "sugiyama"


class TestChainLayout:
    """Test the A -> B -> C chain."""

    @pytest.fixture
    def result(self, engine):
        nodes = [func("A"), func("B"), func("C")]
        edges = [edge("A", "B"), edge("B", "C")]
        return engine.compute(nodes, edges)

    def test_layers(self, result):
        """Test consecutive layers along the chain."""
        assert [n.layer for n in result.nodes] == [0, 1, 2]

    def test_positions(self, result):
        """Test grid positions."""
        assert [(n.x, n.y) for n in result.nodes] == [(0, 0), (0, 150), (0, 300)]
        assert all((n.width, n.height) == (120, 60) for n in result.nodes)

    def test_routes(self, result):
        """Test straight two-point routes offset from node corners."""
        assert result.edges[0].points == [(60, 60), (60, 210)]
        assert result.edges[1].points == [(60, 210), (60, 360)]
        assert all(e.bend_points == [] for e in result.edges)

    def test_bounds(self, result):
        """Test bounds cover the chain."""
        assert result.bounds.min_x == 0
        assert result.bounds.max_x == 120
        assert result.bounds.max_y == 360
        assert result.warnings == []


class TestLayeredLayout:
    """Test layering options and phases."""

    def test_custom_spacing(self, engine):
        """Test spacing options drive coordinates."""
        nodes = [func("A"), func("B"), func("C")]
        edges = [edge("A", "B"), edge("A", "C")]

        result = engine.compute(nodes, edges, {"horizontal": 200, "layerSpacing": 100})

        assert result.node("B").y == 100
        assert sorted(n.x for n in result.nodes if n.layer == 1) == [0, 200]

    def test_crossing_minimization(self, engine):
        """Test barycenter ordering removes a simple crossing."""
        nodes = [func("A"), func("B"), func("C"), func("D")]
        edges = [edge("A", "D"), edge("B", "C")]

        result = engine.compute(nodes, edges)

        assert result.node("A").x == result.node("D").x == 0
        assert result.node("B").x == result.node("C").x == 100

    def test_no_iterations_keeps_input_order(self, engine):
        """Test that zero sweeps keep input order within layers."""
        nodes = [func("A"), func("B"), func("C"), func("D")]
        edges = [edge("A", "D"), edge("B", "C")]

        result = engine.compute(nodes, edges, LayeredConfig(iterations=0))

        assert result.node("C").x == 0
        assert result.node("D").x == 100

    def test_layer_overrides(self, engine):
        """Test per-kind layer overrides pin nodes."""
        nodes = [func("R", kind="REQ"), func("A"), func("B")]
        edges = [edge("A", "B")]

        result = engine.compute(nodes, edges, {"layerOverrides": {"REQ": 3}})

        assert result.node("R").layer == 3
        assert result.node("R").y == 450
        assert result.node("A").layer == 0

    def test_structural_edge_kinds(self, engine):
        """Test non-structural edges do not shape layers but are routed."""
        nodes = [func("A"), func("B")]
        edges = [edge("A", "B", kind="satisfy")]

        result = engine.compute(nodes, edges, {"structuralEdgeKinds": ["compose"]})

        assert result.node("B").layer == 0
        assert result.edges[0].points == [(60, 60), (160, 60)]

    def test_layer_monotonicity(self, engine):
        """Test every structural edge points to a deeper layer."""
        nodes = [func(n) for n in "ABCDEF"]
        edges = [
            edge("A", "B"),
            edge("A", "C"),
            edge("B", "D"),
            edge("C", "D"),
            edge("D", "E"),
            edge("A", "F"),
            edge("F", "E"),
        ]

        result = engine.compute(nodes, edges)
        layer = {n.id: n.layer for n in result.nodes}

        for e in edges:
            assert layer[e.target_id] > layer[e.source_id]

    def test_cycle_is_broken(self, engine):
        """Test cyclic input still lays out every node with a warning."""
        nodes = [func("A"), func("B"), func("C")]
        edges = [edge("A", "B"), edge("B", "C"), edge("C", "A")]

        result = engine.compute(nodes, edges)

        assert len(result.nodes) == 3
        assert len(result.warnings) == 1
        assert "Cycle broken" in result.warnings[0]
        assert all(e.is_routed for e in result.edges)

    def test_dangling_edge(self, engine):
        """Test an edge to an unknown node has an empty route."""
        nodes = [func("A"), func("B")]
        edges = [edge("A", "B"), edge("A", "Ghost")]

        result = engine.compute(nodes, edges)

        assert len(result.edges) == 2
        assert result.edges[0].is_routed
        assert result.edges[1].points == []
        assert any("Ghost" in w for w in result.warnings)

    def test_inputs_not_mutated(self, engine):
        """Test input lists are left untouched."""
        nodes = [func("B"), func("A")]
        edges = [edge("A", "B")]

        engine.compute(nodes, edges)

        assert [n.id for n in nodes] == ["B", "A"]
        assert nodes[0].model_dump() == func("B").model_dump()

    def test_deterministic(self, engine):
        """Test repeated runs give identical results."""
        nodes = [func(n) for n in "ABCDE"]
        edges = [edge("A", "C"), edge("B", "C"), edge("C", "D"), edge("B", "E")]

        first = engine.compute(nodes, edges).to_dict()
        second = engine.compute(nodes, edges).to_dict()

        assert first == second
