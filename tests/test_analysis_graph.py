"""Tests for analysis.graph module cycle detection.

Tests the arena-indexed FiniteGraph, the three-color DFS cycle search,
cycle validation, and the structural theorem helper find_cycle_total.
"""

from __future__ import annotations

import logging

import pytest
from hypothesis import event, given, settings

from phaserlock.analysis import graph as graph_module
from phaserlock.analysis.graph import (
    Cycle,
    FiniteGraph,
    find_cycle,
    find_cycle_total,
    render_edges,
    validate_cycle,
)
from phaserlock.diagnostics import DiagnosticCode
from phaserlock.integrity import EngineInvariantViolationError
from tests.strategies.graph import (
    acyclic_edge_lists,
    cycle_paths,
    edge_lists,
    total_graphs,
)

# ============================================================================
# UNIT TESTS - FINITE GRAPH
# ============================================================================


class TestFiniteGraph:
    """Unit tests for FiniteGraph construction and queries."""

    def test_empty_graph(self) -> None:
        """Empty edge list yields no vertices and no edges."""
        g: FiniteGraph[str] = FiniteGraph()
        assert g.vertices == ()
        assert g.edges == ()
        assert len(g) == 0
        assert not g.is_total()

    def test_vertices_in_first_appearance_order(self) -> None:
        """Vertices are numbered source-then-target in edge order."""
        g = FiniteGraph([("c", "a"), ("b", "c"), ("a", "d")])
        assert g.vertices == ("c", "a", "b", "d")

    def test_successors_follow_edge_order(self) -> None:
        """Successors are listed in edge-list order, duplicates kept."""
        g = FiniteGraph([("a", "c"), ("a", "b"), ("a", "c")])
        assert g.successors("a") == ("c", "b", "c")
        assert g.out_degree("a") == 3
        assert len(g) == 3

    def test_unknown_vertex_queries(self) -> None:
        """Vertices outside the graph have no successors."""
        g = FiniteGraph([("a", "b")])
        assert g.successors("z") == ()
        assert g.out_degree("z") == 0
        assert not g.has_edge("z", "a")
        assert not g.has_edge("a", "z")
        assert "z" not in g

    def test_sink_vertex_has_zero_out_degree(self) -> None:
        """Target-only vertices are members with out-degree 0."""
        g = FiniteGraph([("a", "b")])
        assert "b" in g
        assert g.out_degree("b") == 0
        assert not g.is_total()

    def test_is_total_with_self_loop(self) -> None:
        """Single self-loop satisfies the no-sink precondition."""
        assert FiniteGraph([("a", "a")]).is_total()

    def test_induced_subgraph(self) -> None:
        """Induced keeps only edges with both endpoints selected."""
        g = FiniteGraph([("a", "b"), ("b", "c"), ("c", "a"), ("b", "a")])
        sub = g.induced(["a", "b"])
        assert sub.edges == (("a", "b"), ("b", "a"))

    def test_deduplicated_keeps_first_occurrence(self) -> None:
        """Parallel edges collapse to their first occurrence."""
        g = FiniteGraph([("a", "b"), ("b", "a"), ("a", "b")])
        assert g.deduplicated().edges == (("a", "b"), ("b", "a"))
        assert g.deduplicated().vertices == g.vertices

    def test_equality_and_hash_by_edges(self) -> None:
        """Graphs compare by edge sequence."""
        first = FiniteGraph([("a", "b")])
        second = FiniteGraph(iter([("a", "b")]))
        assert first == second
        assert hash(first) == hash(second)
        assert first != FiniteGraph([("b", "a")])
        assert first.__eq__("not a graph") is NotImplemented

    def test_repr(self) -> None:
        """Repr reports vertex and edge counts."""
        g = FiniteGraph([("a", "b"), ("a", "b")])
        assert repr(g) == "FiniteGraph(vertices=2, edges=2)"

    def test_non_string_vertices(self) -> None:
        """Any hashable works as a vertex."""
        g = FiniteGraph([(1, (2, "x")), ((2, "x"), 1)])
        assert g.is_total()
        assert g.successors(1) == ((2, "x"),)


# ============================================================================
# UNIT TESTS - CYCLE
# ============================================================================


class TestCycle:
    """Unit tests for the Cycle value type."""

    def test_members_and_length(self) -> None:
        """Members drop the closing repeat; length counts edges."""
        c = Cycle(("A", "B", "C", "A"))
        assert c.members == ("A", "B", "C")
        assert len(c) == 3
        assert list(c.edges()) == [("A", "B"), ("B", "C"), ("C", "A")]

    def test_self_loop(self) -> None:
        """Self-loop is a cycle of length 1."""
        c = Cycle(("A", "A"))
        assert len(c) == 1
        assert c.members == ("A",)

    def test_str_uses_arrows(self) -> None:
        """Text form joins vertices with arrows."""
        assert str(Cycle(("A", "B", "A"))) == "A -> B -> A"

    def test_rejects_single_vertex(self) -> None:
        """A cycle needs at least one edge."""
        with pytest.raises(ValueError, match="at least one edge"):
            Cycle(("A",))

    def test_rejects_open_walk(self) -> None:
        """First and last vertex must match."""
        with pytest.raises(ValueError, match="end where it starts"):
            Cycle(("A", "B"))

    def test_generic_over_vertex_type(self) -> None:
        """Cycle is parameterized by its vertex type, like FiniteGraph."""
        assert len(Cycle.__type_params__) == 1
        c = Cycle[int]((1, 2, 1))
        assert c.members == (1, 2)
        found = find_cycle(FiniteGraph([(1, 2), (2, 1)]))
        assert found == c


# ============================================================================
# UNIT TESTS - CYCLE DETECTION
# ============================================================================


class TestFindCycleBasic:
    """Basic unit tests for find_cycle."""

    def test_empty_graph_no_cycle(self) -> None:
        """Empty graph has no cycle."""
        assert find_cycle(FiniteGraph()) is None

    def test_linear_chain_no_cycle(self) -> None:
        """Linear chain A -> B -> C has no cycle."""
        assert find_cycle(FiniteGraph([("A", "B"), ("B", "C")])) is None

    def test_diamond_no_cycle(self) -> None:
        """Diamond shape shares a DONE vertex without forming a cycle."""
        g = FiniteGraph([("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")])
        assert find_cycle(g) is None

    def test_self_loop(self) -> None:
        """Self-loop is found as a length-1 cycle."""
        assert find_cycle(FiniteGraph([("A", "A")])) == Cycle(("A", "A"))

    def test_two_node_cycle(self) -> None:
        """Mutual wait is a length-2 cycle starting at the first vertex."""
        assert find_cycle(FiniteGraph([("A", "B"), ("B", "A")])) == Cycle(("A", "B", "A"))

    def test_cycle_reached_through_tail(self) -> None:
        """Only the path suffix from the revisited vertex is reported."""
        g = FiniteGraph([("X", "A"), ("A", "B"), ("B", "C"), ("C", "A")])
        assert find_cycle(g) == Cycle(("A", "B", "C", "A"))

    def test_tie_break_by_edge_order(self) -> None:
        """Among several cycles, edge-list order decides which one is returned."""
        first = FiniteGraph([("A", "B"), ("A", "C"), ("B", "A"), ("C", "A")])
        second = FiniteGraph([("A", "C"), ("A", "B"), ("B", "A"), ("C", "A")])
        assert find_cycle(first) == Cycle(("A", "B", "A"))
        assert find_cycle(second) == Cycle(("A", "C", "A"))

    def test_cycle_in_later_component(self) -> None:
        """Roots are retried until a component with a cycle is reached."""
        g = FiniteGraph([("A", "B"), ("C", "D"), ("D", "C")])
        assert find_cycle(g) == Cycle(("C", "D", "C"))

    def test_long_chain_no_recursion_error(self) -> None:
        """Iterative DFS handles chains far deeper than the recursion limit."""
        n = 5000
        edges = [(i, i + 1) for i in range(n)]
        edges.append((n, 0))
        cycle = find_cycle(FiniteGraph(edges))
        assert cycle is not None
        assert len(cycle) == n + 1


class TestValidateCycle:
    """Tests for validate_cycle engine checks."""

    def test_valid_cycle_passes(self) -> None:
        """A closed simple walk over graph edges is accepted."""
        g = FiniteGraph([("A", "B"), ("B", "A")])
        validate_cycle(g, Cycle(("A", "B", "A")))

    def test_repeated_vertex_rejected(self, caplog: pytest.LogCaptureFixture) -> None:
        """A walk revisiting a vertex before closing is not simple."""
        g = FiniteGraph([("A", "B"), ("B", "A")])
        with (
            caplog.at_level(logging.ERROR, logger="phaserlock.analysis.graph"),
            pytest.raises(EngineInvariantViolationError) as exc_info,
        ):
            validate_cycle(g, Cycle(("A", "B", "A", "B", "A")))

        error = exc_info.value
        assert error.diagnostic is not None
        assert error.diagnostic.code == DiagnosticCode.CYCLE_INVALID
        assert "repeated" in str(error)
        assert error.edges == g.edges
        assert error.context is not None
        assert error.context.operation == "validate_cycle"
        assert "Engine invariant violated during validate_cycle" in caplog.text

    def test_missing_edge_rejected(self) -> None:
        """Every consecutive pair must be a graph edge."""
        g = FiniteGraph([("A", "B"), ("B", "C")])
        with pytest.raises(EngineInvariantViolationError, match="not in graph"):
            validate_cycle(g, Cycle(("A", "B", "A")))


class TestFindCycleTotal:
    """Tests for the structural theorem helper."""

    def test_returns_validated_cycle(self) -> None:
        """A graph with no sink vertex yields a cycle."""
        g = FiniteGraph([("A", "B"), ("B", "C"), ("C", "B")])
        assert find_cycle_total(g) == Cycle(("B", "C", "B"))

    def test_rejects_graph_with_sink(self) -> None:
        """Precondition failure is a caller error, not an engine defect."""
        with pytest.raises(ValueError, match="no sink vertices"):
            find_cycle_total(FiniteGraph([("A", "B")]))

    def test_rejects_empty_graph(self) -> None:
        """Empty graph does not satisfy the precondition."""
        with pytest.raises(ValueError, match="no sink vertices"):
            find_cycle_total(FiniteGraph())

    def test_missing_cycle_is_engine_violation(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """If DFS misses the guaranteed cycle, an engine violation is raised."""
        monkeypatch.setattr(graph_module, "find_cycle", lambda _graph: None)
        g = FiniteGraph([("A", "B"), ("B", "A")])

        with (
            caplog.at_level(logging.ERROR, logger="phaserlock.analysis.graph"),
            pytest.raises(EngineInvariantViolationError) as exc_info,
        ):
            find_cycle_total(g)

        error = exc_info.value
        assert error.diagnostic is not None
        assert error.diagnostic.code == DiagnosticCode.CYCLE_NOT_FOUND
        assert error.edges == (("A", "B"), ("B", "A"))
        assert error.context is not None
        assert error.context.vertex_count == 2
        assert error.context.edge_count == 2
        assert "'A' -> 'B'" in caplog.text


class TestRenderEdges:
    """Tests for log rendering of edge lists."""

    def test_renders_all_edges(self) -> None:
        """Edges are rendered with reprs and arrows."""
        assert render_edges([("a", "b"), (1, 2)]) == "['a' -> 'b', 1 -> 2]"

    def test_truncates_after_limit(self) -> None:
        """Edges past the limit are elided."""
        rendered = render_edges([(i, i + 1) for i in range(10)], limit=2)
        assert rendered == "[0 -> 1, 1 -> 2, ...]"


# ============================================================================
# PROPERTY-BASED TESTS
# ============================================================================


class TestFindCycleProperties:
    """Property-based tests for cycle detection."""

    @given(edges=edge_lists())
    @settings(max_examples=200)
    def test_found_cycle_is_valid(self, edges: list[tuple[str, str]]) -> None:
        """PROPERTY: any cycle returned is a closed simple walk of the graph."""
        g = FiniteGraph(edges)
        cycle = find_cycle(g)
        event(f"outcome={'cycle' if cycle else 'acyclic'}")
        if cycle is not None:
            assert cycle.vertices[0] == cycle.vertices[-1]
            assert len(set(cycle.members)) == len(cycle.members)
            for source, target in cycle.edges():
                assert g.has_edge(source, target)

    @given(edges=acyclic_edge_lists())
    @settings(max_examples=100)
    def test_dag_has_no_cycle(self, edges: list[tuple[str, str]]) -> None:
        """PROPERTY: graphs ordered by a topological index are acyclic."""
        assert find_cycle(FiniteGraph(edges)) is None

    @given(edges=total_graphs())
    @settings(max_examples=200)
    def test_structural_theorem(self, edges: list[tuple[str, str]]) -> None:
        """PROPERTY: every nonempty graph with no sink vertex has a cycle."""
        g = FiniteGraph(edges)
        assert g.is_total()
        cycle = find_cycle_total(g)
        event(f"cycle_len={len(cycle)}")
        assert len(cycle) >= 1

    @given(edges=edge_lists())
    @settings(max_examples=100)
    def test_deterministic(self, edges: list[tuple[str, str]]) -> None:
        """PROPERTY: the same edge list always yields the same cycle."""
        assert find_cycle(FiniteGraph(edges)) == find_cycle(FiniteGraph(edges))

    @given(edges=edge_lists())
    @settings(max_examples=100)
    def test_dedup_preserves_acyclicity(self, edges: list[tuple[str, str]]) -> None:
        """PROPERTY: removing parallel edges never creates or removes cycles."""
        g = FiniteGraph(edges)
        assert (find_cycle(g) is None) == (find_cycle(g.deduplicated()) is None)

    @given(path=cycle_paths())
    @settings(max_examples=100)
    def test_planted_cycle_is_found(self, path: list[str]) -> None:
        """PROPERTY: a graph consisting of one cycle returns exactly that cycle."""
        g = FiniteGraph(zip(path, path[1:], strict=False))
        cycle = find_cycle(g)
        assert cycle is not None
        assert cycle.vertices == tuple(path)
