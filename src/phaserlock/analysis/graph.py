"""Finite directed graphs and cycle detection.

Provides an arena-indexed edge-list graph and cycle detection using
iterative depth-first search. The engine is generic over the vertex type;
the wait-for graph instantiates it with task identifiers.

Structural theorem reproduced by ``find_cycle_total``: a finite graph with
at least one edge, in which every vertex has an outgoing edge, contains a
cycle (a DFS path longer than the vertex count must repeat a vertex).

Python 3.13+.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from phaserlock.constants import CYCLE_ARROW, MAX_LOGGED_EDGES
from phaserlock.diagnostics import Diagnostic, ErrorTemplate
from phaserlock.integrity import EngineInvariantViolationError, IntegrityContext

__all__ = [
    "Cycle",
    "FiniteGraph",
    "engine_violation",
    "find_cycle",
    "find_cycle_total",
    "render_edges",
    "validate_cycle",
]

logger = logging.getLogger(__name__)


class _Color(Enum):
    """DFS vertex visitation state."""

    UNVISITED = auto()
    ON_STACK = auto()  # On the current DFS path
    DONE = auto()  # All successors exhausted


class FiniteGraph[V: Hashable]:
    """Directed graph stored as an ordered edge list.

    Vertex membership is derived: a vertex exists iff it appears in some
    edge. Vertices are numbered in first-appearance order and successors
    are kept as integer adjacency lists in edge-list order, so traversal
    order is fully determined by the edge order the caller supplied.

    Duplicate edges are permitted and preserved; ``deduplicated()`` returns
    an equivalent graph without them.

    Thread Safety:
        Immutable after construction.

    Example:
        >>> g = FiniteGraph([("a", "b"), ("b", "a")])
        >>> g.vertices
        ('a', 'b')
        >>> g.successors("a")
        ('b',)
        >>> g.is_total()
        True
    """

    __slots__ = ("_adjacency", "_edges", "_index", "_vertices")

    _edges: tuple[tuple[V, V], ...]
    _vertices: tuple[V, ...]
    _index: dict[V, int]
    _adjacency: tuple[tuple[int, ...], ...]

    def __init__(self, edges: Iterable[tuple[V, V]] = ()) -> None:
        """Build the arena index from an edge list.

        Args:
            edges: (source, target) pairs, in traversal order
        """
        edge_list = tuple((source, target) for source, target in edges)
        index: dict[V, int] = {}
        vertices: list[V] = []
        adjacency: list[list[int]] = []

        for source, target in edge_list:
            for vertex in (source, target):
                if vertex not in index:
                    index[vertex] = len(vertices)
                    vertices.append(vertex)
                    adjacency.append([])
            adjacency[index[source]].append(index[target])

        self._edges = edge_list
        self._vertices = tuple(vertices)
        self._index = index
        self._adjacency = tuple(tuple(targets) for targets in adjacency)

    @property
    def edges(self) -> tuple[tuple[V, V], ...]:
        """Edges in insertion order (duplicates kept)."""
        return self._edges

    @property
    def vertices(self) -> tuple[V, ...]:
        """Vertices in first-appearance order."""
        return self._vertices

    def successors(self, vertex: V) -> tuple[V, ...]:
        """Targets of ``vertex``'s outgoing edges, in edge-list order."""
        position = self._index.get(vertex)
        if position is None:
            return ()
        return tuple(self._vertices[i] for i in self._adjacency[position])

    def out_degree(self, vertex: V) -> int:
        """Number of outgoing edges (0 for vertices outside the graph)."""
        position = self._index.get(vertex)
        if position is None:
            return 0
        return len(self._adjacency[position])

    def has_edge(self, source: V, target: V) -> bool:
        """True if some edge goes from ``source`` to ``target``."""
        position = self._index.get(source)
        target_position = self._index.get(target)
        if position is None or target_position is None:
            return False
        return target_position in self._adjacency[position]

    def is_total(self) -> bool:
        """True if the graph has an edge and every vertex has an outgoing edge."""
        return bool(self._edges) and all(self._adjacency)

    def induced(self, vertices: Iterable[V]) -> FiniteGraph[V]:
        """Subgraph keeping only edges whose endpoints are both in ``vertices``."""
        keep = frozenset(vertices)
        return FiniteGraph(
            (source, target)
            for source, target in self._edges
            if source in keep and target in keep
        )

    def deduplicated(self) -> FiniteGraph[V]:
        """Equivalent graph with parallel edges removed (first occurrence kept)."""
        return FiniteGraph(dict.fromkeys(self._edges))

    def __len__(self) -> int:
        """Number of edges, counting duplicates."""
        return len(self._edges)

    def __contains__(self, vertex: object) -> bool:
        """Vertex membership."""
        return vertex in self._index

    def __eq__(self, other: object) -> bool:
        """Graphs are equal when their edge sequences are equal."""
        if not isinstance(other, FiniteGraph):
            return NotImplemented
        return self._edges == other._edges

    def __hash__(self) -> int:
        """Hash of the edge sequence."""
        return hash(self._edges)

    def __repr__(self) -> str:
        """Return compact representation for debugging."""
        return (
            f"FiniteGraph(vertices={len(self._vertices)}, edges={len(self._edges)})"
        )


@dataclass(frozen=True, slots=True)
class Cycle[V: Hashable]:
    """Closed walk ``(v0, v1, ..., vn = v0)`` with ``n >= 1``.

    Shape (closed, at least one edge) is checked at construction; whether
    the walk is simple and uses only edges of a particular graph is checked
    by ``validate_cycle``.

    Attributes:
        vertices: Closed vertex sequence, first vertex repeated at the end

    Example:
        >>> c = Cycle(("A", "B", "A"))
        >>> len(c)
        2
        >>> c.members
        ('A', 'B')
        >>> str(c)
        'A -> B -> A'
    """

    vertices: tuple[V, ...]

    def __post_init__(self) -> None:
        """Validate the closed-walk shape.

        Raises:
            ValueError: If fewer than two entries or the walk is not closed.
        """
        if len(self.vertices) < 2:
            msg = f"Cycle needs at least one edge, got {self.vertices!r}"
            raise ValueError(msg)
        if self.vertices[0] != self.vertices[-1]:
            msg = f"Cycle must end where it starts, got {self.vertices!r}"
            raise ValueError(msg)

    @property
    def members(self) -> tuple[V, ...]:
        """Vertices on the cycle without the closing repeat."""
        return self.vertices[:-1]

    def edges(self) -> Iterator[tuple[V, V]]:
        """Consecutive (source, target) pairs along the cycle."""
        return zip(self.vertices, self.vertices[1:], strict=False)

    def __len__(self) -> int:
        """Number of edges on the cycle."""
        return len(self.vertices) - 1

    def __str__(self) -> str:
        """Render as ``A -> B -> A``."""
        return CYCLE_ARROW.join(str(v) for v in self.vertices)


def render_edges(edges: Iterable[tuple[Hashable, Hashable]], limit: int = MAX_LOGGED_EDGES) -> str:
    """Render an edge list for log output, truncated after ``limit`` edges."""
    rendered: list[str] = []
    for count, (source, target) in enumerate(edges):
        if count == limit:
            rendered.append("...")
            break
        rendered.append(f"{source!r}{CYCLE_ARROW}{target!r}")
    return "[" + ", ".join(rendered) + "]"


def engine_violation[V: Hashable](
    diagnostic: Diagnostic,
    graph: FiniteGraph[V],
    operation: str,
    *,
    component: str = "graph",
) -> EngineInvariantViolationError:
    """Log an engine violation with its graph and build the exception.

    Args:
        diagnostic: What went wrong
        graph: Graph under analysis, logged and attached to the error
        operation: Operation that detected the violation
        component: Component reporting it

    Returns:
        EngineInvariantViolationError ready to raise
    """
    logger.error(
        "Engine invariant violated during %s: %s; graph=%s",
        operation,
        diagnostic.message,
        render_edges(graph.edges),
    )
    context = IntegrityContext(
        component=component,
        operation=operation,
        vertex_count=len(graph.vertices),
        edge_count=len(graph),
        timestamp=time.monotonic(),
    )
    return EngineInvariantViolationError(
        diagnostic.message,
        context,
        diagnostic=diagnostic,
        edges=graph.edges,
    )


def find_cycle[V: Hashable](graph: FiniteGraph[V]) -> Cycle[V] | None:
    """Find a simple cycle using iterative three-color DFS.

    Roots are tried in vertex order and successors are followed in
    edge-list order, so the result is reproducible for a given edge list.
    When DFS meets a vertex already on the current path, the cycle is the
    path suffix from that vertex, closed by the vertex itself.

    Implements iterative DFS with an explicit stack of successor iterators
    to avoid RecursionError on long wait chains.

    Args:
        graph: Graph to search. No precondition on out-degrees.

    Returns:
        A simple Cycle, or None if DFS from every vertex finds no back edge.

    Example:
        >>> find_cycle(FiniteGraph([("A", "B"), ("B", "C"), ("C", "A")]))
        Cycle(vertices=('A', 'B', 'C', 'A'))
        >>> find_cycle(FiniteGraph([("A", "B")])) is None
        True

    Complexity:
        Time: O(V + E)
        Space: O(V)
    """
    vertices = graph._vertices  # noqa: SLF001 - same-module arena access
    adjacency = graph._adjacency  # noqa: SLF001
    color = [_Color.UNVISITED] * len(vertices)
    depth = [0] * len(vertices)

    for root in range(len(vertices)):
        if color[root] is not _Color.UNVISITED:
            continue

        path: list[int] = [root]
        color[root] = _Color.ON_STACK
        depth[root] = 0
        # Parallel to path: resumable successor iterator per path vertex
        pending: list[Iterator[int]] = [iter(adjacency[root])]

        while pending:
            advanced = False
            for successor in pending[-1]:
                state = color[successor]
                if state is _Color.ON_STACK:
                    start = depth[successor]
                    walk = [vertices[i] for i in path[start:]]
                    walk.append(vertices[successor])
                    return Cycle(tuple(walk))
                if state is _Color.UNVISITED:
                    color[successor] = _Color.ON_STACK
                    depth[successor] = len(path)
                    path.append(successor)
                    pending.append(iter(adjacency[successor]))
                    advanced = True
                    break

            if not advanced:
                color[path.pop()] = _Color.DONE
                pending.pop()

    return None


def validate_cycle[V: Hashable](graph: FiniteGraph[V], cycle: Cycle[V]) -> None:
    """Check that ``cycle`` is a closed simple walk over edges of ``graph``.

    Args:
        graph: Graph the cycle was found in
        cycle: Cycle to check

    Raises:
        EngineInvariantViolationError: If a vertex repeats before closing or
            a consecutive pair is not an edge of ``graph``
    """
    members = cycle.members
    if len(set(members)) != len(members):
        raise engine_violation(
            ErrorTemplate.cycle_invalid(str(cycle), "vertex repeated before closing"),
            graph,
            "validate_cycle",
        )
    for source, target in cycle.edges():
        if not graph.has_edge(source, target):
            raise engine_violation(
                ErrorTemplate.cycle_invalid(
                    str(cycle), f"edge {source!r} -> {target!r} not in graph"
                ),
                graph,
                "validate_cycle",
            )


def find_cycle_total[V: Hashable](graph: FiniteGraph[V]) -> Cycle[V]:
    """Find a cycle in a graph where every vertex has an outgoing edge.

    The structural theorem guarantees a cycle exists under this
    precondition, so failing to find one is an engine defect rather than
    an ordinary negative answer.

    Args:
        graph: Nonempty graph with out-degree >= 1 at every vertex

    Returns:
        A validated simple Cycle

    Raises:
        ValueError: If the precondition does not hold
        EngineInvariantViolationError: If no valid cycle is found
    """
    if not graph.is_total():
        msg = "find_cycle_total requires a nonempty graph with no sink vertices"
        raise ValueError(msg)

    cycle = find_cycle(graph)
    if cycle is None:
        raise engine_violation(
            ErrorTemplate.cycle_not_found(len(graph.vertices), len(graph)),
            graph,
            "find_cycle_total",
        )
    validate_cycle(graph, cycle)
    return cycle
