"""Engine integrity exceptions.

These exceptions indicate DETECTOR FAILURES, not malformed snapshots.
They should propagate to the top level (or be reported by
``detect_deadlock``) and be investigated as bugs.

Design:
    - NOT subclasses of DeadlockError (different error domain)
    - Carry an IntegrityContext and, for engine failures, the edge list
    - Frozen after construction, leaf classes are @final

Hierarchy:
    DataIntegrityError (base - detector failures)
    ├─ EngineInvariantViolationError (cycle engine/classifier contradiction)
    └─ ImmutabilityViolationError (mutation attempt on frozen object)

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, final

if TYPE_CHECKING:
    from phaserlock.diagnostics.codes import Diagnostic

__all__ = [
    "DataIntegrityError",
    "EngineInvariantViolationError",
    "ImmutabilityViolationError",
    "IntegrityContext",
]


@dataclass(frozen=True, slots=True)
class IntegrityContext:
    """Where and on what input a detector failure happened.

    Attributes:
        component: Component where error occurred (graph, classifier)
        operation: Operation being performed (find_cycle, certify, classify)
        vertex_count: Vertices in the graph under analysis (optional)
        edge_count: Edges in the graph under analysis (optional)
        timestamp: Time of error detection (time.monotonic())
    """

    component: str
    operation: str
    vertex_count: int | None = None
    edge_count: int | None = None
    timestamp: float | None = None


class DataIntegrityError(Exception):
    """Base exception for all detector integrity failures.

    NOT a DeadlockError subclass. These are DETECTOR failures, not
    caller-facing snapshot errors.

    Frozen once constructed; the recorded evidence cannot be altered
    by handlers further up the stack.

    Attributes:
        context: Structured diagnostic context for post-mortem analysis
    """

    __slots__ = ("_context", "_frozen")

    # Type annotations for __slots__ attributes (mypy requirement)
    _context: IntegrityContext | None
    _frozen: bool

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
    ) -> None:
        """Initialize DataIntegrityError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
        """
        super().__init__(message)
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_frozen", True)

    # Set by the interpreter while an exception propagates.
    _PYTHON_EXCEPTION_ATTRS: frozenset[str] = frozenset(
        ("__traceback__", "__context__", "__cause__", "__suppress_context__", "__notes__")
    )

    def __setattr__(self, name: str, value: object) -> None:
        """Allow interpreter bookkeeping; reject everything else once frozen."""
        if name in self._PYTHON_EXCEPTION_ATTRS:
            object.__setattr__(self, name, value)
            return
        if getattr(self, "_frozen", False):
            msg = f"Cannot modify integrity error attribute: {name}"
            raise ImmutabilityViolationError(msg)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        """Deletion is never allowed."""
        msg = f"Cannot delete integrity error attribute: {name}"
        raise ImmutabilityViolationError(msg)

    @property
    def context(self) -> IntegrityContext | None:
        """Structured diagnostic context."""
        return self._context

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.args[0]!r}, context={self._context!r})"


@final
class ImmutabilityViolationError(DataIntegrityError):
    """Raised on any write to a frozen DataIntegrityError."""


@final
class EngineInvariantViolationError(DataIntegrityError):
    """Internal algorithmic contradiction in the cycle engine or classifier.

    Raised when the structural precondition held (every candidate vertex
    has an outgoing edge) but no cycle was found, when a returned cycle is
    not a closed simple walk of its graph, or when a deadlock witness
    fails the totally deadlocked checks. Never caused by caller input.

    Attributes:
        diagnostic: Structured diagnostic describing the violation
        edges: The offending graph as an edge list
    """

    __slots__ = ("_diagnostic", "_edges")

    # Type annotations for __slots__ attributes (mypy requirement)
    _diagnostic: Diagnostic | None
    _edges: tuple[tuple[Hashable, Hashable], ...]

    def __init__(
        self,
        message: str,
        context: IntegrityContext | None = None,
        *,
        diagnostic: Diagnostic | None = None,
        edges: Iterable[tuple[Hashable, Hashable]] = (),
    ) -> None:
        """Initialize EngineInvariantViolationError.

        Args:
            message: Human-readable error description
            context: Structured diagnostic context (optional)
            diagnostic: Structured diagnostic (optional)
            edges: Edge list of the graph being analyzed
        """
        # Must set these before calling super().__init__ which freezes
        object.__setattr__(self, "_diagnostic", diagnostic)
        object.__setattr__(self, "_edges", tuple(edges))
        super().__init__(message, context)

    @property
    def diagnostic(self) -> Diagnostic | None:
        """Structured diagnostic describing the violation."""
        return self._diagnostic

    @property
    def edges(self) -> tuple[tuple[Hashable, Hashable], ...]:
        """Edge list of the offending graph."""
        return self._edges

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"EngineInvariantViolationError({self.args[0]!r}, "
            f"edge_count={len(self._edges)})"
        )
