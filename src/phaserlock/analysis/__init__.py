"""Wait-for graph analysis for deadlock detection.

Provides the generic cycle engine, the wait-for graph builder, and the
deadlock classifier that relates the two.

Python 3.13+.
"""

from .classifier import (
    DeadlockVerdict,
    Deadlocked,
    NotDeadlocked,
    Partition,
    certify,
    classify,
    deadlocked_closure,
    is_deadlocked,
    is_totally_deadlocked,
    maximal_deadlock,
    partition_snapshot,
)
from .graph import Cycle, FiniteGraph, find_cycle, find_cycle_total, validate_cycle
from .wfg import build_wfg, iter_wfg_edges, wfg_of

__all__ = [
    "Cycle",
    "DeadlockVerdict",
    "Deadlocked",
    "FiniteGraph",
    "NotDeadlocked",
    "Partition",
    "build_wfg",
    "certify",
    "classify",
    "deadlocked_closure",
    "find_cycle",
    "find_cycle_total",
    "is_deadlocked",
    "is_totally_deadlocked",
    "iter_wfg_edges",
    "maximal_deadlock",
    "partition_snapshot",
    "validate_cycle",
    "wfg_of",
]
