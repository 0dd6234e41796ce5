"""Hypothesis strategies for phaserlock property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules. Strategies are organized by domain:

- graph: Edge lists, graphs with no sink vertex, DAGs and cycle paths
- snapshot: Runtime snapshots, planted deadlocks and phaser states

Usage:
    from tests.strategies import edge_lists, deadlocked_snapshots
    from tests.strategies.graph import total_graphs
    from tests.strategies.snapshot import runtime_states

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - edge_lists, total_graphs, cycle_paths
    - snapshots, deadlocked_snapshots, acyclic_snapshots, runtime_states
"""

from .graph import (
    acyclic_edge_lists,
    cycle_paths,
    edge_lists,
    node_names,
    total_graphs,
)
from .snapshot import (
    acyclic_snapshots,
    deadlocked_snapshots,
    runtime_states,
    snapshots,
    task_ids,
)

__all__ = [
    "acyclic_edge_lists",
    "acyclic_snapshots",
    "cycle_paths",
    "deadlocked_snapshots",
    "edge_lists",
    "node_names",
    "runtime_states",
    "snapshots",
    "task_ids",
    "total_graphs",
]
