"""Shared constants for phaserlock.

This module provides centralized configuration constants used across
the snapshot, analysis and detection layers. Placing constants here
avoids circular imports and provides a single source of truth.

Constants are grouped by domain:
- Input limits: Bounds on the snapshots accepted by the classifier
- Rendering: Separators used when cycles are written to logs

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Input limits
    "MAX_SNAPSHOT_TASKS",
    # Rendering
    "CYCLE_ARROW",
    "MAX_LOGGED_EDGES",
]

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default upper bound on the number of live tasks in one snapshot.
# Every analysis pass is linear or near-linear in the snapshot size, so the
# limit only guards an embedding service against runaway snapshots.
MAX_SNAPSHOT_TASKS: int = 1_000_000

# ============================================================================
# RENDERING
# ============================================================================

# Separator between consecutive vertices when a cycle is rendered as text.
CYCLE_ARROW: str = " -> "

# Maximum number of edges written into a single log record.
# Engine violations log the offending graph; huge graphs are truncated.
MAX_LOGGED_EDGES: int = 200
