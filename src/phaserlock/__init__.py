"""phaserlock - Deadlock detection for phaser-based task runtimes.

Takes a consistent snapshot of running tasks and the phaser events they
are blocked on, builds the wait-for graph, and decides whether the
snapshot is deadlocked. A deadlock verdict carries a witness cycle and
the totally deadlocked task set it belongs to.

Public API:
    Snapshot - Immutable WaitOn/ImpededBy snapshot
    RuntimeState, Phaser, PhaserEvent - Phaser runtime capture
    extract_dependencies - RuntimeState -> Snapshot
    build_wfg - Join WaitOn and ImpededBy into a wait-for graph
    find_cycle - Cycle detection on a FiniteGraph
    classify - Snapshot -> NotDeadlocked | Deadlocked
    certify - Cycle for a known totally deadlocked set
    detect_deadlock - classify() with errors returned as values
    DetectorConfig - Classifier configuration

Exceptions:
    DeadlockError - Base class for caller-facing errors
    InconsistentStateError - Malformed snapshot
    EngineInvariantViolationError - Internal detector defect

Submodules:
    phaserlock.analysis - Graph, wait-for graph and classifier
    phaserlock.runtime - Phaser runtime capture and dependency extraction
    phaserlock.diagnostics - Error codes, templates and formatting
"""

from .analysis import (
    Cycle,
    DeadlockVerdict,
    Deadlocked,
    FiniteGraph,
    NotDeadlocked,
    build_wfg,
    certify,
    classify,
    find_cycle,
    is_deadlocked,
)
from .config import DetectorConfig
from .detection import detect_deadlock
from .diagnostics import DeadlockError, DetectionResult, InconsistentStateError
from .integrity import EngineInvariantViolationError
from .runtime import Phaser, PhaserEvent, RuntimeState, extract_dependencies
from .snapshot import EventId, Snapshot, TaskId

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("phaserlock")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Cycle",
    "DeadlockError",
    "DeadlockVerdict",
    "Deadlocked",
    "DetectionResult",
    "DetectorConfig",
    "EngineInvariantViolationError",
    "EventId",
    "FiniteGraph",
    "InconsistentStateError",
    "NotDeadlocked",
    "Phaser",
    "PhaserEvent",
    "RuntimeState",
    "Snapshot",
    "TaskId",
    "__version__",
    "build_wfg",
    "certify",
    "classify",
    "detect_deadlock",
    "extract_dependencies",
    "find_cycle",
    "is_deadlocked",
]
