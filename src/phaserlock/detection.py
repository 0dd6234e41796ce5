"""Deadlock detection entry point for embedding services.

Provides a single call that takes either an abstract Snapshot or a phaser
RuntimeState and always returns a DetectionResult. Errors are reported
as values so one bad snapshot cannot take down a long-running caller.

Architecture:
    - detect_deadlock(): Main entry point, orchestrates the passes
    - Pass 1: extract_dependencies() for RuntimeState input
    - Pass 2: classify() builds the WFG, searches cycles, checks the witness

Python 3.13+.
"""

import logging

from phaserlock.analysis.classifier import classify
from phaserlock.config import DetectorConfig
from phaserlock.diagnostics import DetectionResult, InconsistentStateError
from phaserlock.integrity import EngineInvariantViolationError
from phaserlock.runtime.dependencies import extract_dependencies
from phaserlock.runtime.phaser import RuntimeState
from phaserlock.snapshot import Snapshot

__all__ = ["detect_deadlock"]

logger = logging.getLogger(__name__)


def detect_deadlock(
    source: Snapshot | RuntimeState,
    config: DetectorConfig | None = None,
) -> DetectionResult:
    """Classify a snapshot, returning errors as values.

    Args:
        source: Abstract snapshot, or phaser runtime state to extract one from
        config: Detector configuration (default: DetectorConfig())

    Returns:
        DetectionResult with a verdict, or with the diagnostic of an
        InconsistentStateError or EngineInvariantViolationError

    Example:
        >>> from phaserlock import Snapshot, detect_deadlock
        >>> result = detect_deadlock(Snapshot.of({"A": ["e1"]}, {"e1": ["B"]}))
        >>> result.succeeded, result.is_deadlocked
        (True, False)

    Thread Safety:
        Thread-safe. Inputs are immutable and all working state is local.
    """
    try:
        snapshot = source if isinstance(source, Snapshot) else extract_dependencies(source)
        verdict = classify(snapshot, config)

    except InconsistentStateError as e:
        logger.error("Rejected inconsistent snapshot: %s", e)
        if e.diagnostic is None:  # pragma: no cover - library errors carry diagnostics
            raise
        return DetectionResult.failure(e.diagnostic)

    except EngineInvariantViolationError as e:
        # The offending graph was logged where the violation was detected
        logger.error("Deadlock detection aborted by engine defect: %r", e)
        if e.diagnostic is None:  # pragma: no cover - library errors carry diagnostics
            raise
        return DetectionResult.failure(e.diagnostic)

    logger.debug("Detection finished: deadlocked=%s", verdict.is_deadlocked)
    return DetectionResult.success(verdict)
