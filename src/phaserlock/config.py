"""Detector configuration.

Provides a single frozen dataclass that encapsulates the tunable
parameters of the classifier and ``detect_deadlock``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from phaserlock.constants import MAX_SNAPSHOT_TASKS

__all__ = ["DetectorConfig"]


@dataclass(frozen=True, slots=True)
class DetectorConfig:
    """Immutable configuration for deadlock classification.

    All fields have sensible defaults; constructing ``DetectorConfig()``
    with no arguments produces a usable configuration.

    Attributes:
        dedup_edges: Remove parallel WFG edges before cycle search
            (default: True). Does not change the verdict, only the work
            done on snapshots where tasks wait on several events with
            shared impeders.
        verify_witness: Re-check that a reported witness set is totally
            deadlocked and that its induced WFG has no sink vertex
            (default: True). A failed check raises
            EngineInvariantViolationError.
        max_tasks: Largest snapshot accepted, in live tasks
            (default: MAX_SNAPSHOT_TASKS).

    Example:
        >>> from phaserlock import classify
        >>> from phaserlock.config import DetectorConfig
        >>> config = DetectorConfig(dedup_edges=False)
        >>> config.verify_witness
        True
    """

    dedup_edges: bool = True
    verify_witness: bool = True
    max_tasks: int = MAX_SNAPSHOT_TASKS

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If max_tasks is not positive.
        """
        if self.max_tasks <= 0:
            msg = "max_tasks must be positive"
            raise ValueError(msg)
