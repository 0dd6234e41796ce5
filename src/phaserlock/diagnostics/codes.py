"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages for snapshot analysis.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
]


class ErrorCategory(StrEnum):
    """Error categorization for detector failures.

    Inherits from ``StrEnum`` so that log aggregation receives plain
    strings (``"snapshot"``, ``"engine"``) rather than the enum repr.

    Categories:
        SNAPSHOT: Caller supplied a malformed snapshot
        ENGINE: Internal algorithmic contradiction (a detector defect)
    """

    SNAPSHOT = "snapshot"
    ENGINE = "engine"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Snapshot integrity errors (malformed caller input)
        2000-2999: Engine invariant violations (detector defects)
    """

    # Snapshot integrity errors (1000-1999)
    UNKNOWN_WAITING_TASK = 1001
    UNKNOWN_IMPEDING_TASK = 1002
    UNKNOWN_PHASER = 1003
    TASK_NOT_REGISTERED = 1004
    NEGATIVE_PHASE = 1005
    UNKNOWN_PHASER_MEMBER = 1006
    SNAPSHOT_TOO_LARGE = 1007
    INVALID_PHASE = 1008

    # Engine invariant violations (2000-2999)
    CYCLE_NOT_FOUND = 2001
    CYCLE_INVALID = 2002
    WITNESS_NOT_DEADLOCKED = 2003

    @property
    def category(self) -> ErrorCategory:
        """Category derived from the numeric code range."""
        if self.value < 2000:
            return ErrorCategory.SNAPSHOT
        return ErrorCategory.ENGINE


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and log pipelines.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        task: Task identifier the error refers to (optional)
        event: Event identifier the error refers to (optional)
        phaser: Phaser name the error refers to (optional)
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    task: Hashable | None = None
    event: Hashable | None = None
    phaser: Hashable | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[TASK_NOT_REGISTERED]: Task 'worker-1' awaits phaser 'barrier' ...
              = task: 'worker-1'
              = phaser: 'barrier'
              = help: Register the task with the phaser before it awaits a phase

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
