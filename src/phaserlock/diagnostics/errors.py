"""Detector exception hierarchy with structured diagnostics.

All exceptions store Diagnostic objects for rich error information.
Internal engine failures live in ``phaserlock.integrity`` instead; they
are a different error domain (detector defects, not caller mistakes).

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = ["DeadlockError", "InconsistentStateError"]


class DeadlockError(Exception):
    """Base exception for all caller-facing detector errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize DeadlockError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class InconsistentStateError(DeadlockError):
    """Snapshot failed a referential-integrity check.

    Raised when a task waits on an event it cannot be waiting on (unknown
    task, unknown phaser, missing registration) or a relation names a task
    outside the snapshot. Not retried: the caller must supply a valid
    snapshot. No partial relation is ever produced alongside this error.
    """
