"""Error-as-value result of a deadlock detection run.

``detect_deadlock`` never raises for malformed snapshots or engine
failures; it returns a DetectionResult carrying either a verdict or the
diagnostic of the error that stopped the run. The two are exclusive: no
partial verdict accompanies an error.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .codes import Diagnostic, ErrorCategory

if TYPE_CHECKING:
    from phaserlock.analysis.classifier import DeadlockVerdict

__all__ = ["DetectionResult"]


@dataclass(frozen=True, slots=True)
class DetectionResult:
    """Outcome of one detection run.

    Immutable result object for thread-safe reporting.

    Attributes:
        verdict: Classification verdict (None if the run failed)
        error: Diagnostic of the failure (None if the run succeeded)

    Example:
        >>> from phaserlock.analysis.classifier import NotDeadlocked
        >>> result = DetectionResult.success(NotDeadlocked())
        >>> result.succeeded, result.is_deadlocked
        (True, False)
    """

    verdict: DeadlockVerdict | None = None
    error: Diagnostic | None = None

    def __post_init__(self) -> None:
        """Exactly one of verdict and error must be set.

        Raises:
            ValueError: If both or neither are set.
        """
        if (self.verdict is None) == (self.error is None):
            msg = "DetectionResult needs exactly one of verdict or error"
            raise ValueError(msg)

    @property
    def succeeded(self) -> bool:
        """True if a verdict was computed."""
        return self.verdict is not None

    @property
    def is_deadlocked(self) -> bool:
        """True only for a successful run with a Deadlocked verdict."""
        return self.verdict is not None and self.verdict.is_deadlocked

    @property
    def error_category(self) -> ErrorCategory | None:
        """SNAPSHOT for caller errors, ENGINE for detector defects."""
        if self.error is None:
            return None
        return self.error.code.category

    @staticmethod
    def success(verdict: DeadlockVerdict) -> DetectionResult:
        """Result carrying a verdict."""
        return DetectionResult(verdict=verdict)

    @staticmethod
    def failure(error: Diagnostic) -> DetectionResult:
        """Result carrying an error diagnostic."""
        return DetectionResult(error=error)
