"""Diagnostic formatting service.

Centralizes diagnostic and verdict output formatting with configurable
options. Logging front ends use it to render DetectionResult objects.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import json
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from phaserlock.analysis.classifier import DeadlockVerdict

    from .detection import DetectionResult

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


def _label(value: Hashable) -> str:
    """Text form of an opaque identifier."""
    return str(value)


def _ordered_labels(values: Iterable[Hashable]) -> list[str]:
    """Labels sorted for stable output of unordered sets."""
    return sorted(_label(v) for v in values)


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects and verdicts into
    human-readable or machine-readable output.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate messages to prevent oversized log records
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum message length when sanitizing

    Example:
        >>> from phaserlock.diagnostics import ErrorTemplate
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.unknown_waiting_task("A")
        >>> print(formatter.format(diagnostic))
        error[UNKNOWN_WAITING_TASK]: Task 'A' waits on events but is not a live task
          = task: 'A'
          = help: Include every waiting task in the snapshot task set

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        UNKNOWN_WAITING_TASK: Task 'A' waits on events but is not a live task
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return json.dumps(self._diagnostic_data(diagnostic), ensure_ascii=False)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def format_verdict(self, verdict: DeadlockVerdict) -> str:
        """Format a classification verdict with its witness.

        Args:
            verdict: NotDeadlocked or Deadlocked

        Returns:
            Summary line plus, on deadlock, the cycle, witness tasks and
            induced wait-for edges (or a JSON object in JSON mode)
        """
        if self.output_format is OutputFormat.JSON:
            return json.dumps(self._verdict_data(verdict), ensure_ascii=False)

        from phaserlock.analysis.classifier import Deadlocked  # noqa: PLC0415 - circular

        if not isinstance(verdict, Deadlocked):
            return "No deadlock"

        summary = (
            f"Deadlock: {len(verdict.tasks)} task(s) on cycle of length "
            f"{len(verdict.cycle)}"
        )
        if self.output_format is OutputFormat.SIMPLE:
            return f"{summary}: {verdict.cycle}"

        parts = [summary, f"  cycle: {verdict.cycle}"]
        parts.append(f"  tasks: {', '.join(_ordered_labels(verdict.tasks))}")
        parts.append("  wait-for edges:")
        parts.extend(
            f"    {_label(source)} -> {_label(target)}"
            for source, target in verdict.subgraph.edges
        )
        if verdict.unaffected:
            parts.append(f"  unaffected: {', '.join(_ordered_labels(verdict.unaffected))}")
        return "\n".join(parts)

    def format_detection_result(self, result: DetectionResult) -> str:
        """Format a DetectionResult: its verdict or its error."""
        if result.error is not None:
            if self.output_format is OutputFormat.JSON:
                return json.dumps(
                    {"error": self._diagnostic_data(result.error)}, ensure_ascii=False
                )
            return f"Detection failed\n{self.format(result.error)}"
        if result.verdict is None:  # pragma: no cover - DetectionResult invariant
            msg = "DetectionResult has neither verdict nor error"
            raise ValueError(msg)
        return self.format_verdict(result.verdict)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[TASK_NOT_REGISTERED]: Task 'A' awaits phaser 'p' without being registered
              = task: 'A'
              = phaser: 'p'
              = help: Register the task with the phaser before it awaits a phase
        """
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"

        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        message = self._maybe_sanitize(diagnostic.message)
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        if diagnostic.task is not None:
            parts.append(f"  = task: {diagnostic.task!r}")

        if diagnostic.event is not None:
            parts.append(f"  = event: {diagnostic.event!r}")

        if diagnostic.phaser is not None:
            parts.append(f"  = phaser: {diagnostic.phaser!r}")

        if diagnostic.hint:
            parts.append(f"  = help: {self._maybe_sanitize(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format."""
        message = self._maybe_sanitize(diagnostic.message)
        return f"{diagnostic.code.name}: {message}"

    def _diagnostic_data(self, diagnostic: Diagnostic) -> dict[str, str | int]:
        """JSON-ready fields of a diagnostic (optional fields only if set)."""
        data: dict[str, str | int] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "category": str(diagnostic.code.category),
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }
        if diagnostic.task is not None:
            data["task"] = _label(diagnostic.task)
        if diagnostic.event is not None:
            data["event"] = _label(diagnostic.event)
        if diagnostic.phaser is not None:
            data["phaser"] = _label(diagnostic.phaser)
        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)
        return data

    def _verdict_data(self, verdict: DeadlockVerdict) -> dict[str, object]:
        """JSON-ready fields of a verdict."""
        from phaserlock.analysis.classifier import Deadlocked  # noqa: PLC0415 - circular

        if not isinstance(verdict, Deadlocked):
            return {"deadlocked": False}
        return {
            "deadlocked": True,
            "cycle": [_label(v) for v in verdict.cycle.vertices],
            "tasks": _ordered_labels(verdict.tasks),
            "edges": [[_label(s), _label(t)] for s, t in verdict.subgraph.edges],
            "unaffected": _ordered_labels(verdict.unaffected),
        }

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled."""
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
