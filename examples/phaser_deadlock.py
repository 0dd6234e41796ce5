"""Phaser Deadlock Example - From runtime capture to witness.

This example builds phaser runtime captures, extracts the WaitOn and
ImpededBy relations from them, and classifies the result.

Demonstrates:
1. A barrier waiting for a laggard (not deadlocked)
2. Two phasers awaited in opposite order (deadlocked)
3. A task awaiting a phase it has not signalled itself (self-deadlock)
4. Logging the verdict as JSON

Python 3.13+.
"""

from __future__ import annotations

import logging

from phaserlock import (
    Phaser,
    PhaserEvent,
    RuntimeState,
    detect_deadlock,
    extract_dependencies,
)
from phaserlock.diagnostics import DiagnosticFormatter, OutputFormat

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


def example_1_laggard() -> None:
    """Example 1: A waits at the barrier until B arrives."""
    print("=" * 60)
    print("Example 1: Barrier With a Laggard")
    print("=" * 60)

    barrier = Phaser.of("barrier", {"A": 1, "B": 0})
    state = RuntimeState.of(["A", "B"], [barrier], {"A": [PhaserEvent("barrier", 1)]})

    snapshot = extract_dependencies(state)
    print(f"ImpededBy(barrier@1) = {snapshot.impeders(PhaserEvent('barrier', 1))}")
    print(DiagnosticFormatter().format_detection_result(detect_deadlock(state)))


def example_2_crossed_phasers() -> None:
    """Example 2: A awaits p, which B has not signalled; B awaits q, which A has not."""
    print("\n" + "=" * 60)
    print("Example 2: Crossed Phasers")
    print("=" * 60)

    p = Phaser.of("p", {"A": 1, "B": 0})
    q = Phaser.of("q", {"A": 0, "B": 1})
    state = RuntimeState.of(
        ["A", "B", "logger"],
        [p, q],
        {"A": [PhaserEvent("p", 1)], "B": [PhaserEvent("q", 1)]},
    )
    print(DiagnosticFormatter().format_detection_result(detect_deadlock(state)))


def example_3_self_deadlock() -> None:
    """Example 3: A awaits phase 1 without ever signalling phase 1."""
    print("\n" + "=" * 60)
    print("Example 3: Self-Deadlock")
    print("=" * 60)

    p = Phaser.of("p", {"A": 0})
    state = RuntimeState.of(["A"], [p], {"A": [PhaserEvent("p", 1)]})
    print(DiagnosticFormatter().format_detection_result(detect_deadlock(state)))


def example_4_json() -> None:
    """Example 4: Machine-readable output for log pipelines."""
    print("\n" + "=" * 60)
    print("Example 4: JSON Output")
    print("=" * 60)

    p = Phaser.of("p", {"A": 1, "B": 0})
    q = Phaser.of("q", {"A": 0, "B": 1})
    state = RuntimeState.of(
        ["A", "B"], [p, q], {"A": [PhaserEvent("p", 1)], "B": [PhaserEvent("q", 1)]}
    )
    formatter = DiagnosticFormatter(output_format=OutputFormat.JSON)
    print(formatter.format_detection_result(detect_deadlock(state)))


if __name__ == "__main__":
    example_1_laggard()
    example_2_crossed_phasers()
    example_3_self_deadlock()
    example_4_json()
