"""Quickstart example for phaserlock.

This example demonstrates basic deadlock detection on hand-built snapshots.

Note: Examples print verdicts directly for brevity. In production, call
detect_deadlock() and check result.error so one bad snapshot cannot take
down the caller.
"""

from phaserlock import (
    Deadlocked,
    Phaser,
    PhaserEvent,
    RuntimeState,
    Snapshot,
    classify,
    detect_deadlock,
)
from phaserlock.diagnostics import DiagnosticFormatter, OutputFormat

formatter = DiagnosticFormatter()

# Example 1: Two tasks waiting on each other
print("=" * 50)
print("Example 1: Mutual Wait")
print("=" * 50)

snapshot = Snapshot.of(
    wait_on={"A": ["e1"], "B": ["e2"]},
    impeded_by={"e1": ["B"], "e2": ["A"]},
)
print(formatter.format_verdict(classify(snapshot)))
# Output:
# Deadlock: 2 task(s) on cycle of length 2
#   cycle: A -> B -> A
#   tasks: A, B
#   wait-for edges:
#     A -> B
#     B -> A

# Example 2: A wait chain is not a deadlock
print("\n" + "=" * 50)
print("Example 2: Wait Chain")
print("=" * 50)

snapshot = Snapshot.of({"A": ["e1"]}, {"e1": ["B"]}, tasks=["A", "B", "C"])
print(formatter.format_verdict(classify(snapshot)))
# Output: No deadlock

# Example 3: Three-task ring
print("\n" + "=" * 50)
print("Example 3: Three-Task Ring")
print("=" * 50)

snapshot = Snapshot.of(
    {"A": ["e1"], "B": ["e2"], "C": ["e3"]},
    {"e1": ["B"], "e2": ["C"], "e3": ["A"]},
)
verdict = classify(snapshot)
if isinstance(verdict, Deadlocked):
    print(f"Cycle of length {len(verdict.cycle)}: {verdict.cycle}")
# Output: Cycle of length 3: A -> B -> C -> A

# Example 4: Deadlock beside a running task
print("\n" + "=" * 50)
print("Example 4: Disconnected Deadlock")
print("=" * 50)

snapshot = Snapshot.of(
    {"A": ["e1"], "B": ["e2"]},
    {"e1": ["B"], "e2": ["A"]},
    tasks=["A", "B", "C"],
)
verdict = classify(snapshot)
if isinstance(verdict, Deadlocked):
    print(f"Deadlocked: {sorted(verdict.tasks)}  Unaffected: {sorted(verdict.unaffected)}")
# Output: Deadlocked: ['A', 'B']  Unaffected: ['C']

# Example 5: Errors as values
print("\n" + "=" * 50)
print("Example 5: Malformed Snapshot")
print("=" * 50)

# Snapshot.of() raises on an unknown impeder; detect_deadlock() returns
# the same kind of failure as a value.
state = RuntimeState.of(["A"], [Phaser.of("p", {"A": 0})], {"A": [PhaserEvent("q", 1)]})
result = detect_deadlock(state)
print(DiagnosticFormatter(output_format=OutputFormat.SIMPLE).format_detection_result(result))
# Output:
# Detection failed
# UNKNOWN_PHASER: Task 'A' awaits unknown phaser 'q'
