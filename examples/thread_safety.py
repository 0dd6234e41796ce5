"""Thread Safety Example - Classifying snapshots from many threads.

Snapshots are immutable and the detector keeps all working state local to
one call, so a single snapshot can be shared by any number of threads
without locks.

Demonstrates:
1. Concurrent classification of one shared snapshot
2. A monitoring loop that checks snapshots from a thread pool

Python 3.13+.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed

from phaserlock import Snapshot, classify, detect_deadlock


def _ring(size: int, *, escape: bool = False) -> Snapshot:
    """Tasks 0..size-1 each waiting on the next; optionally one runnable helper."""
    wait_on = {i: [f"e{i}"] for i in range(size)}
    impeded_by: dict[str, list[object]] = {f"e{i}": [(i + 1) % size] for i in range(size)}
    tasks: list[object] = list(range(size))
    if escape:
        impeded_by[f"e{size - 1}"].append("helper")
        tasks.append("helper")
    return Snapshot.of(wait_on, impeded_by, tasks=tasks)


def example_1_shared_snapshot() -> None:
    """Example 1: Many threads, one snapshot, identical verdicts."""
    print("=" * 60)
    print("Example 1: Shared Snapshot")
    print("=" * 60)

    snapshot = _ring(100)
    with ThreadPoolExecutor(max_workers=8) as executor:
        verdicts = list(executor.map(classify, [snapshot] * 32))

    print(f"All verdicts identical: {all(v == verdicts[0] for v in verdicts)}")
    print(f"Deadlocked: {verdicts[0].is_deadlocked}")


def example_2_monitoring_pool() -> None:
    """Example 2: Independent snapshots checked concurrently."""
    print("\n" + "=" * 60)
    print("Example 2: Monitoring Pool")
    print("=" * 60)

    snapshots = {f"ring-{n}{'-escape' if escape else ''}": _ring(n, escape=escape)
                 for n in (3, 30, 300) for escape in (False, True)}

    with ThreadPoolExecutor(max_workers=4) as executor:
        futures = {executor.submit(detect_deadlock, snap): name for name, snap in snapshots.items()}
        for future in as_completed(futures):
            result = future.result()
            print(f"{futures[future]:>18}: deadlocked={result.is_deadlocked}")


if __name__ == "__main__":
    example_1_shared_snapshot()
    example_2_monitoring_pool()
