"""Deadlock classification over a runtime snapshot.

Relates totally deadlocked task sets to cycles in the wait-for graph:

    Soundness direction (``certify``):
        A totally deadlocked set induces a WFG in which every vertex has an
        outgoing edge, so the structural theorem yields a cycle.

    Completeness direction (``classify``):
        A WFG cycle whose impeder closure stays blocked is a deadlock
        witness. The closure is computed as an explicit fixpoint and
        re-checked before it is reported.

A task counts as blocked only through events that are currently impeded:
an event with an empty impeding set can complete, so waiting on it alone
does not block a task.

Architecture:
    - deadlocked_closure(): least fixpoint, grows a seed by impeders
    - maximal_deadlock(): greatest fixpoint, union of all totally deadlocked sets
    - is_totally_deadlocked(): membership checks for a candidate set
    - partition_snapshot(): split the task set into deadlocked/unaffected
    - certify(): cycle for a known totally deadlocked set
    - classify(): verdict for a whole snapshot

Thread Safety:
    Pure functions over immutable snapshots. All working state is local
    to one call.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from phaserlock.config import DetectorConfig
from phaserlock.diagnostics import ErrorTemplate, InconsistentStateError
from phaserlock.snapshot import EventId, Snapshot, TaskId

from .graph import (
    Cycle,
    FiniteGraph,
    engine_violation,
    find_cycle,
    find_cycle_total,
    validate_cycle,
)
from .wfg import build_wfg, wfg_of

__all__ = [
    "DeadlockVerdict",
    "Deadlocked",
    "NotDeadlocked",
    "Partition",
    "certify",
    "classify",
    "deadlocked_closure",
    "is_deadlocked",
    "is_totally_deadlocked",
    "maximal_deadlock",
    "partition_snapshot",
]

logger = logging.getLogger(__name__)


# ============================================================================
# VERDICT TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class NotDeadlocked:
    """Verdict: no totally deadlocked task set exists in the snapshot."""

    @property
    def is_deadlocked(self) -> bool:
        """Always False."""
        return False


@dataclass(frozen=True, slots=True)
class Deadlocked:
    """Verdict: the snapshot contains a totally deadlocked task set.

    Attributes:
        cycle: Witness cycle in the wait-for graph
        tasks: Witness set, the impeder closure of the cycle's tasks
        subgraph: Wait-for graph induced on ``tasks``
        unaffected: Every live task outside ``tasks``
    """

    cycle: Cycle[TaskId]
    tasks: frozenset[TaskId]
    subgraph: FiniteGraph[TaskId]
    unaffected: frozenset[TaskId]

    @property
    def is_deadlocked(self) -> bool:
        """Always True."""
        return True


type DeadlockVerdict = NotDeadlocked | Deadlocked


@dataclass(frozen=True, slots=True)
class Partition:
    """Split of a snapshot's tasks into a deadlocked and an unaffected side.

    Each side maps its tasks to their wait sets. The sides are disjoint.

    Attributes:
        deadlocked: Tasks in the candidate deadlocked set
        unaffected: All other live tasks
    """

    deadlocked: Mapping[TaskId, tuple[EventId, ...]]
    unaffected: Mapping[TaskId, tuple[EventId, ...]]

    def __post_init__(self) -> None:
        """Validate that the two sides are disjoint.

        Raises:
            ValueError: If a task appears on both sides.
        """
        shared = self.deadlocked.keys() & self.unaffected.keys()
        if shared:
            msg = f"Partition sides overlap on {sorted(map(repr, shared))}"
            raise ValueError(msg)


# ============================================================================
# FIXPOINTS AND MEMBERSHIP CHECKS
# ============================================================================


def _blocking_events(snapshot: Snapshot, task: TaskId) -> tuple[EventId, ...]:
    """Events ``task`` waits on that currently have at least one impeder."""
    return tuple(event for event in snapshot.waits(task) if snapshot.impeders(event))


def deadlocked_closure(snapshot: Snapshot, seed: Iterable[TaskId]) -> frozenset[TaskId]:
    """Close ``seed`` under "every impeding task of any event a member waits on".

    Computed as a least fixpoint with a worklist: each newly added task
    contributes the impeders of its events until nothing new is added.

    Args:
        snapshot: Runtime snapshot
        seed: Starting tasks (typically the tasks of a WFG cycle)

    Returns:
        Smallest superset of ``seed`` closed under impeders
    """
    closure = dict.fromkeys(seed)
    worklist = deque(closure)
    while worklist:
        task = worklist.popleft()
        for event in snapshot.waits(task):
            for impeder in snapshot.impeders(event):
                if impeder not in closure:
                    closure[impeder] = None
                    worklist.append(impeder)
    return frozenset(closure)


def is_totally_deadlocked(snapshot: Snapshot, tasks: Iterable[TaskId]) -> bool:
    """Check whether ``tasks`` is a totally deadlocked set.

    A set D is totally deadlocked when it is nonempty, every member is
    blocked on at least one impeded event, and every impeder of every
    event a member waits on is itself in D.

    Args:
        snapshot: Runtime snapshot
        tasks: Candidate set

    Returns:
        True if every membership check passes
    """
    members = frozenset(tasks)
    if not members:
        return False
    for task in members:
        if not _blocking_events(snapshot, task):
            return False
        for event in snapshot.waits(task):
            if any(impeder not in members for impeder in snapshot.impeders(event)):
                return False
    return True


def maximal_deadlock(snapshot: Snapshot) -> frozenset[TaskId]:
    """Union of every totally deadlocked subset of the snapshot.

    Greatest fixpoint: start from all blocked tasks and remove any task
    that waits on an event with an impeder outside the candidate set,
    until the set stabilizes. Totally deadlocked sets are closed under
    union, so the result is itself totally deadlocked (or empty).

    Removal is propagated backwards through a waiter index, so each
    (task, event, impeder) triple is visited a bounded number of times
    even on long wait chains.

    Args:
        snapshot: Runtime snapshot

    Returns:
        The largest totally deadlocked set, empty if there is none
    """
    candidates = {task for task in snapshot.tasks if _blocking_events(snapshot, task)}

    # impeder -> candidates that wait on an event it impedes
    waiters: dict[TaskId, list[TaskId]] = {}
    for task in snapshot.tasks:
        if task not in candidates:
            continue
        for event in snapshot.waits(task):
            for impeder in snapshot.impeders(event):
                waiters.setdefault(impeder, []).append(task)

    removed = deque(task for task in snapshot.tasks if task not in candidates)
    removed_count = len(removed)
    while removed:
        task = removed.popleft()
        for waiter in waiters.get(task, ()):
            if waiter in candidates:
                candidates.discard(waiter)
                removed.append(waiter)
                removed_count += 1

    logger.debug(
        "Maximal deadlock fixpoint: %d of %d tasks, %d removed",
        len(candidates),
        len(snapshot),
        removed_count,
    )
    return frozenset(candidates)


def partition_snapshot(snapshot: Snapshot, deadlocked: Iterable[TaskId]) -> Partition:
    """Partition the snapshot's tasks around a deadlocked candidate set.

    Args:
        snapshot: Runtime snapshot
        deadlocked: Tasks on the deadlocked side

    Returns:
        Partition whose sides together cover every live task exactly once

    Raises:
        ValueError: If ``deadlocked`` names a task that is not live
    """
    selected = frozenset(deadlocked)
    unknown = selected.difference(snapshot.tasks)
    if unknown:
        msg = f"Deadlocked side names tasks outside the snapshot: {sorted(map(repr, unknown))}"
        raise ValueError(msg)
    rest = [task for task in snapshot.tasks if task not in selected]
    return Partition(
        deadlocked=snapshot.restrict(selected),
        unaffected=snapshot.restrict(rest),
    )


# ============================================================================
# SOUNDNESS DIRECTION
# ============================================================================


def certify(
    snapshot: Snapshot,
    tasks: Iterable[TaskId],
    *,
    dedup: bool = True,
) -> Cycle[TaskId]:
    """Produce a WFG cycle certifying that ``tasks`` is deadlocked.

    Builds the wait-for graph of the members only. Because every member
    is blocked on an impeded event whose impeders are all members, every
    member has an outgoing edge inside that graph and a cycle must exist.

    Args:
        snapshot: Runtime snapshot
        tasks: A totally deadlocked set
        dedup: Drop parallel edges before the search

    Returns:
        A validated simple cycle through members of ``tasks``

    Raises:
        ValueError: If ``tasks`` is not totally deadlocked
        EngineInvariantViolationError: If the graph breaks the out-degree
            precondition or the cycle engine finds no valid cycle
    """
    members = frozenset(tasks)
    if not is_totally_deadlocked(snapshot, members):
        msg = "certify() requires a totally deadlocked task set"
        raise ValueError(msg)

    graph = build_wfg(snapshot.restrict(members), snapshot.impeded_by, dedup=dedup)
    _check_out_degrees(snapshot, members, graph, "certify")
    return find_cycle_total(graph)


# ============================================================================
# COMPLETENESS DIRECTION
# ============================================================================


def _check_out_degrees(
    snapshot: Snapshot,
    members: frozenset[TaskId],
    graph: FiniteGraph[TaskId],
    operation: str,
) -> None:
    """Every member must have an outgoing edge in ``graph``."""
    for task in snapshot.tasks:
        if task in members and graph.out_degree(task) == 0:
            raise engine_violation(
                ErrorTemplate.witness_not_deadlocked(
                    task, "has no outgoing edge in the induced wait-for graph"
                ),
                graph,
                operation,
                component="classifier",
            )


def _verify_witness(
    snapshot: Snapshot,
    members: frozenset[TaskId],
    graph: FiniteGraph[TaskId],
) -> None:
    """Re-run the totally deadlocked checks on a witness set."""
    for task in snapshot.tasks:
        if task not in members:
            continue
        if not _blocking_events(snapshot, task):
            raise engine_violation(
                ErrorTemplate.witness_not_deadlocked(task, "is not blocked"),
                graph,
                "verify_witness",
                component="classifier",
            )
        for event in snapshot.waits(task):
            for impeder in snapshot.impeders(event):
                if impeder not in members:
                    raise engine_violation(
                        ErrorTemplate.witness_not_deadlocked(
                            task,
                            f"waits on {event!r}, impeded by {impeder!r} outside the witness",
                        ),
                        graph,
                        "verify_witness",
                        component="classifier",
                    )
    _check_out_degrees(snapshot, members, graph, "verify_witness")


def classify(snapshot: Snapshot, config: DetectorConfig | None = None) -> DeadlockVerdict:
    """Decide whether ``snapshot`` is deadlocked.

    Steps:
        1. Build the WFG of the whole snapshot and search it for a cycle.
           An acyclic WFG means no task set is totally deadlocked.
        2. Compute the maximal totally deadlocked set. If it is empty, every
           cycle found can be broken by some runnable impeder.
        3. Take a cycle inside that set (reusing the step 1 cycle when it
           already lies there), close its tasks under impeders, and report
           the closure with its induced WFG as the witness.

    Args:
        snapshot: Consistent runtime snapshot
        config: Detector configuration (default: DetectorConfig())

    Returns:
        NotDeadlocked, or Deadlocked with a witness cycle and task set

    Raises:
        InconsistentStateError: If the snapshot exceeds ``config.max_tasks``
        EngineInvariantViolationError: If an internal consistency check fails

    Example:
        >>> snap = Snapshot.of({"A": ["e1"], "B": ["e2"]}, {"e1": ["B"], "e2": ["A"]})
        >>> verdict = classify(snap)
        >>> str(verdict.cycle)
        'A -> B -> A'
        >>> sorted(verdict.tasks)
        ['A', 'B']
    """
    if config is None:
        config = DetectorConfig()
    if len(snapshot) > config.max_tasks:
        raise InconsistentStateError(
            ErrorTemplate.snapshot_too_large(len(snapshot), config.max_tasks)
        )

    graph = wfg_of(snapshot, dedup=config.dedup_edges)
    cycle = find_cycle(graph)
    if cycle is None:
        logger.debug("Wait-for graph is acyclic; %d tasks not deadlocked", len(snapshot))
        return NotDeadlocked()
    validate_cycle(graph, cycle)

    core = maximal_deadlock(snapshot)
    if not core:
        logger.warning(
            "Wait-for cycle %s is not a deadlock: a runnable task impedes its closure",
            cycle,
        )
        return NotDeadlocked()

    if not core.issuperset(cycle.members):
        core_graph = graph.induced(core)
        _check_out_degrees(snapshot, core, core_graph, "classify")
        cycle = find_cycle_total(core_graph)

    tasks = deadlocked_closure(snapshot, cycle.members)
    subgraph = graph.induced(tasks)
    if config.verify_witness:
        _verify_witness(snapshot, tasks, subgraph)

    partition = partition_snapshot(snapshot, tasks)
    logger.info(
        "Deadlock detected: %d of %d tasks, witness cycle %s",
        len(tasks),
        len(snapshot),
        cycle,
    )
    return Deadlocked(
        cycle=cycle,
        tasks=tasks,
        subgraph=subgraph,
        unaffected=frozenset(partition.unaffected),
    )


def is_deadlocked(snapshot: Snapshot, config: DetectorConfig | None = None) -> bool:
    """True if ``classify`` reports a deadlock for ``snapshot``."""
    return classify(snapshot, config).is_deadlocked
