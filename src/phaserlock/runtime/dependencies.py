"""Dependency extraction from phaser runtime state.

Derives the two relations the detector consumes:

    WaitOn(t)         = events t is awaiting
    ImpededBy((p, n)) = tasks registered with p whose local phase is < n

Extraction is all-or-nothing: the first referential-integrity failure
raises InconsistentStateError and no partial relation is returned.

Python 3.13+.
"""

import logging

from phaserlock.diagnostics import ErrorTemplate, InconsistentStateError
from phaserlock.snapshot import Snapshot, TaskId

from .phaser import PhaserEvent, RuntimeState

__all__ = ["check_runtime_state", "extract_dependencies"]

logger = logging.getLogger(__name__)


def _is_phase(value: object) -> bool:
    # bool is an int subclass but never a phase
    return isinstance(value, int) and not isinstance(value, bool)


def check_runtime_state(state: RuntimeState) -> None:
    """Validate the referential integrity of a runtime capture.

    Checks, in order: phaser registrations name live tasks with
    non-negative integer local phases; awaiting tasks are live; every awaited
    phaser exists, the awaiting task is registered with it, and the
    awaited phase is a non-negative integer.

    Args:
        state: Captured runtime state

    Raises:
        InconsistentStateError: On the first failed check
    """
    live = frozenset(state.tasks)

    for phaser in state.phasers.values():
        for member, local in phaser.members.items():
            if member not in live:
                raise InconsistentStateError(
                    ErrorTemplate.unknown_phaser_member(phaser.name, member)
                )
            if not _is_phase(local):
                raise InconsistentStateError(
                    ErrorTemplate.invalid_phase(phaser.name, local, member)
                )
            if local < 0:
                raise InconsistentStateError(
                    ErrorTemplate.negative_phase(phaser.name, local, member)
                )

    for task, events in state.awaiting.items():
        if task not in live:
            raise InconsistentStateError(ErrorTemplate.unknown_waiting_task(task))
        for event in events:
            phaser = state.phasers.get(event.phaser)
            if phaser is None:
                raise InconsistentStateError(
                    ErrorTemplate.unknown_phaser(task, event.phaser)
                )
            if not phaser.is_registered(task):
                raise InconsistentStateError(
                    ErrorTemplate.task_not_registered(task, event.phaser)
                )
            if not _is_phase(event.phase):
                raise InconsistentStateError(
                    ErrorTemplate.invalid_phase(event.phaser, event.phase, task)
                )
            if event.phase < 0:
                raise InconsistentStateError(
                    ErrorTemplate.negative_phase(event.phaser, event.phase, task)
                )


def extract_dependencies(state: RuntimeState) -> Snapshot:
    """Compute WaitOn and ImpededBy for a runtime capture.

    Only awaited events get an ImpededBy entry. A task awaiting a phase
    beyond its own local phase impedes itself.

    Args:
        state: Captured runtime state

    Returns:
        Snapshot over the live tasks with PhaserEvent identifiers

    Raises:
        InconsistentStateError: If the capture fails an integrity check

    Example:
        >>> from phaserlock.runtime.phaser import Phaser
        >>> p = Phaser.of("p", {"A": 1, "B": 0})
        >>> state = RuntimeState.of(["A", "B"], [p], {"A": [PhaserEvent("p", 1)]})
        >>> extract_dependencies(state).impeders(PhaserEvent("p", 1))
        ('B',)
    """
    check_runtime_state(state)

    impeded_by: dict[PhaserEvent, tuple[TaskId, ...]] = {}
    for events in state.awaiting.values():
        for event in events:
            if event not in impeded_by:
                impeded_by[event] = state.phasers[event.phaser].laggards(event.phase)

    snapshot = Snapshot.of(
        {task: events for task, events in state.awaiting.items() if events},
        impeded_by,
        tasks=state.tasks,
    )
    logger.debug(
        "Extracted dependencies: %d tasks, %d blocked, %d events",
        len(snapshot),
        len(snapshot.wait_on),
        len(impeded_by),
    )
    return snapshot
