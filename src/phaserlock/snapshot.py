"""Immutable runtime snapshot consumed by the deadlock detector.

A snapshot captures the two relations the detector needs:

    WaitOn(task)     -> events the task is blocked on
    ImpededBy(event) -> tasks that must act before the event can complete

Identifiers are opaque hashables. Relations are stored as read-only
mappings of tuples; tuple order is the caller's insertion order, which is
the order every downstream pass enumerates them in.

Thread Safety:
    Snapshots are never mutated after construction and may be shared
    freely between threads.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from phaserlock.diagnostics import ErrorTemplate, InconsistentStateError

__all__ = ["EventId", "Snapshot", "TaskId"]

type TaskId = Hashable
type EventId = Hashable

_NO_EVENTS: tuple[EventId, ...] = ()
_NO_TASKS: tuple[TaskId, ...] = ()


def _ordered_unique[T](items: Iterable[T]) -> tuple[T, ...]:
    """Drop duplicates, keeping first-occurrence order."""
    return tuple(dict.fromkeys(items))


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Consistent view of live tasks and their blocking relations.

    Use ``Snapshot.of()`` to build one from plain mappings; the constructor
    expects already-normalized fields.

    Attributes:
        tasks: Live task identifiers
        wait_on: Task -> events it is blocked on (missing key: not blocked)
        impeded_by: Event -> tasks impeding it (missing key: not impeded)

    Raises:
        InconsistentStateError: If a relation names a task that is not live
    """

    tasks: tuple[TaskId, ...]
    wait_on: Mapping[TaskId, tuple[EventId, ...]]
    impeded_by: Mapping[EventId, tuple[TaskId, ...]]

    def __post_init__(self) -> None:
        """Check referential integrity of both relations."""
        live = frozenset(self.tasks)
        for task in self.wait_on:
            if task not in live:
                raise InconsistentStateError(ErrorTemplate.unknown_waiting_task(task))
        for event, impeders in self.impeded_by.items():
            for task in impeders:
                if task not in live:
                    raise InconsistentStateError(
                        ErrorTemplate.unknown_impeding_task(task, event)
                    )

    @classmethod
    def of(
        cls,
        wait_on: Mapping[TaskId, Iterable[EventId]],
        impeded_by: Mapping[EventId, Iterable[TaskId]],
        tasks: Iterable[TaskId] | None = None,
    ) -> Snapshot:
        """Build a snapshot from plain mappings.

        Args:
            wait_on: Task -> events it waits on
            impeded_by: Event -> tasks impeding it
            tasks: Live tasks. Defaults to every task named by either relation.

        Returns:
            Normalized, immutable Snapshot

        Raises:
            InconsistentStateError: If ``tasks`` is given and a relation
                names a task outside it

        Example:
            >>> snap = Snapshot.of({"A": ["e1"], "B": ["e2"]}, {"e1": ["B"], "e2": ["A"]})
            >>> snap.tasks
            ('A', 'B')
            >>> snap.impeders("e1")
            ('B',)
        """
        waits = {task: _ordered_unique(events) for task, events in wait_on.items()}
        impeders = {event: _ordered_unique(ts) for event, ts in impeded_by.items()}
        if tasks is None:
            named: list[TaskId] = list(waits)
            for ts in impeders.values():
                named.extend(ts)
            live = _ordered_unique(named)
        else:
            live = _ordered_unique(tasks)
        return cls(
            tasks=live,
            wait_on=MappingProxyType(waits),
            impeded_by=MappingProxyType(impeders),
        )

    @property
    def events(self) -> tuple[EventId, ...]:
        """Every event named by either relation, in first-appearance order."""
        named: list[EventId] = []
        for events in self.wait_on.values():
            named.extend(events)
        named.extend(self.impeded_by)
        return _ordered_unique(named)

    @property
    def blocked_tasks(self) -> tuple[TaskId, ...]:
        """Live tasks with a nonempty WaitOn set."""
        return tuple(task for task in self.tasks if self.wait_on.get(task))

    def waits(self, task: TaskId) -> tuple[EventId, ...]:
        """Events ``task`` is blocked on (empty if not blocked)."""
        return self.wait_on.get(task, _NO_EVENTS)

    def impeders(self, event: EventId) -> tuple[TaskId, ...]:
        """Tasks impeding ``event`` (empty if the event has no entry)."""
        return self.impeded_by.get(event, _NO_TASKS)

    def is_blocked(self, task: TaskId) -> bool:
        """True if ``task`` waits on at least one event."""
        return bool(self.wait_on.get(task))

    def restrict(self, tasks: Iterable[TaskId]) -> Mapping[TaskId, tuple[EventId, ...]]:
        """WaitOn restricted to ``tasks``, keeping snapshot task order.

        Args:
            tasks: Subset of live tasks

        Returns:
            Read-only mapping of each selected task to its wait set
        """
        selected = frozenset(tasks)
        return MappingProxyType(
            {task: self.waits(task) for task in self.tasks if task in selected}
        )

    def __len__(self) -> int:
        """Number of live tasks."""
        return len(self.tasks)
