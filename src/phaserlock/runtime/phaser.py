"""Phaser runtime state as captured at a consistency boundary.

A phaser synchronizes the tasks registered with it in phases. Each
registered task carries a local phase: the number of arrivals it has
signalled. A task awaiting phase ``n`` of phaser ``p`` is released once
every registered task has signalled at least ``n`` arrivals.

These types only describe a captured state; issuing signal/await/drop
operations and advancing phases belongs to the runtime itself.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from phaserlock.snapshot import TaskId

__all__ = ["Phaser", "PhaserEvent", "RuntimeState"]

type PhaserName = Hashable


@dataclass(frozen=True, slots=True)
class PhaserEvent:
    """The event "phaser ``phaser`` reaches phase ``phase``".

    Used as the EventId of extracted snapshots.

    Attributes:
        phaser: Phaser name
        phase: Phase number being awaited
    """

    phaser: PhaserName
    phase: int

    def __str__(self) -> str:
        """Render as ``phaser@phase``."""
        return f"{self.phaser}@{self.phase}"


@dataclass(frozen=True, slots=True)
class Phaser:
    """Registration table of one phaser.

    Attributes:
        name: Phaser name (unique within a RuntimeState)
        members: Registered task -> local phase, in registration order
    """

    name: PhaserName
    members: Mapping[TaskId, int]

    @classmethod
    def of(cls, name: PhaserName, members: Mapping[TaskId, int]) -> Phaser:
        """Build a phaser with a read-only copy of ``members``."""
        return cls(name=name, members=MappingProxyType(dict(members)))

    def is_registered(self, task: TaskId) -> bool:
        """True if ``task`` is registered with this phaser."""
        return task in self.members

    def laggards(self, phase: int) -> tuple[TaskId, ...]:
        """Registered tasks that have not yet signalled ``phase`` arrivals."""
        return tuple(task for task, local in self.members.items() if local < phase)


@dataclass(frozen=True, slots=True)
class RuntimeState:
    """Consistent capture of live tasks, phasers, and pending awaits.

    Attributes:
        tasks: Live task identifiers
        phasers: Phaser name -> Phaser
        awaiting: Task -> events it is blocked on (absent: running)
    """

    tasks: tuple[TaskId, ...]
    phasers: Mapping[PhaserName, Phaser]
    awaiting: Mapping[TaskId, tuple[PhaserEvent, ...]]

    @classmethod
    def of(
        cls,
        tasks: Iterable[TaskId],
        phasers: Iterable[Phaser],
        awaiting: Mapping[TaskId, Iterable[PhaserEvent]] | None = None,
    ) -> RuntimeState:
        """Build a runtime state from plain collections.

        Args:
            tasks: Live tasks
            phasers: Phasers, keyed by their names
            awaiting: Pending awaits per task (default: none)

        Returns:
            Immutable RuntimeState

        Example:
            >>> barrier = Phaser.of("barrier", {"A": 1, "B": 0})
            >>> state = RuntimeState.of(
            ...     ["A", "B"], [barrier], {"A": [PhaserEvent("barrier", 1)]}
            ... )
            >>> state.awaiting["A"]
            (PhaserEvent(phaser='barrier', phase=1),)
        """
        pending = {
            task: tuple(dict.fromkeys(events))
            for task, events in (awaiting or {}).items()
        }
        return cls(
            tasks=tuple(dict.fromkeys(tasks)),
            phasers=MappingProxyType({phaser.name: phaser for phaser in phasers}),
            awaiting=MappingProxyType(pending),
        )
