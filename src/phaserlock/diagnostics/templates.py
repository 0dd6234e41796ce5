"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Hashable

from .codes import Diagnostic, DiagnosticCode

__all__ = ["ErrorTemplate"]


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    # ========================================================================
    # SNAPSHOT INTEGRITY (1000-1999)
    # ========================================================================

    @staticmethod
    def unknown_waiting_task(task: Hashable) -> Diagnostic:
        """A WaitOn entry names a task that is not live.

        Args:
            task: The waiting task identifier

        Returns:
            Diagnostic for UNKNOWN_WAITING_TASK
        """
        msg = f"Task {task!r} waits on events but is not a live task"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_WAITING_TASK,
            message=msg,
            hint="Include every waiting task in the snapshot task set",
            task=task,
        )

    @staticmethod
    def unknown_impeding_task(task: Hashable, event: Hashable) -> Diagnostic:
        """An ImpededBy entry names a task that is not live.

        Args:
            task: The impeding task identifier
            event: The event the task impedes

        Returns:
            Diagnostic for UNKNOWN_IMPEDING_TASK
        """
        msg = f"Event {event!r} is impeded by {task!r}, which is not a live task"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_IMPEDING_TASK,
            message=msg,
            hint="Impeding tasks must belong to the same snapshot as their waiters",
            task=task,
            event=event,
        )

    @staticmethod
    def unknown_phaser(task: Hashable, phaser: Hashable) -> Diagnostic:
        """A task awaits a phaser that is not part of the runtime state.

        Args:
            task: The awaiting task
            phaser: The missing phaser name

        Returns:
            Diagnostic for UNKNOWN_PHASER
        """
        msg = f"Task {task!r} awaits unknown phaser {phaser!r}"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_PHASER,
            message=msg,
            hint="Capture every phaser referenced by a pending await",
            task=task,
            phaser=phaser,
        )

    @staticmethod
    def task_not_registered(task: Hashable, phaser: Hashable) -> Diagnostic:
        """A task awaits a phaser it is not registered with.

        Args:
            task: The awaiting task
            phaser: The phaser being awaited

        Returns:
            Diagnostic for TASK_NOT_REGISTERED
        """
        msg = f"Task {task!r} awaits phaser {phaser!r} without being registered"
        return Diagnostic(
            code=DiagnosticCode.TASK_NOT_REGISTERED,
            message=msg,
            hint="Register the task with the phaser before it awaits a phase",
            task=task,
            phaser=phaser,
        )

    @staticmethod
    def negative_phase(phaser: Hashable, phase: int, task: Hashable | None = None) -> Diagnostic:
        """A local or awaited phase is negative.

        Args:
            phaser: Phaser the phase belongs to
            phase: The offending phase number
            task: Task that holds or awaits the phase (optional)

        Returns:
            Diagnostic for NEGATIVE_PHASE
        """
        msg = f"Phaser {phaser!r} has negative phase {phase}"
        if task is not None:
            msg = f"{msg} for task {task!r}"
        return Diagnostic(
            code=DiagnosticCode.NEGATIVE_PHASE,
            message=msg,
            hint="Phases count arrivals and start at 0",
            task=task,
            phaser=phaser,
        )

    @staticmethod
    def invalid_phase(phaser: Hashable, phase: object, task: Hashable | None = None) -> Diagnostic:
        """A local or awaited phase is not an integer.

        Args:
            phaser: Phaser the phase belongs to
            phase: The offending value
            task: Task that holds or awaits the phase (optional)

        Returns:
            Diagnostic for INVALID_PHASE
        """
        msg = f"Phaser {phaser!r} has non-integer phase {phase!r}"
        if task is not None:
            msg = f"{msg} for task {task!r}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_PHASE,
            message=msg,
            hint="Phases are arrival counts and must be int",
            task=task,
            phaser=phaser,
        )

    @staticmethod
    def unknown_phaser_member(phaser: Hashable, task: Hashable) -> Diagnostic:
        """A phaser registers a task that is not live.

        Args:
            phaser: The phaser holding the registration
            task: The unknown member

        Returns:
            Diagnostic for UNKNOWN_PHASER_MEMBER
        """
        msg = f"Phaser {phaser!r} registers {task!r}, which is not a live task"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_PHASER_MEMBER,
            message=msg,
            hint="Deregister terminated tasks before capturing the snapshot",
            task=task,
            phaser=phaser,
        )

    @staticmethod
    def snapshot_too_large(task_count: int, limit: int) -> Diagnostic:
        """Snapshot exceeds the configured task bound.

        Args:
            task_count: Number of live tasks in the snapshot
            limit: Configured maximum

        Returns:
            Diagnostic for SNAPSHOT_TOO_LARGE
        """
        msg = f"Snapshot holds {task_count} tasks, limit is {limit}"
        return Diagnostic(
            code=DiagnosticCode.SNAPSHOT_TOO_LARGE,
            message=msg,
            hint="Raise DetectorConfig.max_tasks or split the snapshot",
        )

    # ========================================================================
    # ENGINE INVARIANTS (2000-2999)
    # ========================================================================

    @staticmethod
    def cycle_not_found(vertex_count: int, edge_count: int) -> Diagnostic:
        """DFS exhausted a graph in which every vertex has an outgoing edge.

        Args:
            vertex_count: Number of vertices in the searched graph
            edge_count: Number of edges in the searched graph

        Returns:
            Diagnostic for CYCLE_NOT_FOUND
        """
        msg = (
            f"No cycle found in a graph with {vertex_count} vertices and "
            f"{edge_count} edges where every vertex has an outgoing edge"
        )
        return Diagnostic(
            code=DiagnosticCode.CYCLE_NOT_FOUND,
            message=msg,
            hint="This is a cycle engine defect; report it with the logged graph",
        )

    @staticmethod
    def cycle_invalid(rendered: str, reason: str) -> Diagnostic:
        """A returned cycle is not a closed simple walk of the graph.

        Args:
            rendered: Cycle rendered as text
            reason: What the check found wrong

        Returns:
            Diagnostic for CYCLE_INVALID
        """
        msg = f"Invalid cycle [{rendered}]: {reason}"
        return Diagnostic(
            code=DiagnosticCode.CYCLE_INVALID,
            message=msg,
            hint="This is a cycle engine defect; report it with the logged graph",
        )

    @staticmethod
    def witness_not_deadlocked(task: Hashable, reason: str) -> Diagnostic:
        """The reported witness set fails the totally deadlocked checks.

        Args:
            task: First witness task failing a check
            reason: Which check failed

        Returns:
            Diagnostic for WITNESS_NOT_DEADLOCKED
        """
        msg = f"Witness task {task!r} {reason}"
        return Diagnostic(
            code=DiagnosticCode.WITNESS_NOT_DEADLOCKED,
            message=msg,
            hint="This is a classifier defect; report it with the logged graph",
            task=task,
        )
