"""Wait-for graph construction.

The wait-for graph (WFG) is the relational join of WaitOn and ImpededBy
over their shared event: ``(t, t')`` is an edge iff some event ``e`` has
``e in WaitOn(t)`` and ``t' in ImpededBy(e)``.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping

from phaserlock.snapshot import EventId, Snapshot, TaskId

from .graph import FiniteGraph

__all__ = ["build_wfg", "iter_wfg_edges", "wfg_of"]

logger = logging.getLogger(__name__)


def iter_wfg_edges(
    wait_on: Mapping[TaskId, Iterable[EventId]],
    impeded_by: Mapping[EventId, Iterable[TaskId]],
) -> Iterator[tuple[TaskId, TaskId]]:
    """Yield every WFG edge, one per matching (task, event, impeder) triple.

    ``impeded_by`` is the EventId-keyed index used for the join, so the
    cost is O(|WaitOn pairs| x average impeders per event). Events absent
    from ``impeded_by`` contribute no edges.

    Args:
        wait_on: Task -> events it is blocked on
        impeded_by: Event -> tasks impeding it

    Yields:
        (waiting task, impeding task) pairs, duplicates included
    """
    for task, events in wait_on.items():
        for event in events:
            for impeder in impeded_by.get(event, ()):
                yield task, impeder


def build_wfg(
    wait_on: Mapping[TaskId, Iterable[EventId]],
    impeded_by: Mapping[EventId, Iterable[TaskId]],
    *,
    dedup: bool = False,
) -> FiniteGraph[TaskId]:
    """Join WaitOn and ImpededBy into a wait-for graph.

    Edge order follows WaitOn order, then each task's event order, then
    each event's impeder order.

    Args:
        wait_on: Task -> events it is blocked on
        impeded_by: Event -> tasks impeding it
        dedup: Drop parallel edges (keeps first occurrence). Membership is
            the same either way.

    Returns:
        FiniteGraph over task identifiers

    Example:
        >>> g = build_wfg({"A": ["e1"], "B": ["e2"]}, {"e1": ["B"], "e2": ["A"]})
        >>> g.edges
        (('A', 'B'), ('B', 'A'))
    """
    edges = iter_wfg_edges(wait_on, impeded_by)
    graph = FiniteGraph(dict.fromkeys(edges) if dedup else edges)
    logger.debug(
        "Built wait-for graph: %d vertices, %d edges (dedup=%s)",
        len(graph.vertices),
        len(graph),
        dedup,
    )
    return graph


def wfg_of(snapshot: Snapshot, *, dedup: bool = False) -> FiniteGraph[TaskId]:
    """Wait-for graph of a whole snapshot.

    Args:
        snapshot: Consistent runtime snapshot
        dedup: Drop parallel edges

    Returns:
        FiniteGraph over the snapshot's task identifiers
    """
    return build_wfg(snapshot.wait_on, snapshot.impeded_by, dedup=dedup)
