"""Adjacency structures over active dependencies."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from critpath.exceptions import CircularDependencyError
from critpath.models import Dependency, TaskId


def _default_adjacency() -> dict[TaskId, list[TaskId]]:
    return {}


def _default_edges() -> dict[TaskId, list[Dependency]]:
    return {}


def active_dependencies(dependencies: Iterable[Dependency]) -> list[Dependency]:
    """Filter out soft-deleted dependencies, preserving order."""
    return [dep for dep in dependencies if dep.is_active]


@dataclass
class DependencyGraph:
    """Forward and reverse adjacency maps keyed by task id.

    ``successors``/``predecessors`` hold neighbour ids; ``outgoing``/``incoming``
    hold the dependency edges themselves so passes can read type and lag.
    """

    successors: dict[TaskId, list[TaskId]] = field(default_factory=_default_adjacency)
    predecessors: dict[TaskId, list[TaskId]] = field(default_factory=_default_adjacency)
    outgoing: dict[TaskId, list[Dependency]] = field(default_factory=_default_edges)
    incoming: dict[TaskId, list[Dependency]] = field(default_factory=_default_edges)

    def has_predecessors(self, task_id: TaskId) -> bool:
        return bool(self.predecessors.get(task_id))

    def has_successors(self, task_id: TaskId) -> bool:
        return bool(self.successors.get(task_id))

    def roots(self, task_ids: Iterable[TaskId]) -> list[TaskId]:
        """Tasks with no active predecessor, in input order."""
        return [task_id for task_id in task_ids if not self.has_predecessors(task_id)]

    def sinks(self, task_ids: Iterable[TaskId]) -> list[TaskId]:
        """Tasks with no active successor, in input order."""
        return [task_id for task_id in task_ids if not self.has_successors(task_id)]

    def topological_order(self, task_ids: Iterable[TaskId]) -> list[TaskId]:
        """Kahn topological order over the given tasks.

        Ties are broken by input order, so the result is deterministic.
        Edges to ids outside ``task_ids`` are ignored.

        Raises:
            CircularDependencyError: If some tasks can never be released
        """
        in_degree = dict.fromkeys(task_ids, 0)
        for task_id in in_degree:
            for pred_id in self.predecessors.get(task_id, []):
                if pred_id in in_degree:
                    in_degree[task_id] += 1

        queue: deque[TaskId] = deque(
            task_id for task_id, degree in in_degree.items() if degree == 0
        )
        order: list[TaskId] = []

        while queue:
            task_id = queue.popleft()
            order.append(task_id)
            for succ_id in self.successors.get(task_id, []):
                if succ_id not in in_degree:
                    continue
                in_degree[succ_id] -= 1
                if in_degree[succ_id] == 0:
                    queue.append(succ_id)

        if len(order) != len(in_degree):
            released = set(order)
            stuck = [task_id for task_id in in_degree if task_id not in released]
            raise CircularDependencyError(
                f"Circular dependency detected among tasks: {', '.join(stuck)}", stuck
            )

        return order


def build_dependency_graph(dependencies: Iterable[Dependency]) -> DependencyGraph:
    """Index active dependencies into forward and reverse adjacency maps.

    Pure function of its input; inactive dependencies are dropped first.
    """
    graph = DependencyGraph()
    for dep in active_dependencies(dependencies):
        graph.successors.setdefault(dep.predecessor_id, []).append(dep.successor_id)
        graph.predecessors.setdefault(dep.successor_id, []).append(dep.predecessor_id)
        graph.outgoing.setdefault(dep.predecessor_id, []).append(dep)
        graph.incoming.setdefault(dep.successor_id, []).append(dep)
    return graph
