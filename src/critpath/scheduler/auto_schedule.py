"""Earliest-feasible date assignment."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timedelta

from critpath.calendar import ElapsedTimeCalendar, WorkingTimeCalendar
from critpath.exceptions import CircularDependencyError
from critpath.logger import get_logger
from critpath.models import Dependency, Task, TaskId

from .constraints import start_floor
from .graph import DependencyGraph, build_dependency_graph

logger = get_logger()


class AutoScheduler:
    """Assigns each task its earliest feasible window.

    A task starts at the latest of the project start and every floor its
    active predecessors impose, using the predecessors' *scheduled* dates.
    Predecessors are always scheduled first (depth-first, explicit stack).
    Durations are taken from each task's original window. Unlike the
    forward pass, a task's own nominal start is ignored.
    """

    def __init__(self, calendar: WorkingTimeCalendar | None = None):
        self.calendar = calendar or ElapsedTimeCalendar()

    def schedule(
        self,
        tasks: Sequence[Task],
        dependencies: Iterable[Dependency],
        project_start: datetime,
        graph: DependencyGraph | None = None,
    ) -> list[Task]:
        """Assign concrete start/end dates.

        Args:
            tasks: Tasks to schedule
            dependencies: Dependencies between them (inactive ones are ignored)
            project_start: Nothing starts before this instant
            graph: Pre-built graph for these dependencies, if the caller has one

        Returns:
            New Task objects with updated windows, in input order

        Raises:
            CircularDependencyError: If a task is reached again while its own
                predecessors are still being scheduled
        """
        task_map = {task.id: task for task in tasks}
        if graph is None:
            graph = build_dependency_graph(dependencies)

        scheduled: dict[TaskId, tuple[datetime, datetime]] = {}
        # Roots first, then anything not reached from them
        for task_id in [*graph.roots(task_map), *task_map]:
            if task_id not in scheduled:
                self._schedule_with_predecessors(task_id, task_map, graph, project_start, scheduled)

        return [task.with_window(*scheduled[task.id]) for task in tasks]

    def _schedule_with_predecessors(
        self,
        target_id: TaskId,
        task_map: dict[TaskId, Task],
        graph: DependencyGraph,
        project_start: datetime,
        scheduled: dict[TaskId, tuple[datetime, datetime]],
    ) -> None:
        path: list[TaskId] = [target_id]
        on_path: set[TaskId] = {target_id}
        stack: list[tuple[TaskId, Iterator[Dependency]]] = [
            (target_id, iter(graph.incoming.get(target_id, [])))
        ]

        while stack:
            task_id, incoming = stack[-1]
            dep = next(incoming, None)
            if dep is not None:
                pred_id = dep.predecessor_id
                if pred_id in scheduled or pred_id not in task_map:
                    continue
                if pred_id in on_path:
                    cycle = path[path.index(pred_id) :] + [pred_id]
                    cycle.reverse()
                    raise CircularDependencyError(
                        f"Circular dependency detected: {' -> '.join(cycle)}", cycle
                    )
                path.append(pred_id)
                on_path.add(pred_id)
                stack.append((pred_id, iter(graph.incoming.get(pred_id, []))))
                continue

            stack.pop()
            path.pop()
            on_path.discard(task_id)
            scheduled[task_id] = self._place(task_map[task_id], graph, project_start, scheduled)

    def _place(
        self,
        task: Task,
        graph: DependencyGraph,
        project_start: datetime,
        scheduled: dict[TaskId, tuple[datetime, datetime]],
    ) -> tuple[datetime, datetime]:
        start = project_start
        for dep in graph.incoming.get(task.id, []):
            window = scheduled.get(dep.predecessor_id)
            if window is None:
                continue
            floor = start_floor(dep, window[0], window[1], task.duration, self.calendar)
            if floor > start:
                start = floor

        start = self.calendar.add_working_time(start, timedelta(0))
        end = self.calendar.add_working_time(start, task.duration)
        if (start, end) != (task.start, task.end):
            logger.changes(f"  {task.id}: {task.start} - {task.end} -> {start} - {end}")
        return start, end


def auto_schedule(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    project_start: datetime,
    calendar: WorkingTimeCalendar | None = None,
) -> list[Task]:
    """Assign every task its earliest feasible window from project_start."""
    return AutoScheduler(calendar).schedule(tasks, dependencies, project_start)
