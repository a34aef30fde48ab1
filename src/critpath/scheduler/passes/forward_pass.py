"""Forward pass: earliest start and finish per task."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import timedelta

from critpath.calendar import ElapsedTimeCalendar, WorkingTimeCalendar
from critpath.logger import debug_enabled, get_logger
from critpath.models import Dependency, Task, TaskId

from ..constraints import start_floor
from ..core import EarlyTimes
from ..graph import DependencyGraph, build_dependency_graph

logger = get_logger()


class ForwardPass:
    """Computes early times by propagating constraints from root tasks.

    Tasks are visited in Kahn topological order, so every incoming edge is
    final by the time its successor is processed and each edge is relaxed
    exactly once. A task never starts before its own nominal start.
    """

    def __init__(self, calendar: WorkingTimeCalendar | None = None):
        self.calendar = calendar or ElapsedTimeCalendar()

    def compute(
        self,
        tasks: Sequence[Task],
        dependencies: Iterable[Dependency],
        graph: DependencyGraph | None = None,
    ) -> dict[TaskId, EarlyTimes]:
        """Run the forward pass.

        Args:
            tasks: Tasks to schedule
            dependencies: Dependencies between them (inactive ones are ignored)
            graph: Pre-built graph for these dependencies, if the caller has one

        Returns:
            Dictionary mapping task_id to its early start/finish

        Raises:
            CircularDependencyError: If the active dependencies contain a cycle
        """
        task_map = {task.id: task for task in tasks}
        if graph is None:
            graph = build_dependency_graph(dependencies)
        order = graph.topological_order(task_map)

        early: dict[TaskId, EarlyTimes] = {}
        for task_id in order:
            task = task_map[task_id]
            early_start = task.start
            binding: Dependency | None = None

            for dep in graph.incoming.get(task_id, []):
                pred_times = early.get(dep.predecessor_id)
                if pred_times is None:
                    continue
                floor = start_floor(
                    dep,
                    pred_times.early_start,
                    pred_times.early_finish,
                    task.duration,
                    self.calendar,
                )
                if floor > early_start:
                    early_start = floor
                    binding = dep

            early_start = self.calendar.add_working_time(early_start, timedelta(0))
            early_finish = self.calendar.add_working_time(early_start, task.duration)
            early[task_id] = EarlyTimes(early_start=early_start, early_finish=early_finish)

            if debug_enabled():
                source = "own start" if binding is None else f"driven by '{binding}'"
                logger.debug(f"  {task_id}: ES={early_start} EF={early_finish} ({source})")

        return early


def compute_early_times(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    calendar: WorkingTimeCalendar | None = None,
) -> dict[TaskId, EarlyTimes]:
    """Compute earliest start/finish for every task."""
    return ForwardPass(calendar).compute(tasks, dependencies)
