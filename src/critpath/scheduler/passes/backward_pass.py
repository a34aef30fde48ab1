"""Backward pass: latest start and finish per task."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from critpath.calendar import ElapsedTimeCalendar, WorkingTimeCalendar
from critpath.logger import get_logger
from critpath.models import Dependency, Task, TaskId

from ..constraints import finish_ceiling
from ..core import EarlyTimes, LateTimes
from ..graph import DependencyGraph, build_dependency_graph

logger = get_logger()


class BackwardPass:
    """Computes late times by propagating ceilings back from sink tasks.

    The anchor is the project finish, the latest early finish of any task.
    Every task's late finish starts at the anchor (sinks keep it), is lowered
    to the task's ``end_before`` if it has one, and then to the tightest
    ceiling imposed by its successors.
    """

    def __init__(self, calendar: WorkingTimeCalendar | None = None):
        self.calendar = calendar or ElapsedTimeCalendar()

    def compute(
        self,
        tasks: Sequence[Task],
        dependencies: Iterable[Dependency],
        early_times: Mapping[TaskId, EarlyTimes],
        graph: DependencyGraph | None = None,
    ) -> dict[TaskId, LateTimes]:
        """Run the backward pass.

        Args:
            tasks: Tasks to schedule
            dependencies: Dependencies between them (inactive ones are ignored)
            early_times: Forward pass output; tasks missing from it are skipped
            graph: Pre-built graph for these dependencies, if the caller has one

        Returns:
            Dictionary mapping task_id to its late start/finish

        Raises:
            CircularDependencyError: If the active dependencies contain a cycle
        """
        if not early_times:
            return {}

        task_map = {task.id: task for task in tasks}
        if graph is None:
            graph = build_dependency_graph(dependencies)
        order = [task_id for task_id in graph.topological_order(task_map) if task_id in early_times]

        project_finish = max(times.early_finish for times in early_times.values())
        logger.debug(f"  Project finish anchor: {project_finish}")

        late: dict[TaskId, LateTimes] = {}
        for task_id in reversed(order):
            task = task_map[task_id]
            late_finish = project_finish
            if task.end_before is not None and task.end_before < late_finish:
                late_finish = task.end_before

            for dep in graph.outgoing.get(task_id, []):
                succ_times = late.get(dep.successor_id)
                if succ_times is None:
                    continue
                ceiling = finish_ceiling(
                    dep,
                    succ_times.late_start,
                    succ_times.late_finish,
                    task.duration,
                    self.calendar,
                )
                late_finish = min(late_finish, ceiling)

            late_start = self.calendar.subtract_working_time(late_finish, task.duration)
            late[task_id] = LateTimes(late_start=late_start, late_finish=late_finish)
            logger.debug(f"  {task_id}: LS={late_start} LF={late_finish}")

        return late


def compute_late_times(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    early_times: Mapping[TaskId, EarlyTimes],
    calendar: WorkingTimeCalendar | None = None,
) -> dict[TaskId, LateTimes]:
    """Compute latest start/finish for every task."""
    return BackwardPass(calendar).compute(tasks, dependencies, early_times)
