"""Float computation and critical-path classification."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timedelta

from critpath.calendar import ElapsedTimeCalendar, WorkingTimeCalendar
from critpath.models import Dependency, Task, TaskId

from .config import DEFAULT_CRITICAL_EPSILON_DAYS
from .constraints import edge_slack
from .core import EarlyTimes, FloatClassification, LateTimes
from .graph import DependencyGraph, active_dependencies, build_dependency_graph


class FloatClassifier:
    """Merges early and late times into float values and critical flags.

    Total float is the working time from early start to late start (equal to
    the working time from early finish to late finish). A task is critical
    when its total float is within ``epsilon_days`` of zero and infeasible when
    its float is negative beyond that tolerance. Negative float is reported,
    never clamped.

    Tasks missing early or late times get zero float and are not critical.
    """

    def __init__(
        self,
        calendar: WorkingTimeCalendar | None = None,
        epsilon_days: float = DEFAULT_CRITICAL_EPSILON_DAYS,
    ):
        self.calendar = calendar or ElapsedTimeCalendar()
        self.epsilon = timedelta(days=epsilon_days)

    def classify(
        self,
        tasks: Sequence[Task],
        early: Mapping[TaskId, EarlyTimes],
        late: Mapping[TaskId, LateTimes],
        dependencies: Iterable[Dependency] = (),
        graph: DependencyGraph | None = None,
    ) -> dict[TaskId, FloatClassification]:
        """Classify every task.

        Args:
            tasks: Tasks that were scheduled
            early: Forward pass output
            late: Backward pass output
            dependencies: Dependencies used for free float (optional)
            graph: Pre-built graph for these dependencies, if the caller has one

        Returns:
            Dictionary mapping task_id to its float classification
        """
        if graph is None:
            graph = build_dependency_graph(dependencies)
        project_finish = max((times.early_finish for times in early.values()), default=None)

        result: dict[TaskId, FloatClassification] = {}
        for task in tasks:
            early_times = early.get(task.id)
            late_times = late.get(task.id)
            if early_times is None or late_times is None:
                result[task.id] = FloatClassification(
                    total_float=timedelta(0), free_float=timedelta(0), is_critical=False
                )
                continue

            total_float = self.calendar.working_time_between(
                early_times.early_start, late_times.late_start
            )
            free_float = self._free_float(task.id, early_times, early, graph, project_finish)
            result[task.id] = FloatClassification(
                total_float=total_float,
                free_float=free_float,
                is_critical=abs(total_float) < self.epsilon,
                is_infeasible=total_float <= -self.epsilon,
            )

        return result

    def critical_dependencies(
        self,
        dependencies: Iterable[Dependency],
        early: Mapping[TaskId, EarlyTimes],
        classification: Mapping[TaskId, FloatClassification],
    ) -> list[Dependency]:
        """Active dependencies that drive the critical path.

        An edge is critical when both endpoints are critical and the edge has
        no slack in the early schedule.
        """
        critical: list[Dependency] = []
        for dep in active_dependencies(dependencies):
            pred_class = classification.get(dep.predecessor_id)
            succ_class = classification.get(dep.successor_id)
            if pred_class is None or succ_class is None:
                continue
            if not (pred_class.is_critical and succ_class.is_critical):
                continue
            pred_times = early.get(dep.predecessor_id)
            succ_times = early.get(dep.successor_id)
            if pred_times is None or succ_times is None:
                continue
            slack = edge_slack(
                dep,
                pred_times.early_start,
                pred_times.early_finish,
                succ_times.early_start,
                succ_times.early_finish,
                self.calendar,
            )
            if abs(slack) < self.epsilon:
                critical.append(dep)
        return critical

    def _free_float(
        self,
        task_id: TaskId,
        times: EarlyTimes,
        early: Mapping[TaskId, EarlyTimes],
        graph: DependencyGraph,
        project_finish: datetime | None,
    ) -> timedelta:
        """Slack before the task delays any immediate successor's early dates."""
        slacks: list[timedelta] = []
        for dep in graph.outgoing.get(task_id, []):
            succ_times = early.get(dep.successor_id)
            if succ_times is None:
                continue
            slacks.append(
                edge_slack(
                    dep,
                    times.early_start,
                    times.early_finish,
                    succ_times.early_start,
                    succ_times.early_finish,
                    self.calendar,
                )
            )
        if slacks:
            return min(slacks)
        if project_finish is None:
            return timedelta(0)
        return self.calendar.working_time_between(times.early_finish, project_finish)


def classify(
    tasks: Sequence[Task],
    early: Mapping[TaskId, EarlyTimes],
    late: Mapping[TaskId, LateTimes],
    dependencies: Iterable[Dependency] = (),
    calendar: WorkingTimeCalendar | None = None,
    epsilon_days: float = DEFAULT_CRITICAL_EPSILON_DAYS,
) -> dict[TaskId, FloatClassification]:
    """Compute total/free float and critical flags for every task."""
    return FloatClassifier(calendar, epsilon_days).classify(tasks, early, late, dependencies)
