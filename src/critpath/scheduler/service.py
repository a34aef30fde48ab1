"""High-level scheduling service and function-level API."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from critpath.calendar import ElapsedTimeCalendar, WorkingTimeCalendar
from critpath.exceptions import CircularDependencyError, ScheduleSizeError
from critpath.logger import get_logger
from critpath.models import Dependency, Task, TaskId

from .auto_schedule import AutoScheduler
from .classifier import FloatClassifier
from .config import SchedulingConfig
from .core import ScheduledTask, ScheduleResult
from .cycles import find_cycle, format_cycle
from .graph import DependencyGraph, active_dependencies, build_dependency_graph
from .passes import BackwardPass, ForwardPass
from .validator import ValidationReport, validate_schedule_inputs
from .validator import validate_dependency as _validate_dependency

logger = get_logger()


class SchedulingService:
    """Critical-path analysis and auto-scheduling over one task set.

    This service coordinates:
    - input validation (structural errors stop everything)
    - cycle detection (a cycle stops everything)
    - ForwardPass / BackwardPass (early and late times)
    - FloatClassifier (float, critical flags, driving dependencies)
    - AutoScheduler (earliest-feasible dates)

    The service holds configuration only. Every call works on its own
    inputs and returns new objects, so one instance can be shared freely.
    """

    def __init__(
        self,
        config: SchedulingConfig | None = None,
        calendar: WorkingTimeCalendar | None = None,
    ):
        """Initialize scheduling service.

        Args:
            config: Optional scheduling configuration (tolerance, size guard)
            calendar: Optional working-time calendar (defaults to elapsed time)
        """
        self.config = config or SchedulingConfig()
        self.calendar = calendar or ElapsedTimeCalendar()

    def validate_dependency(
        self, dependency: Dependency, existing: Iterable[Dependency] = ()
    ) -> bool:
        """Check a single dependency for structural validity."""
        return _validate_dependency(dependency, existing)

    def has_circular_dependency(
        self,
        tasks: Sequence[Task],
        dependencies: Iterable[Dependency],
        candidate: Dependency | None = None,
    ) -> bool:
        """Check whether the dependencies (plus an optional candidate) contain a cycle."""
        cycle = find_cycle([task.id for task in tasks], dependencies, candidate)
        if cycle:
            logger.checks(f"Cycle found: {format_cycle(cycle)}")
        return cycle is not None

    def validate(
        self, tasks: Sequence[Task], dependencies: Iterable[Dependency]
    ) -> ValidationReport:
        """Collect structural errors and window warnings without raising."""
        report = validate_schedule_inputs(tasks, dependencies, self.calendar)
        if report.is_valid:
            cycle = find_cycle([task.id for task in tasks], dependencies)
            if cycle:
                report.add_error(f"Circular dependency detected: {format_cycle(cycle)}")
        return report

    def compute_schedule(
        self, tasks: Sequence[Task], dependencies: Iterable[Dependency]
    ) -> ScheduleResult:
        """Compute early/late times, float and critical flags for every task.

        Returns:
            ScheduleResult with tasks in input order

        Raises:
            ScheduleSizeError: If the task set exceeds ``config.max_tasks``
            StructuralError: If tasks or dependencies are malformed
            CircularDependencyError: If the active dependencies contain a cycle
        """
        dependencies = list(dependencies)
        graph, warnings = self._prepare(tasks, dependencies)

        early = ForwardPass(self.calendar).compute(tasks, dependencies, graph)
        late = BackwardPass(self.calendar).compute(tasks, dependencies, early, graph)

        classifier = FloatClassifier(self.calendar, self.config.critical_epsilon_days)
        classification = classifier.classify(tasks, early, late, dependencies, graph)

        scheduled: list[ScheduledTask] = []
        for task in tasks:
            early_times = early.get(task.id)
            late_times = late.get(task.id)
            floats = classification[task.id]
            scheduled.append(
                ScheduledTask(
                    task=task,
                    earliest_start=early_times.early_start if early_times else None,
                    earliest_finish=early_times.early_finish if early_times else None,
                    latest_start=late_times.late_start if late_times else None,
                    latest_finish=late_times.late_finish if late_times else None,
                    total_float=floats.total_float,
                    free_float=floats.free_float,
                    is_critical=floats.is_critical,
                    is_infeasible=floats.is_infeasible,
                )
            )

        result = ScheduleResult(
            tasks=scheduled,
            project_start=min((t.early_start for t in early.values()), default=None),
            project_finish=max((t.early_finish for t in early.values()), default=None),
            critical_dependencies=classifier.critical_dependencies(
                dependencies, early, classification
            ),
            warnings=warnings,
        )

        logger.changes(
            f"Scheduled {len(scheduled)} tasks: {result.project_start} - {result.project_finish}, "
            f"{len(result.critical_path())} critical"
        )
        for task_id in result.infeasible_tasks():
            logger.warning(f"Task {task_id} has negative float (schedule is over-constrained)")

        return result

    def auto_schedule_tasks(
        self,
        tasks: Sequence[Task],
        dependencies: Iterable[Dependency],
        project_start: datetime,
    ) -> list[Task]:
        """Assign every task its earliest feasible window from project_start.

        Raises:
            ScheduleSizeError: If the task set exceeds ``config.max_tasks``
            StructuralError: If tasks or dependencies are malformed
            CircularDependencyError: If the active dependencies contain a cycle
        """
        dependencies = list(dependencies)
        graph, _ = self._prepare(tasks, dependencies)
        logger.changes(f"Auto-scheduling {len(tasks)} tasks from {project_start}")
        return AutoScheduler(self.calendar).schedule(tasks, dependencies, project_start, graph)

    def get_critical_path(
        self, tasks: Sequence[Task], dependencies: Iterable[Dependency]
    ) -> list[TaskId]:
        """Ids of critical tasks, in input order."""
        return self.compute_schedule(tasks, dependencies).critical_path()

    def calculate_float_times(
        self, tasks: Sequence[Task], dependencies: Iterable[Dependency]
    ) -> dict[TaskId, timedelta]:
        """Total float per task id."""
        result = self.compute_schedule(tasks, dependencies)
        return {scheduled.task_id: scheduled.total_float for scheduled in result.tasks}

    def get_task_dependencies(
        self, task_id: TaskId, dependencies: Iterable[Dependency]
    ) -> list[Dependency]:
        """Active dependencies where the task is predecessor or successor."""
        return [dep for dep in active_dependencies(dependencies) if dep.involves(task_id)]

    def _prepare(
        self, tasks: Sequence[Task], dependencies: list[Dependency]
    ) -> tuple[DependencyGraph, list[str]]:
        """Run every check that must pass before a pass may start."""
        if self.config.max_tasks is not None and len(tasks) > self.config.max_tasks:
            raise ScheduleSizeError(
                f"{len(tasks)} tasks exceeds the configured limit of {self.config.max_tasks}"
            )

        report = validate_schedule_inputs(tasks, dependencies, self.calendar)
        report.raise_for_errors()
        if self.config.warn_on_violated_windows:
            for warning in report.warnings:
                logger.checks(f"Warning: {warning}")

        cycle = find_cycle([task.id for task in tasks], dependencies)
        if cycle:
            raise CircularDependencyError(
                f"Circular dependency detected: {format_cycle(cycle)}", cycle
            )

        warnings = report.warnings if self.config.warn_on_violated_windows else []
        return build_dependency_graph(dependencies), warnings


def validate_dependency(dependency: Dependency, existing: Iterable[Dependency] = ()) -> bool:
    """Check a single dependency: non-empty ids, no self-loop."""
    return _validate_dependency(dependency, existing)


def has_circular_dependency(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    candidate: Dependency | None = None,
) -> bool:
    """Check whether the dependencies (plus an optional candidate) contain a cycle."""
    return SchedulingService().has_circular_dependency(tasks, dependencies, candidate)


def compute_schedule(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    config: SchedulingConfig | None = None,
    calendar: WorkingTimeCalendar | None = None,
) -> ScheduleResult:
    """Compute early/late times, float and critical flags for every task."""
    return SchedulingService(config, calendar).compute_schedule(tasks, dependencies)


def auto_schedule_tasks(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    project_start: datetime,
    calendar: WorkingTimeCalendar | None = None,
) -> list[Task]:
    """Assign every task its earliest feasible window from project_start."""
    return SchedulingService(calendar=calendar).auto_schedule_tasks(
        tasks, dependencies, project_start
    )


def get_critical_path(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    config: SchedulingConfig | None = None,
    calendar: WorkingTimeCalendar | None = None,
) -> list[TaskId]:
    """Ids of critical tasks, in input order."""
    return SchedulingService(config, calendar).get_critical_path(tasks, dependencies)
