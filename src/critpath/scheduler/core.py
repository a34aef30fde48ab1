"""Core dataclasses for the scheduling engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from critpath.models import Dependency, Task, TaskId

_ONE_DAY = timedelta(days=1)


def _default_str_list() -> list[str]:
    return []


def _default_dependency_list() -> list[Dependency]:
    return []


@dataclass(frozen=True)
class EarlyTimes:
    """Forward pass output for one task."""

    early_start: datetime
    early_finish: datetime


@dataclass(frozen=True)
class LateTimes:
    """Backward pass output for one task."""

    late_start: datetime
    late_finish: datetime


@dataclass(frozen=True)
class FloatClassification:
    """Float and criticality for one task."""

    total_float: timedelta
    free_float: timedelta
    is_critical: bool
    is_infeasible: bool = False  # Total float is negative beyond the tolerance


@dataclass(frozen=True)
class ScheduledTask:
    """A task annotated with its critical-path analysis.

    Early/late fields are None only when the task was missing from a pass,
    which cannot happen for inputs that passed validation.
    """

    task: Task
    earliest_start: datetime | None
    earliest_finish: datetime | None
    latest_start: datetime | None
    latest_finish: datetime | None
    total_float: timedelta
    free_float: timedelta
    is_critical: bool
    is_infeasible: bool = False

    @property
    def task_id(self) -> TaskId:
        return self.task.id

    @property
    def total_float_days(self) -> float:
        return self.total_float / _ONE_DAY

    @property
    def free_float_days(self) -> float:
        return self.free_float / _ONE_DAY


@dataclass
class ScheduleResult:
    """Complete result of a critical-path computation."""

    tasks: list[ScheduledTask]
    project_start: datetime | None
    project_finish: datetime | None
    critical_dependencies: list[Dependency] = field(default_factory=_default_dependency_list)
    warnings: list[str] = field(default_factory=_default_str_list)

    @property
    def project_span(self) -> timedelta:
        """Elapsed time from the earliest start to the latest finish."""
        if self.project_start is None or self.project_finish is None:
            return timedelta(0)
        return self.project_finish - self.project_start

    def critical_path(self) -> list[TaskId]:
        """Ids of critical tasks, in input order."""
        return [scheduled.task_id for scheduled in self.tasks if scheduled.is_critical]

    def infeasible_tasks(self) -> list[TaskId]:
        """Ids of tasks with negative float, in input order."""
        return [scheduled.task_id for scheduled in self.tasks if scheduled.is_infeasible]

    def get(self, task_id: str) -> ScheduledTask | None:
        """Look up a scheduled task by id."""
        for scheduled in self.tasks:
            if scheduled.task_id == task_id:
                return scheduled
        return None
