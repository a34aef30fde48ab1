"""Structural validation of scheduling inputs."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from critpath.calendar import ElapsedTimeCalendar, WorkingTimeCalendar
from critpath.exceptions import StructuralError
from critpath.logger import get_logger
from critpath.models import Dependency, Task, TaskId

from .constraints import edge_slack
from .graph import active_dependencies

logger = get_logger()


def _default_str_list() -> list[str]:
    return []


@dataclass
class ValidationReport:
    """Errors block scheduling; warnings are reported alongside the result."""

    errors: list[str] = field(default_factory=_default_str_list)
    warnings: list[str] = field(default_factory=_default_str_list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, error: str) -> None:
        if error.strip():
            self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        if warning.strip():
            self.warnings.append(warning)

    def merge(self, other: ValidationReport) -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def raise_for_errors(self) -> None:
        """Raise StructuralError if any error was collected."""
        if self.errors:
            raise StructuralError(self.errors)


def validate_dependency(dep: Dependency, existing: Iterable[Dependency] = ()) -> bool:
    """Check a single dependency for structural validity.

    A dependency is valid when both ids are non-empty and the predecessor and
    successor differ. ``existing`` does not affect the result; use
    is_duplicate_dependency() to check a new edge against the current ones.
    """
    if not dep.predecessor_id or not dep.successor_id:
        return False
    return dep.predecessor_id != dep.successor_id


def is_duplicate_dependency(dep: Dependency, existing: Iterable[Dependency]) -> bool:
    """Check whether an active existing dependency has the same endpoints and type."""
    for other in existing:
        if other is dep or not other.is_active:
            continue
        if (other.predecessor_id, other.successor_id, other.type) == (
            dep.predecessor_id,
            dep.successor_id,
            dep.type,
        ):
            return True
    return False


def validate_tasks(tasks: Sequence[Task]) -> ValidationReport:
    """Check task ids and windows."""
    report = ValidationReport()
    seen: set[TaskId] = set()
    for task in tasks:
        if not task.id:
            report.add_error("Task with an empty id")
            continue
        if task.id in seen:
            report.add_error(f"Duplicate task id: {task.id}")
        seen.add(task.id)
        if task.end < task.start:
            report.add_error(
                f"Task {task.id} ends before it starts ({task.end} < {task.start})"
            )
    return report


def validate_schedule_inputs(
    tasks: Sequence[Task],
    dependencies: Iterable[Dependency],
    calendar: WorkingTimeCalendar | None = None,
) -> ValidationReport:
    """Validate tasks and active dependencies before any pass runs.

    Errors: empty or duplicate task ids, negative durations, empty or
    self-referential dependencies, references to unknown tasks.
    Warnings: a successor's current window already violates an active
    dependency (the schedule will show it, it does not block computation).
    """
    calendar = calendar or ElapsedTimeCalendar()
    report = validate_tasks(tasks)
    task_map = {task.id: task for task in tasks}

    for dep in active_dependencies(dependencies):
        if not dep.predecessor_id or not dep.successor_id:
            report.add_error(f"Dependency '{dep}' has an empty task id")
            continue
        if dep.predecessor_id == dep.successor_id:
            report.add_error(f"Task {dep.predecessor_id} cannot depend on itself")
            continue

        missing = [
            task_id for task_id in (dep.predecessor_id, dep.successor_id) if task_id not in task_map
        ]
        for task_id in missing:
            report.add_error(f"Dependency '{dep}' references unknown task: {task_id}")
        if missing:
            continue

        pred = task_map[dep.predecessor_id]
        succ = task_map[dep.successor_id]
        slack = edge_slack(dep, pred.start, pred.end, succ.start, succ.end, calendar)
        logger.checks(f"  Checking window of {succ.id} against '{dep}': slack {slack}")
        if slack < timedelta(0):
            report.add_warning(
                f"Task '{succ.label}' violates dependency '{dep}' "
                f"in its current window by {-slack}"
            )

    return report
