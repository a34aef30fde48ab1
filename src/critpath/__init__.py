"""critpath - critical-path analysis and auto-scheduling for task graphs."""

from .exceptions import (
    CircularDependencyError,
    CritpathError,
    ParseError,
    ScheduleSizeError,
    StructuralError,
    ValidationError,
)
from .models import Dependency, DependencyType, Project, Task, TaskId
from .scheduler import (
    ScheduledTask,
    ScheduleResult,
    SchedulingConfig,
    SchedulingService,
    auto_schedule_tasks,
    compute_schedule,
    get_critical_path,
    has_circular_dependency,
    validate_dependency,
)

__version__ = "0.1.0"

__all__ = [
    "CircularDependencyError",
    "CritpathError",
    "Dependency",
    "DependencyType",
    "ParseError",
    "Project",
    "ScheduleSizeError",
    "ScheduledTask",
    "ScheduleResult",
    "SchedulingConfig",
    "SchedulingService",
    "StructuralError",
    "Task",
    "TaskId",
    "ValidationError",
    "auto_schedule_tasks",
    "compute_schedule",
    "get_critical_path",
    "has_circular_dependency",
    "validate_dependency",
]
