"""Scheduler package - critical-path analysis and auto-scheduling.

This package provides:
- Dependency graph indexing and cycle detection
- Forward and backward passes (early/late times)
- Float and critical-path classification
- Earliest-feasible auto-scheduling
- SchedulingService plus function-level entry points

Main entry points:
- SchedulingService: validates inputs, runs the passes, merges results
- compute_schedule / auto_schedule_tasks / get_critical_path
- has_circular_dependency / validate_dependency
"""

from .auto_schedule import AutoScheduler, auto_schedule
from .classifier import FloatClassifier, classify
from .config import DEFAULT_CRITICAL_EPSILON_DAYS, SchedulingConfig
from .core import EarlyTimes, FloatClassification, LateTimes, ScheduledTask, ScheduleResult
from .cycles import find_cycle, has_cycle
from .graph import DependencyGraph, active_dependencies, build_dependency_graph
from .passes import BackwardPass, ForwardPass, compute_early_times, compute_late_times
from .service import (
    SchedulingService,
    auto_schedule_tasks,
    compute_schedule,
    get_critical_path,
    has_circular_dependency,
    validate_dependency,
)
from .validator import ValidationReport, is_duplicate_dependency, validate_schedule_inputs

__all__ = [
    # Core dataclasses
    "EarlyTimes",
    "LateTimes",
    "FloatClassification",
    "ScheduledTask",
    "ScheduleResult",
    # Configuration
    "SchedulingConfig",
    "DEFAULT_CRITICAL_EPSILON_DAYS",
    # Graph
    "DependencyGraph",
    "active_dependencies",
    "build_dependency_graph",
    "find_cycle",
    "has_cycle",
    # Passes
    "ForwardPass",
    "BackwardPass",
    "compute_early_times",
    "compute_late_times",
    "FloatClassifier",
    "classify",
    "AutoScheduler",
    "auto_schedule",
    # Validation
    "ValidationReport",
    "is_duplicate_dependency",
    "validate_schedule_inputs",
    # High-level service
    "SchedulingService",
    "validate_dependency",
    "has_circular_dependency",
    "compute_schedule",
    "auto_schedule_tasks",
    "get_critical_path",
]
