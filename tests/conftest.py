"""Pytest configuration and fixtures for critpath tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timedelta

import pytest

from critpath.logger import reset_logger
from critpath.models import Dependency, DependencyType, Task, TaskId
from critpath.unified_config import set_config_path

# Monday, so working-calendar tests line up with weekdays
BASE = datetime(2025, 1, 6)


def day(offset: float) -> datetime:
    """Instant ``offset`` days after BASE."""
    return BASE + timedelta(days=offset)


def days(count: float) -> timedelta:
    return timedelta(days=count)


def task(
    task_id: str,
    start: float = 0,
    duration: float = 1,
    *,
    name: str = "",
    end_before: float | None = None,
) -> Task:
    """Create a Task whose window is given in days relative to BASE.

    Example:
        task("build", start=2, duration=3)  # day 2 to day 5
    """
    return Task(
        id=TaskId(task_id),
        start=day(start),
        end=day(start + duration),
        name=name,
        end_before=day(end_before) if end_before is not None else None,
    )


def dep(
    predecessor: str,
    successor: str,
    dep_type: str = "FS",
    lag: float = 0,
    *,
    active: bool = True,
) -> Dependency:
    """Create a Dependency with the lag given in days.

    Example:
        dep("a", "b", "SS", lag=1)
    """
    return Dependency(
        predecessor_id=TaskId(predecessor),
        successor_id=TaskId(successor),
        type=DependencyType.parse(dep_type),
        lag=timedelta(days=lag),
        is_active=active,
    )


def chain(*task_ids: str) -> list[Dependency]:
    """Finish-to-start dependencies linking the ids in order."""
    return [dep(pred, succ) for pred, succ in zip(task_ids, task_ids[1:])]


@pytest.fixture(autouse=True)
def reset_global_state() -> Iterator[None]:
    """Reset the logger and the global config path around each test."""
    reset_logger()
    set_config_path(None)
    yield
    reset_logger()
    set_config_path(None)
