"""Data models for critpath."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import NewType

TaskId = NewType("TaskId", str)

# Duration conversion constants
HOURS_PER_DAY = 24
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30

_NUMBER_RE = re.compile(r"^[+-]?(\d+(?:\.\d+)?|\.\d+)$")
_DURATION_RE = re.compile(r"^([+-]?)\s*(\d+(?:\.\d+)?|\.\d+)\s*([hdwm])$")
_DEPENDENCY_RE = re.compile(
    r"^(?P<pred>\S+)\s*->\s*(?P<succ>\S+)"
    r"(?:\s+(?P<type>[A-Za-z_]+))?"
    r"(?:\s+(?P<lag>[+-]?\s*[\d.]+\s*[hdwm]))?$"
)


def parse_duration(value: str | float | timedelta) -> timedelta:
    """Parse a duration into a timedelta.

    Supported formats:
    - timedelta - returned unchanged
    - 2 / 1.5 - number of days
    - "4h" = 4 hours, "3d" = 3 days, "2w" = 14 days, "1m" = 30 days
    - a leading sign is allowed: "-1d" is a one day lead, "+2d" a two day lag
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(days=value)

    text = value.strip().lower()
    if not text:
        raise ValueError("Duration must not be empty")
    if _NUMBER_RE.match(text):
        return timedelta(days=float(text))

    match = _DURATION_RE.match(text)
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. '3d', '-4h', '2w')")

    sign, number, unit = match.groups()
    num = float(number)
    if sign == "-":
        num = -num

    if unit == "h":
        return timedelta(hours=num)
    if unit == "d":
        return timedelta(days=num)
    if unit == "w":
        return timedelta(days=num * DAYS_PER_WEEK)
    return timedelta(days=num * DAYS_PER_MONTH)


def format_duration(value: timedelta) -> str:
    """Format a timedelta in the compact signed form accepted by parse_duration."""
    sign = "-" if value < timedelta(0) else "+"
    magnitude = abs(value)
    days = magnitude / timedelta(days=1)
    if days == int(days):
        if days and days % DAYS_PER_WEEK == 0:
            return f"{sign}{int(days / DAYS_PER_WEEK)}w"
        return f"{sign}{int(days)}d"
    hours = magnitude / timedelta(hours=1)
    if hours == int(hours):
        return f"{sign}{int(hours)}h"
    return f"{sign}{days:g}d"


class DependencyType(str, Enum):
    """Which endpoint of the predecessor constrains which endpoint of the successor."""

    FINISH_TO_START = "FS"  # successor starts after predecessor finishes
    START_TO_START = "SS"  # successor starts after predecessor starts
    FINISH_TO_FINISH = "FF"  # successor finishes after predecessor finishes
    START_TO_FINISH = "SF"  # successor finishes after predecessor starts

    @classmethod
    def parse(cls, value: str | DependencyType) -> DependencyType:
        """Parse a dependency type from its short code or long name.

        Accepts "FS", "fs", "finish_to_start", "FinishToStart" and so on.
        """
        if isinstance(value, DependencyType):
            return value
        normalized = re.sub(r"[\s_-]", "", str(value)).upper()
        for member in cls:
            if normalized in (member.value, member.name.replace("_", "")):
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown dependency type: {value!r} (expected one of {valid})")

    @property
    def constrains_start(self) -> bool:
        """True when the successor's start is the constrained date."""
        return self in (DependencyType.FINISH_TO_START, DependencyType.START_TO_START)

    @property
    def anchored_on_finish(self) -> bool:
        """True when the predecessor's finish is the anchor date."""
        return self in (DependencyType.FINISH_TO_START, DependencyType.FINISH_TO_FINISH)


@dataclass(frozen=True)
class Dependency:
    """A typed precedence edge between two tasks.

    The lag is added to the predecessor's anchor date: positive values delay
    the successor, negative values allow overlap (lead). Inactive dependencies
    are ignored by every graph operation.
    """

    predecessor_id: TaskId
    successor_id: TaskId
    type: DependencyType = DependencyType.FINISH_TO_START
    lag: timedelta = timedelta(0)
    is_active: bool = True
    description: str = ""

    @classmethod
    def parse(cls, dep_str: str) -> Dependency:
        """Parse a dependency string into a Dependency object.

        Supported formats:
        - "a -> b" - finish-to-start, no lag
        - "a -> b SS" - start-to-start, no lag
        - "a -> b FF +2d" - finish-to-finish with a 2 day lag
        - "a -> b -4h" - finish-to-start with a 4 hour lead
        """
        match = _DEPENDENCY_RE.match(dep_str.strip())
        if not match:
            raise ValueError(
                f"Invalid dependency: {dep_str!r} (expected e.g. 'a -> b', 'a -> b SS +1d')"
            )

        dep_type = DependencyType.FINISH_TO_START
        if match.group("type"):
            dep_type = DependencyType.parse(match.group("type"))

        lag = timedelta(0)
        if match.group("lag"):
            lag = parse_duration(match.group("lag").replace(" ", ""))

        return cls(
            predecessor_id=TaskId(match.group("pred")),
            successor_id=TaskId(match.group("succ")),
            type=dep_type,
            lag=lag,
        )

    def __str__(self) -> str:
        """Return the compact string form (activity is not represented)."""
        text = f"{self.predecessor_id} -> {self.successor_id}"
        if self.type != DependencyType.FINISH_TO_START:
            text += f" {self.type.value}"
        if self.lag:
            text += f" {format_duration(self.lag)}"
        return text

    def involves(self, task_id: TaskId) -> bool:
        """Check whether the task is either endpoint of this dependency."""
        return task_id in (self.predecessor_id, self.successor_id)


@dataclass(frozen=True)
class Task:
    """An immutable snapshot of a task's current calendar window."""

    id: TaskId
    start: datetime
    end: datetime
    name: str = ""
    end_before: datetime | None = None  # Constraint: latest allowed finish

    @property
    def duration(self) -> timedelta:
        """Length of the task's window."""
        return self.end - self.start

    @property
    def label(self) -> str:
        """Human readable label (name, falling back to the id)."""
        return self.name or self.id

    def with_window(self, start: datetime, end: datetime) -> Task:
        """Return a copy of this task with a new calendar window."""
        return replace(self, start=start, end=end)


@dataclass
class Project:
    """A parsed project file: tasks in file order plus their dependencies."""

    tasks: list[Task]
    dependencies: list[Dependency]
    name: str = ""

    def get_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def get_all_ids(self) -> set[TaskId]:
        return {task.id for task in self.tasks}
