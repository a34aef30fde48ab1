"""Pydantic schemas for YAML project files."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import DependencyType, parse_duration


def _coerce_datetime(v: Any) -> Any:
    """Turn YAML dates and ISO strings into datetimes (dates become midnight)."""
    if v is None or isinstance(v, datetime):
        return v
    if isinstance(v, date):
        return datetime.combine(v, time())
    if isinstance(v, str):
        try:
            return datetime.fromisoformat(v.strip())
        except ValueError as e:
            raise ValueError(f"Invalid date: {v!r} (expected YYYY-MM-DD or ISO datetime)") from e
    return v


class TaskSchema(BaseModel):
    """Schema for a single task entry."""

    start: datetime
    end: datetime
    name: str = ""
    end_before: datetime | None = None

    @field_validator("start", "end", "end_before", mode="before")
    @classmethod
    def parse_dates(cls, v: Any) -> Any:
        return _coerce_datetime(v)

    @model_validator(mode="after")
    def validate_window(self) -> TaskSchema:
        """Ensure end is not before start."""
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must not be before start ({self.start})")
        return self


class DependencySchema(BaseModel):
    """Schema for a dependency given in mapping form."""

    predecessor: str
    successor: str
    type: DependencyType = DependencyType.FINISH_TO_START
    lag: timedelta = timedelta(0)
    active: bool = True
    description: str = ""

    @field_validator("predecessor", "successor", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        """Task ids may be written as bare YAML numbers."""
        return str(v)

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> DependencyType:
        if v is None:
            return DependencyType.FINISH_TO_START
        return DependencyType.parse(str(v))

    @field_validator("lag", mode="before")
    @classmethod
    def parse_lag(cls, v: Any) -> timedelta:
        """Accept numbers of days or strings like "2d", "-4h", "1w"."""
        if v is None:
            return timedelta(0)
        return parse_duration(v)


class ProjectSchema(BaseModel):
    """Schema for the entire project YAML data."""

    name: str = ""
    tasks: dict[str, TaskSchema] = Field(default_factory=dict)
    # Each entry is either "a -> b [TYPE] [LAG]" or a DependencySchema mapping
    dependencies: list[str | DependencySchema] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def coerce_task_ids(cls, v: Any) -> Any:
        """Task ids may be written as bare YAML numbers."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return {str(key): value for key, value in v.items()}  # type: ignore[misc]
        return v

    @field_validator("dependencies", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> Any:
        if v is None:
            return []
        return v
