"""YAML reader and writer for critpath project files."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ParseError, ValidationError
from .models import Dependency, DependencyType, Project, Task, TaskId, format_duration
from .schemas import DependencySchema, ProjectSchema


class ProjectParser:
    """Parser for project YAML files.

    Only handles YAML parsing and model creation. Reference and cycle checks
    happen in the scheduling service, which reports every problem at once.
    """

    def parse_file(self, file_path: Path | str) -> Project:
        """Parse a YAML file into a Project."""
        path = Path(file_path)
        if not path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with path.open(encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParseError(f"Failed to parse YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ParseError("YAML must contain a dictionary at the root level")

        return self.parse_data(data)  # type: ignore[arg-type]

    def parse_data(self, data: dict[str, Any]) -> Project:
        """Parse already-loaded YAML data into a Project."""
        try:
            schema = ProjectSchema(**data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid YAML structure: {e}") from e

        tasks = [
            Task(
                id=TaskId(task_id),
                start=task_data.start,
                end=task_data.end,
                name=task_data.name,
                end_before=task_data.end_before,
            )
            for task_id, task_data in schema.tasks.items()
        ]

        dependencies: list[Dependency] = []
        for entry in schema.dependencies:
            if isinstance(entry, DependencySchema):
                dependencies.append(
                    Dependency(
                        predecessor_id=TaskId(entry.predecessor),
                        successor_id=TaskId(entry.successor),
                        type=entry.type,
                        lag=entry.lag,
                        is_active=entry.active,
                        description=entry.description,
                    )
                )
                continue
            try:
                dependencies.append(Dependency.parse(entry))
            except ValueError as e:
                raise ValidationError(str(e)) from e

        return Project(tasks=tasks, dependencies=dependencies, name=schema.name)


def load_project(path: Path | str) -> Project:
    """Load a project file."""
    return ProjectParser().parse_file(path)


def _dump_datetime(value: datetime) -> date | datetime:
    """Write midnight instants as plain dates."""
    if value.time() == time() and value.tzinfo is None:
        return value.date()
    return value


def _dump_dependency(dep: Dependency) -> str | dict[str, Any]:
    """Use the compact string form unless the edge carries more than it can hold."""
    if dep.is_active and not dep.description:
        return str(dep)
    data: dict[str, Any] = {
        "predecessor": dep.predecessor_id,
        "successor": dep.successor_id,
    }
    if dep.type != DependencyType.FINISH_TO_START:
        data["type"] = dep.type.value
    if dep.lag:
        data["lag"] = format_duration(dep.lag)
    if not dep.is_active:
        data["active"] = False
    if dep.description:
        data["description"] = dep.description
    return data


def project_to_data(
    tasks: Sequence[Task], dependencies: Sequence[Dependency], name: str = ""
) -> dict[str, Any]:
    """Convert tasks and dependencies back into project YAML data."""
    data: dict[str, Any] = {}
    if name:
        data["name"] = name

    task_data: dict[str, Any] = {}
    for task in tasks:
        entry: dict[str, Any] = {
            "start": _dump_datetime(task.start),
            "end": _dump_datetime(task.end),
        }
        if task.name:
            entry["name"] = task.name
        if task.end_before is not None:
            entry["end_before"] = _dump_datetime(task.end_before)
        task_data[task.id] = entry
    data["tasks"] = task_data
    data["dependencies"] = [_dump_dependency(dep) for dep in dependencies]
    return data


def dump_project(
    tasks: Sequence[Task], dependencies: Sequence[Dependency], name: str = ""
) -> str:
    """Render tasks and dependencies as project YAML."""
    return yaml.safe_dump(
        project_to_data(tasks, dependencies, name), sort_keys=False, allow_unicode=True
    )


def write_project(
    path: Path | str,
    tasks: Sequence[Task],
    dependencies: Sequence[Dependency],
    name: str = "",
) -> None:
    """Write tasks and dependencies to a project YAML file."""
    Path(path).write_text(dump_project(tasks, dependencies, name), encoding="utf-8")
