"""Command-line interface for critpath."""

from __future__ import annotations

from datetime import datetime, time
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
import yaml

from .exceptions import CritpathError
from .logger import setup_logger
from .models import Dependency, Project
from .parser import dump_project, load_project, write_project
from .scheduler import (
    ScheduledTask,
    ScheduleResult,
    SchedulingService,
    is_duplicate_dependency,
)
from .unified_config import UnifiedConfig, discover_config, set_config_path

app = typer.Typer(
    name="critpath",
    help="Critical-path analysis and auto-scheduling for task dependency graphs",
    add_completion=False,
)


class OutputFormat(str, Enum):
    """Output formats for the schedule command."""

    TABLE = "table"
    YAML = "yaml"


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: critpath_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for critpath commands."""
    setup_logger(verbose)
    set_config_path(config)


@app.command()
def schedule(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")] = Path(
        "project.yaml"
    ),
    *,
    format: Annotated[  # noqa: A002 - 'format' is appropriate name for CLI option
        OutputFormat, typer.Option("--format", "-f", help="Output format (table or yaml)")
    ] = OutputFormat.TABLE,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Compute early/late dates, float and the critical path."""
    project, service = _load(file)

    try:
        result = service.compute_schedule(project.tasks, project.dependencies)
    except CritpathError as e:
        _fail(e)

    if format == OutputFormat.YAML:
        text = yaml.safe_dump(_result_to_data(result), sort_keys=False, allow_unicode=True)
    else:
        text = _format_table(result)

    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Schedule written to {output}")
    else:
        typer.echo(text)


@app.command(name="critical-path")
def critical_path(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")] = Path(
        "project.yaml"
    ),
) -> None:
    """List critical tasks, one id per line, in file order."""
    project, service = _load(file)

    try:
        path = service.get_critical_path(project.tasks, project.dependencies)
    except CritpathError as e:
        _fail(e)

    for task_id in path:
        typer.echo(task_id)


@app.command(name="auto-schedule")
def auto_schedule(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")] = Path(
        "project.yaml"
    ),
    *,
    start: Annotated[
        str, typer.Option("--start", "-s", help="Project start (YYYY-MM-DD or ISO datetime)")
    ],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path")] = None,
) -> None:
    """Assign every task its earliest feasible window and write the project back."""
    project_start = _parse_datetime_option(start, "--start")
    project, service = _load(file)

    try:
        tasks = service.auto_schedule_tasks(project.tasks, project.dependencies, project_start)
    except CritpathError as e:
        _fail(e)

    if output:
        write_project(output, tasks, project.dependencies, project.name)
        typer.echo(f"Scheduled project written to {output}")
    else:
        typer.echo(dump_project(tasks, project.dependencies, project.name), nl=False)


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")] = Path(
        "project.yaml"
    ),
    *,
    edge: Annotated[
        str | None,
        typer.Option("--edge", "-e", help="Candidate dependency to test, e.g. 'a -> b SS +1d'"),
    ] = None,
) -> None:
    """Validate a project, optionally testing whether a new dependency may be added."""
    project, service = _load(file)

    report = service.validate(project.tasks, project.dependencies)
    for warning in report.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    for error in report.errors:
        typer.echo(f"Error: {error}", err=True)
    if not report.is_valid:
        raise typer.Exit(1)

    if edge is None:
        typer.echo(f"OK: {len(project.tasks)} tasks, {len(project.dependencies)} dependencies")
        return

    try:
        candidate = Dependency.parse(edge)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    _check_candidate(project, service, candidate)


def _check_candidate(project: Project, service: SchedulingService, candidate: Dependency) -> None:
    """Report whether the candidate dependency can be added to the project."""
    known_ids = project.get_all_ids()
    missing = [
        task_id
        for task_id in (candidate.predecessor_id, candidate.successor_id)
        if task_id not in known_ids
    ]
    if missing:
        typer.echo(f"Error: '{candidate}' references unknown task: {', '.join(missing)}", err=True)
        raise typer.Exit(1)

    if not service.validate_dependency(candidate, project.dependencies):
        typer.echo(f"Error: '{candidate}' is a self-reference", err=True)
        raise typer.Exit(1)

    if is_duplicate_dependency(candidate, project.dependencies):
        typer.echo(f"Error: '{candidate}' duplicates an existing dependency", err=True)
        raise typer.Exit(1)

    if service.has_circular_dependency(project.tasks, project.dependencies, candidate):
        typer.echo(f"Error: '{candidate}' would create a circular dependency", err=True)
        raise typer.Exit(1)

    typer.echo(f"OK: '{candidate}' can be added")


def _load(file: Path) -> tuple[Project, SchedulingService]:
    """Load the project and build a service from the discovered config."""
    try:
        project = load_project(file)
        config = discover_config(file) or UnifiedConfig()
    except (CritpathError, FileNotFoundError, ValueError) as e:
        _fail(e)
    return project, SchedulingService(config.scheduling, config.working_calendar())


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1) from None


def _parse_datetime_option(value: str, option_name: str) -> datetime:
    """Parse a date or datetime string from a CLI option."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        typer.echo(
            f"Error: Invalid {option_name} value '{value}'. Use YYYY-MM-DD or an ISO datetime.",
            err=True,
        )
        raise typer.Exit(1) from None


def _format_datetime(value: datetime | None) -> str:
    if value is None:
        return "-"
    if value.time() == time():
        return value.date().isoformat()
    return value.isoformat(sep=" ", timespec="minutes")


def _format_table(result: ScheduleResult) -> str:
    """Render the schedule as an aligned text table."""
    headers = ["Task", "ES", "EF", "LS", "LF", "Float", "Free", ""]
    rows: list[list[str]] = [headers]
    for scheduled in result.tasks:
        marker = "*" if scheduled.is_critical else ("!" if scheduled.is_infeasible else "")
        rows.append(
            [
                scheduled.task_id,
                _format_datetime(scheduled.earliest_start),
                _format_datetime(scheduled.earliest_finish),
                _format_datetime(scheduled.latest_start),
                _format_datetime(scheduled.latest_finish),
                f"{scheduled.total_float_days:g}d",
                f"{scheduled.free_float_days:g}d",
                marker,
            ]
        )

    widths = [max(len(row[i]) for row in rows) for i in range(len(headers))]
    lines = [
        "  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows
    ]
    lines.append("")
    lines.append(
        f"Project: {_format_datetime(result.project_start)} - "
        f"{_format_datetime(result.project_finish)}"
    )
    lines.append(f"Critical: {', '.join(result.critical_path()) or '(none)'}")
    if result.infeasible_tasks():
        lines.append(f"Negative float: {', '.join(result.infeasible_tasks())}")
    return "\n".join(lines)


def _scheduled_to_data(scheduled: ScheduledTask) -> dict[str, Any]:
    return {
        "id": scheduled.task_id,
        "earliest_start": _format_datetime(scheduled.earliest_start),
        "earliest_finish": _format_datetime(scheduled.earliest_finish),
        "latest_start": _format_datetime(scheduled.latest_start),
        "latest_finish": _format_datetime(scheduled.latest_finish),
        "total_float_days": round(scheduled.total_float_days, 4),
        "free_float_days": round(scheduled.free_float_days, 4),
        "critical": scheduled.is_critical,
        "infeasible": scheduled.is_infeasible,
    }


def _result_to_data(result: ScheduleResult) -> dict[str, Any]:
    return {
        "project_start": _format_datetime(result.project_start),
        "project_finish": _format_datetime(result.project_finish),
        "critical_path": list(result.critical_path()),
        "critical_dependencies": [str(dep) for dep in result.critical_dependencies],
        "tasks": [_scheduled_to_data(scheduled) for scheduled in result.tasks],
        "warnings": list(result.warnings),
    }


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
