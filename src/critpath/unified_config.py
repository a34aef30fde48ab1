"""Configuration loader for critpath.

A single file (critpath_config.yaml) holds the scheduling tolerances and an
optional working calendar. Both sections are optional.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .calendar import ElapsedTimeCalendar, WorkingCalendar, WorkingTimeCalendar
from .scheduler import SchedulingConfig

CONFIG_FILENAME = "critpath_config.yaml"

# Set by the CLI --config option
_config_path: Path | None = None


def get_config_path() -> Path | None:
    """Config path given on the command line, if any."""
    return _config_path


def set_config_path(path: Path | None) -> None:
    global _config_path
    _config_path = path


class UnifiedConfig(BaseModel):
    """Scheduling settings plus an optional working calendar."""

    scheduling: SchedulingConfig = Field(default_factory=SchedulingConfig)
    calendar: WorkingCalendar | None = None  # None = elapsed time, no exclusions

    def working_calendar(self) -> WorkingTimeCalendar:
        """Calendar the scheduling passes should use."""
        if self.calendar is None:
            return ElapsedTimeCalendar()
        return self.calendar


def load_unified_config(config_path: Path | str) -> UnifiedConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to critpath_config.yaml

    Returns:
        UnifiedConfig with defaults for any missing section

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if data is None:
        return UnifiedConfig()
    if not isinstance(data, dict):
        raise ValueError("Config must contain a dictionary at the root level")

    unknown = set(data) - {"scheduling", "calendar"}  # type: ignore[arg-type]
    if unknown:
        raise ValueError(f"Unknown config section(s): {', '.join(sorted(unknown))}")

    # Build SchedulingConfig if scheduling section exists
    scheduling_config = SchedulingConfig()
    if data.get("scheduling"):
        scheduling_config = SchedulingConfig.model_validate(data["scheduling"])

    # Build WorkingCalendar if calendar section exists
    calendar = None
    if data.get("calendar") is not None:
        calendar = WorkingCalendar.model_validate(data["calendar"])

    return UnifiedConfig(scheduling=scheduling_config, calendar=calendar)


def discover_config(
    project_path: Path | str | None = None,
    config_path: Path | None = None,
) -> UnifiedConfig | None:
    """Discover config from various locations.

    Search order:
    1. Explicit config_path argument
    2. Command-line path (set_config_path)
    3. Project file directory / critpath_config.yaml
    4. Current directory / critpath_config.yaml
    """
    # 1. Explicit argument
    if config_path and config_path.exists():
        return load_unified_config(config_path)

    # 2. Command line
    cli_config = get_config_path()
    if cli_config and cli_config.exists():
        return load_unified_config(cli_config)

    # 3. Project directory
    if project_path is not None:
        dir_config = Path(project_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_unified_config(dir_config)

    # 4. Current directory
    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_unified_config(cwd_config)

    return None
