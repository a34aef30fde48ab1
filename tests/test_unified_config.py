"""Tests for configuration loading and discovery."""

from datetime import date
from pathlib import Path

import pytest
from pydantic import ValidationError

from critpath.calendar import ElapsedTimeCalendar, WorkingCalendar
from critpath.unified_config import (
    CONFIG_FILENAME,
    UnifiedConfig,
    discover_config,
    load_unified_config,
    set_config_path,
)


def test_load_full_config(tmp_path: Path) -> None:
    """Test loading a config with scheduling and calendar sections."""
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text(
        """
scheduling:
  critical_epsilon_days: 0.5
  max_tasks: 500
  warn_on_violated_windows: false

calendar:
  name: Team calendar
  working_weekdays: [mon, tue, wed, thu]
  holidays:
    - start: 2025-12-24
      end: 2025-12-26
      name: Winter break
      yearly: true
  extra_working_dates:
    - 2025-01-11
""",
        encoding="utf-8",
    )

    config = load_unified_config(config_path)

    assert config.scheduling.critical_epsilon_days == 0.5
    assert config.scheduling.max_tasks == 500
    assert not config.scheduling.warn_on_violated_windows
    assert config.calendar is not None
    assert config.calendar.working_weekdays == [0, 1, 2, 3]
    assert config.calendar.holidays[0].name == "Winter break"
    assert config.calendar.extra_working_dates == [date(2025, 1, 11)]
    assert config.working_calendar() is config.calendar


def test_defaults() -> None:
    """Test an empty config uses elapsed time and default tolerances."""
    config = UnifiedConfig()

    assert config.scheduling.critical_epsilon_days == 0.01
    assert config.scheduling.max_tasks is None
    assert isinstance(config.working_calendar(), ElapsedTimeCalendar)


def test_empty_file(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("", encoding="utf-8")

    assert load_unified_config(config_path) == UnifiedConfig()


def test_scheduling_only(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("scheduling:\n  max_tasks: 10\n", encoding="utf-8")

    config = load_unified_config(config_path)

    assert config.scheduling.max_tasks == 10
    assert config.calendar is None


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_unified_config(tmp_path / "nope.yaml")


def test_unknown_section(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("resources: []\n", encoding="utf-8")

    with pytest.raises(ValueError, match="Unknown config section"):
        load_unified_config(config_path)


def test_invalid_values(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("scheduling:\n  critical_epsilon_days: -1\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_unified_config(config_path)


def test_invalid_calendar(tmp_path: Path) -> None:
    config_path = tmp_path / CONFIG_FILENAME
    config_path.write_text("calendar:\n  working_weekdays: []\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        load_unified_config(config_path)


class TestDiscoverConfig:
    """Test config discovery order."""

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text("scheduling:\n  max_tasks: 1\n", encoding="utf-8")
        (tmp_path / CONFIG_FILENAME).write_text("scheduling:\n  max_tasks: 2\n", encoding="utf-8")

        config = discover_config(tmp_path / "project.yaml", explicit)

        assert config is not None
        assert config.scheduling.max_tasks == 1

    def test_command_line_path(self, tmp_path: Path) -> None:
        global_config = tmp_path / "global.yaml"
        global_config.write_text("scheduling:\n  max_tasks: 3\n", encoding="utf-8")
        set_config_path(global_config)

        config = discover_config(tmp_path / "project.yaml")

        assert config is not None
        assert config.scheduling.max_tasks == 3

    def test_project_directory(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("calendar: {}\n", encoding="utf-8")

        config = discover_config(tmp_path / "project.yaml")

        assert config is not None
        assert isinstance(config.calendar, WorkingCalendar)

    def test_current_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("scheduling:\n  max_tasks: 4\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        elsewhere = tmp_path / "sub"
        elsewhere.mkdir()

        config = discover_config(elsewhere / "project.yaml")

        assert config is not None
        assert config.scheduling.max_tasks == 4

    def test_nothing_found(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert discover_config(tmp_path / "project.yaml") is None
