"""Tests for earliest-feasible auto-scheduling."""

import pytest

from critpath.calendar import WorkingCalendar
from critpath.exceptions import CircularDependencyError
from critpath.scheduler.auto_schedule import AutoScheduler, auto_schedule
from tests.conftest import chain, day, days, dep, task


class TestAutoSchedule:
    """Test date assignment from a project start."""

    def test_lag_after_predecessor(self) -> None:
        tasks = [task("a", 0, 1), task("b", 0, 1)]
        result = auto_schedule(tasks, [dep("a", "b", lag=1)], day(0))

        a, b = result
        assert a.start == day(0)
        assert a.end == day(1)
        assert b.start == a.end + days(1)

    def test_nominal_start_is_ignored(self) -> None:
        """Auto-scheduling pulls tasks back to the earliest feasible date."""
        tasks = [task("a", 10, 2)]
        (a,) = auto_schedule(tasks, [], day(0))

        assert a.start == day(0)
        assert a.end == day(2)

    def test_durations_preserved(self) -> None:
        tasks = [task("a", 3, 2.5), task("b", 7, 0.5)]
        result = auto_schedule(tasks, chain("a", "b"), day(0))

        assert [t.duration for t in result] == [days(2.5), days(0.5)]

    def test_output_in_input_order(self) -> None:
        tasks = [task("c"), task("b"), task("a")]
        result = auto_schedule(tasks, chain("a", "b", "c"), day(0))

        assert [t.id for t in result] == ["c", "b", "a"]
        assert [t.start for t in result] == [day(2), day(1), day(0)]

    def test_latest_predecessor_wins(self) -> None:
        tasks = [task("a", 0, 1), task("b", 0, 3), task("c", 0, 1)]
        result = auto_schedule(tasks, [dep("a", "c"), dep("b", "c")], day(0))
        assert result[2].start == day(3)

    def test_inactive_dependency_ignored(self) -> None:
        tasks = [task("a", 0, 3), task("b", 0, 1)]
        result = auto_schedule(tasks, [dep("a", "b", active=False)], day(0))
        assert result[1].start == day(0)

    def test_inputs_not_modified(self) -> None:
        tasks = [task("a", 5, 1), task("b", 5, 1)]
        auto_schedule(tasks, chain("a", "b"), day(0))
        assert tasks[0].start == day(5)

    def test_keeps_other_fields(self) -> None:
        tasks = [task("a", 5, 1, name="Design", end_before=9)]
        (a,) = auto_schedule(tasks, [], day(0))

        assert a.name == "Design"
        assert a.end_before == day(9)

    def test_deep_chain(self) -> None:
        """Long predecessor chains are scheduled without recursion."""
        names = [f"t{i}" for i in range(3000)]
        tasks = [task(name, 0, 1) for name in reversed(names)]
        result = auto_schedule(tasks, chain(*names), day(0))

        assert result[0].id == "t2999"
        assert result[0].start == day(2999)


class TestAutoScheduleTypedDependencies:
    """Test start/finish floors from typed dependencies."""

    def test_start_to_start(self) -> None:
        tasks = [task("a", 0, 3), task("b", 0, 2)]
        result = auto_schedule(tasks, [dep("a", "b", "SS", lag=1)], day(0))
        assert result[1].start == day(1)

    def test_finish_to_finish(self) -> None:
        tasks = [task("a", 0, 3), task("b", 0, 1)]
        result = auto_schedule(tasks, [dep("a", "b", "FF")], day(0))

        assert result[1].start == day(2)
        assert result[1].end == result[0].end

    def test_start_to_finish(self) -> None:
        tasks = [task("a", 0, 1), task("b", 0, 1)]
        result = auto_schedule(tasks, [dep("a", "b", "SF", lag=3)], day(0))

        assert result[1].start == day(2)
        assert result[1].end == day(3)

    def test_project_start_still_a_floor(self) -> None:
        """A lead never pulls a task before the project start."""
        tasks = [task("a", 0, 1), task("b", 0, 1)]
        result = auto_schedule(tasks, [dep("a", "b", "SF")], day(0))
        assert result[1].start == day(0)


class TestAutoScheduleCalendar:
    """Test auto-scheduling over a working calendar."""

    def test_skips_weekend(self) -> None:
        # day(4) is a Friday
        tasks = [task("a", 0, 1), task("b", 0, 1)]
        result = AutoScheduler(WorkingCalendar()).schedule(tasks, chain("a", "b"), day(4))

        assert result[0].start == day(4)
        assert result[0].end == day(7)
        assert result[1].start == day(7)
        assert result[1].end == day(8)

    def test_start_on_weekend_rolls_forward(self) -> None:
        (a,) = AutoScheduler(WorkingCalendar()).schedule([task("a", 0, 1)], [], day(5))
        assert a.start == day(7)


class TestAutoScheduleCycles:
    """Test the cycle guard."""

    def test_cycle_raises(self) -> None:
        tasks = [task("a"), task("b")]

        with pytest.raises(CircularDependencyError) as exc_info:
            auto_schedule(tasks, [dep("a", "b"), dep("b", "a")], day(0))

        assert set(exc_info.value.cycle) == {"a", "b"}

    def test_cycle_behind_a_root(self) -> None:
        tasks = [task("root"), task("a"), task("b")]
        dependencies = [dep("root", "a"), dep("a", "b"), dep("b", "a")]

        with pytest.raises(CircularDependencyError):
            auto_schedule(tasks, dependencies, day(0))
