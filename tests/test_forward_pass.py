"""Tests for the forward pass (earliest start and finish)."""

import pytest

from critpath.exceptions import CircularDependencyError
from critpath.scheduler.passes import ForwardPass, compute_early_times
from tests.conftest import chain, day, dep, task


class TestForwardPassFinishToStart:
    """Test finish-to-start propagation."""

    def test_linear_chain(self) -> None:
        tasks = [task("a", 0, 1), task("b", 0, 1), task("c", 0, 1)]
        early = ForwardPass().compute(tasks, chain("a", "b", "c"))

        assert (early["a"].early_start, early["a"].early_finish) == (day(0), day(1))
        assert (early["b"].early_start, early["b"].early_finish) == (day(1), day(2))
        assert (early["c"].early_start, early["c"].early_finish) == (day(2), day(3))

    def test_own_start_is_a_floor(self) -> None:
        """A task never starts before its nominal start."""
        tasks = [task("a", 0, 1), task("b", 5, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b")])

        assert early["b"].early_start == day(5)
        assert early["b"].early_finish == day(6)

    def test_positive_lag_delays_successor(self) -> None:
        tasks = [task("a", 0, 2), task("b", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b", lag=1)])
        assert early["b"].early_start == day(3)

    def test_negative_lag_allows_overlap(self) -> None:
        tasks = [task("a", 0, 2), task("b", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b", lag=-1)])
        assert early["b"].early_start == day(1)

    def test_latest_predecessor_wins(self) -> None:
        tasks = [task("a", 0, 1), task("b", 0, 4), task("c", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "c"), dep("b", "c")])
        assert early["c"].early_start == day(4)

    def test_inactive_dependency_ignored(self) -> None:
        tasks = [task("a", 0, 3), task("b", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b", active=False)])
        assert early["b"].early_start == day(0)

    def test_every_task_gets_times(self) -> None:
        tasks = [task("a", 0, 1), task("lonely", 2, 1), task("b", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b")])
        assert set(early) == {"a", "lonely", "b"}
        assert early["lonely"].early_start == day(2)


class TestForwardPassTypedDependencies:
    """Test start-to-start, finish-to-finish and start-to-finish propagation."""

    def test_start_to_start(self) -> None:
        tasks = [task("a", 0, 3), task("b", 0, 2)]
        early = ForwardPass().compute(tasks, [dep("a", "b", "SS", lag=1)])

        assert early["b"].early_start == day(1)
        assert early["b"].early_finish == day(3)

    def test_finish_to_finish(self) -> None:
        tasks = [task("a", 0, 3), task("b", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b", "FF")])

        assert early["b"].early_start == day(2)
        assert early["b"].early_finish == day(3)

    def test_start_to_finish(self) -> None:
        tasks = [task("a", 2, 1), task("b", 0, 1)]
        early = ForwardPass().compute(tasks, [dep("a", "b", "SF")])

        assert early["b"].early_start == day(1)
        assert early["b"].early_finish == day(2)


class TestForwardPassErrors:
    """Test forward pass failure modes."""

    def test_cycle_raises(self) -> None:
        tasks = [task("a"), task("b")]
        with pytest.raises(CircularDependencyError):
            ForwardPass().compute(tasks, [dep("a", "b"), dep("b", "a")])

    def test_function_entry_point(self) -> None:
        tasks = [task("a", 0, 1), task("b", 0, 1)]
        early = compute_early_times(tasks, [dep("a", "b")])
        assert early["b"].early_start == day(1)
