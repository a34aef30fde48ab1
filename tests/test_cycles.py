"""Tests for cycle detection."""

from critpath.models import TaskId
from critpath.scheduler.cycles import find_cycle, format_cycle, has_cycle
from tests.conftest import chain, dep


def ids(*values: str) -> list[TaskId]:
    return [TaskId(value) for value in values]


class TestFindCycle:
    """Test depth-first cycle detection."""

    def test_acyclic_chain(self) -> None:
        assert find_cycle(ids("a", "b", "c"), chain("a", "b", "c")) is None

    def test_diamond_is_not_a_cycle(self) -> None:
        """Reaching a node twice through different paths is not a cycle."""
        edges = [dep("a", "b"), dep("a", "c"), dep("b", "d"), dep("c", "d")]
        assert find_cycle(ids("a", "b", "c", "d"), edges) is None

    def test_two_node_cycle(self) -> None:
        cycle = find_cycle(ids("a", "b"), [dep("a", "b"), dep("b", "a")])

        assert cycle is not None
        assert cycle[0] == cycle[-1]
        assert set(cycle) == {"a", "b"}

    def test_cycle_path_is_closed(self) -> None:
        edges = [dep("x", "a"), *chain("a", "b", "c"), dep("c", "a")]
        cycle = find_cycle(ids("x", "a", "b", "c"), edges)

        assert cycle == ["a", "b", "c", "a"]
        assert format_cycle(cycle) == "a -> b -> c -> a"

    def test_cycle_in_disconnected_component(self) -> None:
        edges = [*chain("a", "b"), dep("c", "d"), dep("d", "c")]
        cycle = find_cycle(ids("a", "b", "c", "d"), edges)

        assert cycle is not None
        assert set(cycle) == {"c", "d"}

    def test_inactive_edge_breaks_cycle(self) -> None:
        edges = [dep("a", "b"), dep("b", "a", active=False)]
        assert find_cycle(ids("a", "b"), edges) is None

    def test_candidate_closes_cycle(self) -> None:
        edges = chain("a", "b", "c")
        assert has_cycle(ids("a", "b", "c"), edges, dep("c", "a"))
        assert not has_cycle(ids("a", "b", "c"), edges, dep("a", "c"))

    def test_candidate_does_not_modify_input(self) -> None:
        edges = chain("a", "b")
        has_cycle(ids("a", "b"), edges, dep("b", "a"))
        assert len(edges) == 1

    def test_self_loop(self) -> None:
        assert find_cycle(ids("a"), [dep("a", "a")]) == ["a", "a"]

    def test_endpoints_outside_task_list_are_walked(self) -> None:
        edges = [dep("a", "ghost"), dep("ghost", "a")]
        assert has_cycle(ids("a"), edges)

    def test_deep_chain(self) -> None:
        """Long chains are walked without recursion."""
        names = [f"t{i}" for i in range(5000)]
        edges = chain(*names)
        assert find_cycle(ids(*names), edges) is None
        assert has_cycle(ids(*names), edges, dep(names[-1], names[0]))
