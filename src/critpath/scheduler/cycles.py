"""Cycle detection over active dependencies."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from critpath.models import Dependency, TaskId

from .graph import build_dependency_graph


def find_cycle(
    task_ids: Iterable[TaskId],
    dependencies: Iterable[Dependency],
    candidate: Dependency | None = None,
) -> list[TaskId] | None:
    """Find a cycle in the active dependency graph.

    Depth-first search with an explicit stack. A global ``visited`` set keeps
    the walk O(V+E); the ``on_path`` set is the recursion stack, and an edge
    back into it closes a cycle. Every task is tried as a root because the
    graph may be disconnected.

    Args:
        task_ids: Ids of all known tasks
        dependencies: Existing dependencies (inactive ones are ignored)
        candidate: Optional new dependency to check before committing it

    Returns:
        The cycle as a list of ids whose first and last entries are the same,
        or None if the graph is acyclic
    """
    edges = list(dependencies)
    if candidate is not None:
        edges.append(candidate)
    successors = build_dependency_graph(edges).successors

    # Endpoints missing from the task list are still walked
    roots = list(dict.fromkeys([*task_ids, *successors]))
    visited: set[TaskId] = set()

    for root in roots:
        if root in visited:
            continue

        visited.add(root)
        path: list[TaskId] = [root]
        on_path: set[TaskId] = {root}
        stack: list[tuple[TaskId, Iterator[TaskId]]] = [(root, iter(successors.get(root, [])))]

        while stack:
            node, children = stack[-1]
            child = next(children, None)
            if child is None:
                stack.pop()
                path.pop()
                on_path.discard(node)
                continue
            if child in on_path:
                return path[path.index(child) :] + [child]
            if child not in visited:
                visited.add(child)
                on_path.add(child)
                path.append(child)
                stack.append((child, iter(successors.get(child, []))))

    return None


def has_cycle(
    task_ids: Iterable[TaskId],
    dependencies: Iterable[Dependency],
    candidate: Dependency | None = None,
) -> bool:
    """Check whether the active dependencies (plus an optional candidate) form a cycle."""
    return find_cycle(task_ids, dependencies, candidate) is not None


def format_cycle(cycle: list[TaskId]) -> str:
    return " -> ".join(cycle)
