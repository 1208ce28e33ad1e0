# dag.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import CircularDependency
from .model import Job, Task

# task name -> names it directly requires (ordered, no duplicates)
DependencyGraph = Dict[str, Tuple[str, ...]]

CYCLE_SEPARATOR = " -> "


def build_graph(tasks: Iterable[Task]) -> DependencyGraph:
    """
    Build the dependency graph from Task objects.

    No validation here:
      - a required name that is not a task is kept as-is
      - if two tasks share a name, the later one wins
    """
    graph: DependencyGraph = {}
    for task in tasks:
        # dict.fromkeys de-duplicates and keeps first-occurrence order
        graph[task.name] = tuple(dict.fromkeys(task.requires))
    return graph


def _deps(graph: DependencyGraph, name: str) -> Tuple[str, ...]:
    # unknown names (not a task in this job) have no dependencies
    return graph.get(name, ())


def find_cycle(graph: DependencyGraph, tasks: Sequence[Task]) -> Optional[List[str]]:
    """
    Depth-first search for a cycle, starting from each task in job order.

    Returns the whole walk from the outer start to the repeated node, in
    discovery order (e.g. ["a", "b", "a"] when a requires b and b requires a,
    ["entry", "a", "b", "a"] when the walk reached the cycle through entry),
    or None.

    Uses an explicit stack, so dependency chains of any length are fine.
    Nodes fully explored from an earlier start are not walked again.
    """
    visited: set[str] = set()

    for start in (t.name for t in tasks):
        if start in visited:
            continue

        path: List[str] = [start]
        on_stack = {start}
        visited.add(start)
        stack = [iter(_deps(graph, start))]

        while stack:
            dep = next(stack[-1], None)
            if dep is None:
                stack.pop()
                on_stack.discard(path.pop())
                continue

            if dep in on_stack:
                return path + [dep]
            if dep in visited:
                continue

            visited.add(dep)
            on_stack.add(dep)
            path.append(dep)
            stack.append(iter(_deps(graph, dep)))

    return None


def format_cycle(cycle: Sequence[str]) -> str:
    """Render a cycle in execution direction: 'a -> b -> a'."""
    return CYCLE_SEPARATOR.join(reversed(cycle))


def detect_cycles(graph: DependencyGraph, tasks: Sequence[Task]) -> None:
    """Raise CircularDependency if any task transitively requires itself."""
    cycle = find_cycle(graph, tasks)
    if cycle is not None:
        raise CircularDependency(format_cycle(cycle))


def topo_sort(graph: DependencyGraph, tasks: Sequence[Task]) -> List[Task]:
    """
    Order tasks so every task comes after everything it requires.

    The graph must be acyclic (run detect_cycles first).

    Depth-first emission:
      - outer loop walks tasks in job order
      - dependencies are visited in their `requires` order
      - a node is marked visited before its dependencies are walked, so
        diamonds emit each task once
      - a task is emitted after all of its dependencies
    """
    by_name: Dict[str, Task] = {}
    for task in tasks:
        by_name.setdefault(task.name, task)

    visited: set[str] = set()
    ordered: List[Task] = []

    for start in (t.name for t in tasks):
        if start in visited:
            continue

        visited.add(start)
        path: List[str] = [start]
        stack = [iter(_deps(graph, start))]

        while stack:
            dep = next(stack[-1], None)
            if dep is None:
                stack.pop()
                done = path.pop()
                # names that are not tasks of this job have nothing to emit
                if done in by_name:
                    ordered.append(by_name[done])
                continue

            if dep in visited:
                continue

            visited.add(dep)
            path.append(dep)
            stack.append(iter(_deps(graph, dep)))

    return ordered


def sort_job(job: Job) -> List[Task]:
    """Build graph -> detect cycles -> sort. Raises CircularDependency."""
    tasks = list(job.tasks)
    graph = build_graph(tasks)
    detect_cycles(graph, tasks)
    return topo_sort(graph, tasks)
