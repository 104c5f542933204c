"""
Stable topological sorting.

:func:`stable_toposort` implements Kahn's algorithm with a priority queue instead of a plain queue: whenever multiple
nodes are ready to be emitted, the one with the smallest key (usually the insertion index) goes first. For nodes that
are not constrained relative to each other, the result therefore keeps their insertion order, and the result does not
depend on the iteration order of any set or dict involved.
"""

import heapq
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger

T = TypeVar("T", bound=Hashable)


@dataclass
class CycleError(Exception):
    """
    Raised when a dependency graph contains a cycle and thus can not be ordered.
    """

    cycle: list[Any]
    """
    The nodes that form the cycle. Each node has an edge to the next one, and the last one has an edge to the first.
    """

    def __str__(self) -> str:
        return "Dependency cycle detected: " + " -> ".join(str(node) for node in [*self.cycle, self.cycle[0]])


def stable_toposort(
    nodes: Sequence[T],
    edges: Iterable[tuple[T, T]],
    key: Callable[[T], int] | None = None,
) -> list[T]:
    """
    Order *nodes* such that for every edge `(u, v)`, `u` comes before `v`.

    Args:
        nodes: The nodes to sort. Must not contain duplicates.
        edges: The edges between the nodes. Duplicate edges are ignored.
        key: The insertion index of a node, used to break ties between nodes that are ready at the same time. Defaults
            to the position of the node in *nodes*.
    Raises:
        CycleError: If the edges form a cycle. The error names one complete cycle.
        ValueError: If *nodes* contains duplicates or an edge references a node that is not in *nodes*.
    """

    position = {node: idx for idx, node in enumerate(nodes)}
    if len(position) != len(nodes):
        raise ValueError("Nodes to sort must be unique")
    if key is None:
        key = position.__getitem__

    successors: dict[T, dict[T, None]] = {node: {} for node in nodes}
    predecessors: dict[T, dict[T, None]] = {node: {} for node in nodes}
    for source, target in edges:
        if source not in position or target not in position:
            raise ValueError(f"Edge {source} -> {target} references a node that is not being sorted")
        successors[source][target] = None
        predecessors[target][source] = None

    in_degree = {node: len(predecessors[node]) for node in nodes}
    ready = [(key(node), position[node], node) for node in nodes if in_degree[node] == 0]
    heapq.heapify(ready)

    result: list[T] = []
    while ready:
        _, _, node = heapq.heappop(ready)
        result.append(node)
        for successor in successors[node]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(ready, (key(successor), position[successor], successor))

    if len(result) < len(nodes):
        remaining = {node for node in nodes if in_degree[node] > 0}
        cycle = _find_cycle(remaining, predecessors, lambda node: (key(node), position[node]))
        logger.debug("Could not order {} of {} node(s), found cycle {}", len(remaining), len(nodes), cycle)
        raise CycleError(cycle)

    return result


def _find_cycle(
    remaining: set[T],
    predecessors: dict[T, dict[T, None]],
    sort_key: Callable[[T], tuple[int, int]],
) -> list[T]:
    """
    Find a cycle among the nodes that Kahn's algorithm could not emit. Each of these nodes has at least one predecessor
    that is also remaining, so walking backwards along predecessors must eventually revisit a node.
    """

    current = min(remaining, key=sort_key)
    walk = [current]
    visited = {current: 0}
    while True:
        current = min((p for p in predecessors[current] if p in remaining), key=sort_key)
        if current in visited:
            break
        visited[current] = len(walk)
        walk.append(current)

    # The walk follows edges backwards, reverse it to get the cycle in edge direction.
    cycle = walk[visited[current] :][::-1]
    start = cycle.index(min(cycle, key=sort_key))
    return cycle[start:] + cycle[:start]
