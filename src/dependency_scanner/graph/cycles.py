"""Circular dependency detection over the internal edges of a dependency graph."""

import logging
from collections.abc import Iterator
from enum import Enum

import networkx as nx

from .storage import GraphStorage

logger = logging.getLogger(__name__)


class _Color(Enum):
    GRAY = 1  # On the current DFS path
    BLACK = 2  # Subtree fully explored


def detect_cycles(storage: GraphStorage) -> list[list[str]]:
    """Detect cycles with a single depth-first forest over internal edges.

    Roots are the scanned files in scan order. Reaching a node that is on
    the current path reports the path suffix from that node, closed by
    repeating it. A node is never re-entered once finished, so this yields
    one witness per back-edge met, not every simple cycle in the graph (see
    ``enumerate_simple_cycles`` for that).

    Args:
        storage: Completed graph storage

    Returns:
        Cycles in discovery order, each starting and ending with the same file
    """
    color: dict[str, _Color] = {}
    cycles: list[list[str]] = []

    for root in storage.scanned_files:
        if root in color:
            continue

        color[root] = _Color.GRAY
        path: list[str] = [root]
        stack: list[Iterator[str]] = [storage.internal_successors(root)]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                # Subtree finished
                stack.pop()
                color[path.pop()] = _Color.BLACK
                continue

            state = color.get(child)
            if state is _Color.GRAY:
                cycle = path[path.index(child):] + [child]
                logger.debug(f"Cycle found: {' -> '.join(cycle)}")
                cycles.append(cycle)
            elif state is None:
                color[child] = _Color.GRAY
                path.append(child)
                stack.append(storage.internal_successors(child))

    logger.info(f"Detected {len(cycles)} circular dependencies")
    return cycles


def enumerate_simple_cycles(storage: GraphStorage, length_bound: int | None = None) -> list[list[str]]:
    """Enumerate every elementary cycle over internal edges.

    Unlike ``detect_cycles`` this is exhaustive (Johnson's algorithm), and
    can be expensive on densely connected graphs.

    Args:
        storage: Completed graph storage
        length_bound: Optional maximum cycle length

    Returns:
        Cycles closed by repeating their first file
    """
    cycles = nx.simple_cycles(storage.internal_graph(), length_bound=length_bound)
    return [cycle + [cycle[0]] for cycle in cycles]
