"""Query functions for traversing the module dependency graph."""

import logging
from typing import Any

import networkx as nx

from .storage import GraphStorage

logger = logging.getLogger(__name__)


def get_file_dependencies(storage: GraphStorage, file_path: str) -> list[dict[str, Any]]:
    """Get all files/modules that a file imports.

    Args:
        storage: Graph storage instance
        file_path: Root-relative path of the file to query

    Returns:
        List of imported file/module details
    """
    return [
        {
            "path": edge.path,
            "is_external": edge.is_external,
            "is_scanned": storage.is_scanned(edge.path),
        }
        for edge in storage.get_dependencies(file_path)
    ]


def get_file_dependents(storage: GraphStorage, node_id: str) -> list[dict[str, Any]]:
    """Get all files that import a given file or module.

    Args:
        storage: Graph storage instance
        node_id: File path or external module identifier

    Returns:
        List of files that import it
    """
    return [{"path": edge.path} for edge in storage.get_dependents(node_id)]


def get_transitive_dependencies(storage: GraphStorage, file_path: str) -> list[str]:
    """Get everything a file depends on, directly or indirectly.

    Direct dependencies come first, then each one's own dependencies are
    expanded depth-first.

    Args:
        storage: Graph storage instance
        file_path: Root-relative path of the file to query

    Returns:
        Dependency paths in discovery order, excluding the file itself
        unless it is part of a cycle
    """
    dependencies: dict[str, None] = dict.fromkeys(storage.successors(file_path))

    stack = list(reversed(dependencies))
    expanded: set[str] = set()
    while stack:
        current = stack.pop()
        if current in expanded:
            continue
        expanded.add(current)
        children = [t for t in storage.successors(current) if t not in dependencies]
        for child in children:
            dependencies[child] = None
        stack.extend(reversed(children))

    return list(dependencies)


def find_paths(
    storage: GraphStorage,
    source: str,
    target: str,
    max_length: int = 10,
) -> list[list[str]]:
    """Find all dependency paths between two files.

    Args:
        storage: Graph storage instance
        source: Starting file path
        target: Ending file path or module
        max_length: Maximum path length

    Returns:
        List of paths (each path is a list of node ids)
    """
    try:
        paths = list(
            nx.all_simple_paths(storage.graph, source, target, cutoff=max_length)
        )
        return paths
    except (nx.NetworkXError, nx.NodeNotFound):
        return []


def is_cyclic_edge(cycles: list[list[str]], source: str, target: str) -> bool:
    """Check if two files are adjacent in any reported cycle.

    Args:
        cycles: Cycles as returned by detect_cycles
        source: One end of the edge
        target: The other end of the edge

    Returns:
        True if the pair is adjacent (in either direction) in some cycle
    """
    for cycle in cycles:
        if source not in cycle or target not in cycle:
            continue
        for i, node in enumerate(cycle):
            following = cycle[(i + 1) % len(cycle)]
            if (node, following) in ((source, target), (target, source)):
                return True
    return False
