"""Graph storage using NetworkX for the in-memory module dependency graph."""

import logging
from collections.abc import Iterator
from enum import Enum

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ExternalEdgePolicy(str, Enum):
    """How references that do not resolve to a project file are recorded."""

    STRICT = "strict"  # Only probe failures become external edges
    LENIENT = "lenient"  # Every unresolved non-relative reference is external


class DependencyEdge(BaseModel):
    """A dependency from one scanned file to a file or module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(..., description="Root-relative path or external module identifier")
    is_external: bool = Field(..., alias="isExternal", description="True if not a project file")


class GraphStorage:
    """In-memory dependency graph using a NetworkX DiGraph.

    Nodes are file paths or module identifiers. A node has ``scanned=True``
    once its imports were extracted; other nodes only appear as edge
    targets. Edges carry ``is_external``, the resolver's verdict.
    """

    def __init__(self):
        """Initialize an empty directed graph."""
        self._graph = nx.DiGraph()
        self._scanned: list[str] = []

    @property
    def graph(self) -> nx.DiGraph:
        """Access the underlying NetworkX graph."""
        return self._graph

    @property
    def scanned_files(self) -> list[str]:
        """Files whose imports were extracted, in scan order."""
        return list(self._scanned)

    def add_file(self, file_path: str) -> None:
        """Record a file as scanned, with an empty dependency list.

        Args:
            file_path: Root-relative path of the file
        """
        if self.is_scanned(file_path):
            return
        self._graph.add_node(file_path, scanned=True)
        self._scanned.append(file_path)

    def add_dependency(self, from_path: str, to_path: str, is_external: bool) -> bool:
        """Add a dependency edge from a scanned file.

        Args:
            from_path: Scanned source file
            to_path: Root-relative target path or module identifier
            is_external: Whether the target is outside the project

        Returns:
            True if the edge was added, False if it already existed
        """
        if self._graph.has_edge(from_path, to_path):
            return False
        if to_path not in self._graph:
            self._graph.add_node(to_path, scanned=False)
        self._graph.add_edge(from_path, to_path, is_external=is_external)
        return True

    def is_scanned(self, file_path: str) -> bool:
        """Check if a file has its own dependency list."""
        return file_path in self._graph and self._graph.nodes[file_path].get("scanned", False)

    def has_node(self, node_id: str) -> bool:
        """Check if a file or module appears anywhere in the graph."""
        return node_id in self._graph

    def get_dependencies(self, file_path: str) -> list[DependencyEdge]:
        """Get the ordered dependency list of a file.

        Args:
            file_path: File path to query

        Returns:
            Dependencies in insertion order (empty for unknown or target-only nodes)
        """
        if file_path not in self._graph:
            return []
        return [
            DependencyEdge(path=target, is_external=data["is_external"])
            for _, target, data in self._graph.out_edges(file_path, data=True)
        ]

    def get_dependents(self, node_id: str) -> list[DependencyEdge]:
        """Get the files that depend on a node.

        Args:
            node_id: File path or module identifier

        Returns:
            One edge per importing file, ``path`` being the importer
        """
        if node_id not in self._graph:
            return []
        return [
            DependencyEdge(path=source, is_external=data["is_external"])
            for source, _, data in self._graph.in_edges(node_id, data=True)
        ]

    def internal_successors(self, file_path: str) -> Iterator[str]:
        """Iterate over the internal dependency targets of a file."""
        for _, target, data in self._graph.out_edges(file_path, data=True):
            if not data["is_external"]:
                yield target

    def successors(self, node_id: str) -> Iterator[str]:
        """Iterate over every dependency target of a node."""
        if node_id in self._graph:
            yield from self._graph.successors(node_id)

    def all_nodes(self) -> list[str]:
        """All nodes: scanned files in scan order, then other targets in first-seen order."""
        nodes: dict[str, None] = dict.fromkeys(self._scanned)
        for file_path in self._scanned:
            for target in self._graph.successors(file_path):
                nodes.setdefault(target, None)
        return list(nodes)

    def is_external_node(self, node_id: str) -> bool:
        """Classify a node from the resolver verdicts stored on its edges.

        A node is internal if it was scanned or any internal edge targets it,
        regardless of whether traversal was depth-limited before reaching it.
        """
        if self.is_scanned(node_id):
            return False
        return all(data["is_external"] for _, _, data in self._graph.in_edges(node_id, data=True))

    def internal_graph(self) -> nx.DiGraph:
        """Read-only view of the graph restricted to internal edges."""
        return nx.subgraph_view(
            self._graph,
            filter_edge=lambda u, v: not self._graph.edges[u, v]["is_external"],
        )

    def freeze(self) -> None:
        """Make the graph immutable; later mutations raise NetworkXError."""
        nx.freeze(self._graph)

    @property
    def is_frozen(self) -> bool:
        """Whether the graph has been frozen."""
        return nx.is_frozen(self._graph)

    def get_statistics(self) -> dict[str, int]:
        """Get graph statistics.

        Returns:
            Dictionary with counts of nodes, edges, and node kinds
        """
        stats = {
            "nodes": self._graph.number_of_nodes(),
            "edges": self._graph.number_of_edges(),
            "scanned": len(self._scanned),
            "internal": 0,
            "external": 0,
            "external_edges": 0,
        }

        for node_id in self._graph.nodes:
            if self.is_external_node(node_id):
                stats["external"] += 1
            else:
                stats["internal"] += 1

        for _, _, data in self._graph.edges(data=True):
            if data["is_external"]:
                stats["external_edges"] += 1

        return stats
