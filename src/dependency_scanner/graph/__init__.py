"""Graph module for module dependency analysis using NetworkX."""

from .builder import GraphBuilder, TraversalState
from .cycles import detect_cycles, enumerate_simple_cycles
from .import_resolver import ImportResolver, ResolvedImport, resolve_import_path
from .modes import MODE_PATTERNS, DeploymentMode, analyze_deployment_modes, seed_deployment_modes
from .queries import (
    find_paths,
    get_file_dependencies,
    get_file_dependents,
    get_transitive_dependencies,
    is_cyclic_edge,
)
from .storage import DependencyEdge, ExternalEdgePolicy, GraphStorage

__all__ = [
    # Storage
    "DependencyEdge",
    "ExternalEdgePolicy",
    "GraphStorage",
    # Builder
    "GraphBuilder",
    "TraversalState",
    # Import Resolution
    "ImportResolver",
    "ResolvedImport",
    "resolve_import_path",
    # Analysis
    "DeploymentMode",
    "MODE_PATTERNS",
    "analyze_deployment_modes",
    "detect_cycles",
    "enumerate_simple_cycles",
    "seed_deployment_modes",
    # Queries
    "find_paths",
    "get_file_dependencies",
    "get_file_dependents",
    "get_transitive_dependencies",
    "is_cyclic_edge",
]
