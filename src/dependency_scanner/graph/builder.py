"""Graph builder for constructing module dependency graphs from source trees."""

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..parser.imports import parse_file_imports
from ..parser.languages import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXTENSIONS, find_source_files
from .import_resolver import ImportResolver
from .storage import ExternalEdgePolicy, GraphStorage

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One file being expanded: its remaining references and its depth."""

    file_path: str
    depth: int
    references: Iterator[str]


@dataclass
class TraversalState:
    """Explicit traversal state owned by a single build.

    Each file enters ``processed`` at most once, which bounds the number of
    files whose imports are ever extracted.
    """

    discovered: set[str]
    max_depth: int | None = None
    processed: set[str] = field(default_factory=set)
    stack: list[_Frame] = field(default_factory=list)


class GraphBuilder:
    """Builds the module dependency graph for a project."""

    def __init__(
        self,
        storage: GraphStorage,
        repo_root: Path | str,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
        external_edges: ExternalEdgePolicy | str = ExternalEdgePolicy.STRICT,
    ):
        """Initialize the graph builder.

        Args:
            storage: GraphStorage instance to build into
            repo_root: Root directory of the project
            extensions: File extensions to scan
            exclude_dirs: Directory name fragments to skip during discovery
            external_edges: Policy for references that resolve to no file
        """
        self._storage = storage
        self._repo_root = Path(os.path.abspath(repo_root))
        self._extensions = tuple(extensions)
        self._exclude_dirs = tuple(exclude_dirs)
        self._policy = ExternalEdgePolicy(external_edges)
        self._import_resolver = ImportResolver(self._repo_root)

    @property
    def storage(self) -> GraphStorage:
        """Access the underlying graph storage."""
        return self._storage

    def build(self, start_file: str | None = None, max_depth: int | None = None) -> GraphStorage:
        """Scan the project and build the dependency graph.

        The storage is frozen afterwards, so a builder builds once; scan again
        with a new GraphStorage.

        Args:
            start_file: Optional entry file (relative to the root); when absent
                every discovered file is a starting point
            max_depth: Maximum traversal depth from the starting point(s)

        Returns:
            The populated storage, frozen against further changes

        Raises:
            RuntimeError: If the storage was already built
        """
        if self._storage.is_frozen:
            raise RuntimeError("Graph storage is already built; use a new GraphStorage per build")

        logger.info(f"Looking for files in: {self._repo_root}")
        logger.info(f"Searching for file extensions: {', '.join(self._extensions)}")
        logger.info(f"Excluding directories: {', '.join(self._exclude_dirs)}")
        if max_depth is not None:
            logger.info(f"Maximum dependency depth: {max_depth}")

        discovered = find_source_files(self._repo_root, self._extensions, self._exclude_dirs)
        state = TraversalState(discovered=set(discovered), max_depth=max_depth)

        if start_file:
            start_path = Path(os.path.normpath(self._repo_root / start_file))
            if not start_path.is_file():
                logger.error(f"Start file not found: {start_path}")
            elif not start_path.is_relative_to(self._repo_root):
                logger.error(f"Start file is outside {self._repo_root}: {start_path}")
            else:
                relative_start = start_path.relative_to(self._repo_root).as_posix()
                logger.info(f"Starting dependency analysis from: {relative_start}")
                self._traverse(relative_start, state)
        else:
            logger.info("Processing all files in the project...")
            for file_path in discovered:
                self._traverse(file_path, state)

        self._storage.freeze()

        stats = self._storage.get_statistics()
        logger.info(
            f"Graph built: {stats['scanned']} files scanned, {stats['nodes']} nodes, "
            f"{stats['edges']} dependencies ({stats['external_edges']} external)"
        )
        return self._storage

    def _traverse(self, file_path: str, state: TraversalState) -> None:
        """Expand a file and everything it reaches, depth-first.

        The stack holds one frame per file being expanded, so files are
        visited in the same order as a recursive descent would visit them.
        """
        self._enter(file_path, 0, state)

        while state.stack:
            frame = state.stack[-1]
            reference = next(frame.references, None)
            if reference is None:
                state.stack.pop()
                continue

            target = self._add_reference(frame.file_path, reference)
            if target is not None and target in state.discovered:
                self._enter(target, frame.depth + 1, state)

    def _enter(self, file_path: str, depth: int, state: TraversalState) -> None:
        """Start processing a file unless it was seen or lies beyond the depth limit."""
        if file_path in state.processed:
            return
        if state.max_depth is not None and depth > state.max_depth:
            logger.debug(f"Depth limit reached at {file_path} (depth: {depth})")
            return

        state.processed.add(file_path)
        full_path = self._repo_root / file_path
        if not full_path.is_file():
            return

        try:
            references = parse_file_imports(full_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable file {file_path}: {e}")
            return

        self._storage.add_file(file_path)
        logger.debug(f"Processing {len(references)} imports for {file_path} (depth: {depth})")
        state.stack.append(_Frame(file_path=file_path, depth=depth, references=iter(references)))

    def _add_reference(self, file_path: str, reference: str) -> str | None:
        """Resolve one reference and record the resulting edge.

        Args:
            file_path: Root-relative path of the importing file
            reference: Raw import reference

        Returns:
            The root-relative target if a new internal edge was added, else None
        """
        full_path = self._repo_root / file_path
        resolved = self._import_resolver.resolve(reference, full_path)
        logger.debug(f"  {reference} -> {resolved.resolved_path}")

        if not resolved.is_path:
            if self._policy is ExternalEdgePolicy.LENIENT:
                self._storage.add_dependency(file_path, reference, is_external=True)
            else:
                logger.debug(f"  Dropping unresolved module: {reference}")
            return None

        target = Path(resolved.resolved_path)
        try:
            exists = target.is_file()
            relative = target.relative_to(self._repo_root).as_posix() if exists else None
        except (ValueError, OSError):
            # Outside the root (e.g. a package directory reached through ../)
            if resolved.resolved_path:
                logger.debug(f"  External dependency: {resolved.resolved_path}")
                self._storage.add_dependency(file_path, resolved.resolved_path, is_external=True)
            return None

        if relative is None:
            if self._policy is ExternalEdgePolicy.LENIENT and not resolved.is_relative:
                self._storage.add_dependency(file_path, reference, is_external=True)
            else:
                logger.debug(f"  Could not resolve: {reference}")
            return None

        if not self._storage.add_dependency(file_path, relative, is_external=False):
            logger.debug(f"  Skipping duplicate dependency: {relative}")
            return None
        return relative
