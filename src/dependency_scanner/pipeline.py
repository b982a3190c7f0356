"""Scan pipeline: build the graph, then run the analyses over it."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import Settings
from .graph import (
    ExternalEdgePolicy,
    GraphBuilder,
    GraphStorage,
    analyze_deployment_modes,
    detect_cycles,
)
from .parser.languages import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXTENSIONS
from .report import DependencyReport, create_report

logger = logging.getLogger(__name__)

# Number of cycles listed in the scan log
MAX_LOGGED_CYCLES = 5


@dataclass
class ScanResult:
    """Everything produced by one scan."""

    root_dir: Path
    storage: GraphStorage
    cycles: list[list[str]]
    mode_files: dict[str, set[str]] | None = None

    @property
    def report(self) -> DependencyReport:
        """Build the report for this scan."""
        return create_report(self.storage, self.cycles, self.mode_files)


def scan_project(
    root_dir: Path | str,
    extensions: tuple[str, ...] | list[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: tuple[str, ...] | list[str] = DEFAULT_EXCLUDED_DIRS,
    start_file: str | None = None,
    max_depth: int | None = None,
    analyze_modes: bool = False,
    external_edges: ExternalEdgePolicy | str = ExternalEdgePolicy.STRICT,
) -> ScanResult:
    """Scan a project and analyze its dependency graph.

    Args:
        root_dir: Root directory of the project
        extensions: File extensions to scan
        exclude_dirs: Directory name fragments to exclude
        start_file: Optional entry file relative to the root
        max_depth: Maximum depth of dependency traversal
        analyze_modes: Whether to classify files by deployment mode
        external_edges: Policy for references that resolve to no file

    Returns:
        ScanResult with the frozen graph, cycles and optional mode assignment
    """
    root = Path(root_dir)
    if start_file:
        logger.info(f"Analyzing single file: {root / start_file}")
    else:
        logger.info(f"Scanning dependencies in directory: {root}")

    storage = GraphStorage()
    builder = GraphBuilder(
        storage,
        root,
        extensions=extensions,
        exclude_dirs=exclude_dirs,
        external_edges=external_edges,
    )
    builder.build(start_file=start_file, max_depth=max_depth)

    logger.info("Detecting circular dependencies...")
    cycles = detect_cycles(storage)

    mode_files = None
    if analyze_modes:
        logger.info("Analyzing deployment modes...")
        mode_files = analyze_deployment_modes(root, storage)

    result = ScanResult(root_dir=root, storage=storage, cycles=cycles, mode_files=mode_files)
    log_summary(result)
    return result


def scan_from_settings(settings: Settings, **overrides) -> ScanResult:
    """Run a scan configured by application settings.

    Args:
        settings: Application settings
        **overrides: Keyword arguments that replace the settings' values
            (start_file, max_depth, analyze_modes)

    Returns:
        ScanResult for the configured target
    """
    options = {
        "extensions": settings.extensions,
        "exclude_dirs": settings.exclude_dirs,
        "start_file": settings.start_file,
        "max_depth": settings.max_depth,
        "analyze_modes": settings.analyze_modes,
        "external_edges": settings.external_edges,
    }
    options.update(overrides)
    return scan_project(settings.root_dir, **options)


def log_summary(result: ScanResult) -> None:
    """Log the summary counts and the first few cycles of a scan."""
    summary = result.report.summary
    logger.info(f"Total files: {summary.total_files}")
    logger.info(f"Total dependencies: {summary.total_dependencies}")
    logger.info(f"Files with circular dependencies: {summary.files_with_circular_dependencies}")
    logger.info(f"Total cycles: {summary.total_cycles}")

    if result.cycles:
        logger.warning("Circular dependencies detected:")
        for i, cycle in enumerate(result.cycles[:MAX_LOGGED_CYCLES], start=1):
            logger.warning(f"  Cycle {i}: {' -> '.join(cycle)}")
        if len(result.cycles) > MAX_LOGGED_CYCLES:
            remaining = len(result.cycles) - MAX_LOGGED_CYCLES
            logger.warning(f"  ... and {remaining} more cycles (see the JSON output for details)")
