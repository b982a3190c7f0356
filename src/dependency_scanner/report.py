"""Pydantic models for the dependency report consumed by the visualizer."""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .graph.storage import DependencyEdge, GraphStorage

logger = logging.getLogger(__name__)


class _ReportModel(BaseModel):
    """Base for report models; fields serialize under camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NodeReport(_ReportModel):
    """One file or module in the report."""

    id: str = Field(..., description="Root-relative path or module identifier")
    is_external: bool = Field(..., description="True if not a project file")
    dependencies: list[DependencyEdge] = Field(default_factory=list)
    has_circular_dependency: bool = Field(default=False)
    deployment_modes: list[str] | None = Field(
        default=None, description="Modes the node is used in (only when analyzed)"
    )


class ReportSummary(_ReportModel):
    """Aggregate counts over the report."""

    total_files: int
    internal_files: int
    external_files: int
    total_dependencies: int
    files_with_circular_dependencies: int
    total_cycles: int


class ModeSummary(_ReportModel):
    """Files used under one deployment mode."""

    file_count: int
    files: list[str]


class DependencyReport(_ReportModel):
    """Complete scan output."""

    nodes: list[NodeReport]
    cycles: list[list[str]]
    summary: ReportSummary
    deployment_modes: dict[str, ModeSummary] | None = None

    def to_dict(self) -> dict:
        """Serialize using the visualizer's field names."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """Serialize to indented JSON using the visualizer's field names."""
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def create_report(
    storage: GraphStorage,
    cycles: list[list[str]],
    mode_files: dict[str, set[str]] | None = None,
) -> DependencyReport:
    """Create the report for a completed scan.

    Args:
        storage: Completed graph storage
        cycles: Cycles found in the graph
        mode_files: Files used in each deployment mode, if analyzed

    Returns:
        The report model
    """
    circular = {file_path for cycle in cycles for file_path in cycle}

    nodes: list[NodeReport] = []
    for node_id in storage.all_nodes():
        node = NodeReport(
            id=node_id,
            is_external=storage.is_external_node(node_id),
            dependencies=storage.get_dependencies(node_id),
            has_circular_dependency=node_id in circular,
        )
        if mode_files is not None:
            node.deployment_modes = [mode for mode, files in mode_files.items() if node_id in files]
        nodes.append(node)

    external_count = sum(1 for node in nodes if node.is_external)
    summary = ReportSummary(
        total_files=len(nodes),
        internal_files=len(nodes) - external_count,
        external_files=external_count,
        total_dependencies=storage.graph.number_of_edges(),
        files_with_circular_dependencies=len(circular),
        total_cycles=len(cycles),
    )

    deployment_modes = None
    if mode_files is not None:
        deployment_modes = {
            mode: ModeSummary(file_count=len(files), files=sorted(files))
            for mode, files in mode_files.items()
        }

    return DependencyReport(
        nodes=nodes,
        cycles=cycles,
        summary=summary,
        deployment_modes=deployment_modes,
    )


def save_report(report: DependencyReport, output_path: Path) -> None:
    """Write the report as JSON.

    Args:
        report: Report to write
        output_path: Destination file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report.to_json(), encoding="utf-8")
    logger.info(f"Dependency graph saved to {output_path}")
