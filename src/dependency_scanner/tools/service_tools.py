"""MCP tools for service management operations."""

import logging
from typing import Any

from fastmcp import Context

from ..context import NOT_READY_ERROR, active_overrides, current_result, run_scan
from ..report import save_report

logger = logging.getLogger(__name__)


def register_service_tools(mcp) -> None:
    """Register service tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def get_scan_status(ctx: Context) -> dict[str, Any]:
        """Get the current status of the dependency scan.

        Returns:
            Scan phase, configuration and graph summary
        """
        context = ctx.request_context.lifespan_context
        config = context["config"]
        result = current_result(context)

        if context.get("scan_error"):
            status = "error"
        elif result is not None:
            status = "ready"
        else:
            status = "scanning"

        status_info: dict[str, Any] = {
            "status": status,
            "phase": context.get("scan_phase", "starting"),
            "scan_count": context.get("scan_count", 0),
            "root_dir": str(config.root_dir),
            "start_file": config.start_file,
            "extensions": config.extensions,
            "exclude_dirs": config.exclude_dirs,
            "max_depth": config.max_depth,
            "external_edges": config.external_edges,
            "overrides": active_overrides(context),
            "watcher_active": context.get("watcher_active", False),
        }
        if context.get("scan_error"):
            status_info["error"] = context["scan_error"]
        if result is not None:
            status_info["summary"] = result.report.summary.model_dump()

        return status_info

    @mcp.tool()
    def rescan(
        ctx: Context,
        start_file: str | None = None,
        max_depth: int | None = None,
        analyze_modes: bool | None = None,
        reset: bool = False,
    ) -> dict[str, Any]:
        """Rescan the project, optionally from a different entry point.

        Options given here stay in effect for later rescans, including the
        ones triggered by file changes.

        Args:
            start_file: Optional entry file relative to the scan root
            max_depth: Optional maximum traversal depth
            analyze_modes: Optional, also classify deployment modes
            reset: Drop previously given options and go back to the configuration

        Returns:
            Options in effect and summary of the new scan
        """
        context = ctx.request_context.lifespan_context
        overrides: dict[str, Any] = {}
        if start_file is not None:
            overrides["start_file"] = start_file
        if max_depth is not None:
            if max_depth < 0:
                return {"error": f"max_depth must be non-negative, got {max_depth}"}
            overrides["max_depth"] = max_depth
        if analyze_modes is not None:
            overrides["analyze_modes"] = analyze_modes

        logger.info(f"Rescanning with overrides: {overrides} (reset: {reset})")
        result = run_scan(context, reset=reset, **overrides)

        return {
            "overrides": active_overrides(context),
            "summary": result.report.summary.model_dump(),
        }

    @mcp.tool()
    def export_report(
        ctx: Context,
        output_file: str | None = None,
    ) -> dict[str, Any]:
        """Write the dependency report as JSON for the graph visualizer.

        Args:
            output_file: Optional path relative to the scan root
                         (default: the configured output file)

        Returns:
            Where the report was written and its summary
        """
        context = ctx.request_context.lifespan_context
        config = context["config"]
        result = current_result(context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        output_path = config.root_dir / output_file if output_file else config.output_path
        report = result.report
        save_report(report, output_path)

        return {
            "output_path": str(output_path),
            "summary": report.summary.model_dump(),
        }
