"""MCP tools for cycle and deployment-mode analysis."""

from typing import Any

from fastmcp import Context

from ..context import NOT_READY_ERROR, current_result
from ..graph import analyze_deployment_modes, enumerate_simple_cycles


def register_analysis_tools(mcp) -> None:
    """Register analysis tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def get_cycles(
        ctx: Context,
        exhaustive: bool = False,
        limit: int = 50,
    ) -> dict[str, Any]:
        """List circular dependencies between project files.

        Args:
            exhaustive: Enumerate every simple cycle instead of one witness
                        per back-edge found by the scan (can be slow)
            limit: Max cycles returned (default: 50)

        Returns:
            Cycles as lists of files, first file repeated at the end
        """
        result = current_result(ctx.request_context.lifespan_context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        cycles = enumerate_simple_cycles(result.storage) if exhaustive else result.cycles
        return {
            "exhaustive": exhaustive,
            "cycles": cycles[:limit],
            "count": len(cycles),
            "truncated": len(cycles) > limit,
        }

    @mcp.tool()
    def get_deployment_modes(
        ctx: Context,
        mode: str | None = None,
    ) -> dict[str, Any]:
        """Get the files used in each deployment mode.

        Modes are inferred from path keywords (dev, test, stage, prod...)
        plus everything those files transitively import.

        Args:
            mode: Optional, one of "development", "testing", "staging", "production"

        Returns:
            File count and files per mode
        """
        result = current_result(ctx.request_context.lifespan_context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        mode_files = result.mode_files
        if mode_files is None:
            mode_files = analyze_deployment_modes(result.root_dir, result.storage)

        if mode is not None:
            if mode not in mode_files:
                return {"error": f"Unknown mode: {mode}", "modes": list(mode_files)}
            mode_files = {mode: mode_files[mode]}

        return {
            "modes": {
                name: {"file_count": len(files), "files": sorted(files)}
                for name, files in mode_files.items()
            },
        }
