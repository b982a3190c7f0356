"""MCP tools for graph queries."""

from typing import Any

from fastmcp import Context

from ..context import NOT_READY_ERROR, current_result
from ..graph import (
    find_paths,
    get_file_dependencies,
    get_file_dependents,
    get_transitive_dependencies,
)


def register_graph_tools(mcp) -> None:
    """Register graph tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()
    def tool_get_file_dependencies(
        ctx: Context,
        file_path: str,
    ) -> dict[str, Any]:
        """Get the direct dependencies of a file.

        Args:
            file_path: Path of the file relative to the scan root (e.g. "src/app.js")

        Returns:
            List of imported files and modules
        """
        result = current_result(ctx.request_context.lifespan_context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        dependencies = get_file_dependencies(result.storage, file_path)
        return {
            "file_path": file_path,
            "scanned": result.storage.is_scanned(file_path),
            "dependencies": dependencies,
            "count": len(dependencies),
        }

    @mcp.tool()
    def tool_get_file_dependents(
        ctx: Context,
        file_path: str,
    ) -> dict[str, Any]:
        """Get all files that import a given file or module.

        Args:
            file_path: Path relative to the scan root, or an external module id

        Returns:
            List of importing files
        """
        result = current_result(ctx.request_context.lifespan_context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        dependents = get_file_dependents(result.storage, file_path)
        return {
            "file_path": file_path,
            "dependents": dependents,
            "count": len(dependents),
        }

    @mcp.tool()
    def tool_get_transitive_dependencies(
        ctx: Context,
        file_path: str,
    ) -> dict[str, Any]:
        """Get everything a file depends on, directly or indirectly.

        Args:
            file_path: Path of the file relative to the scan root

        Returns:
            All reachable files and modules
        """
        result = current_result(ctx.request_context.lifespan_context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        dependencies = get_transitive_dependencies(result.storage, file_path)
        return {
            "file_path": file_path,
            "dependencies": dependencies,
            "count": len(dependencies),
        }

    @mcp.tool()
    def tool_find_paths(
        ctx: Context,
        source: str,
        target: str,
        max_length: int = 10,
    ) -> dict[str, Any]:
        """Find the import chains leading from one file to another.

        Args:
            source: Importing file, relative to the scan root
            target: Imported file or module
            max_length: Maximum chain length (default: 10)

        Returns:
            Paths as lists of files
        """
        result = current_result(ctx.request_context.lifespan_context)
        if result is None:
            return {"error": NOT_READY_ERROR}

        paths = find_paths(result.storage, source, target, max_length)
        return {
            "source": source,
            "target": target,
            "paths": paths,
            "count": len(paths),
        }
