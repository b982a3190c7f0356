"""FastMCP server for Dependency Scanner - module graphs, cycles and deployment modes."""

import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastmcp import FastMCP

from .config import Settings, setup_logging
from .context import create_context, run_scan
from .tools import register_all_tools
from .watcher import FileWatcher

logger = logging.getLogger(__name__)


def create_file_change_handler(context: dict[str, Any]) -> Callable[[set[str]], None]:
    """Create a callback function for handling file changes.

    The graph is immutable once built, so any change triggers a full rescan
    with the scan options currently in effect.

    Args:
        context: Lifespan context holding the config and current result

    Returns:
        Callback function for FileWatcher
    """

    def handle_changes(changed: set[str]) -> None:
        """Rescan after a batch of file changes.

        Args:
            changed: Root-relative paths created, modified, moved or deleted
        """
        logger.info(f"Changed: {', '.join(sorted(changed))}")

        try:
            run_scan(context)
        except Exception as e:
            logger.error(f"Rescan after file changes failed: {e}")

    return handle_changes


def run_initial_scan(context: dict[str, Any]) -> None:
    """Run the initial scan in a background thread.

    Args:
        context: Lifespan context to publish the result into
    """
    try:
        logger.info("Starting background scan...")
        run_scan(context)
        logger.info("Background scan completed successfully")
    except Exception as e:
        logger.error(f"Background scan failed: {e}")


@asynccontextmanager
async def lifespan(server: FastMCP):
    """Manage server lifecycle - initialize and cleanup resources."""
    # Load configuration
    try:
        config = Settings()
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

    setup_logging(config.log_level)
    logger.info(f"Starting Dependency Scanner for: {config.scan_path}")

    # Build context for tools (before scanning so the MCP handshake completes quickly)
    context = create_context(config)

    scan_thread = threading.Thread(
        target=run_initial_scan,
        args=(context,),
        daemon=True,
    )
    scan_thread.start()

    watcher = None
    if config.watch:
        logger.info("Starting file watcher...")
        watcher = FileWatcher(
            root_dir=config.root_dir,
            on_changes=create_file_change_handler(context),
            debounce_seconds=config.debounce_seconds,
            extensions=config.extensions,
            exclude_dirs=config.exclude_dirs,
        )
        watcher.start()
        context["watcher"] = watcher
        context["watcher_active"] = True

    logger.info("Dependency Scanner ready (scanning in background)")

    yield context

    # Cleanup
    logger.info("Shutting down Dependency Scanner...")
    if watcher is not None:
        watcher.stop()
    logger.info("Shutdown complete")


# Create the MCP server
mcp = FastMCP("Dependency Scanner", lifespan=lifespan)

# Register all tools
register_all_tools(mcp)


def main():
    """Entry point for the Dependency Scanner MCP server."""
    mcp.run()


if __name__ == "__main__":
    main()
