"""Shared server context: the current scan result and its status."""

import logging
import threading
from typing import Any

from .config import Settings
from .pipeline import ScanResult, scan_from_settings

logger = logging.getLogger(__name__)

NOT_READY_ERROR = "No scan result available yet; check get_scan_status"


def create_context(config: Settings) -> dict[str, Any]:
    """Create the lifespan context shared by all tools."""
    return {
        "config": config,
        "lock": threading.Lock(),  # Guards the published state below
        "scan_lock": threading.Lock(),  # Serializes whole scans
        "overrides": {},  # Scan options replacing the configured ones
        "result": None,
        "watcher": None,  # Will be set after watcher starts
        "watcher_active": False,
        "scan_complete": False,
        "scan_error": None,
        "scan_phase": "starting",
        "scan_count": 0,
    }


def run_scan(context: dict[str, Any], reset: bool = False, **overrides) -> ScanResult:
    """Scan the configured project and publish the result in the context.

    Overrides are merged into the ones already active and kept for later
    scans, so a rescan triggered by file changes keeps the same scope.
    Scans never overlap: a second caller waits for the running scan.

    Args:
        context: Lifespan context
        reset: Discard the options kept from earlier scans first
        **overrides: Scan options replacing the configured ones

    Returns:
        The new scan result
    """
    with context["scan_lock"]:
        with context["lock"]:
            kept = {} if reset else context["overrides"]
            options = {**kept, **overrides}
            context["scan_phase"] = "scanning"

        try:
            result = scan_from_settings(context["config"], **options)
        except Exception as e:
            with context["lock"]:
                context["scan_phase"] = "error"
                context["scan_error"] = str(e)
            raise

        with context["lock"]:
            context["overrides"] = options
            context["result"] = result
            context["scan_complete"] = True
            context["scan_error"] = None
            context["scan_phase"] = "complete"
            context["scan_count"] += 1
        return result


def current_result(context: dict[str, Any]) -> ScanResult | None:
    """Get the latest complete scan result, if any."""
    with context["lock"]:
        return context["result"]


def active_overrides(context: dict[str, Any]) -> dict[str, Any]:
    """Get the scan options currently replacing the configured ones."""
    with context["lock"]:
        return dict(context["overrides"])
