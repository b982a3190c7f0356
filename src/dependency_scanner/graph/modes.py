"""Heuristic deployment-mode classification by path keywords and reachability."""

import logging
from enum import Enum
from pathlib import Path

from .storage import GraphStorage

logger = logging.getLogger(__name__)


class DeploymentMode(str, Enum):
    """Deployment environments a file may be used in."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


# Path keywords that mark a file as an entry point of a mode
MODE_PATTERNS: dict[DeploymentMode, tuple[str, ...]] = {
    DeploymentMode.DEVELOPMENT: ("dev", "development", "local"),
    DeploymentMode.TESTING: ("test", "testing"),
    DeploymentMode.STAGING: ("stage", "staging"),
    DeploymentMode.PRODUCTION: ("prod", "production"),
}


def seed_deployment_modes(storage: GraphStorage) -> dict[str, set[str]]:
    """Assign scanned files to modes whose keywords appear in their path.

    Args:
        storage: Completed graph storage

    Returns:
        Mode name -> set of seed files
    """
    mode_files: dict[str, set[str]] = {mode.value: set() for mode in MODE_PATTERNS}
    for file_path in storage.scanned_files:
        file_lower = file_path.lower()
        for mode, patterns in MODE_PATTERNS.items():
            if any(pattern in file_lower for pattern in patterns):
                mode_files[mode.value].add(file_path)
    return mode_files


def analyze_deployment_modes(root_dir: Path | str, storage: GraphStorage) -> dict[str, set[str]]:
    """Identify the files used in each deployment mode.

    Seeds come from path keywords; each mode then takes in everything its
    seeds transitively depend on, internal or external.

    Args:
        root_dir: Root directory of the project
        storage: Completed graph storage

    Returns:
        Mode name -> set of files and modules used under that mode
    """
    mode_files = seed_deployment_modes(storage)

    for mode, files in mode_files.items():
        visited: set[str] = set()
        to_visit = list(files)

        while to_visit:
            current = to_visit.pop()
            if current in visited:
                continue
            visited.add(current)
            files.add(current)

            for target in storage.successors(current):
                if target not in visited:
                    to_visit.append(target)

        logger.info(f"Deployment mode {mode}: {len(files)} files")

    logger.debug(f"Deployment modes analyzed for {root_dir}")
    return mode_files
