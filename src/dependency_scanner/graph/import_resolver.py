"""Import resolver for mapping import references to project files."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ..parser.languages import RESOLVE_EXTENSIONS

logger = logging.getLogger(__name__)


@dataclass
class ResolvedImport:
    """Result of resolving an import reference."""

    original: str  # Reference as written in the source
    resolved_path: str  # Absolute filesystem path, or the reference unchanged
    is_path: bool  # True if resolved_path is a filesystem path
    is_relative: bool  # True if the reference started with "."


def _resolve_relative(importing_file: str, reference: str) -> str:
    """Resolve a "."-prefixed reference against the importing file's directory."""
    importing_dir = os.path.dirname(importing_file)
    resolved = os.path.normpath(os.path.join(importing_dir, reference))

    if os.path.isfile(resolved):
        return resolved

    for ext in RESOLVE_EXTENSIONS:
        candidate = resolved + ext
        if os.path.isfile(candidate):
            return candidate

    for ext in RESOLVE_EXTENSIONS:
        candidate = os.path.join(resolved, "index" + ext)
        if os.path.isfile(candidate):
            return candidate

    # Unresolved: callers see a path that does not exist
    return resolved


def resolve_import_path(base_dir: Path | str, importing_file: Path | str, reference: str) -> str:
    """Resolve an import reference to a filesystem path.

    Handles:
    - Relative imports: ./utils, ../models, ./components (index files)
    - Root-relative bare imports: src/utils/helpers (treated as ./src/...)
    - External modules: react, @scope/pkg, node_modules/x, /abs/path

    Args:
        base_dir: Root directory of the project
        importing_file: Absolute path of the file doing the import
        reference: The imported module reference

    Returns:
        An absolute path (which may not exist) for relative and root-relative
        references, otherwise the reference unchanged
    """
    importing_file = os.fspath(importing_file)

    if reference.startswith("."):
        return _resolve_relative(importing_file, reference)

    if not reference.startswith("@") and "/" in reference and not reference.startswith("/"):
        # Might be a local module without a ./ prefix
        if reference.split("/")[0] != "node_modules":
            return _resolve_relative(importing_file, "./" + reference)

    return reference


class ImportResolver:
    """Resolves import references for files under a project root."""

    def __init__(self, repo_root: Path):
        """Initialize the import resolver.

        Args:
            repo_root: Root directory of the project
        """
        self.repo_root = repo_root

    def resolve(self, reference: str, importing_file: Path | str) -> ResolvedImport:
        """Resolve one import reference.

        Args:
            reference: The import string (e.g. "./utils", "lodash")
            importing_file: Absolute path of the importing file

        Returns:
            ResolvedImport with resolution details
        """
        resolved = resolve_import_path(self.repo_root, importing_file, reference)
        # The resolver hands back the reference itself for external modules
        is_path = resolved != reference or os.path.isabs(resolved)
        return ResolvedImport(
            original=reference,
            resolved_path=resolved,
            is_path=is_path,
            is_relative=reference.startswith("."),
        )
