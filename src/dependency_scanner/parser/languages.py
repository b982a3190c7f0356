"""Source file discovery for JavaScript/TypeScript projects."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

# Extensions scanned when none are configured
DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")

# Directory name fragments excluded when none are configured
DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = ("node_modules", "tests", "test")

# Extensions probed, in order, when resolving an extensionless import
RESOLVE_EXTENSIONS: tuple[str, ...] = (".js", ".ts", ".jsx", ".tsx")


def is_supported_file(file_path: Path | str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> bool:
    """Check if a file name ends with one of the scanned extensions.

    Args:
        file_path: Path to the file
        extensions: Extensions to accept

    Returns:
        True if the file should be scanned
    """
    name = Path(file_path).name
    return any(name.endswith(ext) for ext in extensions)


def should_exclude_dir(relative_dir: str, exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS) -> bool:
    """Check if a directory should be skipped.

    Matching is plain substring containment on the root-relative path, so
    "test" also excludes "testing/" and "src/contest/".

    Args:
        relative_dir: Directory path relative to the scan root ("/" separated)
        exclude_dirs: Excluded directory name fragments

    Returns:
        True if the directory should be skipped
    """
    return any(fragment in relative_dir for fragment in exclude_dirs)


def should_ignore_path(relative_path: str, exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS) -> bool:
    """Check if a file lies under any excluded directory.

    Args:
        relative_path: File path relative to the scan root ("/" separated)
        exclude_dirs: Excluded directory name fragments

    Returns:
        True if one of the file's ancestor directories is excluded
    """
    parts = relative_path.split("/")[:-1]
    for i in range(1, len(parts) + 1):
        if should_exclude_dir("/".join(parts[:i]), exclude_dirs):
            return True
    return False


def find_source_files(
    root_dir: Path | str,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
) -> list[str]:
    """Find all source files under a directory.

    Args:
        root_dir: Root directory to scan
        extensions: File extensions to look for
        exclude_dirs: Directory name fragments to skip

    Returns:
        Root-relative file paths ("/" separated) in walk order. Empty if the
        root is missing or not a directory.
    """
    root = Path(root_dir)
    extensions = tuple(extensions)
    exclude_dirs = tuple(exclude_dirs)

    if not root.exists():
        logger.error(f"Path '{root}' does not exist.")
        return []
    if not root.is_dir():
        logger.error(f"'{root}' is not a directory.")
        return []

    def on_walk_error(error: OSError) -> None:
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    files_found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
        current = Path(dirpath)

        # Prune excluded directories in place so os.walk never descends
        kept = []
        for name in sorted(dirnames):
            relative_dir = (current / name).relative_to(root).as_posix()
            if should_exclude_dir(relative_dir, exclude_dirs):
                logger.debug(f"Skipping excluded directory: {relative_dir}")
                continue
            kept.append(name)
        dirnames[:] = kept

        for name in sorted(filenames):
            if is_supported_file(name, extensions):
                files_found.append((current / name).relative_to(root).as_posix())

    logger.info(f"Found {len(files_found)} source files in {root}")
    return files_found
