"""Parser module for discovering source files and extracting imports."""

from .imports import IMPORT_PATTERNS, extract_imports, parse_file_imports
from .languages import (
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_EXTENSIONS,
    RESOLVE_EXTENSIONS,
    find_source_files,
    is_supported_file,
    should_exclude_dir,
    should_ignore_path,
)

__all__ = [
    # Discovery
    "DEFAULT_EXCLUDED_DIRS",
    "DEFAULT_EXTENSIONS",
    "RESOLVE_EXTENSIONS",
    "find_source_files",
    "is_supported_file",
    "should_exclude_dir",
    "should_ignore_path",
    # Import extraction
    "IMPORT_PATTERNS",
    "extract_imports",
    "parse_file_imports",
]
