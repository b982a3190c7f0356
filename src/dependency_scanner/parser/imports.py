"""Lexical extraction of import/require references from JS/TS source text.

The patterns are applied to raw text, without any awareness of comments,
string contents or template literals. An import mentioned inside a comment
is reported like any other.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

# (pattern, capture group holding the module reference)
IMPORT_PATTERNS: tuple[tuple[re.Pattern[str], int], ...] = (
    # ES module imports: default, named, namespace and side-effect forms
    (re.compile(r"""import\s+(?:(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)\s+from\s+)?['"]([^'"]+)['"]"""), 1),
    # const/let/var x = require('...') and const { a } = require('...')
    (re.compile(r"""(?:const|let|var)\s+(?:\{[^}]*\}|\w+)\s*=\s*require\(['"]([^'"]+)['"]\)"""), 1),
    # require('...') anywhere
    (re.compile(r"""require\(['"]([^'"]+)['"]\)"""), 1),
    # Dynamic import('...')
    (re.compile(r"""import\(['"]([^'"]+)['"]\)"""), 1),
    # Destructured requires
    (re.compile(r"""const\s*\{([^}]+)\}\s*=\s*require\(['"]([^'"]+)['"]\)"""), 2),
    # Requires bound to several variables
    (re.compile(r"""const\s+([^=]+)\s*=\s*require\(['"]([^'"]+)['"]\)"""), 2),
)


def extract_imports(content: str) -> list[str]:
    """Extract the distinct module references found in source text.

    Every pattern runs over the whole text. A reference matched by several
    patterns is reported once, at the position it was first seen (pattern
    order, then text order).

    Args:
        content: Source text of one file

    Returns:
        Raw module reference strings, as written in the source
    """
    imports: dict[str, None] = {}
    for pattern, group in IMPORT_PATTERNS:
        for match in pattern.finditer(content):
            imports.setdefault(match.group(group), None)
    return list(imports)


def parse_file_imports(file_path: Path | str) -> list[str]:
    """Read a file and extract its module references.

    Args:
        file_path: Path to the file to analyze

    Returns:
        Raw module reference strings

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    content = Path(file_path).read_text(encoding="utf-8")
    imports = extract_imports(content)
    logger.debug(f"Found {len(imports)} imports in {file_path}")
    return imports
