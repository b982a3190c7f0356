"""Shared fixtures for building throwaway source trees."""

from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Return a function that writes {relative path: content} under tmp_path."""

    def _make_tree(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make_tree
