"""Tests for source discovery and import extraction."""

import logging

import pytest

from dependency_scanner.parser import (
    extract_imports,
    find_source_files,
    is_supported_file,
    parse_file_imports,
    should_exclude_dir,
    should_ignore_path,
)


class TestExtractImports:
    """Tests for lexical import extraction."""

    def test_es_module_forms(self):
        """Test default, named, namespace and side-effect imports."""
        code = """
import React from 'react';
import { useState, useEffect } from './hooks';
import * as utils from "../utils";
import './styles.css';
"""
        assert extract_imports(code) == ["react", "./hooks", "../utils", "./styles.css"]

    def test_multiline_named_import(self):
        """Test named imports spanning several lines."""
        code = """
import {
  alpha,
  beta,
} from './multi';
"""
        assert extract_imports(code) == ["./multi"]

    def test_require_forms(self):
        """Test assignment, destructured and bare require calls."""
        code = """
const fs = require('fs');
let { join } = require("path");
require('./polyfill');
const a = 1, b = require('./b');
"""
        assert extract_imports(code) == ["fs", "path", "./polyfill", "./b"]

    def test_dynamic_import(self):
        """Test dynamic import() calls."""
        code = "const mod = await import('./lazy');"
        assert extract_imports(code) == ["./lazy"]

    def test_overlapping_patterns_yield_one_reference(self):
        """Test that a require matched by several patterns is reported once."""
        code = "const { x } = require('./x');\nconst y = require('./x');"
        assert extract_imports(code) == ["./x"]

    def test_comments_are_not_skipped(self):
        """Test that imports inside comments are still reported."""
        code = "// import legacy from './legacy';\n/* require('./old') */"
        assert extract_imports(code) == ["./legacy", "./old"]

    def test_no_imports(self):
        """Test text without any import statements."""
        assert extract_imports("export const answer = 42;") == []

    def test_parse_file_imports(self, tmp_path):
        """Test reading imports from a file on disk."""
        path = tmp_path / "app.js"
        path.write_text("import x from './x';\n", encoding="utf-8")
        assert parse_file_imports(path) == ["./x"]

    def test_parse_file_imports_invalid_utf8(self, tmp_path):
        """Test that undecodable files raise for the caller to handle."""
        path = tmp_path / "bad.js"
        path.write_bytes(b"\xff\xfe\xfa import x from './x';")
        with pytest.raises(UnicodeDecodeError):
            parse_file_imports(path)


class TestFindSourceFiles:
    """Tests for source file discovery."""

    def test_discovers_matching_files(self, make_tree):
        """Test extension filtering and substring directory exclusion."""
        root = make_tree({
            "src/app.js": "",
            "src/util.ts": "",
            "src/comp.tsx": "",
            "src/styles.css": "",
            "src/contest/entry.js": "",
            "node_modules/lib/index.js": "",
            "tests/app.test.js": "",
            "testing/helper.js": "",
            "README.md": "",
        })

        assert find_source_files(root) == ["src/app.js", "src/comp.tsx", "src/util.ts"]

    def test_custom_extensions_and_exclusions(self, make_tree):
        """Test non-default extension and exclusion lists."""
        root = make_tree({
            "src/app.js": "",
            "src/util.ts": "",
            "tests/util.test.ts": "",
        })

        files = find_source_files(root, extensions=[".ts"], exclude_dirs=["node_modules"])
        assert files == ["src/util.ts", "tests/util.test.ts"]

    def test_missing_root(self, tmp_path, caplog):
        """Test that a missing root yields an empty result."""
        with caplog.at_level(logging.ERROR):
            assert find_source_files(tmp_path / "missing") == []
        assert "does not exist" in caplog.text

    def test_root_is_a_file(self, tmp_path, caplog):
        """Test that a file root yields an empty result."""
        path = tmp_path / "app.js"
        path.write_text("", encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            assert find_source_files(path) == []
        assert "not a directory" in caplog.text


class TestPathFilters:
    """Tests for extension and directory filters."""

    def test_is_supported_file(self):
        """Test extension matching on the file name."""
        assert is_supported_file("src/app.jsx")
        assert is_supported_file("src/types.d.ts")
        assert not is_supported_file("src/app.css")
        assert is_supported_file("lib/main.mjs", extensions=[".mjs"])

    def test_should_exclude_dir_is_substring_match(self):
        """Test that exclusion fragments match anywhere in the path."""
        assert should_exclude_dir("tests")
        assert should_exclude_dir("src/contest")
        assert should_exclude_dir("packages/a/node_modules")
        assert not should_exclude_dir("src/components")

    def test_should_ignore_path(self):
        """Test that only ancestor directories are checked."""
        assert should_ignore_path("src/contest/a.js")
        assert should_ignore_path("node_modules/react/index.js")
        assert not should_ignore_path("src/app.js")
        assert not should_ignore_path("test.js")
