"""Tests for settings and the shared scan context."""

import threading
import time

import pytest
from pydantic import ValidationError

from dependency_scanner.config import Settings
from dependency_scanner.context import active_overrides, create_context, current_result, run_scan
from dependency_scanner.pipeline import scan_from_settings
from dependency_scanner.server import create_file_change_handler


class TestSettings:
    """Tests for Settings class."""

    def test_defaults(self, tmp_path):
        """Test default scan options."""
        settings = Settings(scan_path=tmp_path)

        assert settings.extensions == [".js", ".jsx", ".ts", ".tsx"]
        assert settings.exclude_dirs == ["node_modules", "tests", "test"]
        assert settings.max_depth is None
        assert settings.analyze_modes is False
        assert settings.external_edges == "strict"
        assert settings.output_path == tmp_path.resolve() / "dependency-graph.json"

    def test_comma_separated_lists(self, tmp_path):
        """Test parsing comma-separated extension and exclusion lists."""
        settings = Settings(scan_path=tmp_path, extensions=".ts, .tsx", exclude_dirs="")

        assert settings.extensions == [".ts", ".tsx"]
        assert settings.exclude_dirs == []

    def test_environment_variables(self, tmp_path, monkeypatch):
        """Test reading prefixed environment variables."""
        monkeypatch.setenv("DEPSCAN_SCAN_PATH", str(tmp_path))
        monkeypatch.setenv("DEPSCAN_EXTENSIONS", ".mjs,.cjs")
        monkeypatch.setenv("DEPSCAN_MAX_DEPTH", "3")
        monkeypatch.setenv("DEPSCAN_EXTERNAL_EDGES", "lenient")

        settings = Settings()

        assert settings.scan_path == tmp_path.resolve()
        assert settings.extensions == [".mjs", ".cjs"]
        assert settings.max_depth == 3
        assert settings.external_edges == "lenient"

    def test_missing_scan_path(self, tmp_path):
        """Test that a nonexistent scan path is rejected."""
        with pytest.raises(ValidationError, match="does not exist"):
            Settings(scan_path=tmp_path / "missing")

    def test_negative_max_depth(self, tmp_path):
        """Test that a negative depth is rejected."""
        with pytest.raises(ValidationError):
            Settings(scan_path=tmp_path, max_depth=-1)

    def test_invalid_external_edges(self, tmp_path):
        """Test that an unknown external edge policy is rejected."""
        with pytest.raises(ValidationError):
            Settings(scan_path=tmp_path, external_edges="everything")

    def test_log_level(self, tmp_path):
        """Test log level normalization and validation."""
        assert Settings(scan_path=tmp_path, log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError, match="Invalid log level"):
            Settings(scan_path=tmp_path, log_level="verbose")

    def test_directory_target(self, tmp_path):
        """Test that a directory is scanned whole."""
        settings = Settings(scan_path=tmp_path)

        assert settings.root_dir == tmp_path.resolve()
        assert settings.start_file is None

    def test_file_target(self, make_tree):
        """Test that a file target scans from that file within its directory."""
        root = make_tree({"src/main.js": ""})
        settings = Settings(scan_path=root / "src" / "main.js")

        assert settings.root_dir == (root / "src").resolve()
        assert settings.start_file == "main.js"


class TestScanFromSettings:
    """Tests for settings-driven scans."""

    def test_file_target_scan(self, make_tree):
        """Test that a file target limits the scan to what it reaches."""
        root = make_tree({
            "src/main.js": "import a from './a';",
            "src/a.js": "",
            "src/other.js": "",
        })
        settings = Settings(scan_path=root / "src" / "main.js")

        result = scan_from_settings(settings)

        assert result.storage.scanned_files == ["main.js", "a.js"]

    def test_overrides(self, make_tree):
        """Test that keyword overrides replace configured values."""
        root = make_tree({"a.js": "import b from './b';", "b.js": "", "prod.js": ""})
        settings = Settings(scan_path=root)

        result = scan_from_settings(settings, start_file="a.js", analyze_modes=True)

        assert result.storage.scanned_files == ["a.js", "b.js"]
        assert result.mode_files is not None


class TestScanContext:
    """Tests for the shared server context."""

    def test_run_scan_publishes_result(self, make_tree):
        """Test that a successful scan is published with its status."""
        root = make_tree({"a.js": "import b from './b';", "b.js": ""})
        context = create_context(Settings(scan_path=root))

        assert current_result(context) is None

        result = run_scan(context)

        assert current_result(context) is result
        assert context["scan_complete"] is True
        assert context["scan_phase"] == "complete"
        assert context["scan_count"] == 1
        assert context["scan_error"] is None

    def test_run_scan_failure(self, tmp_path, monkeypatch):
        """Test that a failed scan records the error and re-raises."""
        context = create_context(Settings(scan_path=tmp_path))

        def failing_scan(settings, **overrides):
            raise RuntimeError("boom")

        monkeypatch.setattr("dependency_scanner.context.scan_from_settings", failing_scan)

        with pytest.raises(RuntimeError):
            run_scan(context)

        assert context["scan_phase"] == "error"
        assert context["scan_error"] == "boom"
        assert context["scan_count"] == 0
        assert current_result(context) is None

    def test_overrides_survive_file_change_rescan(self, make_tree):
        """Test that a rescan triggered by file changes keeps the entry-point scope."""
        root = make_tree({
            "a.js": "import b from './b';",
            "b.js": "",
            "c.js": "import d from './d';",
            "d.js": "",
        })
        context = create_context(Settings(scan_path=root, watch=False))

        run_scan(context, start_file="a.js")
        create_file_change_handler(context)({"b.js"})

        assert context["scan_count"] == 2
        assert current_result(context).storage.scanned_files == ["a.js", "b.js"]
        assert active_overrides(context) == {"start_file": "a.js"}

    def test_overrides_merge_and_reset(self, make_tree):
        """Test that later overrides merge into earlier ones until reset."""
        root = make_tree({"a.js": "import b from './b';", "b.js": "", "c.js": ""})
        context = create_context(Settings(scan_path=root))

        run_scan(context, start_file="a.js")
        run_scan(context, max_depth=0)
        assert active_overrides(context) == {"start_file": "a.js", "max_depth": 0}
        assert current_result(context).storage.scanned_files == ["a.js"]

        run_scan(context, reset=True)
        assert active_overrides(context) == {}
        assert current_result(context).storage.scanned_files == ["a.js", "b.js", "c.js"]

    def test_failed_scan_keeps_previous_overrides(self, make_tree, monkeypatch):
        """Test that options from a failed scan are not kept."""
        root = make_tree({"a.js": ""})
        context = create_context(Settings(scan_path=root))
        run_scan(context, start_file="a.js")

        def failing_scan(settings, **overrides):
            raise RuntimeError("boom")

        monkeypatch.setattr("dependency_scanner.context.scan_from_settings", failing_scan)
        with pytest.raises(RuntimeError):
            run_scan(context, max_depth=1)

        assert active_overrides(context) == {"start_file": "a.js"}

    def test_scans_do_not_overlap(self, make_tree, monkeypatch):
        """Test that concurrent scans run one after the other."""
        root = make_tree({"a.js": ""})
        context = create_context(Settings(scan_path=root))
        running = []
        overlaps = []

        def tracking_scan(settings, **overrides):
            if running:
                overlaps.append(overrides)
            running.append(overrides)
            time.sleep(0.05)
            running.pop()
            return scan_from_settings(settings, **overrides)

        monkeypatch.setattr("dependency_scanner.context.scan_from_settings", tracking_scan)
        threads = [threading.Thread(target=run_scan, args=(context,)) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert overlaps == []
        assert context["scan_count"] == 4
