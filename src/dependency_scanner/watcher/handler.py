"""Debounced source watching: a burst of file changes triggers one rescan."""

import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Callable

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..parser.languages import (
    DEFAULT_EXCLUDED_DIRS,
    DEFAULT_EXTENSIONS,
    is_supported_file,
    should_ignore_path,
)

logger = logging.getLogger(__name__)

# Events that can change a file's imports (opened/closed events cannot)
_CONTENT_EVENTS = frozenset({EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED})


class DebouncedFileHandler(FileSystemEventHandler):
    """Collects changed source files and reports them after a quiet period."""

    def __init__(
        self,
        root_dir: Path,
        on_changes_callback: Callable[[set[str]], None],
        debounce_seconds: float = 2.0,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    ):
        """Initialize the debounced handler.

        Args:
            root_dir: Scan root; changes outside it are ignored
            on_changes_callback: Called with the root-relative paths changed
                                 since the last call
            debounce_seconds: Seconds to wait for quiet period before processing
            extensions: File extensions to monitor
            exclude_dirs: Directory name fragments to ignore
        """
        super().__init__()
        self._root_dir = Path(root_dir)
        self._callback = on_changes_callback
        self._debounce_seconds = debounce_seconds
        self._extensions = tuple(extensions)
        self._exclude_dirs = tuple(exclude_dirs)

        self._pending: set[str] = set()
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def _relative_path(self, path: str | bytes) -> str | None:
        """Return the root-relative path of a watched source file, or None."""
        if isinstance(path, bytes):
            path = path.decode()
        try:
            relative = Path(path).relative_to(self._root_dir).as_posix()
        except ValueError:
            return None

        if should_ignore_path(relative, self._exclude_dirs):
            return None
        if not is_supported_file(relative, self._extensions):
            return None
        return relative

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Queue the source files touched by a create, modify, delete or move."""
        if event.is_directory or event.event_type not in _CONTENT_EVENTS:
            return

        paths = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED:
            paths.append(event.dest_path)

        changed = {rel for rel in map(self._relative_path, paths) if rel is not None}
        if changed:
            self._queue(changed)

    def _queue(self, changed: set[str]) -> None:
        """Add paths to the pending batch and restart the debounce timer."""
        with self._lock:
            self._pending |= changed

            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce_seconds, self.flush)
            self._timer.daemon = True
            self._timer.start()

            logger.debug(f"Queued {', '.join(sorted(changed))}, pending: {len(self._pending)}")

    def flush(self) -> None:
        """Hand the pending batch to the callback."""
        with self._lock:
            if not self._pending:
                return
            changed = self._pending
            self._pending = set()
            self._timer = None

        logger.info(f"Processing {len(changed)} file changes")
        try:
            self._callback(changed)
        except Exception as e:
            logger.error(f"Error processing file changes: {e}")

    def stop(self) -> None:
        """Cancel any pending timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class FileWatcher:
    """Watches a project root with a watchdog observer."""

    def __init__(
        self,
        root_dir: Path,
        on_changes: Callable[[set[str]], None],
        debounce_seconds: float = 2.0,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDED_DIRS,
    ):
        self._root_dir = root_dir
        self._handler = DebouncedFileHandler(root_dir, on_changes, debounce_seconds, extensions, exclude_dirs)
        self._observer = Observer()

    def start(self) -> None:
        """Start watching for file changes."""
        self._observer.schedule(self._handler, str(self._root_dir), recursive=True)
        self._observer.start()
        logger.info(f"FileWatcher started for {self._root_dir}")

    def stop(self) -> None:
        """Stop watching and drop any pending batch."""
        self._handler.stop()
        self._observer.stop()
        self._observer.join(timeout=5.0)
        logger.info("FileWatcher stopped")
