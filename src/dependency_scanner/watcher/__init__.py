"""File watcher module for rescanning on source changes."""

from .handler import DebouncedFileHandler, FileWatcher

__all__ = [
    "DebouncedFileHandler",
    "FileWatcher",
]
