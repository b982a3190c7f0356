"""Configuration management for Dependency Scanner."""

import logging
from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .parser.languages import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXTENSIONS


def _split_csv(value: str | list[str]) -> list[str]:
    """Split a comma-separated string into a list of non-empty items."""
    if isinstance(value, str):
        if not value.strip():
            return []
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DEPSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scan target
    scan_path: Path = Field(
        default_factory=Path.cwd,
        description="Root directory or entry file of the application",
    )
    extensions: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File extensions to scan (comma-separated)",
    )
    exclude_dirs: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS),
        description="Directory name fragments to exclude (comma-separated)",
    )
    max_depth: int | None = Field(
        default=None,
        ge=0,
        description="Maximum depth of dependency traversal",
    )

    # Analysis options
    analyze_modes: bool = Field(
        default=False,
        description="Also classify files by deployment mode",
    )
    external_edges: Literal["strict", "lenient"] = Field(
        default="strict",
        description="How unresolved non-relative imports are recorded",
    )
    output_file: str = Field(
        default="dependency-graph.json",
        description="Report file path (relative to the scan root)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Watcher settings
    watch: bool = Field(
        default=True,
        description="Rescan when source files change",
    )
    debounce_seconds: float = Field(
        default=2.0,
        description="Debounce delay for file watcher in seconds",
    )

    @field_validator("extensions", "exclude_dirs", mode="before")
    @classmethod
    def parse_csv_list(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated string into list."""
        return _split_csv(v)

    @field_validator("scan_path", mode="before")
    @classmethod
    def validate_scan_path(cls, v: str | Path) -> Path:
        """Convert string to Path and validate it exists."""
        path = Path(v) if isinstance(v, str) else v
        if not path.exists():
            raise ValueError(f"Scan path does not exist: {path}")
        return path.resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v

    @property
    def root_dir(self) -> Path:
        """Directory the scan is rooted at (parent of an entry file)."""
        return self.scan_path.parent if self.scan_path.is_file() else self.scan_path

    @property
    def start_file(self) -> str | None:
        """Entry file relative to the root, if a single file was given."""
        return self.scan_path.name if self.scan_path.is_file() else None

    @property
    def output_path(self) -> Path:
        """Get the report output path."""
        return self.root_dir / self.output_file


def setup_logging(level: str) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
