"""Build options and configuration file loading."""

import multiprocessing as mp
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import toml
from loguru import logger

from .errors import ConfigError

CONFIG_TABLE = "codebase_doc"


def default_thread_count() -> int:
    """Use 80% of CPU cores, at least one."""
    return max(1, int(mp.cpu_count() * 0.8))


@dataclass
class DocOptions:
    """Options controlling one documentation build."""

    files: list[str] = field(default_factory=list)
    exclude: str | None = None
    force_update: bool = False
    op_dir: str = "doc"
    all_one_file: bool = False
    quiet: bool = False
    verbosity: int = 1  # 0 quiet, 1 normal, 2 verbose
    generator: str = "markdown"
    diagram: bool = False
    title: str = "Project Documentation"
    threads: int = field(default_factory=default_thread_count)
    one_file_name: str = "documentation.md"

    def __post_init__(self):
        if self.quiet:
            self.verbosity = 0
        if self.threads < 1:
            raise ConfigError(f"threads must be at least 1, got {self.threads}")

    def exclude_pattern(self) -> re.Pattern[str] | None:
        """Compile the exclusion regex, if any."""
        if not self.exclude:
            return None
        try:
            return re.compile(self.exclude)
        except re.error as e:
            raise ConfigError(f"Invalid exclude pattern {self.exclude!r}: {e}") from e

    def merged(self, **overrides: Any) -> "DocOptions":
        """Return a copy with the non-None overrides applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return DocOptions(**values)


def load_options(config_path: Path) -> DocOptions:
    """Load options from a TOML file.

    Settings are read from a ``[tool.codebase_doc]`` table (pyproject style),
    a ``[codebase_doc]`` table, or the top level of the document.
    """
    try:
        data = toml.load(config_path)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except toml.TomlDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    if CONFIG_TABLE in data.get("tool", {}):
        table = data["tool"][CONFIG_TABLE]
    elif CONFIG_TABLE in data:
        table = data[CONFIG_TABLE]
    elif "tool" in data:
        # pyproject.toml without our table
        table = {}
    else:
        table = data

    known = {f.name for f in fields(DocOptions)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ConfigError(
            f"Unknown option(s) in {config_path}: {', '.join(unknown)}"
        )

    logger.debug(f"Loaded {len(table)} option(s) from {config_path}")
    try:
        return DocOptions(**table)
    except TypeError as e:
        raise ConfigError(f"Invalid options in {config_path}: {e}") from e
