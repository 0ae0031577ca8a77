"""Incremental, parallel documentation builder."""

from .config import DocOptions, load_options
from .errors import (
    ConfigError,
    ConflictingDirectoryError,
    DocError,
    GeneratorFailureError,
    ParseFailureError,
    UnknownGeneratorError,
    UnrecognizedDirectoryError,
    UnsupportedFileTypeError,
)
from .file_resolver import FileSetResolver, parse_manifest
from .orchestrator import BuildOrchestrator, BuildReport
from .output_dir import OutputDirectoryManager
from .parallel_processor import DispatchPool
from .progress_reporter import ProgressStats, StatsTracker

__all__ = [
    "BuildOrchestrator",
    "BuildReport",
    "ConfigError",
    "ConflictingDirectoryError",
    "DispatchPool",
    "DocError",
    "DocOptions",
    "FileSetResolver",
    "GeneratorFailureError",
    "OutputDirectoryManager",
    "ParseFailureError",
    "ProgressStats",
    "StatsTracker",
    "UnknownGeneratorError",
    "UnrecognizedDirectoryError",
    "UnsupportedFileTypeError",
    "load_options",
    "parse_manifest",
]
