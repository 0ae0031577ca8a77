"""Parsers turning source files into documentation artifacts."""

from .base import (
    CodeObject,
    DocParser,
    ParserRegistry,
    TopLevel,
    extension_predicate,
    is_binary,
)
from .python_parser import PYTHON_EXTENSIONS, PythonParser
from .simple_parser import SIMPLE_EXTENSIONS, SimpleParser


def default_parser_registry() -> ParserRegistry:
    """Registry with the built-in parsers; plain text is the fallback."""
    registry = ParserRegistry()
    registry.register(
        PythonParser.name, extension_predicate(*PYTHON_EXTENSIONS), PythonParser
    )
    registry.register(
        SimpleParser.name, extension_predicate(*SIMPLE_EXTENSIONS), SimpleParser
    )
    registry.register(
        SimpleParser.name, lambda _: True, SimpleParser, fallback=True
    )
    return registry


__all__ = [
    "CodeObject",
    "DocParser",
    "ParserRegistry",
    "PythonParser",
    "SimpleParser",
    "TopLevel",
    "default_parser_registry",
    "extension_predicate",
    "is_binary",
]
