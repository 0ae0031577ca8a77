"""Output generators rendering parse artifacts into documentation."""

from .base import Generator
from .json_generator import JsonGenerator
from .markdown_generator import MarkdownGenerator
from .registry import ENTRY_POINT_GROUP, GeneratorRegistry

BUILTIN_GENERATORS: tuple[type[Generator], ...] = (JsonGenerator, MarkdownGenerator)


def default_generator_registry() -> GeneratorRegistry:
    """Built-in generators plus installed extensions."""
    return GeneratorRegistry.discover(BUILTIN_GENERATORS)


__all__ = [
    "BUILTIN_GENERATORS",
    "ENTRY_POINT_GROUP",
    "Generator",
    "GeneratorRegistry",
    "JsonGenerator",
    "MarkdownGenerator",
    "default_generator_registry",
]
