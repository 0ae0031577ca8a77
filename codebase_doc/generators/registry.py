"""Name-keyed registry of output generators, extensible via entry points."""

from collections.abc import Iterable
from importlib.metadata import EntryPoint, entry_points

from loguru import logger

from ..errors import UnknownGeneratorError
from .base import Generator

ENTRY_POINT_GROUP = "codebase_doc.generators"

_LOAD_ERRORS = (ImportError, AttributeError, TypeError, ValueError, RuntimeError)


class GeneratorRegistry:
    """Maps generator names to generator classes.

    Built-ins are registered first; extensions discovered afterwards may
    replace a built-in by registering under the same name.
    """

    def __init__(self, generators: Iterable[type[Generator]] = ()):
        self._generators: dict[str, type[Generator]] = {}
        for generator in generators:
            self.add(generator)

    @classmethod
    def discover(
        cls, builtins: Iterable[type[Generator]], group: str = ENTRY_POINT_GROUP
    ) -> "GeneratorRegistry":
        """Registry holding ``builtins`` plus every loadable extension in ``group``."""
        registry = cls(builtins)
        for entry_point in _iter_entry_points(group):
            try:
                generator = entry_point.load()
            except _LOAD_ERRORS as e:
                logger.warning(f"Error loading generator {entry_point.name!r}: {e}")
                continue
            if not (isinstance(generator, type) and issubclass(generator, Generator)):
                logger.warning(
                    f"Entry point {entry_point.name!r} is not a Generator subclass"
                )
                continue
            registry.add(generator, name=entry_point.name)
        return registry

    def add(self, generator: type[Generator], name: str | None = None) -> None:
        """Register ``generator`` under ``name`` (defaults to its ``name``)."""
        key = (name or generator.name).lower()
        if key in self._generators:
            logger.debug(f"Generator {key!r} replaced by {generator.__qualname__}")
        self._generators[key] = generator

    def get(self, name: str) -> type[Generator]:
        try:
            return self._generators[name.lower()]
        except KeyError:
            raise UnknownGeneratorError(name, self.names()) from None

    def names(self) -> list[str]:
        return sorted(self._generators)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._generators


def _iter_entry_points(group: str) -> list[EntryPoint]:
    return list(entry_points(group=group))
