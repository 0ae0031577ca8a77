"""Parser contract, parse artifacts and the ordered parser registry."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from ..config import DocOptions
    from ..file_reader import SourceContent
    from ..progress_reporter import StatsTracker

BINARY_SNIFF_BYTES = 1024


@dataclass
class CodeObject:
    """A documented element found in a file (module, class, method, function)."""

    kind: str
    name: str
    qualified_name: str
    line: int | None = None
    docstring: str | None = None
    children: list["CodeObject"] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "qualified_name": self.qualified_name,
            "line": self.line,
            "docstring": self.docstring,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class TopLevel:
    """Per-file parse context; becomes the artifact once scanned."""

    file_name: str
    parser_name: str | None = None
    encoding: str | None = None
    description: str | None = None
    objects: list[CodeObject] = field(default_factory=list)

    @property
    def classes(self) -> list[CodeObject]:
        return [obj for obj in self.objects if obj.kind == "class"]

    @property
    def functions(self) -> list[CodeObject]:
        return [obj for obj in self.objects if obj.kind == "function"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "parser": self.parser_name,
            "encoding": self.encoding,
            "description": self.description,
            "objects": [obj.to_dict() for obj in self.objects],
        }


class DocParser:
    """Base class for per-kind parsers. Subclasses implement ``scan``."""

    name = "base"

    def __init__(
        self,
        top_level: TopLevel,
        file_name: str,
        content: "SourceContent",
        options: "DocOptions",
        stats: "StatsTracker",
    ):
        self.top_level = top_level
        self.file_name = file_name
        self.content = content
        self.options = options
        self.stats = stats
        self.top_level.parser_name = self.name
        self.top_level.encoding = content.encoding

    def scan(self) -> TopLevel:
        raise NotImplementedError


ParserPredicate = Callable[[str], bool]
ParserFactory = Callable[..., DocParser]


def is_binary(file_name: str) -> bool:
    """Sniff the head of a file for NUL bytes."""
    try:
        with open(file_name, "rb") as f:
            head = f.read(BINARY_SNIFF_BYTES)
    except OSError:
        return False
    return b"\x00" in head


def extension_predicate(*extensions: str) -> ParserPredicate:
    """Build a predicate matching file names by (case-insensitive) extension."""
    lowered = tuple(ext.lower() for ext in extensions)

    def matches(file_name: str) -> bool:
        return file_name.lower().endswith(lowered)

    return matches


@dataclass
class ParserRegistry:
    """Ordered (predicate, factory) registry; first match wins.

    The fallback factory handles files named explicitly by the user whose
    kind no registered predicate recognizes.
    """

    _entries: list[tuple[str, ParserPredicate, ParserFactory]] = field(
        default_factory=list
    )
    _fallback: ParserFactory | None = None

    def register(
        self,
        name: str,
        predicate: ParserPredicate,
        factory: ParserFactory,
        *,
        fallback: bool = False,
    ) -> None:
        """Register a parser in insertion order."""
        if fallback:
            self._fallback = factory
            return
        self._entries.append((name, predicate, factory))

    def names(self) -> tuple[str, ...]:
        return tuple(name for name, _, _ in self._entries)

    def _match(self, file_name: str) -> ParserFactory | None:
        for _, predicate, factory in self._entries:
            if predicate(file_name):
                return factory
        return None

    def can_parse(self, file_name: str) -> bool:
        """Return True when a registered parser recognizes ``file_name``."""
        return self._match(file_name) is not None and not is_binary(file_name)

    def for_file(
        self,
        top_level: TopLevel,
        file_name: str,
        content: "SourceContent",
        options: "DocOptions",
        stats: "StatsTracker",
    ) -> DocParser:
        """Instantiate the parser responsible for ``file_name``."""
        factory = self._match(file_name) or self._fallback
        if factory is None:
            raise LookupError(f"No parser supports {file_name}")
        logger.debug(f"Selected {getattr(factory, 'name', factory)} for {file_name}")
        return factory(top_level, file_name, content, options, stats)
