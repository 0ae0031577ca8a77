"""Markdown output: one page per file plus an index, or a single document."""

import os
import re
from collections.abc import Sequence

from loguru import logger

from ..parsers.base import CodeObject, TopLevel
from .base import Generator

INDEX_FILENAME = "index.md"

_UNSAFE_CHARS = re.compile(r"[^\w.-]+")


def page_name(file_name: str) -> str:
    """Flatten a source path into a markdown page file name."""
    return _UNSAFE_CHARS.sub("_", file_name.replace(os.sep, "/")).strip("_") + ".md"


def page_names(file_names: Sequence[str]) -> list[str]:
    """Assign each source path a distinct page name.

    Paths that flatten to the same name, or to the index page, get a numeric
    suffix. Names are compared case-insensitively.
    """
    taken = {INDEX_FILENAME.lower()}
    names = []
    for file_name in file_names:
        name = page_name(file_name)
        stem = name.removesuffix(".md")
        counter = 2
        while name.lower() in taken:
            name = f"{stem}_{counter}.md"
            counter += 1
        taken.add(name.lower())
        names.append(name)
    return names


class MarkdownGenerator(Generator):
    name = "markdown"
    description = "Markdown pages with an index.md table of contents"

    def generate(self, artifacts: Sequence[TopLevel]) -> None:
        if self.options.all_one_file:
            self._write_one_file(artifacts)
            return

        pages = page_names([artifact.file_name for artifact in artifacts])
        for artifact, page in zip(artifacts, pages):
            with open(page, "w", encoding="utf-8") as f:
                f.write(self.render_file(artifact, heading_level=1))

        lines = [f"# {self.options.title}", ""]
        for artifact, page in zip(artifacts, pages):
            lines.append(f"- [{artifact.file_name}]({page})")
        with open(INDEX_FILENAME, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        logger.info(f"Wrote {len(artifacts)} markdown pages and {INDEX_FILENAME}")

    def _write_one_file(self, artifacts: Sequence[TopLevel]) -> None:
        parts = [f"# {self.options.title}\n"]
        parts.extend(self.render_file(artifact, heading_level=2) for artifact in artifacts)
        with open(self.options.one_file_name, "w", encoding="utf-8") as f:
            f.write("\n".join(parts))
        logger.info(f"Wrote {self.options.one_file_name}")

    def render_file(self, artifact: TopLevel, heading_level: int) -> str:
        lines = [f"{'#' * heading_level} {artifact.file_name}", ""]
        if artifact.description:
            lines += [artifact.description, ""]
        for obj in artifact.objects:
            lines += self._render_object(obj, heading_level + 1)
        return "\n".join(lines) + "\n"

    def _render_object(self, obj: CodeObject, level: int) -> list[str]:
        location = f" (line {obj.line})" if obj.line else ""
        lines = [f"{'#' * min(level, 6)} {obj.kind} `{obj.qualified_name}`{location}", ""]
        if obj.docstring:
            lines += [obj.docstring, ""]
        for child in obj.children:
            lines += self._render_object(child, level + 1)
        return lines
