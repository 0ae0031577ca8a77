"""Graphviz diagram of files and the classes they define."""

from collections.abc import Sequence

from loguru import logger

from .parsers.base import CodeObject, TopLevel

DIAGRAM_FILENAME = "diagram.dot"


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DiagramRenderer:
    """Writes a DOT graph with one cluster per file and a node per class."""

    def __init__(self, artifacts: Sequence[TopLevel], title: str):
        self.artifacts = artifacts
        self.title = title

    def render(self) -> str:
        lines = [f"digraph {_quote(self.title)} {{", "  node [shape=box];"]
        for index, artifact in enumerate(self.artifacts):
            classes = list(self._walk_classes(artifact.classes))
            if not classes:
                continue
            lines.append(f"  subgraph cluster_{index} {{")
            lines.append(f"    label={_quote(artifact.file_name)};")
            for obj in classes:
                lines.append(f"    {_quote(obj.qualified_name)} [label={_quote(obj.name)}];")
            lines.append("  }")
            for obj in classes:
                for child in obj.children:
                    if child.kind == "class":
                        lines.append(
                            f"  {_quote(obj.qualified_name)} -> {_quote(child.qualified_name)};"
                        )
        lines.append("}")
        return "\n".join(lines) + "\n"

    def draw(self, path: str = DIAGRAM_FILENAME) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.render())
        logger.info(f"Wrote class diagram to {path}")

    def _walk_classes(self, objects: list[CodeObject]):
        for obj in objects:
            yield obj
            yield from self._walk_classes([c for c in obj.children if c.kind == "class"])
