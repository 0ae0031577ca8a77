"""Tree-sitter based parser for Python sources."""

import tree_sitter_python
from loguru import logger
from tree_sitter import Language, Node, Parser

from .base import CodeObject, DocParser, TopLevel

PY_LANGUAGE = Language(tree_sitter_python.language())
PYTHON_EXTENSIONS = (".py", ".pyw")


class PythonParser(DocParser):
    """Extracts module, class, method and function documentation."""

    name = "python"

    def scan(self) -> TopLevel:
        # Parser objects are not shared between worker threads
        parser = Parser(PY_LANGUAGE)
        source = self._source_bytes()
        tree = parser.parse(source)
        root_node = tree.root_node

        module_qn = self._module_name()
        self.top_level.description = self._get_docstring(root_node)
        self.stats.add_module()

        for child in root_node.children:
            definition = self._unwrap(child)
            if definition is None:
                continue
            if definition.type == "class_definition":
                self.top_level.objects.append(
                    self._scan_class(definition, module_qn)
                )
            elif definition.type == "function_definition":
                self.top_level.objects.append(
                    self._scan_function(definition, module_qn, "function")
                )

        if root_node.has_error:
            logger.warning(f"Syntax errors in {self.file_name}, output may be partial")
        return self.top_level

    def _source_bytes(self) -> bytes:
        """Tree-sitter expects UTF-8; re-encode declared legacy encodings."""
        encoding = self.content.encoding
        if encoding is None or encoding == "utf-8":
            return self.content.raw
        return self.content.text.encode("utf-8")

    def _module_name(self) -> str:
        parts = self.file_name.replace("\\", "/").rsplit(".", 1)[0].split("/")
        parts = [part for part in parts if part not in ("", ".", "..")]
        if parts and parts[-1] == "__init__":
            parts.pop()
        return ".".join(parts)

    @staticmethod
    def _unwrap(node: Node) -> Node | None:
        if node.type == "decorated_definition":
            return node.child_by_field_name("definition")
        if node.type in ("class_definition", "function_definition"):
            return node
        return None

    def _scan_class(self, node: Node, parent_qn: str) -> CodeObject:
        name = self._node_name(node)
        class_qn = f"{parent_qn}.{name}" if parent_qn else name
        obj = CodeObject(
            kind="class",
            name=name,
            qualified_name=class_qn,
            line=node.start_point[0] + 1,
            docstring=self._get_docstring(node),
        )
        self.stats.add_class()

        body_node = node.child_by_field_name("body")
        if body_node is not None:
            for child in body_node.children:
                definition = self._unwrap(child)
                if definition is None:
                    continue
                if definition.type == "function_definition":
                    obj.children.append(
                        self._scan_function(definition, class_qn, "method")
                    )
                else:
                    obj.children.append(self._scan_class(definition, class_qn))
        return obj

    def _scan_function(self, node: Node, parent_qn: str, kind: str) -> CodeObject:
        name = self._node_name(node)
        if kind == "method":
            self.stats.add_method()
        return CodeObject(
            kind=kind,
            name=name,
            qualified_name=f"{parent_qn}.{name}" if parent_qn else name,
            line=node.start_point[0] + 1,
            docstring=self._get_docstring(node),
        )

    @staticmethod
    def _node_name(node: Node) -> str:
        name_node = node.child_by_field_name("name")
        if name_node is None or name_node.text is None:
            return "<anonymous>"
        return name_node.text.decode("utf-8")

    @staticmethod
    def _get_docstring(node: Node) -> str | None:
        """Extracts the docstring from a module, function or class node."""
        body_node = node if node.type == "module" else node.child_by_field_name("body")
        if not body_node or not body_node.children:
            return None
        first_statement = body_node.children[0]
        if (
            first_statement.type == "expression_statement"
            and first_statement.children
            and first_statement.children[0].type == "string"
        ):
            text = first_statement.children[0].text
            if text is not None:
                return text.decode("utf-8").lstrip("rRbBuU").strip("'\" \n")
        return None
