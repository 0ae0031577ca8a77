"""Parser for plain documentation files (text, markdown, rst)."""

import re

from .base import DocParser, TopLevel

SIMPLE_EXTENSIONS = (".txt", ".md", ".markdown", ".rst", ".rdoc")

# Leading comment marker lines such as "# --" or "#++" are markup directives
# in some formats; strip them from the description.
_DIRECTIVE_LINE = re.compile(r"^#[-+]{2}\s*$", re.MULTILINE)


class SimpleParser(DocParser):
    """Treats the whole file as free-form documentation."""

    name = "simple"

    def scan(self) -> TopLevel:
        text = self.content.text
        text = _DIRECTIVE_LINE.sub("", text).strip()
        self.top_level.description = text or None
        return self.top_level
