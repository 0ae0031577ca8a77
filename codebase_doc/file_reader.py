"""Reading raw file contents and honoring embedded encoding directives."""

import codecs
import re
from dataclasses import dataclass

DEFAULT_ENCODING = "utf-8"

# Same shape as PEP 263: "# -*- coding: latin-1 -*-", "# vim: set fileencoding=..."
CODING_PATTERN = re.compile(rb"coding[:=]\s*([-\w.]+)")


@dataclass
class SourceContent:
    """Raw bytes of a file plus the encoding declared inside it, if any."""

    raw: bytes
    encoding: str | None = None

    @property
    def text(self) -> str:
        """Decode with the declared encoding, or UTF-8 when none was declared."""
        return self.raw.decode(self.encoding or DEFAULT_ENCODING, errors="replace")


def detect_encoding(raw: bytes) -> str | None:
    """Return the normalized encoding named in the first two lines, if known."""
    head = b"\n".join(raw.split(b"\n", 2)[:2])
    match = CODING_PATTERN.search(head)
    if not match:
        return None
    try:
        return codecs.lookup(match.group(1).decode("ascii")).name
    except (LookupError, UnicodeDecodeError):
        return None


def read_file_contents(file_name: str) -> SourceContent:
    """Read ``file_name`` as bytes and attach its declared encoding."""
    with open(file_name, "rb") as f:
        raw = f.read()
    return SourceContent(raw=raw, encoding=detect_encoding(raw))
