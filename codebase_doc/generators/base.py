"""Generator contract."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from ..parsers.base import TopLevel

if TYPE_CHECKING:
    from ..config import DocOptions


class Generator:
    """Renders parse artifacts into files in the current working directory."""

    name = "base"
    description = ""

    def __init__(self, options: "DocOptions"):
        self.options = options

    @classmethod
    def for_config(cls, options: "DocOptions") -> "Generator":
        return cls(options)

    def generate(self, artifacts: Sequence[TopLevel]) -> None:
        raise NotImplementedError
