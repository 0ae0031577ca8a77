"""JSON output: the whole artifact set in one index file."""

import json
from collections.abc import Sequence
from datetime import UTC, datetime

from loguru import logger

from ..parsers.base import TopLevel
from .base import Generator

INDEX_FILENAME = "index.json"


class JsonGenerator(Generator):
    name = "json"
    description = "Machine-readable index.json of every documented file"

    def generate(self, artifacts: Sequence[TopLevel]) -> None:
        document = {
            "title": self.options.title,
            "generated_at": datetime.now(UTC).isoformat(),
            "files": [artifact.to_dict() for artifact in artifacts],
        }
        with open(INDEX_FILENAME, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
            f.write("\n")
        logger.info(f"Wrote {INDEX_FILENAME} with {len(artifacts)} files")
