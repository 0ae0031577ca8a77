"""Output directory setup and the run marker file."""

import os
from datetime import datetime
from email.utils import format_datetime, parsedate_to_datetime

from loguru import logger

from .errors import ConflictingDirectoryError, UnrecognizedDirectoryError

MARKER_FILENAME = "created.rid"


class OutputDirectoryManager:
    """Creates the output directory and tracks when it was last written.

    A directory that already exists is only reused when it holds the marker
    file, so an unrelated directory is never overwritten by accident.
    """

    def __init__(self, marker_filename: str = MARKER_FILENAME):
        self.marker_filename = marker_filename

    def marker_path(self, op_dir: str) -> str:
        """Return the path of the marker file in an output directory."""
        return os.path.join(op_dir, self.marker_filename)

    def prepare(self, op_dir: str, force_update: bool) -> datetime | None:
        """Create or validate ``op_dir`` and return the staleness cutoff."""
        if not os.path.exists(op_dir):
            os.makedirs(op_dir, exist_ok=True)
            logger.info(f"Created output directory {op_dir}")
            return None

        if not os.path.isdir(op_dir):
            raise ConflictingDirectoryError(op_dir)

        try:
            with open(self.marker_path(op_dir), encoding="utf-8") as f:
                created = f.read()
        except OSError as e:
            raise UnrecognizedDirectoryError(op_dir) from e

        if force_update:
            logger.debug(f"Forcing full rebuild of {op_dir}")
            return None

        try:
            last = parsedate_to_datetime(created.strip())
        except (TypeError, ValueError):
            logger.warning(
                f"Ignoring unreadable timestamp in {self.marker_path(op_dir)}"
            )
            return None

        if last.tzinfo is None:
            last = last.astimezone()
        logger.debug(f"Last build of {op_dir} started at {last.isoformat()}")
        return last

    def finalize(self, op_dir: str, start_time: datetime) -> None:
        """Record ``start_time`` as the last successful run."""
        if start_time.tzinfo is None:
            start_time = start_time.astimezone()
        with open(self.marker_path(op_dir), "w", encoding="utf-8") as f:
            f.write(format_datetime(start_time) + "\n")
