"""Progress tracking for one documentation build."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import Lock

from loguru import logger
from rich.console import Console
from rich.table import Table
from tqdm import tqdm


@dataclass
class ProgressStats:
    """Snapshot of the counters of a run."""

    total_files: int
    processed_files: int
    num_modules: int
    num_classes: int
    num_methods: int
    concurrency: int
    start_time: datetime | None
    elapsed: timedelta
    files_per_second: float = 0.0


class StatsTracker:
    """Thread-safe progress counters with a begin/add_file/done lifecycle.

    Verbosity 0 is silent, 1 shows a progress bar and 2 logs every file.
    """

    def __init__(self, verbosity: int = 1, console: Console | None = None):
        self.verbosity = verbosity
        self.console = console or Console(stderr=True)

        self.total_files = 0
        self.processed_files = 0
        self.num_modules = 0
        self.num_classes = 0
        self.num_methods = 0
        self.concurrency = 1

        self.start_time: datetime | None = None
        self.end_time: datetime | None = None

        self._lock = Lock()
        self._progress_bar: tqdm | None = None

    def begin(self, total_files: int, concurrency: int) -> None:
        """Start counting for ``total_files`` files handled by ``concurrency`` workers."""
        with self._lock:
            self.total_files = total_files
            self.concurrency = concurrency
            self.start_time = datetime.now()
            self.end_time = None
            if self.verbosity == 1:
                self._progress_bar = tqdm(
                    total=total_files, desc="Parsing files", unit="file", leave=False
                )
        logger.info(f"Parsing {total_files} files with {concurrency} workers")

    def add_file(self, file_name: str) -> None:
        """Count one file as being processed (safe to call from any thread)."""
        with self._lock:
            self.processed_files += 1
            processed = self.processed_files
            if self._progress_bar is not None:
                self._progress_bar.update(1)
        if self.verbosity >= 2:
            logger.info(f"[{processed}/{self.total_files}] {file_name}")

    def add_module(self) -> None:
        with self._lock:
            self.num_modules += 1

    def add_class(self) -> None:
        with self._lock:
            self.num_classes += 1

    def add_method(self) -> None:
        with self._lock:
            self.num_methods += 1

    def done(self) -> None:
        """Mark the end of the parsing phase."""
        with self._lock:
            self.end_time = datetime.now()
            if self._progress_bar is not None:
                self._progress_bar.close()
                self._progress_bar = None
        logger.debug(f"Finished parsing {self.processed_files} files")

    def get_stats(self) -> ProgressStats:
        """Get current progress statistics."""
        with self._lock:
            if self.start_time is None:
                elapsed = timedelta(0)
            else:
                elapsed = (self.end_time or datetime.now()) - self.start_time

            if elapsed.total_seconds() > 0:
                files_per_second = self.processed_files / elapsed.total_seconds()
            else:
                files_per_second = 0.0

            return ProgressStats(
                total_files=self.total_files,
                processed_files=self.processed_files,
                num_modules=self.num_modules,
                num_classes=self.num_classes,
                num_methods=self.num_methods,
                concurrency=self.concurrency,
                start_time=self.start_time,
                elapsed=elapsed,
                files_per_second=files_per_second,
            )

    def print(self) -> None:
        """Print a summary table of the run."""
        stats = self.get_stats()

        table = Table(title="Documentation Statistics")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right", style="green")
        table.add_row("Files", f"{stats.processed_files}/{stats.total_files}")
        table.add_row("Modules", str(stats.num_modules))
        table.add_row("Classes", str(stats.num_classes))
        table.add_row("Methods", str(stats.num_methods))
        table.add_row("Workers", str(stats.concurrency))
        table.add_row("Elapsed", self._format_timedelta(stats.elapsed))
        if stats.files_per_second > 0:
            table.add_row("Rate", f"{stats.files_per_second:.1f} files/s")

        self.console.print(table)

    @staticmethod
    def _format_timedelta(td: timedelta) -> str:
        """Format a timedelta as a human-readable string."""
        total_seconds = td.total_seconds()
        if total_seconds < 60:
            return f"{total_seconds:.2f}s"

        hours, remainder = divmod(int(total_seconds), 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}h {minutes}m {seconds}s"
        return f"{minutes}m {seconds}s"
