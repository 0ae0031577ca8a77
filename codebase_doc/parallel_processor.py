"""Bounded worker pool that scans files in parallel threads."""

import queue
import threading
import time
from typing import TYPE_CHECKING

from loguru import logger

from .errors import ParseFailureError
from .file_reader import read_file_contents
from .parsers.base import ParserRegistry, TopLevel
from .progress_reporter import StatsTracker

if TYPE_CHECKING:
    from .config import DocOptions

QUEUE_SIZE_FACTOR = 3


class DispatchPool:
    """Feeds file names to a fixed set of worker threads and collects artifacts.

    Items travel through one bounded queue, so the producer blocks while all
    workers are busy. Each worker stops on a ``None`` sentinel; exactly one
    sentinel is queued per worker. The first worker error aborts the run:
    remaining items are drained without being scanned and ``run`` raises.
    """

    def __init__(self, parsers: ParserRegistry, options: "DocOptions"):
        self.parsers = parsers
        self.options = options

        self._results: list[TopLevel] = []
        self._results_lock = threading.Lock()
        self._failure: tuple[str, BaseException] | None = None
        self._failed = threading.Event()

    def run(
        self, file_list: list[str], worker_count: int, stats: StatsTracker
    ) -> list[TopLevel]:
        """Scan every file in ``file_list`` and return the collected artifacts."""
        worker_count = max(1, worker_count)
        self._results = []
        self._failure = None
        self._failed.clear()

        start_time = time.time()
        jobs: queue.Queue[str | None] = queue.Queue(
            maxsize=QUEUE_SIZE_FACTOR * worker_count
        )

        stats.begin(len(file_list), worker_count)
        workers = []
        for i in range(worker_count):
            worker = threading.Thread(
                target=self._worker,
                args=(i, jobs, stats),
                name=f"doc-worker-{i}",
                daemon=True,
            )
            worker.start()
            workers.append(worker)

        # Feed file names to the workers...
        for file_name in file_list:
            jobs.put(file_name)
        for _ in workers:
            jobs.put(None)

        # ...and wait until they're done
        for worker in workers:
            worker.join()
        stats.done()

        if self._failure is not None:
            file_name, error = self._failure
            reason = str(error) or type(error).__name__
            raise ParseFailureError(file_name, reason) from error

        elapsed_time = time.time() - start_time
        logger.info(
            f"Scanned {len(self._results)} files in {elapsed_time:.2f}s "
            f"with {worker_count} workers"
        )
        return self._results

    def _worker(
        self, worker_id: int, jobs: "queue.Queue[str | None]", stats: StatsTracker
    ) -> None:
        """Worker thread loop; exits on the sentinel."""
        while True:
            file_name = jobs.get()
            if file_name is None:
                break
            if self._failed.is_set():
                # Keep draining so the producer never blocks on a full queue
                continue

            try:
                result = self.scan_file(file_name, stats)
                with self._results_lock:
                    self._results.append(result)
            except Exception as e:
                logger.error(f"Worker {worker_id} failed on {file_name}: {e}")
                with self._results_lock:
                    if self._failure is None:
                        self._failure = (file_name, e)
                self._failed.set()

    def scan_file(self, file_name: str, stats: StatsTracker) -> TopLevel:
        """Read, parse and scan a single file."""
        stats.add_file(file_name)
        content = read_file_contents(file_name)
        top_level = TopLevel(file_name=file_name)
        parser = self.parsers.for_file(
            top_level, file_name, content, self.options, stats
        )
        return parser.scan()
