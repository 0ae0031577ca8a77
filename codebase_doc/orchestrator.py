"""Top-level sequencing of a documentation build."""

import contextlib
import os
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from .config import DocOptions
from .diagram import DiagramRenderer
from .errors import DocError, GeneratorFailureError
from .file_resolver import FileSetResolver
from .generators import GeneratorRegistry, default_generator_registry
from .output_dir import OutputDirectoryManager
from .parallel_processor import DispatchPool
from .parsers import ParserRegistry, default_parser_registry
from .parsers.base import TopLevel
from .progress_reporter import StatsTracker


@dataclass
class RunContext:
    """State scoped to a single ``document`` call."""

    options: DocOptions
    stats: StatsTracker
    cutoff: datetime | None = None
    start_time: datetime | None = None
    file_list: list[str] = field(default_factory=list)
    artifacts: list[TopLevel] = field(default_factory=list)


@dataclass
class BuildReport:
    """Outcome of a build."""

    file_list: list[str]
    artifacts: list[TopLevel]
    generated: bool
    cutoff: datetime | None
    start_time: datetime | None
    stats: StatsTracker


class BuildOrchestrator:
    """Prepares the output directory, parses files and runs the generator.

    The orchestrator owns the parser and generator registries; everything
    that belongs to one run lives in a fresh ``RunContext``.
    """

    def __init__(
        self,
        parsers: ParserRegistry | None = None,
        generators: GeneratorRegistry | None = None,
        output_manager: OutputDirectoryManager | None = None,
    ):
        self.parsers = parsers or default_parser_registry()
        self.generators = generators or default_generator_registry()
        self.output_manager = output_manager or OutputDirectoryManager()

    def document(self, options: DocOptions) -> BuildReport:
        """Run a complete build for ``options``."""
        context = RunContext(options=options, stats=StatsTracker(options.verbosity))
        generated = False
        try:
            generated = self._run(context)
        finally:
            if not options.quiet:
                context.stats.print()

        return BuildReport(
            file_list=context.file_list,
            artifacts=context.artifacts,
            generated=generated,
            cutoff=context.cutoff,
            start_time=context.start_time,
            stats=context.stats,
        )

    def _run(self, context: RunContext) -> bool:
        options = context.options
        op_dir = os.path.abspath(options.op_dir)
        # Unknown generator names fail before the output directory is touched
        generator_class = self.generators.get(options.generator)

        if not options.all_one_file:
            context.cutoff = self.output_manager.prepare(op_dir, options.force_update)

        context.start_time = datetime.now().astimezone()

        logger.info("--- Resolving files ---")
        resolver = FileSetResolver(self.parsers)
        context.file_list = resolver.resolve(
            options.files or ["."],
            True,
            options.exclude_pattern(),
            context.cutoff,
        )

        if context.file_list:
            logger.info("--- Parsing files ---")
            pool = DispatchPool(self.parsers, options)
            artifacts = pool.run(context.file_list, options.threads, context.stats)
            # Worker completion order is arbitrary
            context.artifacts = sorted(artifacts, key=lambda a: a.file_name)

        if not context.artifacts:
            logger.info("No newer files.")
            return False

        logger.info(f"--- Generating {generator_class.name} ---")
        generator = generator_class.for_config(options)

        if options.all_one_file:
            workdir = contextlib.nullcontext()
        else:
            workdir = contextlib.chdir(op_dir)
        with workdir:
            try:
                if options.diagram:
                    DiagramRenderer(context.artifacts, options.title).draw()
                generator.generate(context.artifacts)
            except DocError:
                raise
            except Exception as e:
                raise GeneratorFailureError(
                    f"Generator '{options.generator}' failed: {e}"
                ) from e

        if not options.all_one_file:
            self.output_manager.finalize(op_dir, context.start_time)
        return True
