"""Command line entry point."""

import argparse
import sys
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import DocOptions, load_options
from .errors import DocError
from .generators import default_generator_registry
from .orchestrator import BuildOrchestrator

console = Console(stderr=True)


def setup_logging(options: DocOptions) -> None:
    """Route loguru output to stderr at a level matching the verbosity."""
    if options.verbosity <= 0:
        level = "WARNING"
    elif options.verbosity == 1:
        level = "INFO"
    else:
        level = "DEBUG"
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codebase-doc",
        description="Generate documentation for the files and directories given.",
        epilog="""
Examples:
  # Document the current directory into ./doc
  codebase-doc

  # Rebuild everything under lib/ as JSON
  codebase-doc --force-update --fmt json lib
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("files", nargs="*", help="Files and directories to document")
    parser.add_argument("--op", dest="op_dir", help="Output directory (default: doc)")
    parser.add_argument("--exclude", "-x", help="Regex of paths to leave out")
    parser.add_argument(
        "--force-update",
        "-U",
        action="store_true",
        default=None,
        help="Ignore the last build time and document every file",
    )
    parser.add_argument(
        "--one-file",
        "-1",
        dest="all_one_file",
        action="store_true",
        default=None,
        help="Write a single output file into the current directory",
    )
    parser.add_argument("--fmt", "-f", dest="generator", help="Output generator")
    parser.add_argument(
        "--diagram", "-d", action="store_true", default=None, help="Draw a class diagram"
    )
    parser.add_argument("--title", "-t", help="Documentation title")
    parser.add_argument("--threads", type=int, help="Number of worker threads")
    parser.add_argument("--config", "-c", type=Path, help="TOML configuration file")
    parser.add_argument(
        "--list-generators", action="store_true", help="List generators and exit"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", "-q", action="store_true", default=None)
    verbosity.add_argument("--verbose", "-V", action="store_true")
    return parser


def options_from_args(args: argparse.Namespace) -> DocOptions:
    """Combine the configuration file (if any) with command line flags."""
    base = load_options(args.config) if args.config else DocOptions()
    options = base.merged(
        files=args.files or None,
        op_dir=args.op_dir,
        exclude=args.exclude,
        force_update=args.force_update,
        all_one_file=args.all_one_file,
        generator=args.generator,
        diagram=args.diagram,
        title=args.title,
        threads=args.threads,
        quiet=args.quiet,
    )
    if args.verbose:
        options.verbosity = 2
    return options


def list_generators() -> None:
    registry = default_generator_registry()
    table = Table(title="Available Generators")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for name in registry.names():
        table.add_row(name, registry.get(name).description)
    Console().print(table)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_generators:
        list_generators()
        return 0

    try:
        options = options_from_args(args)
        setup_logging(options)
        BuildOrchestrator().document(options)
    except DocError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
