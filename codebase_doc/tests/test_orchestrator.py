"""End-to-end tests for the build orchestrator."""

import json
import os
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from codebase_doc.config import DocOptions
from codebase_doc.errors import (
    GeneratorFailureError,
    ParseFailureError,
    UnknownGeneratorError,
    UnrecognizedDirectoryError,
)
from codebase_doc.generators import BUILTIN_GENERATORS, Generator, GeneratorRegistry
from codebase_doc.orchestrator import BuildOrchestrator
from codebase_doc.output_dir import MARKER_FILENAME
from codebase_doc.parsers.base import DocParser, ParserRegistry, extension_predicate


def _age(path: Path, seconds: float) -> None:
    past = time.time() - seconds
    os.utime(path, (past, past))


class FailingGenerator(Generator):
    name = "failing"

    def generate(self, artifacts):
        raise RuntimeError("disk full")


class ExplodingParser(DocParser):
    name = "exploding"

    def scan(self):
        raise RuntimeError("cannot parse")


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A small source tree with files older than any build."""
    monkeypatch.chdir(tmp_path)
    src = tmp_path / "src"
    src.mkdir()
    (src / "module.py").write_text('"""A module."""\n\nclass Thing:\n    pass\n')
    (src / "notes.md").write_text("Some notes.\n")
    (src / "data.dat").write_text("ignored\n")
    for path in src.iterdir():
        _age(path, 3600)
    return tmp_path


@pytest.fixture
def orchestrator():
    generators = GeneratorRegistry(BUILTIN_GENERATORS)
    generators.add(FailingGenerator)
    return BuildOrchestrator(generators=generators)


def _options(**overrides) -> DocOptions:
    values = {"files": ["src"], "generator": "json", "quiet": True, "threads": 2}
    values.update(overrides)
    return DocOptions(**values)


class TestBuildOrchestrator:
    """Test the full prepare/resolve/dispatch/generate/finalize sequence."""

    def test_first_build(self, project, orchestrator):
        report = orchestrator.document(_options())

        assert report.generated
        assert report.cutoff is None
        assert report.file_list == [
            os.path.join("src", "module.py"),
            os.path.join("src", "notes.md"),
        ]
        assert [a.file_name for a in report.artifacts] == sorted(report.file_list)

        index = json.loads((project / "doc" / "index.json").read_text())
        assert len(index["files"]) == 2
        assert (project / "doc" / MARKER_FILENAME).is_file()
        assert Path.cwd() == project

    def test_incremental_build_skips_unchanged(self, project, orchestrator):
        orchestrator.document(_options())
        marker_before = (project / "doc" / MARKER_FILENAME).read_text()

        report = orchestrator.document(_options())

        assert report.cutoff is not None
        assert report.file_list == []
        assert not report.generated
        assert (project / "doc" / MARKER_FILENAME).read_text() == marker_before

    def test_incremental_build_picks_up_new_file(self, project, orchestrator):
        orchestrator.document(_options())
        new_file = project / "src" / "fresh.py"
        new_file.write_text("def fresh():\n    pass\n")
        future = time.time() + 5
        os.utime(new_file, (future, future))

        report = orchestrator.document(_options())

        assert report.file_list == [os.path.join("src", "fresh.py")]
        assert report.generated

    def test_force_update_rebuilds_everything(self, project, orchestrator):
        orchestrator.document(_options())

        report = orchestrator.document(_options(force_update=True))

        assert report.cutoff is None
        assert len(report.file_list) == 2

    def test_top_level_file_bypasses_cutoff(self, project, orchestrator):
        orchestrator.document(_options())

        report = orchestrator.document(_options(files=["src/data.dat"]))

        assert report.file_list == ["src/data.dat"]
        assert report.artifacts[0].parser_name == "simple"

    def test_no_newer_files(self, project, orchestrator):
        empty = project / "empty"
        empty.mkdir()

        report = orchestrator.document(_options(files=["empty"]))

        assert not report.generated
        assert report.artifacts == []
        assert not (project / "doc" / "index.json").exists()

    def test_refuses_unrelated_directory(self, project, orchestrator):
        (project / "doc").mkdir()
        (project / "doc" / "precious.txt").write_text("do not touch")

        with pytest.raises(UnrecognizedDirectoryError):
            orchestrator.document(_options())

        assert (project / "doc" / "precious.txt").read_text() == "do not touch"

    def test_unknown_generator_fails_before_any_work(self, project, orchestrator):
        with patch("codebase_doc.orchestrator.DispatchPool.run") as mock_run:
            with pytest.raises(UnknownGeneratorError):
                orchestrator.document(_options(generator="pdf"))

        mock_run.assert_not_called()
        assert not (project / "doc").exists()

    def test_generator_failure_restores_cwd(self, project, orchestrator):
        with pytest.raises(GeneratorFailureError) as exc_info:
            orchestrator.document(_options(generator="failing"))

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert Path.cwd() == project
        assert not (project / "doc" / MARKER_FILENAME).exists()

    def test_parse_failure_aborts_before_generation(self, project):
        parsers = ParserRegistry()
        parsers.register("exploding", extension_predicate(".py", ".md"), ExplodingParser)
        orchestrator = BuildOrchestrator(
            parsers=parsers, generators=GeneratorRegistry(BUILTIN_GENERATORS)
        )

        with pytest.raises(ParseFailureError):
            orchestrator.document(_options())

        assert not (project / "doc" / "index.json").exists()

    def test_single_file_mode(self, project, orchestrator):
        report = orchestrator.document(
            _options(generator="markdown", all_one_file=True, one_file_name="out.md")
        )

        assert report.generated
        assert not (project / "doc").exists()
        assert "Thing" in (project / "out.md").read_text()

    def test_diagram(self, project, orchestrator):
        orchestrator.document(_options(diagram=True))

        assert "src.module.Thing" in (project / "doc" / "diagram.dot").read_text()

    def test_stats_printed_even_on_failure(self, project, orchestrator):
        with patch("codebase_doc.orchestrator.StatsTracker.print") as mock_print:
            with pytest.raises(GeneratorFailureError):
                orchestrator.document(_options(generator="failing", quiet=False))

        mock_print.assert_called_once()

    def test_quiet_suppresses_stats(self, project, orchestrator):
        with patch("codebase_doc.orchestrator.StatsTracker.print") as mock_print:
            orchestrator.document(_options())

        mock_print.assert_not_called()

    def test_runs_do_not_share_state(self, project, orchestrator):
        first = orchestrator.document(_options())
        second = orchestrator.document(_options(force_update=True))

        assert first.stats is not second.stats
        assert first.stats.processed_files == 2
        assert second.stats.processed_files == 2
