"""Tests for build options and TOML configuration loading."""

import multiprocessing as mp

import pytest

from codebase_doc.config import DocOptions, default_thread_count, load_options
from codebase_doc.errors import ConfigError


class TestDocOptions:
    def test_defaults(self):
        options = DocOptions()

        assert options.files == []
        assert options.op_dir == "doc"
        assert options.generator == "markdown"
        assert options.verbosity == 1
        assert options.threads == max(1, int(mp.cpu_count() * 0.8))
        assert options.exclude_pattern() is None

    def test_quiet_forces_verbosity(self):
        assert DocOptions(quiet=True, verbosity=2).verbosity == 0

    def test_invalid_thread_count(self):
        with pytest.raises(ConfigError):
            DocOptions(threads=0)

    def test_exclude_pattern(self):
        pattern = DocOptions(exclude=r"tests?/").exclude_pattern()

        assert pattern.search("src/tests/test_a.py")
        assert not pattern.search("src/a.py")

    def test_invalid_exclude_pattern(self):
        with pytest.raises(ConfigError):
            DocOptions(exclude="(unclosed").exclude_pattern()

    def test_merged_ignores_none(self):
        base = DocOptions(op_dir="out", title="Base")

        merged = base.merged(op_dir=None, title="Override", force_update=True)

        assert merged.op_dir == "out"
        assert merged.title == "Override"
        assert merged.force_update
        assert base.title == "Base"

    def test_default_thread_count(self):
        assert default_thread_count() >= 1


class TestLoadOptions:
    def test_top_level_table(self, tmp_path):
        path = tmp_path / "doc.toml"
        path.write_text('op_dir = "site"\nfiles = ["lib"]\nthreads = 3\n')

        options = load_options(path)

        assert options.op_dir == "site"
        assert options.files == ["lib"]
        assert options.threads == 3

    def test_pyproject_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text(
            '[project]\nname = "x"\n\n[tool.codebase_doc]\ngenerator = "json"\n'
        )

        assert load_options(path).generator == "json"

    def test_pyproject_without_table(self, tmp_path):
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.black]\nline-length = 88\n')

        assert load_options(path) == DocOptions()

    def test_named_table(self, tmp_path):
        path = tmp_path / "doc.toml"
        path.write_text('[codebase_doc]\nexclude = "build/"\n')

        assert load_options(path).exclude == "build/"

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "doc.toml"
        path.write_text('colour = "blue"\n')

        with pytest.raises(ConfigError, match="colour"):
            load_options(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_options(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "doc.toml"
        path.write_text("op_dir = \n")

        with pytest.raises(ConfigError):
            load_options(path)
