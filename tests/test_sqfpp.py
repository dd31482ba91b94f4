"""
sqfpp CLI Test Suite
====================

Tests for the sqfpp command-line preprocessor.
"""

import json

import pytest
from click.testing import CliRunner

from sqflint.cli.sqfpp import build_options, main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment options out of CLI tests."""
    monkeypatch.delenv("SQFLINT_INCLUDE_PATHS", raising=False)
    monkeypatch.delenv("SQFLINT_MAX_EXPANSIONS", raising=False)


class TestSqfppCLI:
    """Tests for the sqfpp CLI tool."""

    def test_cli_help(self, runner):
        """Test CLI help output."""
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Preprocess an SQF script" in result.output

    def test_cli_version(self, runner):
        """Test CLI version output."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output

    def test_expand_to_stdout(self, runner, tmp_path):
        """Expanded text should be printed with directives blanked."""
        script = tmp_path / "init.sqf"
        script.write_text("#define FOO bar\nhint FOO;")
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == 0
        assert result.output == "\nhint bar;\n"

    def test_output_file(self, runner, tmp_path):
        """-o should write the expanded text to a file."""
        script = tmp_path / "init.sqf"
        script.write_text("#define FOO bar\nFOO")
        out = tmp_path / "out.sqf"
        result = runner.invoke(main, [str(script), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text() == "\nbar"

    def test_include_path_mapping(self, runner, tmp_path):
        """-I should map a virtual prefix to a real directory."""
        (tmp_path / "a3").mkdir()
        (tmp_path / "a3" / "file.sqf").write_text("#define X 1")
        script = tmp_path / "init.sqf"
        script.write_text('#include "\\A3\\file.sqf"\nX')

        result = runner.invoke(main, [
            str(script),
            "-I", f"\\A3\\={tmp_path / 'a3'}/",
            "--list-includes",
        ])

        assert result.exit_code == 0
        assert "file.sqf" in result.output
        assert "(missing)" not in result.output

    def test_config_file(self, runner, tmp_path):
        """An options file should provide the prefix mapping."""
        (tmp_path / "a3").mkdir()
        (tmp_path / "a3" / "file.sqf").write_text("#define X 1")
        config = tmp_path / "sqflint.json"
        config.write_text(json.dumps({"includePaths": {"\\A3\\": f"{tmp_path / 'a3'}/"}}))
        script = tmp_path / "init.sqf"
        script.write_text('#include "\\A3\\file.sqf"\nX')

        result = runner.invoke(main, [str(script), "-c", str(config)])

        assert result.exit_code == 0
        assert result.output == "\n1\n"

    def test_list_missing_include(self, runner, tmp_path):
        """Missing includes should be listed as missing."""
        script = tmp_path / "init.sqf"
        script.write_text('#include "nope.hpp"')
        result = runner.invoke(main, [str(script), "--list-includes"])
        assert result.exit_code == 0
        assert "nope.hpp" in result.output
        assert "(missing)" in result.output

    def test_list_macros(self, runner, tmp_path):
        """--list-macros should show each macro with its latest value."""
        script = tmp_path / "init.sqf"
        script.write_text("#define FOO x\n#define FOO y\n#define MAX(a,b) a")
        result = runner.invoke(main, [str(script), "--list-macros"])
        assert result.exit_code == 0
        assert "FOO = 'y' [2 definition(s)" in result.output
        assert "MAX(a,b) = 'a'" in result.output

    def test_recursion_is_fatal(self, runner, tmp_path):
        """A recursive macro should exit with a preprocessing error."""
        script = tmp_path / "init.sqf"
        script.write_text("#define FOO FOO\nFOO")
        result = runner.invoke(main, [str(script)])
        assert result.exit_code == 1
        assert "expands recursively" in result.output

    def test_invalid_include_option(self, runner, tmp_path):
        """A -I value without = should be a usage error."""
        script = tmp_path / "init.sqf"
        script.write_text("x")
        result = runner.invoke(main, [str(script), "-I", "bad"])
        assert result.exit_code == 2

    def test_invalid_config_file(self, runner, tmp_path):
        """A malformed options file should exit with invalid-args."""
        script = tmp_path / "init.sqf"
        script.write_text("x")
        config = tmp_path / "sqflint.json"
        config.write_text("{broken")
        result = runner.invoke(main, [str(script), "-c", str(config)])
        assert result.exit_code == 2
        assert "invalid JSON" in result.output

    def test_missing_input(self, runner, tmp_path):
        """A missing input file should be rejected by click."""
        result = runner.invoke(main, [str(tmp_path / "nope.sqf")])
        assert result.exit_code == 2


class TestBuildOptions:
    """Tests for layering environment, file and flag settings."""

    def test_env_limit_survives_file_without_limit(self, monkeypatch, tmp_path):
        """An options file without maxExpansions keeps the environment limit."""
        monkeypatch.setenv("SQFLINT_MAX_EXPANSIONS", "7")
        config = tmp_path / "sqflint.json"
        config.write_text(json.dumps({"includePaths": {"\\A3\\": "/opt/a3/"}}))
        options = build_options(config, {}, None)
        assert options.max_expansions == 7
        assert options.include_paths == {"\\A3\\": "/opt/a3/"}

    def test_layer_priority(self, monkeypatch, tmp_path):
        """Flags win over the file, which wins over the environment."""
        monkeypatch.setenv("SQFLINT_INCLUDE_PATHS", "\\A3\\=/env/;\\x\\=/x/")
        config = tmp_path / "sqflint.json"
        config.write_text(json.dumps({
            "includePaths": {"\\A3\\": "/file/"},
            "maxExpansions": 50,
        }))
        options = build_options(config, {"\\A3\\": "/flag/"}, 3)
        assert list(options.include_paths.items()) == [
            ("\\A3\\", "/flag/"),
            ("\\x\\", "/x/"),
        ]
        assert options.max_expansions == 3

    def test_include_flags_keep_file_limit(self, tmp_path):
        """-I mappings should not reset limits from the options file."""
        config = tmp_path / "sqflint.json"
        config.write_text(json.dumps({"maxExpansions": 50, "encoding": "latin-1"}))
        options = build_options(config, {"\\A3\\": "/opt/a3/"}, None)
        assert options.max_expansions == 50
        assert options.encoding == "latin-1"
