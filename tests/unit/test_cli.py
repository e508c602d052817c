"""
Unit tests for the CLI module.

Structure tests read the source files directly; the remaining tests invoke
the Typer app in-process.
"""

import pytest
from pathlib import Path

from typer.testing import CliRunner

from parse_guard.cli import app
from parse_guard.cli.commands import (
    GrammarOptions,
    benchmark_command,
    build_integer_list_parser,
    make_benchmark_input,
)

CLI_DIR = Path(__file__).parent.parent.parent / "parse_guard" / "cli"

runner = CliRunner()


def test_cli_files_exist():
    """Test that all CLI files exist."""
    expected_files = [
        "__init__.py",
        "main.py",
        "commands.py",
        "display.py"
    ]

    for filename in expected_files:
        filepath = CLI_DIR / filename
        assert filepath.exists(), f"Missing CLI file: {filename}"


def test_cli_main_structure():
    """Test that main.py has expected structure."""
    content = (CLI_DIR / "main.py").read_text()

    assert "import typer" in content
    assert "def trace(" in content
    assert "def check(" in content
    assert "def benchmark(" in content
    assert "def cli()" in content
    assert "app = typer.Typer(" in content


def test_cli_display_structure():
    """Test that display.py uses Rich."""
    content = (CLI_DIR / "display.py").read_text()

    assert "from rich.console import Console" in content
    assert "def print_trace(" in content
    assert "def print_outcome(" in content
    assert "def print_benchmark_results(" in content


def test_pyproject_has_cli_script():
    """Test that pyproject.toml defines CLI script."""
    pyproject = Path(__file__).parent.parent.parent / "pyproject.toml"
    content = pyproject.read_text()

    assert "[tool.poetry.scripts]" in content
    assert "parse-guard = " in content
    assert "parse_guard.cli.main:cli" in content


class TestCommands:
    """Test command helpers without the CLI layer."""

    def test_build_parser(self):
        parser = build_integer_list_parser(GrammarOptions(min_count=1, max_count=2))
        result = parser.advance(parser.create_initial_checkpoint(), b"  4  5")

        assert result.output == [4, 5]

    def test_empty_value_range_rejected(self):
        with pytest.raises(ValueError):
            build_integer_list_parser(GrammarOptions(min_value=5, max_value=1))

    def test_benchmark_input_is_valid(self):
        options = GrammarOptions(separator=", ", min_value=10, max_value=12)
        data = make_benchmark_input(options, 4)

        assert data == b", 10, 11, 12, 10"

    def test_benchmark_stats(self):
        stats = benchmark_command(GrammarOptions(), items=20, chunk_size=3, iterations=2)

        assert stats["iterations"] == 2
        assert stats["bytes"] == 2 * 60
        assert stats["steps"] == 2 * 20

    def test_benchmark_rejects_bad_chunk_size(self):
        with pytest.raises(ValueError):
            benchmark_command(GrammarOptions(), items=5, chunk_size=0, iterations=1)


class TestCliApp:
    """Test invoking the Typer app."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "ParseGuard version" in result.output

    def test_trace_incomplete(self):
        """Test a trace that still needs a third item."""
        result = runner.invoke(
            app,
            ["trace", "  1", "  2", "--min-count", "3", "--max-count", "5"]
        )

        assert result.exit_code == 0
        assert "Parse Trace" in result.output
        assert "Must continue with" in result.output

    def test_trace_rejected_chunk(self):
        result = runner.invoke(app, ["trace", "  1", "x", "--min-count", "3"])

        assert result.exit_code == 1

    def test_check_can_stop(self):
        result = runner.invoke(app, ["check", "  1  2  3", "--min-count", "3"])

        assert result.exit_code == 0
        assert "Incomplete" in result.output
        assert "Stopping here is legal" in result.output

    def test_check_finished(self):
        result = runner.invoke(app, ["check", "  1  2", "--max-count", "2"])

        assert result.exit_code == 0
        assert "Finished" in result.output

    def test_check_warns_about_unconsumed_bytes(self):
        """Test input past the last allowed item is reported."""
        result = runner.invoke(app, ["check", "  1  2  3", "--max-count", "2"])

        assert result.exit_code == 0
        assert "Finished" in result.output
        assert "3 unconsumed byte(s)" in result.output

    def test_check_error(self):
        result = runner.invoke(app, ["check", "  1 x", "--min-count", "3"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_invalid_grammar_options(self):
        result = runner.invoke(app, ["check", "  1", "--min-value", "5", "--max-value", "1"])

        assert result.exit_code == 1

    def test_benchmark(self):
        result = runner.invoke(app, ["benchmark", "--items", "20", "--iterations", "2"])

        assert result.exit_code == 0
        assert "Benchmark Results" in result.output
