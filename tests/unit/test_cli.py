"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from slope import __version__
from slope.cli import app
from slope.core.config import LOG_LEVEL_VAR, MAX_CALL_DEPTH_VAR


@pytest.fixture
def cli_runner(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Return a CLI test runner isolated from local configuration."""
    monkeypatch.delenv(MAX_CALL_DEPTH_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()


@pytest.fixture
def program_file(tmp_path: Path) -> Path:
    """Create a small program file."""
    path = tmp_path / "program.slope"
    path.write_text(
        """
# a factorial and its use
fn fact(n) = { 1 if n == 0; n * fact(n - 1) else; };
let five = 5;
fact(five);
"""
    )
    return path


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"Slope {__version__}" in result.output
        assert "Python" in result.output

    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])
        assert "run" in result.output
        assert "eval" in result.output


class TestEval:
    def test_success(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "fn f(x) = { 0 if x < 0; x else; }; f(-2); f(3);"])
        assert result.exit_code == 0
        assert result.output == "0\n3\n"

    def test_no_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "let x = 1;"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_runtime_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1; y;"])
        assert result.exit_code == 1
        assert "1" in result.output
        assert "Error: NameError: `y` is not defined." in result.output

    def test_parse_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1 +"])
        assert result.exit_code == 1
        assert "Error: SyntaxError:" in result.output


class TestRun:
    def test_file(self, cli_runner: CliRunner, program_file: Path) -> None:
        result = cli_runner.invoke(app, ["run", str(program_file)])
        assert result.exit_code == 0
        assert result.output == "120\n"

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["run", str(tmp_path / "nope.slope")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_stdin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["run", "-"], input="1 + 2;\n")
        assert result.exit_code == 0
        assert result.output == "3\n"

    def test_interactive(self, cli_runner: CliRunner, program_file: Path) -> None:
        result = cli_runner.invoke(app, ["run", str(program_file), "-i"], input="five * 2;\n")
        assert result.exit_code == 0
        assert "120" in result.output
        assert "10" in result.output


class TestRepl:
    def test_session(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["repl"], input="let x = 4;\nx ^ 2;\n:quit\n")
        assert result.exit_code == 0
        assert f"Slope {__version__}" in result.output
        assert "16.0" in result.output


class TestTokens:
    def test_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tokens", "let x = 1.5;"])
        assert result.exit_code == 0
        for kind in ("LET", "IDENT", "ASSIGN", "REAL", "SEMICOLON", "EOF"):
            assert kind in result.output

    def test_illegal_characters_are_listed(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["tokens", "1 @ 2"])
        assert result.exit_code == 0
        assert "ILLEGAL" in result.output


class TestAst:
    def test_canonical_form(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["ast", "let y = 1 + 2 * 3; fn f(a) = -a!;"])
        assert result.exit_code == 0
        assert result.output == "let y = (1 + (2 * 3));\nfn f(a) = (-(a!));\n"

    def test_parse_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["ast", "let = 1;"])
        assert result.exit_code == 1
        assert "Error: SyntaxError:" in result.output


class TestConfiguration:
    def test_config_file_limits_depth(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "custom.toml"
        config.write_text("[interpreter]\nmax_call_depth = 3\n")
        source = "fn down(n) = { 0 if n == 0; down(n - 1) else; }; down(5);"
        result = cli_runner.invoke(app, ["--config", str(config), "eval", source])
        assert result.exit_code == 1
        assert "Maximum call depth of 3" in result.output

    def test_invalid_config(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        config = tmp_path / "slope.toml"
        config.write_text("[interpreter]\nmax_call_depth = 0\n")
        result = cli_runner.invoke(app, ["eval", "1;"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_invalid_log_level(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--log-level", "LOUD", "eval", "1;"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_log_level_override(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--log-level", "error", "eval", "1;"])
        assert result.exit_code == 0
        assert result.output == "1\n"
