"""
Slope command-line interface.

Commands:
  • run FILE      Execute a program file (`-` reads stdin)
  • eval SOURCE   Execute program text given on the command line
  • repl          Start an interactive session
  • tokens SOURCE Show the token stream
  • ast SOURCE    Show the canonical form of each parsed statement
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

import typer
from pydantic import ValidationError

from slope import __version__
from slope.cli_ui import print_tokens
from slope.core.config import InterpreterConfig, load_config
from slope.core.errors import EvaluationError, ParseError, SlopeError
from slope.core.expression_lang.builtins import new_environment
from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.parser import parse_program
from slope.core.expression_lang.runtime import execute
from slope.core.expression_lang.tokenizer import tokenize
from slope.repl import start_repl

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="""Slope – an expression language for piecewise functions and finite sets

Examples:
  slope eval "fn f(x) = { 0 if x < 0; x else; }; f(-2); f(3);"
  slope run examples/set_operations.slope
  slope repl
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"Slope {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to slope.toml (default: ./slope.toml)",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Slope CLI main callback for global options."""
    try:
        config = load_config(config_path)
        if log_level is not None:
            config = InterpreterConfig(**{**config.model_dump(), "log_level": log_level.upper()})
    except ValidationError as e:
        typer.echo(f"Error: Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=config.log_level.value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.obj = config


def _config(ctx: typer.Context) -> InterpreterConfig:
    config = ctx.obj
    return config if isinstance(config, InterpreterConfig) else InterpreterConfig()


def _execute_or_exit(source: str, env: Environment, config: InterpreterConfig) -> None:
    """Execute source, echoing output; a failure exits with code 1."""
    try:
        output = execute(source, env, config.max_call_depth)
    except SlopeError as e:
        logger.debug("Execution failed: %r", e)
        if isinstance(e, EvaluationError) and e.output:
            typer.echo("\n".join(e.output))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if output:
        typer.echo(output)


@app.command("run")
def run_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Program file, or - to read stdin"),  # noqa: B008
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Start the REPL afterwards with the program's bindings",
    ),
) -> None:
    """Execute a Slope program file."""
    config = _config(ctx)

    if str(file) == "-":
        source = sys.stdin.read()
    elif not file.exists():
        typer.echo(f"Error: File not found: {file}", err=True)
        raise typer.Exit(code=1)
    else:
        source = file.read_text(encoding="utf-8")
        logger.debug("Loaded %d characters from %s", len(source), file)

    env = new_environment()
    _execute_or_exit(source, env, config)

    if interactive:
        start_repl(env=env, config=config, version=__version__)


@app.command("eval")
def eval_command(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Program text, e.g. '1 + 2;'"),
) -> None:
    """Execute program text given on the command line."""
    _execute_or_exit(source, new_environment(), _config(ctx))


@app.command("repl")
def repl_command(ctx: typer.Context) -> None:
    """Start an interactive session."""
    start_repl(config=_config(ctx), version=__version__)


@app.command("tokens")
def tokens_command(
    source: str = typer.Argument(..., help="Source text to tokenize"),
) -> None:
    """Show the token stream for source text."""
    print_tokens(tokenize(source))


@app.command("ast")
def ast_command(
    source: str = typer.Argument(..., help="Program text to parse"),
) -> None:
    """Show the canonical, fully parenthesised form of each statement."""
    try:
        statements = parse_program(source)
    except ParseError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    for statement in statements:
        typer.echo(str(statement))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
