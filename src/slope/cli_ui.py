"""
Rich console output for the Slope CLI and REPL.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.tokenizer import Token, TokenKind

console = Console()

# Style definitions
STYLES = {
    "title": Style(color="bright_cyan", bold=True),
    "result": Style(color="white"),
    "error": Style(color="red", bold=True),
    "muted": Style(color="bright_black"),
    "illegal": Style(color="red"),
}


def print_banner(version: str) -> None:
    """Print the REPL greeting."""
    console.print(Text(f"Slope {version}", style=STYLES["title"]))
    console.print(
        Text("End statements with `;`. Type :env for bindings, :quit to exit.", style=STYLES["muted"])
    )


def print_result(output: str) -> None:
    """Print evaluation output, one line per statement."""
    if output:
        console.print(Text(output, style=STYLES["result"]))


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(Text(f"Error: {message}", style=STYLES["error"]))


def print_bindings(env: Environment) -> None:
    """Print every visible binding as a table."""
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Kind", style=STYLES["muted"])
    table.add_column("Value")
    for name, value in sorted(env.items(), key=lambda item: item[0]):
        table.add_row(name, str(value.kind), Text(str(value)))
    console.print(table)


def print_tokens(tokens: list[Token]) -> None:
    """Print a token stream with offsets."""
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Pos", justify="right", style=STYLES["muted"])
    table.add_column("Kind")
    table.add_column("Text")
    for tok in tokens:
        style = STYLES["illegal"] if tok.kind == TokenKind.ILLEGAL else None
        table.add_row(str(tok.pos), Text(tok.kind.name, style=style or ""), Text(tok.value))
    console.print(table)
