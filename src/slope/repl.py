"""
Interactive read-eval-print loop.

Input lines accumulate until the buffer holds complete statements: the
last token is ``;`` and every ``(``, ``{`` and ``|`` is closed. The buffer
then runs against one persistent environment.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from slope.cli_ui import console, print_banner, print_bindings, print_error, print_result
from slope.core.config import InterpreterConfig
from slope.core.errors import EvaluationError, SlopeError
from slope.core.expression_lang.builtins import new_environment
from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.runtime import execute
from slope.core.expression_lang.tokenizer import TokenKind, tokenize

logger = logging.getLogger(__name__)

QUIT_COMMANDS = frozenset({":quit", ":q"})
ENV_COMMAND = ":env"


def is_complete(source: str) -> bool:
    """True when ``source`` ends a statement with all groupings closed."""
    tokens = [t for t in tokenize(source) if t.kind != TokenKind.EOF]
    if not tokens or tokens[-1].kind != TokenKind.SEMICOLON:
        return False

    parens = braces = bars = 0
    for tok in tokens:
        if tok.kind == TokenKind.LPAREN:
            parens += 1
        elif tok.kind == TokenKind.RPAREN:
            parens -= 1
        elif tok.kind == TokenKind.LBRACE:
            braces += 1
        elif tok.kind == TokenKind.RBRACE:
            braces -= 1
        elif tok.kind == TokenKind.BAR:
            bars += 1
    # Unbalanced closers are left for the parser to report
    return parens <= 0 and braces <= 0 and bars % 2 == 0


class Repl:
    """Line-buffered interpreter session."""

    def __init__(
        self,
        env: Environment | None = None,
        config: InterpreterConfig | None = None,
        read_line: Callable[[str], str] | None = None,
    ) -> None:
        self.env = env if env is not None else new_environment()
        self.config = config if config is not None else InterpreterConfig()
        self.read_line = read_line if read_line is not None else console.input
        self.buffer: list[str] = []

    @property
    def prompt(self) -> str:
        return self.config.continuation_prompt if self.buffer else self.config.prompt

    def feed(self, line: str) -> bool:
        """Handle one input line. Returns False when the session should end."""
        stripped = line.strip()
        if not self.buffer:
            if stripped in QUIT_COMMANDS:
                return False
            if stripped == ENV_COMMAND:
                print_bindings(self.env)
                return True
            if not stripped:
                return True

        self.buffer.append(line)
        source = "\n".join(self.buffer)
        if is_complete(source):
            self.buffer.clear()
            self.run_source(source)
        return True

    def run_source(self, source: str) -> None:
        try:
            output = execute(source, self.env, self.config.max_call_depth)
        except SlopeError as e:
            if isinstance(e, EvaluationError):
                print_result("\n".join(e.output))
            logger.debug("REPL input failed: %s", e)
            print_error(str(e))
            return
        print_result(output)

    def loop(self) -> None:
        """Read lines until :quit, end of input or Ctrl-C."""
        while True:
            try:
                line = self.read_line(self.prompt)
            except (EOFError, KeyboardInterrupt):
                console.print()
                return
            if not self.feed(line):
                return


def start_repl(
    env: Environment | None = None,
    config: InterpreterConfig | None = None,
    version: str = "",
) -> None:
    """Run an interactive session on the console."""
    if version:
        print_banner(version)
    Repl(env=env, config=config).loop()
