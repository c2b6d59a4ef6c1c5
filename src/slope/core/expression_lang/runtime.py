"""
Text boundary between Slope source and its callers.

``execute`` parses a whole program and runs it statement by statement,
returning one rendered line per result. ``run`` is the same pipeline for
front ends that want the error as text instead of an exception.
"""

from __future__ import annotations

import logging

from slope.core.errors import EvaluationError, SlopeError
from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.evaluator import DEFAULT_MAX_CALL_DEPTH, Evaluator
from slope.core.expression_lang.parser import parse_program
from slope.core.ir import ExpressionStatement

logger = logging.getLogger(__name__)


def execute(
    source: str,
    env: Environment,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> str:
    """Parse and execute ``source`` against ``env``.

    Expression statements each contribute a line; assignments and function
    declarations contribute nothing. Bindings made before a failure stay
    in ``env``.

    Args:
        source: Program text, one or more ``;``-terminated statements.
        env: Environment to read and bind names in.
        max_call_depth: Maximum nested user function calls.

    Returns:
        The output lines joined by newlines.

    Raises:
        ParseError: If the program is malformed; nothing is executed.
        EvaluationError: On the first failing statement, with the lines
            produced so far in ``error.output``.
    """
    statements = parse_program(source)
    evaluator = Evaluator(max_call_depth=max_call_depth)

    lines: list[str] = []
    for statement in statements:
        try:
            result = evaluator.execute_statement(statement, env)
        except EvaluationError as e:
            logger.debug("Statement `%s` failed: %s", statement, e)
            e.output = lines
            raise
        if isinstance(statement, ExpressionStatement):
            lines.append(str(result))

    logger.debug("Executed %d statement(s)", len(statements))
    return "\n".join(lines)


def run(
    source: str,
    env: Environment,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> str:
    """Like ``execute`` but renders a failure as a trailing ``Error: ...`` line."""
    try:
        return execute(source, env, max_call_depth)
    except SlopeError as e:
        output = e.output if isinstance(e, EvaluationError) else []
        return "\n".join([*output, f"Error: {e}"])
