"""
Slope expression language.

Tokenizer, parser, value model, evaluator and builtins for Slope
programs.

Usage:
    from slope.core.expression_lang import execute, new_environment

    env = new_environment()
    execute("fn square(x) = x * x; square(4);", env)
    # "16"
"""

from slope.core.expression_lang.builtins import install_builtins, new_environment
from slope.core.expression_lang.environment import Environment
from slope.core.expression_lang.evaluator import Evaluator, evaluate, execute_statement
from slope.core.expression_lang.objects import Object, ObjectKind
from slope.core.expression_lang.parser import parse_expr, parse_program
from slope.core.expression_lang.runtime import execute, run
from slope.core.expression_lang.tokenizer import tokenize

__all__ = [
    "Environment",
    "Evaluator",
    "Object",
    "ObjectKind",
    "evaluate",
    "execute",
    "execute_statement",
    "install_builtins",
    "new_environment",
    "parse_expr",
    "parse_program",
    "run",
    "tokenize",
]
