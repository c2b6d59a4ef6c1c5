"""
Tokenizer for the Slope language.

Converts source text into a stream of typed tokens. The tokenizer never
fails: anything it cannot recognise becomes an ``ILLEGAL`` token for the
parser to reject, and every stream ends with exactly one ``EOF``.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterator
from enum import StrEnum, auto
from string import ascii_letters, digits

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class TokenKind(StrEnum):
    """Token types for the Slope language."""

    ILLEGAL = auto()
    EOF = auto()

    # Literals and identifiers
    IDENT = auto()
    INT = auto()
    REAL = auto()

    # Keywords
    AND = auto()
    OR = auto()
    XOR = auto()
    NOT = auto()
    TRUE = auto()
    FALSE = auto()
    UNDEFINED = auto()
    IF = auto()
    ELSE = auto()
    LET = auto()
    FN = auto()
    AS = auto()
    IN = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    CARET = auto()
    BANG = auto()
    QUESTION = auto()
    ASSIGN = auto()
    EQ = auto()
    NE = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    PLUS_MINUS = auto()  # +/-
    MINUS_PLUS = auto()  # -/+
    BAR = auto()  # |
    UNION = auto()  # \/
    INTERSECTION = auto()  # /\
    DIFFERENCE = auto()  # \
    SYMMETRIC_DIFFERENCE = auto()  # /_\

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    COMMA = auto()
    SEMICOLON = auto()
    COLON = auto()


class Token:
    """A single token. Equality ignores the source position."""

    __slots__ = ("kind", "value", "pos")

    def __init__(self, kind: TokenKind, value: str = "", pos: int = 0) -> None:
        self.kind = kind
        self.value = value
        self.pos = pos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, pos={self.pos})"


_KEYWORDS: dict[str, TokenKind] = {
    "and": TokenKind.AND,
    "or": TokenKind.OR,
    "xor": TokenKind.XOR,
    "not": TokenKind.NOT,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "undefined": TokenKind.UNDEFINED,
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "let": TokenKind.LET,
    "fn": TokenKind.FN,
    "as": TokenKind.AS,
    "in": TokenKind.IN,
}

_SINGLE: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "^": TokenKind.CARET,
    "!": TokenKind.BANG,
    "?": TokenKind.QUESTION,
    "=": TokenKind.ASSIGN,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "|": TokenKind.BAR,
    "\\": TokenKind.DIFFERENCE,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
}

# Compounds whose first two characters decide the token outright.
_DOUBLE: dict[str, TokenKind] = {
    "==": TokenKind.EQ,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
    "\\/": TokenKind.UNION,
    "/\\": TokenKind.INTERSECTION,
}

# Compounds that commit after two characters and need a specific third.
_TRIPLE: dict[str, tuple[str, TokenKind]] = {
    "=/": ("=", TokenKind.NE),
    "+/": ("-", TokenKind.PLUS_MINUS),
    "-/": ("+", TokenKind.MINUS_PLUS),
    "/_": ("\\", TokenKind.SYMMETRIC_DIFFERENCE),
}

_UNICODE_ALIASES: dict[str, tuple[TokenKind, str]] = {
    "±": (TokenKind.PLUS_MINUS, "+/-"),
    "∓": (TokenKind.MINUS_PLUS, "-/+"),
    "≤": (TokenKind.LE, "<="),
    "≥": (TokenKind.GE, ">="),
    "≠": (TokenKind.NE, "=/="),
    "∪": (TokenKind.UNION, "\\/"),
    "∩": (TokenKind.INTERSECTION, "/\\"),
    "∖": (TokenKind.DIFFERENCE, "\\"),
    "△": (TokenKind.SYMMETRIC_DIFFERENCE, "/_\\"),
    "∈": (TokenKind.IN, "in"),
    "¬": (TokenKind.NOT, "not"),
    "⊂": (TokenKind.LT, "<"),
    "⊆": (TokenKind.LE, "<="),
}

_IDENT_START = frozenset(ascii_letters)
_IDENT_CHARS = frozenset(ascii_letters + digits + "_")

# Digits and at most the decimal points the text happens to contain
_NUMBER_RE = re.compile(r"[0-9.]+")
# A word-like run starting at the current character
_WORD_RE = re.compile(r"[A-Za-z0-9_]+")
_DIGITS_RE = re.compile(r"[0-9]+")


class Lexer:
    """Lazy token iterator over a source string.

    Yields one token per ``next()`` call, ends with exactly one ``EOF``
    and then stops.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.done = False

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        self._skip_trivia()

        if self.pos >= len(self.source):
            if self.done:
                raise StopIteration
            self.done = True
            return Token(TokenKind.EOF, "", self.pos)

        return self._next_token()

    def _skip_trivia(self) -> None:
        """Skip whitespace and ``#`` comments."""
        source = self.source
        n = len(source)
        while self.pos < n:
            c = source[self.pos]
            if c.isspace():
                self.pos += 1
            elif c == "#":
                newline = source.find("\n", self.pos)
                self.pos = n if newline == -1 else newline + 1
            else:
                break

    def _next_token(self) -> Token:
        source = self.source
        start = self.pos
        c = source[start]

        if c in _IDENT_START:
            return self._read_identifier()

        if c == "_":
            # An identifier cannot begin with an underscore: report it and
            # resume on the next character.
            self.pos += 1
            return Token(TokenKind.ILLEGAL, c, start)

        if c in digits:
            # A digit run glued to identifier characters is one illegal token,
            # and lexing resumes at the first non-digit.
            word = _WORD_RE.match(source, start)
            assert word is not None
            prefix = _DIGITS_RE.match(source, start)
            assert prefix is not None
            if word.end() > prefix.end():
                self.pos = prefix.end()
                return Token(TokenKind.ILLEGAL, prefix.group(0), start)

        if c in digits or c == ".":
            return self._read_number()

        if c in _UNICODE_ALIASES:
            kind, text = _UNICODE_ALIASES[c]
            self.pos += 1
            return Token(kind, text, start)

        two = source[start : start + 2]
        if two in _DOUBLE:
            self.pos += 2
            return Token(_DOUBLE[two], two, start)

        if two in _TRIPLE:
            expected, kind = _TRIPLE[two]
            third = source[start + 2 : start + 3]
            self.pos += 3 if third else 2
            if third == expected:
                return Token(kind, two + third, start)
            return Token(TokenKind.ILLEGAL, two + third, start)

        if c in _SINGLE:
            self.pos += 1
            return Token(_SINGLE[c], c, start)

        self.pos += 1
        return Token(TokenKind.ILLEGAL, c, start)

    def _read_identifier(self) -> Token:
        source = self.source
        start = self.pos
        end = start + 1
        while end < len(source) and source[end] in _IDENT_CHARS:
            end += 1
        word = source[start:end]
        self.pos = end
        return Token(_KEYWORDS.get(word, TokenKind.IDENT), word, start)

    def _read_number(self) -> Token:
        start = self.pos
        m = _NUMBER_RE.match(self.source, start)
        assert m is not None
        text = m.group(0)
        self.pos = m.end()

        if "." not in text:
            value = int(text)
            if INT64_MIN <= value <= INT64_MAX:
                return Token(TokenKind.INT, text, start)
        try:
            real = float(text)
        except ValueError:
            return Token(TokenKind.ILLEGAL, text, start)
        if not math.isfinite(real):
            return Token(TokenKind.ILLEGAL, text, start)
        return Token(TokenKind.REAL, text, start)


def tokenize(source: str) -> list[Token]:
    """Tokenize a source string into a list of tokens ending with EOF."""
    return list(Lexer(source))
