"""
Precedence-climbing (Pratt) parser for the Slope language.

Grammar:
    program     → statement* EOF
    statement   → "let" IDENT "=" expr ";"
                | "fn" IDENT "(" (IDENT ("," IDENT)* ","?)? ")" "=" expr ";"
                | expr ";"
    expr        → prefix (infix expr | "!")*
    prefix      → IDENT | INT | REAL | "true" | "false" | "undefined"
                | ("not" | "-") expr
                | "(" expr ")"
                | "|" expr "|"
                | "{" "}"
                | "{" expr ("," expr)* ","? "}"
                | "{" (expr ("if" expr | "else") ";")+ "}"
    call        → expr "(" (expr ("," expr)* ","?)? ")"

An infix operator is consumed only while its precedence is strictly
greater than the caller's minimum; its right operand is parsed at the
operator's own precedence. Postfix ``!`` is always applied. Parsing of an
expression stops at a terminator (``; ) , if else } |``) or end of input
and leaves the terminator for the enclosing rule.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from slope.core.errors import ParseError
from slope.core.expression_lang.tokenizer import Lexer, Token, TokenKind
from slope.core.ir import (
    AbsoluteValue,
    Assignment,
    BooleanLiteral,
    Call,
    Combination,
    Expr,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    IntegerLiteral,
    Operator,
    PiecewiseBlock,
    Precedence,
    RealLiteral,
    SetLiteral,
    Statement,
    Symbol,
    UndefinedLiteral,
    infix,
    postfix,
    prefix,
)

logger = logging.getLogger(__name__)

_TERMINATORS = frozenset(
    {
        TokenKind.SEMICOLON,
        TokenKind.RPAREN,
        TokenKind.COMMA,
        TokenKind.IF,
        TokenKind.ELSE,
        TokenKind.RBRACE,
        TokenKind.BAR,
    }
)

_INFIX_SYMBOLS: dict[TokenKind, Symbol] = {
    TokenKind.PLUS: Symbol.ADD,
    TokenKind.MINUS: Symbol.SUB,
    TokenKind.STAR: Symbol.MUL,
    TokenKind.SLASH: Symbol.DIV,
    TokenKind.PERCENT: Symbol.MOD,
    TokenKind.CARET: Symbol.POW,
    TokenKind.PLUS_MINUS: Symbol.PLUS_MINUS,
    TokenKind.MINUS_PLUS: Symbol.MINUS_PLUS,
    TokenKind.EQ: Symbol.EQ,
    TokenKind.NE: Symbol.NE,
    TokenKind.LT: Symbol.LT,
    TokenKind.LE: Symbol.LE,
    TokenKind.GT: Symbol.GT,
    TokenKind.GE: Symbol.GE,
    TokenKind.AND: Symbol.AND,
    TokenKind.OR: Symbol.OR,
    TokenKind.XOR: Symbol.XOR,
    # Not a legal infix operator; resolving its precedence reports that
    TokenKind.NOT: Symbol.NOT,
    TokenKind.QUESTION: Symbol.COALESCE,
    TokenKind.IN: Symbol.IN,
    TokenKind.AS: Symbol.AS,
    TokenKind.LPAREN: Symbol.CALL,
    TokenKind.UNION: Symbol.UNION,
    TokenKind.INTERSECTION: Symbol.INTERSECTION,
    TokenKind.DIFFERENCE: Symbol.DIFFERENCE,
    TokenKind.SYMMETRIC_DIFFERENCE: Symbol.SYMMETRIC_DIFFERENCE,
}

_PREFIX_SYMBOLS: dict[TokenKind, Symbol] = {
    TokenKind.NOT: Symbol.NOT,
    TokenKind.MINUS: Symbol.SUB,
}


def _describe(tok: Token) -> str:
    if tok.kind == TokenKind.EOF:
        return "end of input"
    if tok.kind == TokenKind.ILLEGAL:
        return f"illegal token `{tok.value}`"
    return f"`{tok.value}`"


class _Parser:
    """Pratt parser over a lazily consumed token stream."""

    def __init__(self, tokens: Iterator[Token]) -> None:
        self.tokens = tokens
        self.current = next(tokens, Token(TokenKind.EOF))

    def advance(self) -> Token:
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = next(self.tokens, Token(TokenKind.EOF, "", tok.pos))
        return tok

    def expect(self, kind: TokenKind, message: str) -> Token:
        tok = self.current
        if tok.kind != kind:
            raise ParseError(f"{message}, got {_describe(tok)}.", tok.pos)
        return self.advance()

    def match(self, *kinds: TokenKind) -> Token | None:
        if self.current.kind in kinds:
            return self.advance()
        return None

    # -- Statements --

    def parse_program(self) -> list[Statement]:
        statements: list[Statement] = []
        while self.current.kind != TokenKind.EOF:
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> Statement:
        if self.current.kind == TokenKind.LET:
            return self.parse_assignment()
        if self.current.kind == TokenKind.FN:
            return self.parse_function_declaration()
        expression = self.parse_expression()
        self.expect(TokenKind.SEMICOLON, "Expected `;` after expression")
        return ExpressionStatement(expression=expression)

    def parse_assignment(self) -> Assignment:
        """'let' IDENT '=' expr ';'"""
        self.expect(TokenKind.LET, "Expected `let`")
        name = self.expect(TokenKind.IDENT, "Expected a name after `let`").value
        self.expect(TokenKind.ASSIGN, f"Expected `=` after `let {name}`")
        expression = self.parse_expression()
        self.expect(TokenKind.SEMICOLON, f"Expected `;` to end the assignment to `{name}`")
        return Assignment(name=name, expression=expression)

    def parse_function_declaration(self) -> FunctionDeclaration:
        """'fn' IDENT '(' params ')' '=' expr ';'"""
        self.expect(TokenKind.FN, "Expected `fn`")
        name = self.expect(TokenKind.IDENT, "Expected a function name after `fn`").value
        self.expect(TokenKind.LPAREN, f"Expected `(` after `fn {name}`")
        parameters = self.parse_parameters(name)
        self.expect(TokenKind.ASSIGN, f"Expected `=` after the parameters of `{name}`")
        body = self.parse_expression()
        self.expect(TokenKind.SEMICOLON, f"Expected `;` to end the declaration of `{name}`")
        return FunctionDeclaration(name=name, parameters=parameters, body=body)

    def parse_parameters(self, function: str) -> list[str]:
        """Parameter names up to and including the closing ')'."""
        parameters: list[str] = []
        while not self.match(TokenKind.RPAREN):
            tok = self.expect(TokenKind.IDENT, f"Expected a parameter name in `{function}`")
            if tok.value in parameters:
                raise ParseError(
                    f"Duplicate parameter `{tok.value}` in `{function}`.", tok.pos
                )
            parameters.append(tok.value)
            if not self.match(TokenKind.COMMA) and self.current.kind != TokenKind.RPAREN:
                raise ParseError(
                    f"Expected `,` or `)` in the parameters of `{function}`, "
                    f"got {_describe(self.current)}.",
                    self.current.pos,
                )
        return parameters

    # -- Expressions --

    def parse_expression(self, precedence: Precedence = Precedence.LOWEST) -> Expr:
        left = self.parse_prefix()

        while True:
            tok = self.current
            if tok.kind in _TERMINATORS or tok.kind == TokenKind.EOF:
                break

            if tok.kind == TokenKind.BANG:
                self.advance()
                left = Combination(operator=postfix(Symbol.FACTORIAL), left=left)
                continue

            symbol = _INFIX_SYMBOLS.get(tok.kind)
            if symbol is None:
                raise ParseError(f"Unexpected {_describe(tok)} after an expression.", tok.pos)
            operator = infix(symbol)
            try:
                binding = operator.precedence
            except ParseError as e:
                raise ParseError(e.message, tok.pos) from e
            if binding <= precedence:
                break
            left = self.parse_infix(left, operator)

        return left

    def parse_prefix(self) -> Expr:
        tok = self.current

        if tok.kind == TokenKind.IDENT:
            self.advance()
            return Identifier(name=tok.value)
        if tok.kind == TokenKind.INT:
            self.advance()
            return IntegerLiteral(value=int(tok.value))
        if tok.kind == TokenKind.REAL:
            self.advance()
            return RealLiteral(value=float(tok.value))
        if tok.kind in (TokenKind.TRUE, TokenKind.FALSE):
            self.advance()
            return BooleanLiteral(value=tok.kind == TokenKind.TRUE)
        if tok.kind == TokenKind.UNDEFINED:
            self.advance()
            return UndefinedLiteral()

        if tok.kind in _PREFIX_SYMBOLS:
            self.advance()
            operator = prefix(_PREFIX_SYMBOLS[tok.kind])
            operand = self.parse_expression(operator.precedence)
            return Combination(operator=operator, right=operand)

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            expression = self.parse_expression()
            self.expect(TokenKind.RPAREN, "Expected `)` to close `(`")
            return expression

        if tok.kind == TokenKind.BAR:
            self.advance()
            operand = self.parse_expression()
            self.expect(TokenKind.BAR, "Expected `|` to close the absolute value")
            return AbsoluteValue(operand=operand)

        if tok.kind == TokenKind.LBRACE:
            return self.parse_brace()

        if tok.kind == TokenKind.EOF:
            raise ParseError("Unexpected end of input, expected an expression.", tok.pos)
        raise ParseError(f"Unexpected {_describe(tok)}, expected an expression.", tok.pos)

    def parse_infix(self, left: Expr, operator: Operator) -> Expr:
        self.advance()
        if operator.symbol == Symbol.CALL:
            return Call(function=left, arguments=self.parse_arguments())
        right = self.parse_expression(operator.precedence)
        return Combination(operator=operator, left=left, right=right)

    def parse_arguments(self) -> list[Expr]:
        """Call arguments after '(' up to and including ')'."""
        arguments: list[Expr] = []
        while not self.match(TokenKind.RPAREN):
            arguments.append(self.parse_expression())
            if not self.match(TokenKind.COMMA) and self.current.kind != TokenKind.RPAREN:
                raise ParseError(
                    f"Expected `,` or `)` in call arguments, got {_describe(self.current)}.",
                    self.current.pos,
                )
        return arguments

    def parse_brace(self) -> Expr:
        """Set literal or piecewise block, decided after the first expression."""
        opening = self.expect(TokenKind.LBRACE, "Expected `{`")
        if self.match(TokenKind.RBRACE):
            return SetLiteral(members=[])

        first = self.parse_expression()
        if self.current.kind in (TokenKind.IF, TokenKind.ELSE):
            return self.parse_piecewise(first)
        if self.current.kind in (TokenKind.COMMA, TokenKind.RBRACE):
            return self.parse_set(first)
        raise ParseError(
            f"Expected `if`, `else`, `,` or `}}` in the block opened at {opening.pos}, "
            f"got {_describe(self.current)}.",
            self.current.pos,
        )

    def parse_set(self, first: Expr) -> SetLiteral:
        members = [first]
        while not self.match(TokenKind.RBRACE):
            self.expect(TokenKind.COMMA, "Expected `,` or `}` in set literal")
            if self.match(TokenKind.RBRACE):
                break
            members.append(self.parse_expression())
        return SetLiteral(members=members)

    def parse_piecewise(self, first: Expr) -> PiecewiseBlock:
        arms: list[tuple[Expr, Expr]] = []
        seen_else = False
        value = first
        while True:
            tok = self.current
            if self.match(TokenKind.IF):
                guard = self.parse_expression()
            elif self.match(TokenKind.ELSE):
                if seen_else:
                    raise ParseError("A piecewise block can only have one `else` arm.", tok.pos)
                seen_else = True
                guard = BooleanLiteral(value=True)
            else:
                raise ParseError(
                    f"Expected `if` or `else` after a piecewise value, got {_describe(tok)}.",
                    tok.pos,
                )
            self.expect(TokenKind.SEMICOLON, "Expected `;` after a piecewise arm")
            arms.append((value, guard))

            if self.match(TokenKind.RBRACE):
                break
            value = self.parse_expression()
        return PiecewiseBlock(arms=arms)


def parse_program(source: str | Iterable[Token]) -> list[Statement]:
    """Parse source text (or an existing token stream) into statements.

    Raises:
        ParseError: On the first structural error; no partial result.
    """
    tokens = Lexer(source) if isinstance(source, str) else iter(source)
    parser = _Parser(tokens)
    try:
        statements = parser.parse_program()
    except RecursionError as e:
        raise ParseError("Expression is nested too deeply.", parser.current.pos) from e
    logger.debug("Parsed %d statement(s)", len(statements))
    return statements


def parse_expr(source: str) -> Expr:
    """Parse a single bare expression with no trailing ``;``.

    Args:
        source: Expression string (e.g., "{1, 2} \\/ {3}")

    Returns:
        Parsed expression AST.

    Raises:
        ParseError: If the text is not exactly one expression.
    """
    parser = _Parser(Lexer(source))
    try:
        expression = parser.parse_expression()
    except RecursionError as e:
        raise ParseError("Expression is nested too deeply.", parser.current.pos) from e

    if parser.current.kind != TokenKind.EOF:
        raise ParseError(
            f"Unexpected {_describe(parser.current)} after expression.",
            parser.current.pos,
        )
    return expression
