"""
  Beavieeer Parser

Precedence-climbing (Pratt) parser over the lazy token stream produced by the
Lexer. Every token that can start an expression has a prefix rule; every
operator-like token has an infix rule and an entry in PRECEDENCES.

Parsing never raises for malformed input. A rule that cannot continue raises
ParseError internally; the statement loop records the message, skips ahead to
the next statement boundary and carries on, so all errors of a unit are
reported in one pass.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Optional

from beavieeer.reader.ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Literal,
    MapLiteral,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)
from beavieeer.reader.lexer import Lexer
from beavieeer.reader.token import Token, TokenKind

logger = logging.getLogger(__name__)


class Precedence(enum.IntEnum):
    # fmt: off
    LOWEST      = enum.auto()
    EQUALS      = enum.auto()  # == !=
    LESSGREATER = enum.auto()  # < <= > >=
    SUM         = enum.auto()  # + -
    PRODUCT     = enum.auto()  # * /  (and prefix operands)
    CALL        = enum.auto()  # f(x)
    INDEX       = enum.auto()  # xs[i]
    # fmt: on


PRECEDENCES: dict[TokenKind, Precedence] = {
    # fmt: off
    TokenKind.EQ:       Precedence.EQUALS,
    TokenKind.NOT_EQ:   Precedence.EQUALS,
    TokenKind.LT:       Precedence.LESSGREATER,
    TokenKind.LT_EQ:    Precedence.LESSGREATER,
    TokenKind.GT:       Precedence.LESSGREATER,
    TokenKind.GT_EQ:    Precedence.LESSGREATER,
    TokenKind.PLUS:     Precedence.SUM,
    TokenKind.MINUS:    Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH:    Precedence.PRODUCT,
    TokenKind.LPAREN:   Precedence.CALL,
    TokenKind.LBRACKET: Precedence.INDEX,
    # fmt: on
}

# Tokens after which a failed statement may safely resume.
STATEMENT_BOUNDARIES = frozenset(
    {TokenKind.LET, TokenKind.RETURN, TokenKind.RBRACE, TokenKind.EOF}
)

LITERAL_KEY_KINDS = frozenset({TokenKind.INT, TokenKind.STRING, TokenKind.BOOL})


def precedence_of(kind: TokenKind) -> Precedence:
    return PRECEDENCES.get(kind, Precedence.LOWEST)


class ParseError(Exception):
    def __init__(self, message: str, token: Token):
        super().__init__(message)
        self.message = message
        self.token = token


class Parser:
    ParsePrefix = Callable[["Parser"], Expression]
    ParseInfix = Callable[["Parser", Expression], Expression]

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.errors: list[str] = []
        self.error_locations: list[tuple[int, int]] = []
        self._consumed = 0
        self.current_token: Token = self._next_significant()

        self.prefix_rules: dict[TokenKind, Parser.ParsePrefix] = {
            TokenKind.IDENT: Parser.parse_identifier,
            TokenKind.INT: Parser.parse_integer_literal,
            TokenKind.STRING: Parser.parse_string_literal,
            TokenKind.BOOL: Parser.parse_boolean_literal,
            TokenKind.BANG: Parser.parse_prefix_expression,
            TokenKind.MINUS: Parser.parse_prefix_expression,
            TokenKind.PLUS: Parser.parse_prefix_expression,
            TokenKind.LPAREN: Parser.parse_grouped_expression,
            TokenKind.IF: Parser.parse_if_expression,
            TokenKind.FUNCTION: Parser.parse_function_literal,
            TokenKind.LBRACKET: Parser.parse_array_literal,
            TokenKind.LBRACE: Parser.parse_map_literal,
        }
        self.infix_rules: dict[TokenKind, Parser.ParseInfix] = {
            TokenKind.PLUS: Parser.parse_infix_expression,
            TokenKind.MINUS: Parser.parse_infix_expression,
            TokenKind.ASTERISK: Parser.parse_infix_expression,
            TokenKind.SLASH: Parser.parse_infix_expression,
            TokenKind.EQ: Parser.parse_infix_expression,
            TokenKind.NOT_EQ: Parser.parse_infix_expression,
            TokenKind.LT: Parser.parse_infix_expression,
            TokenKind.LT_EQ: Parser.parse_infix_expression,
            TokenKind.GT: Parser.parse_infix_expression,
            TokenKind.GT_EQ: Parser.parse_infix_expression,
            TokenKind.LPAREN: Parser.parse_call_expression,
            TokenKind.LBRACKET: Parser.parse_index_expression,
        }

    # --- Token stream ---
    def _next_significant(self) -> Token:
        # Blank-line markers only matter to interactive callers.
        token = self.lexer.next_token()
        while token.kind is TokenKind.BLANK:
            token = self.lexer.next_token()
        return token

    def _advance(self) -> Token:
        token = self.current_token
        self.current_token = self._next_significant()
        self._consumed += 1
        return token

    def _check(self, kind: TokenKind) -> bool:
        return self.current_token.kind is kind

    def _expect(self, kind: TokenKind) -> Token:
        if not self._check(kind):
            raise ParseError(
                f"expected {kind.describe()}, got {self.current_token}",
                self.current_token,
            )
        return self._advance()

    def _skip_optional(self, kind: TokenKind) -> None:
        if self._check(kind):
            self._advance()

    def _record(self, error: ParseError) -> None:
        self.errors.append(error.message)
        self.error_locations.append((error.token.line, error.token.column))
        logger.debug("syntax error at %d:%d: %s", error.token.line, error.token.column, error.message)

    def _synchronize(self, consumed_before: int, until: TokenKind) -> None:
        """Abandon the current statement and move to the next statement start.

        Braces opened by skipped tokens are skipped through their matching
        `}`; only a `}` at depth 0 belongs to an enclosing block.
        """
        depth = 0
        if self._consumed == consumed_before and not self._check(TokenKind.EOF):
            if self._advance().kind is TokenKind.LBRACE:
                depth = 1
        while not self._check(TokenKind.EOF):
            if depth == 0 and self.current_token.kind in STATEMENT_BOUNDARIES:
                break
            kind = self._advance().kind
            if kind is TokenKind.LBRACE:
                depth += 1
            elif kind is TokenKind.RBRACE:
                depth -= 1
            elif kind is TokenKind.SEMICOLON and depth == 0:
                return
        # At top level a stray '}' closes nothing; drop it and its ';'.
        if until is TokenKind.EOF and self._check(TokenKind.RBRACE):
            self._advance()
            if self._check(TokenKind.SEMICOLON):
                self._advance()

    # --- Statements ---
    def parse(self) -> Program:
        return Program(tuple(self._parse_statements(until=TokenKind.EOF)))

    def _parse_statements(self, until: TokenKind) -> list[Statement]:
        statements: list[Statement] = []
        while not self._check(until) and not self._check(TokenKind.EOF):
            consumed_before = self._consumed
            try:
                statements.append(self.parse_statement())
            except ParseError as err:
                self._record(err)
                self._synchronize(consumed_before, until)
        return statements

    def parse_statement(self) -> Statement:
        if self._check(TokenKind.LET):
            return self.parse_let_statement()
        if self._check(TokenKind.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> LetStatement:
        self._expect(TokenKind.LET)
        name = Identifier(self._expect(TokenKind.IDENT).value)
        self._expect(TokenKind.ASSIGN)
        value = self.parse_expression()
        self._skip_optional(TokenKind.SEMICOLON)
        return LetStatement(name, value)

    def parse_return_statement(self) -> ReturnStatement:
        self._expect(TokenKind.RETURN)
        value = self.parse_expression()
        self._skip_optional(TokenKind.SEMICOLON)
        return ReturnStatement(value)

    def parse_expression_statement(self) -> ExpressionStatement:
        expression = self.parse_expression()
        self._skip_optional(TokenKind.SEMICOLON)
        return ExpressionStatement(expression)

    def parse_block_statement(self) -> BlockStatement:
        self._expect(TokenKind.LBRACE)
        statements = self._parse_statements(until=TokenKind.RBRACE)
        if not self._check(TokenKind.RBRACE):
            # Unterminated block: report it and keep what was parsed.
            self._record(ParseError(
                f"expected {TokenKind.RBRACE.describe()}, got {self.current_token}",
                self.current_token,
            ))
        else:
            self._advance()
        return BlockStatement(tuple(statements))

    # --- Expressions ---
    def parse_expression(self, precedence: Precedence = Precedence.LOWEST) -> Expression:
        parse_prefix = self.prefix_rules.get(self.current_token.kind)
        if parse_prefix is None:
            raise ParseError(
                f"no prefix parse rule for {self.current_token}", self.current_token
            )
        expression = parse_prefix(self)
        while precedence < precedence_of(self.current_token.kind):
            parse_infix = self.infix_rules.get(self.current_token.kind)
            if parse_infix is None:
                return expression
            expression = parse_infix(self, expression)
        return expression

    def parse_identifier(self) -> Identifier:
        return Identifier(self._expect(TokenKind.IDENT).value)

    def parse_integer_literal(self) -> IntegerLiteral:
        return IntegerLiteral(self._expect(TokenKind.INT).value)

    def parse_string_literal(self) -> StringLiteral:
        return StringLiteral(self._expect(TokenKind.STRING).value)

    def parse_boolean_literal(self) -> BooleanLiteral:
        return BooleanLiteral(self._expect(TokenKind.BOOL).value)

    def parse_prefix_expression(self) -> PrefixExpression:
        operator = self._advance().kind.value
        right = self.parse_expression(Precedence.PRODUCT)
        return PrefixExpression(operator, right)

    def parse_infix_expression(self, left: Expression) -> InfixExpression:
        token = self._advance()
        right = self.parse_expression(precedence_of(token.kind))
        return InfixExpression(left, token.kind.value, right)

    def parse_grouped_expression(self) -> Expression:
        self._expect(TokenKind.LPAREN)
        expression = self.parse_expression()
        self._expect(TokenKind.RPAREN)
        return expression

    def parse_if_expression(self) -> IfExpression:
        self._expect(TokenKind.IF)
        self._expect(TokenKind.LPAREN)
        condition = self.parse_expression()
        self._expect(TokenKind.RPAREN)
        consequence = self.parse_block_statement()
        alternative: Optional[BlockStatement] = None
        if self._check(TokenKind.ELSE):
            self._advance()
            alternative = self.parse_block_statement()
        return IfExpression(condition, consequence, alternative)

    def parse_function_literal(self) -> FunctionLiteral:
        self._expect(TokenKind.FUNCTION)
        self._expect(TokenKind.LPAREN)
        parameters: list[Identifier] = []
        if not self._check(TokenKind.RPAREN):
            parameters.append(self.parse_identifier())
            while self._check(TokenKind.COMMA):
                self._advance()
                parameters.append(self.parse_identifier())
        self._expect(TokenKind.RPAREN)
        body = self.parse_block_statement()
        return FunctionLiteral(tuple(parameters), body)

    def parse_call_expression(self, function: Expression) -> CallExpression:
        self._expect(TokenKind.LPAREN)
        arguments = self._parse_expression_list(TokenKind.RPAREN)
        return CallExpression(function, arguments)

    def parse_index_expression(self, left: Expression) -> IndexExpression:
        self._expect(TokenKind.LBRACKET)
        index = self.parse_expression()
        self._expect(TokenKind.RBRACKET)
        return IndexExpression(left, index)

    def parse_array_literal(self) -> ArrayLiteral:
        self._expect(TokenKind.LBRACKET)
        return ArrayLiteral(self._parse_expression_list(TokenKind.RBRACKET))

    def parse_map_literal(self) -> MapLiteral:
        self._expect(TokenKind.LBRACE)
        pairs: list[tuple[Literal, Expression]] = []
        while not self._check(TokenKind.RBRACE):
            key = self._parse_literal_key()
            self._expect(TokenKind.COLON)
            pairs.append((key, self.parse_expression()))
            if not self._check(TokenKind.RBRACE):
                self._expect(TokenKind.COMMA)
        self._expect(TokenKind.RBRACE)
        return MapLiteral(tuple(pairs))

    def _parse_literal_key(self) -> Literal:
        token = self.current_token
        if token.kind not in LITERAL_KEY_KINDS:
            raise ParseError(f"expected literal map key, got {token}", token)
        self._advance()
        if token.kind is TokenKind.INT:
            return IntegerLiteral(token.value)
        if token.kind is TokenKind.BOOL:
            return BooleanLiteral(token.value)
        return StringLiteral(token.value)

    def _parse_expression_list(self, end: TokenKind) -> tuple[Expression, ...]:
        items: list[Expression] = []
        if self._check(end):
            self._advance()
            return ()
        items.append(self.parse_expression())
        while self._check(TokenKind.COMMA):
            self._advance()
            items.append(self.parse_expression())
        self._expect(end)
        return tuple(items)


def parse(source: str) -> tuple[Program, list[str]]:
    """Parse source text into a Program plus the ordered list of syntax errors."""
    parser = Parser(Lexer(source))
    program = parser.parse()
    return program, parser.errors
