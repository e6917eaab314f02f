"""Token model for the Beavieeer reader.

A Token is a tagged value: a TokenKind plus an optional payload (identifier
name, integer value, string contents or boolean value). Source positions ride
along for tooling but never take part in equality.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

TokenValue = Union[str, int, bool, None]


class TokenKind(enum.Enum):
    # fmt: off
    ILLEGAL   = "illegal"
    EOF       = "end of input"
    BLANK     = "blank line"

    # Identifiers + literals
    IDENT     = "identifier"
    INT       = "integer"
    STRING    = "string"
    BOOL      = "boolean"

    # Operators
    ASSIGN    = "="
    PLUS      = "+"
    MINUS     = "-"
    BANG      = "!"
    ASTERISK  = "*"
    SLASH     = "/"
    EQ        = "=="
    NOT_EQ    = "!="
    LT        = "<"
    LT_EQ     = "<="
    GT        = ">"
    GT_EQ     = ">="

    # Delimiters
    COMMA     = ","
    COLON     = ":"
    SEMICOLON = ";"
    LPAREN    = "("
    RPAREN    = ")"
    LBRACE    = "{"
    RBRACE    = "}"
    LBRACKET  = "["
    RBRACKET  = "]"

    # Keywords
    FUNCTION  = "fun"
    LET       = "let"
    IF        = "if"
    ELSE      = "else"
    RETURN    = "return"
    # fmt: on

    def describe(self) -> str:
        """Human-readable name used in parser error messages."""
        if self in _CATEGORIES:
            return self.value
        return f"'{self.value}'"


_CATEGORIES = frozenset(
    {
        TokenKind.ILLEGAL,
        TokenKind.EOF,
        TokenKind.BLANK,
        TokenKind.IDENT,
        TokenKind.INT,
        TokenKind.STRING,
        TokenKind.BOOL,
    }
)

KEYWORDS: dict[str, tuple[TokenKind, TokenValue]] = {
    "fun": (TokenKind.FUNCTION, None),
    "let": (TokenKind.LET, None),
    "true": (TokenKind.BOOL, True),
    "false": (TokenKind.BOOL, False),
    "if": (TokenKind.IF, None),
    "else": (TokenKind.ELSE, None),
    "return": (TokenKind.RETURN, None),
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: TokenValue = None
    line: int = field(default=0, compare=False)
    column: int = field(default=0, compare=False)

    def __str__(self) -> str:
        if self.value is None:
            return self.kind.describe()
        if self.kind is TokenKind.BOOL:
            return f"{self.kind.describe()} {str(self.value).lower()}"
        return f"{self.kind.describe()} {self.value!r}"
