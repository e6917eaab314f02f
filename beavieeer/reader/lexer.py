"""
  Beavieeer Lexer

- Streaming, lazy: `next_token()` scans exactly one token per call and keeps
  no token history.
- After the end of input every call returns an EOF token.
- A newline immediately followed by another newline yields a single BLANK
  token; a lone newline is skipped like any other whitespace.
- No escape processing inside strings; an unterminated string runs to the end
  of input.
"""

from __future__ import annotations

from typing import Iterator, Optional

from beavieeer.errors import BeavieeerOverflowError
from beavieeer.reader.token import KEYWORDS, Token, TokenKind

INT64_MAX = 2**63 - 1

WHITESPACE = " \t\r"

ONE_CHAR_TOKENS: dict[str, TokenKind] = {
    "=": TokenKind.ASSIGN,
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "!": TokenKind.BANG,
    "*": TokenKind.ASTERISK,
    "/": TokenKind.SLASH,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
}

# Two-character operators, keyed by their first character.
TWO_CHAR_TOKENS: dict[str, tuple[str, TokenKind]] = {
    "=": ("=", TokenKind.EQ),
    "!": ("=", TokenKind.NOT_EQ),
    "<": ("=", TokenKind.LT_EQ),
    ">": ("=", TokenKind.GT_EQ),
}


def _is_letter(ch: Optional[str]) -> bool:
    return ch is not None and (ch == "_" or (ch.isascii() and ch.isalpha()))


def _is_digit(ch: Optional[str]) -> bool:
    return ch is not None and "0" <= ch <= "9"


class Lexer:
    """Scans source text into Tokens one at a time."""

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line = 1
        self.column = 1

    @property
    def current_char(self) -> Optional[str]:
        if self.position >= len(self.source):
            return None
        return self.source[self.position]

    def peek(self) -> Optional[str]:
        nxt = self.position + 1
        if nxt >= len(self.source):
            return None
        return self.source[nxt]

    def advance(self) -> None:
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1

    def skip_whitespace(self) -> None:
        """Skip spaces, tabs and `//` comments (up to, not including, the newline)."""
        while True:
            ch = self.current_char
            if ch is not None and ch in WHITESPACE:
                self.advance()
            elif ch == "/" and self.peek() == "/":
                while self.current_char is not None and self.current_char != "\n":
                    self.advance()
            else:
                return

    def next_token(self) -> Token:
        while True:
            self.skip_whitespace()
            if self.current_char == "\n" and self.peek() != "\n":
                self.advance()
                continue
            break

        ch = self.current_char
        line, column = self.line, self.column

        if ch is None:
            return Token(TokenKind.EOF, line=line, column=column)

        if ch == "\n":
            # Only the first newline is consumed; a third newline makes another BLANK.
            self.advance()
            return Token(TokenKind.BLANK, line=line, column=column)

        if ch in TWO_CHAR_TOKENS:
            second, kind = TWO_CHAR_TOKENS[ch]
            if self.peek() == second:
                self.advance()
                self.advance()
                return Token(kind, line=line, column=column)

        if ch in ONE_CHAR_TOKENS:
            self.advance()
            return Token(ONE_CHAR_TOKENS[ch], line=line, column=column)

        if _is_letter(ch):
            return self._read_identifier(line, column)
        if _is_digit(ch):
            return self._read_number(line, column)
        if ch == '"':
            return self._read_string(line, column)

        self.advance()
        return Token(TokenKind.ILLEGAL, ch, line=line, column=column)

    def _read_identifier(self, line: int, column: int) -> Token:
        start = self.position
        while _is_letter(self.current_char):
            self.advance()
        literal = self.source[start:self.position]
        if literal in KEYWORDS:
            kind, value = KEYWORDS[literal]
            return Token(kind, value, line=line, column=column)
        return Token(TokenKind.IDENT, literal, line=line, column=column)

    def _read_number(self, line: int, column: int) -> Token:
        start = self.position
        while _is_digit(self.current_char):
            self.advance()
        literal = self.source[start:self.position]
        value = int(literal)
        if value > INT64_MAX:
            raise BeavieeerOverflowError(
                f"integer literal {literal} at {line}:{column} does not fit in 64 bits"
            )
        return Token(TokenKind.INT, value, line=line, column=column)

    def _read_string(self, line: int, column: int) -> Token:
        self.advance()  # opening quote
        start = self.position
        while self.current_char is not None and self.current_char != '"':
            self.advance()
        literal = self.source[start:self.position]
        if self.current_char == '"':
            self.advance()
        return Token(TokenKind.STRING, literal, line=line, column=column)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return


def lex(source: str) -> Iterator[Token]:
    """Token generator: yields Tokens up to and including the first EOF."""
    return iter(Lexer(source))
