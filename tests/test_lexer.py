import string

import pytest
from hypothesis import given, strategies as st

from beavieeer.errors import BeavieeerOverflowError
from beavieeer.reader.lexer import Lexer, lex
from beavieeer.reader.token import Token, TokenKind as K


def kinds(source):
    return [t.kind for t in lex(source)]


def test_let_statement_tokens():
    assert list(lex("let five = 5;")) == [
        Token(K.LET),
        Token(K.IDENT, "five"),
        Token(K.ASSIGN),
        Token(K.INT, 5),
        Token(K.SEMICOLON),
        Token(K.EOF),
    ]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("==", [K.EQ]),
        ("!=", [K.NOT_EQ]),
        ("<=", [K.LT_EQ]),
        (">=", [K.GT_EQ]),
        ("= ! < >", [K.ASSIGN, K.BANG, K.LT, K.GT]),
        ("=!", [K.ASSIGN, K.BANG]),
        ("+-*/", [K.PLUS, K.MINUS, K.ASTERISK, K.SLASH]),
        ("(){}[],:;", [K.LPAREN, K.RPAREN, K.LBRACE, K.RBRACE, K.LBRACKET, K.RBRACKET,
                       K.COMMA, K.COLON, K.SEMICOLON]),
        ("fun let if else return", [K.FUNCTION, K.LET, K.IF, K.ELSE, K.RETURN]),
        ("1 // a comment\n2", [K.INT, K.INT]),
        ("// only a comment", []),
        ("1\n2", [K.INT, K.INT]),
        ("1\n\n2", [K.INT, K.BLANK, K.INT]),
        ("1\n\n\n2", [K.INT, K.BLANK, K.BLANK, K.INT]),
        ("a\r\n\tb", [K.IDENT, K.IDENT]),
    ],
)
def test_token_kinds(source, expected):
    assert kinds(source) == expected + [K.EOF]


@pytest.mark.parametrize(
    "source,token",
    [
        ("foo_bar", Token(K.IDENT, "foo_bar")),
        ("true", Token(K.BOOL, True)),
        ("false", Token(K.BOOL, False)),
        ('"hello world"', Token(K.STRING, "hello world")),
        ('"unterminated', Token(K.STRING, "unterminated")),
        ('""', Token(K.STRING, "")),
        ("9223372036854775807", Token(K.INT, 2**63 - 1)),
        ("@", Token(K.ILLEGAL, "@")),
    ],
)
def test_single_token(source, token):
    assert list(lex(source)) == [token, Token(K.EOF)]


def test_identifier_stops_at_digit():
    assert list(lex("x1")) == [Token(K.IDENT, "x"), Token(K.INT, 1), Token(K.EOF)]


def test_positions_are_tracked():
    tokens = list(lex("let x\n  = 10;"))
    assert [(t.line, t.column) for t in tokens[:4]] == [(1, 1), (1, 5), (2, 3), (2, 5)]


def test_integer_literal_overflow_raises():
    with pytest.raises(BeavieeerOverflowError):
        list(lex("9223372036854775808"))


def test_eof_is_repeated():
    lexer = Lexer("x")
    assert lexer.next_token() == Token(K.IDENT, "x")
    for _ in range(3):
        assert lexer.next_token().kind is K.EOF


def test_token_rendering():
    assert str(Token(K.IDENT, "x")) == "identifier 'x'"
    assert str(Token(K.INT, 5)) == "integer 5"
    assert str(Token(K.BOOL, True)) == "boolean true"
    assert str(Token(K.ASSIGN)) == "'='"
    assert str(Token(K.EOF)) == "end of input"


# Digits are left out so that long runs never overflow.
source_text = st.text(alphabet=string.ascii_letters + " \t\n=+-!*/<>(){}[],;:\"_@#")


@given(source_text)
def test_lexing_is_deterministic(source):
    assert list(lex(source)) == list(lex(source))


@given(source_text)
def test_stream_ends_with_exactly_one_eof(source):
    tokens = list(lex(source))
    assert tokens[-1].kind is K.EOF
    assert [t.kind for t in tokens].count(K.EOF) == 1
