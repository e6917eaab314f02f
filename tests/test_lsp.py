import pytest
from lsprotocol.types import CompletionItemKind, DiagnosticSeverity, Position

from beavieeer_lsp.indexer import build_index
from beavieeer_lsp.server import (
    completion_items,
    extract_open_call,
    extract_word_at,
    hover_text,
    signature_for,
    to_diagnostics,
)

SOURCE = """let add = fun(a, b) { a + b };
let total = add(1, 2);

let add = 3;
"""


def test_let_bindings_are_indexed():
    idx = build_index(SOURCE)
    assert set(idx.symbols) == {"add", "total"}
    add = idx.symbols["add"]
    assert (add.kind, add.line, add.col) == ("function", 0, 4)
    total = idx.symbols["total"]
    assert (total.kind, total.line, total.col) == ("var", 1, 4)
    assert idx.diagnostics == []


def test_parser_errors_become_diagnostics():
    idx = build_index("let x = 1;\nlet = 2;")
    assert len(idx.diagnostics) == 1
    diag = idx.diagnostics[0]
    assert diag.message == "expected identifier, got '='"
    assert (diag.line, diag.col) == (1, 4)

    (lsp_diag,) = to_diagnostics(idx)
    assert lsp_diag.severity == DiagnosticSeverity.Error
    assert lsp_diag.range.start == Position(line=1, character=4)
    assert lsp_diag.source == "beavieeer-ls"


def test_literal_overflow_becomes_a_diagnostic():
    idx = build_index("let big = 99999999999999999999;")
    assert len(idx.diagnostics) == 1
    assert "does not fit in 64 bits" in idx.diagnostics[0].message


def test_empty_document():
    idx = build_index("")
    assert idx.symbols == {}
    assert idx.diagnostics == []


def test_hover_prefers_local_definitions():
    idx = build_index("let len = fun(x) { 0 };")
    assert hover_text("len", idx) == "len: function (defined at 1:5)"
    assert hover_text("map", idx).startswith("Function: map\nmap(xs, f)")
    assert hover_text("unknown", idx) is None


@pytest.mark.parametrize(
    "text,character,expected",
    [
        ("let total = add(1, 2);", 6, "total"),
        ("let total = add(1, 2);", 13, "add"),
        ("map(xs, f)", 0, "map"),
        ("a + b", 2, None),
    ],
)
def test_extract_word_at(text, character, expected):
    assert extract_word_at(text, Position(line=0, character=character)) == expected


@pytest.mark.parametrize(
    "prefix,expected",
    [
        ("map(", ("map", 0)),
        ("map(xs, ", ("map", 1)),
        ("replaceN(s, f(a, b), ", ("replaceN", 2)),
        ("push([1, 2", ("push", 0)),
        ("push(xs, [1, 2], ", ("push", 2)),
        ("let x = 1", None),
        ("(1 + ", None),
    ],
)
def test_extract_open_call(prefix, expected):
    assert extract_open_call(prefix) == expected


def test_signature_parameters():
    info = signature_for("replaceN")
    assert info.label == "replaceN(s, pattern, replacement, n)"
    assert [p.label for p in info.parameters] == ["s", "pattern", "replacement", "n"]
    assert signature_for("print").parameters[0].label == "value"
    assert signature_for("nope") is None


def test_completion_offers_builtins_keywords_and_locals():
    items = {item.label: item for item in completion_items(build_index(SOURCE))}
    assert items["filter"].kind == CompletionItemKind.Function
    assert items["filter"].detail == "filter(xs, pred)"
    assert items["let"].kind == CompletionItemKind.Keyword
    assert items["total"].kind == CompletionItemKind.Variable
    assert "add" in items
