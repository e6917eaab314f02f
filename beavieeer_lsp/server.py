from __future__ import annotations

"""
A minimal pygls-based Language Server for Beavieeer.

Features:
- Text synchronization (pygls workspace) and a static index per document
- Diagnostics: parser errors at the offending token
- Hover: builtin documentation and locally defined symbols
- Completion: builtins, keywords and local symbols
- Signature Help: for documented builtins
- Document Symbols: `let` bindings from the indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import re
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
)
from pygls.server import LanguageServer

from beavieeer import __version__
from beavieeer.builtin.docs import BUILTIN_DOCS
from beavieeer.reader.token import KEYWORDS
from beavieeer_lsp.indexer import DocumentIndex, build_index

WORD_CHARS = re.compile(r"[A-Za-z_]")


class BeavieeerLanguageServer(LanguageServer):
    CMD_NAME = "beavieeer-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, __version__)
        self.indexes: Dict[str, DocumentIndex] = {}

    def document_text(self, uri: str) -> str:
        return self.workspace.get_text_document(uri).source

    def reindex(self, uri: str) -> DocumentIndex:
        idx = build_index(self.document_text(uri))
        self.indexes[uri] = idx
        return idx


ls = BeavieeerLanguageServer()


# --- Text sync ---
@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: BeavieeerLanguageServer, params: DidOpenTextDocumentParams):
    uri = params.text_document.uri
    _publish_diagnostics(ls, uri, ls.reindex(uri))


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: BeavieeerLanguageServer, params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    _publish_diagnostics(ls, uri, ls.reindex(uri))


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: BeavieeerLanguageServer, params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    ls.indexes.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def _mk_range(line: int, col: int, length: int = 1) -> Range:
    return Range(start=Position(line=line, character=col), end=Position(line=line, character=col + length))


def to_diagnostics(idx: DocumentIndex) -> List[Diagnostic]:
    return [
        Diagnostic(
            range=_mk_range(d.line, d.col),
            message=d.message,
            severity=DiagnosticSeverity.Error,
            source=BeavieeerLanguageServer.CMD_NAME,
        )
        for d in idx.diagnostics
    ]


def _publish_diagnostics(ls: BeavieeerLanguageServer, uri: str, idx: DocumentIndex):
    ls.publish_diagnostics(uri, to_diagnostics(idx))


# --- Hover ---
def hover_text(word: str, idx: DocumentIndex) -> Optional[str]:
    # Local definitions shadow builtins, as they do at runtime.
    if word in idx.symbols:
        sdef = idx.symbols[word]
        return f"{word}: {sdef.kind} (defined at {sdef.line + 1}:{sdef.col + 1})"
    doc = BUILTIN_DOCS.get(word)
    if doc is not None:
        return doc.render(word)
    return None


@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(ls: BeavieeerLanguageServer, params: HoverParams) -> Optional[Hover]:
    uri = params.text_document.uri
    idx = ls.indexes.get(uri)
    if idx is None:
        return None
    word = extract_word_at(ls.document_text(uri), params.position)
    if not word:
        return None
    contents = hover_text(word, idx)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
def completion_items(idx: Optional[DocumentIndex]) -> List[CompletionItem]:
    items: List[CompletionItem] = []
    for name, doc in BUILTIN_DOCS.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=doc.signature))
    for word in KEYWORDS:
        items.append(CompletionItem(label=word, kind=CompletionItemKind.Keyword))
    if idx is not None:
        for name, sdef in idx.symbols.items():
            kind = CompletionItemKind.Function if sdef.kind == "function" else CompletionItemKind.Variable
            items.append(CompletionItem(label=name, kind=kind))
    return items


@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(resolve_provider=False))
def on_completion(ls: BeavieeerLanguageServer, params: CompletionParams) -> CompletionList:
    idx = ls.indexes.get(params.text_document.uri)
    return CompletionList(is_incomplete=False, items=completion_items(idx))


# --- Signature Help ---
def signature_for(callee: str) -> Optional[SignatureInformation]:
    doc = BUILTIN_DOCS.get(callee)
    if doc is None:
        return None
    label = doc.signature
    params_text = label[label.find("(") + 1: label.rfind(")")]
    parameters = [ParameterInformation(label=p.strip()) for p in params_text.split(",") if p.strip()]
    return SignatureInformation(label=label, documentation=doc.summary, parameters=parameters)


@ls.feature(TEXT_DOCUMENT_SIGNATURE_HELP, SignatureHelpOptions(trigger_characters=["(", ","]))
def on_signature_help(ls: BeavieeerLanguageServer, params: SignatureHelpParams) -> Optional[SignatureHelp]:
    uri = params.text_document.uri
    if uri not in ls.indexes:
        return None
    prefix = get_line_prefix(ls.document_text(uri), params.position)
    call = extract_open_call(prefix)
    if call is None:
        return None
    callee, active_parameter = call
    info = signature_for(callee)
    if info is None:
        return None
    return SignatureHelp(signatures=[info], active_signature=0, active_parameter=active_parameter)


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(ls: BeavieeerLanguageServer, params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    idx = ls.indexes.get(params.text_document.uri)
    if idx is None:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in idx.symbols.items():
        rng = _mk_range(sdef.line, sdef.col, len(name))
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Function if sdef.kind == "function" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols


# --- Helpers ---

def get_line_prefix(text: str, pos: Position) -> str:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return ""
    return lines[pos.line][: pos.character]


def extract_word_at(text: str, pos: Position) -> Optional[str]:
    lines = text.splitlines(True)
    if pos.line >= len(lines):
        return None
    line = lines[pos.line]
    start = end = pos.character
    while start > 0 and WORD_CHARS.match(line[start - 1]):
        start -= 1
    while end < len(line) and WORD_CHARS.match(line[end]):
        end += 1
    return line[start:end] or None


def extract_open_call(prefix: str) -> Optional[tuple[str, int]]:
    """Find the innermost unclosed `name(` in `prefix`; returns (name, argument index)."""
    depth = 0
    commas = 0
    for i in range(len(prefix) - 1, -1, -1):
        ch = prefix[i]
        if ch in ")]}":
            depth += 1
        elif ch in "[{":
            if depth == 0:
                commas = 0  # inside a literal argument
            else:
                depth -= 1
        elif ch == "(":
            if depth == 0:
                end = i
                start = end
                while start > 0 and WORD_CHARS.match(prefix[start - 1]):
                    start -= 1
                name = prefix[start:end]
                return (name, commas) if name else None
            depth -= 1
        elif ch == "," and depth == 0:
            commas += 1
    return None


def main() -> None:
    # Run the language server over stdio
    ls.start_io()


if __name__ == "__main__":
    main()
