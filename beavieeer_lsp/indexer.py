from __future__ import annotations

"""
Static indexer for Beavieeer documents.

The index is built from the real lexer and parser, never by evaluating code:
- diagnostics: every parser error at the position of the offending token
- definitions: `let name = ...` bindings, marked 'function' when the bound
  value is a function literal

Positions are 0-based (line, col) as the LSP expects; the lexer's are 1-based.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from beavieeer.errors import BeavieeerOverflowError
from beavieeer.reader.lexer import Lexer
from beavieeer.reader.parser import Parser
from beavieeer.reader.token import TokenKind

logger = logging.getLogger(__name__)


@dataclass
class SymbolDef:
    name: str
    kind: str  # "var" | "function"
    line: int
    col: int


@dataclass
class IndexDiagnostic:
    message: str
    line: int
    col: int


@dataclass
class DocumentIndex:
    symbols: Dict[str, SymbolDef] = field(default_factory=dict)
    diagnostics: List[IndexDiagnostic] = field(default_factory=list)


def _scan_definitions(text: str, idx: DocumentIndex) -> None:
    # let IDENT = fun ...  -> function; anything else bound by let -> var
    tokens = list(Lexer(text))
    significant = [t for t in tokens if t.kind is not TokenKind.BLANK]
    for i, tok in enumerate(significant):
        if tok.kind is not TokenKind.LET or i + 1 >= len(significant):
            continue
        name_tok = significant[i + 1]
        if name_tok.kind is not TokenKind.IDENT:
            continue
        kind = "var"
        if (
            i + 3 < len(significant)
            and significant[i + 2].kind is TokenKind.ASSIGN
            and significant[i + 3].kind is TokenKind.FUNCTION
        ):
            kind = "function"
        # First definition wins; later lets of the same name are rebindings.
        idx.symbols.setdefault(
            name_tok.value,
            SymbolDef(name=name_tok.value, kind=kind, line=name_tok.line - 1, col=name_tok.column - 1),
        )


def build_index(text: str) -> DocumentIndex:
    idx = DocumentIndex()
    try:
        parser = Parser(Lexer(text))
        parser.parse()
        _scan_definitions(text, idx)
    except BeavieeerOverflowError as ex:
        idx.diagnostics.append(IndexDiagnostic(message=str(ex), line=0, col=0))
        return idx

    for message, (line, col) in zip(parser.errors, parser.error_locations):
        idx.diagnostics.append(IndexDiagnostic(message=message, line=max(line - 1, 0), col=max(col - 1, 0)))
    logger.debug("indexed document: %d symbol(s), %d diagnostic(s)", len(idx.symbols), len(idx.diagnostics))
    return idx
