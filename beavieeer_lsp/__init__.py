"""Beavieeer Language Server package.

This package provides:
- A pygls-based Language Server for Beavieeer scripts.
- An indexer that runs the lexer and parser over a document without evaluating it.

Note: The LSP does not evaluate user buffers; it builds a static index from text.
"""

__all__ = [
    "server",
    "indexer",
]
