# Beavieeer: a small dynamically-typed scripting language.
#
# Layout:
# - reader:      tokens, lexer, AST and the Pratt parser (text -> Program).
# - types:       runtime objects and the Environment chain.
# - evaluation:  the tree-walking evaluator and function application.
# - builtin:     the native function catalog and its documentation table.
# - modules:     prelude loading (prelude/std.bv).
# - interpreter, repl, __main__: host entry points.
#
# Naming guidance:
# - Node:   AST nodes produced by the parser (code).
# - Object: evaluated runtime values (see beavieeer.types.objects).

import logging

__version__ = "0.1.0"

# Library convention: stay silent unless the host configures logging.
logging.getLogger(__name__).addHandler(logging.NullHandler())
