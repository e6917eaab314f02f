"""Documentation table for builtins and prelude functions.

Shared by the REPL (`:info`) and the language server (hover, completion and
signature help). Signatures use the arrow notation `Input -> Output`.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BuiltinDoc:
    signature: str
    summary: str
    types: str

    def render(self, name: str) -> str:
        return f"Function: {name}\n{self.signature}\n{self.summary}\n{self.types}"


BUILTIN_DOCS: dict[str, BuiltinDoc] = {
    # I/O
    "print": BuiltinDoc("print(value, ...)", "Prints each value to the console on its own line.", "Any... -> Null"),
    "read": BuiltinDoc("read(prompt)", "Prints the prompt and reads one line from the console.", "String -> String"),
    "readFile": BuiltinDoc("readFile(path)", "Reads the contents of a file.", "String -> String"),
    "writeFile": BuiltinDoc(
        "writeFile(path, contents)",
        "Writes the given contents to a file, creating it if it does not exist.",
        "String -> String -> Null",
    ),
    # List operations
    "len": BuiltinDoc("len(xs)", "Returns the length of a list, string or map.", "List -> Number"),
    "first": BuiltinDoc("first(xs)", "Returns the first element of a list.", "List -> ListElement"),
    "last": BuiltinDoc("last(xs)", "Returns the last element of a list.", "List -> ListElement"),
    "tail": BuiltinDoc("tail(xs)", "Returns all elements of a list except the first.", "List -> List"),
    "rest": BuiltinDoc("rest(xs)", "Alias of tail.", "List -> List"),
    "get": BuiltinDoc(
        "get(xs, index)",
        "Returns the element of a list at an index, or the value of a map key.",
        "List -> Number -> ListElement",
    ),
    "push": BuiltinDoc("push(xs, value)", "Returns a new list with the value appended.", "List -> Value -> List"),
    "map": BuiltinDoc(
        "map(xs, f)",
        "Applies a function to each element of a list and returns a new list.",
        "List -> Function -> List",
    ),
    "filter": BuiltinDoc(
        "filter(xs, pred)",
        "Keeps the elements of a list for which the predicate is truthy.",
        "List -> Function -> List",
    ),
    "sort": BuiltinDoc(
        "sort(xs, less)",
        "Stable sort; less(a, b) is truthy when a should come before b.",
        "List -> Function -> List",
    ),
    "reverse": BuiltinDoc("reverse(xs)", "Reverses a list.", "List -> List"),
    # Functional utilities (prelude)
    "fold": BuiltinDoc(
        "fold(f, init, xs)",
        "Reduces a list to a single value using a function.",
        "Function -> InitialValue -> List -> Value",
    ),
    # String utilities
    "lowercase": BuiltinDoc("lowercase(s)", "Returns the lowercase equivalent of a string.", "String -> String"),
    "uppercase": BuiltinDoc("uppercase(s)", "Returns the uppercase equivalent of a string.", "String -> String"),
    "trim": BuiltinDoc("trim(s)", "Removes leading and trailing white space.", "String -> String"),
    "parseNumber": BuiltinDoc("parseNumber(s)", "Converts a string into a number.", "String -> Number"),
    "replaceString": BuiltinDoc(
        "replaceString(s, pattern, replacement)",
        "Replaces all matches of a pattern.",
        "String -> String -> String -> String",
    ),
    "replaceN": BuiltinDoc(
        "replaceN(s, pattern, replacement, n)",
        "Replaces the first N matches of a pattern.",
        "String -> String -> String -> Number -> String",
    ),
    "split": BuiltinDoc("split(s, separator)", "Splits a string on a separator.", "String -> String -> List"),
    "explode": BuiltinDoc("explode(s)", "Converts a string to a list of one-character strings.", "String -> List"),
}
