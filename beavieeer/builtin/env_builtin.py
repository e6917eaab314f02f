"""Built-in functions for the Beavieeer runtime environment.

This module defines the native function catalog (collections, strings and
I/O) and registration utilities. Every builtin takes the list of evaluated
arguments and returns an Object; bad argument types produce an Error object
rather than an exception. `map`, `filter` and `sort` re-enter the evaluator
through `apply_function` to run user closures.
"""
from __future__ import annotations

import logging
import sys
from functools import cmp_to_key
from typing import IO, Optional

from beavieeer.evaluation.apply import apply_function
from beavieeer.evaluation.evaluator import evaluate
from beavieeer.types.environment import Environment
from beavieeer.types.objects import (
    HASHABLE,
    NULL,
    VARIADIC,
    Array,
    Builtin,
    Error,
    Integer,
    Map,
    Object,
    String,
    is_error,
    is_truthy,
)

logger = logging.getLogger(__name__)


# -------------------------------
# Collections
# -------------------------------
def lang_len(args: list[Object]) -> Object:
    """Length of a string, array or map."""
    match args[0]:
        case String(value=s):
            return Integer(len(s))
        case Array(elements=elements):
            return Integer(len(elements))
        case Map(pairs=pairs):
            return Integer(len(pairs))
        case other:
            return Error(f"argument to `len` not supported, got {other.type_name}")


def lang_first(args: list[Object]) -> Object:
    match args[0]:
        case Array(elements=elements):
            return elements[0] if elements else NULL
        case other:
            return Error(f"argument to `first` must be ARRAY, got {other.type_name}")


def lang_last(args: list[Object]) -> Object:
    match args[0]:
        case Array(elements=elements):
            return elements[-1] if elements else NULL
        case other:
            return Error(f"argument to `last` must be ARRAY, got {other.type_name}")


def lang_tail(args: list[Object]) -> Object:
    """All elements but the first; null for an empty array."""
    match args[0]:
        case Array(elements=elements):
            return Array(elements[1:]) if elements else NULL
        case other:
            return Error(f"argument to `tail` must be ARRAY, got {other.type_name}")


def lang_get(args: list[Object]) -> Object:
    """get(array, index) or get(map, key); null when absent."""
    match args[0], args[1]:
        case Array(elements=elements), Integer(value=i):
            return elements[i] if 0 <= i < len(elements) else NULL
        case Map(pairs=pairs), key if isinstance(key, HASHABLE):
            return pairs.get(key, NULL)
        case collection, key:
            return Error(
                f"arguments to `get` must be ARRAY, INTEGER or MAP, key. "
                f"got {collection.type_name}, {key.type_name}"
            )


def lang_push(args: list[Object]) -> Object:
    match args[0]:
        case Array(elements=elements):
            return Array(elements + (args[1],))
        case other:
            return Error(f"argument to `push` must be ARRAY, got {other.type_name}")


def lang_reverse(args: list[Object]) -> Object:
    match args[0]:
        case Array(elements=elements):
            return Array(tuple(reversed(elements)))
        case other:
            return Error(f"argument to `reverse` must be ARRAY, got {other.type_name}")


# -------------------------------
# Higher-order (re-enter the evaluator)
# -------------------------------
def lang_map(args: list[Object]) -> Object:
    """map(array, f): a new array of f(x) for each element; the first error aborts."""
    array, fn = args
    if not isinstance(array, Array):
        return Error(f"first argument to `map` must be ARRAY, got {array.type_name}")
    results: list[Object] = []
    for element in array.elements:
        result = apply_function(fn, [element], evaluate)
        if is_error(result):
            return result
        results.append(result)
    return Array(tuple(results))


def lang_filter(args: list[Object]) -> Object:
    """filter(array, pred): elements for which pred(x) is truthy; the first error aborts."""
    array, fn = args
    if not isinstance(array, Array):
        return Error(f"first argument to `filter` must be ARRAY, got {array.type_name}")
    kept: list[Object] = []
    for element in array.elements:
        result = apply_function(fn, [element], evaluate)
        if is_error(result):
            return result
        if is_truthy(result):
            kept.append(element)
    return Array(tuple(kept))


class _SortAborted(Exception):
    def __init__(self, error: Error):
        super().__init__(error.message)
        self.error = error


def lang_sort(args: list[Object]) -> Object:
    """sort(array, less): stable sort where less(a, b) is truthy when a goes first."""
    array, fn = args
    if not isinstance(array, Array):
        return Error(f"first argument to `sort` must be ARRAY, got {array.type_name}")

    def compare(a: Object, b: Object) -> int:
        for x, y, order in ((a, b, -1), (b, a, 1)):
            result = apply_function(fn, [x, y], evaluate)
            if is_error(result):
                raise _SortAborted(result)
            if is_truthy(result):
                return order
        return 0

    try:
        return Array(tuple(sorted(array.elements, key=cmp_to_key(compare))))
    except _SortAborted as aborted:
        return aborted.error


# -------------------------------
# Strings
# -------------------------------
def lang_trim(args: list[Object]) -> Object:
    match args[0]:
        case String(value=s):
            return String(s.strip())
        case other:
            return Error(f"argument to `trim` must be STRING, got {other.type_name}")


def lang_lowercase(args: list[Object]) -> Object:
    match args[0]:
        case String(value=s):
            return String(s.lower())
        case other:
            return Error(f"argument to `lowercase` must be STRING, got {other.type_name}")


def lang_uppercase(args: list[Object]) -> Object:
    match args[0]:
        case String(value=s):
            return String(s.upper())
        case other:
            return Error(f"argument to `uppercase` must be STRING, got {other.type_name}")


def lang_replace_string(args: list[Object]) -> Object:
    match args:
        case [String(value=s), String(value=pattern), String(value=replacement)]:
            return String(s.replace(pattern, replacement))
        case [a, b, c]:
            return Error(
                "arguments to `replaceString` must be STRING, STRING, STRING. "
                f"got {a.type_name}, {b.type_name}, {c.type_name}"
            )


def lang_replace_n(args: list[Object]) -> Object:
    match args:
        case [String(value=s), String(value=pattern), String(value=replacement), Integer(value=n)] if n >= 0:
            return String(s.replace(pattern, replacement, n))
        case [a, b, c, d]:
            return Error(
                "arguments to `replaceN` must be STRING, STRING, STRING, non-negative INTEGER. "
                f"got {a.type_name}, {b.type_name}, {c.type_name}, {d.type_name} {d}"
            )


def lang_split(args: list[Object]) -> Object:
    match args:
        case [String(value=s), String(value=sep)] if sep:
            return Array(tuple(String(part) for part in s.split(sep)))
        case [String(), String()]:
            return Error("separator passed to `split` must not be empty")
        case [a, b]:
            return Error(
                f"arguments to `split` must be STRING, STRING. got {a.type_name}, {b.type_name}"
            )


def lang_explode(args: list[Object]) -> Object:
    match args[0]:
        case String(value=s):
            return Array(tuple(String(ch) for ch in s))
        case other:
            return Error(f"argument to `explode` must be STRING, got {other.type_name}")


def lang_parse_number(args: list[Object]) -> Object:
    match args[0]:
        case String(value=s):
            text = s.strip()
            digits = text[1:] if text[:1] in ("-", "+") else text
            if not digits or not (digits.isascii() and digits.isdigit()):
                return Error(f"could not parse {s!r} as a number")
            value = int(text)
            if not -(2**63) <= value <= 2**63 - 1:
                return Error(f"number {text} does not fit in 64 bits")
            return Integer(value)
        case other:
            return Error(f"argument to `parseNumber` must be STRING, got {other.type_name}")


# -------------------------------
# I/O
# -------------------------------
def lang_read_file(args: list[Object]) -> Object:
    match args[0]:
        case String(value=path):
            logger.debug("readFile %s", path)
            try:
                with open(path, encoding="utf-8") as fh:
                    return String(fh.read())
            except OSError as ex:
                return Error(f"could not read file {path!r}: {ex.strerror or ex}")
        case other:
            return Error(f"argument to `readFile` must be STRING, got {other.type_name}")


def lang_write_file(args: list[Object]) -> Object:
    match args:
        case [String(value=path), String(value=contents)]:
            logger.debug("writeFile %s (%d chars)", path, len(contents))
            try:
                with open(path, "w", encoding="utf-8") as fh:
                    fh.write(contents)
            except OSError as ex:
                return Error(f"could not write file {path!r}: {ex.strerror or ex}")
            return NULL
        case [a, b]:
            return Error(
                f"arguments to `writeFile` must be STRING, STRING. got {a.type_name}, {b.type_name}"
            )


def make_print(out: Optional[IO[str]] = None) -> Builtin:
    """The host-provided variadic `print`: one line per argument, returns null."""

    def lang_print(args: list[Object]) -> Object:
        stream = out if out is not None else sys.stdout
        for arg in args:
            stream.write(f"{arg}\n")
        return NULL

    return Builtin("print", VARIADIC, lang_print)


def make_read(out: Optional[IO[str]] = None) -> Builtin:
    """`read(prompt)`: write the prompt to the same stream as `print`, then read a line from stdin."""

    def lang_read(args: list[Object]) -> Object:
        match args[0]:
            case String(value=prompt):
                stream = out if out is not None else sys.stdout
                stream.write(prompt)
                stream.flush()
                line = sys.stdin.readline()
                if not line:
                    return Error("end of input while reading from stdin")
                return String(line.rstrip("\n"))
            case other:
                return Error(f"argument to `read` must be STRING, got {other.type_name}")

    return Builtin("read", 1, lang_read)


# -------------------------------
# Registration
# -------------------------------
BUILTINS: dict[str, Builtin] = {
    b.name: b
    for b in (
        Builtin("len", 1, lang_len),
        Builtin("first", 1, lang_first),
        Builtin("last", 1, lang_last),
        Builtin("tail", 1, lang_tail),
        Builtin("rest", 1, lang_tail),
        Builtin("get", 2, lang_get),
        Builtin("push", 2, lang_push),
        Builtin("reverse", 1, lang_reverse),
        Builtin("map", 2, lang_map),
        Builtin("filter", 2, lang_filter),
        Builtin("sort", 2, lang_sort),
        Builtin("trim", 1, lang_trim),
        Builtin("lowercase", 1, lang_lowercase),
        Builtin("uppercase", 1, lang_uppercase),
        Builtin("replaceString", 3, lang_replace_string),
        Builtin("replaceN", 4, lang_replace_n),
        Builtin("split", 2, lang_split),
        Builtin("explode", 1, lang_explode),
        Builtin("parseNumber", 1, lang_parse_number),
        Builtin("readFile", 1, lang_read_file),
        Builtin("writeFile", 2, lang_write_file),
    )
}


def register(env: Environment) -> None:
    env.update(dict(BUILTINS))
