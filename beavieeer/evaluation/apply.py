"""Application engine for Beavieeer.

This module centralizes function application so the evaluator and the
higher-order builtins (map, filter, sort) share one set of rules:
- Closures: arity must match exactly; the body runs in a fresh child of the
  captured environment and a ReturnValue is unwrapped at this boundary.
- Builtins: the declared arity is checked (VARIADIC accepts any count) before
  the native implementation runs.
- Anything else is an Error object, never an exception.
"""

from __future__ import annotations

from typing import Callable, Optional

from beavieeer.reader.ast import Node
from beavieeer.types.environment import Environment
from beavieeer.types.objects import (
    NULL,
    Builtin,
    Error,
    Function,
    Object,
    ReturnValue,
)

EvaluatorFn = Callable[[Node, Environment], Optional[Object]]


def unwrap_return_value(result: Optional[Object]) -> Object:
    if result is None:
        return NULL
    if isinstance(result, ReturnValue):
        return result.value
    return result


def apply_function(fn: Object, args: list[Object], evaluate_fn: EvaluatorFn) -> Object:
    """Apply a closure or builtin to already-evaluated arguments.

    Parameters:
    - fn: the callee value.
    - args: argument values, evaluated left to right by the caller.
    - evaluate_fn: evaluator used to run a closure body (lets builtins re-enter).
    """
    match fn:
        case Function():
            if len(args) != len(fn.parameters):
                return Error(
                    f"wrong number of arguments: want={len(fn.parameters)}, got={len(args)}"
                )
            frame = fn.extend_env(args)
            return unwrap_return_value(evaluate_fn(fn.body, frame))
        case Builtin():
            if not fn.accepts(len(args)):
                return Error(
                    f"wrong number of arguments to `{fn.name}`: want={fn.arity}, got={len(args)}"
                )
            return fn.fn(args)
        case _:
            return Error(f"not a function: {fn.type_name}")
