"""Core tree-walking evaluator for Beavieeer.

`evaluate(node, env)` is the sole execution engine. It never raises for
language-level failures: every failure is an Error object, and every
combinator checks the results of its sub-evaluations for Error and
ReturnValue before doing anything else, returning them unchanged.
"""

from __future__ import annotations

from typing import Optional

from beavieeer.errors import BeavieeerUnboundIdentifier
from beavieeer.evaluation.apply import apply_function
from beavieeer.reader.ast import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    MapLiteral,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from beavieeer.types.environment import Environment
from beavieeer.types.objects import (
    CONTROL_FLOW,
    HASHABLE,
    NULL,
    Array,
    Boolean,
    Error,
    Function,
    Integer,
    Map,
    Object,
    ReturnValue,
    String,
    is_truthy,
    native_bool,
)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def evaluate(node: Node, env: Environment) -> Optional[Object]:
    """Evaluate an AST node in `env`.

    Statements that produce no value (`let`) yield None; expressions always
    yield an Object.
    """
    match node:
        # --- Statements ---
        case Program():
            return _eval_program(node, env)
        case BlockStatement():
            return _eval_block(node, env)
        case ExpressionStatement(expression=expression):
            return evaluate(expression, env)
        case LetStatement(name=name, value=value_expr):
            value = evaluate(value_expr, env)
            if isinstance(value, CONTROL_FLOW):
                return value
            env.set(name.value, value)
            return None
        case ReturnStatement(value=value_expr):
            value = evaluate(value_expr, env)
            if isinstance(value, CONTROL_FLOW):
                return value
            return ReturnValue(value)

        # --- Literals ---
        case IntegerLiteral(value=value):
            return Integer(value)
        case BooleanLiteral(value=value):
            return native_bool(value)
        case StringLiteral(value=value):
            return String(value)
        case ArrayLiteral(elements=elements):
            values = _eval_expressions(elements, env)
            if not isinstance(values, list):
                return values
            return Array(tuple(values))
        case MapLiteral():
            return _eval_map_literal(node, env)
        case FunctionLiteral(parameters=parameters, body=body):
            return Function(tuple(p.value for p in parameters), body, env)

        # --- Expressions ---
        case Identifier(value=name):
            try:
                return env.get(name)
            except BeavieeerUnboundIdentifier:
                return Error(f"identifier not found: {name}")
        case PrefixExpression(operator=operator, right=right_expr):
            right = evaluate(right_expr, env)
            if isinstance(right, CONTROL_FLOW):
                return right
            return eval_prefix_expression(operator, right)
        case InfixExpression(left=left_expr, operator=operator, right=right_expr):
            left = evaluate(left_expr, env)
            if isinstance(left, CONTROL_FLOW):
                return left
            right = evaluate(right_expr, env)
            if isinstance(right, CONTROL_FLOW):
                return right
            return eval_infix_expression(operator, left, right)
        case IfExpression():
            return _eval_if_expression(node, env)
        case CallExpression(function=function_expr, arguments=arguments):
            fn = evaluate(function_expr, env)
            if isinstance(fn, CONTROL_FLOW):
                return fn
            args = _eval_expressions(arguments, env)
            if not isinstance(args, list):
                return args
            return apply_function(fn, args, evaluate)
        case IndexExpression(left=left_expr, index=index_expr):
            left = evaluate(left_expr, env)
            if isinstance(left, CONTROL_FLOW):
                return left
            index = evaluate(index_expr, env)
            if isinstance(index, CONTROL_FLOW):
                return index
            return eval_index_expression(left, index)

    return Error(f"cannot evaluate node: {type(node).__name__}")


def _eval_program(program: Program, env: Environment) -> Optional[Object]:
    result: Optional[Object] = None
    for statement in program.statements:
        value = evaluate(statement, env)
        match value:
            case ReturnValue(value=returned):
                return returned
            case Error():
                return value
        if isinstance(statement, ExpressionStatement):
            result = value
    return result


def _eval_block(block: BlockStatement, env: Environment) -> Optional[Object]:
    result: Optional[Object] = None
    for statement in block.statements:
        value = evaluate(statement, env)
        if isinstance(value, CONTROL_FLOW):
            # Stop here; the marker is consumed by a call boundary or the top level.
            return value
        if isinstance(statement, ExpressionStatement):
            result = value
    return result


def _eval_expressions(
    expressions: tuple[Expression, ...], env: Environment
) -> list[Object] | Object:
    """Evaluate left to right; the first Error/ReturnValue is returned instead of a list."""
    values: list[Object] = []
    for expression in expressions:
        value = evaluate(expression, env)
        if isinstance(value, CONTROL_FLOW):
            return value
        values.append(value)
    return values


def _eval_map_literal(node: MapLiteral, env: Environment) -> Object:
    pairs: dict = {}
    for key_node, value_node in node.pairs:
        key = evaluate(key_node, env)
        if isinstance(key, CONTROL_FLOW):
            return key
        if not isinstance(key, HASHABLE):
            return Error(f"unusable as map key: {key.type_name}")
        value = evaluate(value_node, env)
        if isinstance(value, CONTROL_FLOW):
            return value
        pairs[key] = value
    return Map(pairs)


def _eval_if_expression(node: IfExpression, env: Environment) -> Object:
    condition = evaluate(node.condition, env)
    if isinstance(condition, CONTROL_FLOW):
        return condition
    if is_truthy(condition):
        branch = node.consequence
    elif node.alternative is not None:
        branch = node.alternative
    else:
        return NULL
    result = evaluate(branch, Environment.child_of(env))
    return NULL if result is None else result


# -------------------------------
# Operators
# -------------------------------
def _checked(value: int, description: str) -> Object:
    if value < INT64_MIN or value > INT64_MAX:
        return Error(f"integer overflow: {description}")
    return Integer(value)


def eval_prefix_expression(operator: str, right: Object) -> Object:
    match operator, right:
        case "!", _:
            return native_bool(not is_truthy(right))
        case "-", Integer(value=value):
            return _checked(-value, f"-{value}")
        case "+", Integer():
            return right
        case _:
            return Error(f"type mismatch: {operator}{right.type_name}")


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def eval_integer_infix_expression(operator: str, left: int, right: int) -> Object:
    description = f"{left} {operator} {right}"
    match operator:
        case "+":
            return _checked(left + right, description)
        case "-":
            return _checked(left - right, description)
        case "*":
            return _checked(left * right, description)
        case "/":
            if right == 0:
                return Error("division by zero")
            return _checked(_truncating_div(left, right), description)
        case "<":
            return native_bool(left < right)
        case "<=":
            return native_bool(left <= right)
        case ">":
            return native_bool(left > right)
        case ">=":
            return native_bool(left >= right)
        case "==":
            return native_bool(left == right)
        case "!=":
            return native_bool(left != right)
    return Error(f"unknown operator: INTEGER {operator} INTEGER")


def eval_infix_expression(operator: str, left: Object, right: Object) -> Object:
    match left, right:
        case Integer(value=lv), Integer(value=rv):
            return eval_integer_infix_expression(operator, lv, rv)
        case String(value=lv), String(value=rv) if operator == "+":
            return String(lv + rv)
        case Boolean(value=lv), Boolean(value=rv) if operator in ("==", "!="):
            return native_bool((lv == rv) == (operator == "=="))
    if type(left) is not type(right):
        return Error(f"type mismatch: {left.type_name} {operator} {right.type_name}")
    return Error(f"unknown operator: {left.type_name} {operator} {right.type_name}")


def eval_index_expression(left: Object, index: Object) -> Object:
    match left, index:
        case Array(elements=elements), Integer(value=i):
            if 0 <= i < len(elements):
                return elements[i]
            return NULL
        case Array(), _:
            return Error(f"type mismatch: ARRAY index must be INTEGER, got {index.type_name}")
        case Map(pairs=pairs), _:
            if not isinstance(index, HASHABLE):
                return Error(f"unusable as map key: {index.type_name}")
            return pairs.get(index, NULL)
    return Error(f"type mismatch: index operator not supported: {left.type_name}")
