"""Abstract syntax tree for Beavieeer programs.

Nodes are immutable once parsed. `str(node)` renders a fully parenthesised
source form, which makes operator binding visible:

    1 + 2 * 3    ->  (1 + (2 * 3))
    -a * b       ->  ((-a) * b)
    a[1](2)      ->  (a[1])(2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


# -------------------------------
# Expressions
# -------------------------------
@dataclass(frozen=True)
class Identifier:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class StringLiteral:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class PrefixExpression:
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.operator}{self.right})"


@dataclass(frozen=True)
class InfixExpression:
    left: Expression
    operator: str
    right: Expression

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class IfExpression:
    condition: Expression
    consequence: BlockStatement
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        out = f"if {self.condition} {self.consequence}"
        if self.alternative is not None:
            out += f" else {self.alternative}"
        return out


@dataclass(frozen=True)
class FunctionLiteral:
    parameters: tuple[Identifier, ...]
    body: BlockStatement

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fun({params}) {self.body}"


@dataclass(frozen=True)
class CallExpression:
    function: Expression
    arguments: tuple[Expression, ...]

    def __str__(self) -> str:
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.function}({args})"


@dataclass(frozen=True)
class ArrayLiteral:
    elements: tuple[Expression, ...]

    def __str__(self) -> str:
        return "[" + ", ".join(str(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class MapLiteral:
    # Insertion order preserved; duplicate keys are legal here.
    pairs: tuple[tuple[Literal, Expression], ...]

    def __str__(self) -> str:
        return "{" + ", ".join(f"{k}: {v}" for k, v in self.pairs) + "}"


@dataclass(frozen=True)
class IndexExpression:
    left: Expression
    index: Expression

    def __str__(self) -> str:
        return f"({self.left}[{self.index}])"


Literal = Union[IntegerLiteral, BooleanLiteral, StringLiteral]

Expression = Union[
    Identifier,
    IntegerLiteral,
    BooleanLiteral,
    StringLiteral,
    PrefixExpression,
    InfixExpression,
    IfExpression,
    FunctionLiteral,
    CallExpression,
    ArrayLiteral,
    MapLiteral,
    IndexExpression,
]


# -------------------------------
# Statements
# -------------------------------
@dataclass(frozen=True)
class LetStatement:
    name: Identifier
    value: Expression

    def __str__(self) -> str:
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class ReturnStatement:
    value: Expression

    def __str__(self) -> str:
        return f"return {self.value};"


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression

    def __str__(self) -> str:
        return str(self.expression)


@dataclass(frozen=True)
class BlockStatement:
    statements: tuple[Statement, ...]

    def __str__(self) -> str:
        if not self.statements:
            return "{ }"
        return "{ " + " ".join(str(s) for s in self.statements) + " }"


Statement = Union[LetStatement, ReturnStatement, ExpressionStatement]


@dataclass(frozen=True)
class Program:
    statements: tuple[Statement, ...]

    def __str__(self) -> str:
        return "\n".join(str(s) for s in self.statements)


Node = Union[Program, BlockStatement, Statement, Expression]
