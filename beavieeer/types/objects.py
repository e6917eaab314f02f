"""Runtime values for the Beavieeer evaluator.

Objects form a closed sum type; evaluation sites dispatch over it with
`match`. Values have no identity beyond their contents (functions excepted),
and collections are never mutated in place: builtins that "change" an array
or map return a new one.

ReturnValue and Error are control-flow carriers. Once produced they are passed
upward unchanged until a function-call boundary unwraps a ReturnValue or the
top level reports an Error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from io import StringIO
from typing import Callable, Optional, Union

from beavieeer.reader.ast import BlockStatement
from beavieeer.types.environment import Environment


@dataclass(frozen=True)
class Integer:
    value: int
    type_name = "INTEGER"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Boolean:
    value: bool
    type_name = "BOOLEAN"

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class String:
    value: str
    type_name = "STRING"

    def __str__(self) -> str:
        return self.value

    def inspect(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class Null:
    type_name = "NULL"

    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True)
class Array:
    elements: tuple[Object, ...] = ()
    type_name = "ARRAY"

    def __str__(self) -> str:
        return "[" + ", ".join(inspect(e) for e in self.elements) + "]"


@dataclass(frozen=True)
class Map:
    # Keys are Integer, Boolean or String objects; insertion order is kept.
    pairs: dict[HashKey, Object] = field(default_factory=dict)
    type_name = "MAP"

    def __str__(self) -> str:
        return "{" + ", ".join(f"{inspect(k)}: {inspect(v)}" for k, v in self.pairs.items()) + "}"


@dataclass(eq=False)
class Function:
    """A closure: parameters, body and the environment active at definition."""

    parameters: tuple[str, ...]
    body: BlockStatement
    env: Environment
    type_name = "FUNCTION"

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("fun(")
            buffer.write(", ".join(self.parameters))
            buffer.write(") ")
            buffer.write(str(self.body))
            return buffer.getvalue()

    def extend_env(self, args: list[Object]) -> Environment:
        """Bind argument values to parameters in a fresh child of the captured scope."""
        frame = Environment.child_of(self.env)
        for name, value in zip(self.parameters, args):
            frame.set(name, value)
        return frame


VARIADIC: Optional[int] = None

NativeFn = Callable[[list["Object"]], "Object"]


@dataclass(frozen=True, eq=False)
class Builtin:
    name: str
    arity: Optional[int]  # VARIADIC accepts any argument count
    fn: NativeFn
    type_name = "BUILTIN"

    def accepts(self, count: int) -> bool:
        return self.arity is VARIADIC or self.arity == count

    def __str__(self) -> str:
        return f"builtin {self.name}"


@dataclass(frozen=True)
class ReturnValue:
    value: Object
    type_name = "RETURN_VALUE"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Error:
    message: str
    type_name = "ERROR"

    def __str__(self) -> str:
        return f"ERROR: {self.message}"


Object = Union[Integer, Boolean, String, Null, Array, Map, Function, Builtin, ReturnValue, Error]
HashKey = Union[Integer, Boolean, String]

HASHABLE = (Integer, Boolean, String)
# Values that must short-circuit every combinator they reach.
CONTROL_FLOW = (ReturnValue, Error)

NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def is_truthy(obj: Object) -> bool:
    """Everything is truthy except `false` and `null` (0 and "" included)."""
    match obj:
        case Boolean(value=value):
            return value
        case Null():
            return False
        case _:
            return True


def is_error(obj: Optional[Object]) -> bool:
    return isinstance(obj, Error)


def inspect(obj: Object) -> str:
    """Render a value as it appears inside a collection (strings quoted)."""
    if isinstance(obj, String):
        return obj.inspect()
    return str(obj)
