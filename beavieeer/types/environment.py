"""Runtime environment for Beavieeer.

The Environment stores bindings of names to evaluated objects and supports
nested scopes via an `outer` link. Environments are shared by reference:
a closure keeps a handle on the scope it was defined in, never a copy, and
several closures may share one scope.
"""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING, Optional

from beavieeer.errors import BeavieeerUnboundIdentifier

if TYPE_CHECKING:
    from beavieeer.types.objects import Object


class Environment:
    """Hierarchical mapping from names to runtime objects."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, Object] = {}
        self.outer: Environment | None = outer

    @classmethod
    def child_of(cls, outer: Environment) -> Environment:
        """A new empty scope whose lookups fall through to `outer`."""
        return cls(outer)

    def set(self, name: str, value: Object) -> None:
        """Bind `name` in this scope only; outer bindings are never touched."""
        self.vars[name] = value

    def find(self, name: str) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def get(self, name: str) -> Object:
        """Look up `name`, walking outward through enclosing scopes.

        Raises BeavieeerUnboundIdentifier if no scope binds it.
        """
        env = self.find(name)
        if env is None:
            raise BeavieeerUnboundIdentifier(f"identifier not found: {name}")
        return env.vars[name]

    def update(self, mapping: dict[str, Object]) -> None:
        """Bulk-define a mapping of name -> object in the current frame."""
        for k, v in mapping.items():
            self.set(k, v)

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Detailed chain representation for debugging purposes."""
        chain = []
        env: Optional[Environment] = self
        while env is not None:
            with StringIO() as env_buf:
                env._write_vars(env_buf)
                chain.append(env_buf.getvalue())
            env = env.outer
        return "<Environment chain: " + " -> ".join(chain) + ">"
