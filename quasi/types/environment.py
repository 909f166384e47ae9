"""Runtime environment for quasi.

The Environment stores bindings of names to values (or to unforced Promises)
and supports nested scopes via an `outer` link. The engine itself only reads
environments; new bindings are added by the host evaluator (call frames,
`define`) and by the Python code that sets up a scope.
"""

from __future__ import annotations

from io import StringIO
from typing import Mapping, Optional

from quasi import QuasiValue
from quasi.errors import UnboundSymbolError
from quasi.types.expression import Symbol


def _name_of(name: str | Symbol) -> str:
    if isinstance(name, Symbol):
        return name.name
    if not isinstance(name, str):
        raise TypeError(f"Binding names must be strings or Symbols, got {name!r}")
    return name


class Environment:
    """Hierarchical mapping from names to values."""

    __slots__ = ("vars", "outer")

    def __init__(
        self,
        bindings: Mapping[str, QuasiValue] | None = None,
        outer: Optional[Environment] = None,
    ):
        self.vars: dict[str, QuasiValue] = {}
        self.outer: Environment | None = outer
        if bindings:
            self.update(bindings)

    def define(self, name: str | Symbol, value: QuasiValue) -> None:
        """Bind `name` to `value` in this frame only."""
        self.vars[_name_of(name)] = value

    def update(self, mapping: Mapping[str, QuasiValue]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        for k, v in mapping.items():
            self.vars[_name_of(k)] = v

    def extend(self, bindings: Mapping[str, QuasiValue] | None = None) -> Environment:
        """Return a new child scope holding `bindings`; this scope is left untouched."""
        return Environment(bindings, outer=self)

    def find(self, name: str | Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `name`."""
        key = _name_of(name)
        env: Optional[Environment] = self
        while env is not None:
            if key in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: str | Symbol) -> QuasiValue:
        """Look up the raw binding of `name`, without forcing promises.

        Raises UnboundSymbolError if no scope in the chain binds it.
        """
        env = self.find(name)
        if env is None:
            raise UnboundSymbolError(f"Cannot lookup unbound symbol {_name_of(name)}")
        return env.vars[_name_of(name)]

    def __contains__(self, name: str | Symbol) -> bool:
        return self.find(name) is not None

    def chain(self):
        """Yield this scope and every ancestor, innermost first."""
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.outer

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        first = True
        for k, v in self.vars.items():
            if not first:
                buffer.write(", ")
            buffer.write(f"{k}: {v!r}")
            first = False
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Chain representation for debugging purposes."""
        with StringIO() as buffer:
            buffer.write(f"<{type(self).__name__} chain: ")
            chain = []
            for env in self.chain():
                env_buf = StringIO()
                env._write_vars(env_buf)
                chain.append(env_buf.getvalue())
            buffer.write(" -> ".join(chain))
            buffer.write(">")
            return buffer.getvalue()
