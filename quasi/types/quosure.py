from __future__ import annotations

from dataclasses import dataclass

from quasi.types.environment import Environment
from quasi.types.expression import Expression


@dataclass(frozen=True, slots=True, eq=False)
class QuotedClosure:
    """An expression paired with the environment it was captured in.

    The environment is borrowed: the closure keeps it alive but never mutates it.
    Two closures are equal when their expressions are equal and they share the
    very same environment object.
    """

    expr: Expression
    env: Environment

    def __eq__(self, other) -> bool:
        return isinstance(other, QuotedClosure) and self.env is other.env and self.expr == other.expr

    def __hash__(self) -> int:
        return hash((self.expr, id(self.env)))

    def __repr__(self) -> str:
        return f"<QuotedClosure {self.expr!r} env={id(self.env):#x}>"
