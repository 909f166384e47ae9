"""Expression trees for quasi.

Code is captured as a small closed family of immutable nodes:

- ``Symbol``  an unresolved identifier
- ``Literal`` a self-evaluating constant
- ``Call``    an application of a head expression to ordered ``Argument``s

plus the three escape markers that only live between capture and resolution:
``Unquote``, ``UnquoteSplice`` and ``Define``. Rewriting always builds new
nodes, so subtrees may be shared freely between trees.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Union


class Symbol:
    __slots__ = ("name",)

    def __init__(self, name: str):
        if not isinstance(name, str) or not name:
            raise TypeError(f"Symbol name must be a non-empty string, got {name!r}")
        # Intern to ensure fast equality/hash
        object.__setattr__(self, "name", sys.intern(name))

    def __setattr__(self, key, value):
        raise AttributeError("Symbol is immutable")

    def __eq__(self, other) -> bool:
        return isinstance(other, Symbol) and self.name == other.name

    def __hash__(self) -> int:
        return hash(("Symbol", self.name))

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __str__(self):
        return self.name


_ATOMIC_TYPES = (bool, int, float, complex, str)


def is_atomic(value: Any) -> bool:
    return value is None or isinstance(value, _ATOMIC_TYPES)


@dataclass(frozen=True, slots=True, eq=False)
class Literal:
    """A constant. Non-atomic values (functions, lists) may be inlined by unquoting."""

    value: Any

    @property
    def is_atomic(self) -> bool:
        return is_atomic(self.value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Literal):
            return False
        # Literal(1) and Literal(True) are different constants
        if type(self.value) is not type(other.value):
            return False
        if self.value is other.value:
            return True
        try:
            return bool(self.value == other.value)
        except Exception:
            return False

    def __hash__(self) -> int:
        try:
            return hash(("Literal", type(self.value), self.value))
        except TypeError:
            return hash(("Literal", type(self.value), id(self.value)))


@dataclass(frozen=True, slots=True)
class Argument:
    value: Expression
    name: str | None = None

    @property
    def is_named(self) -> bool:
        return self.name is not None


@dataclass(frozen=True, slots=True)
class Call:
    head: Expression
    args: tuple[Argument, ...] = ()

    def __post_init__(self):
        args = tuple(a if isinstance(a, Argument) else Argument(as_expression(a)) for a in self.args)
        object.__setattr__(self, "args", args)

    @property
    def positional(self) -> tuple[Expression, ...]:
        return tuple(a.value for a in self.args if a.name is None)

    @property
    def named(self) -> dict[str, Expression]:
        return {a.name: a.value for a in self.args if a.name is not None}


# --- Escape markers ---

@dataclass(frozen=True, slots=True)
class Unquote:
    operand: Expression


@dataclass(frozen=True, slots=True)
class UnquoteSplice:
    operand: Expression


@dataclass(frozen=True, slots=True)
class Define:
    lhs: Expression
    rhs: Expression


Marker = Union[Unquote, UnquoteSplice, Define]
MARKER_TYPES = (Unquote, UnquoteSplice, Define)

Expression = Union[Symbol, Literal, Call, Unquote, UnquoteSplice, Define]


def is_expression(value: Any) -> bool:
    from quasi.types.quosure import QuotedClosure
    return isinstance(value, (Symbol, Literal, Call, QuotedClosure) + MARKER_TYPES)


def as_expression(value: Any) -> Expression:
    """Coerce an evaluated value to the Expression that stands for it in a tree.

    Expressions (and quoted closures) are returned unchanged; anything else is
    wrapped in a Literal.
    """
    if is_expression(value):
        return value
    if isinstance(value, Argument):
        raise TypeError("An Argument is not an expression; splice it into a call instead")
    return Literal(value)


# --- Construction helpers ---

def sym(name: str) -> Symbol:
    return Symbol(name)


def syms(names: Iterable[str]) -> list[Symbol]:
    return [Symbol(n) for n in names]


def lit(value: Any) -> Literal:
    return Literal(value)


def arg(value: Any, name: str | None = None) -> Argument:
    return Argument(as_expression(value), name)


def call(head: Expression | str, *args: Any, **named: Any) -> Call:
    """Build a call. A string head names a function; arguments are coerced with as_expression."""
    if isinstance(head, str):
        head = Symbol(head)
    built = [a if isinstance(a, Argument) else arg(a) for a in args]
    built.extend(arg(v, k) for k, v in named.items())
    return Call(as_expression(head), tuple(built))


# --- Traversal ---

def children(expr: Expression) -> Iterator[Expression]:
    """Immediate sub-expressions of a node, head first, in argument order."""
    from quasi.types.quosure import QuotedClosure

    match expr:
        case Call(head=head, args=args):
            yield head
            for a in args:
                yield a.value
        case Unquote(operand=op) | UnquoteSplice(operand=op):
            yield op
        case Define(lhs=lhs, rhs=rhs):
            yield lhs
            yield rhs
        case QuotedClosure(expr=inner):
            yield inner


def walk(expr: Expression) -> Iterator[Expression]:
    """Depth-first, pre-order traversal of every node in the tree."""
    stack = [expr]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(children(node))))


def has_markers(expr: Expression) -> bool:
    return any(isinstance(node, MARKER_TYPES) for node in walk(expr))
