"""Capture primitives: read the expressions behind a call's arguments.

Each primitive takes the CallFrame of a lazy function (or any scope nested in
it) and returns what the caller wrote, exactly as written and without forcing
a single promise. Escape markers in the captured trees are left in place.

`enexpr`, `enquo`, `enexprs` and `enquos` are the resolving variants behind
the special forms of the same names: they hand the captured trees to the
resolver in the caller's environment, so `!!` written at the call site is
honoured.
"""

from __future__ import annotations

from quasi import QuasiValue
from quasi.errors import MissingArgumentError, QuasiError, UnboundSymbolError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Expression, Symbol, as_expression
from quasi.types.frame import CallFrame, nearest_frame
from quasi.types.missing import MISSING
from quasi.types.promise import Promise
from quasi.types.quosure import QuotedClosure
from quasi.evaluation.resolver import resolve, resolve_arguments


def _frame_of(env: Environment) -> CallFrame:
    frame = nearest_frame(env)
    if frame is None:
        raise QuasiError("Arguments can only be captured inside a function call")
    return frame


def _binding(env: Environment, name: str | Symbol) -> QuasiValue:
    if isinstance(name, Symbol):
        name = name.name
    scope = env.find(name)
    if scope is None:
        raise UnboundSymbolError(f"Cannot capture unbound argument {name}")
    value = scope.vars[name]
    if value is MISSING:
        raise MissingArgumentError(f"Argument '{name}' was not supplied")
    return value


def _written(frame: Environment, name: str | Symbol) -> tuple[Expression, Environment]:
    value = _binding(frame, name)
    if isinstance(value, Promise):
        return value.expr, value.env
    return as_expression(value), frame


def _scoped(expr: Expression, env: Environment) -> QuotedClosure:
    return expr if isinstance(expr, QuotedClosure) else QuotedClosure(expr, env)


def _written_dots(frame: Environment) -> list[tuple[Argument, Environment]]:
    return [(Argument(promise.expr, name), promise.env) for name, promise in _frame_of(frame).dots]


def _resolved_dots(frame: Environment) -> list[tuple[Argument, Environment]]:
    return [
        (resolved, env)
        for a, env in _written_dots(frame)
        for resolved in resolve_arguments((a,), env)
    ]


def capture_one(frame: Environment, name: str | Symbol) -> Expression:
    """The expression supplied for parameter `name`, unevaluated."""
    expr, _ = _written(frame, name)
    return expr


def capture_scoped(frame: Environment, name: str | Symbol) -> QuotedClosure:
    """Like capture_one, paired with the environment the argument was written in."""
    expr, env = _written(frame, name)
    return QuotedClosure(expr, env)


def capture_all(frame: Environment) -> list[Argument]:
    """Every variadic argument of the call, in call-site order, with its name."""
    return [a for a, _ in _written_dots(frame)]


def capture_all_scoped(frame: Environment) -> list[Argument]:
    """Like capture_all, but each argument's value is a QuotedClosure."""
    return [Argument(_scoped(a.value, env), a.name) for a, env in _written_dots(frame)]


def enexpr(frame: Environment, name: str | Symbol) -> Expression:
    expr, env = _written(frame, name)
    return resolve(expr, env)


def enquo(frame: Environment, name: str | Symbol) -> QuotedClosure:
    expr, env = _written(frame, name)
    return QuotedClosure(resolve(expr, env), env)


def enexprs(frame: Environment) -> list[Argument]:
    """Variadic arguments with call-site splices and define markers expanded."""
    return [a for a, _ in _resolved_dots(frame)]


def enquos(frame: Environment) -> list[Argument]:
    return [Argument(_scoped(a.value, env), a.name) for a, env in _resolved_dots(frame)]
