"""Built-in functions for the quasi base environment.

Arithmetic, comparison, list construction, expression construction helpers
and the tidy-evaluation entry points exposed to expression trees. Builtins
are ordinary Python callables: they receive evaluated arguments.
"""
from __future__ import annotations

import functools
import operator

from quasi import QuasiValue
from quasi.errors import ArityError, QuasiTypeError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Expression, Symbol, as_expression, call
from quasi.types.frame import CallFrame
from quasi.types.lambda_fn import lazy_function
from quasi.types.missing import MISSING
from quasi.types.quosure import QuotedClosure
from quasi.evaluation.evaluator import force_binding
from quasi.evaluation.tidy import as_data_mask, eval_tidy


# -------------------------------
# Arithmetic
# -------------------------------
def _numeric(name: str, fn):
    @functools.wraps(fn)
    def wrapper(*args: QuasiValue) -> QuasiValue:
        try:
            return fn(*args)
        except (TypeError, ZeroDivisionError) as e:
            raise QuasiTypeError(f"Invalid arguments to {name}: {e}") from e
    return wrapper


def add(*args: QuasiValue) -> QuasiValue:
    """Return the numeric sum of all arguments."""
    return functools.reduce(operator.add, args, 0)


def sub(*args: QuasiValue) -> QuasiValue:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    if not args:
        raise ArityError("- requires at least 1 argument")
    if len(args) == 1:
        return -args[0]
    return functools.reduce(operator.sub, args)


def mul(*args: QuasiValue) -> QuasiValue:
    return functools.reduce(operator.mul, args, 1)


def div(*args: QuasiValue) -> QuasiValue:
    if len(args) != 2:
        raise ArityError("/ requires exactly 2 arguments")
    return args[0] / args[1]


def _comparison(name: str, op):
    def compare(a: QuasiValue, b: QuasiValue) -> bool:
        try:
            return op(a, b)
        except TypeError as e:
            raise QuasiTypeError(f"Cannot compare with {name}: {e}") from e
    compare.__name__ = f"compare_{op.__name__}"
    return compare


# -------------------------------
# Values and expressions
# -------------------------------
def list_builtin(*args: QuasiValue) -> list:
    return list(args)


def dict_builtin(**named: QuasiValue) -> dict:
    return dict(named)


def sym_builtin(name: QuasiValue) -> Symbol:
    if isinstance(name, Symbol):
        return name
    if not isinstance(name, str):
        raise QuasiTypeError(f"sym expects a string, got {name!r}")
    return Symbol(name)


def call2(head: QuasiValue, *args: QuasiValue, **named: QuasiValue) -> Expression:
    """Build a call from a function name (or expression) and argument values."""
    try:
        return call(head, *args, **named)
    except TypeError as e:
        raise QuasiTypeError(str(e)) from e


def new_quosure(expr: QuasiValue, env: Environment) -> QuotedClosure:
    if not isinstance(env, Environment):
        raise QuasiTypeError(f"new_quosure expects an environment, got {env!r}")
    return QuotedClosure(as_expression(expr), env)


def quo_get_expr(quo: QuasiValue) -> Expression:
    if not isinstance(quo, QuotedClosure):
        raise QuasiTypeError(f"Expected a quoted closure, got {quo!r}")
    return quo.expr


def quo_get_env(quo: QuasiValue) -> Environment:
    if not isinstance(quo, QuotedClosure):
        raise QuasiTypeError(f"Expected a quoted closure, got {quo!r}")
    return quo.env


def arg_names(args: list[Argument]) -> list[str | None]:
    return [a.name for a in args]


@lazy_function("expr", "data")
def eval_tidy_builtin(frame: CallFrame) -> QuasiValue:
    """eval_tidy(expr, data): a bare expression is evaluated in the caller's scope."""
    written = frame.vars["expr"]
    closure = force_binding("expr", written)
    data = frame.vars["data"]
    data = None if data is MISSING else force_binding("data", data)
    return eval_tidy(closure, data, env=written.env)


def register(env: Environment) -> None:
    """Register all builtin functions into the given environment."""
    env.update(
        {
            "+": _numeric("+", add),
            "-": _numeric("-", sub),
            "*": _numeric("*", mul),
            "/": _numeric("/", div),
            "==": _comparison("==", operator.eq),
            "!=": _comparison("!=", operator.ne),
            "<": _comparison("<", operator.lt),
            "<=": _comparison("<=", operator.le),
            ">": _comparison(">", operator.gt),
            ">=": _comparison(">=", operator.ge),
            "list": list_builtin,
            "dict": dict_builtin,
            "sym": sym_builtin,
            "call2": call2,
            "eval_tidy": eval_tidy_builtin,
            "as_data_mask": as_data_mask,
            "new_quosure": new_quosure,
            "quo_get_expr": quo_get_expr,
            "quo_get_env": quo_get_env,
            "names": arg_names,
        }
    )


def base_env() -> Environment:
    """A fresh root environment holding the builtins."""
    env = Environment()
    register(env)
    return env
