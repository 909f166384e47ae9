"""Quasiquotation: resolve escape markers in a captured tree.

`resolve(expr, env)` walks the tree once, depth first, and rewrites every
marker it meets:

- ``Unquote(op)``        the value of `op` in `env`, as an Expression
- ``UnquoteSplice(op)``  the elements of the value of `op`, as sibling arguments
- ``Define(lhs, rhs)``   a named argument whose name is the value of `lhs`

Everything that is not a marker operand stays quoted. Subtrees without
markers are returned as the very same objects, so resolving a marker-free
tree gives back the input.

The walk keeps its own work stack instead of recursing, so how deep a tree
may be is decided by QUASI_MAX_DEPTH and not by the interpreter's recursion
limit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from quasi import QuasiValue, EvaluatorFn
from quasi.config import get_max_depth
from quasi.errors import (
    DefineNameError,
    MarkerContextError,
    QuasiTypeError,
    ResolutionDepthError,
    SpliceContextError,
    SpliceTypeError,
)
from quasi.types.environment import Environment
from quasi.types.expression import (
    Argument,
    Call,
    Define,
    Expression,
    Symbol,
    Unquote,
    UnquoteSplice,
    as_expression,
    has_markers,
)

logger = logging.getLogger(__name__)


def _default_evaluator() -> EvaluatorFn:
    from quasi.evaluation.evaluator import evaluate
    return evaluate


def _coerce(value: QuasiValue) -> Expression:
    try:
        expr = as_expression(value)
    except TypeError as e:
        raise QuasiTypeError(str(e)) from e
    # Substituted trees are not re-expanded, so they must already be marker free
    if has_markers(expr):
        raise MarkerContextError(f"Unquoted value {expr!r} contains unresolved escape markers")
    return expr


def _splice_items(value: QuasiValue) -> list[Argument]:
    """One level of flattening: each element becomes one argument."""
    if isinstance(value, Mapping):
        items = []
        for k, v in value.items():
            if not isinstance(k, str):
                raise SpliceTypeError(f"Spliced mapping keys must be strings, got {k!r}")
            items.append(Argument(_coerce(v), k))
        return items
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise SpliceTypeError(f"Unquote-splice must produce a sequence, got {type(value).__name__}")
    return [
        Argument(_coerce(item.value), item.name) if isinstance(item, Argument) else Argument(_coerce(item))
        for item in value
    ]


def _define_name(value: QuasiValue) -> str:
    if isinstance(value, Symbol):
        return value.name
    if not isinstance(value, str) or not value:
        raise DefineNameError(f"The name of a define marker must be a non-empty string, got {value!r}")
    return value


# Work items for the explicit-stack walk. Resolving an _EXPR item leaves one
# Expression on the result stack, an _ARG item leaves a tuple of Arguments.
_EXPR, _ARG, _CALL, _NAMED, _KEEP = range(5)


def _run(
    tasks: list[tuple], env: Environment, evaluate_fn: EvaluatorFn, max_depth: int
) -> list:
    results: list = []
    while tasks:
        kind, item, depth = tasks.pop()

        if kind == _EXPR:
            if depth > max_depth:
                raise ResolutionDepthError(f"Expression nested deeper than {max_depth} levels")
            match item:
                case Unquote(operand=op):
                    value = evaluate_fn(op, env)
                    logger.debug("Unquoted %r -> %r", op, value)
                    results.append(_coerce(value))
                case UnquoteSplice():
                    raise SpliceContextError("Unquote-splice can only be used as an unnamed call argument")
                case Define():
                    raise MarkerContextError("Define can only be used as an unnamed call argument")
                case Call(head=head, args=args):
                    if isinstance(head, UnquoteSplice):
                        raise SpliceContextError("Unquote-splice cannot be used as the head of a call")
                    # Head first, then the arguments left to right
                    tasks.append((_CALL, item, depth))
                    tasks.extend((_ARG, a, depth + 1) for a in reversed(args))
                    tasks.append((_EXPR, head, depth + 1))
                case _:
                    # Symbols, literals and embedded quoted closures are already literal
                    results.append(item)

        elif kind == _ARG:
            match item.value:
                case UnquoteSplice(operand=op):
                    if item.name is not None:
                        raise SpliceContextError(
                            f"Unquote-splice cannot be the value of named argument '{item.name}'"
                        )
                    spliced = _splice_items(evaluate_fn(op, env))
                    logger.debug("Spliced %r -> %d argument(s)", op, len(spliced))
                    results.append(tuple(spliced))
                case Define(lhs=lhs, rhs=rhs):
                    if item.name is not None:
                        raise MarkerContextError(f"Define cannot be the value of named argument '{item.name}'")
                    # `!!nm := value`: the unquote on the name side is implied
                    name_expr = lhs.operand if isinstance(lhs, Unquote) else lhs
                    name = _define_name(evaluate_fn(name_expr, env))
                    logger.debug("Defined argument name %r", name)
                    tasks.append((_NAMED, name, depth))
                    tasks.append((_EXPR, rhs, depth + 1))
                case value:
                    tasks.append((_KEEP, item, depth))
                    tasks.append((_EXPR, value, depth))

        elif kind == _NAMED:
            results.append((Argument(results.pop(), item),))

        elif kind == _KEEP:
            new_value = results.pop()
            results.append((item,) if new_value is item.value else (Argument(new_value, item.name),))

        else:
            start = len(results) - len(item.args)
            new_args = results[start:]
            del results[start:]
            new_head = results.pop()
            if new_head is item.head and all(
                len(r) == 1 and r[0] is a for r, a in zip(new_args, item.args)
            ):
                results.append(item)
            else:
                results.append(Call(new_head, tuple(a for r in new_args for a in r)))
    return results


def resolve_arguments(
    args: Sequence[Argument],
    env: Environment,
    evaluate_fn: EvaluatorFn | None = None,
    depth: int = 0,
    max_depth: int | None = None,
) -> tuple[Argument, ...]:
    """Resolve a call's argument list, expanding splices and define markers in place."""
    if evaluate_fn is None:
        evaluate_fn = _default_evaluator()
    if max_depth is None:
        max_depth = get_max_depth()
    tasks = [(_ARG, a, depth) for a in reversed(args)]
    return tuple(a for resolved in _run(tasks, env, evaluate_fn, max_depth) for a in resolved)


def resolve(expr: Expression, env: Environment, evaluate_fn: EvaluatorFn | None = None) -> Expression:
    """Resolve every escape marker in `expr`, evaluating operands in `env`.

    The returned tree contains no markers. Raises SpliceContextError,
    MarkerContextError or DefineNameError for misplaced or malformed markers,
    and ResolutionDepthError for trees nested deeper than QUASI_MAX_DEPTH;
    errors raised while evaluating an operand propagate unchanged.
    """
    if evaluate_fn is None:
        evaluate_fn = _default_evaluator()
    [resolved] = _run([(_EXPR, expr, 0)], env, evaluate_fn, get_max_depth())
    return resolved
