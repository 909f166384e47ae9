"""Application engine for quasi.

- Lambdas are applied lazily: each argument becomes a Promise over the caller's
  environment, bound into a fresh CallFrame by quasi.types.bind.
- Python callables are applied eagerly with positional and keyword arguments.
"""

from __future__ import annotations

import logging
from typing import Sequence

from quasi import QuasiValue, EvaluatorFn
from quasi.errors import ArityError, NotCallableError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Symbol
from quasi.types.frame import nearest_frame
from quasi.types.lambda_fn import Lambda

logger = logging.getLogger(__name__)


def apply_lambda(fn: Lambda, args: Sequence[Argument], caller_env: Environment, evaluate_fn: EvaluatorFn) -> QuasiValue:
    frame = fn.bind(args, caller_env)
    if fn.is_native:
        return fn.body(frame)
    return evaluate_fn(fn.body, frame)


def _eager_arguments(args: Sequence[Argument], env: Environment, evaluate_fn: EvaluatorFn):
    positional: list[QuasiValue] = []
    named: dict[str, QuasiValue] = {}

    def _add(name, value):
        if name is None:
            positional.append(value)
        elif name in named:
            raise ArityError(f"Argument '{name}' supplied more than once")
        else:
            named[name] = value

    for a in args:
        if a.name is None and a.value == Symbol("..."):
            frame = nearest_frame(env)
            if frame is None:
                raise ArityError("'...' used in a call outside of a function with '...'")
            for name, promise in frame.dots:
                _add(name, promise.force())
            continue
        _add(a.name, evaluate_fn(a.value, env))
    return positional, named


def apply(fn: QuasiValue, args: Sequence[Argument], env: Environment, evaluate_fn: EvaluatorFn) -> QuasiValue:
    """Apply either a Lambda or a Python callable.

    - For Lambda, defer to apply_lambda (arguments stay unevaluated promises).
    - For Python callables (builtins), evaluate the arguments left to right and
      call with `fn(*positional, **named)`.
    - Otherwise, raise NotCallableError.
    """
    if isinstance(fn, Lambda):
        return apply_lambda(fn, args, env, evaluate_fn)
    elif callable(fn):
        positional, named = _eager_arguments(args, env, evaluate_fn)
        return fn(*positional, **named)
    else:
        raise NotCallableError(f"Cannot apply non-function {fn!r}")
