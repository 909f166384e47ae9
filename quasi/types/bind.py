from __future__ import annotations

import logging
from typing import Sequence

from quasi.errors import ArityError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Symbol
from quasi.types.frame import CallFrame, nearest_frame
from quasi.types.missing import MISSING
from quasi.types.promise import Promise

logger = logging.getLogger(__name__)


def _expand_forwarded_dots(
    args: Sequence[Argument], caller_env: Environment
) -> list[tuple[str | None, Promise]]:
    """Wrap every argument in a promise over the caller's environment.

    A bare positional `...` forwards the caller's own variadic arguments, keeping
    their promises (and therefore their original environments).
    """
    entries: list[tuple[str | None, Promise]] = []
    for a in args:
        if a.name is None and a.value == Symbol("..."):
            frame = nearest_frame(caller_env)
            if frame is None:
                raise ArityError("'...' used in a call outside of a function with '...'")
            entries.extend(frame.dots)
            continue
        entries.append((a.name, Promise(a.value, caller_env)))
    return entries


def bind_arguments(fn, args: Sequence[Argument], caller_env: Environment) -> CallFrame:
    """
    Single source of truth for argument matching in quasi.

    - Named arguments match formals by exact name.
    - Positional arguments fill the remaining formals that precede `...`, in order.
    - Everything else goes to `...` when the function has it, otherwise it is an
      ArityError.
    - Formals left unmatched are bound to MISSING.

    Returns a new CallFrame whose outer is the function's closure env. Nothing
    is forced.
    """
    frame = CallFrame(outer=fn.env, function=fn)
    formals = list(fn.formals)
    has_dots = "..." in formals
    positional_formals = formals[: formals.index("...")] if has_dots else formals
    named_formals = [f for f in formals if f != "..."]

    bound: dict[str, Promise] = {}
    positional: list[tuple[int, Promise]] = []
    dots: list[tuple[int, str | None, Promise]] = []

    for index, (name, promise) in enumerate(_expand_forwarded_dots(args, caller_env)):
        if name is None:
            positional.append((index, promise))
        elif name in named_formals:
            if name in bound:
                raise ArityError(f"Formal argument '{name}' matched by multiple actual arguments")
            bound[name] = promise
        elif has_dots:
            dots.append((index, name, promise))
        else:
            raise ArityError(f"Unused argument '{name}' in call to {fn}")

    unfilled = [f for f in positional_formals if f not in bound]
    for (index, promise) in positional:
        if unfilled:
            bound[unfilled.pop(0)] = promise
        elif has_dots:
            dots.append((index, None, promise))
        else:
            raise ArityError(f"Too many positional arguments in call to {fn}")

    for f in named_formals:
        frame.define(f, bound.get(f, MISSING))
    # Call-site order, regardless of whether an argument was named
    frame.dots = [(name, promise) for _, name, promise in sorted(dots, key=lambda d: d[0])]

    logger.debug("Bound call frame for %s: %s", fn, frame)
    return frame
