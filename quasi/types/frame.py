"""Call frames of lazy functions."""

from __future__ import annotations

from typing import Optional

from quasi.types.environment import Environment
from quasi.types.promise import Promise


class CallFrame(Environment):
    """The scope a Lambda body runs in.

    Each supplied formal is bound to an unforced Promise over the caller's
    environment, each unsupplied formal to MISSING. Arguments matched to the
    `...` formal are kept in `dots`, in call-site order, with their names.
    """

    __slots__ = ("dots", "function")

    def __init__(self, outer: Optional[Environment] = None, function=None):
        super().__init__(outer=outer)
        self.dots: list[tuple[str | None, Promise]] = []
        self.function = function


def nearest_frame(env: Environment) -> CallFrame | None:
    """The innermost CallFrame in the chain starting at `env`."""
    for scope in env.chain():
        if isinstance(scope, CallFrame):
            return scope
    return None
