"""Lazy function representation for quasi."""

from __future__ import annotations

from io import StringIO
from typing import Callable, Sequence

from quasi.types.environment import Environment
from quasi.types.expression import Argument, Expression

DOTS = "..."


class Lambda:
    """A first-class function whose arguments are passed as promises.

    `body` is either an Expression evaluated in the call frame, or a Python
    callable that receives the CallFrame itself (see `lazy_function`).
    """

    __slots__ = ("formals", "body", "env", "name")

    def __init__(
        self,
        formals: Sequence[str],
        body: Expression | Callable,
        env: Environment | None = None,
        name: str | None = None,
    ):
        self.formals: list[str] = list(formals)
        if len(set(self.formals)) != len(self.formals):
            raise ValueError(f"Duplicate formal parameters in {self.formals}")
        self.body = body
        # Avoid shared default Environment across instances
        self.env: Environment = env if env is not None else Environment()
        self.name = name

    @property
    def has_dots(self) -> bool:
        return DOTS in self.formals

    @property
    def is_native(self) -> bool:
        return callable(self.body)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("function(")
            buffer.write(", ".join(self.formals))
            buffer.write(")")
            if self.name:
                buffer.write(f" <{self.name}>")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)

    def bind(self, args: Sequence[Argument], caller_env: Environment):
        """
        Match the call-site arguments to this function's formals and return the
        CallFrame for evaluating the body. No argument is evaluated.

        Delegates to the shared binder in quasi.types.bind.
        """
        from quasi.types.bind import bind_arguments
        return bind_arguments(self, args, caller_env)


def lazy_function(*formals: str, env: Environment | None = None):
    """Decorator turning `fn(frame)` into a Lambda with the given formals.

        @lazy_function("x")
        def capture(frame):
            return capture_one(frame, "x")
    """
    def wrap(fn: Callable) -> Lambda:
        return Lambda(formals, fn, env, name=getattr(fn, "__name__", None))
    return wrap
