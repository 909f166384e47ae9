"""Lazily forced (expression, environment) pairs.

A Promise is created for every argument of a lazy function call. It is forced
at most once: the first `force()` evaluates the expression in its environment
and caches the value (or the error), every later call returns the cache.
"""

from __future__ import annotations

import enum
import logging
import threading

from quasi import QuasiValue, EvaluatorFn
from quasi.errors import RecursivePromiseError
from quasi.types.environment import Environment
from quasi.types.expression import Expression

logger = logging.getLogger(__name__)


class PromiseState(enum.Enum):
    UNFORCED = "unforced"
    FORCING = "forcing"
    FORCED = "forced"
    FAILED = "failed"


class Promise:
    __slots__ = ("expr", "env", "state", "_value", "_error", "_evaluate_fn", "_lock")

    def __init__(self, expr: Expression, env: Environment, evaluate_fn: EvaluatorFn | None = None):
        self.expr: Expression = expr
        self.env: Environment = env
        self.state: PromiseState = PromiseState.UNFORCED
        self._value: QuasiValue = None
        self._error: BaseException | None = None
        self._evaluate_fn = evaluate_fn
        # Re-entrant so that a self-force on the same thread reaches the state check
        self._lock = threading.RLock()

    @classmethod
    def forced(cls, value: QuasiValue, expr: Expression | None = None, env: Environment | None = None) -> Promise:
        """An already-forced promise, for values handed in from Python."""
        from quasi.types.expression import as_expression

        p = cls(expr if expr is not None else as_expression(value), env if env is not None else Environment())
        p.state = PromiseState.FORCED
        p._value = value
        return p

    @property
    def is_forced(self) -> bool:
        return self.state is PromiseState.FORCED

    @property
    def value(self) -> QuasiValue:
        """The cached value; only meaningful once forced."""
        if self.state is not PromiseState.FORCED:
            raise ValueError(f"Promise is {self.state.value}, not forced")
        return self._value

    def force(self) -> QuasiValue:
        """Evaluate on first use and return the cached value (or re-raise the cached error).

        The lock is held while the expression is evaluated. Two threads that
        force promises depending on each other in opposite order therefore
        deadlock; on a single thread the same cycle raises
        RecursivePromiseError. An interrupt (KeyboardInterrupt, SystemExit)
        is not cached: the promise goes back to unforced.
        """
        with self._lock:
            match self.state:
                case PromiseState.FORCED:
                    return self._value
                case PromiseState.FAILED:
                    raise self._error
                case PromiseState.FORCING:
                    raise RecursivePromiseError(
                        f"Promise for {self.expr!r} was forced while already being forced"
                    )

            evaluate_fn = self._evaluate_fn
            if evaluate_fn is None:
                from quasi.evaluation.evaluator import evaluate as evaluate_fn

            self.state = PromiseState.FORCING
            logger.debug("Forcing promise %r", self.expr)
            try:
                value = evaluate_fn(self.expr, self.env)
            except Exception as e:
                self.state = PromiseState.FAILED
                self._error = e
                raise
            except BaseException:
                self.state = PromiseState.UNFORCED
                raise
            self._value = value
            self.state = PromiseState.FORCED
            return value

    def __repr__(self) -> str:
        return f"<Promise {self.state.value} {self.expr!r}>"
