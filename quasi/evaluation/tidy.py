"""Tidy evaluation of quoted closures.

`eval_tidy(closure, data_mask)` evaluates `closure.expr` in `closure.env`,
with the bindings of an optional data mask consulted first.
"""

from __future__ import annotations

import logging
from typing import Mapping

from quasi import QuasiValue
from quasi.errors import QuasiTypeError
from quasi.types.data_mask import DataMask, nearest_mask
from quasi.types.environment import Environment
from quasi.types.expression import as_expression
from quasi.types.promise import Promise
from quasi.types.quosure import QuotedClosure

logger = logging.getLogger(__name__)


def as_data_mask(data: DataMask | Environment | Mapping[str, QuasiValue] | None,
                 outer: Environment | None = None) -> DataMask:
    """Build a mask parented by `outer` from a mapping or an environment's own bindings."""
    if data is None:
        return DataMask(outer=outer)
    if isinstance(data, Environment):
        data = data.vars
    if not isinstance(data, Mapping):
        raise QuasiTypeError(f"A data mask must be a mapping or an environment, got {type(data).__name__}")
    return DataMask.from_mapping(data, outer)


def eval_tidy(closure: QuotedClosure, data_mask=None, env: Environment | None = None) -> QuasiValue:
    """Evaluate a quoted closure against its own environment.

    With a data mask, names bound by the mask shadow the closure's captured
    scope. A bare expression is first paired with `env` (an empty scope when
    omitted).
    """
    if not isinstance(closure, QuotedClosure):
        closure = QuotedClosure(as_expression(closure), env if env is not None else Environment())
    if data_mask is None:
        scope = closure.env
    elif isinstance(data_mask, DataMask):
        scope = data_mask.rebase(closure.env)
    else:
        scope = as_data_mask(data_mask, closure.env)
    logger.debug("eval_tidy %r with mask %s", closure.expr, data_mask is not None)
    return Promise(closure.expr, scope).force()


def evaluate_embedded(closure: QuotedClosure, env: Environment) -> QuasiValue:
    """Evaluate a quoted closure found inside a tree being evaluated in `env`.

    The closure's own scope wins over `env`, but an active data mask stays in
    front of it.
    """
    mask = nearest_mask(env)
    if mask is None:
        return eval_tidy(closure)
    return eval_tidy(closure, mask)
