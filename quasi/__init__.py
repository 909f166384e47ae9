# Core type aliases for the quasi data model.
# Code is represented by the immutable Expression variants in quasi.types.expression;
# runtime values are plain Python objects (int, float, str, callables, ...).
#
# Naming guidance:
# - QuasiValue:  Use in evaluator/runtime code to denote evaluated values.
# - EvaluatorFn: The host evaluator handed to special forms and the resolver.

import logging
from typing import Any, Callable

# Runtime value alias
QuasiValue = Any

# Evaluator function type: evaluate(expr, env) -> value
EvaluatorFn = Callable[..., QuasiValue]

logging.getLogger(__name__).addHandler(logging.NullHandler())
