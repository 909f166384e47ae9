from quasi import EvaluatorFn, QuasiValue
from quasi.errors import ArityError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Literal, Symbol
from quasi.types.lambda_fn import Lambda


def lambda_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    """
    function(x, y, ..., body)
    Every argument but the last names a formal; the last one is the body.
    A function with no body returns None.
    """
    if not args:
        return Lambda([], Literal(None), env)

    *params, body = args
    formals = []
    for p in params:
        if p.name is not None or not isinstance(p.value, Symbol):
            raise ArityError(f"function parameters must be bare names, got {p.value!r}")
        formals.append(p.value.name)
    if body.name is not None:
        raise ArityError("The body of a function cannot be a named argument")
    return Lambda(formals, body.value, env)
