from quasi import EvaluatorFn, QuasiValue
from quasi.errors import ArityError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Symbol


def define_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    """
    define(name, value)
    Binds in the current scope only and returns the value.
    """
    if len(args) != 2 or not isinstance(args[0].value, Symbol):
        raise ArityError("define requires a name and a value")

    name, val_expr = args[0].value, args[1].value
    value = evaluate_fn(val_expr, env)  # normal evaluation
    env.define(name, value)
    return value
