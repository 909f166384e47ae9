from quasi import EvaluatorFn, QuasiValue
from quasi.errors import ArityError
from quasi.types.environment import Environment
from quasi.types.expression import Argument


def if_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    if len(args) not in (2, 3):
        raise ArityError("if requires a condition, a then-expression and an optional else-expression")

    cond = evaluate_fn(args[0].value, env)
    # Python truthiness; the branch not taken is never evaluated
    if cond:
        return evaluate_fn(args[1].value, env)
    elif len(args) > 2:
        return evaluate_fn(args[2].value, env)
    else:
        return None
