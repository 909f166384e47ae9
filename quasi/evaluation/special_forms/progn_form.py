from quasi import EvaluatorFn, QuasiValue
from quasi.types.environment import Environment
from quasi.types.expression import Argument


def progn_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    result: QuasiValue = None
    for a in args:
        result = evaluate_fn(a.value, env)
    return result
