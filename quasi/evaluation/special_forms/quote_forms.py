from quasi import EvaluatorFn, QuasiValue
from quasi.errors import ArityError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Expression
from quasi.types.quosure import QuotedClosure
from quasi.evaluation.resolver import resolve, resolve_arguments


def single_argument(args: tuple[Argument, ...], form: str) -> Expression:
    if len(args) != 1 or args[0].name is not None:
        raise ArityError(f"{form} expects exactly 1 unnamed argument")
    return args[0].value


def quote_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    # Plain quotation: markers are left in place
    return single_argument(args, "quote")


def expr_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    return resolve(single_argument(args, "expr"), env, evaluate_fn)


def exprs_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    return list(resolve_arguments(args, env, evaluate_fn))


def quo_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    return QuotedClosure(resolve(single_argument(args, "quo"), env, evaluate_fn), env)


def quos_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    return [
        a if isinstance(a.value, QuotedClosure) else Argument(QuotedClosure(a.value, env), a.name)
        for a in resolve_arguments(args, env, evaluate_fn)
    ]
