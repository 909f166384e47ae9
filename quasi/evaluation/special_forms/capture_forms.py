from quasi import EvaluatorFn, QuasiValue
from quasi.errors import ArityError, QuasiTypeError
from quasi.types.environment import Environment
from quasi.types.expression import Argument, Symbol
from quasi.evaluation.capture import enexpr, enexprs, enquo, enquos
from quasi.evaluation.special_forms.quote_forms import single_argument


def _argument_name(args: tuple[Argument, ...], form: str) -> str:
    target = single_argument(args, form)
    if not isinstance(target, Symbol):
        raise QuasiTypeError(f"{form} expects the name of an argument, got {target!r}")
    return target.name


def _check_dots(args: tuple[Argument, ...], form: str) -> None:
    # enexprs() and enexprs(...) are both accepted
    if args and (len(args) != 1 or args[0].name is not None or args[0].value != Symbol("...")):
        raise ArityError(f"{form} only accepts '...'")


def enexpr_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    return enexpr(env, _argument_name(args, "enexpr"))


def enquo_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    return enquo(env, _argument_name(args, "enquo"))


def enexprs_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    _check_dots(args, "enexprs")
    return enexprs(env)


def enquos_form(
    args: tuple[Argument, ...], env: Environment, evaluate_fn: EvaluatorFn
) -> QuasiValue:
    _check_dots(args, "enquos")
    return enquos(env)
