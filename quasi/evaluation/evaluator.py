"""Host evaluator for quasi expression trees.

Evaluates Literals, looks up Symbols (forcing promises on the way), dispatches
special forms by the name of a call's head and otherwise applies the evaluated
head: lazily for Lambdas, eagerly for Python callables.
"""

from __future__ import annotations

from quasi import QuasiValue
from quasi.errors import MarkerContextError, MissingArgumentError
from quasi.types.environment import Environment
from quasi.types.expression import Call, Define, Literal, Symbol, Unquote, UnquoteSplice
from quasi.types.missing import MISSING
from quasi.types.promise import Promise
from quasi.types.quosure import QuotedClosure
from quasi.evaluation.apply import apply
from quasi.evaluation.special_forms import SPECIAL_FORMS


def force_binding(name: str, value: QuasiValue) -> QuasiValue:
    """Turn a raw binding into a value: force promises, reject missing arguments."""
    if isinstance(value, Promise):
        value = value.force()
    if value is MISSING:
        raise MissingArgumentError(f"Argument '{name}' is missing, with no default")
    return value


def evaluate(expr, env: Environment) -> QuasiValue:
    match expr:
        case Literal(value=value):
            return value
        case Symbol(name=name):
            return force_binding(name, env.lookup(name))
        case Call(head=Symbol(name=name), args=args) if name in SPECIAL_FORMS:
            return SPECIAL_FORMS[name](args, env, evaluate)
        case Call(head=head, args=args):
            fn = evaluate(head, env)
            return apply(fn, args, env, evaluate)
        case QuotedClosure():
            from quasi.evaluation.tidy import evaluate_embedded
            return evaluate_embedded(expr, env)
        case Unquote():
            raise MarkerContextError("Unquote is not valid outside of quasiquotation")
        case UnquoteSplice():
            raise MarkerContextError("Unquote-splice is not valid outside of quasiquotation")
        case Define():
            raise MarkerContextError("Define is not valid outside of a quasiquoted argument")

    # --- Plain Python values return as-is ---
    return expr
