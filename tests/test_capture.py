import pytest

from quasi.errors import ArityError, MissingArgumentError, QuasiError, UnboundSymbolError
from quasi.evaluation.capture import (
    capture_all,
    capture_all_scoped,
    capture_one,
    capture_scoped,
    enexpr,
    enexprs,
)
from quasi.evaluation.evaluator import evaluate
from quasi.evaluation.tidy import eval_tidy
from quasi.types.environment import Environment
from quasi.types.expression import (
    Argument,
    Call,
    Define,
    Literal,
    Symbol,
    Unquote,
    UnquoteSplice,
    call,
    sym,
)
from quasi.types.lambda_fn import lazy_function
from quasi.types.promise import PromiseState
from quasi.types.quosure import QuotedClosure


@lazy_function("x")
def capture_x(frame):
    return capture_one(frame, "x"), frame


@lazy_function("...")
def capture_dots(frame):
    return capture_all(frame)


@pytest.fixture
def cenv(env):
    env.define("capture_x", capture_x)
    env.define("capture_dots", capture_dots)
    return env


def test_capture_one_never_forces(cenv):
    # forcing this argument would raise UnboundSymbolError
    written = call("undefined_fn", sym("nope"))
    captured, frame = evaluate(call("capture_x", written), cenv)

    assert captured == written
    assert frame.vars["x"].state is PromiseState.UNFORCED


def test_capture_one_of_unsupplied_parameter(cenv):
    @lazy_function("x", "y")
    def capture_y(frame):
        return capture_one(frame, "y")

    cenv.define("capture_y", capture_y)
    with pytest.raises(MissingArgumentError):
        evaluate(call("capture_y", 1), cenv)


def test_capture_one_of_unknown_name(cenv):
    @lazy_function("x")
    def capture_zz(frame):
        return capture_one(frame, "zz")

    cenv.define("capture_zz", capture_zz)
    with pytest.raises(UnboundSymbolError):
        evaluate(call("capture_zz", 1), cenv)


def test_capture_one_returns_call_site_markers_as_written(cenv):
    # resolving this tree would raise UnboundSymbolError
    written = Call(Symbol("g"), [Unquote(Symbol("nope"))])
    captured, _ = evaluate(Call(Symbol("capture_x"), [written]), cenv)
    assert captured is written


def test_enexpr_resolves_call_site_unquote(cenv):
    @lazy_function("x")
    def resolving(frame):
        return enexpr(frame, "x")

    cenv.update({"v": 10, "resolving": resolving})
    assert evaluate(Call(Symbol("resolving"), [Unquote(Symbol("v"))]), cenv) == Literal(10)
    with pytest.raises(UnboundSymbolError):
        evaluate(Call(Symbol("resolving"), [Call(Symbol("g"), [Unquote(Symbol("nope"))])]), cenv)


def test_capture_all_preserves_order_and_names(cenv):
    site = Call(
        Symbol("capture_dots"),
        (
            Argument(Symbol("a")),
            Argument(call("g", 1), "b"),
            Argument(Symbol("c")),
        ),
    )
    assert evaluate(site, cenv) == [
        Argument(Symbol("a")),
        Argument(call("g", 1), "b"),
        Argument(Symbol("c")),
    ]


def test_capture_all_excludes_matched_formals(cenv):
    @lazy_function("x", "...")
    def rest(frame):
        return capture_all(frame)

    cenv.define("rest", rest)
    site = Call(Symbol("rest"), (Argument(Symbol("p")), Argument(Symbol("q")), Argument(Symbol("r"), "x")))
    assert evaluate(site, cenv) == [Argument(Symbol("p")), Argument(Symbol("q"))]


def test_capture_all_keeps_call_site_markers(cenv):
    site = Call(
        Symbol("capture_dots"),
        [UnquoteSplice(Symbol("xs")), Symbol("r"), Define(Literal("nm"), Literal(1))],
    )
    assert evaluate(site, cenv) == [
        Argument(UnquoteSplice(Symbol("xs"))),
        Argument(Symbol("r")),
        Argument(Define(Literal("nm"), Literal(1))),
    ]


def test_enexprs_splices_and_defines_at_call_site(cenv):
    @lazy_function("...")
    def resolving_dots(frame):
        return enexprs(frame)

    cenv.update({"xs": [sym("p"), sym("q")], "resolving_dots": resolving_dots})
    site = Call(
        Symbol("resolving_dots"),
        [UnquoteSplice(Symbol("xs")), Symbol("r"), Define(Literal("nm"), Literal(1))],
    )
    assert evaluate(site, cenv) == [
        Argument(Symbol("p")),
        Argument(Symbol("q")),
        Argument(Symbol("r")),
        Argument(Literal(1), "nm"),
    ]


def test_capture_scoped_outlives_the_frame(cenv):
    @lazy_function("x")
    def capture_quo(frame):
        return capture_scoped(frame, "x")

    caller = cenv.extend({"a": 5})
    caller.define("capture_quo", capture_quo)
    quo = evaluate(call("capture_quo", call("+", sym("a"), 1)), caller)

    assert isinstance(quo, QuotedClosure)
    assert quo.expr == call("+", sym("a"), 1)
    assert quo.env is caller
    assert eval_tidy(quo) == 6


def test_capture_all_scoped(cenv):
    @lazy_function("...")
    def capture_quos(frame):
        return capture_all_scoped(frame)

    cenv.define("capture_quos", capture_quos)
    quos = evaluate(call("capture_quos", sym("a"), b=sym("c")), cenv)
    assert quos == [
        Argument(QuotedClosure(sym("a"), cenv)),
        Argument(QuotedClosure(sym("c"), cenv), "b"),
    ]


def test_capture_outside_a_call():
    with pytest.raises(QuasiError):
        capture_all(Environment())


def test_enexpr_special_form(env):
    evaluate(call("define", sym("h"), call("function", sym("x"), call("enexpr", sym("x")))), env)
    written = call("+", sym("undefined"), 1)
    assert evaluate(call("h", written), env) == written


def test_enexprs_and_enquos_special_forms(env):
    evaluate(call("define", sym("h"), call("function", sym("..."), call("enexprs", sym("...")))), env)
    evaluate(call("define", sym("k"), call("function", sym("..."), call("enquos"))), env)

    assert evaluate(call("h", sym("a"), n=2), env) == [Argument(sym("a")), Argument(Literal(2), "n")]
    assert evaluate(call("k", sym("a")), env) == [Argument(QuotedClosure(sym("a"), env))]


def test_enquo_special_form(env):
    evaluate(call("define", sym("h"), call("function", sym("x"), call("enquo", sym("x")))), env)
    caller = env.extend({"a": 2})
    quo = evaluate(call("h", call("*", sym("a"), 3)), caller)
    assert quo.env is caller
    assert eval_tidy(quo) == 6


def test_enexpr_requires_an_argument_name(env):
    evaluate(call("define", sym("h"), call("function", sym("x"), call("enexpr", 1))), env)
    with pytest.raises(QuasiError):
        evaluate(call("h", 1), env)


def test_forwarded_dots_keep_their_call_site(env):
    evaluate(call("define", sym("inner"), call("function", sym("..."), call("enexprs"))), env)
    evaluate(call("define", sym("outer"), call("function", sym("..."), call("inner", sym("...")))), env)

    assert evaluate(call("outer", sym("a"), sym("b")), env) == [Argument(sym("a")), Argument(sym("b"))]


def test_forwarding_dots_outside_a_function(env):
    evaluate(call("define", sym("inner"), call("function", sym("..."), call("enexprs"))), env)
    with pytest.raises(ArityError):
        evaluate(call("inner", sym("...")), env)
