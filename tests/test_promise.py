import threading
import time

import pytest

from quasi.errors import RecursivePromiseError, UnboundSymbolError
from quasi.types.environment import Environment
from quasi.types.expression import Symbol, call, sym
from quasi.types.promise import Promise, PromiseState


def test_force_evaluates_once_and_memoises(env, counter):
    env.define("tick", counter)
    p = Promise(call("tick"), env)
    assert p.state is PromiseState.UNFORCED

    first = p.force()
    second = p.force()

    assert first is second
    assert len(counter.calls) == 1
    assert p.state is PromiseState.FORCED
    assert p.value is first


def test_value_before_force_is_an_error(env):
    p = Promise(sym("a"), env)
    with pytest.raises(ValueError):
        p.value


def test_self_referencing_promise_is_recursive():
    env = Environment()
    p = Promise(Symbol("p"), env)
    env.define("p", p)

    with pytest.raises(RecursivePromiseError):
        p.force()


def test_recursive_promise_stays_failed():
    env = Environment()
    p = Promise(Symbol("p"), env)
    env.define("p", p)

    with pytest.raises(RecursivePromiseError) as first:
        p.force()
    with pytest.raises(RecursivePromiseError) as second:
        p.force()
    assert first.value is second.value
    assert p.state is PromiseState.FAILED


def test_failed_evaluation_is_cached(env):
    attempts = []

    def boom():
        attempts.append(1)
        raise ValueError("boom")

    env.define("boom", boom)
    p = Promise(call("boom"), env)

    with pytest.raises(ValueError) as first:
        p.force()
    with pytest.raises(ValueError) as second:
        p.force()

    assert first.value is second.value
    assert len(attempts) == 1
    assert p.state is PromiseState.FAILED


def test_unbound_symbol_propagates():
    p = Promise(Symbol("nope"), Environment())
    with pytest.raises(UnboundSymbolError):
        p.force()


def test_forced_constructor():
    p = Promise.forced(5)
    assert p.is_forced
    assert p.force() == 5


def test_custom_evaluator():
    seen = []

    def fake_evaluate(expr, env):
        seen.append(expr)
        return "value"

    p = Promise(sym("x"), Environment(), evaluate_fn=fake_evaluate)
    assert p.force() == "value"
    assert p.force() == "value"
    assert seen == [sym("x")]


def test_concurrent_first_force_evaluates_once(env):
    calls = []

    def slow():
        calls.append(1)
        time.sleep(0.05)
        return object()

    env.define("slow", slow)
    p = Promise(call("slow"), env)
    results = []

    def worker():
        results.append(p.force())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_interrupted_force_can_be_retried():
    attempts = []

    def interrupted_once(expr, env):
        attempts.append(expr)
        if len(attempts) == 1:
            raise KeyboardInterrupt
        return "value"

    p = Promise(sym("x"), Environment(), evaluate_fn=interrupted_once)
    with pytest.raises(KeyboardInterrupt):
        p.force()
    assert p.state is PromiseState.UNFORCED

    assert p.force() == "value"
    assert p.state is PromiseState.FORCED
    assert len(attempts) == 2
