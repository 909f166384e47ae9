import pytest

from quasi.builtins import base_env


@pytest.fixture
def env():
    """Return a fresh scope over the builtins for each test."""
    return base_env().extend()


@pytest.fixture
def counter():
    """A builtin-style callable that counts its calls and returns a fresh object each time."""
    calls = []

    def tick(*args):
        calls.append(args)
        return {"call": len(calls)}

    tick.calls = calls
    return tick
