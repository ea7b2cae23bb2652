import pytest

from lispwalk.builtin.env_builtin import register
from lispwalk.interpreter import Interpreter
from lispwalk.types.environment import Environment


@pytest.fixture
def env():
    """A global environment with the builtins registered and no prelude."""
    e = Environment()
    register(e)
    return e


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def bare_interp():
    return Interpreter(prelude=None)


@pytest.fixture
def scripted_input():
    """Build an input() replacement that replays lines, then raises EOFError."""

    def make(lines):
        it = iter(lines)
        prompts = []

        def input_fn(prompt):
            prompts.append(prompt)
            try:
                return next(it)
            except StopIteration:
                raise EOFError

        input_fn.prompts = prompts
        return input_fn

    return make
