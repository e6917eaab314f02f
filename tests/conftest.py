import io

import pytest

from beavieeer.interpreter import Interpreter
from beavieeer.types.environment import Environment
from beavieeer.builtin.env_builtin import register

# Most tests build an Interpreter without the prelude so that results do not
# depend on std.bv; prelude behaviour is covered in test_interpreter.py.
# The autouse fixture keeps the BEAVIEEER_* variables of the host shell from
# leaking into any test.


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch):
    monkeypatch.delenv("BEAVIEEER_PRELUDE_PATH", raising=False)
    monkeypatch.delenv("BEAVIEEER_RECURSION_LIMIT", raising=False)


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def interp(out):
    return Interpreter(prelude=None, out=out)


@pytest.fixture
def run(interp):
    """Evaluate source text and render the result the way the REPL prints it."""

    def _run(source: str) -> str:
        return str(interp.eval(source))

    return _run


@pytest.fixture
def env():
    builtins = Environment()
    register(builtins)
    return Environment.child_of(builtins)
