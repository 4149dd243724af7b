import pytest

from keel.actions import ActionTable
from keel.context import PassContext
from keel.interpreter import Interpreter
from keel.registry import NamespaceRegistry

# Most tests drive the core through an Interpreter whose search path is a
# per-test temporary directory; `src` writes namespace source files into it.


@pytest.fixture
def clean_env(monkeypatch):
    for var in ("KEEL_PATH", "KEEL_SOURCE_SUFFIX", "KEEL_DEFAULT_NS",
                "KEEL_REPL_HOST", "KEEL_REPL_PORT", "KEEL_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def src(tmp_path):
    def write(name, code):
        path = tmp_path.joinpath(*name.split(".")).with_suffix(".kl")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(code, encoding="utf-8")
        return path
    return write


@pytest.fixture
def itp(tmp_path, clean_env):
    return Interpreter(search_path=[tmp_path])


@pytest.fixture
def registry():
    return NamespaceRegistry()


@pytest.fixture
def calls():
    """Log of (action, target) pairs seen by the `counted` action."""
    return []


@pytest.fixture
def actions(calls):
    table = ActionTable()

    def counted(target):
        calls.append(("counted", target))
        return f"<{target}>"

    table.register("counted", counted)
    return table


@pytest.fixture
def ctx(registry, actions):
    return PassContext(registry, actions)
