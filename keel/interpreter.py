from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from keel import Form, Value
from keel.actions import ActionHandler, ActionTable, AliasRequests
from keel.builtins import BUILTINS
from keel.config import get_default_namespace
from keel.context import PassContext, commit, discard
from keel.entry import enter_namespace
from keel.errors import NamespaceNotFoundError
from keel.evaluation.evaluator import evaluate
from keel.evaluation.path import get_member
from keel.loader import import_python_module, read_source, resolve_namespace
from keel.namespace import Namespace
from keel.reader.parser import read_all
from keel.registry import NamespaceRegistry, check_name
from keel.types.environment import Environment
from keel.types.symbol import Symbol, Vector

logger = logging.getLogger(__name__)

MODULE = Symbol("module")


def is_module_form(form: Form) -> bool:
    return isinstance(form, list) and not isinstance(form, Vector) and bool(form) and form[0] == MODULE


class AutoloadProxy:
    """Stands in for a namespace and requires it on first member access."""

    __slots__ = ("_name", "_load", "_target")

    def __init__(self, name: str, load: ActionHandler):
        self._name = name
        self._load = load
        self._target = None

    def _resolve(self) -> Value:
        if self._target is None:
            self._target = self._load(self._name)
        return self._target

    def __getattr__(self, key: str) -> Value:
        return get_member(self._resolve(), key)

    def __getitem__(self, key: str) -> Value:
        return get_member(self._resolve(), key)

    def __repr__(self) -> str:
        state = "loaded" if self._target is not None else "pending"
        return f"<autoload {self._name} ({state})>"


class Interpreter:
    """
    The live process source units are evaluated against.

    Owns the namespace registry and the alias action table, so namespaces and
    their persisted state live exactly as long as the interpreter. Every call to
    `eval`, `eval_form` or `eval_file` is one evaluation pass.
    """

    def __init__(
        self,
        search_path: Optional[Iterable[Path | str]] = None,
        default_ns: Optional[str] = None,
    ):
        self.registry = NamespaceRegistry()
        self.actions = ActionTable()
        self.builtins = dict(BUILTINS)
        # None means: read KEEL_PATH at lookup time
        self.search_path = [Path(p) for p in search_path] if search_path is not None else None
        self.default_ns = check_name(default_ns or get_default_namespace())
        self._loaded: set[str] = set()

        self.actions.register("require", self.require)
        self.actions.register("include", self.include)
        self.actions.register("import", import_python_module)
        self.actions.register("autoload", self.autoload)

    # --- Passes ---

    @contextmanager
    def evaluation_pass(self, ns: Optional[str] = None, enter: bool = True) -> Iterator[PassContext]:
        """Run one pass: enter `ns`, then commit on success or discard on error.

        With `enter=False` the body must enter a namespace itself before it
        binds anything.
        """
        context = PassContext(self.registry, self.actions)
        try:
            if enter:
                self.enter(context, ns or self.default_ns)
            yield context
        except BaseException:
            discard(context)
            raise
        else:
            commit(context)

    def enter(
        self,
        context: PassContext,
        name: str,
        requests: Optional[AliasRequests] = None,
        base: Value = None,
    ) -> Namespace:
        return enter_namespace(context, self.registry, self.actions, name, requests, base)

    def eval_forms(self, forms: Iterable[Form], ns: Optional[str] = None) -> Value:
        forms = list(forms)
        # A unit that opens with (module ...) enters its namespace itself (and applies
        # its base); `ns` is only the fallback for units without one
        enter = not (forms and is_module_form(forms[0]))
        result: Value = None
        with self.evaluation_pass(ns, enter=enter) as context:
            for form in forms:
                # Fresh root per form so a (module ...) switch applies to what follows
                env = Environment(context=context, builtins=self.builtins)
                result = evaluate(form, env)
        return result

    def eval(self, code: str, ns: Optional[str] = None) -> Value:
        """Evaluate every form in `code` as one pass; return the last value."""
        return self.eval_forms(read_all(code), ns)

    def eval_form(self, form: Form, ns: Optional[str] = None) -> Value:
        return self.eval_forms([form], ns)

    def eval_file(self, path: Path | str, ns: Optional[str] = None) -> Value:
        return self.eval(read_source(Path(path)), ns)

    # --- Built-in alias actions ---

    def find_source(self, name: str) -> Optional[Path]:
        return resolve_namespace(name, self.search_path)

    def require(self, name: str) -> Namespace:
        """Return namespace `name`, evaluating its source only the first time."""
        check_name(name)
        if name in self._loaded:
            return self.registry.ensure(name)
        path = self.find_source(name)
        if path is None:
            ns = self.registry.get(name)
            if ns is None:
                raise NamespaceNotFoundError(f"Cannot find namespace '{name}' on the search path")
            return ns
        # Mark first so a circular require sees the partially loaded namespace
        self._loaded.add(name)
        try:
            self.eval_file(path, ns=name)
        except BaseException:
            self._loaded.discard(name)
            raise
        logger.debug("Loaded %s from %s", name, path)
        return self.registry.ensure(name)

    def include(self, name: str) -> Namespace:
        """Evaluate the source of `name` again, even if it was loaded before."""
        check_name(name)
        path = self.find_source(name)
        if path is None:
            raise NamespaceNotFoundError(f"Cannot find namespace '{name}' on the search path")
        self.eval_file(path, ns=name)
        self._loaded.add(name)
        logger.debug("Included %s from %s", name, path)
        return self.registry.ensure(name)

    def autoload(self, name: str) -> AutoloadProxy:
        check_name(name)
        return AutoloadProxy(name, self.require)

    def register_action(self, name: str, handler: ActionHandler) -> None:
        self.actions.register(name, handler)
