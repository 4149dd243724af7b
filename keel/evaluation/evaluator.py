"""Core evaluator for the keel front end.

Forms are plain Python values produced by the reader. Lists are calls or
special forms, vectors and tables evaluate element-wise, symbols are looked up
through the environment chain (dotted symbols walk into namespaces, tables and
Python objects), everything else is self-evaluating.
"""

from __future__ import annotations

from keel import Form, Value
from keel.errors import KeelTypeError
from keel.evaluation.path import resolve_path
from keel.evaluation.special_forms import SPECIAL_FORMS
from keel.types.environment import Environment
from keel.types.symbol import Symbol, Vector


def evaluate(expr: Form, env: Environment) -> Value:
    if isinstance(expr, Symbol):
        if expr.is_dotted:
            return resolve_path(env, expr)
        return env.lookup(expr)

    if isinstance(expr, Vector):
        return [evaluate(x, env) for x in expr]

    if isinstance(expr, dict):
        return {evaluate(k, env): evaluate(v, env) for k, v in expr.items()}

    if isinstance(expr, list):
        if not expr:
            raise KeelTypeError("Cannot evaluate an empty call ()")
        head, *tail = expr
        # --- Special forms handling ---
        if isinstance(head, Symbol) and head in SPECIAL_FORMS:
            return SPECIAL_FORMS[head](tail, env, evaluate)
        fn = evaluate(head, env)
        args = [evaluate(arg, env) for arg in tail]
        return apply(fn, args, env)

    # --- Atoms return as-is ---
    return expr


def apply(fn: Value, args: list[Value], env: Environment) -> Value:
    """Apply a builtin, a Lambda or any other Python callable.

    Builtins receive the calling environment and the argument list; everything
    else is called with positional arguments.
    """
    if getattr(fn, "_keel_builtin", False):
        return fn(env, args)
    if callable(fn):
        return fn(*args)
    raise KeelTypeError(f"Cannot apply non-function {fn!r}")


def evaluate_body(forms: list[Form], env: Environment) -> Value:
    """Evaluate forms in order and return the last value (nil for no forms)."""
    result: Value = None
    for form in forms:
        result = evaluate(form, env)
    return result
