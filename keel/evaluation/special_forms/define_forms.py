"""(def ...), (defonce ...) and (defn ...) plus their private `-` variants."""

from keel import EvaluatorFn, Form, Value
from keel.definitions import define, define_function, define_once, is_defined
from keel.errors import ArityError, KeelTypeError
from keel.types.environment import Environment
from keel.types.symbol import Symbol, Vector


def _name(expr: Form, form: str) -> Symbol:
    if not isinstance(expr, Symbol):
        raise KeelTypeError(f"{form} name must be a symbol, got: {expr!r}")
    return expr


def _def(tail: list[Form], env: Environment, evaluate_fn: EvaluatorFn, private: bool) -> Value:
    form = "def-" if private else "def"
    if len(tail) != 2:
        raise ArityError(f"{form} requires exactly 2 arguments")
    name, val_expr = tail
    return define(env.context, _name(name, form), evaluate_fn(val_expr, env), private=private)


def _defonce(tail: list[Form], env: Environment, evaluate_fn: EvaluatorFn, private: bool) -> Value:
    form = "defonce-" if private else "defonce"
    if len(tail) != 2:
        raise ArityError(f"{form} requires exactly 2 arguments")
    name, val_expr = tail
    name = _name(name, form)
    if is_defined(env.context, name, private):
        # Already defined: the value expression must not run again
        return define_once(env.context, name, None, private=private)
    return define_once(env.context, name, evaluate_fn(val_expr, env), private=private)


def _defn(tail: list[Form], env: Environment, private: bool) -> Value:
    form = "defn-" if private else "defn"
    if len(tail) < 2:
        raise ArityError(f"{form} requires a name and a parameter vector")
    name, params, *body = tail
    if not isinstance(params, Vector):
        raise KeelTypeError(f"{form} parameters must be a [vector]")
    # Leading docstring
    if len(body) > 1 and isinstance(body[0], str):
        body = body[1:]
    return define_function(env.context, _name(name, form), params, body, env=env, private=private)


def def_form(tail, env, evaluate_fn):
    return _def(tail, env, evaluate_fn, private=False)


def def_private_form(tail, env, evaluate_fn):
    return _def(tail, env, evaluate_fn, private=True)


def defonce_form(tail, env, evaluate_fn):
    return _defonce(tail, env, evaluate_fn, private=False)


def defonce_private_form(tail, env, evaluate_fn):
    return _defonce(tail, env, evaluate_fn, private=True)


def defn_form(tail, env, evaluate_fn):
    return _defn(tail, env, private=False)


def defn_private_form(tail, env, evaluate_fn):
    return _defn(tail, env, private=True)
