from keel import EvaluatorFn, Form, Value
from keel.definitions import check_identifier
from keel.errors import ArityError, KeelTypeError
from keel.types.environment import Environment
from keel.types.lambda_fn import Lambda
from keel.types.symbol import Symbol, Vector


def fn_form(
    tail: list[Form],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Value:
    """
    (fn [params] body...)
    (fn name [params] body...)   ; name is visible inside the body
    """
    if not tail:
        raise ArityError("fn requires at least a parameter vector")
    name = None
    if isinstance(tail[0], Symbol):
        name, *tail = tail
    if not tail or not isinstance(tail[0], Vector):
        raise KeelTypeError("fn parameters must be a [vector]")
    params, *body = tail
    if name is None:
        return Lambda(params, body, env)
    closure = env.child()
    fn = Lambda(params, body, closure, name=name.id)
    closure.define(name, fn)
    return fn


def local_form(
    tail: list[Form],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Value:
    """
    (local name value)

    At the top level of a pass the binding is a pass local and is captured with
    the pass; inside a function or `let` it is an ordinary lexical binding.
    """
    if len(tail) != 2:
        raise ArityError("local requires exactly 2 arguments")
    name, val_expr = tail
    if not isinstance(name, Symbol):
        raise KeelTypeError(f"local name must be a symbol, got: {name!r}")
    value = evaluate_fn(val_expr, env)
    if env.outer is None and env.context is not None:
        return env.context.bind(check_identifier(name), value)
    env.define(name, value)
    return value


def let_form(
    tail: list[Form],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Value:
    """(let [a 1 b (+ a 1)] body...) with sequential bindings."""
    if not tail or not isinstance(tail[0], Vector):
        raise KeelTypeError("let requires a [name value ...] binding vector")
    bindings, *body = tail
    if len(bindings) % 2:
        raise ArityError("let binding vector needs an even number of forms")
    scope = env.child()
    for name, val_expr in zip(bindings[::2], bindings[1::2]):
        scope.define(name, evaluate_fn(val_expr, scope))
    result: Value = None
    for form in body:
        result = evaluate_fn(form, scope)
    return result
