from __future__ import annotations

from keel import EvaluatorFn, Form, Value
from keel.entry import enter_namespace
from keel.errors import ArityError, KeelError, KeelTypeError
from keel.types.environment import Environment
from keel.types.symbol import Symbol


def module_form(
    tail: list[Form],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Value:
    """
    (module name)
    (module name {action {alias target ...} ...})
    (module name {action {alias target ...} ...} base-expr)

    The request table is read literally, not evaluated. `base-expr` is only
    evaluated when the namespace does not exist yet.
    """
    if not 1 <= len(tail) <= 3:
        raise ArityError("module requires a name, an optional alias table and an optional base")
    name_expr, *rest = tail
    if isinstance(name_expr, Symbol):
        name = name_expr.id
    elif isinstance(name_expr, str):
        name = name_expr
    else:
        raise KeelTypeError(f"module name must be a symbol, got: {name_expr!r}")
    requests = rest[0] if rest else None
    if requests is not None and not isinstance(requests, dict):
        raise KeelTypeError("module alias table must be a {action {alias target}} table")

    context = env.context
    if context is None or context.registry is None:
        raise KeelError("module used outside of an evaluation pass")
    base = None
    if len(rest) == 2 and name not in context.registry:
        base = evaluate_fn(rest[1], env)
    return enter_namespace(context, context.registry, context.actions, name, requests, base)
