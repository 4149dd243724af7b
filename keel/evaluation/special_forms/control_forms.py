from keel import EvaluatorFn, Form, Value
from keel.errors import ArityError
from keel.types.environment import Environment


def do_form(
    tail: list[Form],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Value:
    result: Value = None
    for e in tail:
        result = evaluate_fn(e, env)
    return result


def if_form(
    tail: list[Form],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> Value:
    """(if cond then else?) with Lua truthiness: only nil and false are false."""
    if not 2 <= len(tail) <= 3:
        raise ArityError("if requires a condition, a then-expression and an optional else")
    cond = evaluate_fn(tail[0], env)
    if cond is not None and cond is not False:
        return evaluate_fn(tail[1], env)
    if len(tail) == 3:
        return evaluate_fn(tail[2], env)
    return None
