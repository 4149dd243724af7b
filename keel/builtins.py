"""Built-in functions for the keel front end.

Builtins follow the (env, args) calling convention and are marked with
`_keel_builtin` so the evaluator knows to pass the environment along.
Anything else callable (Lambdas, Python functions reached through aliases) is
called with plain positional arguments.
"""
from __future__ import annotations

import operator
from functools import reduce
from typing import Any, Callable

from keel import Value
from keel.errors import ArityError, KeelTypeError
from keel.evaluation.path import get_member
from keel.types.environment import Environment

BuiltinFn = Callable[[Environment, list[Value]], Value]

BUILTINS: dict[str, BuiltinFn] = {}


def builtin(*names: str) -> Callable[[BuiltinFn], BuiltinFn]:
    def register(fn: BuiltinFn) -> BuiltinFn:
        fn._keel_builtin = True  # type: ignore[attr-defined]
        for name in names:
            BUILTINS[name] = fn
        return fn
    return register


def _numeric(name: str, op: Callable[[Any, Any], Any], args: list[Value], unit=None) -> Value:
    if not args:
        if unit is None:
            raise ArityError(f"{name} requires at least 1 argument")
        return unit
    try:
        return reduce(op, args)
    except TypeError:
        raise KeelTypeError(f"All arguments to {name} must be numbers")


# -------------------------------
# Arithmetic
# -------------------------------
@builtin("+")
def add(env: Environment, args: list[Value]) -> Value:
    return _numeric("+", operator.add, args, unit=0)


@builtin("-")
def sub(env: Environment, args: list[Value]) -> Value:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    if len(args) == 1:
        return _numeric("-", operator.sub, [0, args[0]])
    return _numeric("-", operator.sub, args)


@builtin("*")
def mul(env: Environment, args: list[Value]) -> Value:
    return _numeric("*", operator.mul, args, unit=1)


@builtin("/")
def div(env: Environment, args: list[Value]) -> Value:
    if len(args) == 1:
        return _numeric("/", operator.truediv, [1, args[0]])
    return _numeric("/", operator.truediv, args)


# -------------------------------
# Comparison and logic
# -------------------------------
def _chain(name: str, op: Callable[[Any, Any], bool], args: list[Value]) -> bool:
    if not args:
        raise ArityError(f"{name} requires at least 1 argument")
    try:
        return all(op(a, b) for a, b in zip(args, args[1:]))
    except TypeError:
        raise KeelTypeError(f"Cannot compare arguments to {name}: {args!r}")


@builtin("=")
def equals(env: Environment, args: list[Value]) -> bool:
    return _chain("=", operator.eq, args)


@builtin("not=")
def not_equals(env: Environment, args: list[Value]) -> bool:
    return not equals(env, args)


@builtin("<")
def less(env: Environment, args: list[Value]) -> bool:
    return _chain("<", operator.lt, args)


@builtin(">")
def greater(env: Environment, args: list[Value]) -> bool:
    return _chain(">", operator.gt, args)


@builtin("<=")
def less_equal(env: Environment, args: list[Value]) -> bool:
    return _chain("<=", operator.le, args)


@builtin(">=")
def greater_equal(env: Environment, args: list[Value]) -> bool:
    return _chain(">=", operator.ge, args)


@builtin("not")
def not_(env: Environment, args: list[Value]) -> bool:
    if len(args) != 1:
        raise ArityError("not requires exactly 1 argument")
    return args[0] is None or args[0] is False


# -------------------------------
# Data
# -------------------------------
@builtin("list")
def list_(env: Environment, args: list[Value]) -> list:
    return list(args)


@builtin("count", "length")
def count(env: Environment, args: list[Value]) -> int:
    if len(args) != 1:
        raise ArityError("count requires exactly 1 argument")
    return 0 if args[0] is None else len(args[0])


@builtin(".", "get")
def get(env: Environment, args: list[Value]) -> Value:
    """(. tbl k1 k2 ...) walks keys; (get tbl k) is the one-key case."""
    if not args:
        raise ArityError(". requires a table and keys")
    obj, *keys = args
    for k in keys:
        obj = get_member(obj, k)
    return obj


# -------------------------------
# Strings and output
# -------------------------------
def _str(x: Value) -> str:
    if x is None:
        return "nil"
    if x is True or x is False:
        return "true" if x else "false"
    return str(x)


@builtin("str", "..")
def str_(env: Environment, args: list[Value]) -> str:
    return "".join(_str(a) for a in args)


@builtin("print")
def print_(env: Environment, args: list[Value]) -> None:
    print(" ".join(_str(a) for a in args))
    return None
