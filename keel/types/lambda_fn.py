"""Function values produced by `fn`, `defn` and `define_function`."""

from __future__ import annotations

from io import StringIO
from typing import Iterable, Optional

from keel import Form, Value
from keel.errors import ArityError
from keel.types.environment import Environment
from keel.types.symbol import Symbol

REST_MARKER = Symbol("&")


class Lambda:
    """A first-class function with formal parameters, body forms, and closure env.

    Lambdas are plain Python callables as well, so code outside the front end
    can call exported functions directly.
    """

    __slots__ = ("formals", "body", "env", "name")

    def __init__(
        self,
        formals: Iterable[Symbol | str],
        body: list[Form],
        env: Optional[Environment] = None,
        name: Optional[str] = None,
    ):
        self.formals: list[Symbol] = [f if isinstance(f, Symbol) else Symbol(f) for f in formals]
        self.body: list[Form] = list(body)
        # Avoid shared default Environment across instances
        self.env: Environment = env if env is not None else Environment()
        self.name = name

    def extend_env(self, args: list[Value]) -> Environment:
        """Bind `args` to the formals in a fresh frame over the closure env.

        `[a b & rest]` collects surplus arguments into `rest`.
        """
        new_env = Environment(outer=self.env)
        formals = self.formals
        if REST_MARKER in formals:
            i = formals.index(REST_MARKER)
            fixed, rest = formals[:i], formals[i + 1:]
            if len(rest) != 1:
                raise ArityError("& must be followed by exactly one parameter")
            if len(args) < len(fixed):
                raise ArityError(f"{self}: expected at least {len(fixed)} arguments, got {len(args)}")
            for f, a in zip(fixed, args):
                new_env.define(f, a)
            new_env.define(rest[0], list(args[len(fixed):]))
            return new_env
        if len(args) != len(formals):
            raise ArityError(f"{self}: expected {len(formals)} arguments, got {len(args)}")
        for f, a in zip(formals, args):
            new_env.define(f, a)
        return new_env

    def __call__(self, *args: Value) -> Value:
        # Lazy import to avoid circular dependency at module load time
        from keel.evaluation.evaluator import evaluate_body
        return evaluate_body(self.body, self.extend_env(list(args)))

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(fn ")
            if self.name:
                buffer.write(self.name + " ")
            buffer.write("[")
            buffer.write(" ".join(str(f) for f in self.formals))
            buffer.write("] ...)")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)
